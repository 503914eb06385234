# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Parser combinators - project a field tree into a typed domain value.

A ``Parser`` is a pure function from a field (the root being parsed) to a
pair ``(field, result)``:

- ``result`` is ``Ok(value)`` or ``Err([errors])``.
- ``field`` is the same field, unless ``and_update`` rewrote part of it
  (live masking). This is the only way a parser touches the tree.

Errors from independent fields are accumulated (``and_map``, ``map_n``,
``list_of``) in composition order. Sequencing within one field
(``and_then``) short-circuits.

Example:
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Address:
    ...     street: str
    ...     zip_code: str
    ...
    >>> address = map2(
    ...     Address,
    ...     field('street', string),
    ...     field('zip', formatted_string('{d}{d}{d}{d}{d}')),
    ... )
    >>> address.run(form)
    (Group(...), Ok(value=Address(street='Via Roma 1', zip_code='20100')))
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, TypeVar

from email_validator import EmailNotValidError, validate_email

from .attributes import FieldKind
from .errors import (
    AmbiguousId,
    CustomError,
    Error,
    IdNotFound,
    NotFound,
    PatternMismatch,
    RangeError,
    RequiredMissing,
    TypeMismatch,
    prefix_path,
)
from .field import Field, Group, Leaf, Repeatable
from .mask import Masked, parse_pattern, reformat
from .result import Err, Ok, Result
from .tree import find_with_id, get_at, replace_at
from .values import (
    NULL,
    StringValue,
    Value,
    as_bool,
    as_datetime,
    as_float,
    as_int,
    as_string,
    comparable,
    is_blank,
    to_json,
)

A = TypeVar('A')
B = TypeVar('B')
Id = TypeVar('Id')

_STRICT_KINDS = (FieldKind.SELECT, FieldKind.STRICT_AUTOCOMPLETE)


@dataclass(frozen=True)
class ParseContext:
    """Options of a parser run.

    Attributes:
        submitting: True for a full validation (submit time). False while
            the user is editing, when incomplete masked input is accepted.
    """

    submitting: bool = True


Outcome = tuple[Field, Result]


class Parser(Generic[Id, A]):
    """A composable, pure computation from a field tree to a value.

    Build parsers from the primitives (``string``, ``integer``, ...) and
    combinators (``field``, ``map_n``, ``list_of``, ...) of this module
    rather than instantiating this class directly.
    """

    __slots__ = ('_run',)

    def __init__(self, run: Callable[[Field, ParseContext], Outcome]) -> None:
        self._run = run

    def __repr__(self) -> str:
        return f"Parser({self._run!r})"

    def run(self, node: Field, context: ParseContext | None = None) -> Outcome:
        """Run the parser against ``node``.

        Returns:
            ``(field, result)``: the possibly rewritten field and
            ``Ok(value)`` or ``Err(list_of_errors)``.
        """
        return self._run(node, context or ParseContext())

    def map(self, func: Callable[[A], B]) -> Parser[Id, B]:
        """Transform the parsed value."""
        def run(node: Field, context: ParseContext) -> Outcome:
            node, result = self._run(node, context)
            return node, result.map(func)
        return Parser(run)

    def and_then(self, func: Callable[[A], Parser[Id, B]]) -> Parser[Id, B]:
        """Feed the parsed value into ``func`` to get the next parser.

        The next parser runs on the same field. On failure ``func`` is not
        called and the errors are returned as they are.
        """
        def run(node: Field, context: ParseContext) -> Outcome:
            node, result = self._run(node, context)
            if result.is_err:
                return node, result
            return func(result.value)._run(node, context)
        return Parser(run)

    def and_update(
        self, func: Callable[[Field, A], tuple[Field, B]]
    ) -> Parser[Id, B]:
        """Rewrite the field after a successful parse.

        ``func(field, value)`` returns ``(new_field, new_value)``: the new
        field replaces the parsed one in the tree handed back to the caller,
        and ``new_value`` becomes this parser's result.

        Example:
            >>> upper = string.and_update(
            ...     lambda leaf, text: (leaf.with_text(text.upper()), text.upper())
            ... )
        """
        def run(node: Field, context: ParseContext) -> Outcome:
            node, result = self._run(node, context)
            if result.is_err:
                return node, result
            new_node, new_value = func(node, result.value)
            return new_node, Ok(new_value)
        return Parser(run)

    def and_map(self, other: Parser[Id, Any]) -> Parser[Id, Any]:
        """Apply the function parsed by this parser to the value of ``other``.

        Both parsers always run; their errors are concatenated, this
        parser's first.

        Example:
            >>> succeed(lambda street: lambda city: (street, city)) \\
            ...     .and_map(field('street', string)) \\
            ...     .and_map(field('city', string))
        """
        return map2(lambda func, value: func(value), self, other)

    def ensure(self, predicate: Callable[[A], bool], message: str) -> Parser[Id, A]:
        """Fail with a field-scoped CustomError when ``predicate`` is false."""
        def run(node: Field, context: ParseContext) -> Outcome:
            node, result = self._run(node, context)
            if result.is_ok and not predicate(result.value):
                return node, Err([CustomError(node.identifier, message)])
            return node, result
        return Parser(run)


# ==================== Basic parsers ====================

def succeed(value: A) -> Parser[Any, A]:
    """A parser that always returns ``value`` and reads no field."""
    return Parser(lambda node, context: (node, Ok(value)))


def fail(message: str) -> Parser[Any, Any]:
    """A parser that always fails with a form-wide CustomError."""
    return Parser(lambda node, context: (node, Err([CustomError(None, message)])))


def field(identifier: Id, parser: Parser[Id, A]) -> Parser[Id, A]:
    """Run ``parser`` on the unique node carrying ``identifier``.

    The lookup covers the tree the parser is run against. A missing or
    duplicated identifier yields IdNotFound or AmbiguousId: the parser
    does not fit the tree. Rewrites made by ``parser`` are spliced back
    into the tree.
    """
    def run(node: Field, context: ParseContext) -> Outcome:
        found = find_with_id(node, identifier)
        if found.is_err:
            if isinstance(found.error, NotFound):
                return node, Err([IdNotFound(identifier)])
            return node, Err([AmbiguousId(identifier, found.error.count)])
        path = found.value
        target = get_at(node, path)
        updated, result = parser._run(target, context)
        if updated is not target:
            node = replace_at(node, path, updated)
        return node, result
    return Parser(run)


def map_n(func: Callable[..., B], *parsers: Parser[Id, Any]) -> Parser[Id, B]:
    """Combine independent parsers, collecting every error.

    All parsers run, in order, each one on the tree as rewritten by the
    previous ones. The result is ``Ok(func(*values))`` when all succeed,
    otherwise the concatenation of their errors in the order given.
    """
    def run(node: Field, context: ParseContext) -> Outcome:
        values: list[Any] = []
        errors: list[Error] = []
        for parser in parsers:
            node, result = parser._run(node, context)
            if result.is_ok:
                values.append(result.value)
            else:
                errors.extend(result.error)
        if errors:
            return node, Err(errors)
        return node, Ok(func(*values))
    return Parser(run)


def map2(func: Callable[[Any, Any], B], p1: Parser, p2: Parser) -> Parser[Any, B]:
    return map_n(func, p1, p2)


def map3(func: Callable[..., B], p1: Parser, p2: Parser, p3: Parser) -> Parser[Any, B]:
    return map_n(func, p1, p2, p3)


def map4(
    func: Callable[..., B], p1: Parser, p2: Parser, p3: Parser, p4: Parser
) -> Parser[Any, B]:
    return map_n(func, p1, p2, p3, p4)


def map5(
    func: Callable[..., B], p1: Parser, p2: Parser, p3: Parser, p4: Parser, p5: Parser
) -> Parser[Any, B]:
    return map_n(func, p1, p2, p3, p4, p5)


def and_map(pf: Parser[Id, Callable[[A], B]], pa: Parser[Id, A]) -> Parser[Id, B]:
    """Function form of ``Parser.and_map``."""
    return pf.and_map(pa)


def list_of(parser: Parser[Id, A]) -> Parser[Id, list[A]]:
    """Run ``parser`` on every repeatable instance (or group child).

    Instances are parsed independently and in index order: a failing
    instance does not stop its siblings. The result is the list of values
    when all succeed; otherwise every instance's errors, each with the
    instance index prepended to its ``path``.
    """
    def run(node: Field, context: ParseContext) -> Outcome:
        if isinstance(node, Repeatable):
            items = node.instances
        elif isinstance(node, Group):
            items = node.children
        else:
            return node, Err([TypeMismatch(node.identifier, 'list')])
        values: list[Any] = []
        errors: list[Error] = []
        updated: list[Field] = []
        for index, item in enumerate(items):
            new_item, result = parser._run(item, context)
            updated.append(new_item)
            if result.is_ok:
                values.append(result.value)
            else:
                errors.extend(prefix_path(error, index) for error in result.error)
        if any(new is not old for new, old in zip(updated, items)):
            if isinstance(node, Repeatable):
                node = node.with_instances(updated)
            else:
                node = node.with_children(updated)
        if errors:
            return node, Err(errors)
        return node, Ok(values)
    return Parser(run)


def maybe(parser: Parser[Id, A]) -> Parser[Id, A | None]:
    """Return None for a blank leaf, otherwise run ``parser``."""
    def run(node: Field, context: ParseContext) -> Outcome:
        if isinstance(node, Leaf) and is_blank(_effective_value(node)):
            return node, Ok(None)
        return parser._run(node, context)
    return Parser(run)


# ==================== Primitives ====================

def _effective_value(leaf: Leaf) -> Value:
    """The leaf value, with option labels resolved to option values.

    For select and strict-autocomplete leaves, text that is neither an
    option label nor an option value reads as no value at all.
    """
    value = leaf.value
    if not leaf.attrs.options or not isinstance(value, StringValue):
        return value
    if any(option == value for _, option in leaf.attrs.options):
        return value
    chosen = leaf.attrs.option_for_label(value.value)
    if chosen is not None:
        return chosen
    if leaf.kind in _STRICT_KINDS and not is_blank(value):
        return _NO_OPTION
    return value


_NO_OPTION = StringValue('\x00')


def _primitive(
    expected: str,
    read: Callable[[Leaf, Value], Result],
    blank: Any = None,
) -> Parser[Any, Any]:
    """Build a leaf parser.

    Blank content gives RequiredMissing on a required leaf and ``blank``
    otherwise; anything else goes through ``read(leaf, value)``.
    """
    def run(node: Field, context: ParseContext) -> Outcome:
        if not isinstance(node, Leaf):
            return node, Err([TypeMismatch(node.identifier, expected)])
        value = _effective_value(node)
        if value is _NO_OPTION:
            return node, Err([TypeMismatch(node.identifier, node.kind.value)])
        if is_blank(value):
            if node.attrs.required:
                return node, Err([RequiredMissing(node.identifier)])
            return node, Ok(blank)
        return node, read(node, value)
    return Parser(run)


def _check_range(leaf: Leaf, number: Any) -> Result:
    low, high = leaf.attrs.min, leaf.attrs.max
    if low is not None and comparable(number, low) < comparable(low, number):
        return Err([RangeError(leaf.identifier, low)])
    if high is not None and comparable(number, high) > comparable(high, number):
        return Err([RangeError(leaf.identifier, high)])
    return Ok(number)


def _read_string(leaf: Leaf, value: Value) -> Result:
    text = as_string(value)
    if text is None:
        return Err([TypeMismatch(leaf.identifier, FieldKind.TEXT.value)])
    return Ok(text)


def _read_int(leaf: Leaf, value: Value) -> Result:
    number = as_int(value)
    if number is None:
        return Err([TypeMismatch(leaf.identifier, FieldKind.INT.value)])
    return _check_range(leaf, number)


def _read_float(leaf: Leaf, value: Value) -> Result:
    number = as_float(value)
    if number is None:
        return Err([TypeMismatch(leaf.identifier, FieldKind.FLOAT.value)])
    return _check_range(leaf, number)


def _read_bool(leaf: Leaf, value: Value) -> Result:
    flag = as_bool(value)
    if flag is None:
        return Err([TypeMismatch(leaf.identifier, FieldKind.BOOLEAN.value)])
    return Ok(flag)


def _read_datetime(leaf: Leaf, value: Value) -> Result:
    moment = as_datetime(value)
    if moment is None:
        return Err([TypeMismatch(leaf.identifier, FieldKind.DATETIME.value)])
    return _check_range(leaf, moment)


def _read_email(leaf: Leaf, value: Value) -> Result:
    text = as_string(value)
    if text is None:
        return Err([TypeMismatch(leaf.identifier, FieldKind.EMAIL.value)])
    try:
        address = validate_email(text.strip(), check_deliverability=False)
    except EmailNotValidError:
        return Err([PatternMismatch(leaf.identifier, 'email')])
    return Ok(address.normalized)


string: Parser[Any, str] = _primitive('text', _read_string, blank='')
integer: Parser[Any, int | None] = _primitive('int', _read_int)
floating: Parser[Any, float | None] = _primitive('float', _read_float)
boolean: Parser[Any, bool] = _primitive('boolean', _read_bool, blank=False)
datetime: Parser[Any, Any] = _primitive('datetime', _read_datetime)
email: Parser[Any, str | None] = _primitive('email', _read_email)
value: Parser[Any, Value] = _primitive('value', lambda leaf, v: Ok(v), blank=NULL)


# ==================== JSON ====================

_TYPED_KINDS = (FieldKind.INT, FieldKind.FLOAT, FieldKind.BOOLEAN, FieldKind.DATETIME)


def _json_of(node: Field) -> tuple[Any, list[Error]]:
    if isinstance(node, Leaf):
        value = _effective_value(node)
        if value is _NO_OPTION:
            return None, [TypeMismatch(node.identifier, node.kind.value)]
        if is_blank(value):
            if node.attrs.required:
                return None, [RequiredMissing(node.identifier)]
            return None, []
        if node.kind in _TYPED_KINDS and isinstance(value, StringValue):
            # raw text of an edit that never coerced
            return None, [TypeMismatch(node.identifier, node.kind.value)]
        return to_json(value), []
    if isinstance(node, Repeatable):
        items: list[Any] = []
        errors: list[Error] = []
        for index, instance in enumerate(node.instances):
            data, instance_errors = _json_of(instance)
            items.append(data)
            errors.extend(prefix_path(error, index) for error in instance_errors)
        return items, errors
    result: dict[str, Any] = {}
    errors = []
    for child in node.children:
        data, child_errors = _json_of(child)
        errors.extend(child_errors)
        if child.name is not None:
            result[child.name] = data
        elif isinstance(child, Group):
            result.update(data)
    return result, errors


def _run_json(node: Field, context: ParseContext) -> Outcome:
    data, errors = _json_of(node)
    if errors:
        return node, Err(errors)
    return node, Ok(data)


# Serializes the values of the whole tree, keyed by name. Blank required
# leaves give RequiredMissing and typed leaves still holding raw text give
# TypeMismatch.
json: Parser[Any, Any] = Parser(_run_json)


# ==================== Masked input ====================

def formatted_string(pattern: str) -> Parser[Any, str]:
    """Parse masked text, keeping the field formatted as the user types.

    The leaf's raw text is reformatted on the pattern and its cursor
    (``selection_start``/``selection_end``) moved so it stays after the
    same significant character; the rewritten leaf is handed back with the
    tree. The parsed value is the formatted text.

    While editing (``ParseContext.submitting`` false) partial input is
    accepted; at submit time an incomplete input fails with
    PatternMismatch.

    Raises:
        InvalidPatternError: If ``pattern`` is malformed (at build time).

    Example:
        >>> card_number = field('number', formatted_string(CARD_NUMBER_PATTERN))
    """
    parse_pattern(pattern)

    def rewrite(leaf: Leaf, raw: str) -> tuple[Leaf, Masked]:
        masked = reformat(raw, leaf.attrs.selection_start, pattern)
        if not masked.text and is_blank(leaf.value):
            return leaf, masked
        attrs = leaf.attrs.update(
            selection_start=masked.cursor, selection_end=masked.cursor
        )
        return replace(leaf, value=StringValue(masked.text), attrs=attrs), masked

    def check(masked: Masked) -> Parser[Any, str]:
        def run(node: Field, context: ParseContext) -> Outcome:
            if masked.complete or not context.submitting:
                return node, Ok(masked.text)
            if not masked.significant and not node.attrs.required:
                return node, Ok('')
            return node, Err([PatternMismatch(node.identifier, pattern)])
        return Parser(run)

    return string.and_update(rewrite).and_then(check)


def _run_masked(node: Field, context: ParseContext) -> Outcome:
    pattern = node.attrs.pattern if isinstance(node, Leaf) else None
    if pattern is None:
        return string._run(node, context)
    return formatted_string(pattern)._run(node, context)


# formatted_string on the leaf's own ``pattern`` attribute (plain string
# when the leaf has none)
masked: Parser[Any, str] = Parser(_run_masked)
