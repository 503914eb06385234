# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Field nodes - the building blocks of a form tree.

A form is a tree of three node types:

- ``Leaf``: a single input (text, number, select, ...) holding a Value.
- ``Group``: an ordered sequence of child fields.
- ``Repeatable``: a template plus a bounded list of instances cloned
  from it (e.g. "add another phone number").

Nodes are immutable. Every change returns a new node, so a tree value can
be kept as a snapshot and compared with the next one.

Example:
    >>> address = group(
    ...     text(label='Street', name='street', identifier='street', required=True),
    ...     text(label='City', name='city', identifier='city'),
    ...     name='address',
    ... )
    >>> phones = repeatable(
    ...     text(label='Phone', name='number'),
    ...     name='phones', min=1, max=3,
    ... )
    >>> len(phones.instances)
    1
    >>> len(phones.add().add().add().instances)  # clamped at max
    3
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field as dataclass_field, replace
from typing import Any, Generic, TypeVar, Union

from .attributes import Attributes, FieldKind, FieldStatus
from .exceptions import InvalidFieldError
from .values import NULL, Value, as_string, for_kind, from_python

logger = logging.getLogger(__name__)

Id = TypeVar('Id')


class _FieldBase(Generic[Id]):
    """Attribute access shared by all node types."""

    attrs: Attributes

    @property
    def identifier(self) -> Id | None:
        return self.attrs.identifier

    @property
    def name(self) -> str | None:
        return self.attrs.name

    @property
    def label(self) -> str | None:
        return self.attrs.label

    @property
    def is_leaf(self) -> bool:
        return isinstance(self, Leaf)

    @property
    def is_group(self) -> bool:
        return isinstance(self, Group)

    @property
    def is_repeatable(self) -> bool:
        return isinstance(self, Repeatable)

    def get_attr(self, attr: str, default: Any = None) -> Any:
        """Get an attribute value, or default when it is unset."""
        return self.attrs.get(attr, default)

    def set_attr(self, **attr: Any) -> Field:
        """Return a copy of this node with the given attributes replaced.

        Example:
            >>> street = text(label='Street')
            >>> street.set_attr(required=True).attrs.required
            True
        """
        return replace(self, attrs=self.attrs.update(**attr))


@dataclass(frozen=True)
class Leaf(_FieldBase[Id]):
    """A single input field.

    Attributes:
        kind: The input kind, deciding how raw text is tagged.
        attrs: Presentation and validation attributes.
        value: Current content.
    """

    kind: FieldKind
    attrs: Attributes = dataclass_field(default_factory=Attributes)
    value: Value = NULL

    def __repr__(self) -> str:
        return f"Leaf({self.kind.value}, {self.name or self.identifier!r}, value={self.value!r})"

    @property
    def text(self) -> str:
        """The value as display text ('' when it has none)."""
        return as_string(self.value) or ''

    def with_value(self, value: Any) -> Leaf:
        """Return a copy holding ``value`` (a Value or plain Python object)."""
        return replace(self, value=from_python(value))

    def with_text(self, raw: str) -> Leaf:
        """Return a copy holding raw input text, tagged for this kind."""
        return replace(self, value=for_kind(self.kind, raw))


@dataclass(frozen=True)
class Group(_FieldBase[Id]):
    """An ordered sequence of child fields."""

    attrs: Attributes = dataclass_field(default_factory=Attributes)
    children: tuple[Field, ...] = ()

    def __repr__(self) -> str:
        return f"Group({self.name or self.identifier!r}, children={len(self.children)})"

    def with_children(self, children: tuple[Field, ...] | list[Field]) -> Group:
        return replace(self, children=tuple(children))


@dataclass(frozen=True)
class Repeatable(_FieldBase[Id]):
    """A bounded list of instances cloned from a template.

    The instance count always stays within ``[min, max]`` (``attrs.min``
    defaults to 0, ``attrs.max`` to unbounded): ``add`` at max and
    ``remove`` at min return the node unchanged.
    """

    attrs: Attributes = dataclass_field(default_factory=Attributes)
    template: Field = None  # type: ignore[assignment]
    instances: tuple[Field, ...] = ()

    def __repr__(self) -> str:
        return (
            f"Repeatable({self.name or self.identifier!r}, "
            f"instances={len(self.instances)})"
        )

    @property
    def min_count(self) -> int:
        return self.attrs.min or 0

    @property
    def max_count(self) -> int | None:
        return self.attrs.max

    @property
    def can_add(self) -> bool:
        return self.max_count is None or len(self.instances) < self.max_count

    @property
    def can_remove(self) -> bool:
        return len(self.instances) > self.min_count

    def new_instance(self) -> Field:
        """Build a fresh, independent copy of the template."""
        return fresh_copy(self.template)

    def with_instances(self, instances: tuple[Field, ...] | list[Field]) -> Repeatable:
        return replace(self, instances=tuple(instances))

    def add(self, instance: Field | None = None) -> Repeatable:
        """Append an instance (a template clone by default).

        Returns the node unchanged when already at max.
        """
        if not self.can_add:
            logger.debug("add on %r ignored: at max (%s)", self, self.max_count)
            return self
        if instance is None:
            instance = self.new_instance()
        return replace(self, instances=self.instances + (instance,))

    def remove(self, index: int = -1) -> Repeatable:
        """Remove the instance at ``index`` (the last one by default).

        Returns the node unchanged when at min or when index is out of range.
        """
        if not self.can_remove:
            logger.debug("remove on %r ignored: at min (%s)", self, self.min_count)
            return self
        count = len(self.instances)
        if index < 0:
            index += count
        if not 0 <= index < count:
            logger.debug("remove on %r ignored: no instance #%s", self, index)
            return self
        return replace(
            self, instances=self.instances[:index] + self.instances[index + 1:]
        )


Field = Union[Leaf, Group, Repeatable]


def fresh_copy(node: Field) -> Field:
    """Deep-copy a subtree with edit state reset.

    Values and attributes are preserved; status and attached errors go back
    to pristine. Repeatables are copied with their current instances.
    """
    attrs = node.attrs
    if attrs.status is not FieldStatus.PRISTINE or attrs.errors:
        attrs = replace(attrs, status=FieldStatus.PRISTINE, errors=())
    if isinstance(node, Leaf):
        return Leaf(node.kind, attrs, node.value)
    if isinstance(node, Group):
        return Group(attrs, tuple(fresh_copy(child) for child in node.children))
    return Repeatable(
        attrs,
        fresh_copy(node.template),
        tuple(fresh_copy(instance) for instance in node.instances),
    )


# ==================== Constructors ====================

def _leaf(kind: FieldKind, value: Any, attr: dict[str, Any]) -> Leaf:
    if value is None:
        initial = NULL
    elif isinstance(value, str):
        initial = for_kind(kind, value)
    else:
        initial = from_python(value)
    return Leaf(kind, Attributes.build(**attr), initial)


def text(value: Any = None, **attr: Any) -> Leaf:
    """A free text input.

    Args:
        value: Initial text.
        **attr: Field attributes (label, name, required, pattern, ...).
    """
    return _leaf(FieldKind.TEXT, value, attr)


def integer(value: Any = None, **attr: Any) -> Leaf:
    """An integer input; ``min``/``max`` bound the value."""
    return _leaf(FieldKind.INT, value, attr)


def floating(value: Any = None, **attr: Any) -> Leaf:
    """A float input; ``min``/``max`` bound the value."""
    return _leaf(FieldKind.FLOAT, value, attr)


def boolean(value: Any = None, **attr: Any) -> Leaf:
    return _leaf(FieldKind.BOOLEAN, value, attr)


def email(value: Any = None, **attr: Any) -> Leaf:
    return _leaf(FieldKind.EMAIL, value, attr)


def datetime_field(value: Any = None, **attr: Any) -> Leaf:
    return _leaf(FieldKind.DATETIME, value, attr)


def select(options: Any = (), value: Any = None, **attr: Any) -> Leaf:
    """A choice among ``options``.

    Args:
        options: Sequence of ``(label, value)`` pairs.
        value: Initially selected value.
    """
    return _leaf(FieldKind.SELECT, value, dict(attr, options=tuple(options)))


def autocomplete(options: Any = (), value: Any = None, **attr: Any) -> Leaf:
    """Free text with suggestions; any text is accepted."""
    return _leaf(FieldKind.AUTOCOMPLETE, value, dict(attr, options=tuple(options)))


def strict_autocomplete(options: Any = (), value: Any = None, **attr: Any) -> Leaf:
    """Text with suggestions; only an option label selects a value."""
    return _leaf(
        FieldKind.STRICT_AUTOCOMPLETE, value, dict(attr, options=tuple(options))
    )


def group(*children: Field, **attr: Any) -> Group:
    """A group of child fields, in the given order."""
    return Group(Attributes.build(**attr), tuple(children))


def repeatable(template: Field, *initial: Any, **attr: Any) -> Repeatable:
    """A bounded, dynamically sized list of template instances.

    Builds ``max(min, len(initial))`` instances. Each of the first
    ``len(initial)`` instances is hydrated from the matching item as in
    ``tree.update_values_from_json``: a dict keyed by field ``name`` for a
    group template, a plain value for a leaf template.

    Every instance, initial or added later, starts as a fresh copy of the
    template: values set on the template are each instance's defaults,
    and edits to one instance never reach the template or its siblings.

    Args:
        template: The subtree cloned for every instance.
        *initial: Values for the initial instances.
        **attr: Field attributes; ``min``/``max`` bound the instance count.

    Raises:
        InvalidFieldError: If there are more initial instances than ``max``,
            or an initial item does not fit the template.

    Example:
        >>> phones = repeatable(
        ...     text(name='number'), '555-1234', name='phones', max=3
        ... )
        >>> phones.instances[0].text
        '555-1234'
    """
    # Import here to avoid circular dependency
    from .tree import update_values_from_json

    attributes = Attributes.build(**attr)
    if attributes.max is not None and len(initial) > attributes.max:
        raise InvalidFieldError(
            f"{len(initial)} initial instances exceed max ({attributes.max})"
        )
    node = Repeatable(attributes, fresh_copy(template), ())
    instances = []
    for data in initial:
        result = update_values_from_json(node.new_instance(), data)
        if result.is_err:
            raise InvalidFieldError(f"Initial instance does not fit template: {result.error}")
        instances.append(result.value)
    while len(instances) < node.min_count:
        instances.append(node.new_instance())
    return node.with_instances(instances)
