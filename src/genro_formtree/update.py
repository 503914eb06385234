# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Update/validate protocol - the loop between input events and parsers.

Two moments in the life of a form:

- **Every change**: ``parse_update(parser, event, tree)`` applies the edit,
  re-runs the parser in editing mode and returns the tree as the parser
  left it (e.g. with masked text reformatted) plus the live result. The
  edited leaf's status becomes valid or invalid.
- **Submit**: ``parse_validate(parser, tree)`` runs a full validation,
  attaching each error to the leaf it names, so the rendering layer can
  highlight them. ``parse(parser, tree)`` returns the result only.

Submission is never gated: an invalid form can still be submitted, and the
result says whether it parsed.

Example:
    >>> tree, result = parse_update(card_parser, TextChanged((1,), '4532 1'), tree)
    >>> tree, result = parse_validate(card_parser, tree)
    >>> if result.is_ok:
    ...     charge(result.value)
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from .attributes import FieldStatus
from .errors import Error
from .events import LEAF_EVENTS, InputEvent, apply_event
from .field import Field, Leaf, Repeatable
from .parser import ParseContext, Parser
from .result import Result
from .tree import Path, children_of, get_at, leaves, update_at

logger = logging.getLogger(__name__)

EDITING = ParseContext(submitting=False)
SUBMITTING = ParseContext(submitting=True)


def instance_path(tree: Field, path: Path) -> tuple[int, ...]:
    """The repeatable instance indexes crossed by ``path``, outermost first.

    This is the ``path`` an error raised for the node at ``path`` carries.
    """
    indexes = []
    node = tree
    for index in path:
        if isinstance(node, Repeatable):
            indexes.append(index)
        node = children_of(node)[index]
    return tuple(indexes)


def errors_for(errors: list[Error], leaf: Leaf, at: tuple[int, ...]) -> tuple[Error, ...]:
    """The errors naming ``leaf`` (by identifier and instance path)."""
    if leaf.identifier is None:
        return ()
    return tuple(
        error for error in errors
        if error.id == leaf.identifier and error.path == at
    )


def _errors_of(result: Result) -> list[Error]:
    return list(result.error) if result.is_err else []


def parse_update(
    parser: Parser[Any, Any], event: InputEvent, tree: Field
) -> tuple[Field, Result]:
    """Apply ``event`` and re-run ``parser`` in editing mode.

    The edited leaf gets the errors naming it and is marked valid or
    invalid. Other leaves keep their status.

    Args:
        parser: The form parser.
        event: The input event to apply.
        tree: The current tree.

    Returns:
        ``(new_tree, result)``. ``new_tree`` is the tree as rewritten by the
        parser, not just the raw-edited one.
    """
    edited = apply_event(event, tree)
    new_tree, result = parser.run(edited, EDITING)
    if isinstance(event, LEAF_EVENTS):
        target = get_at(new_tree, event.path)
        if isinstance(target, Leaf) and target.attrs.status is FieldStatus.EDITING:
            errors = errors_for(
                _errors_of(result), target, instance_path(new_tree, event.path)
            )
            status = FieldStatus.INVALID if errors else FieldStatus.VALID
            new_tree = update_at(
                new_tree, event.path,
                lambda leaf: replace(
                    leaf, attrs=leaf.attrs.update(status=status, errors=errors)
                ),
            )
    logger.debug("parse_update %r -> %s", event, 'ok' if result.is_ok else 'err')
    return new_tree, result


def parse_validate(parser: Parser[Any, Any], tree: Field) -> tuple[Field, Result]:
    """Run a full validation and mark every leaf valid or invalid.

    Each leaf gets the errors naming it in its ``errors`` attribute.
    Errors naming no leaf (e.g. form-wide CustomError) are only in the
    result.
    """
    new_tree, result = parser.run(tree, SUBMITTING)
    errors = _errors_of(result)
    for path, leaf in list(leaves(new_tree)):
        leaf_errors = errors_for(errors, leaf, instance_path(new_tree, path))
        status = FieldStatus.INVALID if leaf_errors else FieldStatus.VALID
        if leaf.attrs.status is status and leaf.attrs.errors == leaf_errors:
            continue
        attrs = leaf.attrs.update(status=status, errors=leaf_errors)
        new_tree = update_at(new_tree, path, lambda node, attrs=attrs: replace(node, attrs=attrs))
    return new_tree, result


def parse(parser: Parser[Any, Any], tree: Field) -> Result:
    """Run a full validation and return the result only."""
    return parser.run(tree, SUBMITTING)[1]
