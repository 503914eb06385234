# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Input events and their raw application to a tree.

Events are what the rendering layer reports: text typed, a selection
moved, an option picked, an instance added or removed. Each one is
addressed by the index path of its target node (see ``tree.get_at``).

``apply_event`` performs the raw edit only. Parsing, reformatting and
status resolution are done by ``update.parse_update``.

Results of asynchronous collaborators (e.g. a geocoding lookup filling
suggestions) arrive as ordinary events such as ``OptionsSet``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Union

from .attributes import FieldStatus
from .exceptions import EventTargetError, UnknownEventError
from .field import Field, Leaf, Repeatable
from .tree import Path, update_at
from .values import BoolValue, NULL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextChanged:
    """The text of a leaf was edited; the cursor is where the edit left it."""

    path: Path
    text: str
    selection_start: int | None = None
    selection_end: int | None = None


@dataclass(frozen=True)
class SelectionChanged:
    path: Path
    start: int
    end: int


@dataclass(frozen=True)
class OptionSelected:
    """An option was picked; ``index`` None clears the selection."""

    path: Path
    index: int | None


@dataclass(frozen=True)
class Checked:
    path: Path
    checked: bool


@dataclass(frozen=True)
class InstanceAdded:
    path: Path


@dataclass(frozen=True)
class InstanceRemoved:
    path: Path
    index: int = -1


@dataclass(frozen=True)
class OptionsSet:
    """Replace the options of a leaf, e.g. with fetched suggestions."""

    path: Path
    options: tuple[tuple[str, Any], ...]


InputEvent = Union[
    TextChanged, SelectionChanged, OptionSelected, Checked,
    InstanceAdded, InstanceRemoved, OptionsSet,
]

LEAF_EVENTS = (TextChanged, SelectionChanged, OptionSelected, Checked, OptionsSet)


def _editing(leaf: Leaf, **attr: Any) -> Leaf:
    return replace(leaf, attrs=leaf.attrs.update(status=FieldStatus.EDITING, **attr))


def _text_changed(leaf: Leaf, event: TextChanged) -> Leaf:
    return _editing(
        leaf.with_text(event.text),
        selection_start=event.selection_start,
        selection_end=event.selection_end,
    )


def _selection_changed(leaf: Leaf, event: SelectionChanged) -> Leaf:
    return _editing(leaf, selection_start=event.start, selection_end=event.end)


def _option_selected(leaf: Leaf, event: OptionSelected) -> Leaf:
    if event.index is None:
        return _editing(replace(leaf, value=NULL))
    chosen = leaf.attrs.option_value(event.index)
    if chosen is None:
        raise EventTargetError(
            f"{leaf!r} has no option #{event.index} "
            f"({len(leaf.attrs.options)} options)"
        )
    return _editing(replace(leaf, value=chosen))


def _checked(leaf: Leaf, event: Checked) -> Leaf:
    return _editing(replace(leaf, value=BoolValue(event.checked)))


def _options_set(leaf: Leaf, event: OptionsSet) -> Leaf:
    # suggestions arriving is not an edit: status is left alone
    return leaf.set_attr(options=tuple(event.options))


_LEAF_HANDLERS: dict[type, Callable[[Leaf, Any], Leaf]] = {
    TextChanged: _text_changed,
    SelectionChanged: _selection_changed,
    OptionSelected: _option_selected,
    Checked: _checked,
    OptionsSet: _options_set,
}


def apply_event(event: InputEvent, tree: Field) -> Field:
    """Apply the raw edit described by ``event`` and return the new tree.

    Edits to a disabled leaf are ignored.

    Raises:
        UnknownEventError: If ``event`` is not one of the event types.
        EventTargetError: If the target node cannot receive the event.
        KeyError: If the event path does not exist.
    """
    handler = _LEAF_HANDLERS.get(type(event))
    if handler is not None:
        def transform(node: Field) -> Field:
            if not isinstance(node, Leaf):
                raise EventTargetError(
                    f"{type(event).__name__} needs a leaf, got {node!r}"
                )
            if node.attrs.disabled and not isinstance(event, OptionsSet):
                logger.debug("%s on disabled %r ignored", type(event).__name__, node)
                return node
            return handler(node, event)
        logger.debug("applying %r", event)
        return update_at(tree, event.path, transform)

    if isinstance(event, (InstanceAdded, InstanceRemoved)):
        def transform_repeatable(node: Field) -> Field:
            if not isinstance(node, Repeatable):
                raise EventTargetError(
                    f"{type(event).__name__} needs a repeatable, got {node!r}"
                )
            if node.attrs.disabled:
                return node
            if isinstance(event, InstanceAdded):
                return node.add()
            return node.remove(event.index)
        logger.debug("applying %r", event)
        return update_at(tree, event.path, transform_repeatable)

    raise UnknownEventError(f"Unknown input event: {event!r}")
