# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Validation errors produced by parsers.

Errors are plain values. They are collected in lists inside an ``Err``
result and compared by value, so tests and callers can match them directly::

    >>> parse(string, tree)
    Err(error=[RequiredMissing(id='street', path=())])

Every error names the identifier of the field it concerns (or ``None`` for
form-wide messages) and a ``path``: the instance indexes of the repeatables
it was found in, outermost first. ``path`` is empty for fields outside any
repeatable.

Lookup failures are also values here. They signal a parser written against
the wrong tree, not bad user input:

- ``NotFound`` / ``Ambiguous`` are returned by ``tree.update_with_id``.
- ``IdNotFound`` / ``AmbiguousId`` are collected by the ``field`` parser.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Union


@dataclass(frozen=True)
class RequiredMissing:
    id: Any
    path: tuple[int, ...] = ()


@dataclass(frozen=True)
class TypeMismatch:
    """The field content cannot be read as ``expected`` (a FieldKind name)."""

    id: Any
    expected: str
    path: tuple[int, ...] = ()


@dataclass(frozen=True)
class PatternMismatch:
    id: Any
    pattern: str
    path: tuple[int, ...] = ()


@dataclass(frozen=True)
class RangeError:
    """The value crossed ``bound`` (the field's min or max)."""

    id: Any
    bound: Any
    path: tuple[int, ...] = ()


@dataclass(frozen=True)
class CustomError:
    id: Any
    message: str
    path: tuple[int, ...] = ()


@dataclass(frozen=True)
class IdNotFound:
    id: Any
    path: tuple[int, ...] = ()


@dataclass(frozen=True)
class AmbiguousId:
    id: Any
    count: int
    path: tuple[int, ...] = ()


Error = Union[
    RequiredMissing, TypeMismatch, PatternMismatch, RangeError, CustomError,
    IdNotFound, AmbiguousId,
]


def prefix_path(error: Error, index: int) -> Error:
    """Return the error with ``index`` prepended to its path."""
    return replace(error, path=(index,) + error.path)


# ==================== Lookup failures ====================

@dataclass(frozen=True)
class NotFound:
    id: Any


@dataclass(frozen=True)
class Ambiguous:
    id: Any
    count: int


@dataclass(frozen=True)
class StructureMismatch:
    """JSON data does not fit the tree shape at ``path``."""

    path: tuple[str | int, ...]
    expected: str
    got: str
