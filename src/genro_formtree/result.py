# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Ok/Err result values.

Parsing and tree lookups return results instead of raising, so that every
failure is a predictable part of the data flow.

Example:
    >>> Ok(2).map(lambda n: n * 10)
    Ok(value=20)
    >>> Err(['boom']).map(lambda n: n * 10)
    Err(error=['boom'])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar('T')
E = TypeVar('E')


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful result."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def map(self, func: Callable[[T], Any]) -> Ok:
        return Ok(func(self.value))

    def map_err(self, func: Callable[[Any], Any]) -> Ok:
        return self

    def and_then(self, func: Callable[[T], Result]) -> Result:
        return func(self.value)

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed result, carrying the error (or list of errors)."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def map(self, func: Callable[[Any], Any]) -> Err:
        return self

    def map_err(self, func: Callable[[E], Any]) -> Err:
        return Err(func(self.error))

    def and_then(self, func: Callable[[Any], Result]) -> Err:
        return self

    def unwrap(self) -> Any:
        """Raises ValueError: an Err has no value."""
        raise ValueError(f"Called unwrap() on {self!r}")

    def unwrap_or(self, default: Any) -> Any:
        return default


Result = Union[Ok, Err]
