# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Value model - the runtime content of a leaf field.

A leaf never holds arbitrary Python objects: its content is always one of
the tagged variants below. Parsers read values through the explicit
``as_*`` coercion functions, each returning ``None`` when the value cannot
be read as the requested type.

Example:
    >>> as_int(StringValue(' 42 '))
    42
    >>> as_int(StringValue('4x'))  # None
    >>> for_kind('int', '12')
    IntValue(value=12)
    >>> for_kind('int', '1-')  # in-flight edit keeps raw text
    StringValue(value='1-')
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Union

from dateutil import parser as dateparser


@dataclass(frozen=True)
class StringValue:
    """Free text, also used for raw text held during an edit."""

    value: str


@dataclass(frozen=True)
class IntValue:
    value: int


@dataclass(frozen=True)
class FloatValue:
    value: float


@dataclass(frozen=True)
class BoolValue:
    value: bool


@dataclass(frozen=True)
class DateTimeValue:
    value: datetime


@dataclass(frozen=True)
class ListValue:
    """An ordered sequence of values (multi-select content)."""

    value: tuple[Value, ...] = ()


@dataclass(frozen=True)
class NullValue:
    """No content."""


Value = Union[
    StringValue, IntValue, FloatValue, BoolValue, DateTimeValue, ListValue, NullValue
]

NULL = NullValue()

_TRUE_WORDS = frozenset({'true', 'yes', 'on', '1'})
_FALSE_WORDS = frozenset({'false', 'no', 'off', '0'})


# ==================== Coercion ====================

def is_blank(value: Value) -> bool:
    """True for null, whitespace-only text and empty lists."""
    if isinstance(value, NullValue):
        return True
    if isinstance(value, StringValue):
        return not value.value.strip()
    if isinstance(value, ListValue):
        return not value.value
    return False


def as_string(value: Value) -> str | None:
    """Read a value as text. Lists have no text form."""
    if isinstance(value, StringValue):
        return value.value
    if isinstance(value, NullValue):
        return ''
    if isinstance(value, BoolValue):
        return 'true' if value.value else 'false'
    if isinstance(value, (IntValue, FloatValue)):
        return str(value.value)
    if isinstance(value, DateTimeValue):
        return value.value.isoformat()
    return None


def as_int(value: Value) -> int | None:
    """Read a value as an integer.

    Floats are accepted only when they carry no fractional part.
    """
    if isinstance(value, IntValue):
        return value.value
    if isinstance(value, FloatValue):
        if math.isfinite(value.value) and value.value.is_integer():
            return int(value.value)
        return None
    if isinstance(value, StringValue):
        try:
            return int(value.value.strip())
        except ValueError:
            return None
    return None


def as_float(value: Value) -> float | None:
    """Read a value as a finite float."""
    if isinstance(value, FloatValue):
        result = value.value
    elif isinstance(value, IntValue):
        result = float(value.value)
    elif isinstance(value, StringValue):
        try:
            result = float(value.value.strip())
        except ValueError:
            return None
    else:
        return None
    return result if math.isfinite(result) else None


def as_bool(value: Value) -> bool | None:
    if isinstance(value, BoolValue):
        return value.value
    if isinstance(value, IntValue) and value.value in (0, 1):
        return bool(value.value)
    if isinstance(value, StringValue):
        word = value.value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None


def as_datetime(value: Value) -> datetime | None:
    """Read a value as a datetime.

    Text goes through ``dateutil``, so the usual human spellings
    ('2025-03-01 10:30', '1 Mar 2025') are understood.
    """
    if isinstance(value, DateTimeValue):
        return value.value
    if isinstance(value, StringValue) and value.value.strip():
        try:
            return dateparser.parse(value.value)
        except (ValueError, OverflowError):
            return None
    return None


def comparable(value: Any, other: Any) -> Any:
    """Return ``value`` ready to be compared with ``other``.

    A naive datetime compared with an aware one is taken as UTC. Anything
    else is returned unchanged.
    """
    if (
        isinstance(value, datetime)
        and isinstance(other, datetime)
        and value.tzinfo is None
        and other.tzinfo is not None
    ):
        return value.replace(tzinfo=timezone.utc)
    return value


def as_list(value: Value) -> tuple[Value, ...] | None:
    if isinstance(value, ListValue):
        return value.value
    if isinstance(value, NullValue):
        return ()
    return None


# ==================== Conversion ====================

def from_python(obj: Any) -> Value:
    """Wrap a plain Python (or JSON-decoded) object into a Value.

    Raises:
        TypeError: If the object has no Value counterpart.
    """
    if isinstance(obj, (StringValue, IntValue, FloatValue, BoolValue,
                        DateTimeValue, ListValue, NullValue)):
        return obj
    if obj is None:
        return NULL
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, int):
        return IntValue(obj)
    if isinstance(obj, float):
        return FloatValue(obj)
    if isinstance(obj, str):
        return StringValue(obj)
    if isinstance(obj, datetime):
        return DateTimeValue(obj)
    if isinstance(obj, (list, tuple)):
        return ListValue(tuple(from_python(item) for item in obj))
    raise TypeError(f"Cannot convert {type(obj).__name__} to a form value")


def to_python(value: Value) -> Any:
    """Unwrap a Value into a plain Python object (lists become lists)."""
    if isinstance(value, NullValue):
        return None
    if isinstance(value, ListValue):
        return [to_python(item) for item in value.value]
    return value.value


def to_json(value: Value) -> Any:
    """Like to_python, with datetimes rendered as ISO 8601 strings."""
    if isinstance(value, DateTimeValue):
        return value.value.isoformat()
    if isinstance(value, ListValue):
        return [to_json(item) for item in value.value]
    return to_python(value)


def for_kind(kind: str, raw: str) -> Value:
    """Tag raw input text for a leaf of the given kind.

    Text that does not coerce yet stays a StringValue: this is the
    in-flight state of an edit, resolved when the user completes the input.

    Args:
        kind: A FieldKind (or its string value).
        raw: The text as typed.

    Returns:
        The value the leaf should hold.
    """
    text = StringValue(raw)
    if kind in ('int', 'float', 'boolean', 'datetime') and not raw.strip():
        return NULL
    if kind == 'int':
        number = as_int(text)
        return text if number is None else IntValue(number)
    if kind == 'float':
        real = as_float(text)
        return text if real is None else FloatValue(real)
    if kind == 'boolean':
        flag = as_bool(text)
        return text if flag is None else BoolValue(flag)
    if kind == 'datetime':
        # strict while typing: dateutil would complete half-typed dates
        try:
            return DateTimeValue(datetime.fromisoformat(raw.strip()))
        except ValueError:
            return text
    return text
