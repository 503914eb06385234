# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Field attributes, leaf kinds and field status."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any

from .exceptions import InvalidFieldError
from .values import Value, from_python


class FieldKind(str, Enum):
    """The input kind of a leaf field."""

    TEXT = 'text'
    INT = 'int'
    FLOAT = 'float'
    BOOLEAN = 'boolean'
    SELECT = 'select'
    EMAIL = 'email'
    DATETIME = 'datetime'
    AUTOCOMPLETE = 'autocomplete'
    STRICT_AUTOCOMPLETE = 'strict-autocomplete'


class FieldStatus(str, Enum):
    """Per-field edit state: pristine -> editing -> valid | invalid."""

    PRISTINE = 'pristine'
    EDITING = 'editing'
    VALID = 'valid'
    INVALID = 'invalid'


@dataclass(frozen=True)
class Attributes:
    """Presentation and validation attributes of a field.

    All attributes are optional. ``identifier`` correlates the field with
    parsers and must be unique within the tree being parsed; ``name`` is the
    stable key used by the JSON projection.

    ``min``/``max`` bound the value of numeric leaves and the instance count
    of repeatables. ``options`` is a tuple of ``(label, Value)`` pairs; plain
    Python values are wrapped on construction.

    ``status`` and ``errors`` are maintained by the update/validate
    protocol and are not meant to be set by form authors.
    """

    label: str | None = None
    name: str | None = None
    placeholder: str | None = None
    hint: str | None = None
    required: bool = False
    disabled: bool = False
    pattern: str | None = None
    min: Any = None
    max: Any = None
    options: tuple[tuple[str, Value], ...] = ()
    identifier: Any = None
    selection_start: int | None = None
    selection_end: int | None = None
    add_label: str | None = None
    remove_label: str | None = None
    status: FieldStatus = FieldStatus.PRISTINE
    errors: tuple = ()

    def __post_init__(self) -> None:
        if self.min is not None and self.max is not None and self.min > self.max:
            raise InvalidFieldError(
                f"min ({self.min!r}) is greater than max ({self.max!r})"
            )
        options = tuple(
            (str(label), from_python(value)) for label, value in self.options
        )
        object.__setattr__(self, 'options', options)

    @classmethod
    def build(cls, **attr: Any) -> Attributes:
        """Create attributes from keyword arguments.

        Raises:
            InvalidFieldError: If an attribute name is unknown.
        """
        unknown = set(attr) - _ATTRIBUTE_NAMES
        if unknown:
            raise InvalidFieldError(
                f"Unknown field attribute(s): {', '.join(sorted(unknown))}"
            )
        return cls(**attr)

    def get(self, attr: str, default: Any = None) -> Any:
        """Get an attribute value, or default when it is unset (None)."""
        value = getattr(self, attr, None)
        return default if value is None else value

    def update(self, **attr: Any) -> Attributes:
        """Return a copy with the given attributes replaced."""
        unknown = set(attr) - _ATTRIBUTE_NAMES
        if unknown:
            raise InvalidFieldError(
                f"Unknown field attribute(s): {', '.join(sorted(unknown))}"
            )
        return replace(self, **attr)

    def option_value(self, index: int) -> Value | None:
        """The value of the option at ``index``, or None if out of range."""
        if 0 <= index < len(self.options):
            return self.options[index][1]
        return None

    def option_for_label(self, label: str) -> Value | None:
        """The value of the first option whose label is ``label``."""
        for option_label, value in self.options:
            if option_label == label:
                return value
        return None


_ATTRIBUTE_NAMES = frozenset(f.name for f in fields(Attributes))
