# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-FormTree - Typed form trees with parser combinators and live masking.

A form is an immutable tree of fields. Parsers project it into domain
values while collecting per-field errors, and the update/validate protocol
threads every input event through the parser, so masked inputs stay
formatted and the cursor stays where the user expects it.

Example:
    >>> from genro_formtree import group, text, field, string, parse
    >>> form = group(text(name='name', identifier='name', required=True))
    >>> parse(field('name', string), form)
    Err(error=[RequiredMissing(id='name', path=())])
"""

__version__ = "0.1.0"

from .attributes import Attributes, FieldKind, FieldStatus
from .errors import (
    Ambiguous,
    AmbiguousId,
    CustomError,
    Error,
    IdNotFound,
    NotFound,
    PatternMismatch,
    RangeError,
    RequiredMissing,
    StructureMismatch,
    TypeMismatch,
)
from .events import (
    Checked,
    InputEvent,
    InstanceAdded,
    InstanceRemoved,
    OptionSelected,
    OptionsSet,
    SelectionChanged,
    TextChanged,
    apply_event,
)
from .exceptions import (
    EventTargetError,
    FormTreeError,
    InvalidFieldError,
    InvalidPatternError,
    UnknownEventError,
)
from .field import (
    Field,
    Group,
    Leaf,
    Repeatable,
    autocomplete,
    boolean,
    datetime_field,
    email,
    floating,
    group,
    integer,
    repeatable,
    select,
    strict_autocomplete,
    text,
)
from .parser import (
    ParseContext,
    Parser,
    and_map,
    fail,
    field,
    formatted_string,
    list_of,
    map2,
    map3,
    map4,
    map5,
    map_n,
    masked,
    maybe,
    string,
    succeed,
)
from .result import Err, Ok, Result
from .tree import (
    add_instance,
    find_paths,
    get_at,
    get_with_id,
    map_ids,
    remove_instance,
    to_json,
    update_at,
    update_values_from_json,
    update_with_id,
    walk,
)
from .update import parse, parse_update, parse_validate

__all__ = [
    # Field tree
    "Attributes",
    "FieldKind",
    "FieldStatus",
    "Field",
    "Leaf",
    "Group",
    "Repeatable",
    "text",
    "integer",
    "floating",
    "boolean",
    "email",
    "datetime_field",
    "select",
    "autocomplete",
    "strict_autocomplete",
    "group",
    "repeatable",
    # Tree operations
    "walk",
    "get_at",
    "update_at",
    "find_paths",
    "get_with_id",
    "update_with_id",
    "map_ids",
    "add_instance",
    "remove_instance",
    "to_json",
    "update_values_from_json",
    # Parsers
    "Parser",
    "ParseContext",
    "field",
    "string",
    "masked",
    "succeed",
    "fail",
    "and_map",
    "map2",
    "map3",
    "map4",
    "map5",
    "map_n",
    "list_of",
    "maybe",
    "formatted_string",
    # Protocol
    "InputEvent",
    "TextChanged",
    "SelectionChanged",
    "OptionSelected",
    "Checked",
    "InstanceAdded",
    "InstanceRemoved",
    "OptionsSet",
    "apply_event",
    "parse_update",
    "parse_validate",
    "parse",
    # Results and errors
    "Ok",
    "Err",
    "Result",
    "Error",
    "RequiredMissing",
    "TypeMismatch",
    "PatternMismatch",
    "RangeError",
    "CustomError",
    "IdNotFound",
    "AmbiguousId",
    "NotFound",
    "Ambiguous",
    "StructureMismatch",
    # Exceptions
    "FormTreeError",
    "InvalidFieldError",
    "InvalidPatternError",
    "UnknownEventError",
    "EventTargetError",
]
