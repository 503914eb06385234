# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""FormTree exceptions.

These are raised for programmer mistakes detected while a form is being
authored. User input problems are never raised: they travel as
:mod:`genro_formtree.errors` values inside an ``Err`` result.
"""

from __future__ import annotations


class FormTreeError(Exception):
    """Base exception for FormTree errors."""

    pass


class InvalidPatternError(FormTreeError):
    """Raised when a mask pattern cannot be parsed."""

    pass


class InvalidFieldError(FormTreeError):
    """Raised when a field is built with inconsistent attributes."""

    pass


class UnknownEventError(FormTreeError):
    """Raised when an input event of an unknown type is applied."""

    pass


class EventTargetError(FormTreeError):
    """Raised when an input event targets a node that cannot receive it."""

    pass
