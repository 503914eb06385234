# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Recipient sub-form: name, email and one to three phone numbers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from ..field import Group, email, group, repeatable, text
from ..parser import Parser, email as email_parser, field, list_of, map3, string


class RecipientId(Enum):
    NAME = 'name'
    EMAIL = 'email'
    PHONES = 'phones'
    PHONE = 'phone'


@dataclass(frozen=True)
class Recipient:
    name: str
    email: str
    phones: list[str]


def recipient_form(
    *phones: str,
    wrap: Callable[[RecipientId], Any] = lambda inner: inner,
    **attr: Any,
) -> Group:
    """Build the recipient fields, with optional initial phone numbers."""
    return group(
        text(label='Name', name='name', identifier=wrap(RecipientId.NAME), required=True),
        email(label='Email', name='email', identifier=wrap(RecipientId.EMAIL),
              required=True),
        repeatable(
            text(label='Phone', name='number', identifier=wrap(RecipientId.PHONE),
                 required=True),
            *phones,
            label='Phones', name='phones', identifier=wrap(RecipientId.PHONES),
            min=1, max=3, add_label='Add phone', remove_label='Remove',
        ),
        **attr,
    )


def recipient_parser(
    wrap: Callable[[RecipientId], Any] = lambda inner: inner,
) -> Parser[Any, Recipient]:
    """Parse a recipient form built with the same ``wrap``."""
    return map3(
        Recipient,
        field(wrap(RecipientId.NAME), string.map(str.strip)),
        field(wrap(RecipientId.EMAIL), email_parser),
        field(wrap(RecipientId.PHONES),
              list_of(field(wrap(RecipientId.PHONE), string.map(str.strip)))),
    )
