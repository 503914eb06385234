# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Postal address sub-form."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from ..field import Group, group, strict_autocomplete, text
from ..parser import Parser, field, map4, masked, string

POSTAL_CODE_PATTERN = '{d}{d}{d}{d}{d}'

COUNTRIES = (
    ('Germany', 'DE'),
    ('France', 'FR'),
    ('Italy', 'IT'),
    ('Mexico', 'MX'),
    ('Spain', 'ES'),
    ('United States', 'US'),
)


class AddressId(Enum):
    STREET = 'street'
    CITY = 'city'
    POSTAL_CODE = 'postal_code'
    COUNTRY = 'country'


@dataclass(frozen=True)
class Address:
    street: str
    city: str
    postal_code: str
    country: str


def address_form(
    wrap: Callable[[AddressId], Any] = lambda inner: inner, **attr: Any
) -> Group:
    """Build the address fields.

    Args:
        wrap: Applied to every identifier (see ``tree.map_ids``).
        **attr: Attributes of the enclosing group.
    """
    return group(
        text(label='Street', name='street', identifier=wrap(AddressId.STREET),
             required=True, placeholder='Via Roma 1'),
        text(label='City', name='city', identifier=wrap(AddressId.CITY), required=True),
        text(label='Postal code', name='postal_code',
             identifier=wrap(AddressId.POSTAL_CODE), required=True,
             pattern=POSTAL_CODE_PATTERN),
        strict_autocomplete(COUNTRIES, label='Country', name='country',
                            identifier=wrap(AddressId.COUNTRY), required=True),
        **attr,
    )


def address_parser(
    wrap: Callable[[AddressId], Any] = lambda inner: inner,
) -> Parser[Any, Address]:
    """Parse an address form built with the same ``wrap``."""
    return map4(
        Address,
        field(wrap(AddressId.STREET), string.map(str.strip)),
        field(wrap(AddressId.CITY), string.map(str.strip)),
        field(wrap(AddressId.POSTAL_CODE), masked),
        field(wrap(AddressId.COUNTRY), string),
    )
