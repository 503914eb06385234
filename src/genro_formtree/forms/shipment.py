# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Shipment form, composed from the address, card and recipient sub-forms.

Each sub-form is authored with its own identifier enum. Composing them
rewraps their identifiers into a sum type with ``tree.map_ids``, so every
identifier stays unique in the shipment tree and every error names the
sub-form it comes from::

    >>> form = shipment_form()
    >>> result = parse(shipment_parser(), form)
    >>> result.error[0]
    RequiredMissing(id=AddressField(inner=<AddressId.STREET: 'street'>), path=())
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..field import Group, group, integer, text
from ..parser import Parser, field, integer as integer_parser, map5, maybe, string
from ..tree import map_ids
from .address import Address, AddressId, address_form, address_parser
from .card import Card, CardId, card_form, card_parser
from .recipient import Recipient, RecipientId, recipient_form, recipient_parser


@dataclass(frozen=True)
class AddressField:
    inner: AddressId


@dataclass(frozen=True)
class CardField:
    inner: CardId


@dataclass(frozen=True)
class RecipientField:
    inner: RecipientId


class ShipmentId(Enum):
    PACKAGES = 'packages'
    NOTES = 'notes'


ShipmentFieldId = Union[AddressField, CardField, RecipientField, ShipmentId]


@dataclass(frozen=True)
class Shipment:
    address: Address
    card: Card
    recipient: Recipient
    packages: int
    notes: str | None


def shipment_form() -> Group:
    """Build the shipment form tree."""
    return group(
        map_ids(address_form(name='address', label='Shipping address'), AddressField),
        map_ids(card_form(name='card', label='Payment'), CardField),
        map_ids(recipient_form(name='recipient', label='Recipient'), RecipientField),
        integer(1, label='Packages', name='packages', identifier=ShipmentId.PACKAGES,
                required=True, min=1, max=10),
        text(label='Notes', name='notes', identifier=ShipmentId.NOTES),
        name='shipment',
    )


def shipment_parser() -> Parser[ShipmentFieldId, Shipment]:
    """Parse the shipment form."""
    return map5(
        Shipment,
        address_parser(AddressField),
        card_parser(CardField),
        recipient_parser(RecipientField),
        field(ShipmentId.PACKAGES, integer_parser),
        field(ShipmentId.NOTES, maybe(string)),
    )
