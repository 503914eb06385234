# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Ready-made sub-forms and their parsers."""

from .address import Address, AddressId, address_form, address_parser
from .card import Card, CardId, card_form, card_parser
from .recipient import Recipient, RecipientId, recipient_form, recipient_parser
from .shipment import (
    AddressField,
    CardField,
    RecipientField,
    Shipment,
    ShipmentId,
    shipment_form,
    shipment_parser,
)

__all__ = [
    'Address',
    'AddressId',
    'address_form',
    'address_parser',
    'Card',
    'CardId',
    'card_form',
    'card_parser',
    'Recipient',
    'RecipientId',
    'recipient_form',
    'recipient_parser',
    'AddressField',
    'CardField',
    'RecipientField',
    'Shipment',
    'ShipmentId',
    'shipment_form',
    'shipment_parser',
]
