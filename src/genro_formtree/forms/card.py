# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Payment card sub-form with masked number, expiration and CVC.

The number and expiration fields keep their formatting while the user
types (see ``mask``); the parsed Card carries the bare digits.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from ..field import Group, group, text
from ..mask import (
    CARD_NUMBER_PATTERN,
    CVC_PATTERN,
    EXPIRATION_PATTERN,
    clean_card_number,
)
from ..parser import Parser, field, map4, masked, string


class CardId(Enum):
    HOLDER = 'holder'
    NUMBER = 'number'
    EXPIRATION = 'expiration'
    CVC = 'cvc'


@dataclass(frozen=True)
class Card:
    holder: str
    number: str
    expiration: str
    cvc: str


def _valid_month(expiration: str) -> bool:
    # partial input ('1', '') is checked once complete
    if len(expiration) < 2:
        return True
    return 1 <= int(expiration[:2]) <= 12


def card_form(
    wrap: Callable[[CardId], Any] = lambda inner: inner, **attr: Any
) -> Group:
    """Build the card fields."""
    return group(
        text(label='Card holder', name='holder', identifier=wrap(CardId.HOLDER),
             required=True),
        text(label='Card number', name='number', identifier=wrap(CardId.NUMBER),
             required=True, pattern=CARD_NUMBER_PATTERN,
             placeholder='0000 0000 0000 0000'),
        text(label='Expiration', name='expiration',
             identifier=wrap(CardId.EXPIRATION), required=True,
             pattern=EXPIRATION_PATTERN, placeholder='MM/YY'),
        text(label='CVC', name='cvc', identifier=wrap(CardId.CVC), required=True,
             pattern=CVC_PATTERN),
        **attr,
    )


def card_parser(
    wrap: Callable[[CardId], Any] = lambda inner: inner,
) -> Parser[Any, Card]:
    """Parse a card form built with the same ``wrap``."""
    return map4(
        Card,
        field(wrap(CardId.HOLDER), string.map(str.strip)),
        field(wrap(CardId.NUMBER), masked.map(clean_card_number)),
        field(wrap(CardId.EXPIRATION), masked.ensure(_valid_month, 'Invalid month')),
        field(wrap(CardId.CVC), masked),
    )
