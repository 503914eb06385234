# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Masking engine - keeps masked text formatted while the user types.

A mask pattern mixes placeholders and literal characters::

    '{d}{d}{d}{d} {d}{d}{d}{d} {d}{d}{d}{d} {d}{d}{d}{d}'   card number
    '{d}{d}/{d}{d}'                                         expiration

Placeholders:
    - ``{d}``: a digit
    - ``{a}``: an ASCII letter
    - ``{w}``: an ASCII letter or digit

Any other character is a literal and is inserted by the formatter; the user
never has to type it.

Reformatting runs in three steps:

1. Extract the *significant* characters (those accepted by the
   placeholders, in order) and drop everything else, truncating to the
   number of placeholders. A character matching the literal expected at
   its position is skipped as that literal.
2. Rebuild the display text, emitting each literal only when a placeholder
   after it is filled, so there is never a dangling separator.
3. Move the cursor right after the same number of significant characters
   it followed in the raw text, so it sticks to the same logical character
   whatever separators were added or removed.

Example:
    >>> reformat('4532123456789', 13, CARD_NUMBER_PATTERN)
    Masked(text='4532 1234 5678 9', cursor=16, significant='4532123456789', complete=False)
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

from .exceptions import InvalidPatternError

PLACEHOLDERS: dict[str, Callable[[str], bool]] = {
    'd': lambda char: char in string.digits,
    'a': lambda char: char in string.ascii_letters,
    'w': lambda char: char in string.ascii_letters or char in string.digits,
}

CARD_NUMBER_PATTERN = '{d}{d}{d}{d} {d}{d}{d}{d} {d}{d}{d}{d} {d}{d}{d}{d}'
EXPIRATION_PATTERN = '{d}{d}/{d}{d}'
CVC_PATTERN = '{d}{d}{d}'

CARD_NUMBER_LENGTH = 16
CARD_GROUP_WIDTH = 4

_TOKEN = re.compile(r'\{(\w*)\}?')


@dataclass(frozen=True)
class Placeholder:
    kind: str

    def accepts(self, char: str) -> bool:
        return PLACEHOLDERS[self.kind](char)


@dataclass(frozen=True)
class Literal:
    char: str


Token = Placeholder | Literal


@dataclass(frozen=True)
class Masked:
    """Outcome of reformatting masked input.

    Attributes:
        text: The formatted display text.
        cursor: The cursor offset in ``text``.
        significant: The significant characters, without literals.
        complete: True if every placeholder is filled.
    """

    text: str
    cursor: int
    significant: str
    complete: bool


@lru_cache(maxsize=128)
def parse_pattern(pattern: str) -> tuple[Token, ...]:
    """Split a mask pattern into placeholder and literal tokens.

    Raises:
        InvalidPatternError: On an unknown or unterminated placeholder, or
            a pattern with no placeholder at all.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(pattern):
        if pattern[pos] != '{':
            tokens.append(Literal(pattern[pos]))
            pos += 1
            continue
        match = _TOKEN.match(pattern, pos)
        if not match.group(0).endswith('}'):
            raise InvalidPatternError(f"Unterminated placeholder at {pos} in {pattern!r}")
        kind = match.group(1)
        if kind not in PLACEHOLDERS:
            raise InvalidPatternError(
                f"Unknown placeholder '{{{kind}}}' in {pattern!r}. "
                f"Valid placeholders: {', '.join(sorted(PLACEHOLDERS))}"
            )
        tokens.append(Placeholder(kind))
        pos = match.end()
    if not any(isinstance(token, Placeholder) for token in tokens):
        raise InvalidPatternError(f"Pattern {pattern!r} has no placeholder")
    return tuple(tokens)


def placeholder_count(pattern: str) -> int:
    """The number of significant characters a complete input has."""
    return sum(isinstance(token, Placeholder) for token in parse_pattern(pattern))


def _extract(text: str, pattern: str, cursor: int | None = None) -> tuple[str, int]:
    """Return the significant characters and how many precede ``cursor``.

    The text is read against the pattern position by position. A character
    equal to the literal expected at that position is the literal itself,
    never input, so formatted text reads back to the same characters even
    when a literal is one a placeholder would accept (``+1 ({d}{d}{d})``).
    """
    tokens = parse_pattern(pattern)
    total = placeholder_count(pattern)
    kept: list[str] = []
    before_cursor = 0
    position = 0
    for pos, char in enumerate(text):
        if len(kept) == total:
            break
        token = tokens[position]
        if isinstance(token, Literal) and char == token.char:
            position += 1
            continue
        while isinstance(tokens[position], Literal):
            position += 1
        if tokens[position].accepts(char):
            kept.append(char)
            position += 1
            if cursor is not None and pos < cursor:
                before_cursor += 1
    return ''.join(kept), before_cursor


def clean(text: str, pattern: str) -> str:
    """Step 1: keep the significant characters of ``text``, in order."""
    return _extract(text, pattern)[0]


def _layout(significant: str, pattern: str) -> tuple[str, list[int]]:
    """Format significant chars, also returning the offset after each one."""
    out: list[str] = []
    pending: list[str] = []
    offsets: list[int] = []
    filled = 0
    for token in parse_pattern(pattern):
        if isinstance(token, Literal):
            pending.append(token.char)
            continue
        if filled == len(significant):
            break
        out.extend(pending)
        pending.clear()
        out.append(significant[filled])
        filled += 1
        offsets.append(len(out))
    return ''.join(out), offsets


def format_significant(significant: str, pattern: str) -> str:
    """Step 2: lay significant characters out on the pattern.

    Example:
        >>> format_significant('453212345678', CARD_NUMBER_PATTERN)
        '4532 1234 5678'
    """
    return _layout(significant, pattern)[0]


def reformat(text: str, cursor: int | None, pattern: str) -> Masked:
    """Reformat raw masked input and reposition the cursor (steps 1-3).

    Args:
        text: The raw text, as edited by the user.
        cursor: The cursor offset in ``text``; None means the end.
        pattern: The mask pattern.

    Returns:
        A Masked result. The number of significant characters before the
        new cursor equals the number before ``cursor`` in ``text`` (capped
        to what the pattern can hold).
    """
    if cursor is None or cursor > len(text):
        cursor = len(text)
    cursor = max(cursor, 0)
    significant, before_cursor = _extract(text, pattern, cursor)
    formatted, offsets = _layout(significant, pattern)
    new_cursor = offsets[before_cursor - 1] if before_cursor else 0
    return Masked(
        text=formatted,
        cursor=new_cursor,
        significant=significant,
        complete=len(significant) == placeholder_count(pattern),
    )


def matches(text: str, pattern: str) -> bool:
    """Step 4: True if ``text`` fills every placeholder of the pattern."""
    return len(clean(text, pattern)) == placeholder_count(pattern)


# ==================== Card helpers ====================

def clean_card_number(text: str) -> str:
    """The digits of a card number, at most 16."""
    return ''.join(char for char in text if char in string.digits)[:CARD_NUMBER_LENGTH]


def format_card_number(text: str) -> str:
    """Group card number digits by four, separated by spaces.

    Separators land at fixed multiples of the group width, so the result
    does not depend on how the input was spaced.

    Example:
        >>> format_card_number('4532-1234-5678')
        '4532 1234 5678'
    """
    digits = clean_card_number(text)
    return ''.join(
        (' ' + digit) if index and index % CARD_GROUP_WIDTH == 0 else digit
        for index, digit in enumerate(digits)
    )


def format_expiration(text: str) -> str:
    """Format an expiration date as MM/YY.

    Example:
        >>> format_expiration('0927')
        '09/27'
    """
    return format_significant(clean(text, EXPIRATION_PATTERN), EXPIRATION_PATTERN)
