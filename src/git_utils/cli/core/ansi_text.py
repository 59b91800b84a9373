"""Text utilities for fitting candidate rows into terminal columns."""

from __future__ import annotations

import re
import unicodedata

# Pattern to match ANSI escape sequences (including ~ terminator for F-keys, etc.)
_ANSI_ESCAPE = re.compile(r'\x1b\[[0-9;?]*[A-Za-z~]')


def sanitize(s: str) -> str:
    """Drop escape sequences and control characters so text cannot move the cursor."""
    s = _ANSI_ESCAPE.sub('', s)
    return ''.join(ch for ch in s if ch == ' ' or unicodedata.category(ch)[0] != 'C')


def char_width(ch: str) -> int:
    """Columns a character occupies: 2 for wide East Asian glyphs, 0 for combining marks."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in ('W', 'F'):
        return 2
    return 1


def visible_len(s: str) -> int:
    """Get the number of columns a string occupies (excluding ANSI escape codes)."""
    return sum(char_width(ch) for ch in sanitize(s))


def truncate(s: str, max_width: int, ellipsis: str = '…') -> str:
    """
    Sanitize and shorten a string to at most ``max_width`` columns.

    A truncated string ends with ``ellipsis`` when there is room for it.
    """
    s = sanitize(s)
    if max_width <= 0:
        return ""
    if visible_len(s) <= max_width:
        return s

    budget = max_width - visible_len(ellipsis)
    if budget < 0:
        ellipsis, budget = '', max_width

    result: list[str] = []
    used = 0
    for ch in s:
        width = char_width(ch)
        if used + width > budget:
            break
        result.append(ch)
        used += width

    return ''.join(result) + ellipsis
