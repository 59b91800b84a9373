"""Fuzzy subsequence scoring.

A query matches a text when its characters appear in the text in order.
Matching is smart-case: case-insensitive unless the query contains an
upper-case letter. Among all alignments of the query the best-scoring one
wins, where each matched character earns a base score plus a bonus for
where it lands (start of text, after a path separator, a camelCase hump,
continuing a run) and gaps between matched characters cost a penalty.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1

BONUS_BOUNDARY = 8
BONUS_BOUNDARY_WHITE = 10
BONUS_BOUNDARY_DELIMITER = 9
BONUS_NON_WORD = 8
BONUS_CAMEL = 7
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)
BONUS_FIRST_CHAR_MULTIPLIER = 2

DELIMITERS = "/,:;|"


class CharClass(Enum):
    """Coarse character categories used to place boundary bonuses."""
    WHITE = auto()
    NON_WORD = auto()
    DELIMITER = auto()
    LOWER = auto()
    UPPER = auto()
    LETTER = auto()
    NUMBER = auto()


_WORD_CLASSES = frozenset({CharClass.LOWER, CharClass.UPPER, CharClass.LETTER, CharClass.NUMBER})


def char_class(ch: str) -> CharClass:
    if ch.isspace():
        return CharClass.WHITE
    if ch in DELIMITERS:
        return CharClass.DELIMITER
    if ch.islower():
        return CharClass.LOWER
    if ch.isupper():
        return CharClass.UPPER
    if ch.isdigit():
        return CharClass.NUMBER
    if ch.isalpha():
        return CharClass.LETTER
    return CharClass.NON_WORD


def position_bonus(prev: CharClass, cur: CharClass) -> int:
    """Bonus for matching a character of class ``cur`` that follows ``prev``."""
    if cur in _WORD_CLASSES:
        if prev == CharClass.WHITE:
            return BONUS_BOUNDARY_WHITE
        if prev == CharClass.DELIMITER:
            return BONUS_BOUNDARY_DELIMITER
        if prev == CharClass.NON_WORD:
            return BONUS_BOUNDARY
    if prev == CharClass.LOWER and cur == CharClass.UPPER:
        return BONUS_CAMEL
    if prev != CharClass.NUMBER and cur == CharClass.NUMBER:
        return BONUS_CAMEL
    if cur in (CharClass.NON_WORD, CharClass.DELIMITER):
        return BONUS_NON_WORD
    if cur == CharClass.WHITE:
        return BONUS_BOUNDARY_WHITE
    return 0


def _bonuses(text: str) -> list[int]:
    # The start of the text counts as following whitespace.
    prev = CharClass.WHITE
    bonuses: list[int] = []
    for ch in text:
        cur = char_class(ch)
        bonuses.append(position_bonus(prev, cur))
        prev = cur
    return bonuses


def is_subsequence(needle: str, haystack: str) -> bool:
    pos = 0
    for ch in needle:
        pos = haystack.find(ch, pos)
        if pos < 0:
            return False
        pos += 1
    return True


def score(text: str, query: str) -> Optional[int]:
    """
    Score how well ``query`` fuzzy-matches ``text``.

    Returns None when the query is not a subsequence of the text, otherwise
    a score where higher is better. The empty query matches everything
    with score 0, so ranking by score keeps the original order.
    """
    if not query:
        return 0

    if any(ch.isupper() for ch in query):
        haystack, needle = text, query
    else:
        haystack, needle = text.lower(), query.lower()

    if len(haystack) != len(text) or not is_subsequence(needle, haystack):
        # lower() can change length for a few non-ASCII characters; fall
        # back to a case-sensitive comparison for those.
        haystack, needle = text, query
        if not is_subsequence(needle, haystack):
            return None

    bonuses = _bonuses(text)
    n = len(haystack)

    # previous[j]: best score with the previous query character matched at j.
    previous: list[Optional[int]] = [None] * n
    first = needle[0]
    for j, ch in enumerate(haystack):
        if ch == first:
            previous[j] = SCORE_MATCH + bonuses[j] * BONUS_FIRST_CHAR_MULTIPLIER

    for target in needle[1:]:
        current: list[Optional[int]] = [None] * n
        # Best previous[k] for k <= j - 2, already charged one extension per
        # skipped character beyond the first.
        gap_best: Optional[int] = None
        for j, ch in enumerate(haystack):
            before = previous[j - 1] if j >= 1 else None
            if ch == target:
                best: Optional[int] = None
                if before is not None:
                    best = before + SCORE_MATCH + max(bonuses[j], BONUS_CONSECUTIVE)
                if gap_best is not None:
                    gapped = gap_best + SCORE_MATCH + bonuses[j] + SCORE_GAP_START
                    if best is None or gapped > best:
                        best = gapped
                current[j] = best
            if gap_best is not None:
                gap_best += SCORE_GAP_EXTENSION
            if before is not None and (gap_best is None or before > gap_best):
                gap_best = before
        previous = current

    return max((s for s in previous if s is not None), default=None)
