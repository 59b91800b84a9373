"""Candidate set with a fuzzy-ranked, scrollable single selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterator, Optional, TypeVar

from git_utils.core import fuzzy
from git_utils.errors import ListBusyError, NoSelectionError

T = TypeVar("T")


@dataclass
class Candidate(Generic[T]):
    """A display string paired with the value handed back when chosen."""
    display: str
    payload: T


@dataclass(frozen=True)
class RankedEntry:
    """A surviving candidate's score and its position in insertion order."""
    score: int
    original_index: int

    @property
    def sort_key(self) -> tuple[int, int]:
        # Descending score, then ascending insertion index.
        return (-self.score, self.original_index)


@dataclass
class FilterState:
    """The filter query and the edit caret within it."""
    query: str = ""
    caret: int = 0


@dataclass
class SelectionState:
    """Selected position in the ranked sequence and the first visible row."""
    selected_index: int = 0
    scroll_offset: int = 0


@dataclass
class SelectableList(Generic[T]):
    """
    Candidates plus the ranked view derived from the current query.

    The ranked view is recomputed only when it is stale: after an insert,
    or when asked for a query other than the one it was last ranked for.
    """
    candidates: list[Candidate[T]] = field(default_factory=list)
    ranked: list[RankedEntry] = field(default_factory=list)
    running: bool = False

    _stale: bool = field(default=True, init=False, repr=False)
    _ranked_query: Optional[str] = field(default=None, init=False, repr=False)

    def __len__(self) -> int:
        return len(self.candidates)

    def insert(self, display: str, value: T) -> None:
        if self.running:
            raise ListBusyError("Cannot insert into a list while it is being picked from")
        self.candidates.append(Candidate(display, value))
        self._stale = True

    def insert_formatted(self, value: T) -> None:
        """Insert a value displayed as its ``str()``."""
        self.insert(str(value), value)

    @property
    def is_stale(self) -> bool:
        return self._stale

    def needs_recompute(self, query: str) -> bool:
        return self._stale or query != self._ranked_query

    def recompute(self, query: str) -> None:
        """Rank every candidate matching ``query``; unmatched ones are dropped."""
        ranked: list[RankedEntry] = []
        for index, candidate in enumerate(self.candidates):
            score = fuzzy.score(candidate.display, query)
            if score is not None:
                ranked.append(RankedEntry(score, index))
        ranked.sort(key=lambda entry: entry.sort_key)

        self.ranked = ranked
        self._ranked_query = query
        self._stale = False

    def reclamp(self, filter_state: FilterState, selection: SelectionState, visible_rows: int) -> None:
        """Pull caret, selection and scroll offset back inside valid bounds."""
        filter_state.caret = min(filter_state.caret, len(filter_state.query))

        # With nothing ranked there is no valid selection; leave it alone.
        if self.ranked:
            selection.selected_index = min(selection.selected_index, len(self.ranked) - 1)

        # Show as many entries as fit.
        selection.scroll_offset = min(
            selection.scroll_offset,
            max(0, len(self.ranked) - visible_rows),
        )

        # Keep the selection in view.
        if selection.selected_index >= selection.scroll_offset + visible_rows:
            selection.scroll_offset = selection.selected_index - visible_rows + 1
        elif selection.selected_index < selection.scroll_offset:
            selection.scroll_offset = selection.selected_index

    def visible_entries(self, selection: SelectionState, visible_rows: int) -> Iterator[tuple[int, Candidate[T]]]:
        """Yield ``(ranked_index, candidate)`` for the rows in the viewport."""
        start = selection.scroll_offset
        for ranked_index in range(start, min(start + visible_rows, len(self.ranked))):
            yield ranked_index, self.candidates[self.ranked[ranked_index].original_index]

    def finalize(self, selected_index: int) -> Candidate[T]:
        """Remove and return the candidate at ``selected_index`` of the ranking."""
        if not self.ranked:
            raise NoSelectionError("Nothing matches the filter; there is no selection")
        if not 0 <= selected_index < len(self.ranked):
            raise NoSelectionError(f"Selection {selected_index} is outside the {len(self.ranked)} ranked entries")

        original_index = self.ranked[selected_index].original_index
        candidate = self.candidates.pop(original_index)
        self.ranked = []
        self._stale = True
        return candidate
