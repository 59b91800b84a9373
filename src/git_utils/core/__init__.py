"""Terminal-independent picker model: fuzzy scoring, ranking and selection."""

from git_utils.core.color import Color, ColorMode
from git_utils.core.fuzzy import score
from git_utils.core.selectable import (
    Candidate,
    FilterState,
    RankedEntry,
    SelectableList,
    SelectionState,
)

__all__ = [
    "Color",
    "ColorMode",
    "score",
    "Candidate",
    "FilterState",
    "RankedEntry",
    "SelectableList",
    "SelectionState",
]
