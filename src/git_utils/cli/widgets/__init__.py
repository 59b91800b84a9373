"""Reusable TUI widgets."""

from git_utils.cli.widgets.base import BaseWidget
from git_utils.cli.widgets.picker import FilterableList, Outcome, pick

__all__ = [
    "BaseWidget",
    "FilterableList",
    "Outcome",
    "pick",
]
