"""
git-utils: interactive helpers for git

An inline fuzzy picker for the terminal, and commands built on it.

Quick Start:
    >>> from git_utils import FilterableList
    >>> picker = FilterableList("branch: ")
    >>> for name in ["main", "feature/login", "fix/typo"]:
    ...     picker.insert_formatted(name)
    >>> choice = picker.run()  # raises git_utils.Cancelled on Esc/Ctrl+C

Command line:
    git-utils switch [--remote]     pick a branch and switch to it
    git-utils install [--user|--system|--local]
                                    add `git iswitch` as an alias
"""

__version__ = "0.1.0"

from git_utils.core.selectable import Candidate, SelectableList
from git_utils.cli.widgets.picker import FilterableList, pick
from git_utils.errors import (
    Cancelled,
    EmptyListError,
    GitError,
    GitUtilsError,
    NoSelectionError,
    TerminalError,
)

__all__ = [
    "__version__",
    "Candidate",
    "SelectableList",
    "FilterableList",
    "pick",
    "Cancelled",
    "EmptyListError",
    "GitError",
    "GitUtilsError",
    "NoSelectionError",
    "TerminalError",
]
