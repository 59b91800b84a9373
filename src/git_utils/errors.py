"""Exception hierarchy for git-utils."""

from __future__ import annotations


class GitUtilsError(Exception):
    """Base class for every error git-utils reports to the user."""


class TerminalError(GitUtilsError):
    """A terminal control call failed; the picker cannot continue."""


class Cancelled(GitUtilsError):
    """The user aborted the picker with Escape or Ctrl-C."""

    def __init__(self, message: str = "Cancelled") -> None:
        super().__init__(message)


class NoSelectionError(GitUtilsError):
    """finalize() was called while nothing matches the query."""


class EmptyListError(GitUtilsError):
    """A picker was run without any candidates."""


class ListBusyError(GitUtilsError):
    """The candidate set was modified while a picker is running on it."""


class GitError(GitUtilsError):
    """git exited unsuccessfully."""

    def __init__(self, stderr: str, status: int | None = None) -> None:
        super().__init__(stderr or f"git exited with status {status}")
        self.stderr = stderr
        self.status = status
