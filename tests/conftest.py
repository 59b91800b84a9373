"""Shared fixtures: a scripted terminal and a scripted git."""

from __future__ import annotations

import io
import os
from typing import Iterator, Optional

import pytest

from git_utils.cli.core.terminal import Terminal, TerminalSize
from git_utils.errors import TerminalError
from git_utils.git.context import GitContext, GitOutput


class FakeTerminal(Terminal):
    """
    Terminal whose output is captured and whose input is a pipe.

    Escape-sequence methods are the real ones; tty-only calls (size, raw
    mode, cursor position report) are scripted.
    """

    def __init__(self, rows: int = 24, cols: int = 80, cursor: tuple[int, int] = (5, 0)) -> None:
        self.output = io.StringIO()
        super().__init__(stdin=io.StringIO(), stdout=self.output)
        self.rows = rows
        self.cols = cols
        self.cursor = cursor
        self.fail_size = False
        self.fail_cursor = False
        self.fail_write = False
        self.raw_enables = 0
        self.raw_disables = 0
        self._read_fd, self._write_fd = os.pipe()

    @property
    def input_fd(self) -> int:
        return self._read_fd

    @property
    def text(self) -> str:
        return self.output.getvalue()

    def feed(self, data: bytes) -> None:
        """Queue input and close the pipe, so running out of input fails instead of hanging."""
        os.write(self._write_fd, data)
        self.close_input()

    def close_input(self) -> None:
        if self._write_fd is not None:
            os.close(self._write_fd)
            self._write_fd = None

    def close(self) -> None:
        self.close_input()
        os.close(self._read_fd)

    def write(self, text: str) -> None:
        if self.fail_write:
            raise TerminalError("Cannot write to terminal: scripted failure")
        super().write(text)

    def size(self) -> TerminalSize:
        if self.fail_size:
            raise TerminalError("Cannot query terminal size: scripted failure")
        return TerminalSize(self.rows, self.cols)

    def enable_raw_mode(self) -> None:
        if self._saved_mode is None:
            self._saved_mode = []
            self.raw_enables += 1

    def disable_raw_mode(self) -> None:
        if self._saved_mode is not None:
            self._saved_mode = None
            self.raw_disables += 1

    def cursor_position(self) -> tuple[int, int]:
        if self.fail_cursor:
            raise TerminalError("Terminal did not report the cursor position")
        return self.cursor


@pytest.fixture
def terminal() -> Iterator[FakeTerminal]:
    fake = FakeTerminal()
    yield fake
    fake.close()


class ScriptedGit(GitContext):
    """GitContext answering from a table of argument prefixes instead of running git."""

    def __init__(self, responses: Optional[dict[tuple[str, ...], GitOutput]] = None) -> None:
        super().__init__()
        self.responses = responses or {}
        self.calls: list[tuple[str, ...]] = []

    def run_raw(self, args) -> GitOutput:
        args = tuple(str(arg) for arg in args)
        self.calls.append(args)
        for prefix, output in self.responses.items():
            if args[:len(prefix)] == prefix:
                return output
        return GitOutput(0, "", "")


def ok(stdout: str = "") -> GitOutput:
    return GitOutput(0, stdout, "")


def failed(status: int = 1, stderr: str = "") -> GitOutput:
    return GitOutput(status, "", stderr)
