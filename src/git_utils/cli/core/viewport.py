"""Inline viewport: a reserved block of terminal rows below the cursor."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from git_utils.cli.core.terminal import Terminal
from git_utils.core.color import Color
from git_utils.errors import TerminalError

logger = logging.getLogger(__name__)


class DrawContext:
    """Drawing operations with rows and columns relative to the viewport origin."""

    def __init__(self, terminal: Terminal, start_row: int, usable_width: int, usable_height: int) -> None:
        self.terminal = terminal
        self.start_row = start_row
        self.usable_width = usable_width
        self.usable_height = usable_height

    def print(self, text: str) -> None:
        self.terminal.write(text)

    def print_at(self, text: str, row: int, column: int) -> None:
        self.move_to(row, column)
        self.terminal.write(text)

    def move_to(self, row: int, column: int) -> None:
        self.terminal.move_to(self.start_row + row, column)

    def set_fg_color(self, color: Color) -> None:
        self.terminal.set_fg_color(color)

    def set_bg_color(self, color: Color) -> None:
        self.terminal.set_bg_color(color)

    def reset_color(self) -> None:
        self.terminal.reset_color()


class TerminalViewport:
    """
    Exclusive owner of raw input mode and a block of rows under the cursor.

    Use through start(); the terminal is restored exactly once when the
    with-block exits, however it exits.
    """

    def __init__(self, terminal: Terminal, desired_rows: int) -> None:
        self.terminal = terminal
        self.desired_rows = desired_rows
        self.terminal_width = 0
        self.terminal_height = 0
        self.start_row: Optional[int] = None
        self._acquired = False
        self._closed = False

    @classmethod
    @contextmanager
    def start(cls, desired_rows: int, terminal: Optional[Terminal] = None) -> Iterator[TerminalViewport]:
        """Reserve up to ``desired_rows`` rows, disable wrap and enter raw mode."""
        viewport = cls(terminal if terminal is not None else Terminal(), desired_rows)
        try:
            viewport._acquire()
            yield viewport
        except BaseException:
            # Keep the original error; teardown is best effort here.
            viewport.close(best_effort=True)
            raise
        viewport.close()

    def _acquire(self) -> None:
        size = self.terminal.size()
        self.terminal_width, self.terminal_height = size.cols, size.rows

        self._acquired = True

        # Scroll enough blank lines into view, then return to the first one.
        num_newlines = max(0, self.usable_height() - 1)
        self.terminal.write("\n" * num_newlines)
        self.terminal.move_up(num_newlines)
        self.terminal.disable_line_wrap()
        self.terminal.flush()

        self.terminal.enable_raw_mode()
        self.start_row, _ = self.terminal.cursor_position()
        logger.debug("Viewport of %d rows at row %d", self.usable_height(), self.start_row)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self, best_effort: bool = False) -> None:
        """Clear the region and restore colours, line wrap and input mode."""
        if self._closed:
            return
        self._closed = True
        if not self._acquired:
            return

        try:
            try:
                if self.start_row is not None:
                    self.terminal.move_to(self.start_row, 0)
                else:
                    self.terminal.write("\r")
                self.terminal.clear_from_cursor_down()
                self.terminal.reset_color()
                self.terminal.enable_line_wrap()
                self.terminal.flush()
            finally:
                self.terminal.disable_raw_mode()
        except TerminalError:
            if not best_effort:
                raise
            logger.debug("Terminal teardown failed", exc_info=True)

    def usable_height(self) -> int:
        """Rows available now, from the live terminal size."""
        size = self.terminal.size()
        self.terminal_width, self.terminal_height = size.cols, size.rows
        return min(self.terminal_height, self.desired_rows)

    def usable_width(self) -> int:
        return self.terminal_width

    def on_resize(self, columns: int, rows: int) -> None:
        """Record new dimensions; the next frame picks them up."""
        self.terminal_width = columns
        self.terminal_height = rows

    def draw(self, render: Callable[[DrawContext], None]) -> None:
        """Paint one frame as a single synchronized update."""
        if self.start_row is None:
            raise TerminalError("Viewport is not started")

        height = self.usable_height()
        ctx = DrawContext(self.terminal, self.start_row, self.usable_width(), height)

        self.terminal.begin_synchronized_update()
        try:
            self.terminal.move_to(self.start_row, 0)
            self.terminal.clear_from_cursor_down()
            render(ctx)
        finally:
            self.terminal.end_synchronized_update()
            self.terminal.flush()
