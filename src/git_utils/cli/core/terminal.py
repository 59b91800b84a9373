"""Low-level terminal operations for an inline (non-fullscreen) UI.

Output methods queue escape sequences on the output stream without
flushing; callers batch a frame and call flush() once.
"""

from __future__ import annotations

import os
import re
import select
import sys
import termios
import time
import tty
from dataclasses import dataclass
from typing import Optional, TextIO

from git_utils.core.color import Color
from git_utils.errors import TerminalError

CSI = "\x1b["

# Seconds to wait for the reply to a cursor position request.
CURSOR_REPORT_TIMEOUT = 2.0

_CURSOR_REPORT = re.compile(rb"\x1b\[(\d+);(\d+)R")


@dataclass(frozen=True)
class TerminalSize:
    """Terminal dimensions."""
    rows: int
    cols: int


class Terminal:
    """Terminal I/O bound to an input and an output stream."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self._saved_mode: Optional[list] = None
        self._pending_input = b""

    @property
    def input_fd(self) -> int:
        return self.stdin.fileno()

    def is_interactive(self) -> bool:
        """Whether both streams are attached to a tty."""
        return self.stdin.isatty() and self.stdout.isatty()

    def size(self) -> TerminalSize:
        """Get current terminal dimensions."""
        try:
            size = os.get_terminal_size(self.stdout.fileno())
        except (OSError, ValueError) as exc:
            raise TerminalError(f"Cannot query terminal size: {exc}") from exc
        return TerminalSize(size.lines, size.columns)

    def write(self, text: str) -> None:
        try:
            self.stdout.write(text)
        except OSError as exc:
            raise TerminalError(f"Cannot write to terminal: {exc}") from exc

    def flush(self) -> None:
        try:
            self.stdout.flush()
        except OSError as exc:
            raise TerminalError(f"Cannot write to terminal: {exc}") from exc

    def move_to(self, row: int, col: int) -> None:
        """Move cursor to a position (0-indexed)."""
        self.write(f"{CSI}{row + 1};{col + 1}H")

    def move_up(self, rows: int) -> None:
        if rows > 0:
            self.write(f"{CSI}{rows}A")

    def clear_from_cursor_down(self) -> None:
        self.write(f"{CSI}J")

    def set_fg_color(self, color: Color) -> None:
        self.write(f"{CSI}{color.to_sgr_fg()}m")

    def set_bg_color(self, color: Color) -> None:
        self.write(f"{CSI}{color.to_sgr_bg()}m")

    def reset_color(self) -> None:
        self.write(f"{CSI}0m")

    def disable_line_wrap(self) -> None:
        self.write(f"{CSI}?7l")

    def enable_line_wrap(self) -> None:
        self.write(f"{CSI}?7h")

    def begin_synchronized_update(self) -> None:
        self.write(f"{CSI}?2026h")

    def end_synchronized_update(self) -> None:
        self.write(f"{CSI}?2026l")

    @property
    def is_raw(self) -> bool:
        return self._saved_mode is not None

    def enable_raw_mode(self) -> None:
        """Switch input to raw mode: no echo, no line buffering, no signals."""
        if self._saved_mode is not None:
            return
        fd = self.input_fd
        try:
            saved = termios.tcgetattr(fd)
            tty.setraw(fd)
        except termios.error as exc:
            raise TerminalError(f"Cannot enable raw mode: {exc}") from exc
        self._saved_mode = saved

    def disable_raw_mode(self) -> None:
        if self._saved_mode is None:
            return
        saved, self._saved_mode = self._saved_mode, None
        try:
            termios.tcsetattr(self.input_fd, termios.TCSADRAIN, saved)
        except termios.error as exc:
            raise TerminalError(f"Cannot restore terminal mode: {exc}") from exc

    def cursor_position(self) -> tuple[int, int]:
        """
        Ask the terminal where the cursor is, as a 0-indexed (row, col).

        Requires raw mode. Keystrokes that arrive before the reply are kept
        and handed to the input reader through take_pending_input().
        """
        fd = self.input_fd
        self.write(f"{CSI}6n")
        self.flush()

        data = b""
        deadline = time.monotonic() + CURSOR_REPORT_TIMEOUT
        while True:
            match = _CURSOR_REPORT.search(data)
            if match:
                break
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TerminalError("Terminal did not report the cursor position")
            try:
                ready, _, _ = select.select([fd], [], [], remaining)
                chunk = os.read(fd, 1024) if ready else b""
            except OSError as exc:
                raise TerminalError(f"Cannot read from terminal: {exc}") from exc
            if ready and not chunk:
                raise TerminalError("Terminal input closed")
            data += chunk

        self._pending_input += data[:match.start()] + data[match.end():]
        return int(match.group(1)) - 1, int(match.group(2)) - 1

    def take_pending_input(self) -> bytes:
        pending, self._pending_input = self._pending_input, b""
        return pending
