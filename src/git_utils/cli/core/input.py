"""Keyboard and resize input as a blocking stream of events."""

from __future__ import annotations

import codecs
import logging
import os
import re
import select
import signal
import time
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Union

from git_utils.cli.core.terminal import Terminal
from git_utils.errors import TerminalError

logger = logging.getLogger(__name__)


class Key(Enum):
    """Named key constants."""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESCAPE = auto()
    TAB = auto()
    BACKSPACE = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    DELETE = auto()
    INSERT = auto()


@dataclass(frozen=True)
class KeyEvent:
    """Represents a key press."""
    key: Optional[Key] = None  # Named key if recognized
    char: Optional[str] = None  # Character for printable and Ctrl+letter keys
    raw: str = ""  # Raw input that produced the event
    ctrl: bool = False

    @property
    def is_char(self) -> bool:
        """Check if this is a character key."""
        return self.char is not None and self.key is None


@dataclass(frozen=True)
class ResizeEvent:
    """The terminal changed size."""
    cols: int
    rows: int


Event = Union[KeyEvent, ResizeEvent]

# CSI modifier parameter is 1 + bitmask; bit 4 is Ctrl.
_CTRL_MODIFIER_BIT = 4

_CSI_WITH_PARAMS = re.compile(r"\[(\d+)(?:;(\d+))?([~A-Za-z])")


class InputReader:
    """
    Blocking reader of key presses and terminal resizes.

    Uses os.read() to bypass Python's I/O buffering and to handle escape
    sequences that arrive split across reads. Resizes are noticed through
    SIGWINCH while watch_resize() is active.
    """

    # Escape sequence mappings (without the \x1b prefix)
    SEQUENCES: dict[str, Key] = {
        # Arrow keys (CSI)
        '[A': Key.UP,
        '[B': Key.DOWN,
        '[C': Key.RIGHT,
        '[D': Key.LEFT,
        # Arrow keys (SS3 - application mode)
        'OA': Key.UP,
        'OB': Key.DOWN,
        'OC': Key.RIGHT,
        'OD': Key.LEFT,
        'OH': Key.HOME,
        'OF': Key.END,
        # Navigation
        '[H': Key.HOME,
        '[F': Key.END,
        '[1~': Key.HOME,
        '[7~': Key.HOME,
        '[4~': Key.END,
        '[8~': Key.END,
        '[5~': Key.PAGE_UP,
        '[6~': Key.PAGE_DOWN,
        '[2~': Key.INSERT,
        '[3~': Key.DELETE,
    }

    SIMPLE_KEYS: dict[str, KeyEvent] = {
        '\r': KeyEvent(key=Key.ENTER, raw='\r'),
        '\n': KeyEvent(key=Key.ENTER, raw='\n'),
        '\t': KeyEvent(key=Key.TAB, raw='\t'),
        '\x7f': KeyEvent(key=Key.BACKSPACE, raw='\x7f'),
        # Most terminals send ^H for Ctrl+Backspace.
        '\x08': KeyEvent(key=Key.BACKSPACE, raw='\x08', ctrl=True),
    }

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal
        self._fd = terminal.input_fd
        self._decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
        self._buffer = self._decoder.decode(terminal.take_pending_input())
        self._wakeup_r: Optional[int] = None
        self._wakeup_w: Optional[int] = None

    @contextmanager
    def watch_resize(self) -> Iterator[None]:
        """Deliver ResizeEvents while active."""
        if not hasattr(signal, "SIGWINCH"):
            yield
            return

        read_fd, write_fd = os.pipe()
        os.set_blocking(write_fd, False)

        def on_winch(signum: int, frame: object) -> None:
            try:
                os.write(write_fd, b'\0')
            except BlockingIOError:
                pass  # a wakeup is already queued

        try:
            previous = signal.signal(signal.SIGWINCH, on_winch)
        except ValueError:
            # Signal handlers can only be set from the main thread.
            logger.debug("Not watching for resizes outside the main thread")
            os.close(read_fd)
            os.close(write_fd)
            yield
            return

        self._wakeup_r, self._wakeup_w = read_fd, write_fd
        try:
            yield
        finally:
            signal.signal(signal.SIGWINCH, previous)
            self._wakeup_r = self._wakeup_w = None
            os.close(read_fd)
            os.close(write_fd)

    def notify_resize(self) -> None:
        """Queue a ResizeEvent, as the SIGWINCH handler does."""
        if self._wakeup_w is not None:
            os.write(self._wakeup_w, b'\0')

    def read_event(self) -> Event:
        """Block until a key press or resize arrives; ignore anything else."""
        while True:
            event = self.read()
            if event is not None:
                return event

    def read(self, timeout: Optional[float] = None) -> Optional[Event]:
        """
        Read a single event.

        Blocks indefinitely when timeout is None. Returns None when nothing
        arrived within the timeout or the input was not a recognised event.
        """
        # Process any buffered input first
        if self._buffer:
            return self._process_buffer()

        sources = [self._fd]
        if self._wakeup_r is not None:
            sources.append(self._wakeup_r)

        try:
            ready, _, _ = select.select(sources, [], [], timeout)
        except OSError as exc:
            raise TerminalError(f"Cannot wait for terminal input: {exc}") from exc

        if self._wakeup_r is not None and self._wakeup_r in ready:
            os.read(self._wakeup_r, 1024)
            size = self.terminal.size()
            return ResizeEvent(cols=size.cols, rows=size.rows)

        if self._fd in ready:
            self._read_available()
            if self._buffer:
                return self._process_buffer()

        return None

    def _read_chunk(self) -> bool:
        """Append available input to the buffer; False at end of input."""
        try:
            data = os.read(self._fd, 1024)
        except BlockingIOError:
            return True
        except OSError as exc:
            raise TerminalError(f"Cannot read from terminal: {exc}") from exc
        if not data:
            return False
        self._buffer += self._decoder.decode(data)
        return True

    def _read_available(self) -> None:
        """Read currently available input into the buffer."""
        if not self._read_chunk():
            raise TerminalError("Terminal input closed")

        # If buffer is just escape, wait for potential sequence
        if self._buffer == '\x1b':
            self._wait_for_escape_sequence()

    def _has_input(self, timeout: float) -> bool:
        try:
            ready, _, _ = select.select([self._fd], [], [], timeout)
        except OSError as exc:
            raise TerminalError(f"Cannot wait for terminal input: {exc}") from exc
        return bool(ready)

    def _wait_for_escape_sequence(self) -> None:
        """Give a lone escape a moment to grow into a sequence."""
        deadline = time.monotonic() + 0.05

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0 or not self._has_input(remaining):
                return
            if not self._read_chunk():
                return
            rest = self._buffer[1:]
            if rest and rest != 'O' and (rest[-1].isalpha() or rest[-1] == '~'):
                return

    def _process_buffer(self) -> Optional[KeyEvent]:
        """Consume buffered input and return the next key event, if any."""
        first = self._buffer[0]

        if first in self.SIMPLE_KEYS:
            self._buffer = self._buffer[1:]
            return self.SIMPLE_KEYS[first]

        if first == '\x1b':
            return self._parse_escape_sequence()

        self._buffer = self._buffer[1:]

        # Ctrl+letter arrives as 0x01-0x1a
        if '\x01' <= first <= '\x1a':
            return KeyEvent(char=chr(ord('a') + ord(first) - 1), raw=first, ctrl=True)

        if first.isprintable():
            return KeyEvent(char=first, raw=first)

        # Unknown control character - skip it
        return None

    def _parse_escape_sequence(self) -> Optional[KeyEvent]:
        """Parse an escape sequence at the start of the buffer."""
        rest = self._buffer[1:]

        if not rest or rest[0] == '\x1b':
            self._buffer = self._buffer[1:]
            return KeyEvent(key=Key.ESCAPE, raw='\x1b')

        if rest[0] == 'O':
            # SS3: exactly one character follows
            end_idx = min(2, len(rest))
        elif rest[0] == '[':
            end_idx = len(rest)
            for i, ch in enumerate(rest[1:], start=1):
                if ch == '\x1b':
                    end_idx = i
                    break
                if ch.isalpha() or ch == '~':
                    end_idx = i + 1
                    break
        else:
            # Alt+key; not something the picker handles
            end_idx = 1

        seq = rest[:end_idx]
        self._buffer = self._buffer[1 + end_idx:]
        raw = '\x1b' + seq

        if seq in self.SEQUENCES:
            return KeyEvent(key=self.SEQUENCES[seq], raw=raw)

        match = _CSI_WITH_PARAMS.fullmatch(seq)
        if match:
            number, modifier, final = match.groups()
            base = f'[{number}~' if final == '~' else f'[{final}'
            key = self.SEQUENCES.get(base)
            if key is not None:
                ctrl = bool(modifier) and bool((int(modifier) - 1) & _CTRL_MODIFIER_BIT)
                return KeyEvent(key=key, raw=raw, ctrl=ctrl)

        # Unknown sequence (focus reports, mouse, function keys)
        logger.debug("Ignoring escape sequence %r", raw)
        return None
