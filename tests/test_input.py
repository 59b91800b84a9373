"""Tests for key decoding and resize events."""

import io
import os
import signal

import pytest

from git_utils.cli.core.input import InputReader, Key, KeyEvent, ResizeEvent
from git_utils.cli.core.terminal import Terminal
from git_utils.errors import TerminalError


def read_all(terminal, data: bytes, count: int) -> list:
    terminal.feed(data)
    reader = InputReader(terminal)
    return [reader.read_event() for _ in range(count)]


class TestKeys:

    def test_arrows(self, terminal) -> None:
        events = read_all(terminal, b"\x1b[A\x1b[B\x1b[C\x1b[D", 4)
        assert [e.key for e in events] == [Key.UP, Key.DOWN, Key.RIGHT, Key.LEFT]

    def test_application_mode_arrows(self, terminal) -> None:
        events = read_all(terminal, b"\x1bOA\x1bOB", 2)
        assert [e.key for e in events] == [Key.UP, Key.DOWN]

    def test_navigation_keys(self, terminal) -> None:
        events = read_all(terminal, b"\x1b[H\x1b[F\x1b[5~\x1b[6~\x1b[3~", 5)
        assert [e.key for e in events] == [Key.HOME, Key.END, Key.PAGE_UP, Key.PAGE_DOWN, Key.DELETE]
        assert not any(e.ctrl for e in events)

    def test_ctrl_page_keys(self, terminal) -> None:
        up, down = read_all(terminal, b"\x1b[5;5~\x1b[6;5~", 2)
        assert (up.key, up.ctrl) == (Key.PAGE_UP, True)
        assert (down.key, down.ctrl) == (Key.PAGE_DOWN, True)

    def test_shift_modifier_is_not_ctrl(self, terminal) -> None:
        (event,) = read_all(terminal, b"\x1b[1;2A", 1)
        assert (event.key, event.ctrl) == (Key.UP, False)

    def test_enter_and_backspace(self, terminal) -> None:
        enter, backspace, ctrl_backspace = read_all(terminal, b"\r\x7f\x08", 3)
        assert enter.key == Key.ENTER
        assert (backspace.key, backspace.ctrl) == (Key.BACKSPACE, False)
        assert (ctrl_backspace.key, ctrl_backspace.ctrl) == (Key.BACKSPACE, True)

    def test_ctrl_letter(self, terminal) -> None:
        (event,) = read_all(terminal, b"\x03", 1)
        assert event == KeyEvent(char="c", raw="\x03", ctrl=True)

    def test_lone_escape(self, terminal) -> None:
        (event,) = read_all(terminal, b"\x1b", 1)
        assert event.key == Key.ESCAPE

    def test_printable_characters(self, terminal) -> None:
        events = read_all(terminal, "a/é".encode("utf-8"), 3)
        assert [e.char for e in events] == ["a", "/", "é"]
        assert all(e.is_char for e in events)

    def test_unknown_sequences_are_skipped(self, terminal) -> None:
        # Focus-in report, then a key.
        (event,) = read_all(terminal, b"\x1b[Ix", 1)
        assert event.char == "x"

    def test_unknown_control_characters_are_skipped(self, terminal) -> None:
        (event,) = read_all(terminal, b"\x1cq", 1)
        assert event.char == "q"

    def test_pending_terminal_input_comes_first(self, terminal) -> None:
        terminal._pending_input = b"z"
        first, second = read_all(terminal, b"y", 2)
        assert (first.char, second.char) == ("z", "y")

    def test_closed_input_is_an_error(self, terminal) -> None:
        terminal.close_input()
        reader = InputReader(terminal)
        with pytest.raises(TerminalError):
            reader.read_event()


class TestResize:

    def test_resize_event_carries_live_size(self, terminal) -> None:
        reader = InputReader(terminal)
        terminal.rows, terminal.cols = 30, 100
        with reader.watch_resize():
            reader.notify_resize()
            event = reader.read_event()
        assert event == ResizeEvent(cols=100, rows=30)

    def test_resize_handler_is_restored(self, terminal) -> None:
        if not hasattr(signal, "SIGWINCH"):
            pytest.skip("no SIGWINCH on this platform")
        before = signal.getsignal(signal.SIGWINCH)
        with InputReader(terminal).watch_resize():
            assert signal.getsignal(signal.SIGWINCH) is not before
        assert signal.getsignal(signal.SIGWINCH) == before


class TestCursorPosition:

    def test_reports_position_and_keeps_earlier_keystrokes(self) -> None:
        read_fd, write_fd = os.pipe()
        with os.fdopen(read_fd, "rb", buffering=0) as stdin:
            os.write(write_fd, b"ab\x1b[12;40Rc")
            os.close(write_fd)
            out = io.StringIO()
            terminal = Terminal(stdin=stdin, stdout=out)

            assert terminal.cursor_position() == (11, 39)
            assert out.getvalue() == "\x1b[6n"
            assert terminal.take_pending_input() == b"abc"
            assert terminal.take_pending_input() == b""
