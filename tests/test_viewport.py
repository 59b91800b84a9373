"""Tests for the inline viewport's acquisition, drawing and teardown."""

import pytest

from git_utils.cli.core.viewport import DrawContext, TerminalViewport
from git_utils.core.color import Color
from git_utils.errors import TerminalError

RESTORE = "\x1b[6;1H\x1b[J\x1b[0m\x1b[?7h"


class TestStart:

    def test_reserves_rows_and_enters_raw_mode(self, terminal) -> None:
        with TerminalViewport.start(4, terminal) as viewport:
            assert terminal.text == "\n\n\n\x1b[3A\x1b[?7l"
            assert terminal.is_raw
            assert viewport.start_row == 5

    def test_reservation_limited_by_terminal_height(self, terminal) -> None:
        terminal.rows = 3
        with TerminalViewport.start(50, terminal) as viewport:
            assert viewport.usable_height() == 3
            assert terminal.text.startswith("\n\n\x1b[2A")

    def test_single_row_needs_no_newlines(self, terminal) -> None:
        with TerminalViewport.start(1, terminal):
            assert terminal.text == "\x1b[?7l"


class TestTeardown:

    def test_restores_terminal_on_normal_exit(self, terminal) -> None:
        with TerminalViewport.start(4, terminal):
            pass
        assert terminal.text.endswith(RESTORE)
        assert not terminal.is_raw
        assert terminal.raw_disables == 1

    def test_restores_terminal_when_body_raises(self, terminal) -> None:
        with pytest.raises(RuntimeError):
            with TerminalViewport.start(4, terminal):
                raise RuntimeError("boom")
        assert terminal.text.endswith(RESTORE)
        assert terminal.raw_disables == 1

    def test_restores_exactly_once(self, terminal) -> None:
        with TerminalViewport.start(4, terminal) as viewport:
            viewport.close()
            assert viewport.closed
        assert terminal.text.count("\x1b[?7h") == 1
        assert terminal.raw_disables == 1

    def test_failed_cursor_query_still_restores(self, terminal) -> None:
        terminal.fail_cursor = True
        with pytest.raises(TerminalError):
            with TerminalViewport.start(4, terminal):
                pytest.fail("body must not run")
        assert terminal.text.endswith("\r\x1b[J\x1b[0m\x1b[?7h")
        assert terminal.raw_enables == terminal.raw_disables == 1

    def test_failed_size_query_touches_nothing(self, terminal) -> None:
        terminal.fail_size = True
        with pytest.raises(TerminalError):
            with TerminalViewport.start(4, terminal):
                pass
        assert terminal.text == ""
        assert terminal.raw_enables == 0

    def test_original_error_survives_failing_teardown(self, terminal) -> None:
        with pytest.raises(RuntimeError):
            with TerminalViewport.start(4, terminal):
                terminal.fail_write = True
                raise RuntimeError("boom")
        assert terminal.raw_disables == 1

    def test_failing_teardown_is_reported_after_leaving_raw_mode(self, terminal) -> None:
        with pytest.raises(TerminalError):
            with TerminalViewport.start(4, terminal):
                terminal.fail_write = True
        assert not terminal.is_raw


class TestDrawing:

    def test_frame_is_synchronized_and_cleared(self, terminal) -> None:
        with TerminalViewport.start(4, terminal) as viewport:
            before = len(terminal.text)
            viewport.draw(lambda ctx: ctx.print("hi"))
            frame = terminal.text[before:]
        assert frame == "\x1b[?2026h\x1b[6;1H\x1b[Jhi\x1b[?2026l"

    def test_context_is_relative_to_origin(self, terminal) -> None:
        ctx = DrawContext(terminal, start_row=5, usable_width=80, usable_height=4)
        ctx.print_at("x", 1, 2)
        ctx.set_fg_color(Color.BLACK)
        ctx.set_bg_color(Color.WHITE)
        ctx.reset_color()
        ctx.move_to(0, 7)
        assert terminal.text == "\x1b[7;3Hx\x1b[30m\x1b[47m\x1b[0m\x1b[6;8H"

    def test_render_error_still_ends_frame(self, terminal) -> None:
        def render(ctx: DrawContext) -> None:
            raise ValueError("bad frame")

        with pytest.raises(ValueError):
            with TerminalViewport.start(4, terminal) as viewport:
                viewport.draw(render)
        assert "\x1b[?2026l" in terminal.text
        assert terminal.text.endswith(RESTORE)

    def test_usable_height_follows_live_size(self, terminal) -> None:
        with TerminalViewport.start(10, terminal) as viewport:
            assert viewport.usable_height() == 10
            terminal.rows = 6
            assert viewport.usable_height() == 6
            terminal.rows = 40
            assert viewport.usable_height() == 10

    def test_resize_updates_cached_size_only(self, terminal) -> None:
        with TerminalViewport.start(4, terminal) as viewport:
            before = terminal.text
            viewport.on_resize(120, 50)
            assert (viewport.terminal_width, viewport.terminal_height) == (120, 50)
            assert terminal.text == before

    def test_draw_context_uses_live_width(self, terminal) -> None:
        widths = []
        with TerminalViewport.start(4, terminal) as viewport:
            terminal.cols = 100
            viewport.draw(lambda ctx: widths.append(ctx.usable_width))
            assert viewport.usable_width() == 100
        assert widths == [100]
