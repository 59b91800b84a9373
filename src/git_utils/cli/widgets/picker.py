"""Interactive fuzzy-filtered single-selection list, drawn inline."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Generic, Optional, TypeVar

from git_utils.cli.core.ansi_text import truncate
from git_utils.cli.core.input import Event, InputReader, KeyEvent, ResizeEvent
from git_utils.cli.core.shortcuts import ShortcutRegistry, picker_registry
from git_utils.cli.core.terminal import Terminal
from git_utils.cli.core.viewport import DrawContext, TerminalViewport
from git_utils.cli.widgets.base import BaseWidget
from git_utils.core.color import Color
from git_utils.core.selectable import FilterState, SelectableList, SelectionState
from git_utils.errors import Cancelled, EmptyListError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Outcome(Enum):
    """Where the picker's event loop stands."""
    EDITING = "editing"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


class FilterableList(BaseWidget, Generic[T]):
    """
    Pick one value from a list by typing to filter it.

    Layout, from the viewport's first row:

        <prompt><query>
        > best match        (highlighted)
          next match
          ...

    Keys are listed in git_utils.cli.core.shortcuts; printable ASCII
    characters edit the query. run() returns the chosen value or raises
    Cancelled.

    Right, Down, PageDown and Ctrl+PageDown may push the caret or the
    selection past the end; nothing reads them until the next reclamp at
    the top of the loop pulls them back.
    """

    MARKER = "> "
    SELECTED_FG = Color.BLACK
    SELECTED_BG = Color.WHITE

    def __init__(self, prompt_text: str = "", shortcuts: Optional[ShortcutRegistry] = None) -> None:
        super().__init__()
        self.prompt_text = prompt_text
        self.shortcuts = shortcuts if shortcuts is not None else picker_registry()
        self.items: SelectableList[T] = SelectableList()

        self.filter = FilterState()
        self.selection = SelectionState()
        self.visible_rows = 1
        self.outcome = Outcome.EDITING
        self._dirty = True
        self._viewport: Optional[TerminalViewport] = None

    def insert(self, display: str, value: T) -> None:
        self.items.insert(display, value)

    def insert_formatted(self, value: T) -> None:
        self.items.insert_formatted(value)

    def __len__(self) -> int:
        return len(self.items)

    def run(self, terminal: Optional[Terminal] = None, reader: Optional[InputReader] = None) -> T:
        """Run the picker until the user chooses or cancels."""
        if not len(self.items):
            raise EmptyListError("No items to pick from")

        self.filter = FilterState()
        self.selection = SelectionState()
        self.outcome = Outcome.EDITING
        self._dirty = True

        logger.debug("Picking from %d items", len(self.items))
        self.items.running = True
        try:
            with TerminalViewport.start(len(self.items) + 1, terminal) as viewport:
                self._viewport = viewport
                events = reader if reader is not None else InputReader(viewport.terminal)
                with events.watch_resize():
                    while self.outcome is Outcome.EDITING:
                        self.refresh(viewport.usable_height())
                        viewport.draw(self.render)
                        self.handle_event(events.read_event())
        finally:
            self._viewport = None
            self.items.running = False

        if self.outcome is Outcome.CANCELLED:
            logger.info("Picker cancelled")
            raise Cancelled()

        candidate = self.items.finalize(self.selection.selected_index)
        logger.info("Picked %r", candidate.display)
        return candidate.payload

    def refresh(self, usable_height: int) -> None:
        """Re-rank if the query changed, then reclamp for the viewport height."""
        # One row holds the prompt.
        self.visible_rows = max(1, usable_height - 1)

        if self._dirty or self.items.needs_recompute(self.filter.query):
            self.items.recompute(self.filter.query)
            self._dirty = False

        self.items.reclamp(self.filter, self.selection, self.visible_rows)

    def render(self, ctx: DrawContext) -> None:
        ctx.print(self.prompt_text)
        ctx.print(self.filter.query)

        text_width = max(0, ctx.usable_width - len(self.MARKER))
        # Rows below the reserved region are never drawn.
        window = max(0, min(self.visible_rows, ctx.usable_height - 1))
        rows = self.items.visible_entries(self.selection, window)
        for row, (ranked_index, candidate) in enumerate(rows, start=1):
            if ranked_index == self.selection.selected_index:
                ctx.set_fg_color(self.SELECTED_FG)
                ctx.set_bg_color(self.SELECTED_BG)
                ctx.print_at(self.MARKER, row, 0)

            ctx.print_at(truncate(candidate.display, text_width), row, len(self.MARKER))
            ctx.reset_color()

        # Keep the terminal's own cursor on the caret.
        ctx.move_to(0, len(self.prompt_text) + self.filter.caret)

    def handle_event(self, event: Event) -> None:
        if isinstance(event, ResizeEvent):
            if self._viewport is not None:
                self._viewport.on_resize(event.cols, event.rows)
            return
        self.handle_input(event)

    def handle_input(self, event: KeyEvent) -> bool:
        shortcut = self.shortcuts.match(event)
        if shortcut is not None:
            getattr(self, shortcut.handler)()
            return True

        char = event.char
        if event.is_char and not event.ctrl and char.isascii() and char.isprintable():
            self.insert_char(char)
            return True

        return False

    def insert_char(self, char: str) -> None:
        query, caret = self.filter.query, self.filter.caret
        self.filter.query = query[:caret] + char + query[caret:]
        self.filter.caret = caret + 1
        self._dirty = True

    def action_accept(self) -> None:
        if self.items.ranked:
            self.outcome = Outcome.RESOLVED

    def action_cancel(self) -> None:
        self.outcome = Outcome.CANCELLED

    def action_clear_query(self) -> None:
        self.filter.query = ""
        self.filter.caret = 0
        self._dirty = True

    def action_delete_back(self) -> None:
        caret = self.filter.caret
        if caret > 0:
            query = self.filter.query
            self.filter.query = query[:caret - 1] + query[caret:]
            self.filter.caret = caret - 1
            self._dirty = True

    def action_delete_forward(self) -> None:
        caret, query = self.filter.caret, self.filter.query
        if caret < len(query):
            self.filter.query = query[:caret] + query[caret + 1:]
            self._dirty = True

    def action_caret_home(self) -> None:
        self.filter.caret = 0

    def action_caret_end(self) -> None:
        self.filter.caret = len(self.filter.query)

    def action_caret_left(self) -> None:
        self.filter.caret = max(0, self.filter.caret - 1)

    def action_caret_right(self) -> None:
        self.filter.caret += 1

    def action_select_up(self) -> None:
        self.selection.selected_index = max(0, self.selection.selected_index - 1)

    def action_select_down(self) -> None:
        self.selection.selected_index += 1

    def action_select_first(self) -> None:
        self.selection.selected_index = 0

    def action_select_last(self) -> None:
        self.selection.selected_index = len(self.items.ranked)

    def action_page_up(self) -> None:
        self.selection.selected_index = max(0, self.selection.selected_index - self.visible_rows)

    def action_page_down(self) -> None:
        self.selection.selected_index += self.visible_rows


def pick(entries: list[str], prompt_text: str = "", terminal: Optional[Terminal] = None) -> str:
    """Pick one of ``entries``, displayed as-is."""
    picker: FilterableList[str] = FilterableList(prompt_text)
    for entry in entries:
        picker.insert_formatted(entry)
    return picker.run(terminal)
