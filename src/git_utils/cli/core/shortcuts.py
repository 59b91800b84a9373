"""Keyboard shortcuts of the filterable list picker.

Each shortcut names the handler method it triggers, so the same table
drives event dispatch and the help text shown by ``git-utils keys``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from git_utils.cli.core.input import Key, KeyEvent


@dataclass
class ShortcutDef:
    """Definition of a keyboard shortcut.

    Attributes:
        id: Unique identifier for the shortcut
        keys: Keys/chars that trigger this shortcut
        label: Short label (e.g., "Accept")
        description: Longer description for help output
        handler: Name of the handler method to call
        ctrl: True if Ctrl must be held, False if it must not be, None if either
    """
    id: str
    keys: list[str | Key]
    label: str
    description: str
    handler: str
    ctrl: Optional[bool] = None

    def matches(self, event: KeyEvent) -> bool:
        """Check if a key event matches this shortcut."""
        if self.ctrl is not None and event.ctrl != self.ctrl:
            return False
        for key in self.keys:
            if isinstance(key, Key):
                if event.key == key:
                    return True
            elif event.key is None and event.char == key:
                return True
        return False

    @property
    def key_display(self) -> str:
        """Get display string for the keys."""
        prefix = "Ctrl+" if self.ctrl else ""
        displays = []
        for key in self.keys:
            if isinstance(key, Key):
                displays.append(prefix + _key_to_display(key))
            else:
                displays.append(prefix + key.upper())
        return "/".join(displays)


def _key_to_display(key: Key) -> str:
    """Convert a Key enum to display string."""
    display_map = {
        Key.UP: "↑",
        Key.DOWN: "↓",
        Key.LEFT: "←",
        Key.RIGHT: "→",
        Key.ENTER: "Enter",
        Key.ESCAPE: "Esc",
        Key.BACKSPACE: "Bksp",
        Key.HOME: "Home",
        Key.END: "End",
        Key.PAGE_UP: "PgUp",
        Key.PAGE_DOWN: "PgDn",
        Key.DELETE: "Del",
    }
    return display_map.get(key, key.name)


class ShortcutRegistry:
    """Ordered shortcut table; the first matching definition wins."""

    def __init__(self) -> None:
        self._shortcuts: list[ShortcutDef] = []

    def register(self, shortcut: ShortcutDef) -> None:
        """Register a shortcut definition."""
        if self.get(shortcut.id) is not None:
            raise ValueError(f"Duplicate shortcut id: {shortcut.id}")
        self._shortcuts.append(shortcut)

    def register_many(self, shortcuts: list[ShortcutDef]) -> None:
        """Register multiple shortcuts at once."""
        for shortcut in shortcuts:
            self.register(shortcut)

    def get(self, shortcut_id: str) -> Optional[ShortcutDef]:
        """Get a shortcut by ID."""
        for shortcut in self._shortcuts:
            if shortcut.id == shortcut_id:
                return shortcut
        return None

    def match(self, event: KeyEvent) -> Optional[ShortcutDef]:
        """Find the first shortcut matching the event."""
        for shortcut in self._shortcuts:
            if shortcut.matches(event):
                return shortcut
        return None

    def __iter__(self):
        return iter(self._shortcuts)

    def help_lines(self) -> list[tuple[str, str, str]]:
        """(keys, label, description) rows for help output."""
        return [(shortcut.key_display, shortcut.label, shortcut.description) for shortcut in self._shortcuts]


# Ctrl variants come before their plain counterparts.
PICKER_SHORTCUTS = [
    ShortcutDef(
        id="accept", keys=[Key.ENTER], label="Accept",
        description="Choose the highlighted entry", handler="action_accept",
    ),
    ShortcutDef(
        id="interrupt", keys=["c"], label="Cancel",
        description="Cancel without choosing", handler="action_cancel", ctrl=True,
    ),
    ShortcutDef(
        id="cancel", keys=[Key.ESCAPE], label="Cancel",
        description="Cancel without choosing", handler="action_cancel",
    ),
    ShortcutDef(
        id="clear_query", keys=[Key.BACKSPACE, "h"], label="Clear",
        description="Clear the filter", handler="action_clear_query", ctrl=True,
    ),
    ShortcutDef(
        id="delete_back", keys=[Key.BACKSPACE], label="Delete",
        description="Delete the character before the caret", handler="action_delete_back",
    ),
    ShortcutDef(
        id="delete_forward", keys=[Key.DELETE], label="Delete",
        description="Delete the character under the caret", handler="action_delete_forward",
    ),
    ShortcutDef(
        id="caret_home", keys=[Key.HOME], label="Start",
        description="Move the caret to the start of the filter", handler="action_caret_home",
    ),
    ShortcutDef(
        id="caret_end", keys=[Key.END], label="End",
        description="Move the caret to the end of the filter", handler="action_caret_end",
    ),
    ShortcutDef(
        id="caret_left", keys=[Key.LEFT], label="Left",
        description="Move the caret left", handler="action_caret_left",
    ),
    ShortcutDef(
        id="caret_right", keys=[Key.RIGHT], label="Right",
        description="Move the caret right", handler="action_caret_right",
    ),
    ShortcutDef(
        id="select_up", keys=[Key.UP], label="Up",
        description="Select the previous entry", handler="action_select_up",
    ),
    ShortcutDef(
        id="select_down", keys=[Key.DOWN], label="Down",
        description="Select the next entry", handler="action_select_down",
    ),
    ShortcutDef(
        id="select_first", keys=[Key.PAGE_UP], label="First",
        description="Select the first entry", handler="action_select_first", ctrl=True,
    ),
    ShortcutDef(
        id="select_last", keys=[Key.PAGE_DOWN], label="Last",
        description="Select the last entry", handler="action_select_last", ctrl=True,
    ),
    ShortcutDef(
        id="page_up", keys=[Key.PAGE_UP], label="Page up",
        description="Select one page up", handler="action_page_up",
    ),
    ShortcutDef(
        id="page_down", keys=[Key.PAGE_DOWN], label="Page down",
        description="Select one page down", handler="action_page_down",
    ),
]


def picker_registry() -> ShortcutRegistry:
    """Create a registry holding the picker's default shortcuts."""
    registry = ShortcutRegistry()
    registry.register_many(PICKER_SHORTCUTS)
    return registry
