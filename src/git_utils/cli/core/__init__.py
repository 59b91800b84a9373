"""Terminal primitives for the inline picker."""

from git_utils.cli.core.terminal import Terminal, TerminalSize
from git_utils.cli.core.input import InputReader, KeyEvent, Key, ResizeEvent
from git_utils.cli.core.viewport import DrawContext, TerminalViewport
from git_utils.cli.core.shortcuts import ShortcutDef, ShortcutRegistry, picker_registry

__all__ = [
    "Terminal",
    "TerminalSize",
    "InputReader",
    "KeyEvent",
    "Key",
    "ResizeEvent",
    "DrawContext",
    "TerminalViewport",
    "ShortcutDef",
    "ShortcutRegistry",
    "picker_registry",
]
