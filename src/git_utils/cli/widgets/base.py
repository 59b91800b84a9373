"""Base class for widgets drawn inside the viewport."""

from __future__ import annotations

from abc import ABC, abstractmethod

from git_utils.cli.core.input import KeyEvent
from git_utils.cli.core.viewport import DrawContext


class BaseWidget(ABC):
    """Base class with common widget functionality."""

    @abstractmethod
    def render(self, ctx: DrawContext) -> None:
        """Draw the widget through the viewport's draw context."""
        pass

    def handle_input(self, event: KeyEvent) -> bool:
        """Handle input event. Returns True if consumed; by default nothing is."""
        return False
