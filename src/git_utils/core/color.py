"""Terminal colour values for the picker's draw context."""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class ColorMode(Enum):
    """Colour mode for SGR sequences."""
    STANDARD_16 = "16"      # SGR 30-37, 40-47, 90-97, 100-107
    EXTENDED_256 = "256"    # SGR 38;5;n, 48;5;n


@dataclass(frozen=True)
class Color:
    """
    A foreground or background colour understood by the terminal.

    Only the 16 named colours and the 256-colour palette are supported;
    the picker never needs true colour.
    """
    mode: ColorMode
    value: int

    BLACK: ClassVar["Color"]
    WHITE: ClassVar["Color"]

    @classmethod
    def from_256(cls, index: int) -> "Color":
        """Create a Color from a 256-colour palette index."""
        if not 0 <= index <= 255:
            raise ValueError(f"256-color index must be 0-255, got {index}")
        return cls(ColorMode.EXTENDED_256, index)

    def to_sgr_fg(self) -> str:
        """Return SGR parameters selecting this as the foreground."""
        if self.mode == ColorMode.STANDARD_16:
            if self.value < 8:
                return str(30 + self.value)
            return str(90 + self.value - 8)
        return f"38;5;{self.value}"

    def to_sgr_bg(self) -> str:
        """Return SGR parameters selecting this as the background."""
        if self.mode == ColorMode.STANDARD_16:
            if self.value < 8:
                return str(40 + self.value)
            return str(100 + self.value - 8)
        return f"48;5;{self.value}"


Color.BLACK = Color(ColorMode.STANDARD_16, 0)
Color.WHITE = Color(ColorMode.STANDARD_16, 7)
