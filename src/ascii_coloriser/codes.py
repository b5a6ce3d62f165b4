"""Code tables: one map character -> one SGR attribute."""

from enum import Enum
from typing import Optional, Tuple

from .errors import UnknownCodeError

# Map characters that mean "leave this position alone".
NO_OP_CODES = frozenset(" -\n\r")


class Color(Enum):
    """16-color palette. Value: (code char, fg SGR, bg SGR, RGB)."""

    BLACK = ("0", 30, 40, (0, 0, 0))
    RED = ("1", 31, 41, (170, 0, 0))
    GREEN = ("2", 32, 42, (0, 170, 0))
    YELLOW = ("3", 33, 43, (170, 85, 0))
    BLUE = ("4", 34, 44, (0, 0, 170))
    PURPLE = ("5", 35, 45, (170, 0, 170))
    CYAN = ("6", 36, 46, (0, 170, 170))
    WHITE = ("7", 37, 47, (170, 170, 170))
    BRIGHT_BLACK = ("8", 90, 100, (85, 85, 85))
    BRIGHT_RED = ("9", 91, 101, (255, 85, 85))
    BRIGHT_GREEN = ("a", 92, 102, (85, 255, 85))
    BRIGHT_YELLOW = ("b", 93, 103, (255, 255, 85))
    BRIGHT_BLUE = ("c", 94, 104, (85, 85, 255))
    BRIGHT_PURPLE = ("d", 95, 105, (255, 85, 255))
    BRIGHT_CYAN = ("e", 96, 106, (85, 255, 255))
    BRIGHT_WHITE = ("f", 97, 107, (255, 255, 255))

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def fg(self) -> int:
        return self.value[1]

    @property
    def bg(self) -> int:
        return self.value[2]

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.value[3]


class Style(Enum):
    """Text attributes. Value: (code char, SGR)."""

    BOLD = ("1", 1)
    DIMMED = ("2", 2)
    ITALIC = ("3", 3)
    UNDERLINE = ("4", 4)
    BLINK = ("5", 5)
    RAPID_BLINK = ("6", 6)
    REVERSE = ("7", 7)
    HIDDEN = ("8", 8)
    STRIKETHROUGH = ("9", 9)

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def sgr(self) -> int:
        return self.value[1]


COLORS_BY_CODE = {c.code: c for c in Color}
STYLES_BY_CODE = {s.code: s for s in Style}

# Every character that selects something in at least one table.
KNOWN_CODES = frozenset(COLORS_BY_CODE) | frozenset(STYLES_BY_CODE)


def lookup_color(code: Optional[str], kind: str = "color") -> Optional[Color]:
    """Resolve a fg/bg map character; None for no-op markers."""
    if code is None or code in NO_OP_CODES:
        return None
    try:
        return COLORS_BY_CODE[code]
    except KeyError:
        raise UnknownCodeError(kind, code) from None


def lookup_style(code: Optional[str]) -> Optional[Style]:
    """Resolve a style map character; None for no-op markers."""
    if code is None or code in NO_OP_CODES:
        return None
    try:
        return STYLES_BY_CODE[code]
    except KeyError:
        raise UnknownCodeError("style", code) from None
