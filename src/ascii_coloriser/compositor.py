"""Lay fg/bg/style codes over a canvas and encode the result."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .codes import lookup_color, lookup_style
from .errors import OutputWriteError, UnknownCodeError

logger = logging.getLogger(__name__)

ESC = "\x1b"
# Escape prefix written to files, for a later `echo -e` to interpret.
LITERAL_ESC = r"\e"
LITERAL_NEWLINE = r"\n"

CodeStream = Optional[Sequence[Optional[str]]]


@dataclass(frozen=True)
class RenderTarget:
    """Where a render goes: the terminal (path None) or a file."""

    path: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.path is not None


STDOUT = RenderTarget()


def sgr(codes: Sequence[int], text: str, esc: str = ESC) -> str:
    joined = ";".join(str(c) for c in codes)
    return f"{esc}[{joined}m{text}{esc}[0m"


def stylise_terminal(ch: str, fg: Optional[str], bg: Optional[str], style: Optional[str]) -> str:
    """One position for a live terminal: fg, then bg, then style, each wrapping the last."""
    if ch == "\n":
        return ch
    out = ch
    color = lookup_color(fg, "color")
    if color is not None:
        out = sgr([color.fg], out)
    color = lookup_color(bg, "background color")
    if color is not None:
        out = sgr([color.bg], out)
    attr = lookup_style(style)
    if attr is not None:
        out = sgr([attr.sgr], out)
    return out


def stylise_file(ch: str, fg: Optional[str], bg: Optional[str], style: Optional[str]) -> str:
    """One position as literal escape text: a single `\\e[style;fg;bgm` prefix."""
    if ch == "\n":
        return LITERAL_NEWLINE
    codes = []
    attr = lookup_style(style)
    if attr is not None:
        codes.append(attr.sgr)
    color = lookup_color(fg, "color")
    if color is not None:
        codes.append(color.fg)
    color = lookup_color(bg, "background color")
    if color is not None:
        codes.append(color.bg)
    if not codes:
        return ch
    return sgr(codes, ch, esc=LITERAL_ESC)


def _stream(codes: CodeStream, length: int) -> Sequence[Optional[str]]:
    if codes is None:
        return [None] * length
    return codes


def render(canvas: str, fg: CodeStream = None, bg: CodeStream = None,
           style: CodeStream = None, target: RenderTarget = STDOUT) -> str:
    """Render the whole canvas.

    ``fg``, ``bg`` and ``style`` are per-position code sequences as returned by
    ``checker.check`` (or None when that map was not given).
    """
    stylise = stylise_file if target.is_file else stylise_terminal
    n = len(canvas)
    parts: List[str] = []
    for i, (ch, f, b, s) in enumerate(zip(canvas, _stream(fg, n), _stream(bg, n), _stream(style, n))):
        try:
            parts.append(stylise(ch, f, b, s))
        except UnknownCodeError as e:
            e.offset = i
            raise
    logger.debug("Rendered %d positions for %s", n, target.path or "stdout")
    return "".join(parts)


def locate(canvas: str, offset: int):
    """(line, column) of a character offset, both 0-based."""
    line = canvas.count("\n", 0, offset)
    column = offset - (canvas.rfind("\n", 0, offset) + 1)
    return line, column


def write_render(text: str, target: RenderTarget = STDOUT) -> None:
    if not target.is_file:
        print(text)
        return
    try:
        with open(target.path, "w", encoding="utf-8") as out:
            out.write(text)
    except OSError as e:
        raise OutputWriteError(f"could not write {target.path}: {e}") from e
    print("Render complete")
