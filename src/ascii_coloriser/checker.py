"""Structural compatibility between a canvas and its fg/bg/style maps.

A map is usable only if it has the same number of lines as the canvas and
every line has the same number of characters. Two policies are available:

* ``Policy.EXACT`` compares line counts and line lengths only.
* ``Policy.MASK`` additionally requires the glyph/blank pattern of every line
  to agree: a map must carry a code exactly where the canvas has a glyph.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, List, Mapping, Optional, Tuple

from .codes import KNOWN_CODES
from .errors import StructuralMismatch

logger = logging.getLogger(__name__)

# Map character that marks a deliberately unstyled glyph position.
BLANK_MARKER = "-"

GLYPH = "#"
BLANK = " "
UNRECOGNIZED = "?"


class Policy(Enum):
    EXACT = "exact"
    MASK = "mask"


class DiagnosticKind(Enum):
    LINE_COUNT_MISMATCH = "line-count-mismatch"
    LINE_LENGTH_MISMATCH = "line-length-mismatch"
    UNKNOWN_CODE = "unknown-code"
    EXPECTED_BLANK = "expected-blank"
    UNEXPECTED_BLANK = "unexpected-blank"
    UNRECOGNIZED_MARKER = "unrecognized-marker"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    file: str
    line: int
    column: Optional[int]
    message: str


def split_rows(text: str) -> List[Tuple[str, str]]:
    """Split text into (content, terminator) pairs.

    Only ``\\n`` ends a line; a ``\\r`` right before it is part of the
    terminator. A final newline does not open an extra empty row.
    """
    pieces = text.split("\n")
    if pieces[-1] == "":
        pieces.pop()
    rows = []
    last = len(pieces) - 1
    for i, piece in enumerate(pieces):
        ending = "\n" if i < last or text.endswith("\n") else ""
        if piece.endswith("\r") and ending:
            piece, ending = piece[:-1], "\r" + ending
        rows.append((piece, ending))
    return rows


def split_lines(text: str) -> List[str]:
    return [content for content, _ in split_rows(text)]


def canvas_mask(line: str) -> str:
    return "".join(BLANK if ch.isspace() else GLYPH for ch in line)


def map_mask(line: str, codes: AbstractSet[str] = KNOWN_CODES) -> str:
    out = []
    for ch in line:
        if ch.isspace() or ch == BLANK_MARKER:
            out.append(BLANK)
        elif ch in codes:
            out.append(GLYPH)
        else:
            out.append(UNRECOGNIZED)
    return "".join(out)


def _fail(kind: DiagnosticKind, name: str, line: int, column: Optional[int], what: str):
    where = f"at line {line}" if column is None else f"at line {line}, column {column}"
    message = f"{what} in file {name} {where}."
    raise StructuralMismatch(Diagnostic(kind, name, line, column, message))


def _check_line_count(canvas_lines: List[str], map_lines: List[str], name: str) -> None:
    if len(map_lines) < len(canvas_lines):
        _fail(DiagnosticKind.LINE_COUNT_MISMATCH, name, len(map_lines), None, "unexpected EOF")
    if len(map_lines) > len(canvas_lines):
        _fail(DiagnosticKind.LINE_COUNT_MISMATCH, name, len(canvas_lines), None, "expected EOF")


def _check_line_length(i: int, canvas_line: str, map_line: str, name: str) -> None:
    if len(canvas_line) > len(map_line):
        _fail(DiagnosticKind.LINE_LENGTH_MISMATCH, name, i, len(map_line),
              "unexpected end-of-line")
    if len(canvas_line) < len(map_line):
        _fail(DiagnosticKind.LINE_LENGTH_MISMATCH, name, i, len(canvas_line),
              "expected end-of-line")


def _check_line_mask(i: int, canvas_line: str, map_line: str, name: str,
                     codes: AbstractSet[str]) -> None:
    want, got = canvas_mask(canvas_line), map_mask(map_line, codes)
    if want == got:
        return
    for col, (w, g) in enumerate(zip(want, got)):
        if w == g:
            continue
        if g == UNRECOGNIZED:
            _fail(DiagnosticKind.UNRECOGNIZED_MARKER, name, i, col,
                  f"unrecognized marker `{map_line[col]}`")
        if w == BLANK:
            _fail(DiagnosticKind.EXPECTED_BLANK, name, i, col, "expected blank")
        _fail(DiagnosticKind.UNEXPECTED_BLANK, name, i, col, "unexpected blank")


def align(canvas: str, map_lines: List[str]) -> List[Optional[str]]:
    """Lay the map lines over the canvas positions.

    Canvas line terminators become ``None`` so the result always has exactly
    ``len(canvas)`` entries, whatever line endings the map file used.
    """
    out: List[Optional[str]] = []
    for (_, ending), map_line in zip(split_rows(canvas), map_lines):
        out.extend(map_line)
        out.extend([None] * len(ending))
    return out


def check(canvas: str, map_text: str, name: str, policy: Policy = Policy.EXACT,
          codes: AbstractSet[str] = KNOWN_CODES) -> List[Optional[str]]:
    """Verify ``map_text`` against ``canvas``; return it aligned to the canvas.

    Raises StructuralMismatch carrying a Diagnostic on the first divergence.
    Line counts are compared before any line content. Under MASK, ``codes``
    are the characters accepted as glyph markers (the map kind's table).
    """
    canvas_lines = split_lines(canvas)
    map_lines = split_lines(map_text)

    _check_line_count(canvas_lines, map_lines, name)
    for i, (canvas_line, map_line) in enumerate(zip(canvas_lines, map_lines)):
        if policy is Policy.MASK:
            _check_line_mask(i, canvas_line, map_line, name, codes)
        _check_line_length(i, canvas_line, map_line, name)

    logger.debug("%s matches canvas (%d lines, policy=%s)", name, len(map_lines), policy.value)
    return align(canvas, map_lines)


def check_all(canvas: str, maps: Mapping[str, str],
              policy: Policy = Policy.EXACT) -> List[List[Optional[str]]]:
    """Check several named maps in order; stop at the first failure."""
    return [check(canvas, text, name, policy) for name, text in maps.items()]
