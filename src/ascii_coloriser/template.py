#!/usr/bin/env python3
"""Generate map files that already match an ASCII art's layout."""

import argparse
import logging
import sys

import numpy as np
from PIL import Image

from .checker import split_rows
from .codes import KNOWN_CODES, NO_OP_CODES, Color
from .colorize import read_text
from .errors import EXIT_READ_FAILED, EXIT_WRITE_FAILED, InputReadError

PALETTE = np.array([c.rgb for c in Color], dtype=np.int32)
PALETTE_CODES = [c.code for c in Color]


# =============================
# Templates
# =============================


def blank_template(canvas: str, marker: str = "-") -> str:
    """Replace every glyph with ``marker``; keep whitespace and line endings."""
    out = []
    for content, ending in split_rows(canvas):
        out.append("".join(" " if ch.isspace() else marker for ch in content))
        out.append(ending)
    return "".join(out)


def nearest_codes(img: Image.Image) -> np.ndarray:
    """Per-pixel index into the 16-color palette (squared RGB distance)."""
    px = np.asarray(img.convert("RGB"), dtype=np.int32)
    dist = ((px[:, :, None, :] - PALETTE[None, None, :, :]) ** 2).sum(axis=-1)
    return dist.argmin(axis=-1)


def image_template(canvas: str, img: Image.Image) -> str:
    """
    Build a color map by sampling an image under the art.

    The image is resized to the art's grid (one pixel per character cell) and
    every glyph takes the code of the closest palette color. Whitespace stays
    blank, so the result works as either a fg or a bg map.
    """
    logger = logging.getLogger(__name__)
    rows = split_rows(canvas)
    h = len(rows)
    w = max((len(content) for content, _ in rows), default=0)
    if h == 0 or w == 0:
        return blank_template(canvas)

    logger.debug("Sampling image %dx%d onto %dx%d grid", img.width, img.height, w, h)
    small = img.convert("RGB").resize((w, h), Image.Resampling.LANCZOS)
    idx = nearest_codes(small)

    out = []
    for y, (content, ending) in enumerate(rows):
        out.append("".join(
            " " if ch.isspace() else PALETTE_CODES[idx[y, x]]
            for x, ch in enumerate(content)
        ))
        out.append(ending)
    return "".join(out)


# =============================
# CLI
# =============================


def main(argv=None):
    """Main entry point for the template CLI."""
    parser = argparse.ArgumentParser(
        description="Generate a fg/bg/style map template for an ASCII art"
    )
    parser.add_argument("art", help="ASCII art file the map must match")
    parser.add_argument(
        "--image",
        default=None,
        help="Sample colors from this image instead of writing a blank template",
    )
    parser.add_argument(
        "-m",
        "--marker",
        default="-",
        help="Character written over every glyph in a blank template (default: -)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: WARNING)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr, level=getattr(logging, args.log_level), format="%(levelname)s: %(message)s"
    )

    if len(args.marker) != 1 or args.marker not in KNOWN_CODES | (NO_OP_CODES - {"\n", "\r"}):
        parser.error(f"marker must be one code character or '-', got {args.marker!r}")

    try:
        canvas = read_text(args.art)
    except InputReadError as e:
        print(f"\033[31mError: {e}\033[0m", file=sys.stderr)
        return EXIT_READ_FAILED

    if args.image:
        try:
            with Image.open(args.image) as img:
                output = image_template(canvas, img)
        except OSError as e:
            print(f"\033[31mError: couldn't open image `{args.image}`: {e}\033[0m", file=sys.stderr)
            return EXIT_READ_FAILED
    else:
        output = blank_template(canvas, marker=args.marker)

    # Written verbatim: an extra trailing newline would add a line to the map.
    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8", newline="") as f:
                f.write(output)
        except OSError as e:
            print(f"\033[31mError: couldn't write `{args.output}`: {e}\033[0m", file=sys.stderr)
            return EXIT_WRITE_FAILED
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
