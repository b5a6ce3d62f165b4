#!/usr/bin/env python3
import argparse
import sys
import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional, Sequence

from .checker import Diagnostic, DiagnosticKind, Policy, check, check_all
from .codes import COLORS_BY_CODE, STYLES_BY_CODE
from .compositor import STDOUT, RenderTarget, locate, render, sgr, write_render
from .errors import (
    EXIT_MISSING_FILENAME,
    EXIT_NO_MAPS,
    EXIT_TOO_FEW_ARGUMENTS,
    EXIT_UNKNOWN_FLAG,
    ColoriserError,
    InputReadError,
    OutputWriteError,
    StructuralMismatch,
    UnknownCodeError,
    UsageError,
)

INCOMPATIBLE_FILES_HINT = """\
: use `ascii-coloriser template ASCII_ART -o MAP_FILE`
to generate templates. (works with fg/bg color maps and
style maps, replace fullcaps names with your file's name)"""

# Under --policy mask a map needs a code on every glyph, so a `-` template fails.
MASK_HINT = """\
: use `ascii-coloriser template ASCII_ART --marker CODE -o MAP_FILE`
or `ascii-coloriser template ASCII_ART --image IMAGE -o MAP_FILE`
to generate templates with a code on every glyph. (replace fullcaps
names with your own)"""

# map kind -> characters that are codes in that kind's table
MAP_CODES = {
    "fg": frozenset(COLORS_BY_CODE),
    "bg": frozenset(COLORS_BY_CODE),
    "style": frozenset(STYLES_BY_CODE),
}


# -----------------------------
# Options / argument state machine
# -----------------------------

@dataclass
class Options:
    art_path: str = ""
    fg_path: Optional[str] = None
    bg_path: Optional[str] = None
    style_path: Optional[str] = None
    out_path: Optional[str] = None
    policy: Policy = Policy.EXACT

    debug: bool = False
    log_path: Optional[str] = None

    @property
    def target(self) -> RenderTarget:
        return RenderTarget(self.out_path) if self.out_path else STDOUT

    def map_paths(self) -> Dict[str, Optional[str]]:
        return {"fg": self.fg_path, "bg": self.bg_path, "style": self.style_path}


class ArgState(Enum):
    READING_FLAGS = auto()
    FG_FILE = auto()
    BG_FILE = auto()
    STYLE_FILE = auto()
    OUTPUT_FILE = auto()
    POLICY = auto()
    LOG_FILE = auto()


# flag -> state that consumes the next argument
FLAG_TRANSITIONS = {
    "-fg": ArgState.FG_FILE,
    "-bg": ArgState.BG_FILE,
    "-s": ArgState.STYLE_FILE,
    "-o": ArgState.OUTPUT_FILE,
    "--policy": ArgState.POLICY,
    "--log": ArgState.LOG_FILE,
}

# state -> Options field filled by the argument read in that state
STATE_FIELDS = {
    ArgState.FG_FILE: "fg_path",
    ArgState.BG_FILE: "bg_path",
    ArgState.STYLE_FILE: "style_path",
    ArgState.OUTPUT_FILE: "out_path",
    ArgState.POLICY: "policy",
    ArgState.LOG_FILE: "log_path",
}

SWITCHES = {"--debug": "debug"}


def print_usage(file=sys.stderr):
    print(
        "usage: ascii-colorize <ascii_art> [-fg FILE] [-bg FILE] [-s FILE] [-o FILE] "
        "[--policy exact|mask] [--debug] [--log FILE]\n"
        "At least one of -fg, -bg or -s is required.\n"
        "Without -o the render is printed to stdout; with -o the file holds\n"
        "escape sequences to be replayed with `echo -e \"$(cat FILE)\"`.\n",
        file=file,
    )


def _parse_policy(value: str) -> Policy:
    try:
        return Policy(value)
    except ValueError:
        raise UsageError(f"Unknown policy `{value}` (expected exact or mask)",
                         EXIT_UNKNOWN_FLAG) from None


def parse_args(argv: Sequence[str]) -> Options:
    """Parse arguments (program name excluded) into Options."""
    if len(argv) < 3:
        raise UsageError(
            "Too few arguments were given, it needs at least an ascii art "
            "and a map file (preceded by the appropriate flag). Example :\n\n"
            "ascii-colorize my_awesome_ascii_art -fg color_map",
            EXIT_TOO_FEW_ARGUMENTS,
        )

    opt = Options(art_path=argv[0])
    state = ArgState.READING_FLAGS

    for arg in argv[1:]:
        if state is ArgState.READING_FLAGS:
            if arg in SWITCHES:
                setattr(opt, SWITCHES[arg], True)
                continue
            if arg not in FLAG_TRANSITIONS:
                raise UsageError(f"Unknown flag `{arg}`", EXIT_UNKNOWN_FLAG)
            state = FLAG_TRANSITIONS[arg]
            continue

        value = _parse_policy(arg) if state is ArgState.POLICY else arg
        setattr(opt, STATE_FIELDS[state], value)
        state = ArgState.READING_FLAGS

    if state is not ArgState.READING_FLAGS:
        raise UsageError(f"expected file name after flag `{argv[-1]}`", EXIT_MISSING_FILENAME)

    if not any(opt.map_paths().values()):
        raise UsageError("No transformation maps have been given, did you forget them ?",
                         EXIT_NO_MAPS)

    return opt


LOG = logging.getLogger("ascii_coloriser")
def setup_logging(debug: bool, log_path: str | None = None) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    LOG.setLevel(logging.DEBUG if log_path else level)

    fmt = logging.Formatter("%(levelname)s: %(message)s")

    handlers: list[logging.Handler] = []

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level)
    sh.setFormatter(fmt)
    handlers.append(sh)

    if log_path:
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
        handlers.append(fh)

    LOG.handlers[:] = handlers
    LOG.propagate = False


# -----------------------------
# Pipeline
# -----------------------------

def read_text(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadError(f"Couldn't read from file `{path}`: {e}") from e


# UnknownCodeError.kind -> map it came from
_KIND_TO_MAP = {"color": "fg", "background color": "bg", "style": "style"}


def colorize(opt: Options) -> str:
    """Read, check and render; return the rendered text."""
    canvas = read_text(opt.art_path)
    LOG.debug("Loaded ASCII art %s: %d chars", opt.art_path, len(canvas))

    streams: Dict[str, Optional[List[Optional[str]]]] = {}
    for name, path in opt.map_paths().items():
        if path is None:
            streams[name] = None
            continue
        streams[name] = check(canvas, read_text(path), path, opt.policy, MAP_CODES[name])

    try:
        return render(canvas, streams["fg"], streams["bg"], streams["style"], opt.target)
    except UnknownCodeError as e:
        line, column = locate(canvas, e.offset or 0)
        path = opt.map_paths()[_KIND_TO_MAP[e.kind]]
        e.diagnostic = Diagnostic(
            DiagnosticKind.UNKNOWN_CODE, path, line, column,
            f"{e} in file {path} at line {line}, column {column}.",
        )
        raise


def report(err: ColoriserError, policy: Policy = Policy.EXACT) -> None:
    diagnostic = getattr(err, "diagnostic", None)
    message = diagnostic.message if diagnostic else str(err)
    print(f"{sgr([31], 'Error')} : {message}", file=sys.stderr)
    if isinstance(err, StructuralMismatch):
        hint = MASK_HINT if policy is Policy.MASK else INCOMPATIBLE_FILES_HINT
        print(f"\n{sgr([33], 'Hint')}{hint}", file=sys.stderr)


# -----------------------------
# main
# -----------------------------

def main(argv: Optional[Sequence[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    if "-h" in argv or "--help" in argv:
        print_usage(file=sys.stdout)
        return 0

    try:
        opt = parse_args(argv)
    except UsageError as e:
        print(e, file=sys.stderr)
        return e.exit_code

    t0 = time.perf_counter()
    setup_logging(opt.debug, opt.log_path)
    LOG.debug("Args: art=%s fg=%s bg=%s style=%s out=%s policy=%s",
              opt.art_path, opt.fg_path, opt.bg_path, opt.style_path,
              opt.out_path, opt.policy.value)

    try:
        text = colorize(opt)
        write_render(text, opt.target)
    except OutputWriteError as e:
        LOG.warning("Error when writing render to output file : %s", e)
        return e.exit_code
    except ColoriserError as e:
        report(e, opt.policy)
        return e.exit_code

    LOG.debug("Done in %.3fs", time.perf_counter() - t0)
    return 0


def check_main(argv: Optional[Sequence[str]] = None) -> int:
    """Validate map files against an ASCII art without rendering."""
    parser = argparse.ArgumentParser(
        prog="ascii-coloriser check",
        description="Verify that map files share an ASCII art's line/column layout",
    )
    parser.add_argument("art", help="ASCII art file")
    parser.add_argument("maps", nargs="+", help="Map files to verify")
    parser.add_argument(
        "--policy",
        choices=[p.value for p in Policy],
        default=Policy.EXACT.value,
        help="exact: line lengths only; mask: glyph/blank pattern too (default: exact)",
    )
    args = parser.parse_args(argv)

    try:
        canvas = read_text(args.art)
        check_all(canvas, {path: read_text(path) for path in args.maps}, Policy(args.policy))
    except ColoriserError as e:
        report(e, Policy(args.policy))
        return e.exit_code

    print(f"{len(args.maps)} map(s) match {args.art}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
