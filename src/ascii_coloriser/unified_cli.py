# unified_cli.py
import sys
import importlib
import inspect
from typing import Sequence, List, Optional, Tuple

# command -> ("module:function", one-line help)
COMMANDS = {
    "colorize": ("ascii_coloriser.colorize:main", "render an ASCII art with fg/bg/style maps"),
    "check": ("ascii_coloriser.colorize:check_main", "verify maps match an ASCII art's layout"),
    "template": ("ascii_coloriser.template:main", "generate a map template for an ASCII art"),
}


def usage() -> None:
    print("Usage: ascii-coloriser <command> [args...]")
    print("Commands:")
    for name in sorted(COMMANDS):
        print(f"  {name:<10} {COMMANDS[name][1]}")


def _split_target(target: str) -> Tuple[str, str]:
    module_path, _, attr = target.partition(":")
    return module_path, attr or "main"


def _call_entry(entry, argv: List[str], module_prog: Optional[str] = None) -> int:
    try:
        sig = inspect.signature(entry)
        if len(sig.parameters) >= 1:
            return entry(argv)

        # Entry parses sys.argv itself; swap it in for the call.
        old_argv = list(sys.argv)
        try:
            sys.argv = [module_prog or old_argv[0]] + list(argv)
            return entry()
        finally:
            sys.argv = old_argv
    except SystemExit as se:
        code = se.code
        return code if isinstance(code, int) else 0
    except Exception as e:
        print(f"Error running command: {e}", file=sys.stderr)
        return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    if not argv or argv[0] in ("-h", "--help"):
        usage()
        return 0

    cmd, *args = argv
    if cmd not in COMMANDS:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        usage()
        return 2

    module_path, attr = _split_target(COMMANDS[cmd][0])
    try:
        module = importlib.import_module(module_path)
    except Exception as e:
        print(f"Failed to import command '{cmd}' ({module_path}): {e}", file=sys.stderr)
        return 3

    entry = getattr(module, attr, None)
    if not callable(entry):
        print(f"Command module '{module_path}' has no callable '{attr}'", file=sys.stderr)
        return 4

    return _call_entry(entry, args, module_prog=f"ascii-coloriser {cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
