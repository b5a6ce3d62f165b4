"""ASCII Coloriser - Paint ASCII art with fg/bg/style map files."""

__version__ = "0.2.0"

"""
Expose lightweight lazy wrappers to avoid importing submodules at package
import time. Importing submodules in `__init__` causes `runpy` to warn when
executing a module with `-m` because the submodule may already appear in
`sys.modules` before execution. Wrappers import on-demand.
"""


def colorize_main(*args, **kwargs):
    from .colorize import main as _m

    return _m(*args, **kwargs)


def template_main(*args, **kwargs):
    from .template import main as _m

    return _m(*args, **kwargs)


__all__ = [
    "colorize_main",
    "template_main",
]
