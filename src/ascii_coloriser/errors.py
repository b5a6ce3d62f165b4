"""Exception types. Each carries the process exit code main() returns for it."""

from typing import Optional

EXIT_INCOMPATIBLE = 1
EXIT_TOO_FEW_ARGUMENTS = 2
EXIT_UNKNOWN_FLAG = 3
EXIT_NO_MAPS = 4
EXIT_MISSING_FILENAME = 5
EXIT_WRITE_FAILED = 6
EXIT_READ_FAILED = 7
EXIT_UNKNOWN_CODE = 8


class ColoriserError(Exception):
    """Base class for every error the colorize command reports."""

    exit_code = 1


class UsageError(ColoriserError):
    """Malformed command line."""

    def __init__(self, message: str, exit_code: int = EXIT_TOO_FEW_ARGUMENTS):
        super().__init__(message)
        self.exit_code = exit_code


class StructuralMismatch(ColoriserError):
    """A map does not share the canvas' line/column layout."""

    exit_code = EXIT_INCOMPATIBLE

    def __init__(self, diagnostic):
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic


class UnknownCodeError(ColoriserError):
    """A map character is neither a known code nor a no-op marker."""

    exit_code = EXIT_UNKNOWN_CODE

    def __init__(self, kind: str, char: str, offset: Optional[int] = None):
        self.kind = kind
        self.char = char
        self.offset = offset
        self.diagnostic = None
        super().__init__(f"unknown {kind} code `{char}`")


class InputReadError(ColoriserError):
    exit_code = EXIT_READ_FAILED


class OutputWriteError(ColoriserError):
    exit_code = EXIT_WRITE_FAILED
