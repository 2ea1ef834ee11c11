"""Error taxonomy for flag parsing.

Two layers are kept apart:

- ``FlagError`` is raised by value converters when a token cannot be turned
  into the target type. It never leaves ``FlagSet.parse``.
- ``Error`` is the value returned by ``FlagSet.parse``. It tells the embedding
  program why parsing stopped.
"""

from dataclasses import dataclass
from enum import StrEnum


class EnumErrorKind(StrEnum):
    HELP = "help"  # -h / --help with no such flag registered
    NUM_ARGS = "num_args"  # argv is missing the program name
    BAD_SYNTAX = "bad_syntax"
    UNDEFINED_FLAG = "undefined_flag"
    MISSING_VALUE = "missing_value"
    BAD_VALUE = "bad_value"


EXIT_CODE_HELP = 0
EXIT_CODE_USAGE = 2


class FlagError(Exception):
    """Conversion failure raised by a ``Value`` when a token is rejected."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True, slots=True)
class Error:
    """
    Reason a parse stopped.

    Attributes:
        kind (EnumErrorKind): Discriminant of the failure.
        message (str): Human-readable diagnostic, empty for ``HELP``.

    Examples:
        >>> err = Error(EnumErrorKind.UNDEFINED_FLAG, "flag provided but not defined: -x")
        >>> err.exit_code
        2
    """

    kind: EnumErrorKind
    message: str = ""

    @classmethod
    def help(cls) -> "Error":
        return cls(EnumErrorKind.HELP, "")

    @property
    def is_help(self) -> bool:
        return self.kind == EnumErrorKind.HELP

    @property
    def exit_code(self) -> int:
        """Process status an embedding program should exit with."""
        return EXIT_CODE_HELP if self.is_help else EXIT_CODE_USAGE

    def __str__(self) -> str:
        return self.message
