"""Flag registry and the dash-flag parsing state machine.

Token grammar:

- ``-name`` / ``--name``: flag without an inline value.
- ``-name=value`` / ``--name=value``: flag with an inline value.
- ``--``: terminator, everything after it is positional.
- ``-`` or any token not starting with ``-``: first positional argument.

Typical embedding:

    >>> fs = FlagSet()
    >>> verbose = fs.bool_var("v", False, "Verbose output.")
    >>> fs.parse(["prog", "-v", "input.txt"]) is None
    True
    >>> verbose.get(), fs.args
    (True, ('input.txt',))
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from loguru import logger

from .binding import AttrValue
from .errors import EnumErrorKind, Error, FlagError
from .values import (
    BoolValue,
    Float32Value,
    FloatValue,
    IntValue,
    OptionalValue,
    StrValue,
    Value,
)

_TUP_HELP_NAMES: tuple[str, ...] = ("help", "h")

_DICT_VALUE_TYPES: dict[type, Callable[[], Value[Any]]] = {
    bool: BoolValue,
    int: IntValue,
    float: FloatValue,
    str: StrValue,
}


@dataclass(frozen=True, slots=True)
class SpecFlag:
    """
    Registry entry binding a flag name to a ``Value``.

    Attributes:
        name (str): Flag name without leading dashes.
        value (Value): Storage the flag writes into.
        usage (str): Help text for usage rendering by the caller.
        is_bool (bool): Whether the flag may be given without a value.
    """

    name: str
    value: Value[Any]
    usage: str = ""
    is_bool: bool = False

    @property
    def default_text(self) -> str:
        return str(self.value)


class FlagSet:
    """
    A set of named flags plus the positional arguments left after parsing.

    Registration replaces silently on name reuse. ``parse`` may be called more
    than once; each call re-applies flags to the same values and replaces
    ``args``.
    """

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self._flags: dict[str, SpecFlag] = {}
        self._args: list[str] = []
        self._set_flags: list[str] = []
        self._parsed = False

    ############################################################################
    # #region Registration
    def var(self, value: Value[Any], name: str, usage: str = "") -> SpecFlag:
        """
        Register ``value`` under ``name``.

        Args:
            value (Value): Storage the flag writes into.
            name (str): Flag name without dashes.
            usage (str, optional): Help text. Defaults to "".

        Raises:
            TypeError: If ``value`` is not a ``Value``.
            ValueError: If ``name`` is empty.

        Returns:
            SpecFlag: The registered entry.
        """
        if not isinstance(value, Value):
            raise TypeError(f"Flag value must be a Value, got {type(value)!r}")
        if not name:
            raise ValueError("Flag name must be non-empty")

        c_name = str(name)
        if c_name in self._flags:
            logger.debug(f"Flag redefined: -{c_name}")
        spec = SpecFlag(name=c_name, value=value, usage=usage, is_bool=value.is_bool)
        self._flags[c_name] = spec
        logger.debug(f"Registered flag -{c_name} ({type(value).__name__})")
        return spec

    def bool_var(self, name: str, default: bool = False, usage: str = "") -> BoolValue:
        v = BoolValue(default)
        self.var(v, name, usage)
        return v

    def int_var(self, name: str, default: int = 0, usage: str = "") -> IntValue:
        v = IntValue(default)
        self.var(v, name, usage)
        return v

    def float_var(self, name: str, default: float = 0.0, usage: str = "") -> FloatValue:
        v = FloatValue(default)
        self.var(v, name, usage)
        return v

    def float32_var(
        self, name: str, default: float = 0.0, usage: str = ""
    ) -> Float32Value:
        v = Float32Value(default)
        self.var(v, name, usage)
        return v

    def str_var(self, name: str, default: str = "", usage: str = "") -> StrValue:
        v = StrValue(default)
        self.var(v, name, usage)
        return v

    def optional_var(self, kind: type, name: str, usage: str = "") -> OptionalValue:
        """
        Register an optional flag of built-in type ``kind``.

        The value stays ``None`` until the flag is given with a valid token.
        Optional booleans behave as boolean flags.
        """
        try:
            factory = _DICT_VALUE_TYPES[kind]
        except KeyError as e:
            supported = ", ".join(t.__name__ for t in _DICT_VALUE_TYPES)
            raise TypeError(
                f"No built-in value for type {kind!r}. Supported types: {supported}."
            ) from e
        v = OptionalValue(factory)
        self.var(v, name, usage)
        return v

    def bind(
        self,
        obj: object,
        attr: str,
        name: str | None = None,
        usage: str = "",
        *,
        kind: type | None = None,
    ) -> SpecFlag:
        """
        Register a flag that writes into ``obj.attr``.

        Args:
            obj (object): Caller-owned container, e.g. a dataclass instance.
            attr (str): Attribute to assign.
            name (str | None, optional): Flag name. Defaults to ``attr``.
            usage (str, optional): Help text. Defaults to "".
            kind (type | None, optional): Target type; inferred from the
                class annotation or the current value when omitted.

        Returns:
            SpecFlag: The registered entry.
        """
        return self.var(AttrValue.for_attr(obj, attr, kind=kind), name or attr, usage)

    # #endregion
    ############################################################################
    # #region Queries
    @property
    def parsed(self) -> bool:
        return self._parsed

    @property
    def args(self) -> tuple[str, ...]:
        return tuple(self._args)

    def n_args(self) -> int:
        return len(self._args)

    def arg(self, i: int) -> str:
        """Return the ``i``-th positional argument, or "" when out of range."""
        if 0 <= i < len(self._args):
            return self._args[i]
        return ""

    def n_flags(self) -> int:
        """Number of distinct flags set by the last parse."""
        return len(self._set_flags)

    def list_set_flags(self) -> list[SpecFlag]:
        return [self._flags[k] for k in self._set_flags if k in self._flags]

    def lookup(self, name: str) -> SpecFlag | None:
        return self._flags.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._flags

    def __len__(self) -> int:
        return len(self._flags)

    def list_flags(
        self, *, kind_sort: Literal["name", "insertion"] = "name"
    ) -> list[SpecFlag]:
        """
        Return registered flags for usage rendering.

        Args:
            kind_sort (Literal["name", "insertion"], optional): ``"name"``
                sorts lexically, ``"insertion"`` keeps registration order.
                Defaults to "name".
        """
        if kind_sort == "name":
            return [self._flags[k] for k in sorted(self._flags)]
        if kind_sort == "insertion":
            return list(self._flags.values())
        raise ValueError(f"Unknown kind_sort: {kind_sort!r}")

    # #endregion
    ############################################################################
    # #region Parsing
    def parse(self, argv: Sequence[str]) -> Error | None:
        """
        Parse a full argument vector, program name included.

        Flags are applied in order until the first error; values set before
        the error keep their new contents, the failing flag's value does not
        change. Positional arguments are recorded only on success.

        Args:
            argv (Sequence[str]): Tokens, ``argv[0]`` being the program name.

        Returns:
            Error | None: ``None`` on success, otherwise why parsing stopped.
        """
        self._parsed = True
        self._args = []
        self._set_flags = []

        if len(argv) < 1:
            return self._fail(EnumErrorKind.NUM_ARGS, "at least 1 argument is needed")

        if self.name is None:
            self.name = argv[0]

        l_tokens = list(argv[1:])
        i = 0
        while i < len(l_tokens):
            c_token = l_tokens[i]
            if len(c_token) < 2 or c_token[0] != "-":
                break

            n_dashes = 1
            if c_token[1] == "-":
                n_dashes = 2
                if len(c_token) == 2:
                    i += 1
                    break
            i += 1

            c_body = c_token[n_dashes:]
            if c_body[0] in "-=":
                return self._fail(EnumErrorKind.BAD_SYNTAX, f"bad flag syntax: {c_token}")

            c_name, sep, c_value = c_body.partition("=")
            if_has_value = bool(sep)

            spec = self._flags.get(c_name)
            if spec is None:
                if c_name in _TUP_HELP_NAMES:
                    logger.debug(f"Help requested via {c_token}")
                    return Error.help()
                return self._fail(
                    EnumErrorKind.UNDEFINED_FLAG,
                    f"flag provided but not defined: -{c_name}",
                )

            if spec.is_bool:
                if not if_has_value:
                    c_value = "true"
            elif not if_has_value:
                if i >= len(l_tokens):
                    return self._fail(
                        EnumErrorKind.MISSING_VALUE,
                        f"flag needs an argument: -{c_name}",
                    )
                c_value = l_tokens[i]
                i += 1

            try:
                spec.value.set(c_value)
            except FlagError as e:
                c_kind = "boolean value" if spec.is_bool else "value"
                return self._fail(
                    EnumErrorKind.BAD_VALUE,
                    f"invalid {c_kind} {c_value!r} for flag -{c_name}: {e.message}",
                )
            logger.debug(f"Set flag -{c_name}={c_value!r}")
            if c_name not in self._set_flags:
                self._set_flags.append(c_name)

        self._args = l_tokens[i:]
        logger.debug(f"Parsed {len(self._set_flags)} flag(s), {len(self._args)} arg(s)")
        return None

    def _fail(self, kind: EnumErrorKind, message: str) -> Error:
        logger.debug(f"Parse stopped [{kind}]: {message}")
        return Error(kind, message)

    # #endregion
