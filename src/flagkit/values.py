"""Value converters and bound values.

A converter turns one command-line token into a typed value or raises
``FlagError``. A ``Value`` couples a converter with the storage a flag writes
to; it is the single "set-from-string" seam ``FlagSet`` talks to.

Custom types plug in by subclassing ``Value`` (or by handing a converter to
``ConvertedValue``):

    >>> class CsvValue(Value[list[str]]):
    ...     def __init__(self) -> None:
    ...         self.items: list[str] = []
    ...     def set(self, text: str) -> None:
    ...         self.items = text.split(",")
    ...     def get(self) -> list[str]:
    ...         return self.items
    ...     def __str__(self) -> str:
    ...         return ",".join(self.items)
"""

import math
import re
import struct
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, TypeVar

from .errors import FlagError

T = TypeVar("T")

Converter = Callable[[str], T]

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

_SET_TRUE: frozenset[str] = frozenset({"true", "t", "yes", "y"})
_SET_FALSE: frozenset[str] = frozenset({"false", "f", "no", "n"})

_RE_INT = re.compile(r"-?[0-9]+")
_RE_FLOAT = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][-+]?[0-9]+)?")


################################################################################
# #region Converters
def convert_bool(text: str) -> bool:
    """Case-sensitive boolean literal; the empty string reads as ``True``."""
    if not text or text in _SET_TRUE:
        return True
    if text in _SET_FALSE:
        return False
    raise FlagError("unknown boolean value")


def convert_int(text: str) -> int:
    """
    Parse a signed 64-bit integer.

    Only an optional leading ``-`` followed by ASCII digits is accepted, so
    ``+1``, ``" 1"`` and ``1_000`` are all rejected even though ``int()``
    would take them.

    Raises:
        FlagError: If the token is not an integer or does not fit in 64 bits.
    """
    if not _RE_INT.fullmatch(text):
        raise FlagError("number is not an integer")
    n_value = int(text)
    if not INT_MIN <= n_value <= INT_MAX:
        raise FlagError("number is out of range")
    return n_value


def convert_float(text: str) -> float:
    """
    Parse a double-precision number.

    Accepts ``-``, digits, a decimal point and an exponent. Names such as
    ``inf``/``nan`` and a leading ``+`` are rejected.

    Raises:
        FlagError: If the token is not numeric or overflows to infinity.
    """
    if not _RE_FLOAT.fullmatch(text):
        raise FlagError("number is not a float")
    f_value = float(text)
    if math.isinf(f_value):
        raise FlagError("number is out of range")
    return f_value


def convert_float32(text: str) -> float:
    """
    Same grammar as ``convert_float``, rounded to single precision.

    Raises:
        FlagError: If the token is not numeric or lies beyond the
            single-precision range.
    """
    f_value = convert_float(text)
    try:
        (f_single,) = struct.unpack("f", struct.pack("f", f_value))
    except OverflowError as e:
        raise FlagError("number is out of range") from e
    # recent CPython packs out-of-range doubles as inf instead of raising
    if math.isinf(f_single):
        raise FlagError("number is out of range")
    return f_single


def convert_str(text: str) -> str:
    return text


# #endregion
################################################################################
# #region Values
class Value(ABC, Generic[T]):
    """
    Storage a flag writes into.

    Implementations must validate before assigning: when ``set`` raises
    ``FlagError`` the value returned by ``get`` is unchanged.
    """

    is_bool: bool = False

    @abstractmethod
    def set(self, text: str) -> None: ...

    @abstractmethod
    def get(self) -> T: ...

    def __str__(self) -> str:
        return str(self.get())


class ConvertedValue(Value[T]):
    """
    ``Value`` backed by a converter function and an in-object slot.

    Args:
        converter (Converter[T]): Token-to-value function raising ``FlagError``.
        default (T): Initial value, kept until a successful ``set``.
        if_bool (bool, optional): Whether the flag may appear without a value.
            Defaults to False.
    """

    def __init__(self, converter: Converter[T], default: T, *, if_bool: bool = False):
        self._converter = converter
        self.value = default
        self.is_bool = if_bool

    def set(self, text: str) -> None:
        self.value = self._converter(text)

    def get(self) -> T:
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class BoolValue(ConvertedValue[bool]):
    def __init__(self, default: bool = False):
        super().__init__(convert_bool, default, if_bool=True)

    def __str__(self) -> str:
        return "true" if self.value else "false"


class IntValue(ConvertedValue[int]):
    def __init__(self, default: int = 0):
        super().__init__(convert_int, default)


class FloatValue(ConvertedValue[float]):
    def __init__(self, default: float = 0.0):
        super().__init__(convert_float, default)

    def __str__(self) -> str:
        return repr(self.value)


class Float32Value(ConvertedValue[float]):
    def __init__(self, default: float = 0.0):
        super().__init__(convert_float32, default)

    def __str__(self) -> str:
        return repr(self.value)


class StrValue(ConvertedValue[str]):
    def __init__(self, default: str = ""):
        super().__init__(convert_str, default)

    def __str__(self) -> str:
        return self.value


class OptionalValue(Value[T | None]):
    """
    Optional slot over another value type.

    Each ``set`` converts into a fresh inner value built by ``factory`` and
    commits the result only when the conversion succeeded; a failed ``set``
    leaves the optional exactly as it was (``None`` if never set).

    Examples:
        >>> v = OptionalValue(IntValue)
        >>> v.get() is None
        True
        >>> v.set("3")
        >>> v.get()
        3
    """

    def __init__(self, factory: Callable[[], Value[T]]):
        self._factory = factory
        self.value: T | None = None
        self.is_bool = factory().is_bool

    def set(self, text: str) -> None:
        tmp = self._factory()
        tmp.set(text)
        self.value = tmp.get()

    def get(self) -> T | None:
        return self.value

    @property
    def is_set(self) -> bool:
        return self.value is not None

    def __str__(self) -> str:
        if self.value is None:
            return ""
        tmp = self._factory()
        if isinstance(tmp, ConvertedValue):
            tmp.value = self.value
            return str(tmp)
        return str(self.value)

    def __repr__(self) -> str:
        return f"OptionalValue({self.value!r})"


# #endregion
