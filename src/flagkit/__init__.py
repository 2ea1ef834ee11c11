from importlib.metadata import PackageNotFoundError, version

from .binding import AttrValue, resolve_attr_kind, select_converter
from .errors import EnumErrorKind, Error, FlagError
from .flagset import FlagSet, SpecFlag
from .values import (
    INT_MAX,
    INT_MIN,
    BoolValue,
    ConvertedValue,
    Float32Value,
    FloatValue,
    IntValue,
    OptionalValue,
    StrValue,
    Value,
    convert_bool,
    convert_float,
    convert_float32,
    convert_int,
    convert_str,
)

try:
    __version__ = version("flagkit")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "FlagSet",
    "SpecFlag",
    # Errors
    "EnumErrorKind",
    "Error",
    "FlagError",
    # Values
    "Value",
    "ConvertedValue",
    "BoolValue",
    "IntValue",
    "FloatValue",
    "Float32Value",
    "StrValue",
    "OptionalValue",
    "AttrValue",
    # Converters
    "convert_bool",
    "convert_int",
    "convert_float",
    "convert_float32",
    "convert_str",
    "select_converter",
    "resolve_attr_kind",
    "INT_MIN",
    "INT_MAX",
]
