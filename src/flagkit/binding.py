"""Bind flags to attributes of caller-owned objects.

``AttrValue`` writes through ``setattr`` so a flag can fill a dataclass
instance, an ``argparse.Namespace``-like object, or a plain config class. The
converter is chosen from the attribute's type, read from class annotations
first and from the current value second.
"""

import types
import typing
from collections.abc import Callable
from typing import Any, NamedTuple

from .values import (
    Converter,
    Value,
    convert_bool,
    convert_float,
    convert_int,
    convert_str,
)

# keyed by exact type, so bool never falls through to int
_DICT_CONVERTERS: dict[type, Converter[Any]] = {
    bool: convert_bool,
    int: convert_int,
    float: convert_float,
    str: convert_str,
}


class SpecAttrKind(NamedTuple):
    kind: type
    if_optional: bool


def select_converter(kind: type) -> Converter[Any]:
    """
    Return the built-in converter for ``kind``.

    Raises:
        TypeError: If ``kind`` has no built-in converter. Implement ``Value``
            for such types and register it with ``FlagSet.var``.
    """
    try:
        return _DICT_CONVERTERS[kind]
    except KeyError as e:
        supported = ", ".join(t.__name__ for t in _DICT_CONVERTERS)
        raise TypeError(
            f"No converter for type {kind!r}. Supported types: {supported}."
        ) from e


def _unwrap_optional(hint: Any) -> SpecAttrKind | None:
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        l_args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(l_args) == 1 and isinstance(l_args[0], type):
            return SpecAttrKind(l_args[0], True)
        return None
    if isinstance(hint, type):
        return SpecAttrKind(hint, False)
    return None


def resolve_attr_kind(obj: object, attr: str) -> SpecAttrKind:
    """
    Infer the target type of ``obj.attr``.

    Class-level annotations win; ``T | None`` and ``Optional[T]`` report
    ``if_optional=True``. Without an annotation the type of the current value
    is used, which must then not be ``None``.

    Raises:
        AttributeError: If ``obj`` has neither an annotation nor a value for
            ``attr``.
        TypeError: If the type cannot be determined.
    """
    try:
        dict_hints = typing.get_type_hints(type(obj))
    except (NameError, TypeError):
        dict_hints = {}

    if attr in dict_hints:
        spec_kind = _unwrap_optional(dict_hints[attr])
        if spec_kind is None:
            raise TypeError(
                f"Unsupported annotation for attribute {attr!r}: {dict_hints[attr]!r}"
            )
        return spec_kind

    current = getattr(obj, attr)
    if current is None:
        raise TypeError(
            f"Cannot infer the type of attribute {attr!r} from None; pass `kind=`."
        )
    return SpecAttrKind(type(current), False)


class AttrValue(Value[Any]):
    """
    ``Value`` that stores into ``getattr(obj, attr)``.

    The attribute is assigned only after ``converter`` returns, so a rejected
    token leaves it untouched. An optional attribute still holding ``None``
    keeps it after a failed conversion.
    """

    def __init__(
        self,
        obj: object,
        attr: str,
        converter: Callable[[str], Any],
        *,
        if_bool: bool = False,
    ):
        self.obj = obj
        self.attr = attr
        self._converter = converter
        self.is_bool = if_bool

    @classmethod
    def for_attr(
        cls, obj: object, attr: str, *, kind: type | None = None
    ) -> "AttrValue":
        if kind is None:
            kind = resolve_attr_kind(obj, attr).kind
        return cls(obj, attr, select_converter(kind), if_bool=kind is bool)

    def set(self, text: str) -> None:
        setattr(self.obj, self.attr, self._converter(text))

    def get(self) -> Any:
        return getattr(self.obj, self.attr, None)

    def __str__(self) -> str:
        current = self.get()
        if current is None:
            return ""
        if isinstance(current, bool):
            return "true" if current else "false"
        if isinstance(current, float):
            return repr(current)
        return str(current)

    def __repr__(self) -> str:
        return f"AttrValue({type(self.obj).__name__}.{self.attr}={self.get()!r})"
