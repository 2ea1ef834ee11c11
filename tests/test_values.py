from __future__ import annotations

import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from flagkit import (  # noqa: E402
    INT_MAX,
    INT_MIN,
    BoolValue,
    FlagError,
    FlagSet,
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
)


@pytest.mark.parametrize("text", ["true", "t", "yes", "y", ""])
def test_convert_bool_true_literals(text: str) -> None:
    assert convert_bool(text) is True


@pytest.mark.parametrize("text", ["false", "f", "no", "n"])
def test_convert_bool_false_literals(text: str) -> None:
    assert convert_bool(text) is False


@pytest.mark.parametrize("text", ["True", "1", "0", "on", "YES"])
def test_convert_bool_is_case_sensitive_and_closed(text: str) -> None:
    with pytest.raises(FlagError, match="unknown boolean value"):
        convert_bool(text)


def test_convert_int_bounds() -> None:
    assert convert_int(str(INT_MAX)) == INT_MAX
    assert convert_int(str(INT_MIN)) == INT_MIN
    with pytest.raises(FlagError, match="out of range"):
        convert_int(str(INT_MAX + 1))
    with pytest.raises(FlagError, match="out of range"):
        convert_int(str(INT_MIN - 1))


@pytest.mark.parametrize("text", ["+1", " 1", "1 ", "1_000", "", "-", "0x10", "١"])
def test_convert_int_rejects_non_strict_forms(text: str) -> None:
    with pytest.raises(FlagError, match="not an integer"):
        convert_int(text)


@pytest.mark.parametrize(
    ("text", "expected"),
    [("0", 0.0), (".5", 0.5), ("2.", 2.0), ("-3.25", -3.25), ("1e3", 1000.0)],
)
def test_convert_float_accepts(text: str, expected: float) -> None:
    assert convert_float(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["abc", "+1", "inf", "nan", "1.2.3", "1.4abc", ""])
def test_convert_float_rejects(text: str) -> None:
    with pytest.raises(FlagError, match="not a float"):
        convert_float(text)


def test_convert_float_overflow() -> None:
    with pytest.raises(FlagError, match="out of range"):
        convert_float("1e400")
    with pytest.raises(FlagError, match="out of range"):
        convert_float32("1e39")


def test_convert_float32_rounds_to_single_precision() -> None:
    assert convert_float32("0.1") != 0.1
    assert convert_float32("0.1") == pytest.approx(0.1, rel=1e-7)


@pytest.mark.parametrize(
    "value",
    [BoolValue(), IntValue(), FloatValue(), Float32Value(), StrValue()],
)
def test_failed_set_leaves_value_unchanged(value: Value) -> None:
    before = value.get()
    if isinstance(value, StrValue):
        value.set("anything")
        assert value.get() == "anything"
        return
    with pytest.raises(FlagError):
        value.set("not-a-value")
    assert value.get() == before


@pytest.mark.parametrize(
    ("value", "token"),
    [
        (BoolValue(), "f"),
        (IntValue(), "-42"),
        (FloatValue(), "-1.93"),
        (Float32Value(), "1.4"),
        (StrValue(), "a b=c"),
        (OptionalValue(BoolValue), "n"),
        (OptionalValue(FloatValue), "1.4"),
    ],
)
def test_serialized_value_converts_back(value: Value, token: str) -> None:
    value.set(token)
    first = value.get()

    value.set(str(value))

    assert value.get() == first


def test_optional_value_unset_then_set() -> None:
    v = OptionalValue(FloatValue)
    assert v.get() is None
    assert str(v) == ""
    assert v.is_set is False

    with pytest.raises(FlagError):
        v.set("x")
    assert v.get() is None

    v.set("2.5")
    assert v.get() == 2.5
    assert str(v) == "2.5"

    with pytest.raises(FlagError):
        v.set("y")
    assert v.get() == 2.5


class CsvValue(Value[list[str]]):
    def __init__(self) -> None:
        self.items: list[str] = []

    def set(self, text: str) -> None:
        if not text:
            raise FlagError("empty list")
        self.items = text.split(",")

    def get(self) -> list[str]:
        return self.items

    def __str__(self) -> str:
        return ",".join(self.items)


def test_custom_value_plugs_into_flagset() -> None:
    fs = FlagSet()
    tags = CsvValue()
    fs.var(tags, "tags", "Comma separated tags.")

    assert fs.parse(["program", "--tags", "a,b,c"]) is None
    assert tags.get() == ["a", "b", "c"]

    err = fs.parse(["program", "--tags="])
    assert err is not None
    assert "empty list" in err.message
    assert tags.get() == ["a", "b", "c"]


def test_optional_over_custom_value() -> None:
    v = OptionalValue(CsvValue)
    v.set("x,y")
    assert v.get() == ["x", "y"]
