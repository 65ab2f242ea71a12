"""Unit tests for Value: variants, from_python, equality, ordering, display."""

from __future__ import annotations

import datetime
import decimal

import pytest

from flatframe import NULL, DataType, Kind, Number, Value, ValueMap, row, val
from flatframe.errors import FailedNumericCast

# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestFromPython:
    def test_none_is_null(self) -> None:
        assert Value.from_python(None) is NULL
        assert Value.null() is NULL

    def test_bool(self) -> None:
        value = Value.from_python(True)
        assert value.kind is Kind.BOOL
        assert value.as_bool() is True

    def test_int(self) -> None:
        value = Value.from_python(3)
        assert value.type_of() is DataType.INT64
        assert value.as_number() == Number.int64(3)

    def test_float(self) -> None:
        assert Value.from_python(2.5).type_of() is DataType.DOUBLE

    def test_decimal(self) -> None:
        assert Value.from_python(decimal.Decimal("1.5")).type_of() is DataType.DECIMAL

    def test_str(self) -> None:
        assert Value.from_python("x") == Value.string("x")

    def test_bytes(self) -> None:
        value = Value.from_python(bytearray(b"ab"))
        assert value.as_binary() == b"ab"

    def test_date_becomes_midnight(self) -> None:
        value = Value.from_python(datetime.date(2019, 9, 5))
        assert value.as_date() == datetime.datetime(2019, 9, 5, 0, 0)

    def test_aware_datetime_rejected(self) -> None:
        aware = datetime.datetime(2019, 9, 5, tzinfo=datetime.timezone.utc)
        with pytest.raises(ValueError):
            Value.from_python(aware)

    def test_list_is_array(self) -> None:
        value = Value.from_python([1, "a", None])
        assert value.kind is Kind.ARRAY
        assert value.as_array() == (Value.from_python(1), Value.string("a"), NULL)

    def test_dict_is_sorted_map(self) -> None:
        value = Value.from_python({"b": 1, "a": 2})
        assert value.kind is Kind.MAP
        assert list(value.as_map()) == ["a", "b"]

    def test_value_passes_through(self) -> None:
        original = Value.string("x")
        assert Value.from_python(original) is original

    def test_number_is_wrapped(self) -> None:
        assert Value.from_python(Number.uint8(1)).type_of() is DataType.UINT8

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError):
            Value.from_python(object())

    def test_to_python_inverse(self) -> None:
        native = {"a": [1, "x", None], "b": True}
        assert Value.from_python(native).to_python() == native


class TestHelpers:
    def test_val_without_dtype(self) -> None:
        assert val("x") == Value.string("x")

    def test_val_with_dtype_casts(self) -> None:
        assert val(7, DataType.UINT8) == Value.number(Number.uint8(7))

    def test_val_with_dtype_checks_range(self) -> None:
        with pytest.raises(FailedNumericCast):
            val(300, DataType.UINT8)

    def test_row(self) -> None:
        assert row(1, "a", None) == [Value.from_python(1), Value.string("a"), NULL]


# ---------------------------------------------------------------------------
# type_of
# ---------------------------------------------------------------------------


class TestTypeOf:
    @pytest.mark.parametrize(
        ("value", "dtype"),
        [
            (NULL, DataType.NULL),
            (Value.bool(False), DataType.BOOL),
            (Value.string(""), DataType.STRING),
            (Value.array([]), DataType.ARRAY),
            (Value.map({}), DataType.MAP),
            (Value.number(Number.int8(1)), DataType.INT8),
            (Value.number(Number.float32(1.0)), DataType.FLOAT),
            (Value.date(datetime.datetime(2020, 1, 1)), DataType.DATE),
            (Value.binary(b""), DataType.BINARY),
        ],
    )
    def test_type_of(self, value: Value, dtype: DataType) -> None:
        assert value.type_of() is dtype


# ---------------------------------------------------------------------------
# Equality and ordering
# ---------------------------------------------------------------------------


class TestEquality:
    def test_same_variant(self) -> None:
        assert Value.string("a") == Value.string("a")
        assert Value.string("a") != Value.string("b")

    def test_cross_variant_is_false(self) -> None:
        assert (Value.string("1") == Value.from_python(1)) is False
        assert (Value.bool(True) == Value.from_python(1)) is False

    def test_numbers_of_different_width_differ(self) -> None:
        assert Value.number(Number.uint8(1)) != Value.number(Number.int32(1))

    def test_hashable(self) -> None:
        values = {Value.string("a"), Value.string("a"), Value.from_python([1, 2])}
        assert len(values) == 2


class TestOrdering:
    def test_strings(self) -> None:
        assert Value.string("a") < Value.string("b")
        assert Value.string("a").partial_cmp(Value.string("a")) == 0

    def test_numbers(self) -> None:
        assert Value.from_python(1) < Value.from_python(2)

    def test_cross_variant_is_incomparable(self) -> None:
        a, b = Value.string("1"), Value.from_python(1)
        assert a.partial_cmp(b) is None
        assert not a < b
        assert not a > b
        assert not a <= b

    def test_maps_are_incomparable(self) -> None:
        assert Value.map({"a": 1}).partial_cmp(Value.map({"a": 1})) is None

    def test_arrays_compare_elementwise(self) -> None:
        assert Value.from_python([1, 2]) < Value.from_python([1, 3])
        assert Value.from_python([1]) < Value.from_python([1, 0])

    def test_dates(self) -> None:
        early = Value.date(datetime.datetime(2020, 1, 1))
        late = Value.date(datetime.datetime(2021, 1, 1))
        assert early < late


# ---------------------------------------------------------------------------
# Map lookup
# ---------------------------------------------------------------------------


class TestMapAccess:
    def test_lookup(self) -> None:
        value = Value.map({"a": 1})
        assert value["a"] == Value.from_python(1)

    def test_missing_key_is_null(self) -> None:
        assert Value.map({"a": 1})["z"] is NULL

    def test_non_map_lookup_is_null(self) -> None:
        assert Value.string("abc")["a"] is NULL

    def test_array_index(self) -> None:
        value = Value.from_python([1, 2])
        assert value[1] == Value.from_python(2)
        assert value[5] is NULL

    def test_value_map_contains(self) -> None:
        mapping = ValueMap({"k": "v"})
        assert mapping.contains("k")
        assert not mapping.contains("v")

    def test_non_string_key_rejected(self) -> None:
        with pytest.raises(TypeError):
            ValueMap({1: "v"})  # type: ignore[dict-item]


# ---------------------------------------------------------------------------
# Display and serialization
# ---------------------------------------------------------------------------


class TestDisplay:
    @pytest.mark.parametrize(
        ("value", "text"),
        [
            (NULL, "null"),
            (Value.bool(True), "true"),
            (Value.string("hi"), "hi"),
            (Value.from_python(42), "42"),
            (Value.date(datetime.datetime(2019, 9, 5, 18, 14, 4)), "2019-09-05 18:14:04"),
            (Value.binary(b"abc"), "<binary 3 bytes>"),
            (Value.from_python([1, 2]), "<array 2 items>"),
            (Value.map({"a": 1}), "<map 1 keys>"),
        ],
    )
    def test_str_is_total(self, value: Value, text: str) -> None:
        assert str(value) == text

    def test_tagged_dict(self) -> None:
        assert Value.string("x").to_dict() == {"type": "string", "value": "x"}
        assert Value.from_python(1).to_dict() == {
            "type": "number",
            "value": {"type": "int64", "value": 1},
        }

    def test_json_preserves_structure(self) -> None:
        value = Value.from_python(
            {"when": datetime.datetime(2020, 5, 1, 12), "raw": b"\x00\x01", "n": [1.5, None]}
        )
        assert Value.from_json(value.to_json()) == value
