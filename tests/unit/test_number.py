"""Unit tests for Number: tagged widths, range checks, accessors, ordering."""

from __future__ import annotations

import decimal
import math

import pytest

from flatframe import DataType, Number

# ---------------------------------------------------------------------------
# Construction and accessors
# ---------------------------------------------------------------------------

_REPRESENTABLE = [
    ("uint8", "as_uint8", DataType.UINT8, 255),
    ("uint16", "as_uint16", DataType.UINT16, 65_535),
    ("uint32", "as_uint32", DataType.UINT32, 4_294_967_295),
    ("uint64", "as_uint64", DataType.UINT64, 2**64 - 1),
    ("int8", "as_int8", DataType.INT8, -128),
    ("int16", "as_int16", DataType.INT16, -32_768),
    ("int32", "as_int32", DataType.INT32, 2**31 - 1),
    ("int64", "as_int64", DataType.INT64, -(2**63)),
    ("float32", "as_float32", DataType.FLOAT, 0.5),
    ("float64", "as_float64", DataType.DOUBLE, 0.1),
    ("decimal", "as_decimal", DataType.DECIMAL, decimal.Decimal("12.345")),
]


class TestConstruction:
    @pytest.mark.parametrize(("ctor", "accessor", "dtype", "payload"), _REPRESENTABLE)
    def test_accessor_returns_payload(
        self, ctor: str, accessor: str, dtype: DataType, payload: object
    ) -> None:
        number = getattr(Number, ctor)(payload)
        assert getattr(number, accessor)() == payload
        assert number.tag is dtype
        assert number.type_of() is dtype

    def test_other_accessors_return_none(self) -> None:
        number = Number.uint8(7)
        assert number.as_uint16() is None
        assert number.as_int64() is None
        assert number.as_float64() is None

    @pytest.mark.parametrize(
        ("ctor", "payload"),
        [("uint8", 256), ("uint8", -1), ("int8", 128), ("uint64", 2**64), ("int64", 2**63)],
    )
    def test_out_of_range_rejected(self, ctor: str, payload: int) -> None:
        with pytest.raises(ValueError, match="out of range"):
            getattr(Number, ctor)(payload)

    def test_bool_is_not_an_integer(self) -> None:
        with pytest.raises(TypeError):
            Number.int32(True)

    def test_float_payload_rejected_for_integer(self) -> None:
        with pytest.raises(TypeError):
            Number.int32(1.5)  # type: ignore[arg-type]

    def test_float32_rounds_to_single_precision(self) -> None:
        number = Number.float32(0.1)
        assert number.value != 0.1
        assert str(number) == "0.1"

    def test_float32_overflow_rejected(self) -> None:
        with pytest.raises(ValueError):
            Number.float32(1e39)

    @pytest.mark.parametrize("ctor", ["float32", "float64"])
    def test_huge_int_rejected(self, ctor: str) -> None:
        with pytest.raises(ValueError, match="out of range"):
            getattr(Number, ctor)(10**400)

    def test_non_numeric_tag_rejected(self) -> None:
        with pytest.raises(TypeError):
            Number(DataType.STRING, 1)


class TestFromPython:
    def test_int_maps_to_int64(self) -> None:
        assert Number.from_python(3).tag is DataType.INT64

    def test_large_int_maps_to_uint64(self) -> None:
        assert Number.from_python(2**63).tag is DataType.UINT64

    def test_float_maps_to_double(self) -> None:
        assert Number.from_python(1.5).tag is DataType.DOUBLE

    def test_decimal_maps_to_decimal(self) -> None:
        assert Number.from_python(decimal.Decimal("1.5")).tag is DataType.DECIMAL

    def test_too_large_int_rejected(self) -> None:
        with pytest.raises(ValueError):
            Number.from_python(2**64)


# ---------------------------------------------------------------------------
# Equality and ordering
# ---------------------------------------------------------------------------


class TestComparison:
    def test_same_tag_equal(self) -> None:
        assert Number.uint8(1) == Number.uint8(1)

    def test_different_tags_not_equal(self) -> None:
        assert Number.uint8(1) != Number.int32(1)

    def test_hash_follows_equality(self) -> None:
        assert len({Number.uint8(1), Number.uint8(1), Number.int8(1)}) == 2

    def test_partial_cmp_same_tag(self) -> None:
        assert Number.int32(1).partial_cmp(Number.int32(2)) == -1
        assert Number.int32(2).partial_cmp(Number.int32(2)) == 0
        assert Number.int32(3).partial_cmp(Number.int32(2)) == 1

    def test_partial_cmp_different_tags_is_none(self) -> None:
        assert Number.int32(1).partial_cmp(Number.int64(2)) is None

    def test_partial_cmp_nan_is_none(self) -> None:
        assert Number.float64(math.nan).partial_cmp(Number.float64(1.0)) is None


# ---------------------------------------------------------------------------
# Display and serialization
# ---------------------------------------------------------------------------


class TestDisplay:
    def test_str(self) -> None:
        assert str(Number.int16(-5)) == "-5"
        assert str(Number.float64(2.5)) == "2.5"

    def test_repr(self) -> None:
        assert repr(Number.uint8(7)) == "Number(uint8, 7)"

    def test_to_dict(self) -> None:
        assert Number.uint16(3).to_dict() == {"type": "uint16", "value": 3}

    def test_decimal_serializes_as_text(self) -> None:
        data = Number.decimal("1.10").to_dict()
        assert data == {"type": "decimal", "value": "1.10"}
        assert Number.from_dict(data) == Number.decimal("1.10")
