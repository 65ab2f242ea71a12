"""Unit tests for configured conversions."""

from __future__ import annotations

import datetime

import pytest

from flatframe import (
    NULL,
    DataFrame,
    DataType,
    DecodeBinary,
    EncodeString,
    FormatDateTime,
    IllegalConversion,
    ParseDateError,
    ParseDateTime,
    Value,
    convert,
)


class TestParseDateTime:
    def test_parses(self) -> None:
        result = convert(Value.string("2019-09-05 18:14:04"), ParseDateTime("%Y-%m-%d %H:%M:%S"))
        assert result == Value.date(datetime.datetime(2019, 9, 5, 18, 14, 4))

    def test_bad_input(self) -> None:
        with pytest.raises(ParseDateError) as excinfo:
            convert(Value.string("yesterday"), ParseDateTime("%Y-%m-%d"))
        assert excinfo.value.value == "yesterday"
        assert excinfo.value.format == "%Y-%m-%d"
        assert excinfo.value.message

    def test_wrong_source_type(self) -> None:
        with pytest.raises(IllegalConversion):
            convert(Value.from_python(1), ParseDateTime("%Y"))

    def test_null_passes_through(self) -> None:
        assert convert(NULL, ParseDateTime("%Y")) is NULL

    def test_offset_is_dropped(self) -> None:
        result = ParseDateTime("%Y-%m-%d %H:%M%z")(Value.string("2020-01-01 10:00+0200"))
        assert result.as_date() == datetime.datetime(2020, 1, 1, 10, 0)


class TestOtherConversions:
    def test_format(self) -> None:
        value = Value.date(datetime.datetime(2020, 2, 3))
        assert convert(value, FormatDateTime("%d/%m/%Y")) == Value.string("03/02/2020")

    def test_encode_decode(self) -> None:
        encoded = convert(Value.string("héllo"), EncodeString())
        assert encoded == Value.binary("héllo".encode())
        assert convert(encoded, DecodeBinary()) == Value.string("héllo")

    def test_encode_failure(self) -> None:
        with pytest.raises(IllegalConversion):
            convert(Value.string("héllo"), EncodeString("ascii"))

    def test_decode_failure(self) -> None:
        with pytest.raises(IllegalConversion):
            convert(Value.binary(b"\xff"), DecodeBinary())

    def test_equality_and_repr(self) -> None:
        assert ParseDateTime("%Y") == ParseDateTime("%Y")
        assert ParseDateTime("%Y") != FormatDateTime("%Y")
        assert repr(EncodeString("ascii")) == "EncodeString('ascii')"


class TestConvertColumn:
    def test_returns_new_dtype_and_retypes(self) -> None:
        df = DataFrame(["when"], [("2019-09-05 18:14:04",), (None,)])
        dtype = df.convert_column("when", ParseDateTime("%Y-%m-%d %H:%M:%S"))
        assert dtype is DataType.DATE
        assert df.schema.get_field("when").dtype is DataType.DATE  # type: ignore[union-attr]
        assert df[0, "when"] == Value.date(datetime.datetime(2019, 9, 5, 18, 14, 4))
        assert df[1, "when"] is NULL

    def test_failure_changes_nothing(self) -> None:
        df = DataFrame(["when"], [("2019-09-05",), ("bad",)])
        with pytest.raises(ParseDateError):
            df.convert_column("when", ParseDateTime("%Y-%m-%d"))
        assert df.column_values("when") == [Value.string("2019-09-05"), Value.string("bad")]
        assert df.schema.get_field("when").dtype is DataType.ANY  # type: ignore[union-attr]
