"""Unit tests for the value conversion shared by the columnar boundaries."""

from __future__ import annotations

import datetime

from flatframe import NULL, DataType, Field, Number, Value
from flatframe._boundary import shared_type, storage_column, to_value


class TestStorageColumn:
    def test_declared_dtype_kept(self) -> None:
        values = [Value.string("x")]
        assert storage_column(Field("a", DataType.STRING), values) == (DataType.STRING, values)

    def test_weak_column_takes_shared_type(self) -> None:
        values = [Value.from_python(1), NULL]
        assert storage_column(Field("a"), values) == (DataType.INT64, values)

    def test_mixed_column_is_stringified(self) -> None:
        dtype, values = storage_column(Field("a"), [Value.from_python(1), Value.string("x"), NULL])
        assert dtype is DataType.STRING
        assert values == [Value.string("1"), Value.string("x"), NULL]

    def test_shared_type_of_nulls(self) -> None:
        assert shared_type([NULL, NULL]) is None


class TestToValue:
    def test_none_is_null(self) -> None:
        assert to_value(None, DataType.INT8) == NULL

    def test_numbers_take_the_column_width(self) -> None:
        assert to_value(3, DataType.UINT16) == Value.number(Number.uint16(3))

    def test_map_pairs(self) -> None:
        assert to_value([("k", 1)], DataType.MAP) == Value.map({"k": 1})

    def test_aware_datetime_is_utc(self) -> None:
        tz = datetime.timezone(datetime.timedelta(hours=2))
        aware = datetime.datetime(2024, 1, 1, 14, tzinfo=tz)
        assert to_value(aware, DataType.DATE) == Value.date(datetime.datetime(2024, 1, 1, 12))
