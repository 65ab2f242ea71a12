"""Integration tests for dtype mapping and in-memory Polars conversion."""

from __future__ import annotations

import datetime

import pytest

pl = pytest.importorskip("polars")

from flatframe import NULL, DataFrame, DataType, Field, Number, Schema, Value  # noqa: E402
from flatframe_polars import (  # noqa: E402
    from_polars,
    map_flatframe_dtype,
    map_polars_dtype,
    to_polars,
)

# ---------------------------------------------------------------------------
# Dtype mapping
# ---------------------------------------------------------------------------


class TestDtypeMapping:
    @pytest.mark.parametrize(
        ("dtype", "expected"),
        [
            (DataType.BOOL, pl.Boolean),
            (DataType.UINT8, pl.UInt8),
            (DataType.INT64, pl.Int64),
            (DataType.FLOAT, pl.Float32),
            (DataType.DOUBLE, pl.Float64),
            (DataType.STRING, pl.String),
            (DataType.BINARY, pl.Binary),
            (DataType.DATE, pl.Datetime),
        ],
    )
    def test_to_polars(self, dtype: DataType, expected: type) -> None:
        assert isinstance(map_flatframe_dtype(dtype), expected)

    @pytest.mark.parametrize(
        "dtype", [DataType.ANY, DataType.NULL, DataType.DECIMAL, DataType.ARRAY, DataType.MAP]
    )
    def test_unsupported(self, dtype: DataType) -> None:
        with pytest.raises(TypeError, match="Unsupported flatframe dtype"):
            map_flatframe_dtype(dtype)

    def test_from_polars_instances_and_classes(self) -> None:
        assert map_polars_dtype(pl.UInt16()) is DataType.UINT16
        assert map_polars_dtype(pl.Int32) is DataType.INT32
        assert map_polars_dtype(pl.Datetime("ms")) is DataType.DATE
        assert map_polars_dtype(pl.List(pl.Int64)) is DataType.ARRAY

    def test_from_polars_unsupported(self) -> None:
        with pytest.raises(TypeError, match="Unsupported Polars dtype"):
            map_polars_dtype(pl.Object())


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------


class TestToPolars:
    def test_typed_columns(self) -> None:
        schema = Schema([Field("id", DataType.UINT32), Field("name", DataType.STRING)])
        df = DataFrame(schema, [(Number.uint32(1), "a"), (Number.uint32(2), None)])
        out = to_polars(df)
        assert out.schema["id"] == pl.UInt32
        assert out.schema["name"] == pl.String
        assert out.to_dict(as_series=False) == {"id": [1, 2], "name": ["a", None]}

    def test_weak_column_takes_shared_type(self) -> None:
        out = to_polars(DataFrame(["a"], [(1,), (None,), (3,)]))
        assert out.schema["a"] == pl.Int64

    def test_mixed_column_becomes_strings(self) -> None:
        out = to_polars(DataFrame(["a"], [(1,), ("x",)]))
        assert out.schema["a"] == pl.String
        assert out["a"].to_list() == ["1", "x"]


class TestFromPolars:
    def test_values_and_schema(self) -> None:
        data = pl.DataFrame(
            {
                "id": pl.Series([1, 2], dtype=pl.UInt8),
                "when": [datetime.datetime(2024, 1, 1), None],
            }
        )
        df = from_polars(data)
        assert df.schema.dtypes() == [DataType.UINT8, DataType.DATE]
        assert df[0, "id"] == Value.number(Number.uint8(1))
        assert df[0, "when"] == Value.date(datetime.datetime(2024, 1, 1))
        assert df[1, "when"] == NULL

    def test_fields_are_nullable(self) -> None:
        df = from_polars(pl.DataFrame({"a": [1]}))
        assert all(field.nullable for field in df.schema)

    def test_roundtrip(self) -> None:
        schema = Schema([Field("x", DataType.DOUBLE), Field("flag", DataType.BOOL)])
        df = DataFrame(schema, [(1.5, True), (None, False)])
        assert from_polars(to_polars(df)) == df
