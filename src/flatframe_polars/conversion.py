"""Dtype mapping between flatframe and Polars types."""

from __future__ import annotations

import polars as pl

from flatframe import DataType

# ---------------------------------------------------------------------------
# flatframe → Polars mapping
# ---------------------------------------------------------------------------

FLATFRAME_TO_POLARS: dict[DataType, pl.DataType] = {
    DataType.BOOL: pl.Boolean(),
    DataType.UINT8: pl.UInt8(),
    DataType.UINT16: pl.UInt16(),
    DataType.UINT32: pl.UInt32(),
    DataType.UINT64: pl.UInt64(),
    DataType.INT8: pl.Int8(),
    DataType.INT16: pl.Int16(),
    DataType.INT32: pl.Int32(),
    DataType.INT64: pl.Int64(),
    DataType.FLOAT: pl.Float32(),
    DataType.DOUBLE: pl.Float64(),
    DataType.STRING: pl.String(),
    DataType.BINARY: pl.Binary(),
    DataType.DATE: pl.Datetime("us"),
}

# ---------------------------------------------------------------------------
# Polars → flatframe mapping (keyed by Polars DataType class, not instance)
# ---------------------------------------------------------------------------

POLARS_TO_FLATFRAME: dict[type[pl.DataType], DataType] = {
    pl.Boolean: DataType.BOOL,
    pl.UInt8: DataType.UINT8,
    pl.UInt16: DataType.UINT16,
    pl.UInt32: DataType.UINT32,
    pl.UInt64: DataType.UINT64,
    pl.Int8: DataType.INT8,
    pl.Int16: DataType.INT16,
    pl.Int32: DataType.INT32,
    pl.Int64: DataType.INT64,
    pl.Float32: DataType.FLOAT,
    pl.Float64: DataType.DOUBLE,
    pl.Decimal: DataType.DECIMAL,
    pl.String: DataType.STRING,
    pl.Utf8: DataType.STRING,
    pl.Binary: DataType.BINARY,
    pl.Date: DataType.DATE,
    pl.Datetime: DataType.DATE,
    pl.List: DataType.ARRAY,
    pl.Struct: DataType.MAP,
    pl.Null: DataType.ANY,
}


def map_flatframe_dtype(dtype: DataType) -> pl.DataType:
    """Map a flatframe ``DataType`` to a Polars DataType.

    ``DECIMAL``, ``ARRAY`` and ``MAP`` have no fixed Polars counterpart (their
    precision or element types depend on the data), and ``ANY``/``NULL`` are
    not storage types; all of them raise ``TypeError``.
    """
    if dtype in FLATFRAME_TO_POLARS:
        return FLATFRAME_TO_POLARS[dtype]
    msg = f"Unsupported flatframe dtype: {dtype.as_str()}"
    raise TypeError(msg)


def map_polars_dtype(pl_dtype: pl.DataType) -> DataType:
    """Map a Polars DataType instance to a flatframe ``DataType``."""
    dtype_cls = pl_dtype if isinstance(pl_dtype, type) else type(pl_dtype)
    if dtype_cls in POLARS_TO_FLATFRAME:
        return POLARS_TO_FLATFRAME[dtype_cls]
    msg = f"Unsupported Polars dtype: {pl_dtype}"
    raise TypeError(msg)
