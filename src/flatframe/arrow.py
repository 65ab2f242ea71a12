"""pyarrow boundary.

``to_arrow`` turns a frame into a ``pyarrow.Table`` and ``from_arrow`` reads
one back. Field order, names, nullability and declared dtypes survive the
round trip::

    table = to_arrow(df)
    assert from_arrow(table).schema == df.schema

Weakly typed (``ANY``) columns are written with the type their values share,
or as strings when they are mixed. The declared dtype travels in the field
metadata, so such a column is ``ANY`` again after the round trip, but the
cells of a mixed column come back as strings. pyarrow is an optional dependency
(``pip install flatframe[arrow]``) and is only imported when these functions
run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

from flatframe._boundary import storage_column, to_value
from flatframe.dataframe import DataFrame
from flatframe.dtypes import DataType
from flatframe.schema import Field, Schema

if TYPE_CHECKING:
    import pyarrow as pa


DTYPE_KEY = "flatframe.dtype"


def _arrow_types() -> dict[DataType, Any]:
    import pyarrow as pa

    return {
        DataType.BOOL: pa.bool_(),
        DataType.STRING: pa.string(),
        DataType.DATE: pa.timestamp("us"),
        DataType.BINARY: pa.binary(),
        DataType.UINT8: pa.uint8(),
        DataType.UINT16: pa.uint16(),
        DataType.UINT32: pa.uint32(),
        DataType.UINT64: pa.uint64(),
        DataType.INT8: pa.int8(),
        DataType.INT16: pa.int16(),
        DataType.INT32: pa.int32(),
        DataType.INT64: pa.int64(),
        DataType.FLOAT: pa.float32(),
        DataType.DOUBLE: pa.float64(),
    }


def map_arrow_type(arrow_type: pa.DataType) -> DataType:
    """Map a pyarrow type to the matching ``DataType``; unknown types map to ``ANY``."""
    import pyarrow as pa

    for dtype, candidate in _arrow_types().items():
        if arrow_type == candidate:
            return dtype
    if pa.types.is_large_string(arrow_type):
        return DataType.STRING
    if pa.types.is_large_binary(arrow_type) or pa.types.is_fixed_size_binary(arrow_type):
        return DataType.BINARY
    if pa.types.is_timestamp(arrow_type) or pa.types.is_date(arrow_type):
        return DataType.DATE
    if pa.types.is_decimal(arrow_type):
        return DataType.DECIMAL
    if pa.types.is_list(arrow_type) or pa.types.is_large_list(arrow_type):
        return DataType.ARRAY
    if pa.types.is_struct(arrow_type) or pa.types.is_map(arrow_type):
        return DataType.MAP
    return DataType.ANY


def to_arrow(df: DataFrame) -> pa.Table:
    """Convert a frame into a ``pyarrow.Table``.

    Each field's declared dtype is stored in the arrow field metadata under
    ``flatframe.dtype`` so that ``from_arrow`` can restore it.
    """
    import pyarrow as pa

    arrow_types = _arrow_types()
    fields = []
    arrays = []
    for field in df.schema:
        dtype, values = storage_column(field, df.column_values(field.name))
        natives = [v.to_python() for v in values]
        # decimal, array and map types are inferred from the data
        array = pa.array(natives, type=arrow_types.get(dtype))
        fields.append(
            pa.field(
                field.name,
                array.type,
                nullable=field.nullable,
                metadata={DTYPE_KEY: field.dtype.as_str()},
            )
        )
        arrays.append(array)
    logger.debug(f"Converted {df.shape()} frame to arrow")
    return pa.Table.from_arrays(arrays, schema=pa.schema(fields))


def _declared_type(field: pa.Field) -> DataType | None:
    metadata = field.metadata or {}
    name = metadata.get(DTYPE_KEY.encode())
    return DataType.from_name(name.decode()) if name is not None else None


def from_arrow(table: pa.Table | pa.RecordBatch) -> DataFrame:
    """Build a frame from a ``pyarrow.Table`` or ``RecordBatch``.

    Fields written by ``to_arrow`` get their declared dtype back; any other
    field is typed from its arrow type.
    """
    stored = [map_arrow_type(f.type) for f in table.schema]
    schema = Schema(
        Field(f.name, _declared_type(f) or dtype, nullable=f.nullable)
        for f, dtype in zip(table.schema, stored)
    )
    columns = [
        [to_value(obj, dtype) for obj in table.column(i).to_pylist()]
        for i, dtype in enumerate(stored)
    ]
    logger.debug(f"Converted arrow table with {table.num_rows} row(s)")
    return DataFrame.with_schema(schema, zip(*columns))
