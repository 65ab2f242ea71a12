"""Value conversion shared by the arrow and Polars boundaries."""

from __future__ import annotations

import datetime
from typing import Any

from flatframe.dtypes import NUMERIC_TYPES, DataType
from flatframe.number import Number
from flatframe.schema import Field
from flatframe.value import NULL, Value


def shared_type(values: list[Value]) -> DataType | None:
    types = {v.type_of() for v in values if not v.is_null()}
    return types.pop() if len(types) == 1 else None


def storage_column(field: Field, values: list[Value]) -> tuple[DataType, list[Value]]:
    """The dtype a column is written with, and its values.

    Weakly typed columns take the type their values share, or are rendered
    as strings when mixed.
    """
    dtype = field.dtype
    if dtype is not DataType.ANY:
        return dtype, values
    dtype = shared_type(values) or DataType.STRING
    if dtype is DataType.STRING:
        values = [v if v.is_null() else Value.string(str(v)) for v in values]
    return dtype, values


def to_value(obj: Any, dtype: DataType) -> Value:
    """Build a value from a native cell read back from a columnar type ``dtype``."""
    if obj is None:
        return NULL
    if dtype in NUMERIC_TYPES:
        return Value.number(Number(dtype, obj))
    if dtype is DataType.MAP and isinstance(obj, list):
        # arrow map columns come back as (key, value) pairs
        return Value.map(obj)
    if isinstance(obj, datetime.datetime) and obj.tzinfo is not None:
        obj = obj.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return Value.from_python(obj)
