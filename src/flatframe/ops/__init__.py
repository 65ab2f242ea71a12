"""Column operations: cast, convert, select, filter."""

from flatframe.ops.cast import can_cast, can_try_cast, cast_or_default, safe_cast, try_cast
from flatframe.ops.convert import (
    Conversion,
    DecodeBinary,
    EncodeString,
    FormatDateTime,
    ParseDateTime,
    convert,
)
from flatframe.ops.filter import FilterOp, filter_column, filter_rows
from flatframe.ops.select import ColumnSpec, Select, select

__all__ = [
    "ColumnSpec",
    "Conversion",
    "DecodeBinary",
    "EncodeString",
    "FilterOp",
    "FormatDateTime",
    "ParseDateTime",
    "Select",
    "can_cast",
    "can_try_cast",
    "cast_or_default",
    "convert",
    "filter_column",
    "filter_rows",
    "safe_cast",
    "select",
    "try_cast",
]
