"""flatframe: a schema-typed, in-process table over one flat value buffer."""

from importlib.metadata import version as _version

__version__: str = _version("flatframe")

from flatframe.arrow import from_arrow, to_arrow
from flatframe.dataframe import DataFrame
from flatframe.dim import Dim
from flatframe.dtypes import DataType
from flatframe.errors import (
    BorrowError,
    CastError,
    ConvertError,
    DuplicateColumnName,
    FailedNumericCast,
    FrameError,
    IllegalCast,
    IllegalConversion,
    IndexOutOfBounds,
    InvalidColumnName,
    InvalidDataLength,
    InvalidNumericCast,
    ParseDateError,
    SchemaError,
)
from flatframe.log import configure_from_env, disable_logging, enable_logging
from flatframe.number import Number
from flatframe.ops import (
    ColumnSpec,
    Conversion,
    DecodeBinary,
    EncodeString,
    FilterOp,
    FormatDateTime,
    ParseDateTime,
    Select,
    can_cast,
    can_try_cast,
    cast_or_default,
    convert,
    filter_column,
    filter_rows,
    safe_cast,
    select,
    try_cast,
)
from flatframe.schema import Field, Schema
from flatframe.validation import (
    ValidationLevel,
    get_validation_level,
    is_validation_enabled,
    set_validation,
)
from flatframe.value import NULL, Kind, Value, ValueMap, row, val
from flatframe.view import SubView, View

configure_from_env()

__all__ = [
    # Values
    "Value",
    "ValueMap",
    "Kind",
    "Number",
    "DataType",
    "NULL",
    "val",
    "row",
    # Schema layer
    "Schema",
    "Field",
    # Frame layer
    "DataFrame",
    "Dim",
    "View",
    "SubView",
    # Operations
    "can_cast",
    "can_try_cast",
    "try_cast",
    "safe_cast",
    "cast_or_default",
    "Conversion",
    "ParseDateTime",
    "FormatDateTime",
    "EncodeString",
    "DecodeBinary",
    "convert",
    "Select",
    "ColumnSpec",
    "select",
    "FilterOp",
    "filter_column",
    "filter_rows",
    # Arrow boundary
    "to_arrow",
    "from_arrow",
    # Errors
    "FrameError",
    "IndexOutOfBounds",
    "InvalidDataLength",
    "InvalidColumnName",
    "DuplicateColumnName",
    "BorrowError",
    "CastError",
    "IllegalCast",
    "FailedNumericCast",
    "InvalidNumericCast",
    "ConvertError",
    "ParseDateError",
    "IllegalConversion",
    "SchemaError",
    # Validation
    "ValidationLevel",
    "get_validation_level",
    "is_validation_enabled",
    "set_validation",
    # Logging
    "enable_logging",
    "disable_logging",
]
