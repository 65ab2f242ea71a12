"""Fixed-width numeric values.

A ``Number`` pairs a numeric ``DataType`` tag with its payload. The tag decides
the storage width and is what ``type_of()`` reports, so two numbers with the
same magnitude but different tags are different values::

    Number.uint8(1) == Number.int32(1)    # False
    Number.uint8(300)                     # ValueError: out of range

Payloads are Python ``int`` for the integer widths, ``float`` for ``FLOAT``
(rounded to single precision on construction) and ``DOUBLE``, and
``decimal.Decimal`` for ``DECIMAL``.
"""

from __future__ import annotations

import decimal
import math
import struct
from typing import Any, Union

from flatframe.dtypes import FLOAT_TYPES, INTEGER_BOUNDS, INTEGER_TYPES, NUMERIC_TYPES, DataType

Payload = Union[int, float, decimal.Decimal]


def _round_float32(value: float) -> float:
    """Round a Python float to the nearest single precision value."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        raise ValueError(f"{value!r} is out of range for float") from None


def _format_float32(value: float) -> str:
    # Shortest representation that survives a float32 round trip
    if math.isnan(value) or math.isinf(value):
        return repr(value)
    for precision in range(6, 10):
        text = f"{value:.{precision}g}"
        if _round_float32(float(text)) == value:
            return text
    return repr(value)


def _check_integer(tag: DataType, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{tag.as_str()} expects an int, got {type(value).__name__}")
    low, high = INTEGER_BOUNDS[tag]
    if not low <= value <= high:
        raise ValueError(f"{value} is out of range for {tag.as_str()} [{low}, {high}]")
    return value


def _check_float(tag: DataType, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{tag.as_str()} expects a float, got {type(value).__name__}")
    try:
        payload = float(value)
    except OverflowError:
        raise ValueError(f"integer is out of range for {tag.as_str()}") from None
    if tag is DataType.FLOAT:
        return _round_float32(payload)
    return payload


def _check_decimal(value: Any) -> decimal.Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, decimal.Decimal)):
        raise TypeError(f"decimal expects a Decimal, got {type(value).__name__}")
    try:
        return decimal.Decimal(value)
    except decimal.InvalidOperation:
        raise ValueError(f"{value!r} is not a valid decimal") from None


class Number:
    """A numeric payload tagged with its width.

    Build one with the named constructors (``Number.uint8(7)``,
    ``Number.float64(0.5)``, ...) or ``Number.from_python()`` for native
    values. Instances are immutable and hashable.
    """

    __slots__ = ("_tag", "_value")

    def __init__(self, tag: DataType, value: Any) -> None:
        if tag in INTEGER_TYPES:
            payload: Payload = _check_integer(tag, value)
        elif tag in FLOAT_TYPES:
            payload = _check_float(tag, value)
        elif tag is DataType.DECIMAL:
            payload = _check_decimal(value)
        else:
            raise TypeError(f"{tag.as_str()} is not a numeric type")
        self._tag = tag
        self._value = payload

    # --- Named constructors ---

    @classmethod
    def uint8(cls, value: int) -> Number:
        return cls(DataType.UINT8, value)

    @classmethod
    def uint16(cls, value: int) -> Number:
        return cls(DataType.UINT16, value)

    @classmethod
    def uint32(cls, value: int) -> Number:
        return cls(DataType.UINT32, value)

    @classmethod
    def uint64(cls, value: int) -> Number:
        return cls(DataType.UINT64, value)

    @classmethod
    def int8(cls, value: int) -> Number:
        return cls(DataType.INT8, value)

    @classmethod
    def int16(cls, value: int) -> Number:
        return cls(DataType.INT16, value)

    @classmethod
    def int32(cls, value: int) -> Number:
        return cls(DataType.INT32, value)

    @classmethod
    def int64(cls, value: int) -> Number:
        return cls(DataType.INT64, value)

    @classmethod
    def float32(cls, value: float) -> Number:
        return cls(DataType.FLOAT, value)

    @classmethod
    def float64(cls, value: float) -> Number:
        return cls(DataType.DOUBLE, value)

    @classmethod
    def decimal(cls, value: decimal.Decimal | str | int | float) -> Number:
        return cls(DataType.DECIMAL, value)

    @classmethod
    def from_python(cls, value: int | float | decimal.Decimal) -> Number:
        """Build a number from a native Python value.

        ``int`` maps to ``INT64``, or ``UINT64`` when it only fits unsigned;
        ``float`` maps to ``DOUBLE``; ``Decimal`` maps to ``DECIMAL``.
        """
        if isinstance(value, bool):
            raise TypeError("bool is not a number, use Value.bool()")
        if isinstance(value, int):
            low, high = INTEGER_BOUNDS[DataType.INT64]
            if low <= value <= high:
                return cls(DataType.INT64, value)
            return cls(DataType.UINT64, value)
        if isinstance(value, float):
            return cls(DataType.DOUBLE, value)
        if isinstance(value, decimal.Decimal):
            return cls(DataType.DECIMAL, value)
        raise TypeError(f"Cannot build a Number from {type(value).__name__}")

    # --- Introspection ---

    @property
    def tag(self) -> DataType:
        return self._tag

    @property
    def value(self) -> Payload:
        return self._value

    def type_of(self) -> DataType:
        return self._tag

    def to_python(self) -> Payload:
        return self._value

    def is_integer(self) -> bool:
        return self._tag in INTEGER_TYPES

    # --- Tag-matched accessors: payload when the tag matches, else None ---

    def _as(self, tag: DataType) -> Any:
        return self._value if self._tag is tag else None

    def as_uint8(self) -> int | None:
        return self._as(DataType.UINT8)

    def as_uint16(self) -> int | None:
        return self._as(DataType.UINT16)

    def as_uint32(self) -> int | None:
        return self._as(DataType.UINT32)

    def as_uint64(self) -> int | None:
        return self._as(DataType.UINT64)

    def as_int8(self) -> int | None:
        return self._as(DataType.INT8)

    def as_int16(self) -> int | None:
        return self._as(DataType.INT16)

    def as_int32(self) -> int | None:
        return self._as(DataType.INT32)

    def as_int64(self) -> int | None:
        return self._as(DataType.INT64)

    def as_float32(self) -> float | None:
        return self._as(DataType.FLOAT)

    def as_float64(self) -> float | None:
        return self._as(DataType.DOUBLE)

    def as_decimal(self) -> decimal.Decimal | None:
        return self._as(DataType.DECIMAL)

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return self._tag is other._tag and self._value == other._value

    def __hash__(self) -> int:
        return hash((self._tag, self._value))

    def partial_cmp(self, other: Number) -> int | None:
        """Compare two numbers of the same tag.

        Returns -1, 0 or 1, or ``None`` when the tags differ or a NaN is
        involved.
        """
        if not isinstance(other, Number) or self._tag is not other._tag:
            return None
        a, b = self._value, other._value
        try:
            if a < b:
                return -1
            if a > b:
                return 1
            if a == b:
                return 0
        except decimal.InvalidOperation:
            # signalling NaN in a Decimal comparison
            return None
        return None

    # --- Display / serialization ---

    def __str__(self) -> str:
        if self._tag is DataType.FLOAT:
            return _format_float32(self._value)  # type: ignore[arg-type]
        return str(self._value)

    def __repr__(self) -> str:
        return f"Number({self._tag.as_str()}, {self._value!r})"

    def to_dict(self) -> dict[str, Any]:
        """Tagged form: ``{"type": "uint8", "value": 7}``. Decimals are strings."""
        payload: Any = str(self._value) if self._tag is DataType.DECIMAL else self._value
        return {"type": self._tag.as_str(), "value": payload}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Number:
        tag = DataType.from_name(data["type"])
        if tag not in NUMERIC_TYPES:
            raise ValueError(f"{tag.as_str()} is not a numeric type")
        return cls(tag, data["value"])
