"""Casting values between data types.

Two static tables decide which casts are allowed:

- ``can_cast(source, dest)`` — widening casts that can never lose
  information (``UINT8 → UINT32``, ``INT16 → DOUBLE``, any number →
  ``STRING``).
- ``can_try_cast(source, dest)`` — narrowing casts that are allowed but
  checked at runtime (``INT32 → UINT8``, ``DOUBLE → INT64``,
  ``STRING → INT32``).

``try_cast`` raises on every failure. ``safe_cast`` and ``cast_or_default``
are the only entry points that swallow a failure, and they do so by returning
the caller's default::

    try_cast(val(300, DataType.INT32), DataType.UINT8)    # FailedNumericCast
    safe_cast(val(300, DataType.INT32), DataType.UINT8)   # NULL

``Null`` casts to itself for every destination, and every value casts to
itself and to ``ANY`` unchanged.
"""

from __future__ import annotations

import decimal
import math
import re

from flatframe.dtypes import (
    FLOAT_TYPES,
    INTEGER_BOUNDS,
    INTEGER_TYPES,
    NUMERIC_TYPES,
    SIGNED_TYPES,
    UNSIGNED_TYPES,
    DataType,
)
from flatframe.errors import CastError, FailedNumericCast, IllegalCast, InvalidNumericCast
from flatframe.number import Number, _round_float32
from flatframe.value import NULL, Kind, Value

_D = DataType

# ---------------------------------------------------------------------------
# Permission tables, keyed by destination
# ---------------------------------------------------------------------------

_WIDENING: dict[DataType, frozenset[DataType]] = {
    _D.INT64: frozenset({_D.BOOL, _D.UINT8, _D.UINT16, _D.UINT32, _D.INT8, _D.INT16, _D.INT32}),
    _D.INT32: frozenset({_D.BOOL, _D.UINT8, _D.UINT16, _D.INT8, _D.INT16}),
    _D.INT16: frozenset({_D.BOOL, _D.UINT8, _D.INT8}),
    _D.INT8: frozenset({_D.BOOL}),
    _D.UINT64: frozenset({_D.BOOL, _D.UINT8, _D.UINT16, _D.UINT32}),
    _D.UINT32: frozenset({_D.BOOL, _D.UINT8, _D.UINT16}),
    _D.UINT16: frozenset({_D.BOOL, _D.UINT8}),
    _D.UINT8: frozenset({_D.BOOL}),
    _D.FLOAT: frozenset({_D.UINT8, _D.UINT16, _D.INT8, _D.INT16}),
    _D.DOUBLE: frozenset({_D.UINT8, _D.UINT16, _D.UINT32, _D.INT8, _D.INT16, _D.INT32, _D.FLOAT}),
    _D.DECIMAL: INTEGER_TYPES | FLOAT_TYPES,
    _D.STRING: NUMERIC_TYPES | {_D.BOOL, _D.DATE},
}

_FRACTIONAL = FLOAT_TYPES | {_D.DECIMAL}

_NARROWING: dict[DataType, frozenset[DataType]] = {
    _D.UINT64: SIGNED_TYPES | _FRACTIONAL | {_D.STRING},
    _D.UINT32: SIGNED_TYPES | _FRACTIONAL | {_D.UINT64, _D.STRING},
    _D.UINT16: SIGNED_TYPES | _FRACTIONAL | {_D.UINT32, _D.UINT64, _D.STRING},
    _D.UINT8: SIGNED_TYPES | _FRACTIONAL | {_D.UINT16, _D.UINT32, _D.UINT64, _D.STRING},
    _D.INT64: _FRACTIONAL | {_D.UINT64, _D.STRING},
    _D.INT32: _FRACTIONAL | {_D.UINT32, _D.UINT64, _D.INT64, _D.STRING},
    _D.INT16: _FRACTIONAL
    | {_D.UINT16, _D.UINT32, _D.UINT64, _D.INT32, _D.INT64, _D.STRING},
    _D.INT8: _FRACTIONAL
    | {_D.UINT8, _D.UINT16, _D.UINT32, _D.UINT64, _D.INT16, _D.INT32, _D.INT64, _D.STRING},
    _D.FLOAT: frozenset(
        {_D.UINT32, _D.UINT64, _D.INT32, _D.INT64, _D.DOUBLE, _D.DECIMAL, _D.STRING}
    ),
    _D.DOUBLE: frozenset({_D.UINT64, _D.INT64, _D.DECIMAL, _D.STRING}),
    _D.DECIMAL: frozenset({_D.STRING}),
    _D.BOOL: INTEGER_TYPES | {_D.STRING},
}


def can_cast(source: DataType, dest: DataType) -> bool:
    """Return whether ``source`` always casts into ``dest`` without loss."""
    if source is dest or dest is DataType.ANY or source is DataType.NULL:
        return True
    return source in _WIDENING.get(dest, frozenset())


def can_try_cast(source: DataType, dest: DataType) -> bool:
    """Return whether ``source`` may cast into ``dest``, subject to a runtime check."""
    return source in _NARROWING.get(dest, frozenset())


# ---------------------------------------------------------------------------
# Cast entry points
# ---------------------------------------------------------------------------


def try_cast(value: Value, dtype: DataType) -> Value:
    """Cast ``value`` into ``dtype`` or raise.

    Raises :class:`IllegalCast` when neither table permits the pair and
    :class:`FailedNumericCast` when a permitted narrowing fails at runtime.
    """
    source = value.type_of()
    if source is dtype or dtype is DataType.ANY or value.is_null():
        return value
    if not (can_cast(source, dtype) or can_try_cast(source, dtype)):
        raise IllegalCast(source, dtype)
    if dtype in NUMERIC_TYPES:
        return Value.number(into_number(value, dtype))
    if dtype is DataType.STRING:
        return Value.string(into_string(value))
    if dtype is DataType.BOOL:
        return Value.bool(into_bool(value))
    raise IllegalCast(source, dtype)


def cast_or_default(value: Value, dtype: DataType, default: Value) -> Value:
    """Attempt ``try_cast`` and return ``default`` on any cast failure."""
    try:
        return try_cast(value, dtype)
    except CastError:
        return default


def safe_cast(value: Value, dtype: DataType) -> Value:
    """``cast_or_default`` with ``NULL`` as the default."""
    return cast_or_default(value, dtype, NULL)


# ---------------------------------------------------------------------------
# Numeric conversion
# ---------------------------------------------------------------------------

_UNSIGNED_LITERAL = re.compile(r"\+?[0-9]+")
_SIGNED_LITERAL = re.compile(r"[+-]?[0-9]+")


def into_number(value: Value, dtype: DataType) -> Number:
    """Convert a Bool, Number or String value into a ``Number`` of ``dtype``.

    Narrowing is checked: out-of-range integers, fractional values headed for
    an integer, and values a float cannot hold exactly all raise
    :class:`FailedNumericCast`. Strings are parsed with the target type's own
    literal rules.
    """
    if dtype not in NUMERIC_TYPES:
        raise InvalidNumericCast(dtype)
    kind = value.kind
    if kind is Kind.BOOL:
        payload: int | float | decimal.Decimal = int(value.payload)
    elif kind is Kind.NUMBER:
        payload = value.payload.value
    elif kind is Kind.STRING:
        return _parse_number(value.payload, dtype)
    else:
        raise IllegalCast(value.type_of(), dtype)

    if dtype in INTEGER_TYPES:
        return Number(dtype, _to_integer(payload, dtype, value))
    if dtype is DataType.FLOAT:
        return Number(dtype, _to_float32(payload, value))
    if dtype is DataType.DOUBLE:
        return Number(dtype, _to_float64(payload, value))
    return Number(dtype, decimal.Decimal(payload))


def _to_integer(payload: int | float | decimal.Decimal, dtype: DataType, value: Value) -> int:
    if isinstance(payload, float):
        if not math.isfinite(payload) or not payload.is_integer():
            raise FailedNumericCast(value, dtype, "value is not an integer")
        payload = int(payload)
    elif isinstance(payload, decimal.Decimal):
        if not payload.is_finite() or payload != payload.to_integral_value():
            raise FailedNumericCast(value, dtype, "value is not an integer")
        payload = int(payload)
    low, high = INTEGER_BOUNDS[dtype]
    if not low <= payload <= high:
        raise FailedNumericCast(value, dtype, f"overflow, {payload} not in [{low}, {high}]")
    return payload


def _to_float32(payload: int | float | decimal.Decimal, value: Value) -> float:
    if isinstance(payload, decimal.Decimal) and payload.is_nan():
        return math.nan
    try:
        as_float = float(payload)
        rounded = _round_float32(as_float)
    except (OverflowError, ValueError) as e:
        raise FailedNumericCast(value, DataType.FLOAT, str(e)) from e
    if math.isnan(as_float):
        return rounded
    if not _exact(rounded, payload):
        raise FailedNumericCast(value, DataType.FLOAT, "value is not representable exactly")
    return rounded


def _to_float64(payload: int | float | decimal.Decimal, value: Value) -> float:
    if isinstance(payload, decimal.Decimal) and payload.is_nan():
        return math.nan
    try:
        as_float = float(payload)
    except OverflowError as e:
        raise FailedNumericCast(value, DataType.DOUBLE, str(e)) from e
    if not math.isnan(as_float) and not _exact(as_float, payload):
        raise FailedNumericCast(value, DataType.DOUBLE, "value is not representable exactly")
    return as_float


def _exact(result: float, payload: int | float | decimal.Decimal) -> bool:
    if math.isinf(result):
        return isinstance(payload, (float, decimal.Decimal)) and result == payload
    if isinstance(payload, float):
        return result == payload
    # exact comparison against the arbitrary-precision original
    return decimal.Decimal(result) == payload


def _parse_number(text: str, dtype: DataType) -> Number:
    source = Value.string(text)
    if dtype in INTEGER_TYPES:
        pattern = _UNSIGNED_LITERAL if dtype in UNSIGNED_TYPES else _SIGNED_LITERAL
        if not pattern.fullmatch(text):
            raise FailedNumericCast(source, dtype, "invalid digit found in string")
        return Number(dtype, _to_integer(int(text), dtype, source))
    if text != text.strip() or "_" in text or not text:
        raise FailedNumericCast(source, dtype, "invalid literal")
    if dtype is DataType.DECIMAL:
        try:
            return Number(dtype, decimal.Decimal(text))
        except decimal.InvalidOperation as e:
            raise FailedNumericCast(source, dtype, "invalid decimal literal") from e
    try:
        parsed = float(text)
    except ValueError as e:
        raise FailedNumericCast(source, dtype, "invalid float literal") from e
    if dtype is DataType.FLOAT:
        try:
            return Number(dtype, _round_float32(parsed))
        except ValueError as e:
            raise FailedNumericCast(source, dtype, str(e)) from e
    return Number(dtype, parsed)


# ---------------------------------------------------------------------------
# String / bool conversion
# ---------------------------------------------------------------------------


def into_string(value: Value) -> str:
    """Stringify a scalar value with its display form."""
    if value.kind in (Kind.ARRAY, Kind.MAP, Kind.BINARY, Kind.NULL):
        raise IllegalCast(value.type_of(), DataType.STRING)
    return str(value)


def into_bool(value: Value) -> bool:
    """Parse ``"true"``/``"false"`` or narrow an integer 0/1 into a bool."""
    if value.kind is Kind.STRING:
        if value.payload == "true":
            return True
        if value.payload == "false":
            return False
        raise FailedNumericCast(value, DataType.BOOL, "provided string was not `true` or `false`")
    number = value.as_number()
    if number is not None and number.is_integer() and number.value in (0, 1):
        return bool(number.value)
    if number is not None and number.is_integer():
        raise FailedNumericCast(value, DataType.BOOL, "only 0 and 1 convert to bool")
    raise IllegalCast(value.type_of(), DataType.BOOL)
