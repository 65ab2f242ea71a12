"""Conversions that need more than a target type.

A conversion is a cast that carries configuration: parsing a date needs a
format string, decoding bytes needs an encoding. Each conversion knows the
source type it accepts and the ``DataType`` it produces, so a column-wide
conversion can report the new type for the schema::

    df.convert_column("ts", ParseDateTime("%Y-%m-%d %H:%M:%S"))   # DataType.DATE

``Null`` cells pass through every conversion unchanged.
"""

from __future__ import annotations

import datetime
from typing import ClassVar

from flatframe.dtypes import DataType
from flatframe.errors import IllegalConversion, ParseDateError
from flatframe.value import Kind, Value

# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


class Conversion:
    """Base class of configured conversions.

    Subclasses set ``source_kind`` and ``dest_type`` and implement
    ``_apply`` for a non-null value of the accepted kind.
    """

    __slots__ = ()

    source_kind: ClassVar[Kind]
    dest_type: ClassVar[DataType]

    def apply(self, value: Value) -> Value:
        """Convert one value, raising :class:`ConvertError` on failure."""
        if value.is_null():
            return value
        if value.kind is not self.source_kind:
            raise IllegalConversion(value.type_of(), self.dest_type)
        return self._apply(value)

    def _apply(self, value: Value) -> Value:
        raise NotImplementedError

    def __call__(self, value: Value) -> Value:
        return self.apply(value)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, s) == getattr(other, s) for s in self.__slots__)

    def __hash__(self) -> int:
        return hash((type(self), tuple(getattr(self, s) for s in self.__slots__)))

    def __repr__(self) -> str:
        args = ", ".join(repr(getattr(self, s)) for s in self.__slots__)
        return f"{type(self).__name__}({args})"


# ---------------------------------------------------------------------------
# Date / time
# ---------------------------------------------------------------------------


class ParseDateTime(Conversion):
    """String → Date using a ``strptime`` format."""

    __slots__ = ("fmt",)

    source_kind = Kind.STRING
    dest_type = DataType.DATE

    def __init__(self, fmt: str) -> None:
        self.fmt = fmt

    def _apply(self, value: Value) -> Value:
        text = value.payload
        try:
            parsed = datetime.datetime.strptime(text, self.fmt)
        except ValueError as e:
            raise ParseDateError(text, self.fmt, str(e)) from e
        if parsed.tzinfo is not None:
            # dates are naive; keep the wall clock of the parsed offset
            parsed = parsed.replace(tzinfo=None)
        return Value.date(parsed)


class FormatDateTime(Conversion):
    """Date → String using a ``strftime`` format."""

    __slots__ = ("fmt",)

    source_kind = Kind.DATE
    dest_type = DataType.STRING

    def __init__(self, fmt: str) -> None:
        self.fmt = fmt

    def _apply(self, value: Value) -> Value:
        return Value.string(value.payload.strftime(self.fmt))


# ---------------------------------------------------------------------------
# Text / bytes
# ---------------------------------------------------------------------------


class EncodeString(Conversion):
    """String → Binary."""

    __slots__ = ("encoding",)

    source_kind = Kind.STRING
    dest_type = DataType.BINARY

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def _apply(self, value: Value) -> Value:
        try:
            return Value.binary(value.payload.encode(self.encoding))
        except UnicodeEncodeError as e:
            raise IllegalConversion(value.type_of(), self.dest_type) from e


class DecodeBinary(Conversion):
    """Binary → String."""

    __slots__ = ("encoding",)

    source_kind = Kind.BINARY
    dest_type = DataType.STRING

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def _apply(self, value: Value) -> Value:
        try:
            return Value.string(value.payload.decode(self.encoding))
        except UnicodeDecodeError as e:
            raise IllegalConversion(value.type_of(), self.dest_type) from e


def convert(value: Value, conversion: Conversion) -> Value:
    """Apply ``conversion`` to a single value."""
    return conversion.apply(value)
