"""Exception hierarchy for flatframe.

Every failure the engine reports is a subclass of ``FrameError``. Where a
builtin exception describes the same situation the class also derives from
it, so ``except IndexError`` or ``except KeyError`` keep working for callers
that do not know about flatframe:

- ``IndexOutOfBounds`` — ``IndexError``
- ``InvalidDataLength``, ``CastError``, ``ConvertError`` — ``ValueError``
- ``InvalidColumnName``, ``DuplicateColumnName`` — ``KeyError``
- ``BorrowError`` — ``RuntimeError``
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from flatframe.dtypes import DataType


def _type_name(dtype: Any) -> str:
    as_str = getattr(dtype, "as_str", None)
    return as_str() if as_str is not None else str(dtype)


class FrameError(Exception):
    """Base class for all flatframe errors."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() its message
        return self.args[0] if self.args else self.__class__.__name__


# ---------------------------------------------------------------------------
# Shape errors
# ---------------------------------------------------------------------------


class IndexOutOfBounds(FrameError, IndexError):
    """An index past the end of a column list or row buffer."""

    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(f"The index is out of bounds (idx {index}, len {length})")


class InvalidDataLength(FrameError, ValueError):
    """A row whose length does not match the frame's column count."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            "The length of the data does not match the expected length "
            f"(expected ({expected}) != received ({actual}))"
        )


class InvalidColumnName(FrameError, KeyError):
    """A column name that is not part of the schema."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"A column with the name {name!r} does not exist")


class DuplicateColumnName(FrameError, KeyError):
    """A column name that already exists in the schema."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"A column with the name {name!r} already exists")


class BorrowError(FrameError, RuntimeError):
    """A frame was mutated while a view over it was checked out."""


# ---------------------------------------------------------------------------
# Cast errors
# ---------------------------------------------------------------------------


class CastError(FrameError, ValueError):
    """Base class for failures of ``try_cast``."""


class IllegalCast(CastError):
    """Neither cast table permits the (source, destination) pair."""

    def __init__(self, source_type: DataType, dest_type: DataType) -> None:
        self.source_type = source_type
        self.dest_type = dest_type
        super().__init__(
            "The datatype of the value cannot be cast into the desired type. "
            f"Cannot cast type {_type_name(source_type)} into type {_type_name(dest_type)}."
        )


class FailedNumericCast(CastError):
    """A permitted numeric cast that failed at runtime (overflow, precision, parse)."""

    def __init__(self, value: Any, dest_type: DataType, cause: str) -> None:
        self.value = value
        self.dest_type = dest_type
        self.cause = cause
        super().__init__(f"Failed to cast {value!s} into {_type_name(dest_type)}: {cause}")


class InvalidNumericCast(CastError):
    """A numeric conversion was requested for a non-numeric target type."""

    def __init__(self, dest_type: DataType) -> None:
        self.dest_type = dest_type
        super().__init__(f"{_type_name(dest_type)} is not a numeric type")


# ---------------------------------------------------------------------------
# Convert errors
# ---------------------------------------------------------------------------


class ConvertError(FrameError, ValueError):
    """Base class for failures of ``convert``."""


class ParseDateError(ConvertError):
    def __init__(self, value: str, format: str, message: str) -> None:
        self.value = value
        self.format = format
        self.message = message
        super().__init__(
            "Failed to convert value into date data type using the format. "
            f"Cannot convert {value} to date from format {format}. Error = {message}"
        )


class IllegalConversion(ConvertError):
    def __init__(self, value_type: DataType, dest_type: DataType) -> None:
        self.value_type = value_type
        self.dest_type = dest_type
        super().__init__(
            f"Cannot convert values data type of {_type_name(value_type)} "
            f"into destination type of {_type_name(dest_type)}"
        )


# ---------------------------------------------------------------------------
# SchemaError
# ---------------------------------------------------------------------------


class SchemaError(FrameError):
    """Raised when data does not conform to the declared schema."""

    def __init__(
        self,
        *,
        missing_columns: list[str] | None = None,
        type_mismatches: dict[str, tuple[str, str]] | None = None,
        null_violations: list[str] | None = None,
    ) -> None:
        self.missing_columns = missing_columns or []
        self.type_mismatches = type_mismatches or {}
        self.null_violations = null_violations or []
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        parts: list[str] = []
        if self.missing_columns:
            parts.append(f"Missing columns: {', '.join(self.missing_columns)}")
        if self.type_mismatches:
            mismatches = [
                f"{col}: expected {exp}, got {got}"
                for col, (exp, got) in self.type_mismatches.items()
            ]
            parts.append(f"Type mismatches: {'; '.join(mismatches)}")
        if self.null_violations:
            parts.append(f"Null violations: {', '.join(self.null_violations)}")
        return " | ".join(parts) if parts else "Schema validation failed"
