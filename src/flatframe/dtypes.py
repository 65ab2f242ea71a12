"""Data type tags for flatframe.

``DataType`` is the static type tag of a column or of a single value. It
mirrors the variants of ``Value`` and the widths of ``Number``, plus two
sentinels:

- ``ANY`` — a weakly typed column whose type has not been inferred (yet).
- ``NULL`` — the type of the ``Null`` value. A column never keeps it as its
  permanent type; it only shows up transiently while inferring.

Type categories (numeric, integer, float) are exposed as frozensets so that
cast tables and validation can test membership directly.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flatframe.value import Value


class DataType(enum.Enum):
    """Type tag of a column or value. The enum value is the canonical name."""

    # ---------------------------------------------------------------------------
    # Scalar / composite
    # ---------------------------------------------------------------------------

    BOOL = "boolean"
    STRING = "string"
    ARRAY = "array"
    MAP = "object"
    DATE = "date"
    BINARY = "binary"

    # ---------------------------------------------------------------------------
    # Unsigned integers
    # ---------------------------------------------------------------------------

    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"

    # ---------------------------------------------------------------------------
    # Signed integers
    # ---------------------------------------------------------------------------

    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"

    # ---------------------------------------------------------------------------
    # Floating point / decimal
    # ---------------------------------------------------------------------------

    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"

    # ---------------------------------------------------------------------------
    # Sentinels
    # ---------------------------------------------------------------------------

    ANY = "any"
    NULL = "null"

    def __repr__(self) -> str:
        return f"DataType.{self.name}"

    def __str__(self) -> str:
        return self.value

    def as_str(self) -> str:
        """Return the canonical lowercase name (``"uint8"``, ``"object"``, ...)."""
        return self.value

    @classmethod
    def from_name(cls, name: str) -> DataType:
        """Look a type up by its canonical name.

        Raises ``ValueError`` for names that are not a valid type.
        """
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"{name!r} is not a valid type") from None

    def is_numeric(self) -> bool:
        return self in NUMERIC_TYPES

    def is_integer(self) -> bool:
        return self in INTEGER_TYPES

    def is_float(self) -> bool:
        return self in FLOAT_TYPES

    def has_default(self) -> bool:
        """Return whether the type has a natural default value (bool, string, numbers)."""
        return self is DataType.BOOL or self is DataType.STRING or self in NUMERIC_TYPES

    def default_value(self) -> Value:
        """Return the default value for the type.

        Every type currently defaults to ``Null``; a column that wants another
        default declares it on its ``Field``.
        """
        from flatframe.value import NULL

        return NULL


UNSIGNED_TYPES = frozenset({DataType.UINT8, DataType.UINT16, DataType.UINT32, DataType.UINT64})
SIGNED_TYPES = frozenset({DataType.INT8, DataType.INT16, DataType.INT32, DataType.INT64})
INTEGER_TYPES = UNSIGNED_TYPES | SIGNED_TYPES
FLOAT_TYPES = frozenset({DataType.FLOAT, DataType.DOUBLE})
NUMERIC_TYPES = INTEGER_TYPES | FLOAT_TYPES | {DataType.DECIMAL}

# Inclusive value range of each integer width
INTEGER_BOUNDS: dict[DataType, tuple[int, int]] = {
    DataType.UINT8: (0, 2**8 - 1),
    DataType.UINT16: (0, 2**16 - 1),
    DataType.UINT32: (0, 2**32 - 1),
    DataType.UINT64: (0, 2**64 - 1),
    DataType.INT8: (-(2**7), 2**7 - 1),
    DataType.INT16: (-(2**15), 2**15 - 1),
    DataType.INT32: (-(2**31), 2**31 - 1),
    DataType.INT64: (-(2**63), 2**63 - 1),
}
