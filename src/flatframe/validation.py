"""Runtime schema validation toggle.

Validation is **off** by default: rows pushed into a frame are only
length-checked. Enable it via environment variable (ideal for CI) or
programmatically::

    # Environment variable
    FLATFRAME_VALIDATE=structural pytest tests/
    FLATFRAME_VALIDATE=full pytest tests/

    # Programmatic
    from flatframe import ValidationLevel
    flatframe.set_validation(ValidationLevel.STRUCTURAL)

Three validation levels are supported (see ``ValidationLevel``):

- ``OFF`` — Length checks only. Zero overhead.
- ``STRUCTURAL`` — Incoming values must match their field's dtype and
  nullability (``push_row``, ``extend``, ``set_value``).
- ``FULL`` — Structural checks plus a buffer-length invariant check after
  every mutation.

``set_validation()`` also accepts strings (``"off"``, ``"structural"``,
``"full"``) and booleans (``True`` → ``STRUCTURAL``, ``False`` → ``OFF``).

``DataFrame.validate()`` always runs explicitly regardless of this toggle.
"""

from __future__ import annotations

import enum
import os
from collections.abc import Sequence
from typing import TYPE_CHECKING

from loguru import logger

from flatframe.dtypes import DataType
from flatframe.errors import SchemaError

if TYPE_CHECKING:
    from flatframe.schema import Schema
    from flatframe.value import Value


class ValidationLevel(enum.Enum):
    """Validation level for runtime schema checks."""

    OFF = "off"
    STRUCTURAL = "structural"
    FULL = "full"


_validation_level: ValidationLevel | None = None

_STR_TO_LEVEL = {v.value: v for v in ValidationLevel}


def get_validation_level() -> ValidationLevel:
    """Return the current validation level."""
    if _validation_level is not None:
        return _validation_level
    env = os.environ.get("FLATFRAME_VALIDATE", "").lower()
    level = _STR_TO_LEVEL.get(env)
    if level is not None:
        return level
    if env in ("1", "true", "yes"):
        return ValidationLevel.STRUCTURAL
    return ValidationLevel.OFF


def is_validation_enabled() -> bool:
    """Return ``True`` when the level is ``STRUCTURAL`` or ``FULL``."""
    return get_validation_level() is not ValidationLevel.OFF


def set_validation(level: ValidationLevel | bool | str | None) -> None:
    """Set the validation level.

    Accepts a ``ValidationLevel``, a level string, or a boolean. ``None``
    clears the override so the environment variable applies again.
    """
    global _validation_level
    if level is None or isinstance(level, ValidationLevel):
        _validation_level = level
    elif isinstance(level, bool):
        _validation_level = ValidationLevel.STRUCTURAL if level else ValidationLevel.OFF
    elif isinstance(level, str):
        parsed = _STR_TO_LEVEL.get(level.lower())
        if parsed is None:
            raise ValueError(
                f"Invalid validation level: {level!r}. "
                f"Use ValidationLevel.OFF / STRUCTURAL / FULL, a string, or a bool."
            )
        _validation_level = parsed
    else:
        raise TypeError(f"Expected ValidationLevel, str, or bool, got {type(level).__name__}")


# ---------------------------------------------------------------------------
# Value checks
# ---------------------------------------------------------------------------


def value_conforms(value: Value, dtype: DataType, nullable: bool) -> bool:
    """Return whether ``value`` may be stored in a column of ``dtype``."""
    if value.is_null():
        return nullable
    return dtype is DataType.ANY or value.type_of() is dtype


def check_rows(schema: Schema, rows: Sequence[Sequence[Value]]) -> None:
    """Check every value of ``rows`` against the schema's fields.

    Raises :class:`SchemaError` listing every mismatching column; nothing is
    reported for columns typed ``ANY`` that hold non-null values.
    """
    mismatches: dict[str, tuple[str, str]] = {}
    null_violations: list[str] = []
    fields = list(schema)
    for values in rows:
        for field, value in zip(fields, values):
            if value_conforms(value, field.dtype, field.nullable):
                continue
            if value.is_null():
                if field.name not in null_violations:
                    null_violations.append(field.name)
            elif field.name not in mismatches:
                mismatches[field.name] = (field.dtype.as_str(), value.type_of().as_str())
    if mismatches or null_violations:
        error = SchemaError(type_mismatches=mismatches, null_violations=null_violations)
        logger.warning(f"Schema validation failed: {error}")
        raise error
