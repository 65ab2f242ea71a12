"""DataFrame: a schema-typed table over one flat, row-major buffer.

Every cell of a frame lives in a single list of ``Value``. ``Dim`` holds the
column and row counts and does all of the index arithmetic, and ``Schema``
holds one ``Field`` per column in buffer order. Every mutator keeps the three
in step: ``len(data) == columns * rows`` and ``len(schema) == columns``
whenever control returns to the caller.

Failing mutators change nothing. Row appends check every row before any is
written, and column-wide casts and conversions compute every new value before
the first one is stored.

While a ``View`` from ``iter()`` is live the frame is checked out, and every
mutator raises :class:`BorrowError`.
"""

from __future__ import annotations

import copy
import functools
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger

from flatframe.dim import Dim
from flatframe.dtypes import DataType
from flatframe.errors import (
    BorrowError,
    CastError,
    IndexOutOfBounds,
    InvalidColumnName,
    InvalidDataLength,
    SchemaError,
)
from flatframe.ops.cast import try_cast
from flatframe.schema import Field, Schema
from flatframe.validation import (
    ValidationLevel,
    check_rows,
    get_validation_level,
    is_validation_enabled,
    value_conforms,
)
from flatframe.value import NULL, Value
from flatframe.view import View

if TYPE_CHECKING:
    from flatframe.ops.convert import Conversion
    from flatframe.ops.filter import FilterOp
    from flatframe.ops.select import ColumnSpec
    from flatframe.view import SubView

F = TypeVar("F", bound=Callable[..., Any])

_REPR_ROWS = 10


# ---------------------------------------------------------------------------
# Mutation guard
# ---------------------------------------------------------------------------


def _mutator(method: F) -> F:
    """Refuse to run while the frame is checked out; bump the version after."""

    @functools.wraps(method)
    def wrapper(self: DataFrame, *args: Any, **kwargs: Any) -> Any:
        if self._borrows:
            raise BorrowError(
                f"Cannot call {method.__name__}() while {self._borrows} view(s) "
                "over this frame are live. Exhaust or close them first."
            )
        result = method(self, *args, **kwargs)
        self._version += 1
        if get_validation_level() is ValidationLevel.FULL:
            self._check_invariant()
        return result

    return wrapper  # type: ignore[return-value]


def _to_row(values: Iterable[Any]) -> list[Value]:
    return [Value.from_python(v) for v in values]


# ---------------------------------------------------------------------------
# DataFrame
# ---------------------------------------------------------------------------


class DataFrame:
    """A rectangular table of ``Value`` cells typed by a ``Schema``.

    ``columns`` is a list of names or ``Field`` objects, or a whole
    ``Schema``; ``rows`` is any iterable of row sequences. Cells may be
    ``Value`` objects or native Python values (see ``Value.from_python``)::

        df = DataFrame(["a", "b"], [(1, "x"), (2, "y")])
        df.shape()      # (2, 2)
        df[1, "b"]      # Value.string('y')
    """

    __slots__ = ("_schema", "_dim", "_data", "_borrows", "_version")

    def __init__(
        self,
        columns: Schema | Iterable[str | Field] = (),
        rows: Iterable[Iterable[Any]] = (),
    ) -> None:
        if isinstance(columns, Schema):
            self._schema = columns.copy()
        else:
            self._schema = Schema(
                copy.copy(c) if isinstance(c, Field) else c for c in columns
            )
        self._dim = Dim(len(self._schema), 0)
        self._data: list[Value] = []
        self._borrows = 0
        self._version = 0
        self.extend(rows)

    @classmethod
    def empty(cls) -> DataFrame:
        return cls()

    @classmethod
    def with_columns(cls, names: Iterable[str | Field]) -> DataFrame:
        """A frame with the given columns and no rows."""
        return cls(names)

    @classmethod
    def with_schema(cls, schema: Schema, rows: Iterable[Iterable[Any]] = ()) -> DataFrame:
        return cls(schema, rows)

    @classmethod
    def from_dict(cls, columns: Mapping[str, Sequence[Any]]) -> DataFrame:
        """Build a frame from column-oriented data; every column must be the same length."""
        names = list(columns)
        lengths = {len(values) for values in columns.values()}
        if len(lengths) > 1:
            raise InvalidDataLength(max(lengths), min(lengths))
        return cls(names, zip(*columns.values()))

    @classmethod
    def _from_parts(cls, schema: Schema, dim: Dim, data: list[Value]) -> DataFrame:
        # internal: adopt an already consistent schema, dim and buffer
        frame = cls.__new__(cls)
        frame._schema = schema
        frame._dim = dim
        frame._data = data
        frame._borrows = 0
        frame._version = 0
        return frame

    # --- Shape / metadata ---

    @property
    def schema(self) -> Schema:
        """The frame's schema. Change it through the frame's own methods."""
        return self._schema

    @property
    def dim(self) -> Dim:
        return self._dim.copy()

    def columns(self) -> list[str]:
        """Column names in buffer order."""
        return self._schema.field_names()

    def shape(self) -> tuple[int, int]:
        """Return ``(columns, rows)``."""
        return self._dim.shape()

    def rows(self) -> int:
        return self._dim.rows

    def size(self) -> int:
        """Number of rows."""
        return self._dim.rows

    def __len__(self) -> int:
        return self._dim.rows

    def _check_invariant(self) -> None:
        expected = self._dim.expected_len()
        if len(self._data) != expected:
            raise InvalidDataLength(expected, len(self._data))
        if len(self._schema) != self._dim.columns:
            raise InvalidDataLength(self._dim.columns, len(self._schema))

    def _column_position(self, column: int | str) -> int:
        if isinstance(column, str):
            position = self._schema.find_index(column)
            if position is None:
                raise InvalidColumnName(column)
            return position
        if not 0 <= column < self._dim.columns:
            raise IndexOutOfBounds(column, self._dim.columns)
        return column

    # --- Column mutation ---

    @_mutator
    def push_column(self, column: str | Field) -> int:
        """Append a column and return its position.

        Every existing row gets a ``Null`` in the new slot (or the field's
        ``default`` when a ``Field`` declaring one is pushed).
        """
        field = copy.copy(column) if isinstance(column, Field) else Field(column)
        position = self._schema.push_field(field)
        fill = field.default if field.default is not None else NULL

        old = self._dim
        new = Dim(old.columns + 1, old.rows)
        data: list[Value] = []
        for row in range(old.rows):
            start, end = old.row_range(row)
            data.extend(self._data[start:end])
            data.append(fill)
        self._data = data
        self._dim = new
        logger.debug(f"Pushed column {field.name!r} at position {position}")
        return position

    @_mutator
    def remove_column(self, index: int) -> Field:
        """Remove the column at ``index`` and return its field."""
        if not 0 <= index < self._dim.columns:
            raise IndexOutOfBounds(index, self._dim.columns)
        # walk rows back to front so earlier offsets stay valid
        for row in reversed(range(self._dim.rows)):
            del self._data[self._dim.value_index(row, index)]
        self._dim.columns -= 1
        field = self._schema.remove_at(index)
        logger.debug(f"Removed column {field.name!r} from position {index}")
        return field

    def drop_column(self, name: str) -> Field:
        """Remove a column by name and return its field."""
        position = self._schema.find_index(name)
        if position is None:
            raise InvalidColumnName(name)
        return self.remove_column(position)

    @_mutator
    def rename_column(self, old: str, new: str) -> str:
        renamed = self._schema.rename_field(old, new)
        if renamed is None:
            raise InvalidColumnName(old)
        return renamed

    # --- Row mutation ---

    @_mutator
    def push_row(self, row: Iterable[Any]) -> int:
        """Append one row and return the new row count."""
        values = _to_row(row)
        if len(values) != self._dim.columns:
            raise InvalidDataLength(self._dim.columns, len(values))
        if is_validation_enabled():
            check_rows(self._schema, [values])
        self._data.extend(values)
        self._dim.rows += 1
        return self._dim.rows

    @_mutator
    def push_row_unchecked(self, row: Iterable[Any]) -> int:
        """Append one row without checking its length."""
        self._data.extend(_to_row(row))
        self._dim.rows += 1
        return self._dim.rows

    @_mutator
    def extend(self, rows: Iterable[Iterable[Any]]) -> int:
        """Append rows and return the new row count.

        Every row is checked before any is written: if one has the wrong
        length, none are appended.
        """
        values = [_to_row(row) for row in rows]
        for row in values:
            if len(row) != self._dim.columns:
                raise InvalidDataLength(self._dim.columns, len(row))
        if values and is_validation_enabled():
            check_rows(self._schema, values)
        for row in values:
            self._data.extend(row)
        self._dim.rows += len(values)
        return self._dim.rows

    @_mutator
    def extend_unchecked(self, rows: Iterable[Iterable[Any]]) -> int:
        count = 0
        for row in rows:
            self._data.extend(_to_row(row))
            count += 1
        self._dim.rows += count
        return self._dim.rows

    @_mutator
    def clear(self) -> None:
        """Drop every row and column."""
        self._schema.clear()
        self._data.clear()
        self._dim = Dim()

    # --- Cell access ---

    def row(self, index: int) -> tuple[Value, ...] | None:
        """The values of row ``index``, or ``None`` when it is out of bounds."""
        if not 0 <= index < self._dim.rows:
            return None
        start, end = self._dim.row_range(index)
        return tuple(self._data[start:end])

    def get(self, row: int, column: int | str) -> Value | None:
        """One cell by row index and column position or name; ``None`` if absent."""
        if not 0 <= row < self._dim.rows:
            return None
        if isinstance(column, str):
            position = self._schema.find_index(column)
            if position is None:
                return None
        elif 0 <= column < self._dim.columns:
            position = column
        else:
            return None
        return self._data[self._dim.value_index(row, position)]

    def __getitem__(self, key: int | tuple[int, int | str]) -> Any:
        if isinstance(key, tuple):
            row, column = key
            position = self._column_position(column)
            if not 0 <= row < self._dim.rows:
                raise IndexOutOfBounds(row, self._dim.rows)
            return self._data[self._dim.value_index(row, position)]
        found = self.row(key)
        if found is None:
            raise IndexOutOfBounds(key, self._dim.rows)
        return found

    @_mutator
    def set_value(self, row: int, column: int | str, value: Any) -> None:
        """Overwrite one cell."""
        position = self._column_position(column)
        if not 0 <= row < self._dim.rows:
            raise IndexOutOfBounds(row, self._dim.rows)
        cell = Value.from_python(value)
        if is_validation_enabled():
            field = self._schema.field_at(position)
            if not value_conforms(cell, field.dtype, field.nullable):
                if cell.is_null():
                    raise SchemaError(null_violations=[field.name])
                raise SchemaError(
                    type_mismatches={field.name: (field.dtype.as_str(), cell.type_of().as_str())}
                )
        self._data[self._dim.value_index(row, position)] = cell

    def column_values(self, name: str) -> list[Value]:
        """Every value of the named column, top to bottom."""
        position = self._column_position(name)
        return [self._data[i] for i in self._dim.column_offsets(position)]

    # --- Column-wide transforms ---

    @_mutator
    def map_column(self, name: str, func: Callable[[Value], Any]) -> None:
        """Replace every value of a column with ``func(value)``.

        If ``func`` raises for any cell the column is left untouched.
        """
        position = self._column_position(name)
        offsets = self._dim.column_offsets(position)
        mapped = [Value.from_python(func(self._data[i])) for i in offsets]
        for i, value in zip(offsets, mapped):
            self._data[i] = value

    def cast_column(self, name: str, dtype: DataType) -> None:
        """Cast every value of a column with ``try_cast`` and retype its field.

        The first failing cell raises and nothing is changed.
        """
        self.map_column(name, lambda value: try_cast(value, dtype))
        self._retype(name, dtype)

    def safe_cast_column(self, name: str, dtype: DataType, default: Value = NULL) -> int:
        """Cast every value of a column, substituting ``default`` for failures.

        Returns the number of cells that fell back to ``default``.
        """
        failed = 0

        def cast(value: Value) -> Value:
            nonlocal failed
            try:
                return try_cast(value, dtype)
            except CastError:
                failed += 1
                return default

        self.map_column(name, cast)
        self._retype(name, dtype)
        if failed:
            logger.warning(
                f"safe_cast_column({name!r}, {dtype.as_str()}): "
                f"{failed} value(s) replaced with {default}"
            )
        return failed

    def convert_column(self, name: str, conversion: Conversion) -> DataType:
        """Run a configured conversion over a column and return the new dtype.

        The column's field is retyped to that dtype.
        """
        self.map_column(name, conversion.apply)
        self._retype(name, conversion.dest_type)
        return conversion.dest_type

    def _retype(self, name: str, dtype: DataType) -> None:
        field = self._schema.get_field_mut(name)
        assert field is not None
        field.dtype = dtype

    @_mutator
    def derive_schema(self) -> Schema:
        """Infer each field's dtype and nullability from the data.

        A column whose non-null values all share one type gets that type;
        mixed, empty and all-null columns become ``ANY``. A column is nullable
        exactly when it holds at least one ``Null``.
        """
        for position, field in enumerate(self._schema):
            baseline: DataType | None = None
            strict = True
            nullable = False
            for i in self._dim.column_offsets(position):
                value = self._data[i]
                if value.is_null():
                    nullable = True
                    continue
                dtype = value.type_of()
                if baseline is None:
                    baseline = dtype
                elif dtype is not baseline:
                    strict = False
            field.dtype = baseline if baseline is not None and strict else DataType.ANY
            field.nullable = nullable
            logger.debug(
                f"Derived {field.name!r}: {field.dtype.as_str()}"
                f"{' (nullable)' if nullable else ''}"
            )
        return self._schema

    def validate(self) -> DataFrame:
        """Check every cell against the schema; raise :class:`SchemaError` on mismatch.

        Runs regardless of the validation level. Returns ``self`` for chaining.
        """
        check_rows(self._schema, self.to_rows())
        return self

    # --- Derived frames ---

    def select(self, *specs: ColumnSpec) -> DataFrame:
        """A new frame with the given columns; see ``flatframe.ops.select``."""
        from flatframe.ops.select import select

        return select(self, specs)

    def filter(
        self,
        column_or_predicate: str | Callable[[SubView], bool],
        op: FilterOp | None = None,
        operand: Any = None,
    ) -> DataFrame:
        """A new frame with the matching rows.

        Either ``df.filter("age", FilterOp.GT, 30)`` or
        ``df.filter(lambda row: ...)``.
        """
        from flatframe.ops.filter import filter_column, filter_rows

        if isinstance(column_or_predicate, str):
            if op is None:
                raise TypeError("filter() on a column needs a FilterOp")
            return filter_column(self, column_or_predicate, op, operand)
        return filter_rows(self, column_or_predicate)

    def copy(self) -> DataFrame:
        return DataFrame._from_parts(self._schema.copy(), self._dim.copy(), list(self._data))

    # --- Iteration / export ---

    def iter(self) -> View:
        """A new row iterator starting at row 0. Checks the frame out while live."""
        return View(self)

    def __iter__(self) -> Iterator[SubView]:
        return self.iter()

    def to_rows(self) -> list[tuple[Value, ...]]:
        rows = []
        for row in range(self._dim.rows):
            start, end = self._dim.row_range(row)
            rows.append(tuple(self._data[start:end]))
        return rows

    def to_dict(self) -> dict[str, list[Any]]:
        """Column-oriented native Python values: ``{"a": [1, 2], ...}``."""
        return {
            field.name: [self._data[i].to_python() for i in self._dim.column_offsets(position)]
            for position, field in enumerate(self._schema)
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataFrame):
            return NotImplemented
        return (
            self._dim == other._dim
            and self._schema == other._schema
            and self._data == other._data
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        columns, rows = self.shape()
        header = f"DataFrame(columns={columns}, rows={rows})"
        if not columns:
            return header
        lines = [header, " | ".join(self.columns())]
        for values in self.to_rows()[:_REPR_ROWS]:
            lines.append(" | ".join(str(v) for v in values))
        if rows > _REPR_ROWS:
            lines.append(f"... {rows - _REPR_ROWS} more row(s)")
        return "\n".join(lines)

    def _repr_html_(self) -> str:
        head = "".join(f"<th>{name}</th>" for name in self.columns())
        body = "".join(
            "<tr>" + "".join(f"<td>{v}</td>" for v in values) + "</tr>"
            for values in self.to_rows()[:_REPR_ROWS]
        )
        columns, rows = self.shape()
        return (
            f"<b>DataFrame</b> ({columns} columns, {rows} rows)"
            f"<table><tr>{head}</tr>{body}</table>"
        )
