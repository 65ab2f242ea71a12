"""Row iteration over a frame.

``DataFrame.iter()`` returns a ``View``: a lazy iterator that yields one
``SubView`` per row, top to bottom. While a view is live the frame is checked
out, and any mutator raises :class:`BorrowError` instead of changing the data
under the iterator. The view checks the frame back in when it is exhausted,
closed, exited as a context manager, or garbage collected::

    with df.iter() as rows:
        for record in rows:
            print(record["name"])

A ``SubView`` starts out borrowing its row from the frame's buffer. Writing
through ``set`` (or ``to_mut``) copies the row first, so the frame itself is
never changed through a view. A borrowed ``SubView`` that outlives a later
mutation of its frame refuses to read rather than return misaligned cells.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any

from flatframe.errors import BorrowError, IndexOutOfBounds, InvalidColumnName
from flatframe.value import Value

if TYPE_CHECKING:
    from flatframe.dataframe import DataFrame
    from flatframe.schema import Schema

# ---------------------------------------------------------------------------
# SubView
# ---------------------------------------------------------------------------


class SubView:
    """One row of a frame, borrowed until first written to."""

    __slots__ = ("_schema", "_frame", "_start", "_end", "_version", "_owned")

    def __init__(
        self,
        schema: Schema,
        frame: DataFrame | None = None,
        start: int = 0,
        end: int = 0,
        *,
        values: Sequence[Value] | None = None,
    ) -> None:
        self._schema = schema
        self._frame = frame
        self._start = start
        self._end = end
        self._version = frame._version if frame is not None else 0
        self._owned: list[Value] | None = list(values) if values is not None else None
        if frame is None and values is None:
            self._owned = []

    @classmethod
    def owned(cls, schema: Schema, values: Sequence[Value]) -> SubView:
        """Build a row view over its own copy of ``values``."""
        return cls(schema, values=values)

    # --- Copy-on-write state ---

    def is_borrowed(self) -> bool:
        return self._owned is None

    def _borrowed(self) -> list[Value]:
        frame = self._frame
        assert frame is not None
        if frame._version != self._version:
            raise BorrowError(
                "The frame was mutated after this row was read; take a new row view"
            )
        return frame._data

    def data(self) -> tuple[Value, ...]:
        """The row's values, in column order."""
        if self._owned is not None:
            return tuple(self._owned)
        return tuple(self._borrowed()[self._start : self._end])

    def to_mut(self) -> list[Value]:
        """Promote to an owned row and return its mutable value list."""
        if self._owned is None:
            self._owned = self._borrowed()[self._start : self._end]
            self._schema = self._schema.copy()
            self._frame = None
        return self._owned

    # --- Schema lookups ---

    def columns(self) -> list[str]:
        return self._schema.field_names()

    def column_index(self, name: str) -> int | None:
        return self._schema.find_index(name)

    def has_column(self, name: str) -> bool:
        return self._schema.field_exists(name)

    def _position(self, key: int | str) -> int | None:
        if isinstance(key, str):
            return self._schema.find_index(key)
        length = len(self)
        if -length <= key < length:
            return key % length
        return None

    # --- Access ---

    def get(self, key: int | str) -> Value | None:
        """Value by position or column name; ``None`` when there is none."""
        if self._owned is not None:
            values, offset = self._owned, 0
        else:
            values, offset = self._borrowed(), self._start
        position = self._position(key)
        if position is None:
            return None
        return values[offset + position]

    def __getitem__(self, key: int | str) -> Value:
        value = self.get(key)
        if value is None:
            if isinstance(key, str):
                raise InvalidColumnName(key)
            raise IndexOutOfBounds(key, len(self))
        return value

    def set(self, key: int | str, value: Any) -> None:
        """Write one cell of this row's own copy."""
        position = self._position(key)
        if position is None:
            if isinstance(key, str):
                raise InvalidColumnName(key)
            raise IndexOutOfBounds(key, len(self))
        self.to_mut()[position] = Value.from_python(value)

    __setitem__ = set

    def __len__(self) -> int:
        if self._owned is not None:
            return len(self._owned)
        return self._end - self._start

    def __iter__(self) -> Iterator[Value]:
        return iter(self.data())

    def to_dict(self) -> dict[str, Value]:
        return dict(zip(self.columns(), self.data()))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SubView):
            return self.data() == other.data()
        if isinstance(other, (list, tuple)):
            return list(self.data()) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "borrowed" if self.is_borrowed() else "owned"
        cells = ", ".join(str(v) for v in self.data())
        return f"SubView[{state}]({cells})"


# ---------------------------------------------------------------------------
# View
# ---------------------------------------------------------------------------


class View:
    """Lazy iterator over a frame's rows.

    Each call to ``DataFrame.iter()`` returns a new view starting at row 0.
    """

    __slots__ = ("_frame", "_ptr", "_live")

    def __init__(self, frame: DataFrame) -> None:
        self._frame = frame
        self._ptr = 0
        self._live = True
        frame._borrows += 1

    def _release(self) -> None:
        if self._live:
            self._live = False
            self._frame._borrows -= 1

    def close(self) -> None:
        """Check the frame back in. Further iteration yields nothing."""
        self._release()

    def __iter__(self) -> View:
        return self

    def __next__(self) -> SubView:
        if not self._live:
            raise StopIteration
        frame = self._frame
        start, end = frame._dim.row_range(self._ptr)
        if self._ptr >= frame._dim.rows or end > len(frame._data):
            self._release()
            raise StopIteration
        self._ptr += 1
        return SubView(frame._schema, frame, start, end)

    def __enter__(self) -> View:
        return self

    def __exit__(self, *exc: object) -> None:
        self._release()

    def __del__(self) -> None:
        self._release()

    def to_frame(self) -> DataFrame:
        """Drain the remaining rows into a new, independent frame."""
        from flatframe.dataframe import DataFrame

        frame = self._frame
        schema = frame._schema.copy()
        rows = [record.data() for record in self]
        return DataFrame.with_schema(schema, rows)

    def __repr__(self) -> str:
        state = "live" if self._live else "closed"
        return f"View(row={self._ptr}, {state})"
