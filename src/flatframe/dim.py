"""Row-major addressing over a flat value buffer.

All index arithmetic used by ``DataFrame`` lives here. A frame with ``columns``
columns stores cell ``(row, col)`` at ``row * columns + col``, and row ``r``
occupies the half-open range ``[r * columns, r * columns + columns)``.
"""

from __future__ import annotations


class Dim:
    """A ``(column_count, row_count)`` pair."""

    __slots__ = ("columns", "rows")

    def __init__(self, columns: int = 0, rows: int = 0) -> None:
        self.columns = columns
        self.rows = rows

    def __repr__(self) -> str:
        return f"Dim(columns={self.columns}, rows={self.rows})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dim):
            return NotImplemented
        return self.columns == other.columns and self.rows == other.rows

    def copy(self) -> Dim:
        return Dim(self.columns, self.rows)

    def expected_len(self) -> int:
        """Number of cells the buffer must hold."""
        return self.columns * self.rows

    def row_range(self, row: int) -> tuple[int, int]:
        """Start and end offsets of a row in the buffer."""
        start = self.columns * row
        return start, start + self.columns

    def value_index(self, row: int, column: int) -> int:
        """Offset of a single cell in the buffer."""
        return row * self.columns + column

    def column_offsets(self, column: int) -> range:
        """Offsets of every cell of a column, top to bottom."""
        return range(column, self.expected_len(), self.columns or 1)

    def shape(self) -> tuple[int, int]:
        """Return ``(columns, rows)``."""
        return self.columns, self.rows
