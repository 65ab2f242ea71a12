"""Column selection into a new frame.

``select`` resolves every requested column up front, builds the output schema
in request order (optionally aliasing), then copies only the selected cells
row by row into a fresh buffer::

    select(df, ["b", "c"])           # columns b, c
    select(df, [("a", "z")])         # column a, renamed to z
    select(df, [Select("a", "z")])   # same thing
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Union

from flatframe.dim import Dim
from flatframe.errors import InvalidColumnName
from flatframe.schema import Schema
from flatframe.value import Value

if TYPE_CHECKING:
    from flatframe.dataframe import DataFrame


class Select:
    """One requested output column: a source name and an optional alias."""

    __slots__ = ("name", "alias")

    def __init__(self, name: str, alias: str | None = None) -> None:
        self.name = name
        self.alias = alias

    @property
    def output_name(self) -> str:
        return self.alias if self.alias is not None else self.name

    @classmethod
    def parse(cls, spec: ColumnSpec) -> Select:
        """Accept a bare name, a ``(name, alias)`` pair, or a ``Select``."""
        if isinstance(spec, Select):
            return spec
        if isinstance(spec, str):
            return cls(spec)
        if isinstance(spec, tuple) and len(spec) == 2:
            return cls(spec[0], spec[1])
        raise TypeError(f"Expected a column name or (name, alias) pair, got {spec!r}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Select):
            return NotImplemented
        return self.name == other.name and self.alias == other.alias

    def __hash__(self) -> int:
        return hash((self.name, self.alias))

    def __repr__(self) -> str:
        if self.alias is None:
            return f"Select({self.name!r})"
        return f"Select({self.name!r}, {self.alias!r})"


ColumnSpec = Union[str, tuple[str, str], Select]


def select(df: DataFrame, specs: Iterable[ColumnSpec]) -> DataFrame:
    """Return a new frame holding only the requested columns, in request order.

    Raises :class:`InvalidColumnName` at the first name that is not in ``df``.
    The result owns its buffer; later changes to ``df`` do not affect it.
    """
    schema = Schema()
    positions: list[int] = []
    for spec in (Select.parse(s) for s in specs):
        found = df.schema.get_field_full(spec.name)
        if found is None:
            raise InvalidColumnName(spec.name)
        position, field = found
        schema.push_field(field.with_name(spec.output_name))
        positions.append(position)

    dim = df.dim
    source = df._data
    data: list[Value] = []
    for row in range(dim.rows):
        start, _ = dim.row_range(row)
        data.extend(source[start + position] for position in positions)

    return type(df)._from_parts(schema, Dim(len(positions), dim.rows), data)
