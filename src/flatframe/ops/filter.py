"""Row filtering into a new frame."""

from __future__ import annotations

import enum
import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from flatframe.dim import Dim
from flatframe.errors import InvalidColumnName
from flatframe.value import Kind, Value
from flatframe.view import SubView

if TYPE_CHECKING:
    from flatframe.dataframe import DataFrame


class FilterOp(enum.Enum):
    """Comparison applied between a cell and an operand."""

    EQ = "eq"
    NOT_EQ = "not_eq"
    GT = "gt"
    GT_EQ = "gt_eq"
    LT = "lt"
    LT_EQ = "lt_eq"
    REGEXP = "regexp"


_COMPARE: dict[FilterOp, Callable[[Value, Value], bool]] = {
    FilterOp.EQ: lambda cell, operand: cell == operand,
    FilterOp.NOT_EQ: lambda cell, operand: cell != operand,
    FilterOp.GT: lambda cell, operand: cell > operand,
    FilterOp.GT_EQ: lambda cell, operand: cell >= operand,
    FilterOp.LT: lambda cell, operand: cell < operand,
    FilterOp.LT_EQ: lambda cell, operand: cell <= operand,
}


def _matcher(op: FilterOp, operand: Any) -> Callable[[Value], bool]:
    if op is FilterOp.REGEXP:
        pattern = operand if isinstance(operand, re.Pattern) else re.compile(operand)
        return lambda cell: cell.kind is Kind.STRING and pattern.search(cell.payload) is not None
    compare = _COMPARE[op]
    expected = Value.from_python(operand)
    return lambda cell: compare(cell, expected)


def filter_column(df: DataFrame, column: str, op: FilterOp, operand: Any) -> DataFrame:
    """Keep the rows whose ``column`` cell satisfies ``cell <op> operand``.

    ``operand`` is any value ``Value.from_python`` accepts, or a pattern for
    ``REGEXP`` (matched with ``re.search`` against String cells). Incomparable
    pairs, such as a String cell against a numeric operand, never match.
    """
    position = df.schema.find_index(column)
    if position is None:
        raise InvalidColumnName(column)
    matches = _matcher(op, operand)
    return filter_rows(df, lambda record: matches(record[position]))


def filter_rows(df: DataFrame, predicate: Callable[[SubView], bool]) -> DataFrame:
    """Keep the rows for which ``predicate(row)`` is true."""
    data: list[Value] = []
    kept = 0
    with df.iter() as view:
        for record in view:
            values = record.data()
            if predicate(record):
                data.extend(values)
                kept += 1
    columns = len(df.schema)
    return type(df)._from_parts(df.schema.copy(), Dim(columns, kept), data)
