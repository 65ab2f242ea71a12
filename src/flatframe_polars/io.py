"""CSV and Polars boundaries for flatframe.

The CSV reader is deliberately untyped: every cell is read as text, empty
cells become ``Null`` and everything else a ``String`` value, so a freshly
read frame is weakly typed until ``derive_schema`` or ``cast_column`` runs::

    df = read_csv("people.csv")
    df.cast_column("age", DataType.UINT8)
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Union

import polars as pl
from loguru import logger

from flatframe import NULL, DataFrame, Field, Schema, Value
from flatframe._boundary import storage_column, to_value
from flatframe_polars.conversion import FLATFRAME_TO_POLARS, map_polars_dtype

Source = Union[str, Path, bytes, IO[str], IO[bytes]]


def _cell(text: str | None) -> Value:
    if text is None or text == "":
        return NULL
    return Value.string(text)


def read_csv(source: Source, *, has_header: bool = True, **kwargs: Any) -> DataFrame:
    """Read a CSV file (path or buffer) into a weakly typed frame.

    Without a header the columns are named by their position: ``"0"``,
    ``"1"``, .... Remaining keyword arguments go to ``polars.read_csv``.
    """
    data = pl.read_csv(source, has_header=has_header, infer_schema_length=0, **kwargs)
    names = data.columns if has_header else [str(i) for i in range(data.width)]
    df = DataFrame.with_columns(names)
    df.extend([_cell(text) for text in row] for row in data.iter_rows())
    logger.info(f"Read {df.rows()} row(s) x {len(names)} column(s) from csv")
    return df


def write_csv(df: DataFrame, target: str | Path | IO[Any], **kwargs: Any) -> None:
    """Write a frame to CSV, one text cell per value; ``Null`` is an empty field.

    Remaining keyword arguments go to ``polars.DataFrame.write_csv``.
    """
    names = df.columns()
    columns: list[list[str | None]] = [[] for _ in names]
    with df.iter() as rows:
        for record in rows:
            for cells, value in zip(columns, record):
                cells.append(None if value.is_null() else str(value))
    out = pl.DataFrame(
        {name: cells for name, cells in zip(names, columns)},
        schema={name: pl.String for name in names},
    )
    out.write_csv(target, **kwargs)
    logger.info(f"Wrote {df.rows()} row(s) x {len(names)} column(s) to csv")


# ---------------------------------------------------------------------------
# In-memory conversion
# ---------------------------------------------------------------------------


def to_polars(df: DataFrame) -> pl.DataFrame:
    """Convert a frame to a ``polars.DataFrame``.

    Weakly typed columns take the type their values share, or become strings
    when mixed, so ``from_polars`` reads them back with that concrete type.
    Decimal, array and map columns let Polars infer the type.
    """
    series = []
    for field in df.schema:
        dtype, values = storage_column(field, df.column_values(field.name))
        series.append(
            pl.Series(
                field.name,
                [v.to_python() for v in values],
                dtype=FLATFRAME_TO_POLARS.get(dtype),
            )
        )
    return pl.DataFrame(series)


def from_polars(data: pl.DataFrame) -> DataFrame:
    """Build a frame from a ``polars.DataFrame``; every field is nullable."""
    schema = Schema(Field(name, map_polars_dtype(dtype)) for name, dtype in data.schema.items())
    columns = [
        [to_value(obj, field.dtype) for obj in data.get_column(field.name).to_list()]
        for field in schema
    ]
    return DataFrame.with_schema(schema, zip(*columns))
