"""flatframe Polars adapter: CSV files and Polars frames."""

from importlib.metadata import version as _version

__version__: str = _version("flatframe")

from flatframe_polars.conversion import map_flatframe_dtype, map_polars_dtype
from flatframe_polars.io import from_polars, read_csv, to_polars, write_csv

__all__ = [
    "map_flatframe_dtype",
    "map_polars_dtype",
    "from_polars",
    "read_csv",
    "to_polars",
    "write_csv",
]
