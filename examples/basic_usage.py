"""Basic usage: read CSV, type the columns, filter, select, write.

Demonstrates the core flatframe workflow with the Polars CSV adapter.
"""

from __future__ import annotations

import tempfile

from flatframe import DataType, FilterOp, Number, ParseDateTime, Select
from flatframe_polars import read_csv, write_csv

# ---------------------------------------------------------------------------
# 1. Write sample data: every cell of a fresh CSV read is text
# ---------------------------------------------------------------------------

CSV = """id,name,age,score,joined
1,Alice,30,85.0,2021-03-04
2,Bob,25,92.5,2022-11-30
3,Charlie,,78.0,2020-01-15
4,Diana,28,95.0,2023-07-01
5,Eve,40,88.0,2019-05-20
"""

with tempfile.NamedTemporaryFile("w", suffix=".csv", delete=False) as f:
    f.write(CSV)
    csv_path = f.name

df = read_csv(csv_path)
print(df)
print(f"Weak schema: {df.schema.is_weak()}")
print()

# ---------------------------------------------------------------------------
# 2. Type the columns: narrowing casts fail loudly, or fall back
# ---------------------------------------------------------------------------

df.cast_column("id", DataType.UINT32)
df.cast_column("age", DataType.UINT8)
df.cast_column("score", DataType.DOUBLE)
df.convert_column("joined", ParseDateTime("%Y-%m-%d"))
print(df.schema)
print()

# ---------------------------------------------------------------------------
# 3. Filter: operands compare at the column's width; a missing age never matches
# ---------------------------------------------------------------------------

adults = df.filter("age", FilterOp.GT_EQ, Number.uint8(28))
print("Users aged 28+:")
print(adults)
print()

# ---------------------------------------------------------------------------
# 4. Iterate: rows are borrowed views until written to
# ---------------------------------------------------------------------------

with df.iter() as rows:
    for record in rows:
        print(f"{record['name']}: {record['score']}")
print()

# ---------------------------------------------------------------------------
# 5. Select with an alias and write the result
# ---------------------------------------------------------------------------

summary = adults.select("name", Select("score", "points"))
print(summary)

with tempfile.NamedTemporaryFile(suffix=".csv", delete=False) as f:
    write_csv(summary, f.name)
    print(f"Wrote summary to {f.name}")

print("\nDone!")
