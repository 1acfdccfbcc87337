"""
latentcorr.backends.polars.crosstab
===================================

Cross-tabulation of two raw categorical fields with Polars.

- Pairs with a missing value in either field are dropped.
- Without explicit categories, row and column labels are the sorted distinct
  values that remain; with categories, only those values are kept, in the
  given order (absent categories count as zero).

This module contains no estimator logic, it only turns fields into counts.

Examples
--------
>>> sex = ["f", "f", "m", "m", "m", None]
>>> vote = ["y", "n", "y", "y", "n", "y"]
>>> cross_table(sex, vote).rows()
[('f', 1, 1), ('m', 1, 2)]
>>> two_by_two(sex, vote, categories2=["y", "n"]).as_tuple()
(1.0, 1.0, 2.0, 1.0)
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple

import polars as pl

from latentcorr.core.errors import InvalidInputError
from latentcorr.core.table import ContingencyTable

LABEL_COLUMN = "category"


def _tabulate(
    field1: Sequence[Any],
    field2: Sequence[Any],
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> Tuple[List[Any], List[Any], Dict[Tuple[Any, Any], int]]:
    """Return (row labels, column labels, counts by label pair)."""
    s1 = pl.Series("field1", field1)
    s2 = pl.Series("field2", field2)
    if len(s1) != len(s2):
        raise InvalidInputError(
            f"Fields must have the same length, got {len(s1)} and {len(s2)}"
        )

    df = pl.DataFrame([s1, s2]).drop_nulls()
    if categories1 is not None:
        df = df.filter(pl.col("field1").is_in(list(categories1)))
    if categories2 is not None:
        df = df.filter(pl.col("field2").is_in(list(categories2)))

    counts = df.group_by(["field1", "field2"]).agg(pl.len().alias("count"))
    lookup = {(r, c): int(n) for r, c, n in counts.iter_rows()}

    rows = (
        list(categories1)
        if categories1 is not None
        else sorted(df.get_column("field1").unique().to_list())
    )
    cols = (
        list(categories2)
        if categories2 is not None
        else sorted(df.get_column("field2").unique().to_list())
    )
    return rows, cols, lookup


def cross_table(
    field1: Sequence[Any],
    field2: Sequence[Any],
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> pl.DataFrame:
    """
    Frequency cross table of two fields.

    Args:
        field1: Values defining the rows
        field2: Values defining the columns
        categories1: Row categories to keep, in order (default: all, sorted)
        categories2: Column categories to keep, in order (default: all, sorted)

    Returns:
        DataFrame with a ``category`` column holding the row labels and one
        count column per column label (named by ``str(label)``)

    Raises:
        InvalidInputError: the fields differ in length
    """
    rows, cols, lookup = _tabulate(field1, field2, categories1, categories2)
    data: Dict[str, List[Any]] = {LABEL_COLUMN: rows}
    for col in cols:
        data[str(col)] = [lookup.get((row, col), 0) for row in rows]
    return pl.DataFrame(data)


def two_by_two(
    field1: Sequence[Any],
    field2: Sequence[Any],
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> ContingencyTable:
    """
    2x2 table of two binary fields.

    Same arguments as `cross_table`.

    Raises:
        InvalidInputError: the fields differ in length, or they do not have
            exactly two categories each after filtering
    """
    rows, cols, lookup = _tabulate(field1, field2, categories1, categories2)
    if len(rows) != 2 or len(cols) != 2:
        raise InvalidInputError(
            f"Expected exactly 2x2 categories, got {len(rows)}x{len(cols)}: "
            f"rows={rows}, columns={cols}"
        )
    (r1, r2), (c1, c2) = rows, cols
    return ContingencyTable(
        lookup.get((r1, c1), 0),
        lookup.get((r1, c2), 0),
        lookup.get((r2, c1), 0),
        lookup.get((r2, c2), 0),
    )
