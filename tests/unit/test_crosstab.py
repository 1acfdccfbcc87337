# tests/unit/test_crosstab.py
"""Cross-tabulation of raw fields with Polars."""

from __future__ import annotations

import polars as pl
import pytest

from latentcorr.backends.polars.crosstab import LABEL_COLUMN, cross_table, two_by_two
from latentcorr.core.errors import InvalidInputError

SEX = ["f", "f", "m", "m", "m", "f", None, "m"]
VOTE = ["y", "n", "y", "y", "n", "y", "y", None]


def test_cross_table_counts_and_labels() -> None:
    df = cross_table(SEX, VOTE)
    assert isinstance(df, pl.DataFrame)
    assert df.columns == [LABEL_COLUMN, "n", "y"]
    assert df.get_column(LABEL_COLUMN).to_list() == ["f", "m"]
    assert df.get_column("y").to_list() == [2, 2]
    assert df.get_column("n").to_list() == [1, 1]


def test_missing_pairs_are_dropped() -> None:
    df = cross_table(SEX, VOTE)
    total = df.select(pl.sum_horizontal(pl.col("n"), pl.col("y")).sum()).item()
    assert total == 6


def test_categories_filter_and_order() -> None:
    sex = ["f", "m", "x", "f", "m"]
    vote = ["y", "n", "y", "maybe", "y"]
    df = cross_table(sex, vote, categories1=["m", "f"], categories2=["y", "n"])
    assert df.get_column(LABEL_COLUMN).to_list() == ["m", "f"]
    assert df.columns == [LABEL_COLUMN, "y", "n"]
    assert df.rows() == [("m", 1, 1), ("f", 1, 0)]


def test_absent_category_counts_zero() -> None:
    df = cross_table(["a", "a"], [1, 1], categories2=[1, 0])
    assert df.rows() == [("a", 2, 0)]


def test_two_by_two_cells() -> None:
    t = two_by_two(SEX, VOTE, categories2=["y", "n"])
    assert t.as_tuple() == (2.0, 1.0, 2.0, 1.0)


def test_two_by_two_with_integer_codes() -> None:
    x = [1, 1, 1, 0, 0, 0, 1, 0]
    y = [1, 1, 0, 0, 0, 1, 1, 0]
    # sorted labels put 0 first
    assert two_by_two(x, y).as_tuple() == (3.0, 1.0, 1.0, 3.0)


def test_two_by_two_needs_two_categories_each() -> None:
    with pytest.raises(InvalidInputError, match="2x2"):
        two_by_two(["a", "b", "c"], ["y", "n", "y"])
    with pytest.raises(InvalidInputError):
        two_by_two(["a", "a"], ["y", "n"])


def test_length_mismatch() -> None:
    with pytest.raises(InvalidInputError, match="same length"):
        cross_table(["a", "b"], ["y"])
