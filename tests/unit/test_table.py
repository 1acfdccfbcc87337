# tests/unit/test_table.py
"""Validation, zero-cell handling and orientation of ContingencyTable."""

from __future__ import annotations

import math

import pytest

from latentcorr.core.errors import DegenerateTableError, InvalidInputError
from latentcorr.core.table import (
    ContingencyTable,
    classify_zero_cells,
    continuity_adjusted,
    perfect_association,
)
from tests._tables import DEGENERATE_TABLES


def test_margins_and_totals() -> None:
    t = ContingencyTable(50, 10, 20, 30)
    assert (t.r1, t.r2, t.c1, t.c2, t.n) == (60.0, 50.0, 70.0, 40.0, 110.0)
    assert t.cross_product_difference == 1300.0
    assert t.as_tuple() == (50.0, 10.0, 20.0, 30.0)


def test_cells_are_stored_as_floats() -> None:
    t = ContingencyTable(1, 2, 3, 4)
    assert all(isinstance(x, float) for x in t.as_tuple())


def test_odds_ratio_limits() -> None:
    assert ContingencyTable(40, 10, 20, 30).odds_ratio == pytest.approx(6.0)
    assert math.isinf(ContingencyTable(10, 0, 3, 7).odds_ratio)
    assert ContingencyTable(0, 4, 3, 5).odds_ratio == 0.0


def test_swaps_reverse_the_association() -> None:
    t = ContingencyTable(40, 10, 20, 30)
    assert t.swap_rows().as_tuple() == (20.0, 30.0, 40.0, 10.0)
    assert t.swap_columns().as_tuple() == (10.0, 40.0, 30.0, 20.0)
    assert t.swap_rows().cross_product_difference == -t.cross_product_difference
    assert t.swap_rows().swap_columns().cross_product_difference == (
        t.cross_product_difference
    )


def test_from_counts_accepts_table_or_cells() -> None:
    t = ContingencyTable(1, 2, 3, 4)
    assert ContingencyTable.from_counts(t) is t
    assert ContingencyTable.from_counts(1, 2, 3, 4) == t
    with pytest.raises(InvalidInputError):
        ContingencyTable.from_counts(1, 2, 3)


@pytest.mark.parametrize(
    "cells",
    [(-1, 2, 3, 4), (1, float("nan"), 3, 4), (1, 2, float("inf"), 4), (0, 0, 0, 0)],
)
def test_validate_rejects_unusable_counts(cells) -> None:
    with pytest.raises(InvalidInputError):
        ContingencyTable(*cells).validate()


@pytest.mark.parametrize("cells", DEGENERATE_TABLES)
def test_validate_rejects_zero_margin(cells) -> None:
    with pytest.raises(DegenerateTableError):
        ContingencyTable(*cells).validate()


def test_degenerate_is_an_invalid_input() -> None:
    assert issubclass(DegenerateTableError, InvalidInputError)
    assert issubclass(InvalidInputError, ValueError)


@pytest.mark.parametrize(
    "cells, kdelta, delta",
    [
        ((5, 4, 3, 2), 1, 0.0),
        ((0, 4, 3, 5), 2, 0.5),
        ((5, 4, 3, 0), 2, 0.5),
        ((5, 0, 3, 2), 3, -0.5),
        ((5, 4, 0, 2), 3, -0.5),
        ((0, 0, 3, 2), 4, 0.0),
    ],
)
def test_classify_zero_cells(cells, kdelta, delta) -> None:
    zeros = classify_zero_cells(ContingencyTable(*cells))
    assert zeros.kdelta == kdelta
    assert zeros.delta == delta
    assert zeros.needs_adjustment is (kdelta in (2, 3))


@pytest.mark.parametrize("cells", [(0, 4, 3, 5), (5, 0, 3, 2), (7, 3, 0, 1)])
def test_continuity_adjustment_keeps_margins(cells) -> None:
    t = ContingencyTable(*cells)
    adj = continuity_adjusted(t, classify_zero_cells(t))
    assert min(adj.as_tuple()) > 0
    assert (adj.r1, adj.r2, adj.c1, adj.c2) == (t.r1, t.r2, t.c1, t.c2)


def test_perfect_association() -> None:
    assert perfect_association(ContingencyTable(10, 0, 0, 10)) == 1.0
    assert perfect_association(ContingencyTable(0, 7, 3, 0)) == -1.0
    assert perfect_association(ContingencyTable(1, 7, 3, 0)) is None


@pytest.mark.parametrize(
    "cells, delta",
    [
        ((0.2, 0, 3, 5), -0.1),
        ((0, 0.4, 3, 5), 0.2),
        ((1, 0, 3, 5), -0.5),
    ],
)
def test_shift_shrinks_for_cells_below_one(cells, delta) -> None:
    t = ContingencyTable(*cells)
    zeros = classify_zero_cells(t)
    assert zeros.delta == pytest.approx(delta)
    adj = continuity_adjusted(t, zeros)
    assert min(adj.as_tuple()) > 0
    assert (adj.r1, adj.c1) == pytest.approx((t.r1, t.c1))
