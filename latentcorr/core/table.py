"""
latentcorr.core.table
=====================

The 2x2 contingency table shared by every estimator.

Cells are laid out as::

            col 1   col 2
    row 1     a       b
    row 2     c       d

This module owns validation of the counts, classification of zero cells and
the margin-preserving continuity adjustment used before the iterative solvers.

Examples
--------
>>> t = ContingencyTable(50, 10, 10, 30)
>>> t.n, t.r1, t.c2
(100.0, 60.0, 40.0)
>>> t.odds_ratio
15.0
>>> classify_zero_cells(ContingencyTable(0, 4, 3, 5)).kdelta
2
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from latentcorr.core.errors import DegenerateTableError, InvalidInputError


@dataclass(frozen=True)
class ContingencyTable:
    """Counts of a 2x2 cross-tabulation of two binary variables."""

    a: float
    b: float
    c: float
    d: float

    def __post_init__(self) -> None:
        for name in ("a", "b", "c", "d"):
            object.__setattr__(self, name, float(getattr(self, name)))

    @classmethod
    def from_counts(
        cls,
        a: Union["ContingencyTable", float],
        b: Optional[float] = None,
        c: Optional[float] = None,
        d: Optional[float] = None,
    ) -> "ContingencyTable":
        """Accept either a ready table or four counts."""
        if isinstance(a, ContingencyTable):
            return a
        if b is None or c is None or d is None:
            raise InvalidInputError("Four cell counts (a, b, c, d) are required")
        return cls(a, b, c, d)

    # ---- margins ----

    @property
    def r1(self) -> float:
        return self.a + self.b

    @property
    def r2(self) -> float:
        return self.c + self.d

    @property
    def c1(self) -> float:
        return self.a + self.c

    @property
    def c2(self) -> float:
        return self.b + self.d

    @property
    def n(self) -> float:
        return self.a + self.b + self.c + self.d

    @property
    def cross_product_difference(self) -> float:
        """ad - bc; its sign is the sign of the association."""
        return self.a * self.d - self.b * self.c

    @property
    def odds_ratio(self) -> float:
        """ad / (bc), with the IEEE limit when bc is zero."""
        num = self.a * self.d
        den = self.b * self.c
        if den == 0:
            return math.inf if num > 0 else math.nan
        return num / den

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.a, self.b, self.c, self.d

    # ---- reorientation ----

    def swap_rows(self) -> "ContingencyTable":
        return ContingencyTable(self.c, self.d, self.a, self.b)

    def swap_columns(self) -> "ContingencyTable":
        return ContingencyTable(self.b, self.a, self.d, self.c)

    # ---- validation ----

    def validate(self) -> "ContingencyTable":
        """
        Check the counts and return the table unchanged.

        Raises:
            InvalidInputError: a cell is negative or non-finite, or n is zero
            DegenerateTableError: a row or column total is zero
        """
        for name, value in zip("abcd", self.as_tuple()):
            if not math.isfinite(value):
                raise InvalidInputError(f"Cell {name} is not finite: {value}")
            if value < 0:
                raise InvalidInputError(f"Cell {name} is negative: {value}")
        if self.n == 0:
            raise InvalidInputError("Table is empty (all cells are zero)")
        if min(self.r1, self.r2, self.c1, self.c2) == 0:
            raise DegenerateTableError(
                f"Row or column total is zero in table {self.as_tuple()}"
            )
        return self


@dataclass(frozen=True)
class ZeroCells:
    """
    Zero-cell pattern of a table.

    Attributes:
        kdelta: 1 no zero cell, 2 a or d is zero, 3 b or c is zero,
            4 both (a zero row or column)
        delta: Shift added to a and d and subtracted from b and c
    """

    kdelta: int
    delta: float

    @property
    def needs_adjustment(self) -> bool:
        return self.kdelta in (2, 3)


CONTINUITY_SHIFT = 0.5


def classify_zero_cells(table: ContingencyTable) -> ZeroCells:
    """
    Classify which diagonal holds zero cells.

    The shift is 0.5, reduced to half the smallest cell it is taken from
    when that cell is below one, so every adjusted cell stays positive.
    """
    kdelta = 1
    if table.a == 0 or table.d == 0:
        kdelta = 2
    if table.b == 0 or table.c == 0:
        kdelta += 2
    if kdelta == 2:
        delta = min(CONTINUITY_SHIFT, 0.5 * min(table.b, table.c))
    elif kdelta == 3:
        delta = -min(CONTINUITY_SHIFT, 0.5 * min(table.a, table.d))
    else:
        delta = 0.0
    return ZeroCells(kdelta=kdelta, delta=delta)


def continuity_adjusted(table: ContingencyTable, zeros: ZeroCells) -> ContingencyTable:
    """
    Shift the cells by ±delta so no cell is zero while every margin is unchanged.

    Examples:
        >>> t = ContingencyTable(0, 4, 3, 5)
        >>> continuity_adjusted(t, classify_zero_cells(t)).as_tuple()
        (0.5, 3.5, 2.5, 5.5)
    """
    delta = zeros.delta
    return ContingencyTable(
        table.a + delta, table.b - delta, table.c - delta, table.d + delta
    )


def perfect_association(table: ContingencyTable) -> Optional[float]:
    """Return +1 / -1 for purely diagonal / anti-diagonal tables, else None."""
    if table.b == 0 and table.c == 0:
        return 1.0
    if table.a == 0 and table.d == 0:
        return -1.0
    return None


# Accepted in place of a table by the public estimators.
TableLike = Union[ContingencyTable, float]
