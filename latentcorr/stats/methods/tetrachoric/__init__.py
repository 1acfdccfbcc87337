"""
latentcorr.stats.methods.tetrachoric
====================================

Tetrachoric correlation: the correlation r of a bivariate standard normal pair
that, cut at two thresholds, reproduces a 2x2 table. With
z1 = Φ⁻¹((a+b)/n) and z2 = -Φ⁻¹((b+d)/n), r solves Φ₂(z1, z2; r) = a/n.

Four interchangeable solvers are available (see `TetrachoricMethod`):

- `divgi` (default): `divgi.tetrachoric_divgi`
- `search`: `search.tetrachoric_search`
- `kirk`: `kirk.tetrachoric_kirk`
- `brown`: `brown.tetrachoric_brown` (also provides standard errors)

Every call goes through the same preparation before a solver runs:

1. counts are validated (`InvalidInputError`, `DegenerateTableError`);
2. purely diagonal tables give +1 and anti-diagonal tables give -1 exactly;
3. a table with zero cells on only one diagonal is shifted by ±0.5
   keeping every margin fixed.

Examples
--------
>>> from latentcorr.stats.methods.tetrachoric import tetrachoric
>>> tetrachoric(10, 0, 0, 10)
1.0
>>> tetrachoric(0, 7, 3, 0, method="kirk")
-1.0
>>> round(tetrachoric(30, 20, 20, 30, method="search"), 4)
0.309
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from latentcorr.core.names import MethodLike, TetrachoricMethod
from latentcorr.core.table import (
    ContingencyTable,
    TableLike,
    classify_zero_cells,
    continuity_adjusted,
    perfect_association,
)
from latentcorr.stats.common.bivariate import BivariateNormalCdf
from latentcorr.stats.methods.tetrachoric.brown import BrownResult, tetrachoric_brown
from latentcorr.stats.methods.tetrachoric.divgi import tetrachoric_divgi
from latentcorr.stats.methods.tetrachoric.kirk import tetrachoric_kirk
from latentcorr.stats.methods.tetrachoric.search import tetrachoric_search

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TetrachoricResult:
    """
    Estimate with the solver that produced it.

    Attributes:
        r: Tetrachoric correlation in [-1, 1]
        method: Solver used
        se: Asymptotic standard error (Brown only)
        se_zero: Standard error under r = 0 (Brown only)
        itype: AS 116 solution type code (Brown only)
    """

    r: float
    method: TetrachoricMethod
    se: Optional[float] = None
    se_zero: Optional[float] = None
    itype: Optional[int] = None


def prepare_table(table: ContingencyTable) -> ContingencyTable:
    """Continuity-adjust a validated, non-perfect table when it has zero cells."""
    zeros = classify_zero_cells(table)
    if zeros.needs_adjustment:
        adjusted = continuity_adjusted(table, zeros)
        logger.debug(
            "zero cells (kdelta=%d): %s adjusted to %s",
            zeros.kdelta,
            table.as_tuple(),
            adjusted.as_tuple(),
        )
        return adjusted
    return table


def tetrachoric_result(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
    method: MethodLike = "divgi",
    *,
    bvn_cdf: Optional[BivariateNormalCdf] = None,
) -> TetrachoricResult:
    """
    Tetrachoric correlation as a `TetrachoricResult`.

    Args:
        a: Count of cell (1, 1), or a whole `ContingencyTable`
        b: Count of cell (1, 2)
        c: Count of cell (2, 1)
        d: Count of cell (2, 2)
        method: One of "divgi", "search", "kirk", "brown"
        bvn_cdf: Bivariate normal CDF backend for "divgi" and "search"

    Returns:
        `TetrachoricResult`; standard errors are only filled by "brown"

    Raises:
        ValueError: unknown method
        InvalidInputError: negative, non-finite or empty counts
        DegenerateTableError: a row or column total is zero
        ConvergenceFailure: the solver did not converge (see subclasses)
    """
    solver = TetrachoricMethod.parse(method)
    table = ContingencyTable.from_counts(a, b, c, d).validate()

    if solver is TetrachoricMethod.BROWN:
        # AS 116 classifies and adjusts zero cells itself
        res: BrownResult = tetrachoric_brown(table)
        return TetrachoricResult(
            r=res.r, method=solver, se=res.sdr, se_zero=res.sdzero, itype=res.itype
        )

    perfect = perfect_association(table)
    if perfect is not None:
        return TetrachoricResult(r=perfect, method=solver)

    prepared = prepare_table(table)
    if solver is TetrachoricMethod.SEARCH:
        r = tetrachoric_search(prepared, bvn_cdf)
    elif solver is TetrachoricMethod.KIRK:
        r = tetrachoric_kirk(prepared)
    else:
        r = tetrachoric_divgi(prepared, bvn_cdf)
    return TetrachoricResult(r=r, method=solver)


def tetrachoric(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
    method: MethodLike = "divgi",
    *,
    bvn_cdf: Optional[BivariateNormalCdf] = None,
) -> float:
    """
    Tetrachoric correlation of a 2x2 table.

    Same arguments and errors as `tetrachoric_result`; returns only r.

    Examples:
        >>> round(tetrachoric(40, 10, 10, 40, method="brown"), 4)
        0.809
    """
    return tetrachoric_result(a, b, c, d, method, bvn_cdf=bvn_cdf).r


__all__ = [
    "BrownResult",
    "TetrachoricResult",
    "prepare_table",
    "tetrachoric",
    "tetrachoric_brown",
    "tetrachoric_divgi",
    "tetrachoric_kirk",
    "tetrachoric_result",
    "tetrachoric_search",
]
