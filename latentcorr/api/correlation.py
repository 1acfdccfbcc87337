"""
latentcorr.api.correlation
==========================

Field-based entry points: pass two raw binary fields, get a coefficient.

Each function cross-tabulates the fields with
`latentcorr.backends.polars.crosstab.two_by_two` and hands the table to the
matching estimator in `latentcorr.stats.methods`. Use the estimators directly
when the counts are already known.

Examples
--------
>>> from latentcorr.api.correlation import r_tetrachoric, es_yule_q
>>> sex = ["f"] * 30 + ["m"] * 30
>>> vote = ["y"] * 20 + ["n"] * 10 + ["y"] * 10 + ["n"] * 20
>>> round(r_tetrachoric(sex, vote, categories2=["y", "n"]), 4)
0.5
>>> round(es_yule_q(sex, vote, categories2=["y", "n"]), 4)
0.6
"""

from __future__ import annotations
from typing import Any, Optional, Sequence

from latentcorr.backends.polars.crosstab import two_by_two
from latentcorr.core.names import (
    BeckerCloggVersion,
    BonettPriceVersion,
    CampVariant,
    MethodLike,
)
from latentcorr.stats.methods import approximations
from latentcorr.stats.methods.approximations import OddsRatioResult
from latentcorr.stats.methods.tetrachoric import (
    TetrachoricResult,
    tetrachoric,
    tetrachoric_result,
)

Field = Sequence[Any]


def r_tetrachoric(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
    method: MethodLike = "divgi",
) -> float:
    """
    Tetrachoric correlation between two binary fields.

    Parameters
    ----------
    field1 : sequence
        Values of the first variable (rows)
    field2 : sequence
        Values of the second variable (columns)
    categories1 : sequence, optional
        The two categories of field1 to use, in order
    categories2 : sequence, optional
        The two categories of field2 to use, in order
    method : {"divgi", "search", "kirk", "brown"}, default="divgi"
        Solver to use

    Returns
    -------
    float
        The tetrachoric correlation

    Raises
    ------
    InvalidInputError
        Fields of different length or not exactly two categories each
    ConvergenceFailure
        The solver did not converge
    """
    return tetrachoric(two_by_two(field1, field2, categories1, categories2), method=method)


def r_tetrachoric_result(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
    method: MethodLike = "divgi",
) -> TetrachoricResult:
    """Like `r_tetrachoric`, returning the full `TetrachoricResult`."""
    table = two_by_two(field1, field2, categories1, categories2)
    return tetrachoric_result(table, method=method)


def es_yule_q(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> float:
    """Yule's Q between two binary fields."""
    return approximations.yule_q(two_by_two(field1, field2, categories1, categories2))


def es_yule_y(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> float:
    """Yule's Y between two binary fields."""
    return approximations.yule_y(two_by_two(field1, field2, categories1, categories2))


def es_yule_r(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> float:
    """Yule's r (Pearson Q3) between two binary fields."""
    return approximations.yule_r(two_by_two(field1, field2, categories1, categories2))


def es_pearson_q1(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> float:
    """
    Pearson's Q1 between two binary fields.

    Parameters
    ----------
    field1 : sequence
        Values of the first variable (rows)
    field2 : sequence
        Values of the second variable (columns)
    categories1 : sequence, optional
        The two categories of field1 to use, in order
    categories2 : sequence, optional
        The two categories of field2 to use, in order

    Returns
    -------
    float
        sin(pi/2 * (ad - bc) / ((a + b)(b + d))) on the arranged table
    """
    return approximations.pearson_q1(two_by_two(field1, field2, categories1, categories2))


def es_pearson_q4(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> float:
    """Pearson's Q4 between two binary fields."""
    return approximations.pearson_q4(two_by_two(field1, field2, categories1, categories2))


def es_pearson_q5(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> float:
    """Pearson's Q5 between two binary fields."""
    return approximations.pearson_q5(two_by_two(field1, field2, categories1, categories2))


def es_camp_r(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
    method: CampVariant = "cureton",
) -> float:
    """Camp's tetrachoric approximation between two binary fields."""
    table = two_by_two(field1, field2, categories1, categories2)
    return approximations.camp_r(table, method=method)


def es_becker_clogg_r(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
    version: BeckerCloggVersion = 1,
) -> float:
    """Becker-Clogg tetrachoric approximation between two binary fields."""
    table = two_by_two(field1, field2, categories1, categories2)
    return approximations.becker_clogg_r(table, version=version)


def es_bonett_price_r(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
    version: BonettPriceVersion = 2,
) -> float:
    """Bonett-Price tetrachoric approximation between two binary fields."""
    table = two_by_two(field1, field2, categories1, categories2)
    return approximations.bonett_price_r(table, version=version)


def es_bonett_price_y(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> float:
    """Bonett-Price generalization of Yule's Y between two binary fields."""
    return approximations.bonett_price_y(
        two_by_two(field1, field2, categories1, categories2)
    )


def es_digby_h(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> float:
    """Digby's H, a Yule-type contrast of (ad)**0.75 and (bc)**0.75."""
    return approximations.digby_h(two_by_two(field1, field2, categories1, categories2))


def es_edwards_q(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> float:
    """Edwards' Q, OR**(pi/4) mapped onto [-1, 1], between two binary fields."""
    return approximations.edwards_q(two_by_two(field1, field2, categories1, categories2))


def es_phi(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> float:
    """Phi coefficient between two binary fields."""
    return approximations.phi(two_by_two(field1, field2, categories1, categories2))


def es_odds_ratio(
    field1: Field,
    field2: Field,
    categories1: Optional[Sequence[Any]] = None,
    categories2: Optional[Sequence[Any]] = None,
) -> OddsRatioResult:
    """Odds ratio and its Wald test between two binary fields."""
    return approximations.odds_ratio(two_by_two(field1, field2, categories1, categories2))
