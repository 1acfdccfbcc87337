"""
latentcorr.stats.methods.approximations
=======================================

Closed-form approximations of the tetrachoric correlation and related
association measures for a 2x2 table.

Every function accepts either four counts ``(a, b, c, d)`` or a
`ContingencyTable`, validates the counts like the iterative solvers do, and
returns a float (`odds_ratio` returns an `OddsRatioResult`).

Measures built on the odds ratio take the natural limit when ``b·c = 0``
(+1) or ``a·d = 0`` (-1) where the formula has one.

Examples
--------
>>> yule_q(40, 10, 20, 30)
0.7142857142857143
>>> round(phi(40, 10, 20, 30), 4)
0.4082
>>> edwards_q(10, 0, 3, 7)
1.0
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from scipy.stats import norm

from latentcorr.core.errors import InvalidInputError
from latentcorr.core.names import BeckerCloggVersion, BonettPriceVersion, CampVariant
from latentcorr.core.table import ContingencyTable, TableLike


@dataclass(frozen=True)
class OddsRatioResult:
    """
    Odds ratio with a Wald test on its logarithm.

    Attributes:
        odds_ratio: ad / (bc)
        n: Total count
        statistic: z = ln(OR) / sqrt(1/a + 1/b + 1/c + 1/d)
        p_value: Two-sided p-value of z
    """

    odds_ratio: float
    n: float
    statistic: float
    p_value: float


def _table(
    a: TableLike, b: Optional[float], c: Optional[float], d: Optional[float]
) -> ContingencyTable:
    return ContingencyTable.from_counts(a, b, c, d).validate()


def _contrast(x: float, y: float) -> float:
    """(x - y) / (x + y) for non-negative x, y not both zero."""
    return (x - y) / (x + y)


def _odds_power_ratio(odds: float, power: float) -> float:
    """(OR^power - 1) / (OR^power + 1), evaluated as tanh(power·ln(OR)/2)."""
    if odds == 0:
        return -1.0
    if math.isinf(odds):
        return 1.0
    return math.tanh(power * math.log(odds) / 2.0)


def _require_finite_odds(table: ContingencyTable, measure: str) -> float:
    odds = table.odds_ratio
    if odds == 0 or math.isinf(odds):
        raise InvalidInputError(
            f"{measure} requires all cells to be non-zero, got {table.as_tuple()}"
        )
    return odds


# ---- Yule family ----


def yule_q(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
) -> float:
    """Yule's Q (Pearson Q2): (ad - bc) / (ad + bc)."""
    t = _table(a, b, c, d)
    return _contrast(t.a * t.d, t.b * t.c)


def yule_y(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
) -> float:
    """
    Yule's Y, the coefficient of colligation.

    Y = (√(ad) - √(bc)) / (√(ad) + √(bc))

    Examples:
        >>> yule_y(40, 10, 10, 40)
        0.6
    """
    t = _table(a, b, c, d)
    return _contrast(math.sqrt(t.a * t.d), math.sqrt(t.b * t.c))


def yule_r(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
) -> float:
    """
    Yule's r (Pearson Q3): cos(π√(bc) / (√(ad) + √(bc))).

    Exact when both margins split evenly.

    Examples:
        >>> round(yule_r(40, 10, 10, 40), 4)
        0.809
    """
    t = _table(a, b, c, d)
    rad = math.sqrt(t.a * t.d)
    rbc = math.sqrt(t.b * t.c)
    return math.cos(math.pi * rbc / (rad + rbc))


def digby_h(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
) -> float:
    """Digby's H: Yule-type contrast of (ad)^(3/4) and (bc)^(3/4)."""
    t = _table(a, b, c, d)
    return _contrast((t.a * t.d) ** 0.75, (t.b * t.c) ** 0.75)


def edwards_q(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
) -> float:
    """Edwards' Q: (OR^(π/4) - 1) / (OR^(π/4) + 1)."""
    t = _table(a, b, c, d)
    return _odds_power_ratio(t.odds_ratio, math.pi / 4.0)


def phi(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
) -> float:
    """Phi coefficient: (ad - bc) / √(R1·R2·C1·C2)."""
    t = _table(a, b, c, d)
    return t.cross_product_difference / math.sqrt(t.r1 * t.r2 * t.c1 * t.c2)


# ---- Pearson ----


def _pearson_orientation(t: ContingencyTable) -> Tuple[ContingencyTable, float]:
    """
    Arrange the table so that ad >= bc, a >= d and c >= b.

    Returns the arranged table and the sign of the association in the input.
    """
    sign = 1.0
    if t.cross_product_difference < 0:
        t = t.swap_columns()
        sign = -1.0
    a, b, c, d = t.as_tuple()
    # orientations that keep {a, d} on the main diagonal
    candidates = [(a, b, c, d), (a, c, b, d), (d, c, b, a), (d, b, c, a)]
    for ca, cb, cc, cd in candidates:
        if ca >= cd and cc >= cb:
            return ContingencyTable(ca, cb, cc, cd), sign
    raise AssertionError("no valid orientation")  # unreachable


def pearson_q1(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
) -> float:
    """
    Pearson's Q1 (Pearson, 1900).

    With the table arranged so that ad > bc, a > d and c > b::

        Q1 = sin(π/2 · (ad - bc) / ((a + b)(b + d)))

    The sign of the input association is restored afterwards.
    """
    t, sign = _pearson_orientation(_table(a, b, c, d))
    ratio = t.cross_product_difference / (t.r1 * t.c2)
    return sign * math.sin(math.pi / 2.0 * ratio)


def pearson_q4(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
) -> float:
    """Pearson's Q4: sin(π/2 · 1 / (1 + 2bc·n / ((ad - bc)(b + c))))."""
    t = _table(a, b, c, d)
    cpd = t.cross_product_difference
    if cpd == 0:
        return 0.0
    return math.sin(math.pi / 2.0 / (1.0 + 2.0 * t.b * t.c * t.n / (cpd * (t.b + t.c))))


def pearson_q5(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
) -> float:
    """
    Pearson's Q5: sin(π/2 · 1 / √(1 + k²)).

    k² = 4abcd·n² / ((ad - bc)²(a + d)(b + c)). The square root discards
    the sign of ad - bc, so the value is always >= 0.
    """
    t = _table(a, b, c, d)
    cpd = t.cross_product_difference
    if cpd == 0:
        return 0.0
    k2 = 4.0 * t.a * t.b * t.c * t.d * t.n**2 / (cpd**2 * (t.a + t.d) * (t.b + t.c))
    return math.sin(math.pi / 2.0 / math.sqrt(1.0 + k2))


# ---- Camp / Cureton ----

# φ by the larger column proportion: first decimal -> row for the second
_CURETON_PHI: Dict[int, List[float]] = {
    5: [0.637, 0.636, 0.636, 0.635, 0.635, 0.634, 0.634, 0.633, 0.633, 0.632, 0.631],
    6: [0.631, 0.631, 0.630, 0.629, 0.628, 0.627, 0.626, 0.625, 0.624, 0.622, 0.621],
    7: [0.621, 0.620, 0.618, 0.616, 0.614, 0.612, 0.610, 0.608, 0.606, 0.603, 0.600],
    8: [0.600, 0.597, 0.594, 0.591, 0.587, 0.583, 0.579, 0.574, 0.569, 0.564, 0.559],
}
_CAMP_PHI: Dict[int, float] = {5: 0.637, 6: 0.63, 7: 0.62, 8: 0.6, 9: 0.56}


def _camp_phi(p: float, method: CampVariant) -> float:
    tenth = int(math.floor(p * 10))
    if method == "camp1":
        return 1.0
    if method == "camp2" or tenth not in _CURETON_PHI:
        return _CAMP_PHI[tenth]
    return _CURETON_PHI[tenth][int(round(p * 100)) - tenth * 10]


def camp_r(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
    method: CampVariant = "cureton",
) -> float:
    """
    Camp's approximation of the tetrachoric correlation.

    Steps: put the larger column first, take p1 = a/C1, p2 = d/C2 and
    p = C1/n, then m = p(1-p)(z1 + z2)/φ(z3) and r = m / √(1 + φ·m²).

    Args:
        method: Source of φ: "cureton" (Cureton's two-decimal table),
            "camp2" (Camp's one-decimal table) or "camp1" (φ = 1). The
            Cureton table stops below p = 0.9; larger p use Camp's value.

    Raises:
        InvalidInputError: unknown method or a zero cell
    """
    if method not in ("cureton", "camp1", "camp2"):
        raise InvalidInputError(
            f"Unknown Camp variant {method!r}; expected 'cureton', 'camp1' or 'camp2'"
        )
    t = _table(a, b, c, d)
    if min(t.as_tuple()) == 0:
        raise InvalidInputError(f"camp_r requires non-zero cells, got {t.as_tuple()}")
    sign = 1.0
    if t.c1 < t.c2:
        t = t.swap_columns()
        sign = -1.0

    p1 = t.a / t.c1
    p2 = t.d / t.c2
    p = t.c1 / t.n
    z1, z2, z3 = norm.ppf([p1, p2, p])
    m = p * (1.0 - p) * (z1 + z2) / norm.pdf(z3)
    return float(sign * m / math.sqrt(1.0 + _camp_phi(p, method) * m**2))


# ---- odds-ratio based ----


def becker_clogg_r(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
    version: BeckerCloggVersion = 1,
) -> float:
    """
    Becker and Clogg (1988) approximations.

    With t_r = Φ⁻¹(R1/n), t_c = Φ⁻¹(C1/n) and
    δ = (e^{-t_r²/2}/pR1 + e^{-t_r²/2}/pR2)(e^{-t_c²/2}/pC1 + e^{-t_c²/2}/pC2):

    - version 1 (ρ*): g = exp(12.4φ - 24.6φ³), φ = ln(OR)/δ, r = (g-1)/(g+1)
    - version 2 (ρ**): r = (OR^(13.3/δ) - 1) / (OR^(13.3/δ) + 1)

    Raises:
        InvalidInputError: unknown version, or a zero cell with version 1
    """
    if version not in (1, 2):
        raise InvalidInputError(f"Unknown Becker-Clogg version {version!r}")
    t = _table(a, b, c, d)
    n = t.n
    tr = norm.ppf(t.r1 / n)
    tc = norm.ppf(t.c1 / n)
    er = math.exp(-(tr**2) / 2.0)
    ec = math.exp(-(tc**2) / 2.0)
    m_r1, m_r2 = -er / (t.r1 / n), er / (t.r2 / n)
    v_c1, v_c2 = -ec / (t.c1 / n), ec / (t.c2 / n)
    delta = (m_r1 - m_r2) * (v_c1 - v_c2)

    if version == 2:
        return _odds_power_ratio(t.odds_ratio, 13.3 / delta)
    phi_bc = math.log(_require_finite_odds(t, "becker_clogg_r")) / delta
    return math.tanh((12.4 * phi_bc - 24.6 * phi_bc**3) / 2.0)


def bonett_price_r(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
    version: BonettPriceVersion = 2,
) -> float:
    """
    Bonett and Price (2005) approximation r = cos(π / (1 + ω^c)).

    - version 1 (ρ*): ω = ad/(bc), c = (1 - |R1 - C1|/(5n) - (½ - p_min)²)/2
    - version 2 (ρ̂*): cells and margins get +½ and +1, so zero cells are
      allowed

    p_min is the smallest of the four marginal proportions.

    Examples:
        >>> round(bonett_price_r(40, 10, 10, 40), 4)
        0.798
    """
    if version not in (1, 2):
        raise InvalidInputError(f"Unknown Bonett-Price version {version!r}")
    t = _table(a, b, c, d)
    n = t.n
    smallest = min(t.r1, t.r2, t.c1, t.c2)
    if version == 1:
        p_min = smallest / n
        power = (1.0 - abs(t.r1 - t.c1) / (5.0 * n) - (0.5 - p_min) ** 2) / 2.0
        omega = t.odds_ratio
        if math.isinf(omega):
            return 1.0
    else:
        p_min = (smallest + 1.0) / (n + 2.0)
        power = (1.0 - abs(t.r1 - t.c1) / (5.0 * (n + 2.0)) - (0.5 - p_min) ** 2) / 2.0
        omega = (t.a + 0.5) * (t.d + 0.5) / ((t.b + 0.5) * (t.c + 0.5))
    return math.cos(math.pi / (1.0 + omega**power))


def bonett_price_y(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
) -> float:
    """
    Bonett and Price (2007) generalization of Yule's Y.

    Y* = (ω̂ˣ - 1) / (ω̂ˣ + 1) with ω̂ = (a+.1)(d+.1) / ((b+.1)(c+.1))
    and x = ½ - (½ - p_min)².
    """
    t = _table(a, b, c, d)
    p_min = min(t.r1, t.r2, t.c1, t.c2) / t.n
    power = 0.5 - (0.5 - p_min) ** 2
    odds_adj = (t.a + 0.1) * (t.d + 0.1) / ((t.b + 0.1) * (t.c + 0.1))
    return _odds_power_ratio(odds_adj, power)


def odds_ratio(
    a: TableLike,
    b: Optional[float] = None,
    c: Optional[float] = None,
    d: Optional[float] = None,
) -> OddsRatioResult:
    """
    Odds ratio with the Wald z test on ln(OR).

    With a zero cell the odds ratio is 0 or inf and the test is undefined;
    `statistic` and `p_value` are then NaN.

    Examples:
        >>> res = odds_ratio(40, 10, 20, 30)
        >>> res.odds_ratio, res.n
        (6.0, 100.0)
    """
    t = _table(a, b, c, d)
    ratio = t.odds_ratio
    if min(t.as_tuple()) == 0:
        return OddsRatioResult(ratio, t.n, math.nan, math.nan)
    se = math.sqrt(sum(1.0 / x for x in t.as_tuple()))
    z = math.log(ratio) / se
    p_value = 2.0 * float(norm.sf(abs(z)))
    return OddsRatioResult(ratio, t.n, z, p_value)


__all__ = [
    "OddsRatioResult",
    "becker_clogg_r",
    "bonett_price_r",
    "bonett_price_y",
    "camp_r",
    "digby_h",
    "edwards_q",
    "odds_ratio",
    "pearson_q1",
    "pearson_q4",
    "pearson_q5",
    "phi",
    "yule_q",
    "yule_r",
    "yule_y",
]
