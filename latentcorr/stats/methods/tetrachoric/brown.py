"""
latentcorr.stats.methods.tetrachoric.brown
==========================================

Brown (1977) algorithm AS 116 for the tetrachoric correlation and its
standard error.

Outline:

- A single zero cell (or a zero diagonal) is shifted by ±0.5 in a
  margin-preserving way; a zero row or column is rejected.
- Rows are interchanged when ad - bc < 0 so the iteration always works on a
  positive correlation; the sign is restored at the end.
- Equal diagonals (a == d, b == c) are solved exactly by a cosine formula.
- Otherwise Yule's Y starts Newton-Raphson on the tetrachoric series
  (Hermite polynomial expansion) while r <= 0.95, and a 32-node
  Gauss-Legendre quadrature with secant updates takes over above that.
- The asymptotic standard error is computed for the estimate and for the
  hypothesis r = 0.

Reference:
    Brown, M. B. (1977). Algorithm AS 116: The tetrachoric correlation and
    its asymptotic standard error. Journal of the Royal Statistical Society,
    Series C, 26(3), 343-351.

Examples
--------
>>> res = tetrachoric_brown(ContingencyTable(40, 10, 10, 40))
>>> round(res.r, 4)
0.809
>>> res.itype
2
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from scipy.stats import norm

from latentcorr.core.errors import ConvergenceFailure, DegenerateTableError
from latentcorr.core.table import (
    ContingencyTable,
    classify_zero_cells,
    continuity_adjusted,
    perfect_association,
)
from latentcorr.stats.common.bivariate import TWO_PI, normal_deviate

logger = logging.getLogger(__name__)

# positive half of the 32-point Gauss-Legendre rule on [-1, 1]
QUAD_NODES = np.array(
    [
        0.9972638618, 0.9856115115, 0.9647622556, 0.9349060759,
        0.8963211558, 0.8493676137, 0.794483796, 0.7321821187,
        0.6630442669, 0.5877157572, 0.5068999089, 0.4213512761,
        0.3318686023, 0.2392873623, 0.1444719616, 0.0483076657,
    ]
)  # fmt: skip
QUAD_WEIGHTS = np.array(
    [
        0.00701861, 0.0162743947, 0.0253920653, 0.0342738629,
        0.042835898, 0.0509980593, 0.0586840935, 0.0658222228,
        0.0723457941, 0.0781938958, 0.0833119242, 0.087652093,
        0.0911738787, 0.0938443991, 0.0956387201, 0.096540085,
    ]
)  # fmt: skip

SQT2PI = 2.50662827
RLIMIT = 0.9999
RCUT = 0.95
UPLIM = 5.0
VAR_CONST = 1e-60
CHALF = 1e-30
CONV = 1e-8
CITER = 1e-6
NITER = 25


@dataclass(frozen=True)
class BrownResult:
    """
    Output of AS 116.

    Attributes:
        r: Tetrachoric correlation
        sdr: Asymptotic standard error of r
        sdzero: Standard error of r under r = 0
        itype: How r was found: number of series terms (> 4), 1 quadrature,
            2 cosine formula, 3 perfect association, 4 independence.
            Negative when a zero cell was adjusted.
    """

    r: float
    sdr: float
    sdzero: float
    itype: int


@dataclass
class _Problem:
    """Adjusted cells and marginal quantities used by the iterations."""

    aa: float
    bb: float
    cc: float
    dd: float
    tot: float
    probaa: float
    probab: float
    probac: float
    zac: float
    zab: float
    ss: float
    ksign: int


def _series(rr: float, pb: _Problem) -> Tuple[float, float, int]:
    """Tetrachoric series at rr; returns (probability, derivative, terms)."""
    va, vb, wa, wb = 1.0, pb.zac, 1.0, pb.zab
    term = 1
    iterm = 0
    total = pb.probab * pb.probac
    deriv = 0.0
    sr = pb.ss
    while True:
        if abs(sr) <= VAR_CONST:
            sr /= VAR_CONST
            va *= CHALF
            vb *= CHALF
            wa *= CHALF
            wb *= CHALF
        dr = sr * va * wa
        sr = sr * rr / term
        cof = sr * va * wa
        # iterm counts consecutive terms below CONV
        iterm = 0 if abs(cof) > CONV else iterm + 1
        total += cof
        deriv += dr
        vaa, waa = va, wa
        va, wa = vb, wb
        vb = pb.zac * va - term * vaa
        wb = pb.zab * wa - term * waa
        term += 1
        if iterm >= 2 and term >= 6:
            return total, deriv, term


def _quadrature_probability(rr: float, pb: _Problem) -> float:
    """P(X > zac, Y < zab) for correlation rr by Gauss-Legendre quadrature."""
    rrsq = math.sqrt(1.0 - rr * rr)
    amid = 0.5 * (UPLIM + pb.zac)
    xlen = UPLIM - amid
    xl = np.concatenate([amid + QUAD_NODES * xlen, amid - QUAD_NODES * xlen])
    weights = np.concatenate([QUAD_WEIGHTS, QUAD_WEIGHTS])
    arg = (pb.zab - rr * xl) / rrsq
    # terms with arg < -6 are negligible and would underflow
    keep = arg >= -6.0
    total = np.sum(weights[keep] * np.exp(-0.5 * xl[keep] ** 2) * norm.cdf(arg[keep]))
    return float(total) * xlen / SQT2PI


def _solve_quadrature(
    rr: float, rrprev: float, last_sum: float, iteration: int, pb: _Problem
) -> float:
    """Secant iteration on the quadrature probability for rr > RCUT."""
    sumprv = pb.probab - last_sum
    prob = pb.aa / pb.tot if pb.ksign == 2 else pb.bb / pb.tot
    while True:
        total = _quadrature_probability(rr, pb)
        if abs(prob - total) <= CITER:
            return rr
        iteration += 1
        if iteration >= NITER:
            raise ConvergenceFailure("brown", last_value=rr, iterations=iteration)
        if sumprv == total:
            return rr
        rrest = ((prob - total) * rrprev - (prob - sumprv) * rr) / (sumprv - total)
        rrest = min(max(rrest, 0.0), RLIMIT)
        rrprev, rr, sumprv = rr, rrest, total
        if rr == rrprev:
            return rr


def _solve(pb: _Problem) -> Tuple[float, int]:
    """Iterate from Yule's Y; returns (rr, itype) for the positive problem."""
    aadd = pb.aa * pb.dd
    bbcc = pb.bb * pb.cc
    rr = (math.sqrt(aadd) - math.sqrt(bbcc)) ** 2 / abs(aadd - bbcc)
    rrprev = 0.0
    last_sum = pb.probab * pb.probac
    iteration = 0
    while rr <= RCUT:
        total, deriv, terms = _series(rr, pb)
        if abs(total - pb.probaa) <= CITER:
            logger.debug("brown: series converged with %d terms", terms)
            return rr, terms
        iteration += 1
        if iteration >= NITER:
            raise ConvergenceFailure("brown", last_value=rr, iterations=iteration)
        if deriv == 0.0:
            raise ConvergenceFailure(
                "brown", last_value=rr, iterations=iteration, reason="zero series slope"
            )
        delta = (total - pb.probaa) / deriv
        rrprev = rr
        last_sum = total
        rr -= delta
        if iteration == 1:
            rr += 0.5 * delta
        rr = min(max(rr, 0.0), RLIMIT)
    return _solve_quadrature(rr, rrprev, last_sum, iteration, pb), 1


def _standard_error(r: float, zac: float, zab: float, pb: _Problem) -> float:
    aa, bb, cc, dd, tot = pb.aa, pb.bb, pb.cc, pb.dd, pb.tot
    rrsq = math.sqrt(1.0 - r * r)
    pdf = math.exp(-0.5 * (zac**2 - 2.0 * r * zac * zab + zab**2) / rrsq**2) / (
        TWO_PI * rrsq
    )
    pac = float(norm.cdf((zac - r * zab) / rrsq)) - 0.5
    pab = float(norm.cdf((zab - r * zac) / rrsq)) - 0.5
    sdr = (
        (aa + dd) * (bb + cc) / 4.0
        + pab**2 * (aa + cc) * (bb + dd)
        + pac**2 * (aa + bb) * (cc + dd)
        + 2.0 * pab * pac * (aa * dd - bb * cc)
        - pab * (aa * bb - cc * dd)
        - pac * (aa * cc - bb * dd)
    )
    sdr = max(sdr, 0.0)
    if pdf == 0.0:
        # density underflow at |r| close to 1
        return math.inf
    return math.sqrt(sdr) / (tot * pdf * math.sqrt(tot))


def _standard_error_zero(pb: _Problem) -> float:
    aa, bb, cc, dd, tot = pb.aa, pb.bb, pb.cc, pb.dd, pb.tot
    return math.sqrt((aa + bb) * (aa + cc) * (bb + dd) * (cc + dd) / tot) / (
        tot**2 * pb.ss
    )


def tetrachoric_brown(table: ContingencyTable) -> BrownResult:
    """
    Tetrachoric correlation with standard errors by algorithm AS 116.

    Args:
        table: Validated table; zero cells are adjusted here

    Returns:
        `BrownResult`

    Raises:
        DegenerateTableError: a row or column total is zero
        ConvergenceFailure: 25 iterations without meeting the 1e-6 tolerance
    """
    zeros = classify_zero_cells(table)
    if zeros.kdelta == 4:
        raise DegenerateTableError(
            f"Row or column total is zero in table {table.as_tuple()}"
        )

    r = 0.0
    itype = 0
    perfect = perfect_association(table)
    if perfect is not None:
        r, itype = perfect, 3

    adj = continuity_adjusted(table, zeros)
    aa, bb, cc, dd = adj.as_tuple()
    tot = adj.n
    if adj.cross_product_difference < 0:
        probaa, probac, ksign = bb / tot, (bb + dd) / tot, 2
    else:
        if adj.cross_product_difference == 0 and itype == 0:
            itype = 4
        probaa, probac, ksign = aa / tot, (aa + cc) / tot, 1
    probab = (aa + bb) / tot
    zac = normal_deviate(probac)
    zab = normal_deviate(probab)
    pb = _Problem(
        aa=aa,
        bb=bb,
        cc=cc,
        dd=dd,
        tot=tot,
        probaa=probaa,
        probab=probab,
        probac=probac,
        zac=zac,
        zab=zab,
        ss=math.exp(-0.5 * (zac**2 + zab**2)) / TWO_PI,
        ksign=ksign,
    )
    sdzero = _standard_error_zero(pb)

    if r != 0 or itype > 0:
        sdr = 0.0 if r != 0 else sdzero
        return BrownResult(r=r, sdr=sdr, sdzero=sdzero, itype=itype)

    if table.a == table.d and table.b == table.c:
        rr = -math.cos(TWO_PI * probaa)
        itype = 2
    else:
        rr, itype = _solve(pb)

    r = rr
    if zeros.kdelta > 1:
        itype = -itype
    if ksign == 2:
        r = -r
        zac = -zac

    if r == 0:
        sdr = sdzero
    elif abs(r) >= 1.0:
        sdr = 0.0
    else:
        sdr = _standard_error(r, zac, zab, pb)

    logger.debug(
        "brown: r=%.8f sdr=%.6f itype=%d for table %s", r, sdr, itype, table.as_tuple()
    )
    return BrownResult(r=r, sdr=sdr, sdzero=sdzero, itype=itype)
