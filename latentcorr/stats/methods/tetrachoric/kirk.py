"""
latentcorr.stats.methods.tetrachoric.kirk
=========================================

Kirk (1973) TET8 procedure for the tetrachoric correlation.

The table is oriented so the joint cell has both marginal proportions at or
below one half. The solver then runs three Newton-Raphson phases, all built
on 8-point Gauss-Legendre quadrature over [0, 1]:

1. ``SOLVE_MARGINAL_1``: deviate h with 1 - Φ(h) = fm1
2. ``SOLVE_MARGINAL_2``: deviate k with 1 - Φ(k) = fm2
3. ``SOLVE_CORRELATION``: r with ∫₀ʳ g(ρ) dρ = 2π (p - fm1·fm2), where
   g(ρ) = exp(-(h² + k² - 2hkρ) / (2(1 - ρ²))) / √(1 - ρ²)

Phases are explicit states of `KirkPhase`; a handler runs one phase and
returns the next state, so every exit is either ``CONVERGED`` or ``FAILED``.

When a phase-3 trial value leaves (-1, 1) the search restarts once from
0.97·sign(p - fm1·fm2). This retry is a heuristic without a convergence
guarantee; it is logged at WARNING level and a second escape fails.
For |r| above roughly 0.99 (for example the table (1, 30, 300, 1)) both
attempts usually escape and `OutOfRangeEscape` is raised; use the ``brown``
or ``search`` method for such tables.

Reference:
    Kirk, D. B. (1973). On the numerical approximation of the bivariate
    normal (tetrachoric) correlation coefficient. Psychometrika, 38(2),
    259-268.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

import numpy as np

from latentcorr.core.errors import (
    ConvergenceFailure,
    IterationLimitExceeded,
    OutOfRangeEscape,
)
from latentcorr.core.table import ContingencyTable

logger = logging.getLogger(__name__)

# 8-point Gauss-Legendre rule mapped to [0, 1]; weights sum to one
NODES = np.array(
    [
        0.019855071751232,
        0.101666761293187,
        0.237233795041835,
        0.408282678752175,
        0.591717321247825,
        0.762766204958165,
        0.898333238706813,
        0.980144928248768,
    ]
)
_HALF_WEIGHTS = [
    0.050614268145188,
    0.111190517226687,
    0.156853322938943,
    0.181341891689181,
]
WEIGHTS = np.array(_HALF_WEIGHTS + _HALF_WEIGHTS[::-1])

RPI = 0.398942280401433  # 1 / sqrt(2 pi)
RTPI = 2.506628274631  # sqrt(2 pi)

MARGINAL_TOLERANCE = 1e-5
CORRELATION_TOLERANCE = 1e-4
MAX_ITERATIONS = 20
RETRY_START = 0.97


class KirkPhase(Enum):
    SOLVE_MARGINAL_1 = "solve_marginal_1"
    SOLVE_MARGINAL_2 = "solve_marginal_2"
    SOLVE_CORRELATION = "solve_correlation"
    CONVERGED = "converged"
    FAILED = "failed"


@dataclass
class KirkState:
    """
    Mutable record threaded through the phases.

    Attributes:
        p: Joint proportion of the oriented cell
        fm1: Oriented row-1 proportion (<= 0.5)
        fm2: Oriented column-1 proportion (<= 0.5)
        h: Upper-tail deviate of fm1 (set by phase 1)
        k: Upper-tail deviate of fm2 (set by phase 2)
        r: Correlation (set by phase 3)
        iterations: Newton steps used by the current phase
        retried: Whether the out-of-range retry has been spent
        error: Failure to raise when the machine stops in ``FAILED``
    """

    p: float
    fm1: float
    fm2: float
    phase: KirkPhase = KirkPhase.SOLVE_MARGINAL_1
    h: float = 0.0
    k: float = 0.0
    r: float = 0.0
    iterations: int = 0
    retried: bool = False
    error: Optional[ConvergenceFailure] = None


def hastings_deviate(x: float) -> float:
    """
    Hastings' rational approximation of the upper-tail deviate, 0 < x <= 0.5.

    Examples:
        >>> round(hastings_deviate(0.025), 2)
        1.96
    """
    e = math.sqrt(-2.0 * math.log(x))
    e1 = (0.010328 * e + 0.802853) * e + 2.515517
    e2 = ((0.001308 * e + 0.189269) * e + 1.432788) * e + 1.0
    return e - e1 / e2


def _marginal_integral(old: float) -> float:
    """∫₀^old exp(-t²/2) dt by quadrature."""
    return old * float(np.dot(WEIGHTS, np.exp(-0.5 * old * old * NODES**2)))


def _correlation_integrand(state: KirkState, rho):
    h2k2 = state.h**2 + state.k**2
    hk2 = 2.0 * state.h * state.k
    one_minus = 1.0 - rho * rho
    return np.exp((-h2k2 + hk2 * rho) / (2.0 * one_minus)) / np.sqrt(one_minus)


def _solve_deviate(state: KirkState, x: float) -> Optional[float]:
    """Newton iteration for one marginal deviate; None on failure (state.error set)."""
    if x > 0.5:
        state.error = ConvergenceFailure(
            "kirk", reason=f"marginal proportion {x:.6f} exceeds 0.5"
        )
        return None
    con = (0.5 - x) * RTPI
    old = hastings_deviate(x)
    state.iterations = 1
    while True:
        fnew = old - (_marginal_integral(old) - con) / math.exp(-0.5 * old * old)
        if abs(old - fnew) <= MARGINAL_TOLERANCE:
            return fnew
        old = fnew
        state.iterations += 1
        if state.iterations > MAX_ITERATIONS:
            state.error = IterationLimitExceeded("kirk", old, MAX_ITERATIONS)
            return None


def _step_marginal_1(state: KirkState) -> KirkPhase:
    h = _solve_deviate(state, state.fm1)
    if h is None:
        return KirkPhase.FAILED
    state.h = h
    return KirkPhase.SOLVE_MARGINAL_2


def _step_marginal_2(state: KirkState) -> KirkPhase:
    k = _solve_deviate(state, state.fm2)
    if k is None:
        return KirkPhase.FAILED
    state.k = k
    return KirkPhase.SOLVE_CORRELATION


def _correlation_start(state: KirkState, excess: float) -> float:
    zhk = RPI * math.exp(-0.5 * state.h**2) * RPI * math.exp(-0.5 * state.k**2)
    hk2 = 2.0 * state.h * state.k
    if abs(hk2) <= 1e-8:
        est = excess / zhk
    else:
        est = 2.0 * (math.sqrt(abs(hk2 * excess / zhk + 1.0)) - 1.0) / hk2
    if abs(est) > 0.8:
        est = math.copysign(0.8, excess)
    return est


def _step_correlation(state: KirkState) -> KirkPhase:
    excess = state.p - state.fm1 * state.fm2
    con = excess * 2.0 * math.pi
    old = _correlation_start(state, excess)
    state.iterations = 1
    while True:
        if abs(old) >= 1.0:
            if state.retried:
                state.error = OutOfRangeEscape("kirk", old, state.iterations)
                return KirkPhase.FAILED
            state.retried = True
            logger.warning(
                "kirk: trial value %.6f left (-1, 1); retrying from %.2f "
                "(heuristic restart, convergence not guaranteed)",
                old,
                math.copysign(RETRY_START, excess),
            )
            old = math.copysign(RETRY_START, excess)
        else:
            fnum = old * float(np.dot(WEIGHTS, _correlation_integrand(state, NODES * old)))
            slope = float(_correlation_integrand(state, old))
            if slope == 0.0:
                state.error = ConvergenceFailure(
                    "kirk", old, state.iterations, reason="integrand underflowed to 0"
                )
                return KirkPhase.FAILED
            fnew = old - (fnum - con) / slope
            if abs(old - fnew) <= CORRELATION_TOLERANCE and abs(fnew) < 1.0:
                state.r = fnew
                return KirkPhase.CONVERGED
            old = fnew
        state.iterations += 1
        if state.iterations > MAX_ITERATIONS:
            state.error = IterationLimitExceeded("kirk", old, MAX_ITERATIONS)
            return KirkPhase.FAILED


_HANDLERS: Dict[KirkPhase, Callable[[KirkState], KirkPhase]] = {
    KirkPhase.SOLVE_MARGINAL_1: _step_marginal_1,
    KirkPhase.SOLVE_MARGINAL_2: _step_marginal_2,
    KirkPhase.SOLVE_CORRELATION: _step_correlation,
}


def run_kirk(p: float, fm1: float, fm2: float) -> KirkState:
    """
    Drive the phase machine from its initial state to a terminal one.

    Args:
        p: Joint proportion, oriented so fm1, fm2 <= 0.5
        fm1: Row-1 proportion
        fm2: Column-1 proportion

    Returns:
        Terminal state (``CONVERGED`` or ``FAILED``)
    """
    state = KirkState(p=p, fm1=fm1, fm2=fm2)
    while state.phase not in (KirkPhase.CONVERGED, KirkPhase.FAILED):
        state.phase = _HANDLERS[state.phase](state)
    return state


def tetrachoric_kirk(table: ContingencyTable) -> float:
    """
    Tetrachoric correlation by Kirk's TET8 procedure.

    Args:
        table: Validated table without zero cells

    Returns:
        Estimated tetrachoric correlation

    Raises:
        ConvergenceFailure: a marginal proportion above 0.5 reached a solver
        IterationLimitExceeded: a phase used up its 20 iterations
        OutOfRangeEscape: the trial value left (-1, 1) after the retry

    Examples:
        >>> round(tetrachoric_kirk(ContingencyTable(30, 20, 20, 30)), 2)
        0.31
    """
    oriented = table
    swaps = 0
    if oriented.r1 > oriented.r2:
        oriented = oriented.swap_rows()
        swaps += 1
    if oriented.c1 > oriented.c2:
        oriented = oriented.swap_columns()
        swaps += 1
    n = oriented.n

    state = run_kirk(oriented.a / n, oriented.r1 / n, oriented.c1 / n)
    if state.phase is KirkPhase.FAILED:
        assert state.error is not None
        raise state.error

    r = -state.r if swaps == 1 else state.r
    logger.debug(
        "kirk: r=%.6f after %d correlation iterations for table %s",
        r,
        state.iterations,
        table.as_tuple(),
    )
    return r
