"""
latentcorr.stats.methods.tetrachoric.search
===========================================

Digit-by-digit search for the tetrachoric correlation.

For every decimal place k = 1..10 the trial value is raised in steps of
10^-k while Φ₂(z1, z2; r) stays below the target a/n, then stepped back once
before moving to the next digit. Φ₂ increases monotonically in r for fixed
margins, so the result is the largest value on the 10^-10 grid whose CDF does
not exceed the target.
"""

from __future__ import annotations
import logging
from typing import Optional

from latentcorr.core.errors import ConvergenceFailure
from latentcorr.core.table import ContingencyTable
from latentcorr.stats.common.bivariate import (
    BivariateNormalCdf,
    DEFAULT_BVN_CDF,
    normal_deviate,
)

logger = logging.getLogger(__name__)

N_DECIMALS = 10
MAX_STEPS_PER_DECIMAL = 20


def tetrachoric_search(
    table: ContingencyTable, bvn_cdf: Optional[BivariateNormalCdf] = None
) -> float:
    """
    Tetrachoric correlation by fixed-precision search.

    Args:
        table: Validated table without zero cells
        bvn_cdf: Bivariate normal CDF backend (default: Owen's T)

    Returns:
        Estimate truncated to 10 decimal places

    Raises:
        ConvergenceFailure: a digit exhausted its steps without reaching the target
    """
    cdf = bvn_cdf or DEFAULT_BVN_CDF
    n = table.n
    p = table.a / n
    z1 = normal_deviate(table.r1 / n)
    z2 = -normal_deviate(table.c2 / n)

    rt = -1.0
    for nd in range(1, N_DECIMALS + 1):
        step = 10.0 ** (-nd)
        base = rt
        prt = 0.0
        steps = 0
        while prt < p and steps < MAX_STEPS_PER_DECIMAL:
            steps += 1
            rt = min(base + steps * step, 1.0)
            prt = cdf(z1, z2, rt)
        if prt < p:
            raise ConvergenceFailure("search", last_value=rt, iterations=nd)
        rt = base + max(steps - 1, 0) * step

    logger.debug("search: r=%.10f for table %s", rt, table.as_tuple())
    return rt
