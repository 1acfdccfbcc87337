"""
latentcorr.stats.common.bivariate
=================================

Bivariate standard normal distribution primitives.

The tetrachoric solvers never evaluate the bivariate normal CDF themselves;
they receive it as an injected `BivariateNormalCdf` so the backend can be
swapped without touching solver code:

- `OwensTCdf` (default): closed-form reduction to Owen's T function,
  deterministic to machine precision.
- `GenzCdf`: `scipy.stats.multivariate_normal`, which uses Genz's algorithm.

All functions use the lower-orthant convention Φ₂(x, y; ρ) = P(X ≤ x, Y ≤ y).

Examples
--------
>>> cdf = OwensTCdf()
>>> round(cdf(0.0, 0.0, 0.0), 12)
0.25
>>> round(cdf(0.0, 0.0, 0.5), 6)  # 1/4 + asin(0.5) / (2 pi)
0.333333
"""

from __future__ import annotations
import math
from typing import Protocol

from scipy.special import owens_t
from scipy.stats import multivariate_normal, norm

TWO_PI = 2.0 * math.pi


class BivariateNormalCdf(Protocol):
    """Φ₂(x, y; rho) for the standard bivariate normal distribution."""

    def __call__(self, x: float, y: float, rho: float) -> float: ...


def _boundary_cdf(x: float, y: float, rho: float) -> float:
    """Exact CDF at rho = ±1."""
    if rho > 0:
        return float(norm.cdf(min(x, y)))
    return float(max(0.0, norm.cdf(x) + norm.cdf(y) - 1.0))


class OwensTCdf:
    """
    Bivariate normal CDF through Owen's T function (Owen, 1956).

    For |rho| < 1::

        Φ₂(h, k; ρ) = ½Φ(h) + ½Φ(k) − T(h, a_h) − T(k, a_k) − β

    with a_h = (k − ρh) / (h√(1−ρ²)), a_k = (h − ρk) / (k√(1−ρ²)) and
    β = 0 when hk > 0 or (hk = 0 and h + k ≥ 0), ½ otherwise.
    """

    def __call__(self, x: float, y: float, rho: float) -> float:
        if rho >= 1.0 or rho <= -1.0:
            return _boundary_cdf(x, y, rho)
        s = math.sqrt(1.0 - rho * rho)
        if x == 0.0 and y == 0.0:
            return 0.25 + math.asin(rho) / TWO_PI
        if x == 0.0:
            return float(0.5 * norm.cdf(y) - owens_t(y, -rho / s))
        if y == 0.0:
            return float(0.5 * norm.cdf(x) - owens_t(x, -rho / s))

        a_x = (y - rho * x) / (x * s)
        a_y = (x - rho * y) / (y * s)
        beta = 0.0 if (x * y > 0 or (x * y == 0 and x + y >= 0)) else 0.5
        value = (
            0.5 * norm.cdf(x)
            + 0.5 * norm.cdf(y)
            - owens_t(x, a_x)
            - owens_t(y, a_y)
            - beta
        )
        return float(min(max(value, 0.0), 1.0))


class GenzCdf:
    """Bivariate normal CDF through `scipy.stats.multivariate_normal`."""

    def __call__(self, x: float, y: float, rho: float) -> float:
        if rho >= 1.0 or rho <= -1.0:
            return _boundary_cdf(x, y, rho)
        dist = multivariate_normal(mean=[0.0, 0.0], cov=[[1.0, rho], [rho, 1.0]])
        return float(dist.cdf([x, y]))


DEFAULT_BVN_CDF: BivariateNormalCdf = OwensTCdf()


def bvn_pdf(x: float, y: float, rho: float) -> float:
    """Density of the standard bivariate normal at (x, y)."""
    one_minus = 1.0 - rho * rho
    q = (x * x - 2.0 * rho * x * y + y * y) / (2.0 * one_minus)
    return math.exp(-q) / (TWO_PI * math.sqrt(one_minus))


def normal_deviate(p: float) -> float:
    """Φ⁻¹(p) as a Python float."""
    return float(norm.ppf(p))
