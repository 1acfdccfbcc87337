# tests/unit/test_bivariate.py
"""Bivariate normal CDF backends."""

from __future__ import annotations

import math

import pytest
from scipy.stats import norm

from latentcorr.stats.common.bivariate import GenzCdf, OwensTCdf, bvn_pdf

POINTS = [
    (0.0, 0.0, 0.3),
    (0.5, -0.2, 0.6),
    (-1.1, 0.7, -0.4),
    (-0.3, -1.5, 0.85),
    (1.2, 1.9, -0.7),
    (0.0, 0.8, 0.45),
    (-0.6, 0.0, -0.2),
]


@pytest.mark.parametrize("x, y, rho", POINTS)
def test_owens_t_matches_genz(x: float, y: float, rho: float) -> None:
    assert OwensTCdf()(x, y, rho) == pytest.approx(GenzCdf()(x, y, rho), abs=1e-4)


def test_origin_has_arcsine_form() -> None:
    for rho in (-0.9, -0.5, 0.0, 0.5, 0.9):
        expected = 0.25 + math.asin(rho) / (2 * math.pi)
        assert OwensTCdf()(0.0, 0.0, rho) == pytest.approx(expected, abs=1e-14)


@pytest.mark.parametrize("x, y", [(0.3, -0.4), (-1.0, -0.5), (1.5, 0.2)])
def test_independence_factorises(x: float, y: float) -> None:
    assert OwensTCdf()(x, y, 0.0) == pytest.approx(norm.cdf(x) * norm.cdf(y), abs=1e-12)


def test_boundary_correlations() -> None:
    cdf = OwensTCdf()
    assert cdf(0.3, -0.2, 1.0) == pytest.approx(norm.cdf(-0.2))
    assert cdf(0.3, -0.2, -1.0) == pytest.approx(
        max(0.0, norm.cdf(0.3) + norm.cdf(-0.2) - 1.0)
    )
    assert GenzCdf()(0.3, 0.1, 1.0) == pytest.approx(norm.cdf(0.1))


def test_cdf_increases_with_rho() -> None:
    cdf = OwensTCdf()
    values = [cdf(0.4, -0.3, r / 10) for r in range(-9, 10)]
    assert values == sorted(values)


def test_pdf_is_derivative_of_cdf_in_rho() -> None:
    cdf = OwensTCdf()
    x, y, rho, eps = 0.4, -0.3, 0.35, 1e-6
    numeric = (cdf(x, y, rho + eps) - cdf(x, y, rho - eps)) / (2 * eps)
    assert bvn_pdf(x, y, rho) == pytest.approx(numeric, rel=1e-5)
