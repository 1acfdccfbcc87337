# tests/unit/test_solver_internals.py
"""Solver-specific behaviour: Kirk's phase machine, AS 116 outputs, Divgi start."""

from __future__ import annotations

import logging
import math

import pytest
from scipy.stats import norm

from latentcorr.core.errors import (
    ConvergenceFailure,
    IterationLimitExceeded,
    OutOfRangeEscape,
)
from latentcorr.core.table import ContingencyTable
from latentcorr.stats.methods.tetrachoric import brown, divgi, kirk
from tests._tables import reference_tetrachoric

TABLE = ContingencyTable(50, 10, 10, 30)


# ---- Kirk ----


def test_kirk_reaches_converged_state() -> None:
    state = kirk.run_kirk(p=0.3, fm1=0.4, fm2=0.4)
    assert state.phase is kirk.KirkPhase.CONVERGED
    assert state.error is None
    assert state.h == pytest.approx(0.2533471, abs=1e-5)
    assert state.k == pytest.approx(state.h)
    assert not state.retried


def test_kirk_marginal_above_half_fails() -> None:
    state = kirk.run_kirk(p=0.3, fm1=0.6, fm2=0.4)
    assert state.phase is kirk.KirkPhase.FAILED
    assert type(state.error) is ConvergenceFailure


def test_kirk_iteration_cap(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(kirk, "MARGINAL_TOLERANCE", -1.0)
    with pytest.raises(IterationLimitExceeded) as info:
        kirk.tetrachoric_kirk(TABLE)
    assert info.value.iterations == kirk.MAX_ITERATIONS


def test_kirk_retry_is_logged_and_recovers(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(kirk, "_correlation_start", lambda state, excess: 1.5)
    with caplog.at_level(logging.WARNING, logger="latentcorr"):
        r = kirk.tetrachoric_kirk(TABLE)
    assert r == pytest.approx(reference_tetrachoric(*TABLE.as_tuple()), abs=1e-3)
    warnings = [rec for rec in caplog.records if rec.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "heuristic" in warnings[0].getMessage()


def test_kirk_second_escape_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(kirk, "_correlation_start", lambda state, excess: 1.5)
    monkeypatch.setattr(kirk, "RETRY_START", 1.2)
    with pytest.raises(OutOfRangeEscape) as info:
        kirk.tetrachoric_kirk(TABLE)
    assert info.value.last_value == pytest.approx(1.2)


def test_hastings_start_is_close_to_normal_quantile() -> None:
    for x in (0.05, 0.2, 0.35, 0.5):
        assert kirk.hastings_deviate(x) == pytest.approx(-norm.ppf(x), abs=5e-4)


# ---- Brown (AS 116) ----


def test_brown_cosine_shortcut() -> None:
    res = brown.tetrachoric_brown(ContingencyTable(40, 10, 10, 40))
    assert res.itype == 2
    assert res.r == pytest.approx(math.cos(math.pi / 5))
    neg = brown.tetrachoric_brown(ContingencyTable(10, 40, 40, 10))
    assert neg.itype == 2
    assert neg.r == pytest.approx(-res.r)
    assert neg.sdr == pytest.approx(res.sdr)


def test_brown_independence() -> None:
    res = brown.tetrachoric_brown(ContingencyTable(25, 25, 25, 25))
    assert res.r == 0.0
    assert res.itype == 4
    assert res.sdzero == pytest.approx(math.pi / 20)
    assert res.sdr == res.sdzero


def test_brown_perfect_association() -> None:
    res = brown.tetrachoric_brown(ContingencyTable(10, 0, 0, 10))
    assert (res.r, res.sdr, res.itype) == (1.0, 0.0, 3)
    anti = brown.tetrachoric_brown(ContingencyTable(0, 1, 1, 0))
    assert (anti.r, anti.sdr, anti.itype) == (-1.0, 0.0, 3)


def test_brown_series_solution() -> None:
    res = brown.tetrachoric_brown(TABLE)
    assert res.itype >= 5
    assert 0 < res.sdr < 1
    assert res.r == pytest.approx(reference_tetrachoric(*TABLE.as_tuple()), abs=1e-3)


def test_brown_adjusted_zero_cell_has_negative_itype() -> None:
    res = brown.tetrachoric_brown(ContingencyTable(0, 4, 3, 5))
    assert res.itype < 0
    assert res.r == pytest.approx(reference_tetrachoric(0.5, 3.5, 2.5, 5.5), abs=1e-3)


def test_brown_quadrature_for_strong_association() -> None:
    cells = (50, 3, 7, 40)
    res = brown.tetrachoric_brown(ContingencyTable(*cells))
    assert res.r == pytest.approx(reference_tetrachoric(*cells), abs=5e-3)
    assert res.r > 0.9


def test_brown_series_derivative_matches_difference() -> None:
    t = ContingencyTable(40, 10, 20, 30)
    n = t.n
    zac = float(norm.ppf(t.c1 / n))
    zab = float(norm.ppf(t.r1 / n))
    pb = brown._Problem(
        aa=t.a, bb=t.b, cc=t.c, dd=t.d, tot=n,
        probaa=t.a / n, probab=t.r1 / n, probac=t.c1 / n,
        zac=zac, zab=zab,
        ss=math.exp(-0.5 * (zac**2 + zab**2)) / (2 * math.pi),
        ksign=1,
    )  # fmt: skip
    eps = 1e-6
    hi, _, _ = brown._series(0.4 + eps, pb)
    lo, _, _ = brown._series(0.4 - eps, pb)
    _, deriv, _ = brown._series(0.4, pb)
    assert deriv == pytest.approx((hi - lo) / (2 * eps), rel=1e-4)


# ---- Divgi ----


def test_divgi_start_is_close_to_solution() -> None:
    oriented, h, k, _ = divgi._reorient(TABLE)
    start = divgi.divgi_start(oriented, h, k)
    assert start == pytest.approx(reference_tetrachoric(*TABLE.as_tuple()), abs=0.05)


def test_divgi_reorientation_makes_deviates_non_negative() -> None:
    oriented, h, k, sg = divgi._reorient(ContingencyTable(5, 20, 30, 45))
    assert h >= 0 and k >= 0
    assert sg == 1.0
    assert oriented.as_tuple() == (45.0, 30.0, 20.0, 5.0)
