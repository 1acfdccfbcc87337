# tests/unit/test_api.py
"""Field-based facade."""

from __future__ import annotations

import pytest

from latentcorr.api import correlation as api
from latentcorr.core.errors import InvalidInputError
from latentcorr.core.names import TetrachoricMethod
from latentcorr.stats.methods import approximations
from latentcorr.stats.methods.tetrachoric import tetrachoric

# (40, 10, 20, 30) once cross-tabulated
FIELD1 = ["yes"] * 50 + ["no"] * 50
FIELD2 = ["a"] * 40 + ["b"] * 10 + ["a"] * 20 + ["b"] * 30
CATS1 = ["yes", "no"]
CELLS = (40, 10, 20, 30)


@pytest.mark.parametrize("method", ["divgi", "search", "kirk", "brown"])
def test_r_tetrachoric_matches_counts(method: str) -> None:
    assert api.r_tetrachoric(FIELD1, FIELD2, CATS1, method=method) == tetrachoric(
        *CELLS, method=method
    )


def test_r_tetrachoric_result() -> None:
    res = api.r_tetrachoric_result(FIELD1, FIELD2, CATS1, method="brown")
    assert res.method is TetrachoricMethod.BROWN
    assert res.se is not None
    assert res.r == tetrachoric(*CELLS, method="brown")


@pytest.mark.parametrize(
    "wrapper, measure",
    [
        (api.es_yule_q, approximations.yule_q),
        (api.es_yule_y, approximations.yule_y),
        (api.es_yule_r, approximations.yule_r),
        (api.es_pearson_q1, approximations.pearson_q1),
        (api.es_pearson_q4, approximations.pearson_q4),
        (api.es_pearson_q5, approximations.pearson_q5),
        (api.es_camp_r, approximations.camp_r),
        (api.es_becker_clogg_r, approximations.becker_clogg_r),
        (api.es_bonett_price_r, approximations.bonett_price_r),
        (api.es_bonett_price_y, approximations.bonett_price_y),
        (api.es_digby_h, approximations.digby_h),
        (api.es_edwards_q, approximations.edwards_q),
        (api.es_phi, approximations.phi),
        (api.es_odds_ratio, approximations.odds_ratio),
    ],
)
def test_wrappers_delegate_to_measures(wrapper, measure) -> None:
    assert wrapper(FIELD1, FIELD2, CATS1) == measure(*CELLS)


def test_variant_arguments_are_forwarded() -> None:
    assert api.es_camp_r(FIELD1, FIELD2, CATS1, method="camp1") == (
        approximations.camp_r(*CELLS, method="camp1")
    )
    assert api.es_becker_clogg_r(FIELD1, FIELD2, CATS1, version=2) == (
        approximations.becker_clogg_r(*CELLS, version=2)
    )
    assert api.es_bonett_price_r(FIELD1, FIELD2, CATS1, version=1) == (
        approximations.bonett_price_r(*CELLS, version=1)
    )


def test_reversed_categories_flip_the_sign() -> None:
    r = api.r_tetrachoric(FIELD1, FIELD2, CATS1)
    flipped = api.r_tetrachoric(FIELD1, FIELD2, ["no", "yes"])
    assert flipped == pytest.approx(-r, abs=1e-5)


def test_non_binary_field_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        api.r_tetrachoric(["a", "b", "c"], ["x", "y", "x"])


def test_every_wrapper_is_documented_and_typed() -> None:
    wrappers = [getattr(api, name) for name in dir(api) if name.startswith(("es_", "r_"))]
    assert len(wrappers) == 16
    for fn in wrappers:
        assert fn.__doc__, fn.__name__
        assert fn.__annotations__["categories1"] == "Optional[Sequence[Any]]"
        assert fn.__annotations__["categories2"] == "Optional[Sequence[Any]]"
