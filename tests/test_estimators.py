"""Conditional hit-rate estimator tests."""

from __future__ import annotations

import math

import pytest

from parlaylink.config import Settings
from parlaylink.data.schemas import Player, Team
from parlaylink.parlays import correlations, estimators
from parlaylink.parlays.history import build_entry
from parlaylink.parlays.resolver import TeamResolver
from parlaylink.parlays.types import Leg

RESOLVER = TeamResolver(
    [
        Player(id=1, first_name="Aaron", last_name="Judge", team_code="NYY"),
        Player(id=3, first_name="Gerrit", last_name="Cole", team_code="NYY"),
        Player(id=4, first_name="Rafael", last_name="Devers", team_code="BOS"),
        Player(id=5, first_name="Brayan", last_name="Bello", team_code="BOS"),
    ],
    [
        Team(id=147, code="NYY", name="New York Yankees"),
        Team(id=111, code="BOS", name="Boston Red Sox"),
    ],
)


def _leg(
    leg_id: str,
    market: str,
    selection: str,
    blended: float | None = 0.5,
    hit_rate: float | None = None,
    price: int = -110,
) -> Leg:
    return Leg(
        leg_id=leg_id,
        game_id="g100",
        bookmaker="draftkings",
        market=market,
        selection=selection,
        side="Over",
        price=price,
        line_value=0.5,
        hit_rate=hit_rate,
        blended_hit_rate=blended,
    )


YANKEES_ML = _leg("nyy_ml", "h2h", "New York Yankees", blended=0.55, price=-150)
JUDGE_HITS = _leg("judge_hits", "batter_hits", "Aaron Judge", blended=0.60)
DEVERS_HITS = _leg("devers_hits", "batter_hits", "Rafael Devers")
COLE_KS = _leg("cole_ks", "pitcher_strikeouts", "Gerrit Cole")
BELLO_KS = _leg("bello_ks", "pitcher_strikeouts", "Brayan Bello")
TOTAL_OVER = _leg("total_over", "totals", "Over")

JUDGE_INDEX = {
    "nyy_ml": build_entry(["g1", "g2", "g3", "g4", "g5"], ["g6", "g7"]),
    "judge_hits": build_entry(["g1", "g2", "g3"], ["g4", "g5", "g6"]),
}


def _games(count: int, start: int = 1) -> list[str]:
    return [f"g{number}" for number in range(start, start + count)]


def test_empty_conditions_return_base_rate() -> None:
    assert estimators.conditional_hit_rate(JUDGE_HITS, [], JUDGE_INDEX, RESOLVER) == 0.60


def test_base_rate_falls_back_to_raw_hit_rate() -> None:
    raw_only = _leg("raw", "batter_hits", "Aaron Judge", blended=None, hit_rate=0.42)
    assert raw_only.base_rate == 0.42
    nan_blend = _leg("nan", "batter_hits", "Aaron Judge", blended=math.nan, hit_rate=0.3)
    assert nan_blend.base_rate == 0.3
    assert _leg("none", "batter_hits", "Aaron Judge", blended=None).base_rate == 0.0


def test_unlinked_conditions_leave_rate_unchanged() -> None:
    rate = estimators.conditional_hit_rate(COLE_KS, [BELLO_KS], {}, RESOLVER)
    assert rate == COLE_KS.base_rate
    rate = estimators.conditional_hit_rate(DEVERS_HITS, [JUDGE_HITS, YANKEES_ML], JUDGE_INDEX, RESOLVER)
    assert rate == DEVERS_HITS.base_rate


def test_self_is_never_a_condition() -> None:
    assert estimators.conditional_hit_rate(JUDGE_HITS, [JUDGE_HITS], JUDGE_INDEX, RESOLVER) == 0.60


def test_blend_weight_saturates() -> None:
    assert estimators.blend_weight(0) == 0.0
    assert estimators.blend_weight(5) == pytest.approx(0.25)
    assert estimators.blend_weight(20) == 1.0
    assert estimators.blend_weight(40) == 1.0
    weights = [estimators.blend_weight(count) for count in range(0, 45)]
    assert weights == sorted(weights)


def test_judge_conditioned_on_yankees_moneyline() -> None:
    rate = estimators.conditional_hit_rate(JUDGE_HITS, [YANKEES_ML], JUDGE_INDEX, RESOLVER)
    fallback = estimators.fallback_rate(JUDGE_HITS, [YANKEES_ML], RESOLVER)
    assert fallback == pytest.approx(0.60 * 1.01)
    assert rate == pytest.approx(0.60 * 0.25 + fallback * 0.75)


def test_fallback_moves_with_correlation_sign() -> None:
    assert estimators.fallback_rate(DEVERS_HITS, [TOTAL_OVER], RESOLVER) == pytest.approx(0.51)
    assert estimators.fallback_rate(DEVERS_HITS, [COLE_KS], RESOLVER) == pytest.approx(0.495)
    assert estimators.fallback_rate(DEVERS_HITS, [], RESOLVER) == 0.5


def test_fallback_is_clamped(monkeypatch: pytest.MonkeyPatch) -> None:
    tuned = Settings(strikeout_strength=-1.0, totals_strength=1.0, adjustment_scale=1.0)
    monkeypatch.setattr(correlations, "settings", tuned)
    monkeypatch.setattr(estimators, "settings", tuned)
    assert estimators.fallback_rate(DEVERS_HITS, [COLE_KS, COLE_KS], RESOLVER) == 0.01
    assert estimators.fallback_rate(DEVERS_HITS, [TOTAL_OVER, TOTAL_OVER], RESOLVER) == 0.99
    zero = _leg("zero", "batter_hits", "Rafael Devers", blended=0.0)
    assert estimators.fallback_rate(zero, [TOTAL_OVER], RESOLVER) == 0.01


def test_missing_own_history_uses_fallback() -> None:
    index = {"nyy_ml": JUDGE_INDEX["nyy_ml"]}
    rate = estimators.conditional_hit_rate(JUDGE_HITS, [YANKEES_ML], index, RESOLVER)
    assert rate == pytest.approx(estimators.fallback_rate(JUDGE_HITS, [YANKEES_ML], RESOLVER))
    assert estimators.conditional_hit_rate(JUDGE_HITS, [YANKEES_ML], None, RESOLVER) == rate


@pytest.mark.parametrize("hit_games", ["g1,g2", 17, None])
def test_malformed_history_uses_fallback(hit_games: object) -> None:
    index = {
        "nyy_ml": {"hit_games": ["g1", "g2"]},
        "judge_hits": {"hit_games": hit_games, "miss_games": []},
    }
    rate = estimators.conditional_hit_rate(JUDGE_HITS, [YANKEES_ML], index, RESOLVER)
    assert rate == pytest.approx(estimators.fallback_rate(JUDGE_HITS, [YANKEES_ML], RESOLVER))


def test_conditions_without_history_are_skipped() -> None:
    index = {
        "judge_hits": build_entry(_games(8)),
        "nyy_ml": build_entry(_games(20)),
    }
    rate = estimators.conditional_hit_rate(JUDGE_HITS, [YANKEES_ML, TOTAL_OVER], index, RESOLVER)
    assert rate == pytest.approx(8 / 20)


def test_empty_intersection_uses_fallback() -> None:
    index = {
        "judge_hits": build_entry(["g1"]),
        "nyy_ml": build_entry(["g1", "g2"]),
        "total_over": build_entry(["g3", "g4"]),
    }
    conditions = [YANKEES_ML, TOTAL_OVER]
    rate = estimators.conditional_hit_rate(JUDGE_HITS, conditions, index, RESOLVER)
    assert rate == pytest.approx(estimators.fallback_rate(JUDGE_HITS, conditions, RESOLVER))


def test_hit_games_keyed_by_game_id() -> None:
    index = {
        "nyy_ml": {"hit_games": {game: 1 for game in _games(20)}},
        "judge_hits": {"hit_games": {game: 1 for game in _games(5)}},
    }
    rate = estimators.conditional_hit_rate(JUDGE_HITS, [YANKEES_ML], index, RESOLVER)
    assert rate == pytest.approx(0.25)


def test_rates_stay_in_unit_interval() -> None:
    index = {
        "nyy_ml": build_entry(_games(3)),
        "judge_hits": build_entry(_games(3)),
    }
    high = _leg("judge_hits", "batter_hits", "Aaron Judge", blended=0.99)
    rate = estimators.conditional_hit_rate(high, [YANKEES_ML, TOTAL_OVER], index, RESOLVER)
    assert 0.0 <= rate <= 1.0
