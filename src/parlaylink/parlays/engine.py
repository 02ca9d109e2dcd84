"""Parlay conditioning: weak links, alternatives and parlay probability."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace

from parlaylink.config import get_settings
from parlaylink.data.schemas import Player, Team
from parlaylink.parlays.estimators import conditional_hit_rate
from parlaylink.parlays.history import HistoricalIndex
from parlaylink.parlays.odds import combine_odds, decimal_to_american
from parlaylink.parlays.resolver import TeamResolver, market_base
from parlaylink.parlays.types import AlternateLine, ConditionalMetrics, Leg

logger = logging.getLogger(__name__)

settings = get_settings()


def parlay_boost(conditional_rate: float, base_rate: float) -> float:
    """Percent change of the conditional rate over the base rate."""

    if base_rate <= 0:
        return 0.0
    return (conditional_rate - base_rate) / base_rate * 100


def parlay_american_odds(legs: Sequence[Leg]) -> int:
    if not legs:
        return 0
    return decimal_to_american(combine_odds(leg.price for leg in legs))


def parlay_implied_probability(legs: Sequence[Leg]) -> float:
    if not legs:
        return 0.0
    prob = 1.0
    for leg in legs:
        prob *= leg.implied_probability
    return prob


def _is_alternate(candidate: Leg, leg: Leg) -> bool:
    return (
        candidate.leg_id != leg.leg_id
        and candidate.bookmaker == leg.bookmaker
        and candidate.game_id == leg.game_id
        and candidate.selection == leg.selection
        and market_base(candidate.market) == market_base(leg.market)
        and candidate.line_value != leg.line_value
    )


def _rate_alternates(
    leg: Leg,
    other_legs: Sequence[Leg],
    available: Iterable[Leg],
    index: HistoricalIndex | None,
    resolver: TeamResolver,
    current_rate: float | None,
) -> list[AlternateLine]:
    if current_rate is None:
        current_rate = conditional_hit_rate(leg, other_legs, index, resolver)
    lines: list[AlternateLine] = []
    for candidate in available:
        if not _is_alternate(candidate, leg):
            continue
        rate = conditional_hit_rate(candidate, other_legs, index, resolver)
        lines.append(
            AlternateLine(
                leg=candidate,
                conditional_rate=rate,
                base_rate=candidate.base_rate,
                improvement=rate - current_rate,
            )
        )
    return lines


def _find_alternatives(
    weak_leg: Leg,
    other_legs: Sequence[Leg],
    available: Iterable[Leg],
    index: HistoricalIndex | None,
    resolver: TeamResolver,
    current_rate: float | None = None,
    min_improvement: float | None = None,
    limit: int | None = None,
) -> list[Leg]:
    min_improvement = settings.alternative_min_improvement if min_improvement is None else min_improvement
    limit = settings.max_alternatives if limit is None else limit
    lines = _rate_alternates(weak_leg, other_legs, available, index, resolver, current_rate)
    better = [line for line in lines if line.improvement > min_improvement]
    better.sort(key=lambda line: line.improvement, reverse=True)
    return [line.leg for line in better[:limit]]


def find_alternatives(
    weak_leg: Leg,
    other_selected: Sequence[Leg],
    available: Iterable[Leg],
    index: HistoricalIndex | None,
    players: Iterable[Player] | None = None,
    teams: Iterable[Team] | None = None,
    current_rate: float | None = None,
    min_improvement: float | None = None,
    limit: int | None = None,
) -> list[Leg]:
    """Other lines of the same stat that fit the rest of the parlay better.

    Candidates share bookmaker, game, selection and market family with the
    weak leg but sit at a different line. Only those beating the weak leg's
    conditional rate by more than ``min_improvement`` are returned, best
    first, at most ``limit`` of them.
    """

    resolver = TeamResolver(players, teams)
    return _find_alternatives(
        weak_leg,
        other_selected,
        available,
        index,
        resolver,
        current_rate=current_rate,
        min_improvement=min_improvement,
        limit=limit,
    )


def alternate_lines(
    leg: Leg,
    other_selected: Sequence[Leg],
    available: Iterable[Leg],
    index: HistoricalIndex | None,
    players: Iterable[Player] | None = None,
    teams: Iterable[Team] | None = None,
) -> list[AlternateLine]:
    """Every alternate line for ``leg`` with its conditional rate, highest line first."""

    resolver = TeamResolver(players, teams)
    lines = _rate_alternates(leg, other_selected, available, index, resolver, None)
    lines.sort(
        key=lambda line: (line.leg.line_value is not None, line.leg.line_value or 0.0),
        reverse=True,
    )
    return lines


def compute_conditional_metrics(
    available: Sequence[Leg],
    selected: Sequence[Leg],
    index: HistoricalIndex | None,
    players: Iterable[Player] | None = None,
    teams: Iterable[Team] | None = None,
    weak_link_threshold: float | None = None,
) -> ConditionalMetrics:
    """Condition every available leg on the current parlay.

    Returns new leg records carrying the conditional rate, parlay boost and
    weak-link flags, the ids of the weak links among ``selected``, and the
    better alternatives found for each weak link. Inputs are not modified.
    """

    if not selected:
        return ConditionalMetrics(
            updated_legs=[
                replace(
                    leg,
                    conditional_hit_rate=leg.base_rate,
                    parlay_boost=0.0,
                    is_weak_link=False,
                    better_alternatives=(),
                )
                for leg in available
            ]
        )

    threshold = settings.weak_link_threshold if weak_link_threshold is None else weak_link_threshold
    resolver = TeamResolver(players, teams)

    weak_link_ids: list[str] = []
    weak_set: set[str] = set()
    alternatives: dict[str, list[Leg]] = {}
    for chosen in selected:
        if chosen.leg_id in weak_set:
            continue
        others = [leg for leg in selected if leg.leg_id != chosen.leg_id]
        rate = conditional_hit_rate(chosen, others, index, resolver)
        base = chosen.base_rate
        if rate < base * threshold:
            logger.info("Weak link %s: base %.3f conditional %.3f", chosen.leg_id, base, rate)
            weak_link_ids.append(chosen.leg_id)
            weak_set.add(chosen.leg_id)
            found = _find_alternatives(chosen, others, available, index, resolver, current_rate=rate)
            if found:
                alternatives[chosen.leg_id] = found

    updated: list[Leg] = []
    for leg in available:
        conditions = [other for other in selected if other.leg_id != leg.leg_id]
        rate = conditional_hit_rate(leg, conditions, index, resolver)
        updated.append(
            replace(
                leg,
                conditional_hit_rate=rate,
                parlay_boost=parlay_boost(rate, leg.base_rate),
                is_weak_link=leg.leg_id in weak_set,
                better_alternatives=tuple(alternatives.get(leg.leg_id, ())),
            )
        )
    return ConditionalMetrics(
        updated_legs=updated,
        weak_link_ids=weak_link_ids,
        alternatives_by_leg_id=alternatives,
    )


def calculate_parlay_probability(
    legs: Sequence[Leg],
    index: HistoricalIndex | None,
    players: Iterable[Player] | None = None,
    teams: Iterable[Team] | None = None,
) -> float:
    """Chain each leg's rate conditioned on the legs before it, in order."""

    if not legs:
        return 0.0
    resolver = TeamResolver(players, teams)
    prob = legs[0].base_rate
    for position in range(1, len(legs)):
        prob *= conditional_hit_rate(legs[position], legs[:position], index, resolver)
    return prob
