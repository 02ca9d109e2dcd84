"""Conditional hit-rate estimation from historical co-occurrence."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from parlaylink.config import get_settings
from parlaylink.parlays.correlations import classify
from parlaylink.parlays.history import HistoricalIndex, hit_games_of
from parlaylink.parlays.resolver import TeamResolver
from parlaylink.parlays.types import Leg

logger = logging.getLogger(__name__)

settings = get_settings()


def clamp_probability(value: float) -> float:
    return max(settings.probability_floor, min(settings.probability_ceiling, value))


def blend_weight(shared_games: int, saturation: int | None = None) -> float:
    """Trust placed in the empirical rate given the number of shared games."""

    saturation = saturation or settings.blend_saturation_games
    return min(max(shared_games, 0) / saturation, 1.0)


def linked_conditions(
    leg: Leg,
    condition_legs: Sequence[Leg],
    resolver: TeamResolver | None = None,
) -> list[Leg]:
    resolver = resolver or TeamResolver()
    return [
        other
        for other in condition_legs
        if other.leg_id != leg.leg_id and classify(leg, other, resolver).linked
    ]


def fallback_rate(
    leg: Leg,
    condition_legs: Sequence[Leg],
    resolver: TeamResolver | None = None,
) -> float:
    """Nudge the base rate by the summed correlation strength of the conditions."""

    resolver = resolver or TeamResolver()
    adjustment = 0.0
    for other in condition_legs:
        adjustment += classify(leg, other, resolver).strength * settings.adjustment_scale
    return clamp_probability(leg.base_rate * (1 + adjustment))


def conditional_hit_rate(
    leg: Leg,
    condition_legs: Sequence[Leg],
    index: HistoricalIndex | None,
    resolver: TeamResolver | None = None,
) -> float:
    """Estimate the hit rate of ``leg`` given that every condition leg hit.

    Only linked conditions count. The empirical rate over games in which all
    linked conditions hit is blended with :func:`fallback_rate`, trusting the
    empirical side more as the number of shared games grows.
    """

    resolver = resolver or TeamResolver()
    linked = linked_conditions(leg, condition_legs, resolver)
    if not linked:
        return leg.base_rate

    own_hits = hit_games_of(leg.leg_id, index)
    if own_hits is None:
        logger.debug("No history for %s; using correlation estimate", leg.leg_id)
        return fallback_rate(leg, linked, resolver)

    shared: frozenset[str] | None = None
    for other in linked:
        other_hits = hit_games_of(other.leg_id, index)
        if other_hits is None:
            continue
        shared = other_hits if shared is None else shared & other_hits

    estimate = fallback_rate(leg, linked, resolver)
    if not shared:
        logger.debug("No shared condition games for %s; using correlation estimate", leg.leg_id)
        return estimate

    empirical = len(shared & own_hits) / len(shared)
    weight = blend_weight(len(shared))
    return empirical * weight + estimate * (1 - weight)
