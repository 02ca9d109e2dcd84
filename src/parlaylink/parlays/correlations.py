"""Correlation classification and blocking rules for same-game legs."""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Sequence

from parlaylink.config import get_settings
from parlaylink.parlays.resolver import MarketFamily, TeamResolver, market_base, market_family
from parlaylink.parlays.types import UNLINKED, Correlation, CorrelationKind, Leg, PairCorrelation

settings = get_settings()

PROP_FAMILIES = frozenset({MarketFamily.PITCHER, MarketFamily.BATTER})
STRIKEOUTS_MARKET = "pitcher_strikeouts"


def _linked(strength: float) -> Correlation:
    if strength > 0:
        kind = CorrelationKind.POSITIVE
    elif strength < 0:
        kind = CorrelationKind.NEGATIVE
    else:
        kind = CorrelationKind.NONE
    return Correlation(linked=True, kind=kind, strength=strength)


def _pitcher_batter_strength(a: Leg, b: Leg) -> float:
    pitcher = a if market_family(a.market) is MarketFamily.PITCHER else b
    if pitcher.market == STRIKEOUTS_MARKET:
        return settings.strikeout_strength
    return settings.linked_strength


def classify(a: Leg, b: Leg, resolver: TeamResolver | None = None) -> Correlation:
    """Decide whether two legs of the same game move together.

    Totals correlate with every leg in their game. Otherwise the pair is
    linked by market family and team relationship:

    * team market with a pitcher or batter prop: same team
    * batter prop with batter prop: same team
    * pitcher prop with batter prop: opposing teams

    Pitcher props never condition each other, nor do two team markets.
    """

    if a.game_id != b.game_id:
        return UNLINKED
    resolver = resolver or TeamResolver()
    family_a = market_family(a.market)
    family_b = market_family(b.market)

    if MarketFamily.TOTALS in (family_a, family_b):
        return _linked(settings.totals_strength)

    families = {family_a, family_b}
    if MarketFamily.TEAM in families and families & PROP_FAMILIES:
        if resolver.same_team(a, b):
            return _linked(settings.linked_strength)
    elif families == {MarketFamily.BATTER}:
        if resolver.same_team(a, b):
            return _linked(settings.linked_strength)
    elif families == PROP_FAMILIES:
        if resolver.opposing_teams(a, b):
            return _linked(_pitcher_batter_strength(a, b))
    return UNLINKED


def get_correlation_strength(a: Leg, b: Leg, resolver: TeamResolver | None = None) -> float:
    return classify(a, b, resolver).strength


def are_bets_blocked(a: Leg, b: Leg) -> bool:
    """Return True when the two legs cannot share a parlay."""

    if a.game_id != b.game_id:
        return False
    if a.market == b.market and a.market in ("h2h", "spreads"):
        return a.selection != b.selection
    if a.market == b.market == "totals":
        return a.side != b.side
    if a.selection != b.selection:
        return False
    # same player or team on the same stat, any line or side
    return a.market == b.market or market_base(a.market) == market_base(b.market)


def filter_blocked_bets(available: Iterable[Leg], selected: Sequence[Leg]) -> list[Leg]:
    return [
        leg
        for leg in available
        if not any(are_bets_blocked(leg, chosen) for chosen in selected)
    ]


def pairwise_correlations(
    legs: Sequence[Leg],
    resolver: TeamResolver | None = None,
) -> list[PairCorrelation]:
    """Every unordered pair of legs with its relationship, strongest first."""

    resolver = resolver or TeamResolver()
    pairs: list[PairCorrelation] = []
    for leg_a, leg_b in itertools.combinations(legs, 2):
        if are_bets_blocked(leg_a, leg_b):
            correlation = Correlation(linked=False, kind=CorrelationKind.BLOCKING)
        else:
            correlation = classify(leg_a, leg_b, resolver)
        pairs.append(PairCorrelation(leg_a=leg_a, leg_b=leg_b, correlation=correlation))
    pairs.sort(key=lambda pair: abs(pair.correlation.strength), reverse=True)
    return pairs


def parlay_correlation_factor(legs: Sequence[Leg], resolver: TeamResolver | None = None) -> float:
    """1 plus the mean pairwise strength; 1 means the legs are independent."""

    if len(legs) < 2:
        return 1.0
    resolver = resolver or TeamResolver()
    strengths = [
        classify(leg_a, leg_b, resolver).strength
        for leg_a, leg_b in itertools.combinations(legs, 2)
    ]
    return 1 + sum(strengths) / len(strengths)


def correlation_label(strength: float) -> str:
    magnitude = abs(strength)
    direction = "Positive" if strength > 0 else "Negative"
    if magnitude > 0.3:
        return f"Strong {direction}"
    if magnitude > 0.1:
        return f"Moderate {direction}"
    if magnitude > 0:
        return f"Weak {direction}"
    return "None"
