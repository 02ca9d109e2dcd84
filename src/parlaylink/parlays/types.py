"""Dataclasses for legs, correlations and conditioning results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from parlaylink.parlays.odds import american_to_implied


def _usable(rate: float | None) -> bool:
    return rate is not None and math.isfinite(rate)


@dataclass(frozen=True)
class Leg:
    """A single priced bet offer plus the fields derived for the current parlay."""

    leg_id: str
    game_id: str
    bookmaker: str
    market: str
    selection: str
    side: str
    price: int
    line_value: float | None = None
    implied_prob: float | None = None
    home_team: str = ""
    away_team: str = ""

    hit_rate: float | None = None
    last2_hit_rate: float | None = None
    last3_hit_rate: float | None = None
    last5_hit_rate: float | None = None
    last7_hit_rate: float | None = None
    last15_hit_rate: float | None = None
    last30_hit_rate: float | None = None
    blended_hit_rate: float | None = None
    vs_sp_hit_rate: float | None = None
    handedness_hit_rate: float | None = None
    h2h_hit_rate: float | None = None
    home_away_hit_rate: float | None = None
    edge: float | None = None
    ev: float | None = None
    kelly: float | None = None

    # derived per recomputation, never written back to the catalog
    conditional_hit_rate: float | None = None
    parlay_boost: float = 0.0
    is_weak_link: bool = False
    better_alternatives: tuple[Leg, ...] = ()

    @property
    def base_rate(self) -> float:
        """Blended hit rate, or the raw hit rate when no blend is available."""

        if _usable(self.blended_hit_rate):
            return self.blended_hit_rate  # type: ignore[return-value]
        if _usable(self.hit_rate):
            return self.hit_rate  # type: ignore[return-value]
        return 0.0

    @property
    def implied_probability(self) -> float:
        if _usable(self.implied_prob):
            return self.implied_prob  # type: ignore[return-value]
        return american_to_implied(self.price)


@dataclass(frozen=True)
class HistoryEntry:
    """Historical game ids in which a leg hit or missed."""

    hit_games: frozenset[str] = frozenset()
    miss_games: frozenset[str] = frozenset()


class CorrelationKind(str, Enum):
    BLOCKING = "blocking"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NONE = "none"


@dataclass(frozen=True)
class Correlation:
    linked: bool
    kind: CorrelationKind
    strength: float = 0.0


UNLINKED = Correlation(linked=False, kind=CorrelationKind.NONE, strength=0.0)


@dataclass(frozen=True)
class PairCorrelation:
    leg_a: Leg
    leg_b: Leg
    correlation: Correlation


@dataclass
class ConditionalMetrics:
    updated_legs: list[Leg]
    weak_link_ids: list[str] = field(default_factory=list)
    alternatives_by_leg_id: dict[str, list[Leg]] = field(default_factory=dict)


@dataclass(frozen=True)
class AlternateLine:
    leg: Leg
    conditional_rate: float
    base_rate: float
    improvement: float


@dataclass(frozen=True)
class HistoricalOutcome:
    all_hit_count: int
    total_games: int
    hit_rate: float


@dataclass(frozen=True)
class SavedParlay:
    id: str
    name: str
    legs: tuple[Leg, ...]
    total_odds: int
    implied_prob: float
    saved_at: datetime
