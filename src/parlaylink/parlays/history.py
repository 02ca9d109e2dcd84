"""Access to the historical hit/miss index."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from parlaylink.parlays.types import HistoricalOutcome, HistoryEntry, Leg

logger = logging.getLogger(__name__)

HistoricalIndex = Mapping[str, Any]


def _as_game_set(games: Any) -> frozenset[str] | None:
    # game ids may arrive as a list or keyed by game id
    if isinstance(games, (str, bytes)):
        return None
    if isinstance(games, Mapping):
        return frozenset(str(game) for game in games.keys())
    if isinstance(games, (list, tuple, set, frozenset)):
        return frozenset(str(game) for game in games)
    return None


def _field(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def hit_games_of(leg_id: str, index: HistoricalIndex | None) -> frozenset[str] | None:
    """Games in which ``leg_id`` hit, or None when the entry is absent or malformed."""

    if not index:
        return None
    entry = index.get(leg_id)
    if entry is None:
        return None
    return _as_game_set(_field(entry, "hit_games"))


def miss_games_of(leg_id: str, index: HistoricalIndex | None) -> frozenset[str] | None:
    if not index:
        return None
    entry = index.get(leg_id)
    if entry is None:
        return None
    return _as_game_set(_field(entry, "miss_games"))


def build_entry(hit_games: Any, miss_games: Any = ()) -> HistoryEntry:
    return HistoryEntry(
        hit_games=_as_game_set(hit_games) or frozenset(),
        miss_games=_as_game_set(miss_games) or frozenset(),
    )


def historical_outcomes(legs: Sequence[Leg], index: HistoricalIndex | None) -> HistoricalOutcome | None:
    """Count the historical games in which every leg of a parlay hit.

    The sample size is the first leg's recorded games (hits plus misses).
    Returns None for an empty parlay.
    """

    if not legs:
        return None
    all_hit: frozenset[str] | None = None
    for leg in legs:
        games = hit_games_of(leg.leg_id, index) or frozenset()
        all_hit = games if all_hit is None else all_hit & games
    first = legs[0].leg_id
    hits = hit_games_of(first, index) or frozenset()
    misses = miss_games_of(first, index) or frozenset()
    total_games = len(hits) + len(misses)
    all_hit_count = len(all_hit or ())
    hit_rate = all_hit_count / total_games if total_games else 0.0
    return HistoricalOutcome(all_hit_count=all_hit_count, total_games=total_games, hit_rate=hit_rate)
