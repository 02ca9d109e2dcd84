"""Tabular views of conditioned legs."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import pandas as pd

from parlaylink.parlays.types import Leg

METRIC_COLUMNS = [
    "leg_id",
    "game_id",
    "bookmaker",
    "market",
    "selection",
    "side",
    "line_value",
    "price",
    "base_rate",
    "conditional_hit_rate",
    "parlay_boost",
    "is_weak_link",
    "alternatives",
]


def legs_frame(legs: Iterable[Leg]) -> pd.DataFrame:
    """One row per leg, biggest parlay boost first."""

    rows: list[dict] = []
    for leg in legs:
        rows.append(
            {
                "leg_id": leg.leg_id,
                "game_id": leg.game_id,
                "bookmaker": leg.bookmaker,
                "market": leg.market,
                "selection": leg.selection,
                "side": leg.side,
                "line_value": leg.line_value,
                "price": leg.price,
                "base_rate": leg.base_rate,
                "conditional_hit_rate": leg.conditional_hit_rate,
                "parlay_boost": leg.parlay_boost,
                "is_weak_link": leg.is_weak_link,
                "alternatives": [alt.leg_id for alt in leg.better_alternatives],
            }
        )
    df = pd.DataFrame(rows, columns=METRIC_COLUMNS)
    if df.empty:
        return df
    df = df.sort_values("parlay_boost", ascending=False, kind="stable").reset_index(drop=True)
    return df


def summarize_metrics(frame: pd.DataFrame) -> dict[str, float]:
    """Provide quick descriptive stats for a conditioned leg table."""

    summary: dict[str, float] = {}
    if frame.empty:
        return summary
    rates = pd.to_numeric(frame["conditional_hit_rate"], errors="coerce")
    boosts = pd.to_numeric(frame["parlay_boost"], errors="coerce")
    boosts = boosts.replace([np.inf, -np.inf], np.nan)
    summary["legs"] = float(len(frame))
    summary["conditional_hit_rate_mean"] = float(rates.mean())
    summary["parlay_boost_mean"] = float(boosts.mean())
    summary["parlay_boost_max"] = float(boosts.max())
    summary["weak_links"] = float(frame["is_weak_link"].astype(bool).sum())
    return summary
