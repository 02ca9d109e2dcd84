"""American odds arithmetic."""

from __future__ import annotations

import math
from collections.abc import Iterable


def american_to_decimal(odds: int) -> float:
    if odds == 0 or not math.isfinite(odds):
        return 1.0
    return 1 + (odds / 100) if odds > 0 else 1 + (100 / abs(odds))


def decimal_to_american(decimal: float) -> int:
    """Convert decimal odds back to American; degenerate prices map to 0."""

    if not math.isfinite(decimal) or decimal <= 1:
        return 0
    if decimal >= 2:
        return round((decimal - 1) * 100)
    return round(-100 / (decimal - 1))


def american_to_implied(odds: int) -> float:
    """Convert American odds into implied probability."""

    if not math.isfinite(odds):
        return 0.0
    if odds > 0:
        return 100 / (odds + 100)
    if odds < 0:
        return -odds / (-odds + 100)
    return 0.0


def combine_odds(prices: Iterable[int]) -> float:
    decimal = 1.0
    for price in prices:
        decimal *= american_to_decimal(price)
    return decimal
