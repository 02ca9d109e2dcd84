"""Market families and team resolution for legs."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from parlaylink.data.schemas import Player, Team
from parlaylink.parlays.types import Leg

logger = logging.getLogger(__name__)

TEAM_MARKETS = frozenset({"h2h", "spreads"})
TOTALS_MARKET = "totals"
GAME_MARKETS = TEAM_MARKETS | {TOTALS_MARKET}
PITCHER_PREFIX = "pitcher_"
BATTER_PREFIX = "batter_"


class MarketFamily(str, Enum):
    TEAM = "team"
    TOTALS = "totals"
    PITCHER = "pitcher"
    BATTER = "batter"
    OTHER = "other"


def market_family(market: str) -> MarketFamily:
    if market == TOTALS_MARKET:
        return MarketFamily.TOTALS
    if market in TEAM_MARKETS:
        return MarketFamily.TEAM
    if market.startswith(PITCHER_PREFIX):
        return MarketFamily.PITCHER
    if market.startswith(BATTER_PREFIX):
        return MarketFamily.BATTER
    return MarketFamily.OTHER


def market_base(market: str) -> str:
    """Two-token prefix shared by every line of a stat, e.g. ``batter_hits``."""

    return "_".join(market.split("_")[:2])


def leg_category(leg: Leg, starting_pitchers: Iterable[str] = ()) -> str:
    """Bucket a leg into ``game``, ``pitcher`` or ``batter``.

    Props on a listed starting pitcher count as pitcher legs whatever the market.
    """

    if leg.market in GAME_MARKETS:
        return "game"
    if leg.market.startswith(PITCHER_PREFIX):
        return "pitcher"
    if leg.selection and leg.selection in set(starting_pitchers):
        return "pitcher"
    return "batter"


class TeamResolver:
    """Maps legs onto full team names using the player and team reference lists.

    Lookups are built once per instance; create a new resolver whenever the
    reference lists change.
    """

    def __init__(
        self,
        players: Iterable[Player] | None = None,
        teams: Iterable[Team] | None = None,
    ) -> None:
        self._players: dict[str, Player] = {}
        for player in players or ():
            self._players.setdefault(player.full_name, player)
        self._teams: dict[str, Team] = {}
        for team in teams or ():
            self._teams.setdefault(team.code, team)

    def team_of(self, leg: Leg) -> str | None:
        family = market_family(leg.market)
        if family is MarketFamily.TEAM:
            return leg.selection
        if family not in (MarketFamily.PITCHER, MarketFamily.BATTER):
            return None
        if not self._players:
            logger.debug("Players not loaded; %s has no team", leg.leg_id)
            return None
        player = self._players.get(leg.selection)
        if player is None:
            logger.debug("Unknown player %r for %s", leg.selection, leg.leg_id)
            return None
        team = self._teams.get(player.team_code)
        if team is None:
            logger.debug("Unknown team code %r for %s", player.team_code, leg.leg_id)
            return None
        return team.name

    def same_team(self, a: Leg, b: Leg) -> bool:
        if a.game_id != b.game_id:
            return False
        team_a = self.team_of(a)
        team_b = self.team_of(b)
        if not team_a or not team_b:
            return False
        return team_a == team_b

    def opposing_teams(self, a: Leg, b: Leg) -> bool:
        if a.game_id != b.game_id:
            return False
        team_a = self.team_of(a)
        team_b = self.team_of(b)
        if not team_a or not team_b:
            return False
        return team_a != team_b
