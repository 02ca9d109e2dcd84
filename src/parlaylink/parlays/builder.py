"""In-memory parlay selection state."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime

from parlaylink.parlays.correlations import are_bets_blocked
from parlaylink.parlays.engine import parlay_american_odds, parlay_implied_probability
from parlaylink.parlays.types import Leg, SavedParlay

logger = logging.getLogger(__name__)


class ParlayBuilder:
    """Ordered, duplicate-free list of selected legs plus saved snapshots.

    Every mutation replaces the leg list rather than editing it, so a list
    handed out by :attr:`legs` is never changed afterwards.
    """

    def __init__(self) -> None:
        self._legs: tuple[Leg, ...] = ()
        self._saved: list[SavedParlay] = []

    @property
    def legs(self) -> list[Leg]:
        return list(self._legs)

    @property
    def saved(self) -> list[SavedParlay]:
        return list(self._saved)

    def __len__(self) -> int:
        return len(self._legs)

    def __contains__(self, leg_id: object) -> bool:
        return any(leg.leg_id == leg_id for leg in self._legs)

    def can_add(self, leg: Leg) -> bool:
        if leg.leg_id in self:
            return False
        return not any(are_bets_blocked(leg, chosen) for chosen in self._legs)

    def add_leg(self, leg: Leg) -> bool:
        if not self.can_add(leg):
            logger.debug("Skipping %s: duplicate or blocked", leg.leg_id)
            return False
        self._legs = self._legs + (leg,)
        return True

    def remove_leg(self, leg_id: str) -> None:
        self._legs = tuple(leg for leg in self._legs if leg.leg_id != leg_id)

    def clear(self) -> None:
        self._legs = ()

    def switch_leg(self, old_leg_id: str, new_leg: Leg) -> bool:
        """Swap a leg for an alternate line in the same position.

        Refused when the replacement already sits elsewhere in the parlay.
        """

        if new_leg.leg_id != old_leg_id and new_leg.leg_id in self:
            return False
        legs = list(self._legs)
        for position, leg in enumerate(legs):
            if leg.leg_id == old_leg_id:
                legs[position] = new_leg
                self._legs = tuple(legs)
                return True
        return False

    @property
    def total_odds(self) -> int:
        return parlay_american_odds(self._legs)

    @property
    def implied_probability(self) -> float:
        return parlay_implied_probability(self._legs)

    def save(self, name: str) -> SavedParlay | None:
        if not self._legs:
            return None
        snapshot = SavedParlay(
            id=uuid.uuid4().hex,
            name=name,
            legs=self._legs,
            total_odds=self.total_odds,
            implied_prob=self.implied_probability,
            saved_at=datetime.now(),
        )
        self._saved.append(snapshot)
        self._legs = ()
        return snapshot

    def load_saved(self, parlay_id: str) -> bool:
        for snapshot in self._saved:
            if snapshot.id == parlay_id:
                self._legs = snapshot.legs
                return True
        return False

    def delete_saved(self, parlay_id: str) -> None:
        self._saved = [snapshot for snapshot in self._saved if snapshot.id != parlay_id]
