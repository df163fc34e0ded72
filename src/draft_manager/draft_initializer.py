"""Draft initialization - creates new drafts for leagues that have filled up."""

import logging
import random
from typing import List, Optional, Sequence

from src.draft_manager.config import DEFAULT_ROUNDS
from src.draft_manager.draft_state import Contestant, Draft, League

logger = logging.getLogger(__name__)


def new_draft_order(
    contestant_ids: Sequence[str], rng: Optional[random.Random] = None
) -> List[str]:
    """Return a uniformly random permutation of ``contestant_ids``."""
    order = list(contestant_ids)
    if len(set(order)) != len(order):
        raise ValueError("contestant_ids must be unique")

    (rng or random.Random()).shuffle(order)
    return order


class DraftInitializer:
    """Handles creation of new draft instances."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng

    def create_draft(
        self,
        league: League,
        contestants: List[Contestant],
        rounds: int = DEFAULT_ROUNDS,
    ) -> Draft:
        """
        Create a new draft for a full league.

        Args:
            league: The league to draft (must be full)
            contestants: The league's contestants
            rounds: Rounds to draft (default: one per roster slot)

        Returns:
            Draft with a randomized order, ready to begin drafting
        """
        self._validate_inputs(league, contestants)

        order = new_draft_order(
            [c.contestant_id for c in contestants], rng=self.rng
        )
        draft = Draft.create_new(league, order, rounds=rounds)

        names = {c.contestant_id: c.team_name for c in contestants}
        logger.info(
            "Created draft %s for league %s: %d teams, %d rounds, order %s",
            draft.draft_id,
            league.name,
            league.size,
            rounds,
            ", ".join(names[cid] for cid in order),
        )

        return draft

    def _validate_inputs(self, league: League, contestants: List[Contestant]):
        """Validate the league is ready to draft."""
        if not league.full:
            raise ValueError(f"League {league.name} is not full yet")

        if league.drafted:
            raise ValueError(f"League {league.name} has already drafted")

        if len(contestants) != league.size:
            raise ValueError(
                f"Number of contestants ({len(contestants)}) "
                f"must match league size ({league.size})"
            )

        foreign = [c for c in contestants if c.league_id != league.league_id]
        if foreign:
            raise ValueError(
                f"Contestant {foreign[0].team_name} belongs to another league"
            )
