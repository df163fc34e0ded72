"""League lifecycle - creating leagues and filling them with contestants."""

import logging
import uuid
from dataclasses import replace
from typing import List, Tuple

from src.draft_manager.config import MIN_LEAGUE_SIZE
from src.draft_manager.draft_rules import AlreadyJoined, LeagueFull, ValidationError
from src.draft_manager.draft_state import Contestant, League

logger = logging.getLogger(__name__)


class LeagueManager:
    """Creates leagues and admits contestants until they are full."""

    def create_league(self, name: str, size: int) -> League:
        """Create an empty league after validating name and size."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("League name is required")

        if isinstance(size, bool) or not isinstance(size, int) or size < MIN_LEAGUE_SIZE:
            raise ValidationError("League size must be a positive number")

        league = League.create_new(name, size)
        logger.info("Created league %s (%s), size %d", name, league.league_id, size)
        return league

    def join_league(
        self,
        league: League,
        contestants: List[Contestant],
        user_id: str,
        team_name: str,
    ) -> Tuple[League, Contestant]:
        """
        Add a user's team to a league.

        Returns:
            (league, contestant) - the league is a copy with ``full`` set
            when this contestant was the last one it needed.
        """
        team_name = (team_name or "").strip()
        if not team_name:
            raise ValidationError("Team name is required")

        members = [c for c in contestants if c.league_id == league.league_id]

        if league.full or len(members) >= league.size:
            raise LeagueFull(f"League {league.name} is full")

        if any(c.user_id == user_id for c in members):
            raise AlreadyJoined(f"User {user_id} already has a team in {league.name}")

        contestant = Contestant(
            contestant_id=str(uuid.uuid4()),
            league_id=league.league_id,
            user_id=user_id,
            team_name=team_name,
        )

        if len(members) + 1 >= league.size:
            league = replace(league, full=True)
            logger.info("League %s is now full", league.name)

        logger.info(
            "%s joined league %s (%d/%d)",
            team_name,
            league.name,
            len(members) + 1,
            league.size,
        )
        return league, contestant

    @staticmethod
    def open_leagues(leagues: List[League]) -> List[League]:
        """Leagues still accepting contestants."""
        return [league for league in leagues if not league.full]

    @staticmethod
    def league_status(league: League) -> str:
        """One of ``filling``, ``drafting`` or ``drafted``."""
        if not league.full:
            return "filling"
        if not league.drafted:
            return "drafting"
        return "drafted"
