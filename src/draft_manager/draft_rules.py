"""Draft rule enforcement and pick validation."""

from typing import Optional, Tuple

from src.draft_manager.draft_state import Contestant, Draft, Player


class ValidationError(Exception):
    """Raised when a pick or league action violates draft rules."""

    pass


class DuplicatePick(ValidationError):
    """Player has already been drafted somewhere in the league."""


class DuplicateTeam(ValidationError):
    """Contestant already rosters a player from the same NFL team."""


class RosterFull(ValidationError):
    """No eligible roster slot remains for the player's position."""


class NotYourTurn(ValidationError):
    """The picking contestant is not on the clock."""


class DraftComplete(ValidationError):
    """All picks have been made."""


class StalePick(ValidationError):
    """The pick was submitted against an out-of-date draft state."""


class LeagueFull(ValidationError):
    """League already has its full complement of contestants."""


class AlreadyJoined(ValidationError):
    """User already has a team in this league."""


class DraftRules:
    """Enforces all draft rules and validation logic."""

    def __init__(self, draft: Draft):
        self.draft = draft

    def validate_pick(
        self,
        contestant: Contestant,
        player: Player,
        caller_user_id: Optional[str] = None,
    ) -> Tuple[bool, Optional[ValidationError]]:
        """
        Validate if a pick is legal.

        Roster slot availability is checked separately by RosterValidator.

        Returns:
            (is_valid, error) - (True, None) if valid
        """
        # Check 1: Is the draft still running?
        if self.draft.completed:
            return False, DraftComplete("Draft is already complete")

        # Check 2: Is it this contestant's turn?
        active_id = self.draft.active_contestant_id()
        if contestant.contestant_id != active_id:
            return False, NotYourTurn(
                f"Not {contestant.team_name}'s turn (current: {active_id})"
            )
        if caller_user_id is not None and caller_user_id != contestant.user_id:
            return False, NotYourTurn(
                f"User {caller_user_id} does not own {contestant.team_name}"
            )

        # Check 3: Does the player have an id?
        if not player.player_id:
            return False, ValidationError("Player has no id")

        # Check 4: Is player available?
        if player.player_id in self.draft.drafted_player_ids():
            return False, DuplicatePick(
                f"{player.player_name or player.player_id} has already been drafted"
            )

        # Check 5: One player per NFL team per roster
        if player.team_id and player.team_id in contestant.rostered_team_ids():
            return False, DuplicateTeam(
                f"{contestant.team_name} already has a player from "
                f"{player.team_name or player.team_id}"
            )

        return True, None
