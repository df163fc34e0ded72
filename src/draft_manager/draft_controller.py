"""Draft controller - orchestrates pick confirmation and state transitions."""

import copy
import logging
from dataclasses import dataclass, replace
from typing import Optional

from src.draft_manager.draft_rules import DraftRules, StalePick, ValidationError
from src.draft_manager.draft_state import (
    Contestant,
    Draft,
    DraftResult,
    League,
    Player,
    RosterPlayer,
)
from src.draft_manager.roster_validator import RosterValidator

logger = logging.getLogger(__name__)


@dataclass
class PickOutcome:
    """New contestant and draft state produced by one confirmed pick."""

    contestant: Contestant
    draft: Draft
    result: Optional[DraftResult]
    league_drafted_now: bool = False
    replayed: bool = False


class DraftController:
    """Main controller for pick confirmation.

    Coordinates between DraftRules (validation), RosterValidator (slot
    assignment) and Draft (clock advance). Inputs are never mutated: every
    confirmed pick returns fresh copies of the contestant and draft.
    """

    def __init__(self):
        self.validator = RosterValidator()

    def confirm_pick(
        self,
        draft: Draft,
        contestant: Contestant,
        player: Player,
        caller_user_id: Optional[str] = None,
        pick_key: Optional[int] = None,
    ) -> PickOutcome:
        """Validate and execute a draft pick.

        Args:
            draft: Current draft state.
            contestant: Contestant making the pick.
            player: Player being drafted.
            caller_user_id: Authenticated user submitting the pick, if known.
            pick_key: The ``overall_pick`` value the caller saw when it
                submitted. A retry with an already committed key is a no-op.

        Returns:
            PickOutcome with the updated contestant and draft.

        Raises:
            ValidationError: If the pick is illegal (stale, draft complete,
                wrong turn, player already drafted, same NFL team, roster
                full).
        """
        if pick_key is not None:
            replay = self._check_pick_key(draft, contestant, player, pick_key)
            if replay is not None:
                return replay

        rules = DraftRules(draft)
        is_valid, error = rules.validate_pick(contestant, player, caller_user_id)
        if not is_valid:
            logger.warning("Invalid pick attempted: %s", error)
            raise error

        try:
            slot = self.validator.determine_roster_slot(
                contestant.roster, player.position
            )
        except ValidationError as e:
            logger.warning("Invalid pick attempted: %s", e)
            raise

        new_contestant = copy.deepcopy(contestant)
        new_draft = copy.deepcopy(draft)

        new_contestant.roster[slot] = RosterPlayer.from_player(player)

        result = DraftResult(
            pick_number=new_draft.overall_pick + 1,
            round=new_draft.current_round,
            picking_team=contestant.team_name,
            contestant_id=contestant.contestant_id,
            player_id=player.player_id,
            player_name=player.player_name,
            position=player.position.upper(),
            team_id=player.team_id,
            team_name=player.team_name,
            slot=slot,
        )
        new_draft.results.append(result)

        logger.info(
            "Pick %d (Rd %d): %s selects %s (%s) -> %s",
            result.pick_number,
            result.round,
            contestant.team_name,
            player.player_name,
            player.position,
            slot,
        )

        new_draft.advance_to_next_pick()
        league_drafted_now = new_draft.check_if_complete()
        if league_drafted_now:
            logger.info(
                "Draft %s complete after %d picks",
                new_draft.draft_id,
                new_draft.overall_pick,
            )

        return PickOutcome(
            contestant=new_contestant,
            draft=new_draft,
            result=result,
            league_drafted_now=league_drafted_now,
        )

    def _check_pick_key(
        self, draft: Draft, contestant: Contestant, player: Player, pick_key: int
    ) -> Optional[PickOutcome]:
        """Return a no-op outcome for a replayed pick, None for a fresh one."""
        if pick_key == draft.overall_pick:
            return None

        if pick_key > draft.overall_pick:
            raise StalePick(
                f"Pick key {pick_key} is ahead of the draft "
                f"(overall pick {draft.overall_pick})"
            )

        committed = draft.result_for_pick(pick_key + 1)
        if (
            committed is None
            or committed.player_id != player.player_id
            or committed.contestant_id != contestant.contestant_id
        ):
            raise StalePick(
                f"Pick {pick_key + 1} was already made; refresh and try again"
            )

        logger.info(
            "Pick %d already committed for %s, ignoring retry",
            committed.pick_number,
            contestant.team_name,
        )
        return PickOutcome(
            contestant=copy.deepcopy(contestant),
            draft=copy.deepcopy(draft),
            result=committed,
            replayed=True,
        )

    @staticmethod
    def apply_to_league(league: League, outcome: PickOutcome) -> League:
        """Return the league marked drafted if this pick finished the draft."""
        if outcome.league_drafted_now and not league.drafted:
            return replace(league, drafted=True)
        return league


def confirm_pick(
    draft: Draft,
    contestant: Contestant,
    player: Player,
    caller_user_id: Optional[str] = None,
    pick_key: Optional[int] = None,
) -> PickOutcome:
    """Confirm one pick; see DraftController.confirm_pick."""
    return DraftController().confirm_pick(
        draft, contestant, player, caller_user_id=caller_user_id, pick_key=pick_key
    )
