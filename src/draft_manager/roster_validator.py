"""Roster validation and slot assignment logic."""

from collections import Counter
from typing import Dict, List, Mapping, Optional, Tuple

from src.draft_manager.config import ROSTER_SLOTS, SLOT_DISPLAY, SLOT_PRIORITY
from src.draft_manager.draft_rules import RosterFull, ValidationError
from src.draft_manager.draft_state import Contestant, RosterPlayer

Roster = Mapping[str, Optional[RosterPlayer]]


class RosterValidator:
    """Validates roster construction and slot assignments."""

    def eligible_slots(self, position: str) -> List[str]:
        """Slots a position may fill, in priority order."""
        key = (position or "").upper()
        if key not in SLOT_PRIORITY:
            raise ValidationError(f"Unknown position '{position}'")
        return list(SLOT_PRIORITY[key])

    def determine_roster_slot(self, roster: Roster, position: str) -> str:
        """
        Determine which roster slot a player should fill.

        Priority: position slots -> FLEX slots (RB/WR/TE only).

        Raises:
            RosterFull: every eligible slot is already occupied.
        """
        for slot in self.eligible_slots(position):
            if roster.get(slot) is None:
                return slot

        raise RosterFull(
            f"This player cannot be drafted - {position.upper()} roster spots are full"
        )

    def can_roster(self, roster: Roster, position: str) -> bool:
        """Whether a player at this position still fits anywhere."""
        try:
            self.determine_roster_slot(roster, position)
        except ValidationError:
            return False
        return True

    def validate_final_roster(self, contestant: Contestant) -> Tuple[bool, List[str]]:
        """
        Validate that a completed roster meets all requirements.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        for slot in contestant.open_slots():
            errors.append(f"Slot {slot} ({SLOT_DISPLAY[slot]}) is empty")

        players = contestant.rostered_players()
        for team_id, count in Counter(p.team_id for p in players).items():
            if team_id and count > 1:
                errors.append(f"{count} players from team {team_id}")
        for player_id, count in Counter(p.player_id for p in players).items():
            if count > 1:
                errors.append(f"Player {player_id} rostered {count} times")

        return (len(errors) == 0, errors)

    def get_roster_summary(self, contestant: Contestant) -> Dict[str, Dict]:
        """Generate summary of a contestant's roster status by display group."""
        summary = {}

        for slot in ROSTER_SLOTS:
            label = SLOT_DISPLAY[slot]
            entry = summary.setdefault(label, {"filled": 0, "required": 0})
            entry["required"] += 1
            if contestant.roster.get(slot) is not None:
                entry["filled"] += 1

        for entry in summary.values():
            entry["remaining"] = entry["required"] - entry["filled"]

        return summary


def assign_slot(roster: Roster, position: str) -> str:
    """Return the first open slot for ``position`` or raise RosterFull."""
    return RosterValidator().determine_roster_slot(roster, position)
