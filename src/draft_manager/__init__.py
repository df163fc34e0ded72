from src.draft_manager.api_client import ApiError, DraftApiClient, PickCommitError
from src.draft_manager.draft_controller import DraftController, PickOutcome, confirm_pick
from src.draft_manager.draft_initializer import DraftInitializer, new_draft_order
from src.draft_manager.draft_rules import (
    AlreadyJoined,
    DraftComplete,
    DraftRules,
    DuplicatePick,
    DuplicateTeam,
    LeagueFull,
    NotYourTurn,
    RosterFull,
    StalePick,
    ValidationError,
)
from src.draft_manager.draft_state import (
    Contestant,
    Draft,
    DraftResult,
    League,
    Player,
    RosterPlayer,
    active_contestant_id,
)
from src.draft_manager.league_manager import LeagueManager
from src.draft_manager.roster_validator import RosterValidator, assign_slot
from src.draft_manager.standings import standings
from src.draft_manager.state_persistence import DraftSession, StatePersistence

__all__ = [
    "AlreadyJoined",
    "ApiError",
    "Contestant",
    "Draft",
    "DraftApiClient",
    "DraftComplete",
    "DraftController",
    "DraftInitializer",
    "DraftResult",
    "DraftRules",
    "DraftSession",
    "DuplicatePick",
    "DuplicateTeam",
    "League",
    "LeagueFull",
    "LeagueManager",
    "NotYourTurn",
    "PickCommitError",
    "PickOutcome",
    "Player",
    "RosterFull",
    "RosterPlayer",
    "RosterValidator",
    "StalePick",
    "StatePersistence",
    "ValidationError",
    "active_contestant_id",
    "assign_slot",
    "confirm_pick",
    "new_draft_order",
    "standings",
]
