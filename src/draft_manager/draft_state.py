"""Draft state data models - leagues, contestants, players and the draft itself."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set
import uuid

from src.draft_manager.config import (
    BACKWARD,
    DEFAULT_ROUNDS,
    FORWARD,
    ROSTER_SLOTS,
)


def empty_roster() -> Dict[str, Optional["RosterPlayer"]]:
    """A roster with every slot open."""
    return {slot: None for slot in ROSTER_SLOTS}


@dataclass
class League:
    """A league that fills up with contestants and then drafts."""

    league_id: str
    name: str
    size: int
    full: bool = False
    drafted: bool = False

    @classmethod
    def create_new(cls, name: str, size: int) -> "League":
        return cls(league_id=str(uuid.uuid4()), name=name, size=size)


@dataclass
class Player:
    """Catalog entry for a draftable NFL player (or team defense)."""

    player_id: str
    player_name: str
    position: str
    team_id: str
    team_name: str

    @classmethod
    def from_dict(cls, data: Dict) -> "Player":
        """Build from a catalog record, tolerating the backend's field aliases."""
        team = data.get("team") if isinstance(data.get("team"), dict) else {}
        player_id = data.get("_id") or data.get("id") or data.get("playerId") or ""
        team_id = data.get("teamId") or team.get("_id") or team.get("id") or ""
        return cls(
            player_id=str(player_id),
            player_name=data.get("playerName") or data.get("name") or "",
            position=(data.get("position") or "").upper(),
            team_id=str(team_id),
            team_name=data.get("teamName") or team.get("teamName") or "",
        )


@dataclass
class RosterPlayer:
    """A drafted player occupying one roster slot."""

    player_id: str
    player_name: str
    team_id: str
    team_name: str
    position: str
    wc_pts: float = 0
    dv_pts: float = 0
    cc_pts: float = 0
    sb_pts: float = 0

    @classmethod
    def from_player(cls, player: Player) -> "RosterPlayer":
        return cls(
            player_id=player.player_id,
            player_name=player.player_name,
            team_id=player.team_id,
            team_name=player.team_name,
            position=player.position.upper(),
        )

    @property
    def total(self) -> float:
        return self.wc_pts + self.dv_pts + self.cc_pts + self.sb_pts


@dataclass
class Contestant:
    """A user's team within one league."""

    contestant_id: str
    league_id: str
    user_id: str
    team_name: str
    roster: Dict[str, Optional[RosterPlayer]] = field(default_factory=empty_roster)
    wc_pts: float = 0
    dv_pts: float = 0
    cc_pts: float = 0
    sb_pts: float = 0

    @property
    def total(self) -> float:
        """Season total across the four playoff rounds."""
        return self.wc_pts + self.dv_pts + self.cc_pts + self.sb_pts

    def open_slots(self) -> List[str]:
        return [slot for slot in ROSTER_SLOTS if self.roster.get(slot) is None]

    def filled_slots(self) -> List[str]:
        return [slot for slot in ROSTER_SLOTS if self.roster.get(slot) is not None]

    def rostered_players(self) -> List[RosterPlayer]:
        return [self.roster[slot] for slot in self.filled_slots()]

    def rostered_team_ids(self) -> Set[str]:
        return {p.team_id for p in self.rostered_players() if p.team_id}

    def rostered_player_ids(self) -> Set[str]:
        return {p.player_id for p in self.rostered_players()}


@dataclass(frozen=True)
class DraftResult:
    """Represents a single draft pick."""

    pick_number: int
    round: int
    picking_team: str
    contestant_id: str
    player_id: str
    player_name: str
    position: str
    team_id: str
    team_name: str
    slot: Optional[str] = None  # Roster slot assigned (qb1, fl2, dst, etc.)


@dataclass
class Draft:
    """Complete draft state - order, clock position and results."""

    draft_id: str
    league_id: str
    order: List[str]
    size: int
    rounds: int = DEFAULT_ROUNDS
    direction: str = FORWARD
    current_round: int = 1
    current_pick_in_round: int = 1
    overall_pick: int = 0  # Picks made so far
    results: List[DraftResult] = field(default_factory=list)
    completed: bool = False

    @classmethod
    def create_new(
        cls, league: League, order: List[str], rounds: int = DEFAULT_ROUNDS
    ) -> "Draft":
        """Factory method to create a new draft for a full league."""
        if len(order) != league.size:
            raise ValueError(
                f"order length ({len(order)}) must match "
                f"league size ({league.size})"
            )
        if rounds < 1:
            raise ValueError(f"rounds must be positive, got {rounds}")

        return cls(
            draft_id=str(uuid.uuid4()),
            league_id=league.league_id,
            order=list(order),
            size=league.size,
            rounds=rounds,
        )

    def total_picks(self) -> int:
        """Number of picks after which the draft is over."""
        return self.rounds * self.size

    def active_contestant_id(self) -> Optional[str]:
        """Contestant on the clock under snake order, or None."""
        if not self.order:
            return None

        if self.direction == BACKWARD:
            index = len(self.order) - self.current_pick_in_round
        else:
            index = self.current_pick_in_round - 1

        if 0 <= index < len(self.order):
            return self.order[index]
        return None

    def drafted_player_ids(self) -> Set[str]:
        return {r.player_id for r in self.results}

    def result_for_pick(self, pick_number: int) -> Optional[DraftResult]:
        for result in self.results:
            if result.pick_number == pick_number:
                return result
        return None

    def advance_to_next_pick(self):
        """Move the clock one pick forward, reversing direction at round end."""
        if self.completed:
            return

        self.overall_pick += 1

        if self.current_pick_in_round >= self.size:
            self.current_round += 1
            self.current_pick_in_round = 1
            self.direction = BACKWARD if self.direction == FORWARD else FORWARD
        else:
            self.current_pick_in_round += 1

    def check_if_complete(self) -> bool:
        """Check if draft is complete; the flag never goes back to False."""
        if not self.completed and self.overall_pick >= self.total_picks():
            self.completed = True
        return self.completed


def active_contestant_id(draft: Draft) -> Optional[str]:
    """Return the id of the contestant whose turn it is, or None."""
    return draft.active_contestant_id()
