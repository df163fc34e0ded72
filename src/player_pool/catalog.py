"""Player catalog loading and available-player filtering.

The catalog is reference data from the backend's ``/players`` endpoint or
from a local CSV/JSON export. Records are normalized into one DataFrame:
- Field aliases resolved (playerId/id/_id, playerName/name, nested team)
- Positions upper-cased and aliases mapped (PK -> K, DEF -> DST)
- Rows without an id or with an unknown position dropped
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from src.draft_manager.config import SLOT_PRIORITY
from src.draft_manager.draft_state import Contestant, Draft, Player
from src.player_pool.config import (
    CATALOG_COLUMNS,
    CATALOG_FILE,
    COLUMN_ALIASES,
    POSITION_ALIASES,
    VALID_POSITIONS,
)

logger = logging.getLogger(__name__)


def _flatten_team(record: Dict) -> Dict:
    """Lift ``team: {_id, teamName}`` onto the record as teamId/teamName."""
    team = record.get("team")
    if not isinstance(team, dict):
        return record
    flat = {k: v for k, v in record.items() if k != "team"}
    flat.setdefault("teamId", team.get("_id") or team.get("id"))
    flat.setdefault("teamName", team.get("teamName") or team.get("name"))
    return flat


def _normalize_position(value) -> Optional[str]:
    if pd.isna(value):
        return None
    pos = str(value).strip().upper()
    pos = POSITION_ALIASES.get(pos, pos)
    return pos if pos in VALID_POSITIONS else None


class PlayerCatalog:
    """Normalized player table with lookups and draft-aware filtering."""

    def __init__(self, df: pd.DataFrame):
        self.df = self._normalize(df)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @classmethod
    def from_records(cls, records: Iterable[Dict]) -> "PlayerCatalog":
        rows = [_flatten_team(r) for r in records]
        return cls(pd.DataFrame(rows, dtype=object))

    @classmethod
    def from_json(cls, path: Optional[Path] = None) -> "PlayerCatalog":
        """Read a JSON list of players, or ``{"players": [...]}``.

        Reads ``data/players.json`` when no path is given.
        """
        path = path or CATALOG_FILE
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("players", [])
        logger.info("Reading player catalog: %s", Path(path).name)
        return cls.from_records(data)

    @classmethod
    def from_csv(cls, path: Path) -> "PlayerCatalog":
        logger.info("Reading player catalog: %s", Path(path).name)
        return cls(pd.read_csv(path, dtype=str))

    @staticmethod
    def _normalize(df: pd.DataFrame) -> pd.DataFrame:
        out = pd.DataFrame(index=df.index)
        for column, aliases in COLUMN_ALIASES.items():
            source = next((a for a in aliases if a in df.columns), None)
            out[column] = df[source] if source is not None else None

        out["position"] = out["position"].map(_normalize_position)

        ids = out["player_id"].fillna("").astype(str).str.strip()
        bad = (ids == "") | out["position"].isna()
        if bad.any():
            logger.warning(
                "Dropping %d players with no id or unrecognized position",
                int(bad.sum()),
            )
            out = out[~bad].copy()

        for column in CATALOG_COLUMNS:
            out[column] = out[column].fillna("").astype(str).str.strip()

        dupes = out["player_id"].duplicated()
        if dupes.any():
            logger.warning("Dropping %d duplicate player ids", int(dupes.sum()))
            out = out[~dupes].copy()

        return out.reset_index(drop=True)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.df)

    def get_player(self, player_id: str) -> Player:
        """Look up one player.

        Raises:
            KeyError: Unknown ``player_id``.
        """
        match = self.df[self.df["player_id"] == str(player_id)]
        if match.empty:
            raise KeyError(f"Player {player_id} not found in catalog")
        return self._to_player(match.iloc[0])

    def players(self, position: Optional[str] = None) -> List[Player]:
        df = self.df
        if position is not None:
            df = df[df["position"] == position.upper()]
        return [self._to_player(row) for _, row in df.iterrows()]

    @staticmethod
    def _to_player(row: pd.Series) -> Player:
        return Player(
            player_id=row["player_id"],
            player_name=row["player_name"],
            position=row["position"],
            team_id=row["team_id"],
            team_name=row["team_name"],
        )

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------
    def available_players(
        self,
        draft: Draft,
        contestant: Optional[Contestant] = None,
        position: Optional[str] = None,
    ) -> pd.DataFrame:
        """Players that can still be picked.

        Always excludes players already drafted. With a contestant, also
        excludes players from NFL teams already on that roster and
        positions with no open slot left on it.
        """
        df = self.df
        mask = ~df["player_id"].isin(list(draft.drafted_player_ids()))

        if contestant is not None:
            mask &= ~df["team_id"].isin(list(contestant.rostered_team_ids()))
            open_slots = set(contestant.open_slots())
            open_positions = [
                pos
                for pos, slots in SLOT_PRIORITY.items()
                if open_slots.intersection(slots)
            ]
            mask &= df["position"].isin(open_positions)

        if position is not None:
            mask &= df["position"] == position.upper()

        return df[mask].reset_index(drop=True)
