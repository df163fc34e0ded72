"""State persistence - save and load draft sessions to/from JSON files."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from src.draft_manager.config import DRAFTS_DIR
from src.draft_manager.draft_controller import DraftController, PickOutcome
from src.draft_manager.draft_state import Contestant, Draft, League, Player
from src.draft_manager.serialization import (
    contestant_from_dict,
    contestant_to_dict,
    draft_from_dict,
    draft_to_dict,
    league_from_dict,
    league_to_dict,
)

logger = logging.getLogger(__name__)


@dataclass
class DraftSession:
    """Everything one draft touches: the league, its teams and the draft."""

    league: League
    draft: Draft
    contestants: List[Contestant] = field(default_factory=list)

    def get_contestant(self, contestant_id: str) -> Contestant:
        for contestant in self.contestants:
            if contestant.contestant_id == contestant_id:
                return contestant
        raise KeyError(f"Contestant {contestant_id} not in draft {self.draft.draft_id}")

    def replace_contestant(self, contestant: Contestant):
        self.contestants = [
            contestant if c.contestant_id == contestant.contestant_id else c
            for c in self.contestants
        ]


class StatePersistence:
    """Handles saving and loading draft sessions to/from JSON files.

    A session is written as a single document, so a pick's roster update
    and draft advance land on disk together or not at all.
    """

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = Path(storage_dir or DRAFTS_DIR)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.controller = DraftController()

    def _path_for(self, draft_id: str) -> Path:
        return self.storage_dir / f"draft_{draft_id}.json"

    def save_session(self, session: DraftSession) -> Path:
        """Save a draft session to its JSON file.

        Returns:
            Path to the saved file.
        """
        filepath = self._path_for(session.draft.draft_id)
        state_dict = self._session_to_dict(session)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.storage_dir, prefix=".draft_", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state_dict, f, indent=2)
            os.replace(tmp_name, filepath)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.info(
            "Saved draft %s (pick %d, round %d) to %s",
            session.draft.draft_id,
            session.draft.overall_pick,
            session.draft.current_round,
            filepath,
        )

        return filepath

    def load_session(self, draft_id: str) -> Optional[DraftSession]:
        """Load a draft session from its JSON file.

        Returns:
            DraftSession if found, None if missing or corrupt.
        """
        filepath = self._path_for(draft_id)

        if not filepath.exists():
            logger.warning("Draft file not found: %s", filepath)
            return None

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                state_dict = json.load(f)
            session = self._dict_to_session(state_dict)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Corrupt draft file %s: %s", filepath, e)
            return None

        logger.info("Loaded draft %s from %s", draft_id, filepath)
        return session

    def list_saved_drafts(self) -> List[Dict]:
        """List all saved drafts with metadata.

        Returns:
            List of dicts with draft_id, league_name, league_size,
            completed, current_round, overall_pick. Sorted by league name.
        """
        drafts = []

        for filepath in self.storage_dir.glob("draft_*.json"):
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)

                draft = data["draft"]
                drafts.append(
                    {
                        "draft_id": draft["_id"],
                        "league_name": data["league"].get("leagueName", ""),
                        "league_size": draft.get("size", 0),
                        "completed": draft.get("completed", False),
                        "current_round": draft.get("currentRound", 1),
                        "overall_pick": draft.get("overallPick", 0),
                    }
                )
            except (json.JSONDecodeError, OSError, KeyError) as e:
                logger.warning("Skipping corrupt draft file %s: %s", filepath, e)
                continue

        return sorted(drafts, key=lambda x: (x["league_name"], x["draft_id"]))

    def delete_session(self, draft_id: str) -> bool:
        """Delete a saved draft file.

        Returns:
            True if deleted, False if not found.
        """
        filepath = self._path_for(draft_id)

        if not filepath.exists():
            return False

        filepath.unlink()
        logger.info("Deleted draft %s", draft_id)
        return True

    def commit_pick(
        self,
        draft_id: str,
        contestant_id: str,
        player: Player,
        caller_user_id: Optional[str] = None,
        pick_key: Optional[int] = None,
    ) -> PickOutcome:
        """Confirm a pick against the stored session and save the result.

        Raises:
            FileNotFoundError: No readable session for ``draft_id``.
            ValidationError: The pick was rejected; nothing is written.
        """
        session = self.load_session(draft_id)
        if session is None:
            raise FileNotFoundError(f"No saved draft {draft_id}")

        contestant = session.get_contestant(contestant_id)
        outcome = self.controller.confirm_pick(
            session.draft,
            contestant,
            player,
            caller_user_id=caller_user_id,
            pick_key=pick_key,
        )
        if outcome.replayed:
            return outcome

        session.replace_contestant(outcome.contestant)
        session.draft = outcome.draft
        session.league = self.controller.apply_to_league(session.league, outcome)
        self.save_session(session)

        return outcome

    def _session_to_dict(self, session: DraftSession) -> Dict:
        """Convert DraftSession to JSON-serializable dict."""
        return {
            "league": league_to_dict(session.league),
            "contestants": [contestant_to_dict(c) for c in session.contestants],
            "draft": draft_to_dict(session.draft),
        }

    def _dict_to_session(self, data: Dict) -> DraftSession:
        """Reconstruct DraftSession from dict."""
        return DraftSession(
            league=league_from_dict(data["league"]),
            contestants=[contestant_from_dict(c) for c in data["contestants"]],
            draft=draft_from_dict(data["draft"]),
        )
