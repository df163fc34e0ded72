"""Client for the league/contestant/draft/player REST backend.

The backend stores documents; this client applies the draft rules locally
and writes the results back. A pick needs two writes (contestant roster,
then draft), so ``commit_pick`` restores the old roster when the second
write fails.
"""

import logging
import random
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import requests

from src.draft_manager.config import API_BASE, API_TIMEOUT, DEFAULT_ROUNDS
from src.draft_manager.draft_controller import DraftController, PickOutcome
from src.draft_manager.draft_initializer import DraftInitializer
from src.draft_manager.draft_state import Contestant, Draft, League, Player
from src.draft_manager.league_manager import LeagueManager
from src.draft_manager.serialization import (
    contestant_from_dict,
    contestant_to_dict,
    draft_from_dict,
    draft_to_dict,
    league_from_dict,
    ref_id,
    result_to_dict,
    roster_to_dict,
)

logger = logging.getLogger(__name__)

TokenSource = Union[str, Callable[[], str], None]


class ApiError(Exception):
    """Raised when a backend request fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class PickCommitError(ApiError):
    """Raised when a pick's draft update failed after its roster update."""

    def __init__(self, message: str, rolled_back: bool, **kwargs):
        super().__init__(message, **kwargs)
        self.rolled_back = rolled_back


class DraftApiClient:
    """Thin wrapper over ``requests.Session`` for the draft backend."""

    def __init__(
        self,
        base_url: str = API_BASE,
        token: TokenSource = None,
        session: Optional[requests.Session] = None,
        timeout: float = API_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout
        self.controller = DraftController()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        token = self.token() if callable(self.token) else self.token
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
        body: Optional[Dict] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                params=params,
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(f"{method} {path} failed: {e}", url=url) from e

        if not response.ok:
            logger.warning("%s %s returned %d", method, url, response.status_code)
            raise ApiError(
                f"{method} {path} failed: {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"{method} {path} returned invalid JSON", url=url) from e

    # ------------------------------------------------------------------
    # Leagues
    # ------------------------------------------------------------------

    def list_leagues(self, open_only: bool = False) -> List[League]:
        data = self._request("GET", "/leagues")
        leagues = [league_from_dict(d) for d in data or []]
        if open_only:
            leagues = LeagueManager.open_leagues(leagues)
        return leagues

    def get_league(self, league_id: str) -> League:
        return league_from_dict(self._request("GET", f"/leagues/{league_id}"))

    def create_league(self, name: str, size: int) -> League:
        """Validate and create a league; the backend assigns its id."""
        league = LeagueManager().create_league(name, size)
        body = {"leagueName": league.name, "size": league.size}
        created = self._request("POST", "/leagues", body=body) or {}
        if not ref_id(created):
            raise ApiError("League created but no ID returned", url="/leagues")
        return league_from_dict({**body, **created})

    def update_league(self, league_id: str, fields: Dict) -> Any:
        return self._request("PUT", f"/leagues/{league_id}", body=fields)

    # ------------------------------------------------------------------
    # Contestants
    # ------------------------------------------------------------------

    def list_contestants(self, league_id: Optional[str] = None) -> List[Contestant]:
        data = self._request("GET", "/contestants")
        contestants = [contestant_from_dict(d) for d in data or []]
        if league_id is not None:
            contestants = [c for c in contestants if c.league_id == league_id]
        return contestants

    def get_contestant(self, contestant_id: str) -> Contestant:
        return contestant_from_dict(
            self._request("GET", f"/contestants/{contestant_id}")
        )

    def create_contestant(self, contestant: Contestant) -> Contestant:
        body = contestant_to_dict(contestant)
        body.pop("_id")
        created = self._request("POST", "/contestants", body=body) or {}
        return contestant_from_dict({**body, **created})

    def update_contestant(self, contestant_id: str, fields: Dict) -> Any:
        return self._request("PUT", f"/contestants/{contestant_id}", body=fields)

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    def get_draft_for_league(self, league_id: str) -> Draft:
        """Find a league's draft, falling back to scanning every draft."""
        data = None
        try:
            data = self._request("GET", "/drafts", params={"leagueId": league_id})
        except ApiError as e:
            logger.info("Draft query by league failed (%s), scanning all drafts", e)

        candidates = data if isinstance(data, list) else [data] if data else []
        data = next(
            (d for d in candidates if ref_id(d.get("leagueId")) in ("", league_id)),
            None,
        )

        if not data:
            all_drafts = self._request("GET", "/drafts") or []
            data = next(
                (d for d in all_drafts if ref_id(d.get("leagueId")) == league_id),
                None,
            )

        if not data:
            raise ApiError("Draft not found for this league", status_code=404)

        return draft_from_dict(data)

    def create_draft(self, draft: Draft) -> Draft:
        body = draft_to_dict(draft)
        body.pop("_id")
        created = self._request("POST", "/drafts", body=body) or {}
        return draft_from_dict({**body, **created})

    def update_draft(self, draft_id: str, fields: Dict) -> Any:
        return self._request("PUT", f"/drafts/{draft_id}", body=fields)

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def list_player_records(self) -> List[Dict]:
        data = self._request("GET", "/players")
        return data if isinstance(data, list) else []

    def list_players(self) -> List[Player]:
        return [Player.from_dict(d) for d in self.list_player_records()]

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    def join_league(
        self,
        league_id: str,
        user_id: str,
        team_name: str,
        rounds: int = DEFAULT_ROUNDS,
        rng: Optional[random.Random] = None,
    ) -> Tuple[League, Contestant, Optional[Draft]]:
        """Add a team to a league; the last team in also starts the draft.

        A league that already has all its teams but no draft (an earlier
        join failed after creating its contestant) gets its draft started
        here before the join is refused with ``LeagueFull``.

        Returns:
            (league, contestant, draft) - draft is None until the league fills.
        """
        stored = self.get_league(league_id)
        contestants = self.list_contestants(league_id)

        if len(contestants) >= stored.size and self._find_draft(league_id) is None:
            logger.warning(
                "League %s has %d teams but no draft, starting it",
                stored.name,
                len(contestants),
            )
            self._start_draft(stored, contestants, rounds, rng)

        league, contestant = LeagueManager().join_league(
            stored, contestants, user_id, team_name
        )
        contestant = self.create_contestant(contestant)

        if not league.full:
            return league, contestant, None

        draft = self._start_draft(stored, contestants + [contestant], rounds, rng)
        return league, contestant, draft

    def ensure_draft(
        self,
        league_id: str,
        rounds: int = DEFAULT_ROUNDS,
        rng: Optional[random.Random] = None,
    ) -> Optional[Draft]:
        """Return the league's draft, starting it if every team has joined.

        Returns None while the league is still filling.
        """
        league = self.get_league(league_id)
        contestants = self.list_contestants(league_id)
        if len(contestants) < league.size:
            return None

        draft = self._find_draft(league_id)
        if draft is not None:
            return draft
        return self._start_draft(league, contestants, rounds, rng)

    def _find_draft(self, league_id: str) -> Optional[Draft]:
        try:
            return self.get_draft_for_league(league_id)
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise

    def _start_draft(
        self,
        league: League,
        contestants: List[Contestant],
        rounds: int,
        rng: Optional[random.Random],
    ) -> Draft:
        """Mark ``league`` (as stored) full if needed, then create its draft."""
        if not league.full:
            self.update_league(league.league_id, {"full": True})
            league = replace(league, full=True)

        draft = DraftInitializer(rng=rng).create_draft(
            league, contestants[: league.size], rounds=rounds
        )
        return self.create_draft(draft)

    def commit_pick(
        self,
        league_id: str,
        contestant_id: str,
        player: Player,
        caller_user_id: Optional[str] = None,
        pick_key: Optional[int] = None,
    ) -> PickOutcome:
        """Confirm a pick and write the roster and draft back.

        Args:
            pick_key: ``overall_pick`` as last seen by the caller. Retrying
                with the same key after a success does not pick twice.

        Raises:
            ValidationError: The pick was rejected; nothing was written.
            PickCommitError: The draft write failed after the roster write.
            ApiError: Any other backend failure before the first write.
        """
        draft = self.get_draft_for_league(league_id)
        contestant = self.get_contestant(contestant_id)

        outcome = self.controller.confirm_pick(
            draft,
            contestant,
            player,
            caller_user_id=caller_user_id,
            pick_key=draft.overall_pick if pick_key is None else pick_key,
        )
        if outcome.replayed:
            return outcome

        self.update_contestant(
            contestant_id, {"roster": roster_to_dict(outcome.contestant.roster)}
        )

        new_draft = outcome.draft
        try:
            self.update_draft(
                draft.draft_id,
                {
                    "results": [result_to_dict(r) for r in new_draft.results],
                    "overallPick": new_draft.overall_pick,
                    "currentPickInRound": new_draft.current_pick_in_round,
                    "currentRound": new_draft.current_round,
                    "direction": new_draft.direction,
                    "completed": new_draft.completed,
                },
            )
        except ApiError as e:
            rolled_back = self._restore_roster(contestant)
            raise PickCommitError(
                f"Failed to update draft: {e}",
                rolled_back=rolled_back,
                status_code=e.status_code,
                url=e.url,
            ) from e

        if outcome.league_drafted_now:
            try:
                self.update_league(league_id, {"drafted": True})
            except ApiError:
                logger.exception("Draft %s complete but league not marked drafted", draft.draft_id)

        return outcome

    def _restore_roster(self, contestant: Contestant) -> bool:
        """Put back the roster from before a failed pick."""
        try:
            self.update_contestant(
                contestant.contestant_id, {"roster": roster_to_dict(contestant.roster)}
            )
        except ApiError:
            logger.exception(
                "Rollback failed: roster of %s no longer matches the draft",
                contestant.team_name,
            )
            return False

        logger.warning("Rolled back roster of %s after failed pick", contestant.team_name)
        return True
