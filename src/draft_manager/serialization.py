"""Conversion between draft models and the backend's camelCase JSON documents."""

from typing import Any, Dict, Optional

from src.draft_manager.config import FORWARD, ROSTER_SLOTS
from src.draft_manager.draft_state import (
    Contestant,
    Draft,
    DraftResult,
    League,
    RosterPlayer,
    empty_roster,
)


def _doc_id(data: Dict) -> str:
    """Backend documents carry their id as ``_id`` or ``id``."""
    return str(data.get("_id") or data.get("id") or "")


def ref_id(value: Any) -> str:
    """Resolve a reference that may be a bare id or a populated document."""
    if isinstance(value, dict):
        return _doc_id(value)
    return str(value) if value is not None else ""


def _points(data: Dict, key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0
    try:
        return float(value) if isinstance(value, str) else value
    except ValueError:
        return 0


# ── League ───────────────────────────────────────────────────────────


def league_to_dict(league: League) -> Dict:
    return {
        "_id": league.league_id,
        "leagueName": league.name,
        "size": league.size,
        "full": league.full,
        "drafted": league.drafted,
    }


def league_from_dict(data: Dict) -> League:
    return League(
        league_id=_doc_id(data),
        name=data.get("leagueName") or data.get("name") or "",
        size=int(data["size"]),
        full=data.get("full") is True,
        drafted=data.get("drafted") is True,
    )


# ── Contestant ───────────────────────────────────────────────────────


def roster_player_to_dict(player: RosterPlayer) -> Dict:
    return {
        "playerId": player.player_id,
        "playerName": player.player_name,
        "teamId": player.team_id,
        "teamName": player.team_name,
        "position": player.position,
        "wcPts": player.wc_pts,
        "dvPts": player.dv_pts,
        "ccPts": player.cc_pts,
        "sbPts": player.sb_pts,
    }


def roster_player_from_dict(data: Optional[Dict]) -> Optional[RosterPlayer]:
    if not data:
        return None
    return RosterPlayer(
        player_id=str(data.get("playerId") or ""),
        player_name=data.get("playerName") or "",
        team_id=str(data.get("teamId") or ""),
        team_name=data.get("teamName") or "",
        position=(data.get("position") or "").upper(),
        wc_pts=_points(data, "wcPts"),
        dv_pts=_points(data, "dvPts"),
        cc_pts=_points(data, "ccPts"),
        sb_pts=_points(data, "sbPts"),
    )


def roster_to_dict(roster: Dict[str, Optional[RosterPlayer]]) -> Dict:
    return {
        slot: roster_player_to_dict(roster[slot]) if roster.get(slot) else None
        for slot in ROSTER_SLOTS
    }


def roster_from_dict(data: Optional[Dict]) -> Dict[str, Optional[RosterPlayer]]:
    roster = empty_roster()
    for slot in ROSTER_SLOTS:
        roster[slot] = roster_player_from_dict((data or {}).get(slot))
    return roster


def contestant_to_dict(contestant: Contestant) -> Dict:
    return {
        "_id": contestant.contestant_id,
        "leagueId": contestant.league_id,
        "userId": contestant.user_id,
        "teamName": contestant.team_name,
        "roster": roster_to_dict(contestant.roster),
        "wcPts": contestant.wc_pts,
        "dvPts": contestant.dv_pts,
        "ccPts": contestant.cc_pts,
        "sbPts": contestant.sb_pts,
    }


def contestant_from_dict(data: Dict) -> Contestant:
    return Contestant(
        contestant_id=_doc_id(data),
        league_id=ref_id(data.get("leagueId")),
        user_id=str(data.get("userId") or ""),
        team_name=data.get("teamName") or "",
        roster=roster_from_dict(data.get("roster")),
        wc_pts=_points(data, "wcPts"),
        dv_pts=_points(data, "dvPts"),
        cc_pts=_points(data, "ccPts"),
        sb_pts=_points(data, "sbPts"),
    )


# ── Draft ────────────────────────────────────────────────────────────


def result_to_dict(result: DraftResult) -> Dict:
    return {
        "pickNumber": result.pick_number,
        "round": result.round,
        "pickingTeam": result.picking_team,
        "contestantId": result.contestant_id,
        "playerId": result.player_id,
        "playerName": result.player_name,
        "position": result.position,
        "teamId": result.team_id,
        "teamName": result.team_name,
        "slot": result.slot,
    }


def result_from_dict(data: Dict, index: int = 0, offset: int = 0) -> DraftResult:
    """``index`` is the result's position, used when ``pickNumber`` is absent.

    ``offset`` is added to a stored ``pickNumber``; 1 converts a 0-based one.
    """
    pick_number = data.get("pickNumber")
    return DraftResult(
        pick_number=int(pick_number) + offset if pick_number is not None else index + 1,
        round=int(data.get("round") or 0),
        picking_team=data.get("pickingTeam") or "",
        contestant_id=str(data.get("contestantId") or ""),
        player_id=str(data.get("playerId") or ""),
        player_name=data.get("playerName") or "",
        position=(data.get("position") or "").upper(),
        team_id=str(data.get("teamId") or ""),
        team_name=data.get("teamName") or "",
        slot=data.get("slot"),
    )


def draft_to_dict(draft: Draft) -> Dict:
    return {
        "_id": draft.draft_id,
        "leagueId": draft.league_id,
        "order": list(draft.order),
        "size": draft.size,
        "rounds": draft.rounds,
        "direction": draft.direction,
        "currentRound": draft.current_round,
        "currentPickInRound": draft.current_pick_in_round,
        "overallPick": draft.overall_pick,
        "results": [result_to_dict(r) for r in draft.results],
        "completed": draft.completed,
    }


def draft_from_dict(data: Dict) -> Draft:
    """Rebuild a Draft, applying the defaults the backend leaves implicit.

    Results are numbered from 1. Documents whose first result has
    ``pickNumber`` 0 were numbered from 0 and are shifted up by one.
    """
    order = [ref_id(cid) for cid in data.get("order") or []]
    raw_results = data.get("results") or []
    offset = 1 if raw_results and raw_results[0].get("pickNumber") == 0 else 0
    size = data.get("size") or len(order) or 1
    rounds = data.get("rounds") or len(ROSTER_SLOTS)
    return Draft(
        draft_id=_doc_id(data),
        league_id=ref_id(data.get("leagueId")),
        order=order,
        size=int(size),
        rounds=int(rounds),
        direction=(data.get("direction") or FORWARD).strip().lower(),
        current_round=int(data.get("currentRound") or 1),
        current_pick_in_round=int(data.get("currentPickInRound") or 1),
        overall_pick=int(data.get("overallPick") or 0),
        results=[result_from_dict(r, i, offset) for i, r in enumerate(raw_results)],
        completed=data.get("completed") is True,
    )
