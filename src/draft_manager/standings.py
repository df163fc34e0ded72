"""Standings and tabular views of rosters and draft results."""

from typing import Iterable, List

import pandas as pd

from src.draft_manager.config import ROSTER_SLOTS, SLOT_DISPLAY
from src.draft_manager.draft_state import Contestant, Draft

STANDINGS_COLUMNS = ["rank", "team_name", "wc_pts", "dv_pts", "cc_pts", "sb_pts", "total"]
ROSTER_COLUMNS = ["pos", "slot", "player_name", "team_name", "total", "wc", "dv", "cc", "sb"]
BOARD_COLUMNS = ["pick", "round", "manager", "player_name", "position", "team_name"]


def standings(contestants: Iterable[Contestant]) -> List[Contestant]:
    """Sort by total points descending, ties by team name (case-insensitive)."""
    return sorted(
        contestants,
        key=lambda c: (-c.total, c.team_name.casefold(), c.team_name),
    )


def standings_table(contestants: Iterable[Contestant]) -> pd.DataFrame:
    """Standings as a DataFrame with a 1-based ``rank`` column."""
    rows = [
        {
            "rank": i,
            "team_name": c.team_name,
            "wc_pts": c.wc_pts,
            "dv_pts": c.dv_pts,
            "cc_pts": c.cc_pts,
            "sb_pts": c.sb_pts,
            "total": c.total,
        }
        for i, c in enumerate(standings(contestants), start=1)
    ]
    return pd.DataFrame(rows, columns=STANDINGS_COLUMNS)


def roster_table(contestant: Contestant) -> pd.DataFrame:
    """One row per roster slot; empty slots show ``-`` and no points."""
    rows = []
    for slot in ROSTER_SLOTS:
        player = contestant.roster.get(slot)
        if player is None:
            rows.append(
                {
                    "pos": SLOT_DISPLAY[slot],
                    "slot": slot,
                    "player_name": "-",
                    "team_name": "-",
                    "total": None,
                    "wc": None,
                    "dv": None,
                    "cc": None,
                    "sb": None,
                }
            )
            continue
        rows.append(
            {
                "pos": SLOT_DISPLAY[slot],
                "slot": slot,
                "player_name": player.player_name or "-",
                "team_name": player.team_name or "-",
                "total": player.total,
                "wc": player.wc_pts,
                "dv": player.dv_pts,
                "cc": player.cc_pts,
                "sb": player.sb_pts,
            }
        )
    return pd.DataFrame(rows, columns=ROSTER_COLUMNS)


def draft_board(draft: Draft) -> pd.DataFrame:
    """Draft results in pick order."""
    rows = [
        {
            "pick": r.pick_number,
            "round": r.round,
            "manager": r.picking_team or "-",
            "player_name": r.player_name or "-",
            "position": r.position or "-",
            "team_name": r.team_name or "-",
        }
        for r in draft.results
    ]
    return pd.DataFrame(rows, columns=BOARD_COLUMNS)
