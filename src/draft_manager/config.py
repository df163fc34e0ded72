import os
from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DRAFTS_DIR = PROJECT_ROOT / "data" / "drafts"

# Roster slots in display order (one draft round per slot)
ROSTER_SLOTS = [
    "qb1", "qb2",
    "rb1", "rb2",
    "wr1", "wr2", "wr3",
    "te1",
    "fl1", "fl2", "fl3", "fl4",
    "kicker",
    "dst",
]

FLEX_SLOTS = ["fl1", "fl2", "fl3", "fl4"]

# Position -> slots it may fill, in fill order
SLOT_PRIORITY = {
    "QB": ["qb1", "qb2"],
    "RB": ["rb1", "rb2"] + FLEX_SLOTS,
    "WR": ["wr1", "wr2", "wr3"] + FLEX_SLOTS,
    "TE": ["te1"] + FLEX_SLOTS,
    "K": ["kicker"],
    "DST": ["dst"],
}

SLOT_DISPLAY = {
    "qb1": "QB", "qb2": "QB",
    "rb1": "RB", "rb2": "RB",
    "wr1": "WR", "wr2": "WR", "wr3": "WR",
    "te1": "TE",
    "fl1": "FL", "fl2": "FL", "fl3": "FL", "fl4": "FL",
    "kicker": "K",
    "dst": "DST",
}

# Default league settings
DEFAULT_ROUNDS = len(ROSTER_SLOTS)
MIN_LEAGUE_SIZE = 1

FORWARD = "forward"
BACKWARD = "backward"

# REST backend
API_BASE = os.environ.get("DRAFT_API_BASE", "http://localhost:3000")
API_TIMEOUT = 10  # seconds
