from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
CATALOG_FILE = DATA_DIR / "players.json"

# Valid base positions
VALID_POSITIONS = {"QB", "RB", "WR", "TE", "K", "DST"}

# Aliases that map to canonical position names
POSITION_ALIASES = {
    "PK": "K",
    "DEF": "DST",
    "D/ST": "DST",
}

# Normalized column -> accepted source columns, first match wins
COLUMN_ALIASES = {
    "player_id": ["player_id", "_id", "id", "playerId"],
    "player_name": ["player_name", "playerName", "name", "Player"],
    "position": ["position", "Position", "POS"],
    "team_id": ["team_id", "teamId", "Team_Abbr"],
    "team_name": ["team_name", "teamName", "Team"],
}

CATALOG_COLUMNS = list(COLUMN_ALIASES)
