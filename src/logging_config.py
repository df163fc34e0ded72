import logging
import logging.handlers
import os
from pathlib import Path
from typing import List, Optional

LOG_ENV_VAR = "DRAFT_ENGINE_LOG_LEVEL"
LOG_FILE_NAME = "draft_engine.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_DIR = Path(__file__).parent.parent / "logs"


def _build_handlers(log_file: Path, level: int) -> List[logging.Handler]:
    """Rotating file handler (everything) plus console (at ``level``)."""
    to_file = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS
    )
    to_file.setLevel(logging.DEBUG)

    to_console = logging.StreamHandler()
    to_console.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    for handler in (to_file, to_console):
        handler.setFormatter(formatter)
    return [to_file, to_console]


def setup_logging(log_level: Optional[str] = None, log_dir: Optional[Path] = None) -> None:
    """Configure root logging for the draft engine.

    Level falls back to ``DRAFT_ENGINE_LOG_LEVEL`` and then INFO. Does
    nothing if the root logger already has handlers.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = (log_level or os.environ.get(LOG_ENV_VAR) or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    target_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    root.setLevel(level)
    for handler in _build_handlers(target_dir / LOG_FILE_NAME, level):
        root.addHandler(handler)

    logging.getLogger(__name__).info("Logging initialized (level=%s)", level_name)
