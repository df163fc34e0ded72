"""Tests for the logging bootstrap."""

import logging
from contextlib import contextmanager

from src.logging_config import LOG_FILE_NAME, setup_logging


@contextmanager
def _bare_root():
    """Run with no root handlers, then put pytest's handlers back."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers.clear()
    try:
        yield root
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


class TestSetupLogging:
    def test_file_and_console_handlers(self, tmp_path):
        with _bare_root() as root:
            setup_logging(log_level="debug", log_dir=tmp_path)
            level, handler_count = root.level, len(root.handlers)

        assert level == logging.DEBUG
        assert handler_count == 2
        assert (tmp_path / LOG_FILE_NAME).exists()

    def test_level_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DRAFT_ENGINE_LOG_LEVEL", "warning")
        with _bare_root() as root:
            setup_logging(log_dir=tmp_path)
            level = root.level
        assert level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, tmp_path):
        with _bare_root() as root:
            setup_logging(log_level="chatty", log_dir=tmp_path)
            level = root.level
        assert level == logging.INFO

    def test_noop_when_configured(self, tmp_path):
        existing = logging.NullHandler()
        with _bare_root() as root:
            root.addHandler(existing)
            setup_logging(log_dir=tmp_path / "logs")
            handlers = list(root.handlers)
        assert handlers == [existing]
        assert not (tmp_path / "logs").exists()
