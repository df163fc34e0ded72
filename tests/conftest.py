"""Shared fixtures for the draft engine test suite."""

import pytest

from src.draft_manager.state_persistence import StatePersistence


@pytest.fixture
def tmp_storage(tmp_path):
    """Provide a temporary directory for draft storage."""
    return tmp_path / "drafts"


@pytest.fixture
def persistence(tmp_storage):
    """Provide a StatePersistence instance using tmp storage."""
    return StatePersistence(storage_dir=tmp_storage)
