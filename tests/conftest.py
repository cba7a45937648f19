"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tasklist.config import Config  # noqa: E402
from tasklist.storage import MemoryKeyValueStore, TaskRepository  # noqa: E402
from tasklist.store import TaskStore  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the data directory at a temp dir and forget cached config."""
    home = tmp_path / "home"
    monkeypatch.setenv("TASKLIST_HOME", str(home))
    Config.reset()
    yield home
    Config.reset()


@pytest.fixture
def kv_store():
    return MemoryKeyValueStore()


@pytest.fixture
def repository(kv_store):
    return TaskRepository(kv_store, key="tasks")


@pytest.fixture
def store(repository):
    return TaskStore(repository)
