"""
Shared fixtures: an in-memory store and a test client over a temporary database.
"""
import pytest
from fastapi.testclient import TestClient

from app.config import reload_settings
from app.db.slot import MemorySlot
from app.db.sqlite import dispose_engine
from app.services.ids import CounterIds
from app.services.notify import NotificationQueue
from app.services.store import PersonStore

TODAY = "10/18/2026"


@pytest.fixture
def slot():
    return MemorySlot()


@pytest.fixture
def store(slot):
    """Empty store with predictable ids ("1", "2", ...) and a fixed date."""
    s = PersonStore(slot, id_factory=CounterIds(), today=lambda: TODAY)
    s.load()
    return s


@pytest.fixture
def notifications():
    return NotificationQueue()


@pytest.fixture
def db_env(tmp_path, monkeypatch):
    """Point the app at a throwaway SQLite file."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'people.db'}")
    monkeypatch.setenv("ID_STRATEGY", "counter")
    dispose_engine()
    settings = reload_settings()
    yield settings
    dispose_engine()
    monkeypatch.undo()
    reload_settings()


@pytest.fixture
def client(db_env):
    """Test client with the lifespan running (store built and loaded)."""
    from app.main import app

    with TestClient(app) as c:
        yield c
