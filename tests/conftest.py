"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import widget_service...' and
'import actions...' work, and provides shared fixtures.
"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from widget_service.api.app import create_app
from widget_service.config.settings import SETTINGS, reset_config
from widget_service.db.tables import metadata
from widget_service.db.transactions import MemoryTransactions
from widget_service.widgets.factory import MemoryDaoFactory


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every schema variable from os.environ for the duration of a test."""
    for setting in SETTINGS:
        monkeypatch.delenv(setting.key, raising=False)
    reset_config()
    yield monkeypatch
    reset_config()


@pytest.fixture
def dao_factory():
    return MemoryDaoFactory()


@pytest.fixture
def transactions():
    return MemoryTransactions()


@pytest.fixture
def client(transactions, dao_factory):
    """TestClient over an app wired with in-memory persistence."""
    return TestClient(create_app(transactions, dao_factory))


@pytest.fixture
def sqlite_engine():
    """
    In-memory SQLite engine with the widget tables created.

    StaticPool keeps a single connection, so every transaction sees the same
    in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()
