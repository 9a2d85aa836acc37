# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskpulse.core.config import Settings
from taskpulse.db.session import make_engine
from taskpulse.main import create_app


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file, no sample data."""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'taskpulse.db'}",
        ENVIRONMENT="test",
        SEED_ON_STARTUP=False,
        DB_CONNECT_RETRIES=1,
        DB_CONNECT_BACKOFF_SECONDS=0,
    )


@pytest.fixture()
def client(settings: Settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture()
def seeded_client(settings: Settings):
    settings.SEED_ON_STARTUP = True
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture()
def broken_engine(tmp_path: Path):
    """An engine whose database file can never be opened."""
    engine = make_engine(Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'missing' / 'x.db'}"))
    yield engine
    engine.dispose()


@pytest.fixture()
def make_task(client: TestClient):
    def _make(**fields) -> dict:
        fields.setdefault("title", "A task")
        r = client.post("/api/tasks", json=fields)
        assert r.status_code == 201, r.text
        return r.json()

    return _make
