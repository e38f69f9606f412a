"""Shared fixtures: per-test settings, SQLite database and API client."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from mediahub.core.config import Settings
from mediahub.db.session import Database
from mediahub.main import create_app
from mediahub.services.sessions import SessionManager

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "adminpassword"


class FrozenClock:
    """Manually advanced clock for session expiry tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture()
def db_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'mediahub-test.db'}"


@pytest.fixture()
def settings(db_url: str) -> Settings:
    return Settings(
        _env_file=None,
        database_url=db_url,
        secret_key="test-secret",
        session_prune_enabled=False,
        admin_username=ADMIN_USERNAME,
        admin_email="admin@example.com",
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture()
def client(settings: Settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def session_manager(clock: FrozenClock) -> SessionManager:
    return SessionManager(ttl=timedelta(hours=24), clock=clock)


@pytest_asyncio.fixture()
async def database(db_url: str):
    db = Database(db_url)
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


def register(client: TestClient, username: str = "alice", email: str = "alice@x.com", password: str = "secret123", **extra):
    body = {"username": username, "email": email, "password": password, **extra}
    return client.post("/api/auth/register", json=body)


def login(client: TestClient, username: str, password: str, path: str = "/api/auth/login"):
    return client.post(path, json={"username": username, "password": password})
