import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from studytrack.config import Settings
from studytrack.dao.base import (
    DirectoryRepository,
    ProgressRepository,
    SettingsRepository,
    UserRepository,
)
from studytrack.dependencies.dao import Repositories
from studytrack.main import create_app
from studytrack.services.auth import PasswordHasher, TokenProvider

SECRET = "test-secret-key"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: Optional[datetime] = None) -> None:
        self.now = now or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# ── In-memory repositories ────────────────────────────────────────────────────


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self.store: dict[str, dict] = {}

    def save(self, record: dict) -> None:
        self.store[record["id"]] = dict(record)

    def get(self, user_id: str):
        return self.store.get(user_id)

    def find_by_email(self, email: str):
        return next((u for u in self.store.values() if u["email"] == email), None)

    def find_by_username(self, username: str):
        return next((u for u in self.store.values() if u["username"] == username), None)


class InMemoryDirectoryRepository(DirectoryRepository):
    def __init__(self) -> None:
        self.store: dict[str, dict] = {}

    def save(self, record: dict) -> None:
        self.store[record["id"]] = dict(record)

    def get(self, directory_id: str):
        return self.store.get(directory_id)

    def list_by_user(self, user_id: str) -> list[dict]:
        return [d for d in self.store.values() if d["user_id"] == user_id]

    def update(self, directory_id: str, changes: dict):
        if directory_id not in self.store:
            return None
        self.store[directory_id].update(changes)
        return dict(self.store[directory_id])


class InMemorySettingsRepository(SettingsRepository):
    def __init__(self) -> None:
        self.store: dict[str, dict] = {}

    def create(self, record: dict) -> bool:
        if record["user_id"] in self.store:
            return False
        self.store[record["user_id"]] = dict(record)
        return True

    def get_by_user(self, user_id: str):
        return self.store.get(user_id)

    def update(self, user_id: str, changes: dict):
        if user_id not in self.store:
            return None
        self.store[user_id].update(changes)
        return dict(self.store[user_id])


class InMemoryProgressRepository(ProgressRepository):
    def __init__(self) -> None:
        self.store: dict[str, dict] = {}

    def create(self, record: dict) -> bool:
        if record["user_id"] in self.store:
            return False
        self.store[record["user_id"]] = dict(record)
        return True

    def get_by_user(self, user_id: str):
        return self.store.get(user_id)

    def increment(self, user_id: str, field: str, amount: int, updated_at: str):
        if user_id not in self.store:
            return None
        record = self.store[user_id]
        record[field] = record.get(field, 0) + amount
        record["updated_at"] = updated_at
        return dict(record)


# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture()
def settings() -> Settings:
    return Settings(jwt_secret_key=SECRET, jwt_expire_minutes=60, _env_file=None)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def tokens(clock) -> TokenProvider:
    return TokenProvider(SECRET, expires=timedelta(hours=1), clock=clock)


@pytest.fixture()
def repositories() -> Repositories:
    return Repositories(
        users=InMemoryUserRepository(),
        directories=InMemoryDirectoryRepository(),
        settings=InMemorySettingsRepository(),
        progress=InMemoryProgressRepository(),
    )


@pytest.fixture()
def client(settings, repositories, tokens):
    app = create_app(settings, repositories=repositories, tokens=tokens, hasher=PasswordHasher(rounds=4))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers(tokens):
    """Build an Authorization header for *user_id*."""

    def _headers(user_id: str = "user-1") -> dict:
        return {"Authorization": f"Bearer {tokens.issue(user_id)}"}

    return _headers
