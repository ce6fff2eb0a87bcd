"""Shared test fixtures for the profile editor test suite."""

import copy
import pytest
from typing import Any
from uuid import UUID, uuid4
from storage.errors import UserNotFoundError
from storage.pictures import PictureStore


# ── Database Pool Mock ──


class FakeRecord(dict):
    """Mimics asyncpg.Record: supports both dict-style and attribute access."""
    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(key)


class FakeConnection:
    """Mock asyncpg connection with configurable return values."""

    def __init__(self):
        self.execute_results: list[str] = ["UPDATE 1"]
        self.fetch_results: list[list[dict]] = [[]]
        self.fetchrow_result: dict | None = None
        self.fetchval_result: Any = 1
        self._execute_calls: list[tuple] = []
        self._fetch_calls: list[tuple] = []
        self._fetchrow_calls: list[tuple] = []

    async def execute(self, query, *args):
        self._execute_calls.append((query, args))
        return self.execute_results[0] if self.execute_results else "UPDATE 0"

    async def fetch(self, query, *args):
        self._fetch_calls.append((query, args))
        result = self.fetch_results.pop(0) if self.fetch_results else []
        return [FakeRecord(r) for r in result]

    async def fetchrow(self, query, *args):
        self._fetchrow_calls.append((query, args))
        return FakeRecord(self.fetchrow_result) if self.fetchrow_result else None

    async def fetchval(self, query, *args):
        return self.fetchval_result

    def transaction(self):
        return FakeTransaction()


class FakeTransaction:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakePool:
    """Mock asyncpg.Pool that yields a FakeConnection."""

    def __init__(self):
        self.conn = FakeConnection()

    def acquire(self):
        return FakePoolContext(self.conn)


class FakePoolContext:
    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, *args):
        pass


@pytest.fixture
def fake_pool():
    """Provide a mock database pool."""
    return FakePool()


@pytest.fixture
def fake_conn(fake_pool):
    """Direct access to the underlying FakeConnection."""
    return fake_pool.conn


# ── In-memory user store ──


class FakeUserRepository:
    """Dict-backed stand-in for UserRepository with the same contract."""

    def __init__(self):
        self.users: dict[UUID, dict[str, Any]] = {}
        self.fail_with: Exception | None = None

    def add_user(self, **fields) -> UUID:
        user_id = uuid4()
        self.users[user_id] = {
            "email": "jane@example.com",
            "first_name": "Jane",
            "last_name": "Doe",
            "profile_picture": None,
            "platforms": [],
            **fields,
        }
        return user_id

    def _get(self, user_id: UUID) -> dict[str, Any]:
        if self.fail_with is not None:
            raise self.fail_with
        if user_id not in self.users:
            raise UserNotFoundError(user_id)
        return self.users[user_id]

    async def get_profile(self, user_id):
        user = self._get(user_id)
        return {k: user[k] for k in ("email", "first_name", "last_name", "profile_picture")}

    async def update_profile(self, user_id, changes):
        self._get(user_id).update(changes)

    async def get_platforms(self, user_id):
        return copy.deepcopy(self._get(user_id)["platforms"])

    async def replace_platforms(self, user_id, platforms):
        self._get(user_id)["platforms"] = copy.deepcopy(platforms)

    async def get_profile_picture(self, user_id):
        return self._get(user_id)["profile_picture"]

    async def set_profile_picture(self, user_id, reference):
        user = self._get(user_id)
        previous = user["profile_picture"]
        user["profile_picture"] = reference
        return previous


@pytest.fixture
def user_repo():
    return FakeUserRepository()


@pytest.fixture
def picture_store(tmp_path):
    return PictureStore(tmp_path / "uploads")


@pytest.fixture
def app(monkeypatch, fake_pool, user_repo, picture_store):
    """Quart app whose routes talk to the in-memory repository."""
    from web.app import create_app

    async def fake_get_pool():
        return fake_pool

    monkeypatch.setattr("web.routes.users.get_pool", fake_get_pool)
    monkeypatch.setattr("web.routes.users.UserRepository", lambda pool: user_repo)
    return create_app(picture_store=picture_store)


@pytest.fixture
def client(app):
    return app.test_client()
