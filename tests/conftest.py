"""Shared test fixtures for the NetOps test suite."""

import copy
import os
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

# Ensure test environment variables are set before any config import
os.environ.setdefault("NETOPS_ENV", "development")
os.environ.setdefault("AUTH_COOKIE_NAME", "nr_session")
os.environ.setdefault("LOG_LEVEL", "WARNING")


def _matches(row: dict, eq: dict | None) -> bool:
    return all(row.get(col) == value for col, value in (eq or {}).items())


class FakeRemote:
    """In-memory stand-in for :class:`netops.remote.client.RemoteClient`.

    Procedures answer from scripted outcomes (``script``); table reads and
    writes work against ``tables`` unless the table name is scripted too.
    Every call is recorded in ``calls`` as ``(method, name, args)``.
    """

    def __init__(self):
        self.calls: list[tuple[str, str, dict]] = []
        self.responses: dict[str, list[Any]] = {}
        self.tables: dict[str, list[dict]] = {}

    def script(self, name: str, *outcomes: Any) -> None:
        """Queue outcomes for ``name``; the last one repeats. Exceptions are raised."""
        self.responses[name] = list(outcomes)

    def calls_to(self, name: str) -> list[dict]:
        return [args for _, called, args in self.calls if called == name]

    def _next(self, name: str, default: Any) -> Any:
        queue = self.responses.get(name)
        if not queue:
            return default
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return copy.deepcopy(outcome)

    async def call(self, fn: str, args: dict | None = None) -> list[dict]:
        self.calls.append(("call", fn, dict(args or {})))
        data = self._next(fn, [])
        if data is None:
            return []
        if isinstance(data, dict):
            return [data]
        return data

    async def call_scalar(self, fn: str, args: dict | None = None) -> Any:
        self.calls.append(("call_scalar", fn, dict(args or {})))
        return self._next(fn, None)

    async def select(self, table: str, columns: str = "*", **filters: Any) -> list[dict]:
        self.calls.append(("select", table, {"columns": columns, **filters}))
        if table in self.responses:
            return self._next(table, [])
        rows = [dict(r) for r in self.tables.get(table, []) if _matches(r, filters.get("eq"))]
        if filters.get("order"):
            rows.sort(key=lambda r: str(r.get(filters["order"]) or ""), reverse=bool(filters.get("descending")))
        offset = filters.get("offset") or 0
        limit = filters.get("limit")
        return rows[offset:offset + limit] if limit is not None else rows[offset:]

    async def select_all(self, table: str, *, order: str, columns: str = "*", page_size: int = 2000) -> list[dict]:
        return await self.select(table, columns, order=order)

    async def maybe_one(self, table: str, columns: str = "*", *, eq: dict) -> dict | None:
        rows = await self.select(table, columns, eq=eq, limit=1)
        return rows[0] if rows else None

    async def insert(self, table: str, values: dict) -> list[dict]:
        self.calls.append(("insert", table, dict(values)))
        self._next(f"insert:{table}", None)
        self.tables.setdefault(table, []).append(dict(values))
        return [dict(values)]

    async def update(self, table: str, values: dict, *, eq: dict) -> list[dict]:
        self.calls.append(("update", table, {"values": dict(values), "eq": dict(eq)}))
        self._next(f"update:{table}", None)
        updated = []
        for row in self.tables.get(table, []):
            if _matches(row, eq):
                row.update(values)
                updated.append(dict(row))
        return updated


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def config():
    from netops.config import Config

    return Config(
        SUPABASE_URL="https://backend.test",
        SUPABASE_API_KEY="test-key",
        environment="development",
        auth_cookie_name="nr_session",
        portal_admins="Admin, ops.lead",
        request_timeout=5.0,
    )


@pytest.fixture
def app(remote, config):
    from netops.api.main import create_app

    return create_app(remote=remote, config=config)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)


def seed_user(remote: FakeRemote, username: str, password: str, *, user_id: int = 1, active: bool = True) -> dict:
    """Add a portal user with a bcrypt hash (low cost for speed)."""
    from netops.auth.passwords import hash_password

    row = {
        "id": user_id,
        "username": username,
        "password_hash": hash_password(password, rounds=4),
        "is_active": active,
    }
    remote.tables.setdefault("portal_users", []).append(row)
    return row


def seed_session(
    remote: FakeRemote,
    token: str,
    user_id: int = 1,
    *,
    expires_in: timedelta = timedelta(days=1),
    revoked_at: str | None = None,
) -> dict:
    row = {
        "session_token": token,
        "user_id": user_id,
        "expires_at": (datetime.now(timezone.utc) + expires_in).isoformat(),
        "revoked_at": revoked_at,
    }
    remote.tables.setdefault("portal_sessions", []).append(row)
    return row


@pytest.fixture
def authed_client(client, remote):
    """Test client carrying a recognized session cookie."""
    seed_user(remote, "operator", "s3cret")
    seed_session(remote, "a" * 64)
    client.cookies.set("nr_session", "a" * 64)
    return client
