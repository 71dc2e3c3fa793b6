"""Server-side sessions backed by the ``portal_sessions`` table.

A cookie token is recognized only when its session row exists, is neither
revoked nor expired, and points at an active ``portal_users`` row. Lookups
fail closed: any backend error means "not recognized".
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from netops.auth.passwords import PasswordRotationRequired, verify_password
from netops.remote.client import RemoteClient, RemoteError

logger = logging.getLogger(__name__)

USERS_TABLE = "portal_users"
SESSIONS_TABLE = "portal_sessions"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AuthedUser:
    id: int
    username: str
    is_active: bool = True


class LoginError(Exception):
    """A rejected login, carrying the HTTP status and the public message."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp from the backend; naive values are UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def new_session_token() -> str:
    return secrets.token_hex(32)


class SessionStore:
    """Create, resolve and revoke portal sessions."""

    def __init__(
        self,
        remote: RemoteClient,
        ttl_hours: int = 24 * 7,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.remote = remote
        self.ttl = timedelta(hours=ttl_hours)
        self._now = now

    async def authenticate(self, username: str, password: str) -> AuthedUser:
        """Check credentials and return the user.

        Raises:
            LoginError: 400 for blank fields, 401 for unknown users, wrong or
                unrotated passwords, 403 for a disabled user.
        """
        username = (username or "").strip()
        if not username or not password:
            raise LoginError(400, "Missing credentials")

        try:
            row = await self.remote.maybe_one(
                USERS_TABLE, "id, username, password_hash, is_active", eq={"username": username}
            )
        except RemoteError as exc:
            logger.error("User lookup failed: %s", exc.as_log_fields())
            raise LoginError(401, "Invalid credentials") from exc
        if not row:
            raise LoginError(401, "Invalid credentials")

        try:
            ok = verify_password(password, row.get("password_hash"), username)
        except PasswordRotationRequired:
            logger.warning("Login refused for %s: stored password needs rotation", username)
            raise LoginError(401, "Invalid credentials")
        if not ok:
            raise LoginError(401, "Invalid credentials")

        if not row.get("is_active"):
            raise LoginError(403, "User disabled")

        return AuthedUser(id=row["id"], username=row["username"], is_active=True)

    async def create_session(self, user: AuthedUser) -> str:
        """Insert a new session row for ``user`` and return its token."""
        token = new_session_token()
        expires_at = self._now() + self.ttl
        await self.remote.insert(
            SESSIONS_TABLE,
            {"session_token": token, "user_id": user.id, "expires_at": expires_at.isoformat()},
        )
        logger.info("Session created for user_id=%s", user.id)
        return token

    async def resolve(self, token: Optional[str]) -> Optional[AuthedUser]:
        """Return the user behind ``token`` or ``None`` if it is not recognized."""
        if not token:
            return None
        try:
            session = await self.remote.maybe_one(
                SESSIONS_TABLE, "user_id, expires_at, revoked_at", eq={"session_token": token}
            )
            if not session or session.get("revoked_at"):
                return None
            expires_at = parse_timestamp(session.get("expires_at"))
            if expires_at is None or expires_at <= self._now():
                return None
            user = await self.remote.maybe_one(
                USERS_TABLE, "id, username, is_active", eq={"id": session.get("user_id")}
            )
        except RemoteError as exc:
            logger.error("Session lookup failed: %s", exc.as_log_fields())
            return None
        if not user or not user.get("is_active"):
            return None
        return AuthedUser(id=user["id"], username=user["username"], is_active=True)

    async def revoke(self, token: Optional[str]) -> None:
        """Mark a session revoked. Errors are logged, never raised."""
        if not token:
            return
        try:
            await self.remote.update(
                SESSIONS_TABLE,
                {"revoked_at": self._now().isoformat()},
                eq={"session_token": token},
            )
        except RemoteError as exc:
            logger.error("Session revoke failed: %s", exc.as_log_fields())
