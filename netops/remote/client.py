"""Remote procedure client.

Wraps the Supabase async client behind a small, explicitly constructed
object. Every orchestrator receives a ``RemoteClient`` instance instead of
reaching for module-level state, so tests can hand in a fake.

Error contract
--------------
Every failure surfaces as :class:`RemoteError` carrying whatever the backend
provided (``message``, ``details``, ``hint``, ``code``). PostgreSQL statement
timeouts (``57014``) and client-side deadline expiry are *timeout-class*
errors; callers use :attr:`RemoteError.is_timeout` to decide on the
degrading-limit policy. ``None``/absent data is an empty result, not an error.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from netops.config import Config

logger = logging.getLogger(__name__)

QUERY_TIMEOUT_CODE = "57014"
CLIENT_TIMEOUT_CODE = "TIMEOUT"
NETWORK_ERROR_CODE = "NETWORK"

_DEFAULT_TIMEOUT = 30.0


class ConfigurationError(RuntimeError):
    """Raised when the backend endpoint or API key is not configured."""


class RemoteError(Exception):
    """A failed remote call, normalized from whatever the backend returned."""

    def __init__(
        self,
        message: str | None = None,
        *,
        details: str | None = None,
        hint: str | None = None,
        code: str | None = None,
        fn: str | None = None,
    ) -> None:
        self.message = message
        self.details = details
        self.hint = hint
        self.code = code
        self.fn = fn
        super().__init__(self.describe())

    @property
    def is_timeout(self) -> bool:
        return self.code in (QUERY_TIMEOUT_CODE, CLIENT_TIMEOUT_CODE)

    def describe(self) -> str:
        """Build ``[code] text`` from message, else details, else hint."""
        code = self.code or "UNKNOWN"
        text = self.message or self.details or self.hint or ""
        return f"[{code}] {text}".rstrip()

    def as_log_fields(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "details": self.details,
            "hint": self.hint,
            "code": self.code,
        }

    @classmethod
    def from_api_error(cls, exc: APIError, fn: str | None = None) -> "RemoteError":
        return cls(
            getattr(exc, "message", None) or str(exc),
            details=_as_text(getattr(exc, "details", None)),
            hint=_as_text(getattr(exc, "hint", None)),
            code=_as_text(getattr(exc, "code", None)),
            fn=fn,
        )


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


# ---------------------------------------------------------------------------
# Retry decorator
# ---------------------------------------------------------------------------

def retry(max_attempts: int = 3, backoff_seconds: tuple[float, ...] = (1.0, 2.0, 4.0),
          retryable_codes: tuple[str, ...] = (NETWORK_ERROR_CODE,)):
    """Retry decorator with backoff for transport-level failures.

    Parameters
    ----------
    max_attempts : int
        Total number of attempts (1 = no retry).
    backoff_seconds : tuple[float, ...]
        Sleep durations between attempts.
    retryable_codes : tuple
        ``RemoteError.code`` values that trigger a retry. Backend errors and
        timeouts are never retried here.
    """
    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            last_exc: RemoteError | None = None
            for attempt in range(1, max_attempts + 1):
                try:
                    return await fn(*args, **kwargs)
                except RemoteError as exc:
                    if exc.code not in retryable_codes:
                        raise
                    last_exc = exc
                    if attempt < max_attempts:
                        wait = backoff_seconds[min(attempt - 1, len(backoff_seconds) - 1)]
                        logger.warning(
                            "Retry %d/%d for %s after %s: sleeping %.1fs",
                            attempt, max_attempts, fn.__name__, exc.describe(), wait,
                        )
                        await asyncio.sleep(wait)
                    else:
                        logger.error(
                            "All %d attempts failed for %s: %s",
                            max_attempts, fn.__name__, exc.describe(),
                        )
            raise last_exc  # type: ignore[misc]
        return wrapper
    return decorator


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class RemoteClient:
    """Shared handle to the backend.

    The underlying Supabase client is created lazily on the first call and
    reused afterwards. Calls are bounded by ``timeout`` seconds; expiry
    cancels the in-flight HTTP request.
    """

    def __init__(self, url: str, api_key: str, *, timeout: float = _DEFAULT_TIMEOUT) -> None:
        if not url:
            raise ConfigurationError("Missing SUPABASE URL (set SUPABASE_URL)")
        if not api_key:
            raise ConfigurationError("Missing SUPABASE API key (set SUPABASE_API_KEY)")
        self.url = url.rstrip("/")
        self._api_key = api_key
        self.timeout = timeout
        self._client: AsyncClient | None = None
        self._lock = asyncio.Lock()

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = await acreate_client(self.url, self._api_key)
                    logger.info("Remote client initialized: %s", self.url)
        return self._client

    async def _execute(self, label: str, build: Callable[[AsyncClient], Any]) -> Any:
        """Run one PostgREST request and translate every failure."""
        client = await self._get_client()
        try:
            response = await asyncio.wait_for(build(client).execute(), timeout=self.timeout)
        except APIError as exc:
            err = RemoteError.from_api_error(exc, fn=label)
            logger.error("%s failed: %s", label, err.as_log_fields())
            raise err from exc
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.error("%s timed out after %.1fs", label, self.timeout)
            raise RemoteError(
                f"{label} timed out after {self.timeout:.0f}s",
                code=CLIENT_TIMEOUT_CODE,
                fn=label,
            ) from exc
        except httpx.TransportError as exc:
            logger.error("%s transport failure: %s", label, exc)
            raise RemoteError(str(exc), code=NETWORK_ERROR_CODE, fn=label) from exc

        data = getattr(response, "data", None)
        if isinstance(data, dict) and "Error" in data:
            message = data["Error"] if isinstance(data["Error"], str) else "RPC error payload."
            raise RemoteError(message, fn=label)
        return data

    # -- remote procedures -------------------------------------------------

    @retry()
    async def call(self, fn: str, args: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Invoke a named procedure and return its rows (``[]`` when absent)."""
        data = await self._execute(fn, lambda c: c.rpc(fn, args or {}))
        if data is None:
            return []
        if isinstance(data, dict):
            return [data]
        if isinstance(data, list):
            return data
        return []

    @retry()
    async def call_scalar(self, fn: str, args: dict[str, Any] | None = None) -> Any:
        """Invoke a procedure that returns a bare value or JSON object."""
        return await self._execute(fn, lambda c: c.rpc(fn, args or {}))

    # -- table reads ---------------------------------------------------------

    @retry()
    async def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: dict[str, Any] | None = None,
        in_: dict[str, list[Any]] | None = None,
        ilike: dict[str, str] | None = None,
        gte: dict[str, Any] | None = None,
        lte: dict[str, Any] | None = None,
        not_null: list[str] | None = None,
        order: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[dict[str, Any]]:
        """Read rows from a table with simple filters."""

        def build(client: AsyncClient):
            query = client.table(table).select(columns)
            for col, value in (eq or {}).items():
                query = query.eq(col, value)
            for col, values in (in_ or {}).items():
                query = query.in_(col, values)
            for col, pattern in (ilike or {}).items():
                query = query.ilike(col, pattern)
            for col, value in (gte or {}).items():
                query = query.gte(col, value)
            for col, value in (lte or {}).items():
                query = query.lte(col, value)
            for col in not_null or []:
                query = query.not_.is_(col, "null")
            if order:
                query = query.order(order, desc=descending)
            if offset is not None:
                end = offset + (limit or 1) - 1
                query = query.range(offset, end)
            elif limit is not None:
                query = query.limit(limit)
            return query

        data = await self._execute(f"select:{table}", build)
        return data if isinstance(data, list) else []

    async def select_all(
        self,
        table: str,
        *,
        order: str,
        columns: str = "*",
        page_size: int = 2000,
    ) -> list[dict[str, Any]]:
        """Read a whole table page by page, ordered ascending by ``order``."""
        rows: list[dict[str, Any]] = []
        start = 0
        while True:
            page = await self.select(table, columns, order=order, limit=page_size, offset=start)
            if not page:
                break
            rows.extend(page)
            if len(page) < page_size:
                break
            start += page_size
        return rows

    async def maybe_one(
        self, table: str, columns: str = "*", *, eq: dict[str, Any]
    ) -> dict[str, Any] | None:
        rows = await self.select(table, columns, eq=eq, limit=1)
        return rows[0] if rows else None

    # -- writes ----------------------------------------------------------------

    async def insert(self, table: str, values: dict[str, Any]) -> list[dict[str, Any]]:
        data = await self._execute(f"insert:{table}", lambda c: c.table(table).insert(values))
        return data if isinstance(data, list) else []

    async def update(
        self, table: str, values: dict[str, Any], *, eq: dict[str, Any]
    ) -> list[dict[str, Any]]:
        def build(client: AsyncClient):
            query = client.table(table).update(values)
            for col, value in eq.items():
                query = query.eq(col, value)
            return query

        data = await self._execute(f"update:{table}", build)
        return data if isinstance(data, list) else []


def create_remote_client(config: Config) -> RemoteClient:
    """Build a client from settings; both URL and key must be present."""
    return RemoteClient(
        config.supabase_url,
        config.supabase_api_key,
        timeout=config.remote_timeout,
    )


async def best_effort(label: str, call: Awaitable[Any], fallback: Any) -> Any:
    """Await ``call``; on ``RemoteError`` log it and return ``fallback``.

    Used only for picklists where an empty list is an acceptable degraded
    result.
    """
    try:
        return await call
    except RemoteError as exc:
        logger.error("%s error: %s", label, exc.as_log_fields())
        return fallback
