"""Date-range chunking for time-series procedures.

Large windows are split into fixed-size inclusive sub-intervals and fetched
one chunk at a time so no single remote call has to scan the whole range.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Callable

from netops.remote.client import RemoteClient, RemoteError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_DAYS = 7


class FetchError(RuntimeError):
    """An orchestrator failed; ``str(exc)`` is the message shown to users."""

    def __init__(self, message: str, *, fn: str | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fn = fn
        self.code = code


@dataclass(frozen=True)
class DateChunk:
    """Inclusive ``[start, end]`` sub-interval."""

    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def as_iso(self) -> tuple[str, str]:
        return self.start.isoformat(), self.end.isoformat()


def parse_iso_date(value: Any) -> date | None:
    """Parse ``YYYY-MM-DD`` (a longer timestamp is cut to its date part)."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def date_chunks(
    date_from: Any, date_to: Any, days: int = DEFAULT_CHUNK_DAYS
) -> list[DateChunk]:
    """Split ``[date_from, date_to]`` into consecutive chunks of ``days`` days.

    Returns ``[]`` when either bound is missing or unparseable, or when
    ``date_from`` is after ``date_to``. The last chunk may be shorter.
    """
    if days < 1:
        raise ValueError("days must be >= 1")
    start = parse_iso_date(date_from)
    end = parse_iso_date(date_to)
    if start is None or end is None or start > end:
        return []

    chunks: list[DateChunk] = []
    cursor = start
    step = timedelta(days=days - 1)
    while cursor <= end:
        chunk_end = min(cursor + step, end)
        chunks.append(DateChunk(cursor, chunk_end))
        cursor = chunk_end + timedelta(days=1)
    return chunks


def _sort_value(row: dict[str, Any], date_key: str) -> str:
    value = row.get(date_key)
    return "" if value is None else str(value)


async def fetch_chunked(
    remote: RemoteClient,
    fn: str,
    date_from: Any,
    date_to: Any,
    build_args: Callable[[str, str], dict[str, Any]],
    *,
    days: int = DEFAULT_CHUNK_DAYS,
    date_key: str = "date",
) -> list[dict[str, Any]]:
    """Call ``fn`` once per chunk, sequentially, and merge the rows by date.

    ``build_args(chunk_from, chunk_to)`` returns the procedure arguments for
    one chunk. A missing range returns ``[]`` without calling the backend.
    The first failing chunk aborts the whole fetch with :class:`FetchError`.
    """
    chunks = date_chunks(date_from, date_to, days)
    if not chunks:
        return []

    rows: list[dict[str, Any]] = []
    for chunk in chunks:
        chunk_from, chunk_to = chunk.as_iso()
        try:
            part = await remote.call(fn, build_args(chunk_from, chunk_to))
        except RemoteError as exc:
            logger.error(
                "%s failed for chunk %s..%s: %s", fn, chunk_from, chunk_to, exc.as_log_fields()
            )
            raise FetchError(exc.describe(), fn=fn, code=exc.code) from exc
        rows.extend(part)
        logger.debug("%s chunk %s..%s returned %d rows", fn, chunk_from, chunk_to, len(part))

    rows.sort(key=lambda r: _sort_value(r, date_key))
    return rows
