"""Radio traffic: chunked daily series and latest-day totals by area."""

from __future__ import annotations

from typing import Literal, Optional

from netops.fetch.chunking import DEFAULT_CHUNK_DAYS, fetch_chunked
from netops.remote.client import RemoteClient
from netops.rpc.common import to_nullable
from netops.rpc.models import LatestAggRow, TrafficDailyRow, validate_rows

SortKey = Literal["total_gb", "voice_erl"]
SortDir = Literal["asc", "desc"]


async def fetch_traffic_daily(
    remote: RemoteClient,
    date_from: Optional[str],
    date_to: Optional[str],
    subregion: Optional[str] = None,
    *,
    chunk_days: int = DEFAULT_CHUNK_DAYS,
) -> list[TrafficDailyRow]:
    """Daily traffic for ``[date_from, date_to]`` fetched chunk by chunk.

    Without a full range nothing is fetched and ``[]`` is returned.
    """
    sub = to_nullable(subregion)
    rows = await fetch_chunked(
        remote,
        "rpc_traffic_daily",
        date_from,
        date_to,
        lambda start, end: {"in_date_from": start, "in_date_to": end, "in_subregion": sub},
        days=chunk_days,
    )
    return validate_rows(TrafficDailyRow, rows)


def _latest(rows: list[dict], key_column: str) -> list[LatestAggRow]:
    out = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        key = row.get(key_column)
        out.append(LatestAggRow.model_validate({**row, "key": "UNKNOWN" if key is None else str(key)}))
    return out


async def fetch_latest_by_grid(remote: RemoteClient, subregion: Optional[str]) -> list[LatestAggRow]:
    rows = await remote.call("rpc_traffic_latest_by_grid", {"in_subregion": to_nullable(subregion)})
    return _latest(rows, "grid")


async def fetch_latest_by_district(
    remote: RemoteClient, subregion: Optional[str]
) -> list[LatestAggRow]:
    rows = await remote.call("rpc_traffic_latest_by_district", {"in_subregion": to_nullable(subregion)})
    return _latest(rows, "district")


def sort_latest(rows: list[LatestAggRow], key: SortKey, direction: SortDir = "desc") -> list[LatestAggRow]:
    """Sort by ``key``; equal values fall back to the area name."""
    ordered = sorted(rows, key=lambda r: (getattr(r, key), r.key))
    if direction == "desc":
        ordered.reverse()
    return ordered
