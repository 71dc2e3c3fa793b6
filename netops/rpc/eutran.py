"""E-UTRAN high-utilization cells over a trailing window of days."""

from __future__ import annotations

from typing import Optional

from netops.remote.client import RemoteClient
from netops.rpc.common import to_nullable
from netops.rpc.models import DistrictDaily, EutranSummary, GridDaily, ThroughputPoint, validate_rows

DEFAULT_WINDOW_DAYS = 7


def _args(subregion: Optional[str], days: int) -> dict:
    return {"in_subregion": to_nullable(subregion), "in_days": days}


async def fetch_summary(
    remote: RemoteClient, subregion: Optional[str] = None, days: int = DEFAULT_WINDOW_DAYS
) -> EutranSummary:
    rows = await remote.call("fetch_eutran_summary_window", _args(subregion, days))
    return EutranSummary.model_validate(rows[0]) if rows else EutranSummary()


async def fetch_daily(
    remote: RemoteClient, subregion: Optional[str] = None, days: int = DEFAULT_WINDOW_DAYS
) -> list[ThroughputPoint]:
    rows = await remote.call("fetch_eutran_timeseries_daily_window", _args(subregion, days))
    return validate_rows(ThroughputPoint, rows)


async def fetch_top5_grids(
    remote: RemoteClient, subregion: Optional[str] = None, days: int = DEFAULT_WINDOW_DAYS
) -> list[GridDaily]:
    rows = await remote.call("fetch_top5_grid_daily_window", _args(subregion, days))
    return validate_rows(GridDaily, rows)


async def fetch_top5_districts(
    remote: RemoteClient, subregion: Optional[str] = None, days: int = DEFAULT_WINDOW_DAYS
) -> list[DistrictDaily]:
    rows = await remote.call("fetch_top5_district_daily_window", _args(subregion, days))
    return validate_rows(DistrictDaily, rows)
