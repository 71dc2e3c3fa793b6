"""Environment alarm system: OK/NOK site status."""

from __future__ import annotations

from typing import Optional

from netops.remote.client import RemoteClient
from netops.rpc.common import to_nullable
from netops.rpc.models import (
    DistrictNokRow,
    EasStatusSummary,
    GridNokRow,
    NokTimeseriesRow,
    WeeklyNokRow,
    validate_rows,
)


def _args(date_from: str, date_to: str, subregion: Optional[str]) -> dict:
    return {"in_date_from": date_from, "in_date_to": date_to, "in_subregion": to_nullable(subregion)}


async def fetch_summary(
    remote: RemoteClient, date_from: str, date_to: str, subregion: Optional[str] = None
) -> EasStatusSummary:
    rows = await remote.call("fetch_eas_summary_ok_nok", _args(date_from, date_to, subregion))
    return EasStatusSummary.model_validate(rows[0]) if rows else EasStatusSummary()


async def fetch_nok_timeseries(
    remote: RemoteClient, date_from: str, date_to: str, subregion: Optional[str] = None
) -> list[NokTimeseriesRow]:
    rows = await remote.call("fetch_eas_ts_nok", _args(date_from, date_to, subregion))
    return validate_rows(NokTimeseriesRow, rows)


async def fetch_nok_by_district(
    remote: RemoteClient, date_from: str, date_to: str, subregion: Optional[str] = None
) -> list[DistrictNokRow]:
    rows = await remote.call("fetch_eas_nok_by_district_total", _args(date_from, date_to, subregion))
    return validate_rows(DistrictNokRow, rows)


async def fetch_nok_by_grid(
    remote: RemoteClient, date_from: str, date_to: str, subregion: Optional[str] = None
) -> list[GridNokRow]:
    rows = await remote.call("fetch_eas_nok_by_grid_total", _args(date_from, date_to, subregion))
    return validate_rows(GridNokRow, rows)


async def fetch_weekly_nok(
    remote: RemoteClient, date_from: str, date_to: str, subregion: Optional[str] = None
) -> list[WeeklyNokRow]:
    rows = await remote.call("fetch_eas_weekly_nok", _args(date_from, date_to, subregion))
    return validate_rows(WeeklyNokRow, rows)
