"""Packet-switched core: subscriber and throughput series."""

from __future__ import annotations

from typing import Any, Optional

from netops.remote.client import RemoteClient
from netops.rpc.models import PsCoreDailyPoint, PsCoreLatestKpis
from netops.utils import num_or_zero, to_number

SUBSCRIBERS_TABLE = "PS_Core_Subscribers"
TRAFFIC_TABLE = "PS_Core_Traffic"
PAGE_SIZE = 2000


def daily_point(row: dict[str, Any]) -> PsCoreDailyPoint:
    """3G and 4G totals are base plus cloud core."""
    return PsCoreDailyPoint(
        d=str(row["ReportDate"]),
        attach_total=to_number(row.get("Total_Attach_Users")),
        active_total=to_number(row.get("Total_Active_Users")),
        attach_2g=to_number(row.get("2G_Attach")),
        attach_3g_total=num_or_zero(row.get("3G_Attach")) + num_or_zero(row.get("3G_Cloud_Attach")),
        attach_4g_total=num_or_zero(row.get("4G_Attach")) + num_or_zero(row.get("4G_Cloud_Attach")),
        active_2g=to_number(row.get("2G_Active")),
        active_3g_total=num_or_zero(row.get("3G_Active")) + num_or_zero(row.get("3G_Active_Cloud")),
        active_4g_total=num_or_zero(row.get("4G_Active")) + num_or_zero(row.get("4G_Active_Cloud")),
    )


async def fetch_subscriber_series(remote: RemoteClient) -> list[PsCoreDailyPoint]:
    rows = await remote.select_all(SUBSCRIBERS_TABLE, order="ReportDate", page_size=PAGE_SIZE)
    return [daily_point(r) for r in rows if r.get("ReportDate")]


def latest_kpis(rows: list[dict[str, Any]]) -> Optional[PsCoreLatestKpis]:
    """KPIs from rows ordered newest first.

    Day-over-day compares with the second row, week-over-week with the
    eighth; either is ``None`` when that row is missing.
    """
    if not rows:
        return None
    latest = rows[0]
    prev = rows[1] if len(rows) > 1 else None
    week_ago = rows[7] if len(rows) > 7 else None

    total_attach = num_or_zero(latest.get("Total_Attach_Users"))
    total_active = num_or_zero(latest.get("Total_Active_Users"))
    return PsCoreLatestKpis(
        date=str(latest.get("ReportDate") or ""),
        total_attach=total_attach,
        total_active=total_active,
        attach_4g_total=num_or_zero(latest.get("4G_Attach")) + num_or_zero(latest.get("4G_Cloud_Attach")),
        active_4g_total=num_or_zero(latest.get("4G_Active")) + num_or_zero(latest.get("4G_Active_Cloud")),
        dod_attach=total_attach - num_or_zero(prev.get("Total_Attach_Users")) if prev else None,
        dod_active=total_active - num_or_zero(prev.get("Total_Active_Users")) if prev else None,
        wow_attach=total_attach - num_or_zero(week_ago.get("Total_Attach_Users")) if week_ago else None,
        wow_active=total_active - num_or_zero(week_ago.get("Total_Active_Users")) if week_ago else None,
    )


async def fetch_latest_kpis(remote: RemoteClient) -> Optional[PsCoreLatestKpis]:
    rows = await remote.select(SUBSCRIBERS_TABLE, "*", order="ReportDate", descending=True, limit=8)
    return latest_kpis(rows)


async def fetch_throughput_series(remote: RemoteClient) -> list[dict[str, Any]]:
    """Every gateway throughput/volume column, keyed by day as ``d``."""
    rows = await remote.select_all(TRAFFIC_TABLE, order="ReportDate", page_size=PAGE_SIZE)
    return [{"d": r["ReportDate"], **r} for r in rows if r.get("ReportDate")]
