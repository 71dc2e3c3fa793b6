"""Diesel generator fueling KPIs."""

from __future__ import annotations

from typing import Optional

from netops.remote.client import RemoteClient
from netops.rpc.common import flatten
from netops.rpc.models import DgBreakdownRow, DgKpiSummary, validate_rows


def _args(
    region: Optional[str], subregion: Optional[str], start_date: Optional[str], end_date: Optional[str]
) -> dict:
    return {
        "p_region": region,
        "p_subregion": subregion,
        "p_start_date": start_date,
        "p_end_date": end_date,
    }


async def fetch_regions(remote: RemoteClient) -> list[str]:
    return flatten(await remote.call("fetch_dg_regions"), "region")


async def fetch_subregions(remote: RemoteClient, region: Optional[str]) -> list[str]:
    return flatten(await remote.call("fetch_dg_subregions", {"p_region": region}), "subregion")


async def fetch_summary(
    remote: RemoteClient,
    region: Optional[str] = None,
    subregion: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> DgKpiSummary:
    rows = await remote.call(
        "fetch_dg_kpi_summary_filtered", _args(region, subregion, start_date, end_date)
    )
    return DgKpiSummary.model_validate(rows[0]) if rows else DgKpiSummary()


async def fetch_breakdown(
    remote: RemoteClient,
    region: Optional[str] = None,
    subregion: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> list[DgBreakdownRow]:
    """Per sub-region status counts; missing region names read as ``Unknown``."""
    rows = await remote.call(
        "fetch_dg_status_breakdown_filtered", _args(region, subregion, start_date, end_date)
    )
    return validate_rows(DgBreakdownRow, rows)
