"""Complaint tickets: area picklists, site ranking and per-site drill-down."""

from __future__ import annotations

from typing import Optional

from netops.remote.client import RemoteClient
from netops.rpc.common import FilterState
from netops.rpc.models import (
    ComplaintNeighborRow,
    ComplaintSiteRow,
    ComplaintTimeseriesRow,
    ServiceBreakdownRow,
    validate_rows,
)


def _strings(rows: list[dict], key: str) -> list[str]:
    return [r[key] for r in rows if isinstance(r.get(key), str)]


async def fetch_regions(remote: RemoteClient) -> list[str]:
    return _strings(await remote.call("ssl_regions"), "Region")


async def fetch_subregions(remote: RemoteClient, region: Optional[str]) -> list[str]:
    rows = await remote.call("ssl_subregions", {"p_region": region})
    return _strings(rows, "SubRegion")


async def fetch_districts(
    remote: RemoteClient, region: Optional[str], subregion: Optional[str]
) -> list[str]:
    rows = await remote.call("ssl_districts", {"p_region": region, "p_subregion": subregion})
    return _strings(rows, "District")


async def fetch_grids(
    remote: RemoteClient,
    region: Optional[str],
    subregion: Optional[str],
    district: Optional[str],
) -> list[str]:
    rows = await remote.call(
        "ssl_grids", {"p_region": region, "p_subregion": subregion, "p_district": district}
    )
    return _strings(rows, "Grid")


async def fetch_sites_agg(
    remote: RemoteClient, filters: FilterState, limit: int = 1000
) -> list[ComplaintSiteRow]:
    """Sites ranked by complaint count within the selected area."""
    rows = await remote.call(
        "complaints_sites_agg",
        {
            "p_region": filters.region,
            "p_subregion": filters.subregion,
            "p_district": filters.district,
            "p_grid": filters.grid,
            "p_limit": limit,
        },
    )
    return validate_rows(ComplaintSiteRow, rows)


async def fetch_timeseries(
    remote: RemoteClient,
    site: int,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> list[ComplaintTimeseriesRow]:
    rows = await remote.call(
        "complaints_timeseries", {"p_site": site, "p_date_from": date_from, "p_date_to": date_to}
    )
    return validate_rows(ComplaintTimeseriesRow, rows)


async def fetch_service_breakdown(
    remote: RemoteClient,
    site: int,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> list[ServiceBreakdownRow]:
    rows = await remote.call(
        "complaints_services_breakdown",
        {"p_site": site, "p_date_from": date_from, "p_date_to": date_to},
    )
    return validate_rows(ServiceBreakdownRow, rows)


async def fetch_neighbors(
    remote: RemoteClient, site: int, max_km: float = 5
) -> list[ComplaintNeighborRow]:
    rows = await remote.call("complaints_neighbors_within_5km", {"p_site": site, "p_max_km": max_km})
    return validate_rows(ComplaintNeighborRow, rows)
