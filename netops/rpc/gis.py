"""GIS map points, availability overlays and site classifications."""

from __future__ import annotations

from typing import Optional

from netops.fetch.degrade import DEFAULT_LIMITS, fetch_with_degrading_limit
from netops.remote.client import RemoteClient, best_effort
from netops.rpc import picklists
from netops.rpc.common import FilterState
from netops.rpc.models import AvailabilityPoint, DistrictAverage, GridAverage, MapPoint, validate_rows

DEFAULT_SUBREGION = "North-1"
DEFAULT_DAYS = 30


async def fetch_ssl_points(
    remote: RemoteClient,
    filters: FilterState,
    limits: tuple[int, ...] = DEFAULT_LIMITS,
) -> list[MapPoint]:
    """Site-list map points, retrying with smaller caps on query timeouts.

    The sub-region defaults to ``North-1`` so an unfiltered map never asks
    for every site at once.
    """
    args = {
        "_region": filters.region,
        "_subregion": filters.subregion or DEFAULT_SUBREGION,
        "_district": filters.district,
        "_grid": filters.grid,
        "_sitename": filters.sitename,
    }

    async def attempt(limit: int):
        return await remote.call("fetch_ssl_points", {**args, "_limit": limit})

    rows = await fetch_with_degrading_limit(attempt, limits, label="fetch_ssl_points")
    return validate_rows(MapPoint, rows)


def _overlay_args(filters: FilterState, days: int) -> dict:
    return {
        "p_region": filters.region,
        "p_subregion": filters.subregion,
        "p_district": filters.district,
        "p_grid": filters.grid,
        "p_sitename": filters.sitename,
        "p_days": days,
    }


async def fetch_class_map(remote: RemoteClient, site_names: list[str]) -> dict[str, Optional[str]]:
    """``SiteName -> SiteClassification`` for the given sites."""
    unique = sorted({n for n in site_names if n})
    if not unique:
        return {}
    rows = await remote.select("SSL", "SiteName, SiteClassification", in_={"SiteName": unique})
    return {r["SiteName"]: r.get("SiteClassification") for r in rows if r.get("SiteName")}


async def fetch_availability_points(
    remote: RemoteClient, filters: FilterState, days: int = DEFAULT_DAYS
) -> list[MapPoint]:
    """Availability map points enriched with their site classification."""
    rows = await remote.call("gis_av_map_points", _overlay_args(filters, days))
    points = validate_rows(MapPoint, rows)
    classes = await fetch_class_map(remote, [p.sitename for p in points if p.sitename])
    for point in points:
        point.site_classification = classes.get(point.sitename) if point.sitename else None
    return points


async def fetch_site_timeseries(
    remote: RemoteClient, site_id: str, days: int = DEFAULT_DAYS
) -> list[AvailabilityPoint]:
    rows = await remote.call("gis_av_timeseries", {"p_site_id": site_id, "p_days": days})
    return validate_rows(AvailabilityPoint, rows)


async def fetch_district_averages(
    remote: RemoteClient, filters: FilterState, days: int = DEFAULT_DAYS
) -> list[DistrictAverage]:
    rows = await remote.call("gis_av_district_avg", _overlay_args(filters, days))
    return validate_rows(DistrictAverage, rows)


async def fetch_grid_averages(
    remote: RemoteClient, filters: FilterState, days: int = DEFAULT_DAYS
) -> list[GridAverage]:
    rows = await remote.call("gis_av_grid_avg", _overlay_args(filters, days))
    return validate_rows(GridAverage, rows)


async def fetch_site_classification(remote: RemoteClient, sitename: str) -> Optional[str]:
    row = await remote.maybe_one("SSL", "SiteClassification", eq={"SiteName": sitename})
    return row.get("SiteClassification") if row else None


# ═══════════════════════════════════════════════════════════════════
# BEST-EFFORT PICKLISTS (map sidebar)
# ═══════════════════════════════════════════════════════════════════

async def map_subregions(remote: RemoteClient) -> list[str]:
    return await best_effort("fetch_ssl_subregions", picklists.fetch_subregions(remote), [])


async def map_grids(remote: RemoteClient, subregion: Optional[str]) -> list[str]:
    return await best_effort("fetch_ssl_grids", picklists.fetch_grids(remote, subregion), [])


async def map_districts(
    remote: RemoteClient, subregion: Optional[str], grid: Optional[str]
) -> list[str]:
    return await best_effort(
        "fetch_ssl_districts", picklists.fetch_districts(remote, subregion, grid), []
    )


async def map_site_search(
    remote: RemoteClient,
    query: str,
    subregion: Optional[str],
    grid: Optional[str],
    district: Optional[str],
    limit: int = 15,
) -> list[str]:
    return await best_effort(
        "fetch_ssl_sitenames",
        picklists.search_sitenames(remote, query, subregion, grid, district, limit),
        [],
    )
