"""Site-list picklists (sub-regions, grids, districts, site names, classes)."""

from __future__ import annotations

from typing import Optional

from netops.remote.client import RemoteClient
from netops.rpc.common import dedupe_casefold, distinct_sorted, flatten, to_nullable


async def fetch_subregions(remote: RemoteClient) -> list[str]:
    rows = await remote.call("fetch_ssl_subregions")
    return dedupe_casefold(flatten(rows, "subregion"))


async def fetch_grids(remote: RemoteClient, subregion: Optional[str] = None) -> list[str]:
    rows = await remote.call("fetch_ssl_grids", {"in_subregion": to_nullable(subregion)})
    return flatten(rows, "grid")


async def fetch_districts(
    remote: RemoteClient,
    subregion: Optional[str] = None,
    grid: Optional[str] = None,
) -> list[str]:
    rows = await remote.call(
        "fetch_ssl_districts",
        {"in_subregion": to_nullable(subregion), "in_grid": to_nullable(grid)},
    )
    return flatten(rows, "district")


async def search_sitenames(
    remote: RemoteClient,
    query: Optional[str] = None,
    subregion: Optional[str] = None,
    grid: Optional[str] = None,
    district: Optional[str] = None,
    limit: int = 20,
) -> list[str]:
    """Site-name autocomplete scoped by sub-region, grid and district."""
    rows = await remote.call(
        "fetch_ssl_sitenames",
        {
            "in_query": to_nullable(query),
            "in_subregion": to_nullable(subregion),
            "in_grid": to_nullable(grid),
            "in_district": to_nullable(district),
            "in_limit": limit,
        },
    )
    return flatten(rows, "sitename")


async def fetch_site_classes(remote: RemoteClient) -> list[str]:
    rows = await remote.call("fetch_ssl_site_classes")
    return flatten(rows, "site_class")


async def fetch_regions(remote: RemoteClient) -> list[str]:
    rows = await remote.call("fetch_ssl_regions")
    return flatten(rows, "region")


async def fetch_cell_subregions(remote: RemoteClient) -> list[str]:
    """Sub-regions known to the cell KPI tables (sorted, distinct)."""
    rows = await remote.call("fetch_subregions")
    return distinct_sorted(r.get("sub_region") for r in rows)
