"""Remote monitoring (RMS) endpoints."""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from netops.api.deps import bounded, get_remote
from netops.remote.client import RemoteClient
from netops.rpc import rms
from netops.rpc.common import to_nullable
from netops.rpc.rms import RmsFilters

router = APIRouter(prefix="/api/rms", tags=["rms"])


def rms_filters(
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    subregion: Optional[str] = None,
    grid: Optional[str] = None,
    district: Optional[str] = None,
    site_class: Optional[str] = None,
    vendor: Optional[str] = None,
    status: Optional[str] = None,
) -> RmsFilters:
    """Dashboard filters; a missing date range means the last 30 days."""
    narrowing = {
        "subregion": to_nullable(subregion),
        "grid": to_nullable(grid),
        "district": to_nullable(district),
        "site_class": to_nullable(site_class),
        "vendor": to_nullable(vendor),
        "status": to_nullable(status),
    }
    if date_from and date_to:
        return RmsFilters(date_from=date_from, date_to=date_to, **narrowing)
    return RmsFilters.default(**narrowing)


@router.get("/bounds")
async def bounds(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, rms.fetch_bounds(remote))


@router.get("/dashboard")
async def dashboard(
    request: Request,
    filters: RmsFilters = Depends(rms_filters),
    remote: RemoteClient = Depends(get_remote),
):
    """Overview card and every breakdown for one filter set."""

    async def load():
        overview, vendor, status, reason, top_sub, top_dist, by_grid = await asyncio.gather(
            rms.fetch_overview(remote, filters),
            rms.fetch_by_vendor(remote, filters),
            rms.fetch_by_status(remote, filters),
            rms.fetch_by_reason(remote, filters),
            rms.fetch_top_subregions(remote, filters),
            rms.fetch_top_districts(remote, filters),
            rms.fetch_by_grid(remote, filters),
        )
        return {
            "filters": {"date_from": filters.date_from, "date_to": filters.date_to},
            "overview": overview,
            "by_vendor": vendor,
            "by_status": status,
            "by_reason": reason,
            "top_subregions": top_sub,
            "top_districts": top_dist,
            "by_grid": by_grid,
        }

    return await bounded(request, load())


@router.get("/rows")
async def rows(
    request: Request,
    limit: int = Query(default=50, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    search: Optional[str] = None,
    filters: RmsFilters = Depends(rms_filters),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, rms.fetch_rows(remote, filters, limit, offset, search))


@router.get("/summaries")
async def summaries(
    request: Request, region: Optional[str] = None, remote: RemoteClient = Depends(get_remote)
):
    """Region and sub-region indicator summaries; ``region`` narrows the sub-regions."""
    if region:
        subregions = await bounded(request, rms.fetch_subregion_summary(remote, region))
        return {"subregions": subregions}
    return await bounded(request, rms.fetch_summaries(remote))


@router.get("/drilldown")
async def drilldown(
    request: Request,
    subregion: str,
    indicator: str,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, rms.fetch_indicator_drilldown(remote, subregion, indicator))


@router.get("/sites/search")
async def site_search(
    request: Request,
    q: str = "",
    limit: int = Query(default=12, ge=1, le=100),
    remote: RemoteClient = Depends(get_remote),
):
    names = await bounded(request, rms.search_site_names(remote, q, limit))
    return [{"site_name": n, "href": rms.rms_href(n)} for n in names]


@router.get("/sites/{site_name}")
async def site_records(site_name: str, request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, rms.fetch_site_records(remote, site_name))
