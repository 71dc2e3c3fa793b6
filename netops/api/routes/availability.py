"""Cell availability endpoints: targets, hit-lists, bundle and PGS/SB KPIs."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from netops.api.deps import bounded, filter_state, get_remote
from netops.remote.client import RemoteClient
from netops.rpc import availability
from netops.rpc.common import FilterState, default_date_range

router = APIRouter(prefix="/api/availability", tags=["availability"])


@router.get("/date-bounds")
async def date_bounds(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, availability.fetch_date_bounds(remote))


@router.get("/subregion-targets")
async def subregion_targets(
    request: Request,
    as_of: str,
    region: Optional[str] = None,
    frequency: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(
        request, availability.fetch_subregion_targets(remote, region, as_of, frequency)
    )


@router.get("/hitlist")
async def hitlist(
    request: Request,
    as_of: str,
    class_group: str = Query(default="PGS"),
    region: Optional[str] = None,
    frequency: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(
        request, availability.fetch_target_hitlist(remote, region, as_of, frequency, class_group)
    )


@router.get("/bundle")
async def bundle(
    request: Request,
    filters: FilterState = Depends(filter_state),
    remote: RemoteClient = Depends(get_remote),
):
    """Cards, daily series and area averages; defaults to the last 30 days."""
    if not filters.has_range:
        date_from, date_to = default_date_range(30)
        filters = filters.with_changes(
            date_from=filters.date_from or date_from, date_to=filters.date_to or date_to
        )
    return await bounded(request, availability.fetch_bundle(remote, filters))


# ---------------------------------------------------------------------------
# PGS / SB KPI
# ---------------------------------------------------------------------------

@router.get("/kpi/max-date")
async def kpi_max_date(
    request: Request,
    group: Optional[str] = None,
    region: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return {"max_date": await bounded(request, availability.fetch_kpi_max_date(remote, group, region))}


@router.get("/kpi/summary")
async def kpi_summary(
    request: Request,
    date: Optional[str] = None,
    region: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    """PGS and SB summaries plus the merged "All" row."""
    summaries = await bounded(request, availability.fetch_kpi_summaries(remote, date, region))
    pgs_all = next((r for r in summaries["PGS"] if r.label == "All"), None)
    sb_all = next((r for r in summaries["SB"] if r.label == "All"), None)
    return {
        "PGS": summaries["PGS"],
        "SB": summaries["SB"],
        "All": availability.merge_all_row(pgs_all, sb_all),
    }


@router.get("/kpi/sites")
async def kpi_sites(
    request: Request,
    group: str,
    date: str,
    region: Optional[str] = None,
    sub_region: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(default=200, ge=1, le=5000),
    offset: int = Query(default=0, ge=0),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(
        request,
        availability.fetch_kpi_sites(remote, group, date, region, sub_region, search, limit, offset),
    )
