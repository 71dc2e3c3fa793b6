"""RAN expansion project endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from netops.api.deps import bounded, get_remote
from netops.remote.client import RemoteClient
from netops.rpc import ran_expansion
from netops.rpc.common import to_nullable
from netops.rpc.ran_expansion import RanFilters

router = APIRouter(prefix="/api/ran", tags=["ran"])


def ran_filters(
    projects: list[str] = Query(default=[]),
    region: Optional[str] = None,
    subregion: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> RanFilters:
    return RanFilters(
        projects=projects,
        region=to_nullable(region),
        subregion=to_nullable(subregion),
        start_date=to_nullable(start_date),
        end_date=to_nullable(end_date),
    )


@router.get("/projects")
async def projects(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, ran_expansion.fetch_projects(remote))


@router.get("/regions")
async def regions(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, ran_expansion.fetch_regions(remote))


@router.get("/subregions")
async def subregions(
    request: Request, region: Optional[str] = None, remote: RemoteClient = Depends(get_remote)
):
    return await bounded(request, ran_expansion.fetch_subregions_by_region(remote, to_nullable(region)))


@router.get("/dates")
async def dates(
    request: Request,
    filters: RanFilters = Depends(ran_filters),
    remote: RemoteClient = Depends(get_remote),
):
    """Earliest integration date and latest traffic date for the selected projects."""
    integration = await bounded(request, ran_expansion.fetch_integration_min_date(remote, filters.projects))
    latest = await bounded(request, ran_expansion.fetch_traffic_latest_date(remote, filters.projects))
    return {"integration_min_date": integration, "traffic_latest_date": latest}


@router.get("/averages")
async def averages(
    request: Request,
    filters: RanFilters = Depends(ran_filters),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, ran_expansion.fetch_traffic_averages(remote, filters))


@router.get("/grid-comparison")
async def grid_comparison(
    request: Request,
    filters: RanFilters = Depends(ran_filters),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, ran_expansion.fetch_grid_comparison(remote, filters))


@router.get("/timeseries")
async def timeseries(
    request: Request,
    filters: RanFilters = Depends(ran_filters),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, ran_expansion.fetch_timeseries(remote, filters))


@router.get("/site-count")
async def site_count(
    request: Request,
    filters: RanFilters = Depends(ran_filters),
    remote: RemoteClient = Depends(get_remote),
):
    return {"site_count": await bounded(request, ran_expansion.fetch_site_count(remote, filters))}
