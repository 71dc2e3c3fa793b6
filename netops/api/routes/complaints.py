"""Customer complaint endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from netops.api.deps import bounded, filter_state, get_remote
from netops.remote.client import RemoteClient
from netops.rpc import complaints
from netops.rpc.common import FilterState

router = APIRouter(prefix="/api/complaints", tags=["complaints"])


@router.get("/regions")
async def regions(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, complaints.fetch_regions(remote))


@router.get("/subregions")
async def subregions(
    request: Request, region: Optional[str] = None, remote: RemoteClient = Depends(get_remote)
):
    return await bounded(request, complaints.fetch_subregions(remote, region))


@router.get("/districts")
async def districts(
    request: Request,
    region: Optional[str] = None,
    subregion: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, complaints.fetch_districts(remote, region, subregion))


@router.get("/grids")
async def grids(
    request: Request,
    region: Optional[str] = None,
    subregion: Optional[str] = None,
    district: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, complaints.fetch_grids(remote, region, subregion, district))


@router.get("/sites")
async def sites(
    request: Request,
    limit: int = Query(default=1000, ge=1, le=5000),
    filters: FilterState = Depends(filter_state),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, complaints.fetch_sites_agg(remote, filters, limit))


@router.get("/sites/{site}/timeseries")
async def timeseries(
    site: int,
    request: Request,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, complaints.fetch_timeseries(remote, site, date_from, date_to))


@router.get("/sites/{site}/services")
async def services(
    site: int,
    request: Request,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(
        request, complaints.fetch_service_breakdown(remote, site, date_from, date_to)
    )


@router.get("/sites/{site}/neighbors")
async def neighbors(
    site: int,
    request: Request,
    max_km: float = Query(default=5, gt=0),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, complaints.fetch_neighbors(remote, site, max_km))
