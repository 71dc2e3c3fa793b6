"""Site-list picklists used by the filter bars."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from netops.api.deps import bounded, get_remote
from netops.remote.client import RemoteClient
from netops.rpc import picklists

router = APIRouter(prefix="/api/picklists", tags=["picklists"])


@router.get("/subregions")
async def subregions(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, picklists.fetch_subregions(remote))


@router.get("/grids")
async def grids(
    request: Request,
    subregion: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, picklists.fetch_grids(remote, subregion))


@router.get("/districts")
async def districts(
    request: Request,
    subregion: Optional[str] = None,
    grid: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, picklists.fetch_districts(remote, subregion, grid))


@router.get("/sitenames")
async def sitenames(
    request: Request,
    q: Optional[str] = None,
    subregion: Optional[str] = None,
    grid: Optional[str] = None,
    district: Optional[str] = None,
    limit: int = Query(default=20, ge=1, le=200),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(
        request, picklists.search_sitenames(remote, q, subregion, grid, district, limit)
    )


@router.get("/site-classes")
async def site_classes(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, picklists.fetch_site_classes(remote))


@router.get("/regions")
async def regions(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, picklists.fetch_regions(remote))


@router.get("/cell-subregions")
async def cell_subregions(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, picklists.fetch_cell_subregions(remote))
