"""Site map endpoints: points, availability overlays and neighbor search."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from netops import geo
from netops.api.deps import bounded, filter_state, get_remote
from netops.api.models import MapPointsResponse, NeighborItem, NeighborsRequest, NeighborsResponse
from netops.remote.client import RemoteClient
from netops.rpc import gis
from netops.rpc.common import FilterState

router = APIRouter(prefix="/api/gis", tags=["gis"])


def _neighbors_response(site_id: str, neighbors: list[geo.Neighbor]) -> NeighborsResponse:
    return NeighborsResponse(
        site_id=site_id,
        neighbors=[NeighborItem(**n.to_dict()) for n in neighbors],
    )


@router.get("/points", response_model=MapPointsResponse)
async def points(
    request: Request,
    site_query: str = "",
    address_query: str = "",
    filters: FilterState = Depends(filter_state),
    remote: RemoteClient = Depends(get_remote),
):
    """Site-list points for the map, with free-text filtering and a map center."""
    rows = await bounded(request, gis.fetch_ssl_points(remote, filters))
    if site_query or address_query:
        rows = geo.search_points(rows, site_query, address_query)
    return MapPointsResponse(points=rows, center=geo.centroid(rows), count=len(rows))


@router.get("/availability-points", response_model=MapPointsResponse)
async def availability_points(
    request: Request,
    days: int = Query(default=gis.DEFAULT_DAYS, ge=1, le=365),
    filters: FilterState = Depends(filter_state),
    remote: RemoteClient = Depends(get_remote),
):
    rows = await bounded(request, gis.fetch_availability_points(remote, filters, days))
    return MapPointsResponse(points=rows, center=geo.centroid(rows), count=len(rows))


@router.get("/timeseries/{site_id}")
async def site_timeseries(
    site_id: str,
    request: Request,
    days: int = Query(default=gis.DEFAULT_DAYS, ge=1, le=365),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, gis.fetch_site_timeseries(remote, site_id, days))


@router.get("/district-averages")
async def district_averages(
    request: Request,
    days: int = Query(default=gis.DEFAULT_DAYS, ge=1, le=365),
    filters: FilterState = Depends(filter_state),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, gis.fetch_district_averages(remote, filters, days))


@router.get("/grid-averages")
async def grid_averages(
    request: Request,
    days: int = Query(default=gis.DEFAULT_DAYS, ge=1, le=365),
    filters: FilterState = Depends(filter_state),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, gis.fetch_grid_averages(remote, filters, days))


@router.get("/site-class/{sitename}")
async def site_classification(sitename: str, request: Request, remote: RemoteClient = Depends(get_remote)):
    site_class = await bounded(request, gis.fetch_site_classification(remote, sitename))
    return {"sitename": sitename, "site_class": site_class}


# ---------------------------------------------------------------------------
# Neighbors
# ---------------------------------------------------------------------------

@router.get("/neighbors", response_model=NeighborsResponse)
async def neighbors(
    request: Request,
    site_id: str,
    max_km: float = Query(default=geo.NEIGHBOR_RADIUS_KM, gt=0),
    limit: int = Query(default=geo.NEIGHBOR_LIMIT, ge=1, le=50),
    filters: FilterState = Depends(filter_state),
    remote: RemoteClient = Depends(get_remote),
):
    """Nearest sites to ``site_id`` among the currently filtered map points."""
    rows = await bounded(request, gis.fetch_ssl_points(remote, filters))
    selected = next((p for p in rows if p.site_id == site_id), None)
    if selected is None:
        raise HTTPException(status_code=404, detail=f"Site {site_id} not found in current map")
    return _neighbors_response(site_id, geo.find_neighbors(selected, rows, max_km=max_km, limit=limit))


@router.post("/neighbors", response_model=NeighborsResponse)
def neighbors_for_points(body: NeighborsRequest):
    """Neighbor search over caller-supplied points. No backend call."""
    found = geo.find_neighbors(body.selected, body.candidates, max_km=body.max_km, limit=body.limit)
    return _neighbors_response(body.selected.site_id, found)


# ---------------------------------------------------------------------------
# Map sidebar picklists (degrade to empty lists)
# ---------------------------------------------------------------------------

@router.get("/subregions")
async def map_subregions(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, gis.map_subregions(remote))


@router.get("/grids")
async def map_grids(
    request: Request, subregion: Optional[str] = None, remote: RemoteClient = Depends(get_remote)
):
    return await bounded(request, gis.map_grids(remote, subregion))


@router.get("/districts")
async def map_districts(
    request: Request,
    subregion: Optional[str] = None,
    grid: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, gis.map_districts(remote, subregion, grid))


@router.get("/site-search")
async def map_site_search(
    request: Request,
    q: str = "",
    subregion: Optional[str] = None,
    grid: Optional[str] = None,
    district: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, gis.map_site_search(remote, q, subregion, grid, district))
