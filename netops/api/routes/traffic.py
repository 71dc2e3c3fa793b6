"""Radio traffic endpoints."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Request

from netops.api.deps import bounded, get_app_config, get_remote
from netops.remote.client import RemoteClient
from netops.rpc import traffic
from netops.rpc.common import default_date_range

router = APIRouter(prefix="/api/traffic", tags=["traffic"])


@router.get("/daily")
async def daily(
    request: Request,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    subregion: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    """Daily totals, fetched in week-sized chunks; defaults to the last 7 days."""
    if not date_from and not date_to:
        date_from, date_to = default_date_range(7)
    return await bounded(
        request,
        traffic.fetch_traffic_daily(
            remote, date_from, date_to, subregion, chunk_days=get_app_config(request).chunk_days
        ),
    )


@router.get("/latest/{level}")
async def latest(
    level: Literal["grid", "district"],
    request: Request,
    subregion: Optional[str] = None,
    sort: traffic.SortKey = "total_gb",
    direction: traffic.SortDir = "desc",
    remote: RemoteClient = Depends(get_remote),
):
    fetch = traffic.fetch_latest_by_grid if level == "grid" else traffic.fetch_latest_by_district
    rows = await bounded(request, fetch(remote, subregion))
    return traffic.sort_latest(rows, sort, direction)
