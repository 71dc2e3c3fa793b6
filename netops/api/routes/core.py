"""Packet-core subscriber/throughput and ISP summary endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from netops.api.deps import bounded, get_remote
from netops.remote.client import RemoteClient
from netops.rpc import isp, pscore

router = APIRouter(prefix="/api", tags=["core"])


@router.get("/pscore/subscribers")
async def pscore_subscribers(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, pscore.fetch_subscriber_series(remote))


@router.get("/pscore/latest")
async def pscore_latest(request: Request, remote: RemoteClient = Depends(get_remote)):
    """Latest-day KPIs with day-over-day and week-over-week deltas (``null`` when no data)."""
    return await bounded(request, pscore.fetch_latest_kpis(remote))


@router.get("/pscore/throughput")
async def pscore_throughput(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, pscore.fetch_throughput_series(remote))


@router.get("/isp/timeseries")
async def isp_timeseries(
    request: Request,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    pick: list[str] = Query(default=[]),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, isp.fetch_timeseries(remote, date_from, date_to, pick or None))


@router.get("/isp/summary")
async def isp_summary(
    request: Request,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    exclude: list[str] = Query(default=[]),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, isp.fetch_numeric_summary(remote, date_from, date_to, exclude or None))
