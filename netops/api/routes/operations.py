"""Operations pages: ANOps, DG KPI, CP units, EAS, E-UTRAN, utilization and LPA."""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from netops.api.deps import bounded, get_remote
from netops.remote.client import RemoteClient
from netops.rpc import anops, cp_units, dg_kpi, eas, eutran, lpa, utilization
from netops.rpc.anops import AnopsFilters
from netops.rpc.common import default_date_range, to_nullable

router = APIRouter(prefix="/api", tags=["operations"])


def _range(date_from: Optional[str], date_to: Optional[str], days: int = 30) -> tuple[str, str]:
    if date_from and date_to:
        return date_from, date_to
    return default_date_range(days)


# ---------------------------------------------------------------------------
# ANOps
# ---------------------------------------------------------------------------

def anops_filters(
    projects: list[str] = Query(default=[]),
    site_class: Optional[str] = None,
    subregion: Optional[str] = None,
    district: Optional[str] = None,
    grid: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    search: Optional[str] = None,
    site: Optional[str] = None,
) -> AnopsFilters:
    return AnopsFilters(
        projects=tuple(projects),
        site_class=to_nullable(site_class),
        subregion=to_nullable(subregion),
        district=to_nullable(district),
        grid=to_nullable(grid),
        date_from=to_nullable(date_from),
        date_to=to_nullable(date_to),
        search=to_nullable(search),
        site=to_nullable(site),
    )


@router.get("/anops/projects")
async def anops_projects(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, anops.fetch_project_names(remote))


@router.get("/anops/filter-options")
async def anops_filter_options(
    request: Request,
    projects: list[str] = Query(default=[]),
    site_class: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, anops.fetch_filter_options(remote, projects, to_nullable(site_class)))


@router.get("/anops/sites")
async def anops_sites(
    request: Request,
    detail: bool = False,
    filters: AnopsFilters = Depends(anops_filters),
    remote: RemoteClient = Depends(get_remote),
):
    fetch = anops.fetch_sites_detail if detail else anops.fetch_sites
    return await bounded(request, fetch(remote, filters))


@router.get("/anops/attempts")
async def anops_attempts(
    request: Request,
    filters: AnopsFilters = Depends(anops_filters),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, anops.fetch_attempt_status(remote, filters))


@router.get("/anops/availability")
async def anops_availability(
    request: Request,
    filters: AnopsFilters = Depends(anops_filters),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, anops.fetch_availability_timeseries(remote, filters))


# ---------------------------------------------------------------------------
# DG KPI
# ---------------------------------------------------------------------------

@router.get("/dg/regions")
async def dg_regions(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, dg_kpi.fetch_regions(remote))


@router.get("/dg/subregions")
async def dg_subregions(
    request: Request, region: Optional[str] = None, remote: RemoteClient = Depends(get_remote)
):
    return await bounded(request, dg_kpi.fetch_subregions(remote, to_nullable(region)))


@router.get("/dg/kpi")
async def dg_kpi_page(
    request: Request,
    region: Optional[str] = None,
    subregion: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    region, subregion = to_nullable(region), to_nullable(subregion)
    summary, breakdown = await bounded(
        request,
        asyncio.gather(
            dg_kpi.fetch_summary(remote, region, subregion, start_date, end_date),
            dg_kpi.fetch_breakdown(remote, region, subregion, start_date, end_date),
        ),
    )
    return {"summary": summary, "breakdown": breakdown}


# ---------------------------------------------------------------------------
# CP units
# ---------------------------------------------------------------------------

@router.get("/cp-units/months")
async def cp_months(
    request: Request,
    region: Optional[str] = None,
    subregion: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, cp_units.fetch_months(remote, to_nullable(region), to_nullable(subregion)))


@router.get("/cp-units/summary")
async def cp_summary(
    request: Request,
    month: Optional[str] = None,
    region: Optional[str] = None,
    subregion: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(
        request,
        cp_units.fetch_summary(remote, to_nullable(month), to_nullable(region), to_nullable(subregion)),
    )


# ---------------------------------------------------------------------------
# EAS
# ---------------------------------------------------------------------------

@router.get("/eas")
async def eas_page(
    request: Request,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    subregion: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    """OK/NOK summary with daily, district, grid and weekly NOK breakdowns."""
    date_from, date_to = _range(date_from, date_to)
    summary, daily, districts, grids, weekly = await bounded(
        request,
        asyncio.gather(
            eas.fetch_summary(remote, date_from, date_to, subregion),
            eas.fetch_nok_timeseries(remote, date_from, date_to, subregion),
            eas.fetch_nok_by_district(remote, date_from, date_to, subregion),
            eas.fetch_nok_by_grid(remote, date_from, date_to, subregion),
            eas.fetch_weekly_nok(remote, date_from, date_to, subregion),
        ),
    )
    return {
        "date_from": date_from,
        "date_to": date_to,
        "summary": summary,
        "daily": daily,
        "by_district": districts,
        "by_grid": grids,
        "weekly": weekly,
    }


# ---------------------------------------------------------------------------
# E-UTRAN
# ---------------------------------------------------------------------------

@router.get("/eutran")
async def eutran_page(
    request: Request,
    subregion: Optional[str] = None,
    days: int = Query(default=eutran.DEFAULT_WINDOW_DAYS, ge=1, le=90),
    remote: RemoteClient = Depends(get_remote),
):
    summary, daily, grids, districts = await bounded(
        request,
        asyncio.gather(
            eutran.fetch_summary(remote, subregion, days),
            eutran.fetch_daily(remote, subregion, days),
            eutran.fetch_top5_grids(remote, subregion, days),
            eutran.fetch_top5_districts(remote, subregion, days),
        ),
    )
    return {"summary": summary, "daily": daily, "top_grids": grids, "top_districts": districts}


# ---------------------------------------------------------------------------
# Utilization
# ---------------------------------------------------------------------------

@router.get("/utilization/areas")
async def utilization_areas(
    request: Request,
    level: utilization.AreaLevel = "DISTRICT",
    subregion: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(
        request, utilization.fetch_area_counts(remote, level, subregion, date_from, date_to)
    )


@router.get("/utilization/hu-timeseries")
async def utilization_hu(
    request: Request,
    subregion: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, utilization.fetch_hu_timeseries(remote, subregion, date_from, date_to))


# ---------------------------------------------------------------------------
# LPA
# ---------------------------------------------------------------------------

@router.get("/lpa/summary")
async def lpa_summary(
    request: Request,
    subregion: Optional[str] = None,
    name: Optional[str] = None,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, lpa.fetch_summary(remote, subregion, name))


@router.get("/lpa/filter-options")
async def lpa_filter_options(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, lpa.fetch_filter_options(remote))
