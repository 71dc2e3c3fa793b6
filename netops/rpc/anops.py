"""ANOps project tracking: sites, attempts and availability after fixes.

Every data call needs at least one project; an empty selection returns
``[]`` without touching the backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from netops.remote.client import RemoteClient
from netops.rpc.common import distinct_sorted, flatten, projects_param
from netops.rpc.models import (
    AnopsFilterOptions,
    AnopsSiteDetailRow,
    AnopsSiteRow,
    AttemptStatusRow,
    AvailabilityPoint,
    validate_rows,
)


@dataclass(frozen=True)
class AnopsFilters:
    projects: Sequence[str] = ()
    site_class: Optional[str] = None
    subregion: Optional[str] = None
    district: Optional[str] = None
    grid: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    search: Optional[str] = None
    site: Optional[str] = None

    def base_args(self) -> dict[str, Any]:
        return {
            "p_projects": projects_param(self.projects),
            "p_site_class": self.site_class,
            "p_subregion": self.subregion,
            "p_district": self.district,
            "p_grid": self.grid,
        }


async def fetch_project_names(remote: RemoteClient) -> list[str]:
    return flatten(await remote.call("anops_project_names"), "project_name")


async def fetch_filter_options(
    remote: RemoteClient, projects: Optional[Sequence[str]], site_class: Optional[str] = None
) -> AnopsFilterOptions:
    rows = await remote.call(
        "anops_filter_options",
        {"p_projects": projects_param(projects), "p_site_class": site_class},
    )
    return AnopsFilterOptions(
        subregions=distinct_sorted(r.get("SubRegion") for r in rows),
        districts=distinct_sorted(r.get("District") for r in rows),
        grids=distinct_sorted(r.get("Grid") for r in rows),
    )


async def fetch_sites(remote: RemoteClient, filters: AnopsFilters) -> list[AnopsSiteRow]:
    if not projects_param(filters.projects):
        return []
    rows = await remote.call("anops_sites", {**filters.base_args(), "p_search": filters.search})
    return validate_rows(AnopsSiteRow, rows)


async def fetch_sites_detail(remote: RemoteClient, filters: AnopsFilters) -> list[AnopsSiteDetailRow]:
    if not projects_param(filters.projects):
        return []
    rows = await remote.call(
        "anops_sites_detail",
        {
            **filters.base_args(),
            "p_date_from": filters.date_from,
            "p_date_to": filters.date_to,
            "p_search": filters.search,
        },
    )
    return validate_rows(AnopsSiteDetailRow, rows)


async def fetch_attempt_status(remote: RemoteClient, filters: AnopsFilters) -> list[AttemptStatusRow]:
    if not projects_param(filters.projects):
        return []
    rows = await remote.call(
        "anops_attempt_status_by_date",
        {**filters.base_args(), "p_date_from": filters.date_from, "p_date_to": filters.date_to},
    )
    return validate_rows(AttemptStatusRow, rows)


async def fetch_availability_timeseries(
    remote: RemoteClient, filters: AnopsFilters
) -> list[AvailabilityPoint]:
    if not projects_param(filters.projects):
        return []
    rows = await remote.call(
        "anops_availability_timeseries",
        {
            "p_date_from": filters.date_from,
            "p_date_to": filters.date_to,
            "p_projects": projects_param(filters.projects),
            "p_site": filters.site,
            "p_site_class": filters.site_class,
            "p_subregion": filters.subregion,
            "p_district": filters.district,
            "p_grid": filters.grid,
        },
    )
    return validate_rows(AvailabilityPoint, rows)
