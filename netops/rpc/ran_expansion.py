"""RAN expansion: before/after traffic comparison for rollout projects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from netops.remote.client import RemoteClient
from netops.rpc.common import flatten, projects_param
from netops.rpc.models import GridComparisonRow, RanTimeseriesRow, TrafficAverageRow, validate_rows
from netops.utils import to_number


@dataclass(frozen=True)
class RanFilters:
    projects: Optional[Sequence[str]] = None
    region: Optional[str] = None
    subregion: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    def args(self) -> dict[str, Any]:
        return {
            "in_projects": projects_param(self.projects),
            "in_region": self.region,
            "in_subregion": self.subregion,
            "in_start_date": self.start_date,
            "in_end_date": self.end_date,
        }


async def fetch_projects(remote: RemoteClient) -> list[str]:
    return flatten(await remote.call("fetch_ran_projects"), "Projects")


async def fetch_integration_min_date(
    remote: RemoteClient, projects: Optional[Sequence[str]]
) -> Optional[str]:
    value = await remote.call_scalar("fetch_integration_min_date", {"in_projects": projects_param(projects)})
    return str(value) if value else None


async def fetch_traffic_latest_date(
    remote: RemoteClient, projects: Optional[Sequence[str]]
) -> Optional[str]:
    value = await remote.call_scalar("fetch_traffic_latest_date", {"in_projects": projects_param(projects)})
    return str(value) if value else None


async def fetch_regions(remote: RemoteClient) -> list[str]:
    return flatten(await remote.call("fetch_ran_regions"), "Region")


async def fetch_subregions_by_region(remote: RemoteClient, region: Optional[str]) -> list[str]:
    rows = await remote.call("fetch_ran_subregions_by_region", {"in_region": region})
    return flatten(rows, "SubRegion")


async def fetch_traffic_averages(remote: RemoteClient, filters: RanFilters) -> list[TrafficAverageRow]:
    rows = await remote.call("fetch_traffic_indicator_averages", filters.args())
    return validate_rows(TrafficAverageRow, rows)


async def fetch_grid_comparison(remote: RemoteClient, filters: RanFilters) -> list[GridComparisonRow]:
    rows = await remote.call("fetch_traffic_grid_comparison", filters.args())
    return validate_rows(GridComparisonRow, rows)


async def fetch_timeseries(remote: RemoteClient, filters: RanFilters) -> list[RanTimeseriesRow]:
    rows = await remote.call("fetch_traffic_timeseries", filters.args())
    return validate_rows(RanTimeseriesRow, rows)


async def fetch_site_count(remote: RemoteClient, filters: RanFilters) -> int:
    value = await remote.call_scalar(
        "fetch_ran_site_count",
        {
            "in_projects": projects_param(filters.projects),
            "in_region": filters.region,
            "in_subregion": filters.subregion,
        },
    )
    count = to_number(value)
    return int(count) if count is not None else 0
