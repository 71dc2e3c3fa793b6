"""Long-pending alarms: summary counts and filter options."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from netops.remote.client import RemoteClient, RemoteError
from netops.rpc.common import distinct_sorted, to_nullable
from netops.rpc.models import (
    AgingSlabCount,
    DistrictCount,
    GridCount,
    LpaFilterOptions,
    LpaSummary,
    LpaTimePoint,
    NameCount,
    SeverityCount,
    validate_rows,
)

logger = logging.getLogger(__name__)

LPA_TABLE = "LPA_consolidated"
CRITICAL_FALLBACK = ["Yes", "No"]


async def fetch_summary(
    remote: RemoteClient, subregion: Optional[str] = None, name: Optional[str] = None
) -> LpaSummary:
    """All six LPA breakdowns for one sub-region/alarm-name filter."""
    args = {"p_subregion": to_nullable(subregion), "p_name": to_nullable(name)}
    names, severities, slabs, times, districts, grids = await asyncio.gather(
        remote.call("lpa_name_counts", args),
        remote.call("lpa_severity_counts", args),
        remote.call("lpa_aging_slab_counts", args),
        remote.call("lpa_timeseries_daily", args),
        remote.call("lpa_district_counts", args),
        remote.call("lpa_grid_counts", args),
    )
    return LpaSummary(
        names=validate_rows(NameCount, names),
        severities=validate_rows(SeverityCount, severities),
        slabs=validate_rows(AgingSlabCount, slabs),
        times=[LpaTimePoint(date=str(r.get("day") or ""), count=r.get("cnt")) for r in times],
        districts=validate_rows(DistrictCount, districts),
        grids=validate_rows(GridCount, grids),
    )


async def distinct_values(remote: RemoteClient, column: str) -> list[str]:
    rows = await remote.select(LPA_TABLE, column, not_null=[column])
    return distinct_sorted(r.get(column) for r in rows)


async def fetch_filter_options(remote: RemoteClient) -> LpaFilterOptions:
    regions, subregions = await asyncio.gather(
        distinct_values(remote, "Region"), distinct_values(remote, "SubRegion")
    )

    try:
        critical = await distinct_values(remote, "Critical")
    except RemoteError as exc:
        logger.warning("Critical column unavailable, using fallback: %s", exc.describe())
        critical = list(CRITICAL_FALLBACK)

    slab_rows = await remote.call("lpa_aging_slab_counts", {"p_subregion": None, "p_name": None})
    slabs = distinct_sorted(s.aging_slab for s in validate_rows(AgingSlabCount, slab_rows))

    return LpaFilterOptions(
        regions=regions, subregions=subregions, critical=critical, aging_slabs=slabs
    )
