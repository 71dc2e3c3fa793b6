"""High/low utilization cell counts by area and the HU throughput series."""

from __future__ import annotations

from typing import Literal, Optional

from netops.remote.client import RemoteClient
from netops.rpc.common import to_nullable
from netops.rpc.models import AreaUtilizationRow, ThroughputPoint, validate_rows

AreaLevel = Literal["DISTRICT", "GRID"]


async def fetch_area_counts(
    remote: RemoteClient,
    level: AreaLevel,
    subregion: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> list[AreaUtilizationRow]:
    rows = await remote.call(
        "util_counts_by_area",
        {
            "p_level": level,
            "p_subregion": to_nullable(subregion),
            "p_date_from": date_from,
            "p_date_to": date_to,
        },
    )
    return [r for r in validate_rows(AreaUtilizationRow, rows) if r.area]


async def fetch_hu_timeseries(
    remote: RemoteClient,
    subregion: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> list[ThroughputPoint]:
    rows = await remote.call(
        "util_hu_timeseries",
        {"p_subregion": to_nullable(subregion), "p_date_from": date_from, "p_date_to": date_to},
    )
    return validate_rows(ThroughputPoint, rows)
