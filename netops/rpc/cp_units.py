"""CP units: monthly energy consumption scoring."""

from __future__ import annotations

from typing import Optional

from netops.remote.client import RemoteClient
from netops.rpc.common import flatten
from netops.rpc.models import CpUnitsSummaryRow, validate_rows


async def fetch_months(
    remote: RemoteClient, region: Optional[str] = None, subregion: Optional[str] = None
) -> list[str]:
    rows = await remote.call("fetch_cp_units_months", {"p_region": region, "p_subregion": subregion})
    return flatten(rows, "month")


async def fetch_summary(
    remote: RemoteClient,
    month: Optional[str] = None,
    region: Optional[str] = None,
    subregion: Optional[str] = None,
) -> list[CpUnitsSummaryRow]:
    # p_month must be sent first
    rows = await remote.call(
        "fetch_cp_units_summary",
        {"p_month": month, "p_region": region, "p_subregion": subregion},
    )
    return validate_rows(CpUnitsSummaryRow, rows)
