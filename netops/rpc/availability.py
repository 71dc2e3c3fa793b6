"""Cell availability: targets, hit-lists, the dashboard bundle and PGS/SB KPIs."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from netops.remote.client import RemoteClient
from netops.rpc.common import FilterState, is_iso_date, parse_grain, region_param, to_nullable
from netops.rpc.models import (
    CellAvailBundle,
    DateBounds,
    HitlistRow,
    KpiSiteRow,
    KpiSummaryRow,
    SubregionTargetsRow,
    validate_rows,
)

GROUPS = ("PGS", "SB")


async def fetch_date_bounds(remote: RemoteClient) -> DateBounds:
    rows = await remote.call("fetch_ca_date_bounds")
    return DateBounds.model_validate(rows[0]) if rows else DateBounds()


async def fetch_subregion_targets(
    remote: RemoteClient, region: Optional[str], as_of: str, frequency: Optional[str]
) -> list[SubregionTargetsRow]:
    rows = await remote.call(
        "fetch_cell_avail_subregion_targets",
        {"p_region": region_param(region), "p_asof": as_of, "p_freq": parse_grain(frequency)},
    )
    return validate_rows(SubregionTargetsRow, rows)


async def fetch_target_hitlist(
    remote: RemoteClient,
    region: Optional[str],
    as_of: str,
    frequency: Optional[str],
    class_group: str,
) -> list[HitlistRow]:
    rows = await remote.call(
        "fetch_cell_avail_target_hitlist",
        {
            "p_region": region_param(region),
            "p_asof": as_of,
            "p_freq": parse_grain(frequency),
            "p_class": class_group,
        },
    )
    return validate_rows(HitlistRow, rows)


async def fetch_bundle(remote: RemoteClient, filters: FilterState) -> CellAvailBundle:
    """Daily series, by-grid and by-district averages and summary cards in one call."""
    data = await remote.call_scalar(
        "fetch_cell_avail_bundle",
        {
            "in_date_from": filters.date_from,
            "in_date_to": filters.date_to,
            "in_region": region_param(filters.region),
            "in_subregion": filters.subregion,
            "in_grid": filters.grid,
            "in_district": filters.district,
            "in_sitename": filters.sitename,
        },
    )
    if isinstance(data, list):
        data = data[0] if data else {}
    return CellAvailBundle.model_validate(data if isinstance(data, dict) else {})


# ═══════════════════════════════════════════════════════════════════
# PGS / SB KPI
# ═══════════════════════════════════════════════════════════════════

async def fetch_kpi_max_date(
    remote: RemoteClient, group: Optional[str] = None, region: Optional[str] = None
) -> str:
    rows = await remote.call(
        "fetch_availability_kpi_max_date",
        {"p_group": to_nullable(group), "p_region": region_param(region)},
    )
    if not rows:
        return ""
    return str(rows[0].get("max_date") or "")


async def fetch_kpi_summary(
    remote: RemoteClient, group: str, date_iso: Optional[str], region: Optional[str]
) -> list[KpiSummaryRow]:
    rows = await remote.call(
        "fetch_availability_kpi_summary",
        {
            "p_group": group,
            "p_date": date_iso if is_iso_date(date_iso) else None,
            "p_region": region_param(region),
        },
    )
    return validate_rows(KpiSummaryRow, rows)


async def fetch_kpi_summaries(
    remote: RemoteClient, date_iso: Optional[str], region: Optional[str]
) -> dict[str, list[KpiSummaryRow]]:
    """PGS and SB summaries fetched together."""
    pgs, sb = await asyncio.gather(
        fetch_kpi_summary(remote, "PGS", date_iso, region),
        fetch_kpi_summary(remote, "SB", date_iso, region),
    )
    return {"PGS": pgs, "SB": sb}


async def fetch_kpi_sites(
    remote: RemoteClient,
    group: str,
    date_iso: str,
    region: Optional[str] = None,
    sub_region: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = 200,
    offset: int = 0,
) -> list[KpiSiteRow]:
    rows = await remote.call(
        "fetch_availability_kpi_sites",
        {
            "p_group": group,
            "p_date": date_iso,
            "p_region": region_param(region),
            "p_sub_region": to_nullable(sub_region),
            "p_search": to_nullable(search),
            "p_limit": limit,
            "p_offset": offset,
        },
    )
    return validate_rows(KpiSiteRow, rows)


# ═══════════════════════════════════════════════════════════════════
# MERGE HELPERS
# ═══════════════════════════════════════════════════════════════════

_SUMMED = ("target_achieved", "base_achieved", "target_and_base_not_achieved", "blank_status_rows")
_WEIGHTED = ("achievement", "score", "base", "target")


def _merge(
    pgs: Optional[KpiSummaryRow], sb: Optional[KpiSummaryRow], label: str, parent_region: str
) -> KpiSummaryRow:
    p_total = (pgs.total_sites if pgs else None) or 0
    s_total = (sb.total_sites if sb else None) or 0
    total = p_total + s_total

    merged: dict[str, Any] = {"label": label, "parent_region": parent_region, "total_sites": total}
    for field in _SUMMED:
        merged[field] = (getattr(pgs, field, None) or 0) + (getattr(sb, field, None) or 0)
    for field in _WEIGHTED:
        if total > 0:
            weighted = (getattr(pgs, field, None) or 0) * p_total + (getattr(sb, field, None) or 0) * s_total
            merged[field] = weighted / total
        else:
            merged[field] = None
    return KpiSummaryRow(**merged)


def merge_all_row(pgs: Optional[KpiSummaryRow], sb: Optional[KpiSummaryRow]) -> KpiSummaryRow:
    """Combine the PGS and SB "All" rows, weighting percentages by site count."""
    return _merge(pgs, sb, "All", "All")


def merge_row_by_key(
    pgs_rows: list[KpiSummaryRow],
    sb_rows: list[KpiSummaryRow],
    label: str,
    parent_region: str,
) -> Optional[KpiSummaryRow]:
    """Combine the PGS and SB rows for one label; ``None`` if neither has it."""

    def find(rows: list[KpiSummaryRow]) -> Optional[KpiSummaryRow]:
        return next((r for r in rows if r.label == label and r.parent_region == parent_region), None)

    pgs = find(pgs_rows)
    sb = find(sb_rows)
    if pgs is None and sb is None:
        return None
    return _merge(pgs, sb, label, parent_region)
