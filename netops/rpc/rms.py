"""RMS power telemetry: overview, breakdowns, raw rows and region drill-down."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

from netops.remote.client import RemoteClient, RemoteError
from netops.rpc.common import default_date_range
from netops.rpc.models import (
    DateBounds,
    GridSiteCount,
    RmsAreaSummaryRow,
    RmsCountRow,
    RmsDrilldown,
    RmsOverview,
    RmsSiteRow,
    RmsTableRow,
    validate_rows,
)

logger = logging.getLogger(__name__)

BLANK = "(Blank)"


@dataclass(frozen=True)
class RmsFilters:
    date_from: str
    date_to: str
    subregion: Optional[str] = None
    grid: Optional[str] = None
    district: Optional[str] = None
    site_class: Optional[str] = None
    vendor: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def default(cls, **kwargs: Any) -> "RmsFilters":
        """Filters over the last 30 days."""
        date_from, date_to = default_date_range(30)
        return cls(date_from=date_from, date_to=date_to, **kwargs)

    def args(self) -> dict[str, Any]:
        return {
            "in_date_from": self.date_from,
            "in_date_to": self.date_to,
            "in_subregion": self.subregion,
            "in_grid": self.grid,
            "in_district": self.district,
            "in_class": self.site_class,
            "in_vendor": self.vendor,
            "in_status": self.status,
        }


def _counts(rows: list[dict], label_column: str) -> list[RmsCountRow]:
    return [
        RmsCountRow.model_validate({"label": r.get(label_column), "site_count": r.get("site_count")})
        for r in rows
        if isinstance(r, dict)
    ]


async def fetch_overview(remote: RemoteClient, filters: RmsFilters) -> RmsOverview:
    rows = await remote.call("fetch_rms_overview", filters.args())
    return RmsOverview.model_validate(rows[0]) if rows else RmsOverview()


async def fetch_by_vendor(remote: RemoteClient, filters: RmsFilters) -> list[RmsCountRow]:
    return _counts(await remote.call("fetch_rms_by_vendor", filters.args()), "vendor")


async def fetch_by_status(remote: RemoteClient, filters: RmsFilters) -> list[RmsCountRow]:
    return _counts(await remote.call("fetch_rms_by_status", filters.args()), "status")


async def fetch_by_reason(remote: RemoteClient, filters: RmsFilters) -> list[RmsCountRow]:
    return _counts(await remote.call("fetch_rms_by_reason", filters.args()), "reason")


async def fetch_top_subregions(
    remote: RemoteClient, filters: RmsFilters, limit: int = 5
) -> list[RmsCountRow]:
    rows = await remote.call("fetch_rms_top_subregions", {**filters.args(), "in_limit": limit})
    return _counts(rows, "subregion")


async def fetch_top_districts(
    remote: RemoteClient, filters: RmsFilters, limit: int = 10
) -> list[RmsCountRow]:
    rows = await remote.call("fetch_rms_top_districts", {**filters.args(), "in_limit": limit})
    return _counts(rows, "district")


async def fetch_by_grid(remote: RemoteClient, filters: RmsFilters, limit: int = 20) -> list[RmsCountRow]:
    rows = await remote.call("fetch_rms_by_grid", {**filters.args(), "in_limit": limit})
    return _counts(rows, "grid")


async def fetch_rows(
    remote: RemoteClient,
    filters: RmsFilters,
    limit: int = 50,
    offset: int = 0,
    search: Optional[str] = None,
) -> list[RmsTableRow]:
    rows = await remote.call(
        "fetch_rms_rows",
        {**filters.args(), "in_limit": limit, "in_offset": offset, "in_search": search or None},
    )
    return validate_rows(RmsTableRow, rows)


async def fetch_bounds(remote: RemoteClient) -> DateBounds:
    """Date bounds of the RMS data; empty bounds when the lookup fails."""
    try:
        rows = await remote.call("fetch_rms_bounds")
    except RemoteError as exc:
        logger.error("fetch_rms_bounds error: %s", exc.as_log_fields())
        return DateBounds()
    return DateBounds.model_validate(rows[0]) if rows else DateBounds()


# ═══════════════════════════════════════════════════════════════════
# REGION SUMMARY / DRILL-DOWN
# ═══════════════════════════════════════════════════════════════════

async def fetch_region_summary(remote: RemoteClient) -> list[RmsAreaSummaryRow]:
    return validate_rows(RmsAreaSummaryRow, await remote.call("fetch_rms_region_summary"))


async def fetch_subregion_summary(
    remote: RemoteClient, region: Optional[str] = None
) -> list[RmsAreaSummaryRow]:
    if region:
        rows = await remote.call("fetch_rms_subregion_summary_by_region", {"p_region": region})
    else:
        rows = await remote.call("fetch_rms_subregion_summary")
    return validate_rows(RmsAreaSummaryRow, rows)


async def fetch_summaries(remote: RemoteClient) -> dict[str, list[RmsAreaSummaryRow]]:
    regions, subregions = await asyncio.gather(
        fetch_region_summary(remote), fetch_subregion_summary(remote)
    )
    return {"regions": regions, "subregions": subregions}


def _blank(value: Optional[str]) -> str:
    text = (value or "").strip()
    return text or BLANK


def grid_breakdown(sites: list[RmsSiteRow]) -> list[GridSiteCount]:
    """Site count per grid, largest first; blank grids are grouped as ``(Blank)``."""
    counts = Counter(_blank(s.grid) for s in sites)
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [GridSiteCount(grid=grid, site_count=count) for grid, count in ordered]


async def fetch_indicator_drilldown(
    remote: RemoteClient, subregion: str, indicator: str
) -> RmsDrilldown:
    """Sites flagged by one indicator in a sub-region, with their grid breakdown."""
    rows = await remote.call(
        "fetch_rms_sites_by_indicator", {"p_subregion": subregion, "p_indicator": indicator}
    )
    sites = validate_rows(RmsSiteRow, rows)
    grids = grid_breakdown(sites)
    return RmsDrilldown(sites=sites, grids=grids, default_grid=grids[0].grid if grids else "All")


# ═══════════════════════════════════════════════════════════════════
# PER-SITE
# ═══════════════════════════════════════════════════════════════════

async def fetch_site_records(remote: RemoteClient, site_name: str) -> list[dict[str, Any]]:
    """Every RMS column for one site."""
    return await remote.select("RMS", "*", eq={"SiteName": site_name})


async def search_site_names(remote: RemoteClient, query: str, limit: int = 12) -> list[str]:
    """Site-name autocomplete over the site list."""
    q = (query or "").strip()
    if not q:
        return []
    rows = await remote.select(
        "SSL", "SiteName", ilike={"SiteName": f"%{q}%"}, order="SiteName", limit=limit
    )
    return [str(r.get("SiteName") or "").strip() for r in rows if str(r.get("SiteName") or "").strip()]


def rms_href(site_name: Optional[str]) -> str:
    """Dashboard link for a site's RMS detail page."""
    return f"/Rms/{quote((site_name or '').strip(), safe='')}"
