"""ISP summary table: flat numeric time series and range totals."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from netops.fetch.chunking import parse_iso_date
from netops.remote.client import RemoteClient
from netops.rpc.models import IspNumericSummary, IspTimeseries
from netops.utils import to_number

ISP_TABLE = "ISP_summary"
EXCLUDED_COLUMNS = frozenset({"id", "created_at", "report_date"})


def _range_filters(date_from: Optional[str], date_to: Optional[str]) -> dict[str, Any]:
    filters: dict[str, Any] = {}
    if date_from:
        filters["gte"] = {"report_date": date_from}
    if date_to:
        filters["lte"] = {"report_date": date_to}
    return filters


def build_series(
    rows: Iterable[dict[str, Any]], pick: Optional[Iterable[str]] = None
) -> IspTimeseries:
    """One flat point per dated row; metrics absent from a row are filled with 0."""
    wanted = set(pick) if pick else None
    numeric_keys: set[str] = set()
    series: list[dict[str, Any]] = []

    for row in rows:
        day = parse_iso_date(str(row.get("report_date") or ""))
        if day is None:
            continue
        point: dict[str, Any] = {"date": day.isoformat()}
        for key, value in row.items():
            if key in EXCLUDED_COLUMNS or (wanted is not None and key not in wanted):
                continue
            number = to_number(value)
            if number is not None:
                point[key] = number
                numeric_keys.add(key)
        series.append(point)

    keys = sorted(numeric_keys)
    for point in series:
        for key in keys:
            point.setdefault(key, 0)
    return IspTimeseries(series=series, numeric_keys=keys)


def summarize(
    rows: list[dict[str, Any]], exclude: Optional[Iterable[str]] = None
) -> IspNumericSummary:
    """Sum, average and non-null count of every numeric column."""
    skip = EXCLUDED_COLUMNS | set(exclude or ())
    sums: dict[str, float] = {}
    counts: dict[str, int] = {}

    for row in rows:
        for key, value in row.items():
            if key in skip:
                continue
            number = to_number(value)
            if number is None:
                continue
            sums[key] = sums.get(key, 0.0) + number
            counts[key] = counts.get(key, 0) + 1

    keys = sorted(sums)
    avgs = {k: (sums[k] / counts[k]) if counts.get(k) else 0.0 for k in keys}
    return IspNumericSummary(numeric_keys=keys, sums=sums, avgs=avgs, counts=counts, row_count=len(rows))


async def fetch_timeseries(
    remote: RemoteClient,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    pick: Optional[list[str]] = None,
    table: str = ISP_TABLE,
) -> IspTimeseries:
    rows = await remote.select(table, "*", order="report_date", **_range_filters(date_from, date_to))
    return build_series(rows, pick)


async def fetch_numeric_summary(
    remote: RemoteClient,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    exclude: Optional[list[str]] = None,
    table: str = ISP_TABLE,
) -> IspNumericSummary:
    rows = await remote.select(table, "*", **_range_filters(date_from, date_to))
    return summarize(rows, exclude)
