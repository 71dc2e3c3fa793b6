"""Filter state and argument helpers shared by every procedure wrapper."""

import re
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Any, Iterable, Optional

ALL = "__ALL__"

REGIONS = ("North", "Central", "South")
GRAINS = ("Daily", "Weekly", "Monthly")

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ISO_MONTH = re.compile(r"^\d{4}-\d{2}$")


# ═══════════════════════════════════════════════════════════════════
# FILTER STATE
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FilterState:
    """User-selected filters for one page. Every field is optional."""

    region: Optional[str] = None
    subregion: Optional[str] = None
    district: Optional[str] = None
    grid: Optional[str] = None
    sitename: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    @classmethod
    def from_params(cls, **params: Any) -> "FilterState":
        """Build from raw query values, mapping blanks and ``ALL`` to ``None``."""
        fields = {k: to_nullable(params.get(k)) for k in cls.__dataclass_fields__}
        return cls(**fields)

    def with_changes(self, **changes: Any) -> "FilterState":
        return replace(self, **changes)

    @property
    def has_range(self) -> bool:
        return bool(self.date_from and self.date_to)


def to_nullable(value: Any) -> Optional[str]:
    """Blank strings and the ``ALL`` sentinel become ``None``."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == ALL:
        return None
    return text


def parse_region(value: Optional[str]) -> str:
    """Normalize to ``North``/``Central``/``South``, anything else is ``ALL``."""
    if not value:
        return ALL
    lowered = value.strip().lower()
    for region in REGIONS:
        if lowered == region.lower():
            return region
    return ALL


def region_param(region: Optional[str]) -> Optional[str]:
    parsed = parse_region(region)
    return None if parsed == ALL else parsed


def parse_grain(value: Optional[str]) -> str:
    """Normalize to ``Daily``/``Weekly``/``Monthly`` (default ``Daily``)."""
    if not value:
        return "Daily"
    lowered = value.strip().lower()
    for grain in GRAINS:
        if lowered == grain.lower():
            return grain
    return "Daily"


def projects_param(projects: Optional[Iterable[str]]) -> Optional[list[str]]:
    """Empty project selections are sent as ``None``."""
    cleaned = [p for p in (projects or []) if p]
    return cleaned or None


# ═══════════════════════════════════════════════════════════════════
# PICKLISTS
# ═══════════════════════════════════════════════════════════════════

def flatten(rows: Iterable[dict[str, Any]], key: str) -> list[str]:
    """Pull one text column out of picklist rows, skipping blanks."""
    values = []
    for row in rows or []:
        value = row.get(key) if isinstance(row, dict) else None
        if isinstance(value, str) and value.strip():
            values.append(value)
    return values


def dedupe_casefold(values: Iterable[Optional[str]]) -> list[str]:
    """Distinct trimmed values, case-insensitive, keeping the first spelling."""
    seen: dict[str, str] = {}
    for value in values:
        text = str(value or "").strip()
        if not text:
            continue
        seen.setdefault(text.lower(), text)
    return list(seen.values())


def distinct_sorted(values: Iterable[Optional[str]]) -> list[str]:
    return sorted({v.strip() for v in values if isinstance(v, str) and v.strip()})


# ═══════════════════════════════════════════════════════════════════
# DATES
# ═══════════════════════════════════════════════════════════════════

def is_iso_date(value: Any) -> bool:
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def first_day_of_month(yyyymm: str) -> str:
    """``2024-03`` -> ``2024-03-01``; ``""`` for anything else."""
    if not isinstance(yyyymm, str) or not _ISO_MONTH.match(yyyymm):
        return ""
    return f"{yyyymm}-01"


def yyyymm_from_iso(iso: str) -> str:
    if not is_iso_date(iso):
        return ""
    return iso[:7]


def recent_months(max_iso: str, count: int = 18) -> list[str]:
    """The ``count`` months ending at ``max_iso``'s month, newest first."""
    if not is_iso_date(max_iso):
        return []
    year, month = int(max_iso[:4]), int(max_iso[5:7])
    months = []
    for _ in range(count):
        months.append(f"{year}-{month:02d}")
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return months


def default_date_range(days: int = 30, today: Optional[date] = None) -> tuple[str, str]:
    """``(today - days, today)`` as ISO strings."""
    end = today or date.today()
    start = end - timedelta(days=days)
    return start.isoformat(), end.isoformat()
