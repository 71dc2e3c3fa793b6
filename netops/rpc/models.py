"""Pydantic row schemas for the remote procedures and tables.

Every row that comes back from the backend is validated into one of these
models before it reaches a route or the dashboard. Column names that differ
from Python naming are kept on the wire through aliases.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from netops.utils import num_or_zero, to_number


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _iso_day(value: Any) -> str:
    return str(value or "")[:10]


Num = Annotated[float | None, BeforeValidator(to_number)]
Zero = Annotated[float, BeforeValidator(num_or_zero)]
Count = Annotated[int, BeforeValidator(lambda v: int(num_or_zero(v)))]
Text = Annotated[str | None, BeforeValidator(_text)]
Day = Annotated[str, BeforeValidator(_iso_day)]


class Row(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

class DateBounds(Row):
    min_date: Text = None
    max_date: Text = None


class MapPoint(Row):
    """One site on the map. Coordinates are both present or both ``None``."""

    site_id: str = ""
    sitename: Text = None
    region: Text = None
    subregion: Text = None
    district: Text = None
    grid: Text = None
    latitude: Num = None
    longitude: Num = None
    address: Text = None
    site_classification: Text = None

    @field_validator("site_id", mode="before")
    @classmethod
    def coerce_site_id(cls, v):
        return "" if v is None else str(v)

    @model_validator(mode="after")
    def pair_coordinates(self):
        if self.latitude is None or self.longitude is None:
            self.latitude = None
            self.longitude = None
        if not self.site_id and self.sitename:
            self.site_id = self.sitename
        return self

    @property
    def plottable(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class AvailabilityPoint(Row):
    dt: Day = ""
    overall: Num = None
    v2g: Num = None
    v3g: Num = None
    v4g: Num = None


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------

class SubregionTargetsRow(Row):
    subregion: Text = None
    region_key: Text = None
    pgs_target_pct: Num = None
    sb_target_pct: Num = None
    pgs_site_count: Count = 0
    sb_site_count: Count = 0
    dg_site_count: Count = 0
    pgs_avg_overall_pct: Num = None
    sb_avg_overall_pct: Num = None
    dg_avg_overall_pct: Num = None
    pgs_achieved_count: Count = 0
    pgs_below_count: Count = 0
    sb_achieved_count: Count = 0
    sb_below_count: Count = 0


class HitlistRow(Row):
    site_name: Text = None
    subregion: Text = None
    region_key: Text = None
    avg_overall_pct: Num = None
    target_pct: Num = None
    achieved: bool | None = None


class BundleDailyRow(Row):
    date: Day = ""
    overall: Num = None


class BundleAggRow(Row):
    name: Text = None
    overall: Num = None
    v2g: Num = None
    v3g: Num = None
    v4g: Num = None


class BundleCards(Row):
    site_count: Num = None
    avg_pgs: Num = None
    avg_sb: Num = None


class CellAvailBundle(Row):
    daily: list[BundleDailyRow] = []
    by_grid: list[BundleAggRow] = []
    by_district: list[BundleAggRow] = []
    cards: BundleCards = Field(default_factory=BundleCards)

    @field_validator("daily", "by_grid", "by_district", mode="before")
    @classmethod
    def coerce_lists(cls, v):
        return v if isinstance(v, list) else []

    @field_validator("cards", mode="before")
    @classmethod
    def coerce_cards(cls, v):
        return v if isinstance(v, dict) else {}


class KpiSummaryRow(Row):
    """Availability KPI summary for one label (region, sub-region or "All")."""

    label: str = ""
    parent_region: str = ""
    base: Num = None
    target: Num = None
    target_and_base_not_achieved: Num = None
    base_achieved: Num = None
    target_achieved: Num = None
    blank_status_rows: Num = None
    total_sites: Num = None
    achievement: Num = None
    score: Num = None


class KpiSiteRow(Row):
    sitename: Text = None
    category: Text = None
    achievement: Num = None
    target_status: Text = None
    score: Num = None


# ---------------------------------------------------------------------------
# GIS
# ---------------------------------------------------------------------------

class DistrictAverage(Row):
    district: Text = None
    avg_overall: Num = None


class GridAverage(Row):
    grid: Text = None
    avg_overall: Num = None


# ---------------------------------------------------------------------------
# Complaints
# ---------------------------------------------------------------------------

class ComplaintSiteRow(Row):
    site_name: str = Field(default="", alias="SiteName")
    region: Text = Field(default=None, alias="Region")
    subregion: Text = Field(default=None, alias="SubRegion")
    district: Text = Field(default=None, alias="District")
    grid: Text = Field(default=None, alias="Grid")
    latitude: Num = Field(default=None, alias="Latitude")
    longitude: Num = Field(default=None, alias="Longitude")
    address: Text = Field(default=None, alias="Address")
    complaints_count: Count = 0
    site_id: Text = None


class ComplaintTimeseriesRow(Row):
    d: Day = ""
    complaints_count: Count = 0


class ServiceBreakdownRow(Row):
    service_title: Text = Field(default=None, alias="SERVICETITLE")
    complaints_count: Count = 0


class ComplaintNeighborRow(Row):
    neighbor_site_name: str = Field(default="", alias="NeighborSiteName")
    latitude: Num = Field(default=None, alias="Latitude")
    longitude: Num = Field(default=None, alias="Longitude")
    district: Text = Field(default=None, alias="District")
    grid: Text = Field(default=None, alias="Grid")
    address: Text = Field(default=None, alias="Address")
    distance_km: Zero = 0.0


# ---------------------------------------------------------------------------
# Traffic
# ---------------------------------------------------------------------------

class TrafficDailyRow(Row):
    """Daily traffic totals; missing numbers read as 0."""

    date: Day = ""
    voice_2g: Zero = 0.0
    voice_3g: Zero = 0.0
    volte_voice: Zero = 0.0
    voice_erl: Zero = 0.0
    data_2g_gb: Zero = 0.0
    data_3g_gb: Zero = 0.0
    data_4g_gb: Zero = 0.0
    total_gb: Zero = 0.0


class LatestAggRow(Row):
    key: str = "UNKNOWN"
    latest_date: Day = ""
    total_gb: Zero = 0.0
    voice_erl: Zero = 0.0


# ---------------------------------------------------------------------------
# RAN expansion
# ---------------------------------------------------------------------------

class TrafficAverageRow(Row):
    indicator: str = ""
    avg_value: Num = None


class GridComparisonRow(Row):
    grid: Text = Field(default=None, alias="Grid")
    earliest_date: Text = None
    latest_date: Text = None
    voice_earliest: Num = None
    voice_latest: Num = None
    voice_pct_change: Num = None
    data_earliest: Num = None
    data_latest: Num = None
    data_pct_change: Num = None
    site_count: Num = None


class RanTimeseriesRow(Row):
    dt: Day = ""
    total_voice_erl: Num = Field(default=None, alias="TotalVoiceTraffic_Erl")
    total_traffic_gb: Num = Field(default=None, alias="Total_Traffic_GB")


# ---------------------------------------------------------------------------
# RMS
# ---------------------------------------------------------------------------

class RmsOverview(Row):
    total_count: Count = 0
    site_count: Count = 0


class RmsCountRow(Row):
    """A ``(label, site_count)`` pair for vendor/status/reason/area breakdowns."""

    label: Text = None
    site_count: Count = 0


class RmsTableRow(Row):
    report_date: Text = None
    site_id: Text = None
    site_name: Text = None
    subregion: Text = None
    grid: Text = None
    district: Text = None
    rms_vendor: Text = None
    rms_status_connected_disconnected: Text = None
    rms_abnormality: Text = None
    abnormal_reason: Text = None
    currentrms_type: Text = None
    final_status: Text = None


class RmsAreaSummaryRow(Row):
    region: Text = None
    subregion: Text = None
    overall_sites_count: Num = None
    rms_sites_count: Num = None
    rms_disconnected_count: Num = None
    ip_connectivity_yes: Num = None
    ip_connectivity_no: Num = None
    phase_1_missing: Num = None
    phase_2_missing: Num = None
    battery_health_lt70: Num = None
    smr_shortfall_count: Num = None
    critical_shortfall_count: Num = None
    extra_smr_count: Num = None
    ac_spd_normal: Num = None
    ac_spd_abnormal: Num = None


class RmsSiteRow(Row):
    sitename: Text = None
    region: Text = None
    subregion: Text = None
    grid: Text = None
    district: Text = None
    siteclassification: Text = None


class GridSiteCount(Row):
    grid: str
    site_count: int


class RmsDrilldown(Row):
    sites: list[RmsSiteRow] = []
    grids: list[GridSiteCount] = []
    default_grid: str = "All"


# ---------------------------------------------------------------------------
# PS Core
# ---------------------------------------------------------------------------

class PsCoreDailyPoint(Row):
    d: str
    attach_total: Num = None
    active_total: Num = None
    attach_2g: Num = None
    attach_3g_total: float = 0.0
    attach_4g_total: float = 0.0
    active_2g: Num = None
    active_3g_total: float = 0.0
    active_4g_total: float = 0.0


class PsCoreLatestKpis(Row):
    date: str
    total_attach: float = 0.0
    total_active: float = 0.0
    attach_4g_total: float = 0.0
    active_4g_total: float = 0.0
    dod_attach: float | None = None
    dod_active: float | None = None
    wow_attach: float | None = None
    wow_active: float | None = None


# ---------------------------------------------------------------------------
# ISP
# ---------------------------------------------------------------------------

class IspTimeseries(Row):
    series: list[dict[str, Any]] = []
    numeric_keys: list[str] = []


class IspNumericSummary(Row):
    numeric_keys: list[str] = []
    sums: dict[str, float] = {}
    avgs: dict[str, float] = {}
    counts: dict[str, int] = {}
    row_count: int = 0


# ---------------------------------------------------------------------------
# EAS
# ---------------------------------------------------------------------------

class EasStatusSummary(Row):
    total_sites: Count = 0
    ok_sites: Count = 0
    nok_sites: Count = 0


class NokTimeseriesRow(Row):
    report_date: Day = ""
    nok_sites: Count = 0


class DistrictNokRow(Row):
    district: Text = None
    total_nok: Count = 0


class GridNokRow(Row):
    grid: Text = None
    total_nok: Count = 0


class WeeklyNokRow(Row):
    week_start: Day = ""
    nok_sites: Count = 0


# ---------------------------------------------------------------------------
# E-UTRAN / utilization
# ---------------------------------------------------------------------------

class EutranSummary(Row):
    avg_avgdl_tp: Num = None
    avg_prb_dl: Num = None
    avg_avgrrc: Num = None
    total_cells: Count = 0


class ThroughputPoint(Row):
    d: Day = ""
    avgdl_tp: Num = None
    prb_dl: Num = None
    avgrrc: Num = None


class GridDaily(Row):
    d: Day = ""
    grid: str = ""
    cells: Count = 0


class DistrictDaily(Row):
    d: Day = ""
    district: str = ""
    cells: Count = 0


class AreaUtilizationRow(Row):
    area: Text = None
    hu_cells: Count = 0
    hu_sites: Count = 0
    lu_cells: Count = 0
    lu_sites: Count = 0


# ---------------------------------------------------------------------------
# LPA
# ---------------------------------------------------------------------------

class NameCount(Row):
    name: Text = None
    cnt: Count = 0


class SeverityCount(Row):
    severity: Text = None
    cnt: Count = 0


class AgingSlabCount(Row):
    aging_slab: Text = None
    cnt: Count = 0

    @model_validator(mode="before")
    @classmethod
    def accept_slab_column(cls, data):
        if isinstance(data, dict) and data.get("aging_slab") is None and "slab" in data:
            data = {**data, "aging_slab": data["slab"]}
        return data


class LpaTimePoint(Row):
    date: str = ""
    count: Count = 0


class DistrictCount(Row):
    district: Text = None
    cnt: Count = 0


class GridCount(Row):
    grid: Text = None
    cnt: Count = 0


class LpaSummary(Row):
    names: list[NameCount] = []
    severities: list[SeverityCount] = []
    slabs: list[AgingSlabCount] = []
    times: list[LpaTimePoint] = []
    districts: list[DistrictCount] = []
    grids: list[GridCount] = []


class LpaFilterOptions(Row):
    regions: list[str] = []
    subregions: list[str] = []
    critical: list[str] = []
    aging_slabs: list[str] = []


# ---------------------------------------------------------------------------
# DG KPI / CP units
# ---------------------------------------------------------------------------

class DgKpiSummary(Row):
    distinct_engines: Zero = 0.0
    total_fuel: Zero = 0.0
    valid_fueling_entries: Zero = 0.0
    avg_score: Zero = 0.0
    score_entries: Zero = 0.0
    target_achieved: Zero = 0.0
    base_achieved: Zero = 0.0
    below_base: Zero = 0.0
    no_fueling: Zero = 0.0


class DgBreakdownRow(Row):
    region: str = Field(default="Unknown", alias="Region")
    subregion: str = Field(default="Unknown", alias="SubRegion")
    avg_score: Zero = 0.0
    score_entries: Zero = 0.0
    target_achieved: Zero = 0.0
    base_achieved: Zero = 0.0
    below_base: Zero = 0.0
    no_fueling: Zero = 0.0
    total_count: Zero = 0.0

    @field_validator("region", "subregion", mode="before")
    @classmethod
    def default_unknown(cls, v):
        return "Unknown" if v is None else str(v)


class CpUnitsSummaryRow(Row):
    region: Text = None
    subregion: Text = None
    site_count: Count = 0
    sum_kwh: Num = None
    avg_base: Num = None
    avg_target: Num = None
    avg_score: Num = None
    target_achieved: Count = 0
    base_achieved: Count = 0
    target_and_base_not_achieved: Count = 0
    zero_or_null_kwh: Count = 0


# ---------------------------------------------------------------------------
# ANOps
# ---------------------------------------------------------------------------

class AnopsFilterOptions(Row):
    subregions: list[str] = []
    districts: list[str] = []
    grids: list[str] = []


class AnopsSiteRow(Row):
    site_name: str = Field(default="", alias="SiteName")
    site_id: Text = Field(default=None, alias="SITE_ID")
    subregion: Text = Field(default=None, alias="SubRegion")
    district: Text = Field(default=None, alias="District")
    grid: Text = Field(default=None, alias="Grid")


class AnopsSiteDetailRow(Row):
    site_name: str = Field(default="", alias="SiteName")
    project_name: Text = Field(default=None, alias="ProjectName")
    status: Text = Field(default=None, alias="Status")
    attempt_date: Text = Field(default=None, alias="Attempt_date")
    v2g: Num = None
    v3g: Num = None
    v4g: Num = None


class AttemptStatusRow(Row):
    dt: Day = ""
    attempted: Count = 0
    resolved: Count = 0


# ---------------------------------------------------------------------------
# Franchise / site history
# ---------------------------------------------------------------------------

class FranchiseRow(Row):
    id: int | None = None
    remarks: Text = None
    franchise_id: Text = None
    franchise_name: Text = None
    site_name: Text = Field(default=None, alias="SiteName")
    region: Text = Field(default=None, alias="Region")
    subregion: Text = Field(default=None, alias="SubRegion")
    grid: Text = Field(default=None, alias="Grid")
    district: Text = Field(default=None, alias="District")
    address: Text = Field(default=None, alias="Address")
    latitude: Num = Field(default=None, alias="Latitude")
    longitude: Num = Field(default=None, alias="Longitude")


class SiteTrafficPoint(Row):
    dt: str
    rv2g: Num = None
    rv3g: Num = None
    volte: Num = None
    rd3g: Num = None
    rd4g: Num = None


class SiteHistory(Row):
    site_name: str
    availability: list[AvailabilityPoint] = []
    traffic: list[SiteTrafficPoint] = []


def validate_rows(model: type[Row], rows: list[dict[str, Any]]) -> list[Any]:
    """Validate a list of raw rows into ``model`` instances."""
    return [model.model_validate(r) for r in rows if isinstance(r, dict)]
