"""Per-site history: daily availability and radio traffic."""

from __future__ import annotations

from typing import Any, Optional

from netops.remote.client import RemoteClient
from netops.rpc.models import AvailabilityPoint, SiteHistory, SiteTrafficPoint
from netops.utils import to_number

AVAILABILITY_COLUMNS = 'Report_Date, Overall, "2G", "3G", "4G"'
TRAFFIC_COLUMNS = (
    'Report_Date, "RadioVoice_2G_Traffic", "RadioVoice_3G_Traffic", "VoLTE_Voice_Traffic", '
    '"RadioData_3G_Traffic_GB", "RadioData_4G_Traffic_GB"'
)


def scale_pct(value: Any) -> Optional[float]:
    """Availability is stored as a fraction; charts want percent."""
    number = to_number(value)
    return None if number is None else number * 100


def availability_point(row: dict[str, Any]) -> AvailabilityPoint:
    return AvailabilityPoint(
        dt=row.get("Report_Date"),
        overall=scale_pct(row.get("Overall")),
        v2g=scale_pct(row.get("2G")),
        v3g=scale_pct(row.get("3G")),
        v4g=scale_pct(row.get("4G")),
    )


def traffic_point(row: dict[str, Any]) -> SiteTrafficPoint:
    return SiteTrafficPoint(
        dt=str(row["Report_Date"]),
        rv2g=row.get("RadioVoice_2G_Traffic"),
        rv3g=row.get("RadioVoice_3G_Traffic"),
        volte=row.get("VoLTE_Voice_Traffic"),
        rd3g=row.get("RadioData_3G_Traffic_GB"),
        rd4g=row.get("RadioData_4G_Traffic_GB"),
    )


async def fetch_site_history(remote: RemoteClient, site_name: str) -> SiteHistory:
    availability = await remote.select(
        "Cell_Availability", AVAILABILITY_COLUMNS, eq={"SiteName": site_name}, order="Report_Date"
    )
    traffic = await remote.select(
        "traffic", TRAFFIC_COLUMNS, eq={"Site": site_name}, order="Report_Date"
    )
    return SiteHistory(
        site_name=site_name,
        availability=[availability_point(r) for r in availability],
        traffic=[traffic_point(r) for r in traffic if r.get("Report_Date")],
    )
