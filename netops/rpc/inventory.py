"""Asset inventory: list assets at an endpoint and move them between endpoints.

A move is two procedures: ``log_remove_asset`` records the removal and
returns a log row, then ``apply_to_destination`` books that log entry at
the destination.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional

from netops.fetch.chunking import FetchError
from netops.remote.client import RemoteClient
from netops.utils import to_number

logger = logging.getLogger(__name__)

EndpointType = Literal["Site", "Warehouse", "R&R"]

ENDPOINT_TABLES: dict[str, str] = {
    "Site": "Inventory_Master",
    "Warehouse": "Warehouse",
    "R&R": "R&R",
}
WAREHOUSE_NAMES = ["Islamabad", "Lahore", "Karachi"]
RR_NAMES = ["Huawei", "ZTE"]
TRANSACTIONS_TABLE = "Asset_Transactions"


def is_endpoint_type(value: str) -> bool:
    return value in ENDPOINT_TABLES


def _first(data: Any) -> Any:
    if isinstance(data, list):
        return data[0] if data else None
    return data


async def fetch_endpoint_names(remote: RemoteClient, kind: EndpointType) -> list[str]:
    if kind == "Site":
        rows = await remote.select("SSL", "SiteName", order="SiteName")
        return [r["SiteName"] for r in rows if r.get("SiteName")]
    if kind == "Warehouse":
        return list(WAREHOUSE_NAMES)
    return list(RR_NAMES)


async def fetch_assets(remote: RemoteClient, kind: EndpointType, name: str) -> list[dict[str, Any]]:
    rows = await remote.select(ENDPOINT_TABLES[kind], "*", eq={"SiteName": name})
    assets = []
    for row in rows:
        asset_id = to_number(row.get("id"))
        assets.append({**row, "id": int(asset_id) if asset_id is not None else None})
    return assets


async def log_remove_asset(
    remote: RemoteClient,
    source_type: EndpointType,
    source_name: str,
    asset_id: int,
    asset_type: str,
    purpose: Optional[str],
    tx_date: str,
) -> Any:
    data = await remote.call_scalar(
        "log_remove_asset",
        {
            "p_source_type": source_type,
            "p_source_name": source_name,
            "p_asset_id": asset_id,
            "p_asset_type": asset_type,
            "p_purpose": purpose,
            "p_tx_date": tx_date,
        },
    )
    return _first(data)


async def apply_to_destination(
    remote: RemoteClient, log_id: int, dest_type: EndpointType, dest_name: str
) -> Any:
    data = await remote.call_scalar(
        "apply_to_destination",
        {"p_log_id": log_id, "p_dest_type": dest_type, "p_dest_name": dest_name},
    )
    return _first(data)


def _log_id(logged: Any) -> Optional[int]:
    if isinstance(logged, dict):
        for key in ("log_id", "id"):
            number = to_number(logged.get(key))
            if number is not None:
                return int(number)
        return None
    number = to_number(logged)
    return int(number) if number is not None else None


async def move_asset(
    remote: RemoteClient,
    *,
    source_type: EndpointType,
    source_name: str,
    asset_id: int,
    asset_type: str,
    purpose: Optional[str],
    tx_date: str,
    dest_type: EndpointType,
    dest_name: str,
) -> dict[str, Any]:
    """Remove an asset from its source and book it at the destination."""
    logged = await log_remove_asset(
        remote, source_type, source_name, asset_id, asset_type, purpose, tx_date
    )
    log_id = _log_id(logged)
    if log_id is None:
        raise FetchError("log_remove_asset returned no log id", fn="log_remove_asset")
    applied = await apply_to_destination(remote, log_id, dest_type, dest_name)
    logger.info(
        "Moved asset %s from %s/%s to %s/%s (log %d)",
        asset_id, source_type, source_name, dest_type, dest_name, log_id,
    )
    return {"log_id": log_id, "removed": logged, "applied": applied}


async def fetch_transactions(remote: RemoteClient, limit: int = 500) -> list[dict[str, Any]]:
    return await remote.select(TRANSACTIONS_TABLE, "*", order="created_at", descending=True, limit=limit)
