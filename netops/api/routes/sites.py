"""Per-site history, franchise outlets and asset inventory."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from netops.api.deps import bounded, get_remote
from netops.remote.client import RemoteClient
from netops.rpc import franchise, inventory, sites
from netops.rpc.inventory import EndpointType

router = APIRouter(prefix="/api", tags=["sites"])


class MoveAssetRequest(BaseModel):
    source_type: EndpointType
    source_name: str = Field(..., min_length=1)
    asset_id: int
    asset_type: str = Field(..., min_length=1)
    purpose: Optional[str] = None
    tx_date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    dest_type: EndpointType
    dest_name: str = Field(..., min_length=1)


@router.get("/sites/{site_name}/history")
async def site_history(site_name: str, request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, sites.fetch_site_history(remote, site_name))


@router.get("/franchise")
async def franchise_outlets(request: Request, remote: RemoteClient = Depends(get_remote)):
    return await bounded(request, franchise.fetch_franchise_enriched(remote))


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------

@router.get("/inventory/endpoints/{kind}")
async def inventory_endpoints(
    kind: EndpointType, request: Request, remote: RemoteClient = Depends(get_remote)
):
    return await bounded(request, inventory.fetch_endpoint_names(remote, kind))


@router.get("/inventory/assets")
async def inventory_assets(
    request: Request,
    kind: EndpointType,
    name: str,
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, inventory.fetch_assets(remote, kind, name))


@router.post("/inventory/move")
async def inventory_move(
    body: MoveAssetRequest, request: Request, remote: RemoteClient = Depends(get_remote)
):
    """Move an asset between endpoints (remove at source, then apply at destination)."""
    if body.source_type == body.dest_type and body.source_name == body.dest_name:
        raise HTTPException(status_code=400, detail="Source and destination are the same")
    return await bounded(request, inventory.move_asset(remote, **body.model_dump()))


@router.get("/inventory/transactions")
async def inventory_transactions(
    request: Request,
    limit: int = Query(default=500, ge=1, le=5000),
    remote: RemoteClient = Depends(get_remote),
):
    return await bounded(request, inventory.fetch_transactions(remote, limit))
