"""Franchise outlets joined with their site location."""

from __future__ import annotations

from netops.remote.client import RemoteClient
from netops.rpc.models import FranchiseRow, validate_rows


async def fetch_franchise_enriched(remote: RemoteClient) -> list[FranchiseRow]:
    return validate_rows(FranchiseRow, await remote.call("fetch_franchise_enriched"))
