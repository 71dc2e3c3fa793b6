"""Pydantic request/response models for the NetOps API.

Data endpoints return the row schemas from :mod:`netops.rpc.models`
directly; only the auth, health and geo payloads are defined here.
"""

from pydantic import BaseModel, Field, field_validator

from netops.rpc.models import MapPoint


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""

    @field_validator("username", "password", mode="before")
    @classmethod
    def coerce_none_to_empty(cls, v):
        return "" if v is None else v


class OkResponse(BaseModel):
    ok: bool = True


class MeResponse(BaseModel):
    authed: bool
    username: str | None = None
    is_admin: bool = False


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str
    backend_configured: bool
    environment: str
    version: str


# ---------------------------------------------------------------------------
# Geo
# ---------------------------------------------------------------------------

class NeighborItem(BaseModel):
    site_id: str
    distance_km: float
    distance_label: str
    district: str | None = None
    grid: str | None = None


class NeighborsRequest(BaseModel):
    selected: MapPoint
    candidates: list[MapPoint] = Field(default_factory=list)
    max_km: float = Field(default=5.0, gt=0)
    limit: int = Field(default=5, ge=1, le=50)


class NeighborsResponse(BaseModel):
    site_id: str
    neighbors: list[NeighborItem]


class MapPointsResponse(BaseModel):
    points: list[MapPoint]
    center: tuple[float, float]
    count: int
