"""
Geospatial helpers for the site map

Great-circle distances, nearest-neighbor ranking around a selected site,
map centering and free-text filtering over map points. Everything here is a
pure function of its inputs.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from netops.rpc.models import MapPoint

EARTH_RADIUS_M = 6_371_000.0
DEFAULT_CENTER = (33.6844, 73.0479)
NEIGHBOR_RADIUS_KM = 5.0
NEIGHBOR_LIMIT = 5


@dataclass(frozen=True)
class Neighbor:
    site_id: str
    distance_km: float
    district: Optional[str] = None
    grid: Optional[str] = None

    @property
    def distance_label(self) -> str:
        return f"{self.distance_km:.2f} km"

    def to_dict(self) -> dict:
        return {
            "site_id": self.site_id,
            "distance_km": self.distance_km,
            "distance_label": self.distance_label,
            "district": self.district,
            "grid": self.grid,
        }


def haversine_m(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Great-circle distance in meters between two ``(lat, lon)`` pairs."""
    lat1, lon1 = a
    lat2, lon2 = b
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    s = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(s), math.sqrt(1 - s))


def find_neighbors(
    selected: Optional[MapPoint],
    candidates: Iterable[MapPoint],
    *,
    max_km: float = NEIGHBOR_RADIUS_KM,
    limit: int = NEIGHBOR_LIMIT,
) -> list[Neighbor]:
    """Nearest ``limit`` candidates within ``max_km`` of ``selected``.

    The selected site itself and candidates without both coordinates are
    skipped. Results are sorted by ascending distance.
    """
    if selected is None or not selected.plottable:
        return []

    here = (selected.latitude, selected.longitude)
    ranked = []
    for point in candidates:
        if point.site_id == selected.site_id or not point.plottable:
            continue
        distance_km = haversine_m(here, (point.latitude, point.longitude)) / 1000
        if distance_km <= max_km:
            ranked.append(Neighbor(point.site_id, distance_km, point.district, point.grid))

    ranked.sort(key=lambda n: n.distance_km)
    return ranked[:limit]


def plottable(points: Iterable[MapPoint]) -> list[MapPoint]:
    return [p for p in points if p.plottable]


def centroid(points: Iterable[MapPoint]) -> tuple[float, float]:
    """Mean coordinate of plottable points, or the default map center."""
    located = plottable(points)
    if not located:
        return DEFAULT_CENTER
    lat = sum(p.latitude for p in located) / len(located)
    lon = sum(p.longitude for p in located) / len(located)
    return lat, lon


def _tokens(query: Optional[str]) -> list[str]:
    return (query or "").lower().split()


def _contains_all(haystack: str, tokens: Sequence[str]) -> bool:
    lowered = haystack.lower()
    return all(t in lowered for t in tokens)


def search_points(
    points: Iterable[MapPoint],
    site_query: str = "",
    address_query: str = "",
    *,
    subregion: Optional[str] = None,
    grid: Optional[str] = None,
    district: Optional[str] = None,
) -> list[MapPoint]:
    """Filter map points by free text and exact picklist values.

    Every whitespace-separated token of ``site_query`` must appear in the
    site name, id, grid, district or address; every token of
    ``address_query`` must appear in the address.
    """
    site_tokens = _tokens(site_query)
    address_tokens = _tokens(address_query)

    matches = []
    for p in points:
        site_hay = " ".join([p.sitename or "", p.site_id or "", p.grid or "", p.district or "", p.address or ""])
        if not _contains_all(site_hay, site_tokens):
            continue
        if not _contains_all(p.address or "", address_tokens):
            continue
        if subregion and p.subregion != subregion:
            continue
        if grid and p.grid != grid:
            continue
        if district and p.district != district:
            continue
        matches.append(p)
    return matches
