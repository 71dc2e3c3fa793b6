"""Tests for haversine distance, neighbor ranking and map-point search."""

import pytest

from netops.geo import (
    DEFAULT_CENTER,
    Neighbor,
    centroid,
    find_neighbors,
    haversine_m,
    plottable,
    search_points,
)
from netops.rpc.models import MapPoint

# One hundredth of a degree of latitude is about 1.112 km
KM_PER_CENTIDEGREE = 1.11195


def _point(site_id, dlat=0.0, lat=33.70, lon=73.00, **kw):
    return MapPoint(site_id=site_id, latitude=None if lat is None else lat + dlat, longitude=lon, **kw)


@pytest.fixture
def origin():
    return _point("A", district="Islamabad", grid="G-1")


@pytest.fixture
def candidates(origin):
    return [
        origin,
        _point("B", 0.01),
        _point("C", 0.02),
        _point("D", 0.03),
        _point("E", 0.04),
        _point("F", 0.045),
        _point("G", 0.005, district="Rawalpindi", grid="R-2"),
        _point("H", lat=None),
        _point("I", -0.015),
    ]


class TestHaversine:
    def test_zero_distance(self):
        """The same point is 0 m away."""
        assert haversine_m((33.7, 73.0), (33.7, 73.0)) == 0

    def test_one_degree_latitude(self):
        """One degree of latitude on the 6,371 km sphere is ~111.195 km."""
        assert haversine_m((0.0, 0.0), (1.0, 0.0)) == pytest.approx(111_194.9, rel=1e-4)

    def test_symmetric(self):
        """Distance does not depend on argument order."""
        a, b = (33.68, 73.04), (31.52, 74.35)
        assert haversine_m(a, b) == pytest.approx(haversine_m(b, a))


class TestFindNeighbors:
    def test_top_five_sorted_ascending(self, origin, candidates):
        """At most five neighbors, nearest first."""
        result = find_neighbors(origin, candidates)
        assert [n.site_id for n in result] == ["G", "B", "I", "C", "D"]
        distances = [n.distance_km for n in result]
        assert distances == sorted(distances)

    def test_excludes_self_missing_coordinates_and_far_sites(self, origin, candidates):
        """The reference site, unlocated sites and sites beyond 5 km never appear."""
        ids = {n.site_id for n in find_neighbors(origin, candidates, limit=50)}
        assert "A" not in ids
        assert "H" not in ids
        assert "F" not in ids
        assert ids == {"B", "C", "D", "E", "G", "I"}

    def test_all_within_radius(self, origin, candidates):
        """Every returned distance is <= max_km."""
        for n in find_neighbors(origin, candidates, max_km=2.0, limit=50):
            assert n.distance_km <= 2.0

    def test_full_precision_with_two_decimal_label(self, origin):
        """distance_km keeps full precision; the label rounds to 2 decimals."""
        (n,) = find_neighbors(origin, [_point("B", 0.01)])
        assert n.distance_km == pytest.approx(KM_PER_CENTIDEGREE, rel=1e-3)
        assert n.distance_label == "1.11 km"

    def test_carries_district_and_grid(self, origin, candidates):
        """Neighbor rows keep the candidate's district and grid."""
        nearest = find_neighbors(origin, candidates)[0]
        assert (nearest.district, nearest.grid) == ("Rawalpindi", "R-2")

    def test_selected_without_coordinates(self, candidates):
        """A selected site lacking a coordinate yields no neighbors."""
        assert find_neighbors(_point("X", lat=None), candidates) == []

    def test_no_selection(self, candidates):
        assert find_neighbors(None, candidates) == []

    def test_deterministic(self, origin, candidates):
        """Same inputs, same output."""
        assert find_neighbors(origin, candidates) == find_neighbors(origin, list(candidates))

    def test_default_center_scenario(self):
        """A nearby site in Islamabad is kept, one in the hills is dropped."""
        center = MapPoint(site_id="REF", latitude=DEFAULT_CENTER[0], longitude=DEFAULT_CENTER[1])
        near = MapPoint(site_id="NEAR", latitude=33.70, longitude=73.05)
        far = MapPoint(site_id="FAR", latitude=34.5, longitude=74.0)

        result = find_neighbors(center, [near, far])

        assert [n.site_id for n in result] == ["NEAR"]
        assert 1.0 < result[0].distance_km < 5.0
        assert haversine_m(DEFAULT_CENTER, (34.5, 74.0)) / 1000 > 100

    def test_to_dict(self):
        n = Neighbor("S1", 1.234567, "D", "G")
        assert n.to_dict() == {
            "site_id": "S1",
            "distance_km": 1.234567,
            "distance_label": "1.23 km",
            "district": "D",
            "grid": "G",
        }


class TestMapHelpers:
    def test_coordinates_are_paired(self):
        """A point with only one coordinate is treated as unlocated."""
        p = MapPoint(site_id="X", latitude=33.7, longitude=None)
        assert p.latitude is None and not p.plottable

    def test_site_id_falls_back_to_sitename(self):
        p = MapPoint.model_validate({"sitename": "ISB-001", "latitude": "33.7", "longitude": "73.0"})
        assert p.site_id == "ISB-001"
        assert p.latitude == pytest.approx(33.7)

    def test_centroid_default(self):
        """With nothing plottable the map centers on the default location."""
        assert centroid([_point("H", lat=None)]) == DEFAULT_CENTER

    def test_centroid_mean(self):
        lat, lon = centroid([_point("A", 0.0), _point("B", 0.02)])
        assert lat == pytest.approx(33.71)
        assert lon == pytest.approx(73.0)

    def test_plottable_filters(self, candidates):
        assert "H" not in {p.site_id for p in plottable(candidates)}


class TestSearchPoints:
    @pytest.fixture
    def points(self):
        return [
            MapPoint(site_id="ISB-001", sitename="ISB-001", grid="G-1", district="Islamabad",
                     subregion="North-1", address="Blue Area, Jinnah Avenue", latitude=33.7, longitude=73.0),
            MapPoint(site_id="RWP-010", sitename="RWP-010", grid="R-2", district="Rawalpindi",
                     subregion="North-1", address="Saddar Road", latitude=33.6, longitude=73.05),
            MapPoint(site_id="LHR-100", sitename="LHR-100", grid="L-5", district="Lahore",
                     subregion="Central-1", address="Mall Road", latitude=31.5, longitude=74.3),
        ]

    def test_all_tokens_case_insensitive(self, points):
        """Every token must match somewhere in the site fields."""
        assert [p.site_id for p in search_points(points, "isb blue")] == ["ISB-001"]
        assert search_points(points, "isb lahore") == []

    def test_address_query(self, points):
        assert [p.site_id for p in search_points(points, address_query="road")] == ["RWP-010", "LHR-100"]

    def test_exact_picklist_filters(self, points):
        result = search_points(points, subregion="North-1", district="Rawalpindi")
        assert [p.site_id for p in result] == ["RWP-010"]

    def test_empty_query_returns_all(self, points):
        assert len(search_points(points)) == 3
