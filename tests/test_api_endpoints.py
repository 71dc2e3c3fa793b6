"""Tests for the NetOps API data endpoints behind the session gate."""

import asyncio
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from netops.api.main import create_app
from netops.config import Config
from netops.remote.client import RemoteError
from tests.conftest import seed_session, seed_user

TIMEOUT = RemoteError("canceling statement due to statement timeout", code="57014")


class TestHealth:
    def test_healthy(self, client, remote):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["backend_configured"] is True
        assert data["environment"] == "development"
        assert remote.calls == []

    def test_degraded_without_backend(self):
        app = create_app(config=Config(SUPABASE_URL="", SUPABASE_API_KEY="", environment="development"))
        data = TestClient(app).get("/api/health").json()
        assert data["status"] == "degraded"
        assert data["backend_configured"] is False

    def test_request_id_header(self, client):
        assert client.get("/api/health").headers.get("X-Request-ID")


class TestErrorMapping:
    def test_remote_error_is_502(self, authed_client, remote):
        remote.script("fetch_ssl_subregions", RemoteError("permission denied", code="42501"))
        response = authed_client.get("/api/picklists/subregions")
        assert response.status_code == 502
        assert response.json() == {"detail": "[42501] permission denied"}

    def test_chunk_failure_is_502(self, authed_client, remote):
        remote.script("rpc_traffic_daily", [], RemoteError("permission denied", code="42501"))
        response = authed_client.get(
            "/api/traffic/daily", params={"date_from": "2024-05-01", "date_to": "2024-05-20"}
        )
        assert response.status_code == 502
        assert response.json()["detail"] == "[42501] permission denied"

    def test_deadline_is_504(self, remote):
        """Requests exceeding the configured deadline are cancelled with 504."""
        config = Config(
            SUPABASE_URL="https://backend.test",
            SUPABASE_API_KEY="test-key",
            environment="development",
            auth_cookie_name="nr_session",
            request_timeout=0.05,
        )
        client = TestClient(create_app(remote=remote, config=config))
        seed_user(remote, "operator", "s3cret")
        seed_session(remote, "a" * 64)
        client.cookies.set("nr_session", "a" * 64)

        async def slow(*args, **kwargs):
            await asyncio.sleep(1)
            return []

        with patch("netops.rpc.traffic.fetch_traffic_daily", new=slow):
            response = client.get("/api/traffic/daily")

        assert response.status_code == 504
        assert response.json() == {"detail": "Request timed out"}


class TestTraffic:
    def test_daily_is_chunked_by_week(self, authed_client, remote):
        response = authed_client.get(
            "/api/traffic/daily",
            params={"date_from": "2024-05-01", "date_to": "2024-05-20", "subregion": "North-1"},
        )
        assert response.status_code == 200
        assert remote.calls_to("rpc_traffic_daily") == [
            {"in_date_from": "2024-05-01", "in_date_to": "2024-05-07", "in_subregion": "North-1"},
            {"in_date_from": "2024-05-08", "in_date_to": "2024-05-14", "in_subregion": "North-1"},
            {"in_date_from": "2024-05-15", "in_date_to": "2024-05-20", "in_subregion": "North-1"},
        ]

    def test_daily_rows_merged_by_date(self, authed_client, remote):
        remote.script(
            "rpc_traffic_daily",
            [{"date": "2024-05-07", "total_gb": "3"}, {"date": "2024-05-01", "total_gb": 1}],
            [{"date": "2024-05-08", "total_gb": None}],
        )
        rows = authed_client.get(
            "/api/traffic/daily", params={"date_from": "2024-05-01", "date_to": "2024-05-10"}
        ).json()
        assert [r["date"] for r in rows] == ["2024-05-01", "2024-05-07", "2024-05-08"]
        assert rows[2]["total_gb"] == 0.0

    def test_daily_defaults_to_last_week(self, authed_client, remote):
        authed_client.get("/api/traffic/daily")
        assert 1 <= len(remote.calls_to("rpc_traffic_daily")) <= 2

    def test_latest_sorted(self, authed_client, remote):
        remote.script("rpc_traffic_latest_by_district", [
            {"district": "Rawalpindi", "total_gb": 5},
            {"district": None, "total_gb": 9},
            {"district": "Attock", "total_gb": 1},
        ])
        rows = authed_client.get(
            "/api/traffic/latest/district", params={"sort": "total_gb", "direction": "asc"}
        ).json()
        assert [r["key"] for r in rows] == ["Attock", "Rawalpindi", "UNKNOWN"]

    def test_latest_rejects_unknown_level(self, authed_client):
        assert authed_client.get("/api/traffic/latest/region").status_code == 422


class TestGis:
    def test_points_degrade_on_timeout(self, authed_client, remote):
        """Timeouts retry the map fetch with 200 then 100 rows."""
        remote.script("fetch_ssl_points", TIMEOUT, TIMEOUT, [
            {"site_id": 101, "sitename": "ISB-101", "latitude": 33.70, "longitude": 73.05},
            {"site_id": 102, "sitename": "ISB-102", "latitude": 33.72, "longitude": 73.07},
        ])
        response = authed_client.get("/api/gis/points")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert data["points"][0]["site_id"] == "101"
        assert data["center"] == pytest.approx([33.71, 73.06])
        limits = [args["_limit"] for args in remote.calls_to("fetch_ssl_points")]
        assert limits == [1500, 200, 100]

    def test_points_empty_map_uses_default_center(self, authed_client, remote):
        remote.script("fetch_ssl_points", TIMEOUT)
        data = authed_client.get("/api/gis/points").json()
        assert data["count"] == 0
        assert data["center"] == [33.6844, 73.0479]

    def test_points_site_query(self, authed_client, remote):
        remote.script("fetch_ssl_points", [
            {"site_id": 1, "sitename": "ISB-001", "latitude": 33.7, "longitude": 73.0},
            {"site_id": 2, "sitename": "LHR-002", "latitude": 31.5, "longitude": 74.3},
        ])
        data = authed_client.get("/api/gis/points", params={"site_query": "lhr"}).json()
        assert [p["sitename"] for p in data["points"]] == ["LHR-002"]

    def test_neighbors_by_site_id(self, authed_client, remote):
        remote.script("fetch_ssl_points", [
            {"site_id": "A", "latitude": 33.70, "longitude": 73.00},
            {"site_id": "B", "latitude": 33.71, "longitude": 73.00},
            {"site_id": "C", "latitude": 33.90, "longitude": 73.00},
        ])
        data = authed_client.get("/api/gis/neighbors", params={"site_id": "A"}).json()
        assert data["site_id"] == "A"
        assert [n["site_id"] for n in data["neighbors"]] == ["B"]

    def test_neighbors_unknown_site(self, authed_client, remote):
        remote.script("fetch_ssl_points", [])
        assert authed_client.get("/api/gis/neighbors", params={"site_id": "Z"}).status_code == 404

    def test_neighbors_post_needs_no_backend(self, authed_client, remote):
        body = {
            "selected": {"site_id": "A", "latitude": 33.70, "longitude": 73.00},
            "candidates": [
                {"site_id": "A", "latitude": 33.70, "longitude": 73.00},
                {"site_id": "B", "latitude": 33.71, "longitude": 73.00, "grid": "G-1"},
                {"site_id": "N", "latitude": None, "longitude": 73.00},
            ],
        }
        calls_before = len(remote.calls)
        data = authed_client.post("/api/gis/neighbors", json=body).json()
        assert [n["site_id"] for n in data["neighbors"]] == ["B"]
        assert data["neighbors"][0]["grid"] == "G-1"
        assert data["neighbors"][0]["distance_label"] == "1.11 km"
        # only the session lookups hit the backend
        assert all(method == "select" for method, _, _ in remote.calls[calls_before:])

    def test_sidebar_picklist_degrades(self, authed_client, remote):
        remote.script("fetch_ssl_subregions", RemoteError("down", code="NETWORK"))
        response = authed_client.get("/api/gis/subregions")
        assert response.status_code == 200
        assert response.json() == []


class TestAvailability:
    def test_kpi_summary_merges_all_row(self, authed_client, remote):
        remote.script("fetch_availability_kpi_summary", [
            {"label": "All", "parent_region": "All", "total_sites": 10, "achievement": 90},
            {"label": "North-1", "parent_region": "North", "total_sites": 4, "achievement": 80},
        ])
        data = authed_client.get("/api/availability/kpi/summary", params={"date": "2024-05-01"}).json()
        assert set(data) == {"PGS", "SB", "All"}
        assert data["All"]["total_sites"] == 20
        assert data["All"]["achievement"] == 90

    def test_kpi_max_date(self, authed_client, remote):
        remote.script("fetch_availability_kpi_max_date", [{"max_date": "2024-05-01"}])
        assert authed_client.get("/api/availability/kpi/max-date").json() == {"max_date": "2024-05-01"}


class TestComplaints:
    def test_sites_keep_wire_names(self, authed_client, remote):
        remote.script("complaints_sites_agg", [{"SiteName": "ISB-001", "SubRegion": "North-1", "complaints_count": "3"}])
        rows = authed_client.get("/api/complaints/sites", params={"subregion": "North-1"}).json()
        assert rows[0]["SiteName"] == "ISB-001"
        assert rows[0]["SubRegion"] == "North-1"
        assert rows[0]["complaints_count"] == 3
        assert remote.calls_to("complaints_sites_agg")[0]["p_limit"] == 1000


class TestInventory:
    def test_move_same_endpoint_rejected(self, authed_client, remote):
        body = {
            "source_type": "Warehouse",
            "source_name": "Lahore",
            "asset_id": 1,
            "asset_type": "Battery",
            "tx_date": "2024-05-01",
            "dest_type": "Warehouse",
            "dest_name": "Lahore",
        }
        response = authed_client.post("/api/inventory/move", json=body)
        assert response.status_code == 400
        assert remote.calls_to("log_remove_asset") == []

    def test_move_bad_date(self, authed_client):
        body = {
            "source_type": "Site",
            "source_name": "ISB-001",
            "asset_id": 1,
            "asset_type": "Battery",
            "tx_date": "01/05/2024",
            "dest_type": "Warehouse",
            "dest_name": "Lahore",
        }
        assert authed_client.post("/api/inventory/move", json=body).status_code == 422

    def test_warehouse_names(self, authed_client):
        response = authed_client.get("/api/inventory/endpoints/Warehouse")
        assert response.json() == ["Islamabad", "Lahore", "Karachi"]
