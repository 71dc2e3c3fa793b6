"""Tests for the dashboard's HTTP client."""

from unittest.mock import MagicMock

import pytest
import requests

from dashboard.api_client import PortalAPIError, PortalClient, SessionExpired


def _response(status=200, body=None, redirect=False, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.is_redirect = redirect
    resp.text = text
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def portal(session):
    return PortalClient("http://api.test/", session=session, timeout=5)


class TestRequests:
    def test_get_drops_empty_params(self, portal, session):
        session.get.return_value = _response(body=["G-1"])

        assert portal.grids(None) == ["G-1"]

        session.get.assert_called_once_with(
            "http://api.test/api/gis/grids", params={}, allow_redirects=False, timeout=5
        )

    def test_redirect_means_session_expired(self, portal, session):
        session.get.return_value = _response(302, redirect=True)
        with pytest.raises(SessionExpired):
            portal.subregions()

    def test_401_means_session_expired(self, portal, session):
        session.get.return_value = _response(401, {"authed": False})
        with pytest.raises(SessionExpired):
            portal.subregions()

    def test_error_detail_surfaces(self, portal, session):
        session.get.return_value = _response(502, {"detail": "[57014] canceling statement"})
        with pytest.raises(PortalAPIError) as exc_info:
            portal.traffic_daily("2024-05-01", "2024-05-07")
        assert exc_info.value.status_code == 502
        assert str(exc_info.value) == "[57014] canceling statement"

    def test_error_without_json(self, portal, session):
        session.get.return_value = _response(500, text="")
        with pytest.raises(PortalAPIError) as exc_info:
            portal.subregions()
        assert exc_info.value.message == "HTTP 500"

    def test_neighbors_posts_points(self, portal, session):
        session.post.return_value = _response(body={"site_id": "A", "neighbors": []})
        portal.neighbors({"site_id": "A"}, [{"site_id": "B"}])
        _, kwargs = session.post.call_args
        assert kwargs["json"] == {"selected": {"site_id": "A"}, "candidates": [{"site_id": "B"}]}


class TestAuth:
    def test_login_ok(self, portal, session):
        session.post.return_value = _response(body={"ok": True})
        portal.login("operator", "s3cret")
        _, kwargs = session.post.call_args
        assert kwargs["json"] == {"username": "operator", "password": "s3cret"}

    def test_login_error_message(self, portal, session):
        session.post.return_value = _response(401, {"error": "Invalid credentials"})
        with pytest.raises(PortalAPIError) as exc_info:
            portal.login("operator", "nope")
        assert exc_info.value.message == "Invalid credentials"

    def test_me_none_when_expired(self, portal, session):
        session.get.return_value = _response(401, {"authed": False})
        assert portal.me() is None

    def test_logout_clears_cookies_even_on_failure(self, portal, session):
        session.post.side_effect = requests.ConnectionError("refused")
        portal.logout()
        session.cookies.clear.assert_called_once()


class TestTransportErrors:
    def test_get_connection_error(self, portal, session):
        """A refused connection surfaces as an API error, not a raw requests exception."""
        session.get.side_effect = requests.ConnectionError("API down")
        with pytest.raises(PortalAPIError) as exc_info:
            portal.subregions()
        assert exc_info.value.status_code == 0
        assert "API down" in exc_info.value.message

    def test_post_read_timeout(self, portal, session):
        session.post.side_effect = requests.ReadTimeout("read timed out")
        with pytest.raises(PortalAPIError):
            portal.neighbors({"site_id": "A"}, [])

    def test_login_connection_error(self, portal, session):
        """The login form gets a message it can show and the user can retry."""
        session.post.side_effect = requests.ConnectionError("API down")
        with pytest.raises(PortalAPIError) as exc_info:
            portal.login("operator", "s3cret")
        assert exc_info.value.status_code == 0

    def test_me_none_on_server_error(self, portal, session):
        session.get.return_value = _response(500, {"detail": "Server misconfiguration"})
        assert portal.me() is None

    def test_me_raises_on_server_error_when_asked(self, portal, session):
        session.get.return_value = _response(500, {"detail": "Server misconfiguration"})
        with pytest.raises(PortalAPIError) as exc_info:
            portal.me(raise_errors=True)
        assert exc_info.value.message == "Server misconfiguration"

    def test_me_none_when_unreachable(self, portal, session):
        session.get.side_effect = requests.ConnectionError("API down")
        assert portal.me() is None
