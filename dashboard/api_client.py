"""HTTP client for the NetOps API, carrying the session cookie.

Redirects are never followed: the API answers an unrecognized session with a
redirect to ``/login``, which this client turns into :class:`SessionExpired`
so the dashboard can show its login form again.
"""

import logging
from typing import Any, Callable

import requests

from netops.config import get_config

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 130


class SessionExpired(Exception):
    """The API no longer recognizes the session cookie."""


class PortalAPIError(Exception):
    """A non-auth API failure; ``str(exc)`` is the message to show."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def _clean(params: dict[str, Any] | None) -> dict[str, Any]:
    return {k: v for k, v in (params or {}).items() if v not in (None, "", [])}


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or f"HTTP {resp.status_code}")
    return f"HTTP {resp.status_code}"


class PortalClient:
    """Talks to the NetOps API with one ``requests.Session``."""

    def __init__(self, base_url: str, session: requests.Session | None = None, timeout: float = _DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # -- plumbing -----------------------------------------------------------

    def _send(self, send: Callable[..., requests.Response], path: str, **kwargs: Any) -> requests.Response:
        """Issue one request; transport failures surface as :class:`PortalAPIError`."""
        try:
            return send(f"{self.base_url}{path}", allow_redirects=False, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error("Request to %s failed: %s", path, e)
            raise PortalAPIError(0, f"API unreachable: {e}") from e

    def _check(self, resp: requests.Response) -> Any:
        if resp.is_redirect or resp.status_code == 401:
            raise SessionExpired()
        if resp.status_code >= 400:
            raise PortalAPIError(resp.status_code, _error_message(resp))
        return resp.json()

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._check(self._send(self.session.get, path, params=_clean(params)))

    def post(self, path: str, payload: dict[str, Any] | None = None) -> Any:
        return self._check(self._send(self.session.post, path, json=payload or {}))

    # -- auth ---------------------------------------------------------------

    def login(self, username: str, password: str) -> None:
        """Start a session. Raises :class:`PortalAPIError` with the form-level message."""
        resp = self._send(self.session.post, "/api/auth/login", json={"username": username, "password": password})
        if resp.status_code != 200:
            raise PortalAPIError(resp.status_code, _error_message(resp))

    def logout(self) -> None:
        try:
            self.post("/api/auth/logout")
        except (SessionExpired, PortalAPIError) as e:
            logger.warning("Logout failed: %s", e)
        self.session.cookies.clear()

    def me(self, raise_errors: bool = False) -> dict | None:
        """Current user, or ``None`` when the session is not recognized.

        Other API failures also give ``None`` unless ``raise_errors`` is set,
        in which case the :class:`PortalAPIError` propagates.
        """
        try:
            return self.get("/api/auth/me")
        except SessionExpired:
            return None
        except PortalAPIError as e:
            if raise_errors:
                raise
            logger.warning("Session lookup failed: %s", e)
            return None

    # -- data ---------------------------------------------------------------

    def subregions(self) -> list[str]:
        return self.get("/api/gis/subregions")

    def grids(self, subregion: str | None) -> list[str]:
        return self.get("/api/gis/grids", {"subregion": subregion})

    def districts(self, subregion: str | None, grid: str | None) -> list[str]:
        return self.get("/api/gis/districts", {"subregion": subregion, "grid": grid})

    def map_points(self, filters: dict[str, Any], site_query: str = "", address_query: str = "") -> dict:
        return self.get("/api/gis/points", {**filters, "site_query": site_query, "address_query": address_query})

    def neighbors(self, selected: dict, candidates: list[dict]) -> dict:
        return self.post("/api/gis/neighbors", {"selected": selected, "candidates": candidates})

    def traffic_daily(self, date_from: str, date_to: str, subregion: str | None = None) -> list[dict]:
        return self.get("/api/traffic/daily", {"date_from": date_from, "date_to": date_to, "subregion": subregion})

    def traffic_latest(self, level: str, subregion: str | None = None, sort: str = "total_gb") -> list[dict]:
        return self.get(f"/api/traffic/latest/{level}", {"subregion": subregion, "sort": sort})

    def availability_bundle(self, filters: dict[str, Any]) -> dict:
        return self.get("/api/availability/bundle", filters)

    def complaint_sites(self, filters: dict[str, Any]) -> list[dict]:
        return self.get("/api/complaints/sites", filters)


def get_client(base_url: str | None = None) -> PortalClient:
    return PortalClient(base_url or get_config().api_base_url)
