"""Request-scoped dependencies shared by the routers.

The remote client and session store live on ``app.state``. The client is
built from settings on first use, so a missing backend URL or key surfaces
as :class:`~netops.remote.client.ConfigurationError` on the first request
that needs it, never at startup.
"""

import asyncio
from typing import Any, Awaitable, Optional

from fastapi import Query, Request

from netops.auth.sessions import SessionStore
from netops.config import Config
from netops.remote.client import RemoteClient, create_remote_client
from netops.rpc.common import FilterState


def get_app_config(request: Request) -> Config:
    return request.app.state.config


def get_remote(request: Request) -> RemoteClient:
    state = request.app.state
    if state.remote is None:
        state.remote = create_remote_client(state.config)
    return state.remote


def get_session_store(request: Request) -> SessionStore:
    state = request.app.state
    if state.session_store is None:
        state.session_store = SessionStore(
            get_remote(request), ttl_hours=state.config.session_ttl_hours
        )
    return state.session_store


def session_cookie_name(request: Request) -> str:
    return get_app_config(request).auth_cookie_name


async def bounded(request: Request, call: Awaitable[Any]) -> Any:
    """Await a fetch under the configured request deadline.

    Expiry cancels the fetch, including its in-flight HTTP request, and
    raises ``asyncio.TimeoutError``.
    """
    return await asyncio.wait_for(call, timeout=get_app_config(request).request_timeout)


def filter_state(
    region: Optional[str] = Query(default=None),
    subregion: Optional[str] = Query(default=None),
    district: Optional[str] = Query(default=None),
    grid: Optional[str] = Query(default=None),
    sitename: Optional[str] = Query(default=None),
    date_from: Optional[str] = Query(default=None),
    date_to: Optional[str] = Query(default=None),
) -> FilterState:
    """Query-string filters; blanks and ``__ALL__`` become ``None``."""
    return FilterState.from_params(
        region=region,
        subregion=subregion,
        district=district,
        grid=grid,
        sitename=sitename,
        date_from=date_from,
        date_to=date_to,
    )
