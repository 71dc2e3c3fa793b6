"""Session gate: every non-public path requires a recognized session.

Public paths pass straight through. For anything else the session cookie is
resolved through the :class:`~netops.auth.sessions.SessionStore`; a request
without a recognized session is redirected to ``/login?next=<path>``.
"""

import logging
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import RedirectResponse

from netops.remote.client import ConfigurationError

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
PUBLIC_PREFIXES = ("/login", "/api/auth", "/static", "/favicon.ico", "/api/health")


def is_public_path(path: str) -> bool:
    """Match whole path segments, so ``/loginfoo`` is not public."""
    return any(path == prefix or path.startswith(prefix + "/") for prefix in PUBLIC_PREFIXES)


def login_redirect_url(path: str) -> str:
    """Login URL carrying the originally requested path as ``next``."""
    return f"{LOGIN_PATH}?next={quote(path or '/', safe='/')}"


async def session_gate_middleware(request: Request, call_next):
    """Let public paths through; redirect protected ones without a session."""
    path = request.url.path
    if is_public_path(path):
        return await call_next(request)

    from netops.api.deps import get_session_store, session_cookie_name

    token = request.cookies.get(session_cookie_name(request))
    user = None
    if token:
        try:
            user = await get_session_store(request).resolve(token)
        except ConfigurationError as exc:
            logger.error("Session gate cannot reach the backend: %s", exc)
            user = None

    if user is None:
        return RedirectResponse(login_redirect_url(path), status_code=307)

    request.state.user = user
    return await call_next(request)
