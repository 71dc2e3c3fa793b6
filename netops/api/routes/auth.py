"""Login, logout and session lookup endpoints, plus the bare login page."""

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse

from netops.api.deps import get_app_config, get_session_store, session_cookie_name
from netops.api.models import LoginRequest, MeResponse, OkResponse
from netops.auth.sessions import LoginError
from netops.remote.client import RemoteError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _set_session_cookie(request: Request, response, token: str) -> None:
    config = get_app_config(request)
    response.set_cookie(
        key=config.auth_cookie_name,
        value=token,
        max_age=config.session_max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=config.is_production,
    )


def _clear_session_cookie(request: Request, response) -> None:
    config = get_app_config(request)
    response.set_cookie(
        key=config.auth_cookie_name,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        samesite="lax",
        secure=config.is_production,
    )


@router.post("/api/auth/login")
async def login(body: LoginRequest, request: Request):
    """Check credentials and start a session cookie."""
    store = get_session_store(request)
    try:
        user = await store.authenticate(body.username, body.password)
        token = await store.create_session(user)
    except LoginError as exc:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    except RemoteError as exc:
        logger.error("Login failed: %s", exc.as_log_fields())
        return JSONResponse(status_code=500, content={"error": "Login failed"})

    response = JSONResponse(content=OkResponse().model_dump())
    _set_session_cookie(request, response, token)
    logger.info("Login succeeded for %s", user.username)
    return response


@router.post("/api/auth/logout", response_model=OkResponse)
async def logout(request: Request):
    """Revoke the current session (if any) and clear the cookie."""
    token = request.cookies.get(session_cookie_name(request))
    if token:
        await get_session_store(request).revoke(token)
    response = JSONResponse(content=OkResponse().model_dump())
    _clear_session_cookie(request, response)
    return response


@router.get("/api/auth/me", response_model=MeResponse)
async def me(request: Request):
    """Report whether the session cookie is recognized."""
    token = request.cookies.get(session_cookie_name(request))
    user = await get_session_store(request).resolve(token) if token else None
    if user is None:
        return JSONResponse(status_code=401, content={"authed": False})
    is_admin = user.username.strip().lower() in get_app_config(request).admin_usernames
    return MeResponse(authed=True, username=user.username, is_admin=is_admin)


_LOGIN_PAGE = """<!doctype html>
<html><head><meta charset="utf-8"><title>NetOps - Sign in</title></head>
<body>
<form id="login">
  <input name="username" placeholder="Username" autocomplete="username">
  <input name="password" type="password" placeholder="Password" autocomplete="current-password">
  <button type="submit">Sign in</button>
  <p id="error" style="color:#b91c1c"></p>
</form>
<script>
document.getElementById("login").addEventListener("submit", async (e) => {{
  e.preventDefault();
  const form = new FormData(e.target);
  const res = await fetch("/api/auth/login", {{
    method: "POST",
    headers: {{"Content-Type": "application/json"}},
    body: JSON.stringify({{username: form.get("username"), password: form.get("password")}}),
  }});
  if (res.ok) {{ window.location.href = {next_url}; return; }}
  const body = await res.json().catch(() => ({{}}));
  document.getElementById("error").textContent = body.error || "Login failed";
}});
</script>
</body></html>
"""


@router.get("/login", response_class=HTMLResponse, include_in_schema=False)
def login_page(next: str = "/"):
    """Minimal sign-in form; on success it navigates to ``next``."""
    target = next if next.startswith("/") and not next.startswith("//") else "/"
    next_url = json.dumps(target).replace("<", "\\u003c")
    return HTMLResponse(_LOGIN_PAGE.format(next_url=next_url))
