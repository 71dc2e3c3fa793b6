"""NetOps FastAPI application."""

import asyncio
import hashlib
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from netops import __version__
from netops.auth.gate import session_gate_middleware
from netops.config import Config, get_config
from netops.fetch.chunking import FetchError
from netops.remote.client import ConfigurationError, RemoteClient, RemoteError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request-ID and logging middleware
# ---------------------------------------------------------------------------

def _hash_ip(ip: str | None) -> str:
    """Return a one-way hash of the client IP for privacy-safe logging."""
    if not ip:
        return "unknown"
    return hashlib.sha256(ip.encode()).hexdigest()[:12]


async def request_logging_middleware(request: Request, call_next):
    """Add X-Request-ID header and log every request with timing."""
    request_id = str(uuid.uuid4())
    start = time.monotonic()

    response: Response = await call_next(request)

    elapsed_ms = int((time.monotonic() - start) * 1000)
    response.headers["X-Request-ID"] = request_id

    logger.info(
        "request_id=%s ip=%s method=%s path=%s status=%d duration_ms=%d",
        request_id,
        _hash_ip(request.client.host if request.client else None),
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

async def _remote_error_handler(request: Request, exc: RemoteError):
    return JSONResponse(status_code=502, content={"detail": exc.describe()})


async def _fetch_error_handler(request: Request, exc: FetchError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


async def _configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.critical("Backend is not configured: %s", exc)
    return JSONResponse(status_code=500, content={"detail": f"Server misconfiguration: {exc}"})


async def _timeout_handler(request: Request, exc: asyncio.TimeoutError):
    logger.error("Request deadline exceeded: %s", request.url.path)
    return JSONResponse(status_code=504, content={"detail": "Request timed out"})


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle handler."""
    config: Config = app.state.config
    if not config.supabase_url or not config.supabase_api_key:
        logger.warning("SUPABASE_URL / SUPABASE_API_KEY not set - data requests will fail until configured")
    logger.info("NetOps API starting - backend=%s env=%s", config.supabase_url or "<unset>", config.environment)
    yield
    logger.info("NetOps API shutdown")


def create_app(remote: Optional[RemoteClient] = None, config: Optional[Config] = None) -> FastAPI:
    """Build and configure the FastAPI application.

    ``remote`` replaces the backend client (tests hand in a fake); without it
    the client is created from ``config`` on the first request that needs it.
    """
    config = config or get_config()

    app = FastAPI(
        title="NetOps API",
        description="Network operations reporting portal - KPI, map and alarm data behind a session gate",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.remote = remote
    app.state.session_store = None

    app.add_exception_handler(RemoteError, _remote_error_handler)
    app.add_exception_handler(FetchError, _fetch_error_handler)
    app.add_exception_handler(ConfigurationError, _configuration_error_handler)
    app.add_exception_handler(asyncio.TimeoutError, _timeout_handler)

    # Session gate runs inside request logging so redirects are logged too
    app.add_middleware(BaseHTTPMiddleware, dispatch=session_gate_middleware)
    app.add_middleware(BaseHTTPMiddleware, dispatch=request_logging_middleware)

    # CORS - restricted to configured origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # Import and include routers
    from netops.api.routes.auth import router as auth_router
    from netops.api.routes.health import router as health_router
    from netops.api.routes.picklists import router as picklists_router
    from netops.api.routes.gis import router as gis_router
    from netops.api.routes.availability import router as availability_router
    from netops.api.routes.traffic import router as traffic_router
    from netops.api.routes.complaints import router as complaints_router
    from netops.api.routes.ran import router as ran_router
    from netops.api.routes.rms import router as rms_router
    from netops.api.routes.operations import router as operations_router
    from netops.api.routes.core import router as core_router
    from netops.api.routes.sites import router as sites_router

    app.include_router(auth_router)
    app.include_router(health_router)
    app.include_router(picklists_router)
    app.include_router(gis_router)
    app.include_router(availability_router)
    app.include_router(traffic_router)
    app.include_router(complaints_router)
    app.include_router(ran_router)
    app.include_router(rms_router)
    app.include_router(operations_router)
    app.include_router(core_router)
    app.include_router(sites_router)

    return app


app = create_app()
