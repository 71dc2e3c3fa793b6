"""Health check endpoint."""

import logging

from fastapi import APIRouter, Request

from netops import __version__
from netops.api.deps import get_app_config
from netops.api.models import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(request: Request):
    """Report whether the backend is configured. Never calls the backend."""
    config = get_app_config(request)
    configured = bool(config.supabase_url and config.supabase_api_key)
    if not configured:
        logger.warning("Health check: backend URL or API key missing")
    return HealthResponse(
        status="healthy" if configured else "degraded",
        backend_configured=configured,
        environment=config.environment,
        version=__version__,
    )
