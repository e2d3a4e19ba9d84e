"""
Health Check Router
==================
Liveness and readiness probes.
"""
from fastapi import APIRouter

from prefill_kit import __version__
from prefill_kit.web_api.config import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness: the process is up and serving requests."""
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def readiness_check():
    """
    Readiness: no local state to warm up, so ready as soon as started.
    Reports which Letters API the proxy forwards to.
    """
    return {
        "status": "ready",
        "environment": settings.ENVIRONMENT,
        "letters_api": settings.LETTERS_API_BASE_URL,
    }
