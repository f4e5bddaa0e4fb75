"""
Health check endpoints.
"""

from typing import Any

from fastapi import APIRouter

from pm_autopilot.core.config import settings
from pm_autopilot.core.logging import get_logger
from pm_autopilot.domain.base import utc_now

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """
    Basic health check endpoint.
    Returns application status.
    """
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.app_env,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    """
    Readiness check endpoint.
    Reports whether the configuration needed by the pipelines is present.
    """
    checks = {
        "app": True,
        "gemini_configured": bool(settings.gemini.api_key),
        "database_backend": settings.database.backend,
    }

    ready = bool(checks["gemini_configured"])
    if not ready:
        logger.warning("Readiness check failed", checks=checks)

    return {
        "status": "ready" if ready else "not_ready",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness check endpoint.
    Simple check that the application is running.
    """
    return {"status": "alive"}
