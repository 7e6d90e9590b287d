"""
Health check endpoints.
"""

from fastapi import APIRouter
from samudra.core.config import get_settings
from samudra.utils.time import utc_now

router = APIRouter(prefix="/health", tags=["health"])
settings = get_settings()


@router.get("")
async def health_check():
    """Root health check endpoint."""
    return {
        "status": "ok",
        "timestamp": utc_now().isoformat(),
        "service": settings.app_name,
        "version": settings.app_version
    }
