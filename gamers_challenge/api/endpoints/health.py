"""
Health check endpoint
"""

from fastapi import APIRouter, Depends

from gamers_challenge.api.deps import get_settings
from gamers_challenge.core.config import Settings
from gamers_challenge.core.database import Database, get_database

router = APIRouter()


@router.get("/health")
async def health_check(
    database: Database = Depends(get_database), settings: Settings = Depends(get_settings)
):
    """Service status and database connectivity"""
    connected = database.is_connected
    return {
        "status": "healthy" if connected else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "checks": {"database": "connected" if connected else "disconnected"},
    }
