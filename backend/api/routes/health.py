"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from shared.config import Settings, get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    sessions: str
    realtime: str
    video: str


def _state(configured: bool) -> str:
    return "configured" if configured else "missing"


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=settings.app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(settings: Settings = Depends(get_settings)) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports which backing services are configured. The database and the
    session secret are required; real-time and video are optional.
    """
    database = bool(settings.supabase_url and settings.supabase_service_role_key)
    sessions = bool(settings.session_secret)
    return ReadinessResponse(
        status="ready" if database and sessions else "degraded",
        database=_state(database),
        sessions=_state(sessions),
        realtime=_state(bool(settings.pusher_app_id and settings.pusher_key and settings.pusher_secret)),
        video=_state(bool(settings.daily_api_key)),
    )
