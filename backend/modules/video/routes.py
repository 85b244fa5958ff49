"""Video room API endpoints."""

from fastapi import APIRouter, Depends

from api.dependencies import get_video_service
from api.middleware.auth import require_capability
from modules.auth.policy import Capability
from shared.models import AuthenticatedUser

from .models import CreateRoomRequest, VideoRoomResponse
from .service import VideoService

router = APIRouter()


@router.post("/rooms", response_model=VideoRoomResponse)
async def create_room(
    request: CreateRoomRequest,
    user: AuthenticatedUser = Depends(require_capability(Capability.JOIN_VIDEO_CALLS)),
    service: VideoService = Depends(get_video_service),
) -> VideoRoomResponse:
    """Return the booking's video room, creating it on first use."""
    return await service.get_or_create_room(user.id, request.booking_id)
