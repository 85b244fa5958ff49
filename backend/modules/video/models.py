"""Video module data models."""

from typing import Optional

from pydantic import BaseModel, Field

from modules.auth.models import CamelModel


class Booking(BaseModel):
    """The slice of a booking the video module needs."""

    id: str
    owner_id: str
    provider_id: str
    video_room_url: Optional[str] = None

    def participant_ids(self) -> tuple[str, str]:
        return self.owner_id, self.provider_id

    def counterpart_of(self, user_id: str) -> str:
        return self.provider_id if user_id == self.owner_id else self.owner_id


class VideoRoom(BaseModel):
    """A room as returned by the video provider."""

    name: str
    url: str


class CreateRoomRequest(CamelModel):
    booking_id: str = Field(..., min_length=1)


class VideoRoomResponse(CamelModel):
    url: str
    created: bool = False
