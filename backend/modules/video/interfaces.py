"""Video module interfaces."""

from typing import Optional, Protocol, runtime_checkable

from .models import Booking


@runtime_checkable
class IBookingRepository(Protocol):
    """Persistence contract for the booking fields the video module touches."""

    def get_by_id(self, booking_id: str) -> Optional[Booking]:
        ...

    def set_video_room_url(self, booking_id: str, url: str) -> None:
        ...
