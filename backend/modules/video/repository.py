"""
Booking repository for the video module.

Only reads the participants of a booking and stores its room URL.
"""

from typing import Any, Optional

from shared.repository import BaseRepository

from .models import Booking


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking rows."""

    TABLE = "bookings"

    def get_by_id(self, booking_id: str) -> Optional[Booking]:
        result = self._execute(
            "bookings.get_by_id",
            lambda: self._db.table(self.TABLE)
            .select("id, owner_id, provider_id, video_room_url")
            .eq("id", booking_id)
            .limit(1)
            .execute(),
        )
        if not result.data:
            return None
        return self._map_to_booking(result.data[0])

    def set_video_room_url(self, booking_id: str, url: str) -> None:
        self._execute(
            "bookings.set_video_room_url",
            lambda: self._db.table(self.TABLE)
            .update({"video_room_url": url})
            .eq("id", booking_id)
            .execute(),
        )

    def _map_to_booking(self, data: dict[str, Any]) -> Booking:
        """Map database row to Booking model."""
        return Booking(
            id=str(data["id"]),
            owner_id=str(data["owner_id"]),
            provider_id=str(data["provider_id"]),
            video_room_url=data.get("video_room_url"),
        )
