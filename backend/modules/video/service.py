"""
Video room service.

One room per booking, created on first request and reused afterwards.
"""

import logging

from shared.realtime import RealtimeClient, RealtimeEvent, notification_channel

from .client import DailyClient
from .exceptions import BookingNotFoundError, NotBookingParticipantError
from .interfaces import IBookingRepository
from .models import VideoRoomResponse

logger = logging.getLogger(__name__)


def room_name_for(booking_id: str) -> str:
    return f"pawzr-{booking_id}"


class VideoService:
    """Creates or returns the video room of a booking."""

    def __init__(
        self,
        bookings: IBookingRepository,
        daily: DailyClient,
        realtime: RealtimeClient,
    ):
        self._bookings = bookings
        self._daily = daily
        self._realtime = realtime

    async def get_or_create_room(self, user_id: str, booking_id: str) -> VideoRoomResponse:
        """
        Raises:
            BookingNotFoundError: If the booking doesn't exist
            NotBookingParticipantError: If the user isn't owner or provider
            ExternalServiceError: If the video provider fails
        """
        booking = self._bookings.get_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        if user_id not in booking.participant_ids():
            raise NotBookingParticipantError(booking_id)

        if booking.video_room_url:
            return VideoRoomResponse(url=booking.video_room_url)

        room = await self._daily.create_room(room_name_for(booking_id))
        self._bookings.set_video_room_url(booking_id, room.url)
        logger.info(f"Created video room {room.name} for booking {booking_id}")

        await self._realtime.publish(
            notification_channel(booking.counterpart_of(user_id)),
            RealtimeEvent.NEW_NOTIFICATION,
            {
                "type": "video_call",
                "bookingId": booking_id,
                "url": room.url,
                "fromUserId": user_id,
            },
        )
        return VideoRoomResponse(url=room.url, created=True)
