"""
Video module.

Daily-backed video rooms attached to bookings.
"""

from .client import DailyClient
from .models import Booking, VideoRoom, VideoRoomResponse
from .service import VideoService

__all__ = ["DailyClient", "VideoService", "Booking", "VideoRoom", "VideoRoomResponse"]
