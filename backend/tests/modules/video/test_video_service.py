"""Tests for VideoService and BookingRepository."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.video.client import DailyClient
from modules.video.exceptions import BookingNotFoundError, NotBookingParticipantError
from modules.video.models import Booking, VideoRoom
from modules.video.repository import BookingRepository
from modules.video.service import VideoService, room_name_for
from shared.exceptions import ExternalServiceError
from shared.realtime import RealtimeClient, RealtimeEvent


class InMemoryBookingRepository:
    def __init__(self, *bookings: Booking):
        self.bookings = {b.id: b for b in bookings}

    def get_by_id(self, booking_id):
        return self.bookings.get(booking_id)

    def set_video_room_url(self, booking_id, url):
        self.bookings[booking_id] = self.bookings[booking_id].model_copy(update={"video_room_url": url})


@pytest.fixture
def bookings():
    return InMemoryBookingRepository(Booking(id="b1", owner_id="owner-1", provider_id="vet-1"))


@pytest.fixture
def daily():
    client = MagicMock(spec=DailyClient)
    client.create_room = AsyncMock(
        return_value=VideoRoom(name="pawzr-b1", url="https://pawzr.daily.co/pawzr-b1")
    )
    return client


@pytest.fixture
def realtime():
    client = MagicMock(spec=RealtimeClient)
    client.publish = AsyncMock(return_value=True)
    return client


@pytest.fixture
def service(bookings, daily, realtime):
    return VideoService(bookings=bookings, daily=daily, realtime=realtime)


def test_room_name_for():
    assert room_name_for("b1") == "pawzr-b1"


class TestGetOrCreateRoom:
    @pytest.mark.asyncio
    async def test_first_request_creates_and_notifies_counterpart(self, service, bookings, daily, realtime):
        response = await service.get_or_create_room("owner-1", "b1")

        assert response.created is True
        assert response.url == "https://pawzr.daily.co/pawzr-b1"
        assert bookings.get_by_id("b1").video_room_url == response.url
        daily.create_room.assert_awaited_once_with("pawzr-b1")

        channel, event, data = realtime.publish.await_args.args
        assert channel == "notifications-vet-1"
        assert event == RealtimeEvent.NEW_NOTIFICATION
        assert data["bookingId"] == "b1"
        assert data["fromUserId"] == "owner-1"

    @pytest.mark.asyncio
    async def test_provider_side_notifies_owner(self, service, realtime):
        await service.get_or_create_room("vet-1", "b1")

        assert realtime.publish.await_args.args[0] == "notifications-owner-1"

    @pytest.mark.asyncio
    async def test_existing_room_reused(self, service, bookings, daily, realtime):
        bookings.set_video_room_url("b1", "https://pawzr.daily.co/existing")

        response = await service.get_or_create_room("vet-1", "b1")

        assert response.created is False
        assert response.url == "https://pawzr.daily.co/existing"
        daily.create_room.assert_not_called()
        realtime.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_second_request_reuses_room(self, service, daily):
        first = await service.get_or_create_room("owner-1", "b1")
        second = await service.get_or_create_room("vet-1", "b1")

        assert second.url == first.url
        assert daily.create_room.await_count == 1

    @pytest.mark.asyncio
    async def test_unknown_booking(self, service):
        with pytest.raises(BookingNotFoundError):
            await service.get_or_create_room("owner-1", "nope")

    @pytest.mark.asyncio
    async def test_outsider_forbidden(self, service, daily):
        with pytest.raises(NotBookingParticipantError) as exc_info:
            await service.get_or_create_room("stranger", "b1")
        assert exc_info.value.status_code == 403
        daily.create_room.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_failure_leaves_booking_untouched(self, service, bookings, daily):
        daily.create_room.side_effect = ExternalServiceError("Video provider timed out", service="daily")

        with pytest.raises(ExternalServiceError):
            await service.get_or_create_room("owner-1", "b1")
        assert bookings.get_by_id("b1").video_room_url is None


class TestBookingRepository:
    def test_get_by_id(self):
        mock_db = MagicMock()
        repo = BookingRepository(mock_db)
        query = mock_db.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.return_value.data = [
            {"id": "b1", "owner_id": "owner-1", "provider_id": "vet-1", "video_room_url": None}
        ]

        booking = repo.get_by_id("b1")

        assert booking.participant_ids() == ("owner-1", "vet-1")
        mock_db.table.assert_called_with("bookings")

    def test_get_by_id_missing(self):
        mock_db = MagicMock()
        repo = BookingRepository(mock_db)
        query = mock_db.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.return_value.data = []

        assert repo.get_by_id("nope") is None

    def test_set_video_room_url(self):
        mock_db = MagicMock()
        repo = BookingRepository(mock_db)

        repo.set_video_room_url("b1", "https://pawzr.daily.co/pawzr-b1")

        mock_db.table.return_value.update.assert_called_once_with({"video_room_url": "https://pawzr.daily.co/pawzr-b1"})
        mock_db.table.return_value.update.return_value.eq.assert_called_once_with("id", "b1")
