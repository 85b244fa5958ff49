"""
Daily video-room client.

Rooms are private to the two booking participants by convention (their
name is derived from the booking) and expire an hour after creation.
"""

import logging
import time
from typing import Any, Optional

import httpx

from shared.exceptions import ExternalServiceError

from .models import VideoRoom

logger = logging.getLogger(__name__)

SERVICE = "daily"
ROOM_TTL_MINUTES = 60
MAX_PARTICIPANTS = 2


class DailyClient:
    """Minimal client for the Daily REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.daily.co/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def create_room(
        self,
        name: str,
        expires_in_minutes: int = ROOM_TTL_MINUTES,
        max_participants: int = MAX_PARTICIPANTS,
    ) -> VideoRoom:
        """
        Create a room, or return the existing room of the same name.

        Raises:
            ExternalServiceError: If Daily is not configured, unreachable,
                or refuses the request
        """
        payload = {
            "name": name,
            "properties": {
                "exp": int(time.time()) + expires_in_minutes * 60,
                "max_participants": max_participants,
                "enable_chat": True,
                "enable_screenshare": False,
                "start_video_off": False,
                "start_audio_off": False,
            },
        }
        response = await self._request("POST", "/rooms", json=payload)

        if response.status_code in (400, 409):
            # Room names are unique; a retry after a lost response lands here.
            existing = await self.get_room(name)
            if existing is not None:
                logger.info(f"Reusing existing Daily room {name}")
                return existing

        if response.status_code >= 400:
            logger.error(f"Daily refused to create room {name}: {response.status_code} {response.text}")
            raise ExternalServiceError("Failed to create video room", service=SERVICE)

        return self._to_room(response.json())

    async def get_room(self, name: str) -> Optional[VideoRoom]:
        response = await self._request("GET", f"/rooms/{name}")
        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            logger.error(f"Daily room lookup failed for {name}: {response.status_code}")
            raise ExternalServiceError("Failed to look up video room", service=SERVICE)
        return self._to_room(response.json())

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        if not self.is_configured:
            raise ExternalServiceError("Video provider is not configured", service=SERVICE)

        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                return await client.request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException:
            logger.warning(f"Daily request timed out: {method} {path}")
            raise ExternalServiceError("Video provider timed out", service=SERVICE)
        except httpx.HTTPError as e:
            logger.warning(f"Daily request failed: {method} {path}: {e}")
            raise ExternalServiceError("Video provider unreachable", service=SERVICE)

    def _to_room(self, data: dict[str, Any]) -> VideoRoom:
        try:
            return VideoRoom(name=data["name"], url=data["url"])
        except KeyError:
            raise ExternalServiceError("Malformed video provider response", service=SERVICE)
