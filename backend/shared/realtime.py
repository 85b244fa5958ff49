"""
Real-time channel client.

Thin wrapper around the Pusher server SDK. A single RealtimeClient is
constructed by the service container at startup and injected into the
services that notify connected clients. Publishing is fire-and-forget:
failures are logged and never propagate to the request.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Optional

import pusher

from .config import Settings

logger = logging.getLogger(__name__)


class RealtimeEvent(str, Enum):
    """Event names understood by the web and native clients."""

    NEW_MESSAGE = "new-message"
    MESSAGE_READ = "message-read"
    NEW_NOTIFICATION = "new-notification"
    BOOKING_UPDATE = "booking-update"
    ACCOUNT_UPDATED = "account-updated"


def user_channel(user_id: str) -> str:
    return f"user-{user_id}"


def notification_channel(user_id: str) -> str:
    return f"notifications-{user_id}"


def conversation_channel(conversation_id: str) -> str:
    return f"conversation-{conversation_id}"


class RealtimeClient:
    """Publishes events to the Pusher relay."""

    def __init__(self, client: Optional[pusher.Pusher]):
        """
        Args:
            client: Configured Pusher client, or None when real-time
                    delivery is disabled (events are dropped with a debug log).
        """
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "RealtimeClient":
        """Build the client from settings; disabled when credentials are missing."""
        if not (settings.pusher_app_id and settings.pusher_key and settings.pusher_secret):
            logger.info("Pusher not configured, real-time events disabled")
            return cls(None)
        return cls(
            pusher.Pusher(
                app_id=settings.pusher_app_id,
                key=settings.pusher_key,
                secret=settings.pusher_secret,
                cluster=settings.pusher_cluster,
                ssl=True,
                timeout=int(settings.http_timeout),
            )
        )

    @property
    def is_enabled(self) -> bool:
        return self._client is not None

    async def publish(
        self,
        channel: str,
        event: RealtimeEvent,
        data: dict[str, Any],
    ) -> bool:
        """
        Publish an event on a channel.

        Returns:
            True if the relay accepted the event, False otherwise.
        """
        if self._client is None:
            logger.debug(f"Real-time disabled, dropping {event.value} on {channel}")
            return False

        try:
            await asyncio.to_thread(self._client.trigger, channel, event.value, data)
            return True
        except Exception as e:
            logger.warning(f"Failed to publish {event.value} on {channel}: {e}")
            return False
