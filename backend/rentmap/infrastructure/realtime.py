"""Realtime Notifier — Pusher channel events and private-channel authorization.

Invariants:
    - trigger() is best effort: failures are logged, never raised
    - A notifier without credentials is disabled: triggers become no-ops,
      authorize() raises ExternalServiceError
    - Payloads must already be JSON-safe (ids and timestamps as strings)

Design Decisions:
    - The pusher SDK is synchronous; calls run in a worker thread so the
      event loop never blocks on the HTTP round trip
"""

import asyncio
import logging

import pusher

from rentmap.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

SERVICE_NAME = "pusher"


def user_channel(user_id) -> str:
    return f"private-user-{user_id}"


def conversation_channel(conversation_id) -> str:
    return f"private-conversation-{conversation_id}"


class RealtimeNotifier:
    """Publishes chat events to Pusher private channels."""

    def __init__(self, app_id: str, key: str, secret: str, cluster: str):
        self._client: pusher.Pusher | None = None
        if app_id and key and secret:
            self._client = pusher.Pusher(
                app_id=app_id, key=key, secret=secret,
                cluster=cluster, ssl=True,
            )

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def trigger(self, channel: str, event: str, data: dict) -> None:
        if self._client is None:
            logger.debug(f"Realtime disabled, dropping {event} on {channel}")
            return
        try:
            await asyncio.to_thread(self._client.trigger, channel, event, data)
        except Exception as e:
            logger.warning(
                f"Failed to trigger {event} on {channel}: {e}",
                extra={"service": SERVICE_NAME},
            )

    async def trigger_many(self, channels: list[str], event: str, data: dict) -> None:
        for channel in channels:
            await self.trigger(channel, event, data)

    def authorize(self, socket_id: str, channel: str) -> dict:
        """Sign a private-channel subscription for the client library."""
        if self._client is None:
            raise ExternalServiceError(
                SERVICE_NAME, "Realtime service not configured",
            )
        try:
            return self._client.authenticate(channel=channel, socket_id=socket_id)
        except ValueError as e:
            raise ExternalServiceError(SERVICE_NAME, "Channel authorization failed", str(e))
