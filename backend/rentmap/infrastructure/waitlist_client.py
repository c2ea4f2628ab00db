"""Waitlist Webhook Client — forwards sign-ups to the spreadsheet-backed webhook."""

import logging

import httpx

from rentmap.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

SERVICE_NAME = "waitlist-webhook"


class WaitlistClient:
    def __init__(self, webhook_url: str, timeout_seconds: int = 15):
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds

    async def submit(self, entry: dict):
        """POST the entry as JSON and return the webhook's JSON reply."""
        if not self.webhook_url:
            raise ExternalServiceError(SERVICE_NAME, "Waitlist webhook not configured")
        try:
            # Apps Script answers with a redirect to the actual result
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, follow_redirects=True,
            ) as client:
                response = await client.post(self.webhook_url, json=entry)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            logger.error(f"Waitlist webhook failed: {e}", extra={"service": SERVICE_NAME})
            raise ExternalServiceError(SERVICE_NAME, "Waitlist submission failed", str(e))
        except ValueError as e:
            raise ExternalServiceError(
                SERVICE_NAME, "Waitlist submission failed", f"Invalid JSON reply: {e}",
            )
