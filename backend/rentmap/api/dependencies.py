"""API Dependencies — authenticated user and lazily built external clients.

Invariants:
    - Every protected route depends on get_current_user_id (401 otherwise)
    - External clients are process singletons, built on first use from settings
    - Tests replace any of these through app.dependency_overrides
"""

import uuid

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rentmap.config import get_settings
from rentmap.core.errors import AuthenticationError
from rentmap.infrastructure.anthropic_client import ResilientAnthropicClient
from rentmap.infrastructure.auth_tokens import decode_user_id
from rentmap.infrastructure.ocr_client import OCRSpaceClient
from rentmap.infrastructure.realtime import RealtimeNotifier
from rentmap.infrastructure.waitlist_client import WaitlistClient

_bearer = HTTPBearer(auto_error=False)

_ai_client: ResilientAnthropicClient | None = None
_ocr_client: OCRSpaceClient | None = None
_notifier: RealtimeNotifier | None = None
_waitlist_client: WaitlistClient | None = None


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> uuid.UUID:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    settings = get_settings()
    return decode_user_id(
        credentials.credentials,
        settings.supabase_jwt_secret,
        settings.supabase_jwt_audience,
    )


def get_ai_client() -> ResilientAnthropicClient:
    global _ai_client
    if _ai_client is None:
        settings = get_settings()
        _ai_client = ResilientAnthropicClient(
            api_key=settings.anthropic_api_key,
            max_retries=settings.anthropic_max_retries,
            base_delay_ms=settings.anthropic_base_delay_ms,
            max_delay_ms=settings.anthropic_max_delay_ms,
            timeout_seconds=settings.anthropic_timeout_seconds,
        )
    return _ai_client


def get_ocr_client() -> OCRSpaceClient:
    global _ocr_client
    if _ocr_client is None:
        settings = get_settings()
        _ocr_client = OCRSpaceClient(
            api_key=settings.ocr_space_api_key,
            url=settings.ocr_space_url,
            timeout_seconds=settings.ocr_timeout_seconds,
        )
    return _ocr_client


def get_notifier() -> RealtimeNotifier:
    global _notifier
    if _notifier is None:
        settings = get_settings()
        _notifier = RealtimeNotifier(
            app_id=settings.pusher_app_id,
            key=settings.pusher_key,
            secret=settings.pusher_secret,
            cluster=settings.pusher_cluster,
        )
    return _notifier


def get_waitlist_client() -> WaitlistClient:
    global _waitlist_client
    if _waitlist_client is None:
        settings = get_settings()
        _waitlist_client = WaitlistClient(
            webhook_url=settings.waitlist_webhook_url,
            timeout_seconds=settings.waitlist_timeout_seconds,
        )
    return _waitlist_client
