"""Realtime Notifier — best-effort triggers, disabled mode and channel signing.

Invariants:
    - A push-service failure is logged and swallowed
    - Without credentials triggers are no-ops and authorize() raises 502
    - authorize() returns the pusher-js auth payload signed with the app secret

Design Decisions:
    - The SDK client's trigger is replaced with a MagicMock; signing runs
      through the real pusher SDK with dummy credentials (no network)
"""

import hashlib
import hmac
import logging
from unittest.mock import MagicMock

import pytest
import requests

from rentmap.core.errors import ExternalServiceError
from rentmap.infrastructure.realtime import (
    RealtimeNotifier, conversation_channel, user_channel,
)

SOCKET_ID = "1234.5678"


@pytest.fixture
def notifier():
    n = RealtimeNotifier(app_id="1001", key="app-key", secret="app-secret", cluster="us2")
    n._client.trigger = MagicMock()
    return n


def test_channel_names():
    assert user_channel("abc") == "private-user-abc"
    assert conversation_channel("xyz") == "private-conversation-xyz"


# ─── Triggers ───────────────────────────────────────────────────

async def test_trigger_forwards_to_sdk(notifier):
    await notifier.trigger("private-user-1", "conversation-update", {"id": "c1"})
    notifier._client.trigger.assert_called_once_with(
        "private-user-1", "conversation-update", {"id": "c1"},
    )


async def test_push_failure_is_logged_not_raised(notifier, caplog):
    notifier._client.trigger.side_effect = requests.ConnectionError("push down")

    with caplog.at_level(logging.WARNING, logger="rentmap.infrastructure.realtime"):
        await notifier.trigger("private-user-1", "new-message", {"id": "m1"})

    assert "Failed to trigger new-message on private-user-1" in caplog.text


async def test_trigger_many_continues_after_a_failure(notifier):
    notifier._client.trigger.side_effect = [requests.ConnectionError("down"), None]

    await notifier.trigger_many(
        ["private-user-1", "private-user-2"], "conversation-update", {"id": "c1"},
    )

    assert notifier._client.trigger.call_count == 2


async def test_missing_credentials_disable_triggers():
    disabled = RealtimeNotifier(app_id="", key="app-key", secret="", cluster="us2")

    assert disabled.enabled is False
    await disabled.trigger("private-user-1", "new-message", {"id": "m1"})


# ─── Channel Authorization ──────────────────────────────────────

def test_authorize_signs_socket_and_channel():
    notifier = RealtimeNotifier(app_id="1001", key="app-key", secret="app-secret", cluster="us2")
    channel = "private-conversation-abc"

    payload = notifier.authorize(SOCKET_ID, channel)

    signature = hmac.new(
        b"app-secret", f"{SOCKET_ID}:{channel}".encode(), hashlib.sha256,
    ).hexdigest()
    assert payload == {"auth": f"app-key:{signature}"}


def test_authorize_rejects_malformed_socket_id():
    notifier = RealtimeNotifier(app_id="1001", key="app-key", secret="app-secret", cluster="us2")
    with pytest.raises(ExternalServiceError) as exc:
        notifier.authorize("not-a-socket", "private-user-1")
    assert exc.value.http_status == 502


def test_authorize_without_credentials_is_502():
    disabled = RealtimeNotifier(app_id="", key="", secret="", cluster="us2")
    with pytest.raises(ExternalServiceError) as exc:
        disabled.authorize(SOCKET_ID, "private-user-1")
    assert exc.value.http_status == 502
    assert exc.value.context.service == "pusher"
