"""Messaging — conversations, messages, soft delete, realtime events and channel auth.

Invariants:
    - Only active participants read or write a conversation (403 otherwise)
    - Sending publishes new-message on the conversation channel and
      conversation-update on every participant's user channel
    - Deletion is soft, sender-only, and publishes message-deleted
"""

import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import event, select, update

from rentmap.models import Conversation, ConversationParticipant, Message
from rentmap.services.messaging import get_user_conversations
from tests.helpers import auth_header

CONVERSATIONS = "/api/v1/messaging/conversations"
MESSAGES = "/api/v1/messaging/messages"
AUTH = "/api/v1/messaging/auth"


async def _direct(client, sender, recipient, **extra) -> str:
    res = await client.post(
        CONVERSATIONS,
        json={"conversation_type": "direct", "participant_ids": [str(recipient.id)], **extra},
        headers=auth_header(sender.id),
    )
    assert res.status_code == 200, res.text
    return res.json()["conversation"]["id"]


async def _send(client, sender, conversation_id, content, client_id=None):
    body = {"conversationId": conversation_id, "content": content}
    if client_id:
        body["clientId"] = client_id
    return await client.post(MESSAGES, json=body, headers=auth_header(sender.id))


# ─── Conversation Creation ──────────────────────────────────────

async def test_create_direct_conversation(client, seed_users, test_db):
    res = await client.post(
        CONVERSATIONS,
        json={
            "conversation_type": "direct",
            "participant_ids": [str(seed_users.bob.id)],
            "title": "ignored for direct",
        },
        headers=auth_header(seed_users.alice.id),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["participants_count"] == 2
    assert body["conversation"]["title"] is None
    assert body["conversation"]["category"] == "general"

    roles = (await test_db.execute(
        select(ConversationParticipant.role).where(
            ConversationParticipant.conversation_id == uuid.UUID(body["conversation"]["id"]),
        ),
    )).scalars().all()
    assert sorted(roles) == ["member", "member"]


async def test_create_group_makes_creator_admin_and_keeps_title(client, seed_users, test_db):
    res = await client.post(
        CONVERSATIONS,
        json={
            "conversation_type": "group",
            "participant_ids": [str(seed_users.bob.id), str(seed_users.carol.id)],
            "title": "Roommates",
        },
        headers=auth_header(seed_users.alice.id),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["conversation"]["title"] == "Roommates"
    assert body["participants_count"] == 3

    creator_role = await test_db.scalar(
        select(ConversationParticipant.role).where(
            ConversationParticipant.conversation_id == uuid.UUID(body["conversation"]["id"]),
            ConversationParticipant.user_id == seed_users.alice.id,
        ),
    )
    assert creator_role == "admin"


async def test_create_conversation_type_rules(client, seed_users):
    headers = auth_header(seed_users.alice.id)
    two = [str(seed_users.bob.id), str(seed_users.carol.id)]

    direct_with_two = await client.post(
        CONVERSATIONS, json={"conversation_type": "direct", "participant_ids": two},
        headers=headers,
    )
    group_without_title = await client.post(
        CONVERSATIONS, json={"conversation_type": "group", "participant_ids": two},
        headers=headers,
    )
    group_of_one = await client.post(
        CONVERSATIONS,
        json={
            "conversation_type": "group",
            "participant_ids": [str(seed_users.bob.id)],
            "title": "Too small",
        },
        headers=headers,
    )
    support_without_title = await client.post(
        CONVERSATIONS, json={"conversation_type": "support", "participant_ids": []},
        headers=headers,
    )
    for res in (direct_with_two, group_without_title, group_of_one, support_without_title):
        assert res.status_code == 400


async def test_create_conversation_with_unknown_participant_returns_400(client, seed_users):
    res = await client.post(
        CONVERSATIONS,
        json={"conversation_type": "direct", "participant_ids": [str(uuid.uuid4())]},
        headers=auth_header(seed_users.alice.id),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_REQUEST"


async def test_create_conversation_with_self_returns_400(client, seed_users):
    res = await client.post(
        CONVERSATIONS,
        json={"conversation_type": "direct", "participant_ids": [str(seed_users.alice.id)]},
        headers=auth_header(seed_users.alice.id),
    )
    assert res.status_code == 400


async def test_create_with_initial_message(client, seed_users):
    conversation_id = await _direct(
        client, seed_users.alice, seed_users.bob, content="Is it still available?",
    )
    res = await client.get(
        MESSAGES, params={"conversationId": conversation_id},
        headers=auth_header(seed_users.bob.id),
    )
    messages = res.json()
    assert [m["content"] for m in messages] == ["Is it still available?"]
    assert messages[0]["sender"]["username"] == "alice"


# ─── Conversation Listing ───────────────────────────────────────

async def test_list_conversations_includes_participants_and_last_message(
    client, seed_users,
):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)
    await _send(client, seed_users.bob, conversation_id, "Hello Alice")

    res = await client.get(CONVERSATIONS, headers=auth_header(seed_users.alice.id))

    assert res.status_code == 200
    [conversation] = res.json()
    assert conversation["id"] == conversation_id
    assert {p["user"]["username"] for p in conversation["participants"]} == {"alice", "bob"}
    assert conversation["lastMessage"]["content"] == "Hello Alice"
    assert conversation["needsResponse"] is True
    assert conversation["lastResponderId"] == str(seed_users.bob.id)


async def test_inbox_loads_one_message_per_conversation(
    client, seed_users, test_db, test_session_factory,
):
    long_thread = await _direct(client, seed_users.alice, seed_users.bob)
    short_thread = await _direct(client, seed_users.alice, seed_users.carol)
    start = datetime(2026, 9, 1, tzinfo=timezone.utc)
    test_db.add_all([
        Message(
            conversation_id=uuid.UUID(long_thread),
            sender_id=seed_users.bob.id,
            content=f"message {i}",
            created_at=start + timedelta(minutes=i),
        )
        for i in range(120)
    ])
    test_db.add(Message(
        conversation_id=uuid.UUID(short_thread),
        sender_id=seed_users.carol.id,
        content="only one",
        created_at=start,
    ))
    await test_db.commit()

    loaded: list[str] = []

    def on_load(target, context):
        loaded.append(target.content)

    event.listen(Message, "load", on_load)
    try:
        async with test_session_factory() as session:
            inbox = await get_user_conversations(session, seed_users.alice.id)
    finally:
        event.remove(Message, "load", on_load)

    assert sorted(loaded) == ["message 119", "only one"]
    last_by_id = {c["id"]: c["lastMessage"]["content"] for c in inbox}
    assert last_by_id == {long_thread: "message 119", short_thread: "only one"}


async def test_list_conversations_only_for_participants(client, seed_users):
    await _direct(client, seed_users.alice, seed_users.bob)
    res = await client.get(CONVERSATIONS, headers=auth_header(seed_users.carol.id))
    assert res.json() == []


async def test_sort_newest_oldest_and_unresponded(client, seed_users):
    with_bob = await _direct(client, seed_users.alice, seed_users.bob)
    with_carol = await _direct(client, seed_users.alice, seed_users.carol)
    await _send(client, seed_users.bob, with_bob, "Any questions?")
    await _send(client, seed_users.alice, with_carol, "Hi Carol")
    headers = auth_header(seed_users.alice.id)

    newest = await client.get(CONVERSATIONS, headers=headers)
    oldest = await client.get(CONVERSATIONS, params={"sortBy": "oldest"}, headers=headers)
    unresponded = await client.get(
        CONVERSATIONS, params={"sortBy": "unresponded"}, headers=headers,
    )

    assert [c["id"] for c in newest.json()] == [with_carol, with_bob]
    assert [c["id"] for c in oldest.json()] == [with_bob, with_carol]
    assert [c["id"] for c in unresponded.json()] == [with_bob, with_carol]


async def test_category_filter_uses_property_link(client, seed_users, seed_properties):
    inquiry = await _direct(
        client, seed_users.alice, seed_users.bob,
        property_id=str(seed_properties.downtown.id),
    )
    general = await _direct(client, seed_users.alice, seed_users.carol)
    headers = auth_header(seed_users.alice.id)

    landlord = await client.get(
        CONVERSATIONS, params={"category": "landlord_inquiry"}, headers=headers,
    )
    plain = await client.get(CONVERSATIONS, params={"category": "general"}, headers=headers)
    everything = await client.get(CONVERSATIONS, params={"category": "all"}, headers=headers)

    assert [c["id"] for c in landlord.json()] == [inquiry]
    assert landlord.json()[0]["category"] == "landlord_inquiry"
    assert [c["id"] for c in plain.json()] == [general]
    assert len(everything.json()) == 2


async def test_archived_flag_filters_per_participant(client, seed_users, test_db):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)
    await test_db.execute(
        update(ConversationParticipant)
        .where(
            ConversationParticipant.conversation_id == uuid.UUID(conversation_id),
            ConversationParticipant.user_id == seed_users.alice.id,
        )
        .values(is_archived=True),
    )
    await test_db.commit()

    active = await client.get(CONVERSATIONS, headers=auth_header(seed_users.alice.id))
    archived = await client.get(
        CONVERSATIONS, params={"archived": "true"}, headers=auth_header(seed_users.alice.id),
    )
    for_bob = await client.get(CONVERSATIONS, headers=auth_header(seed_users.bob.id))

    assert active.json() == []
    assert [c["id"] for c in archived.json()] == [conversation_id]
    assert [c["id"] for c in for_bob.json()] == [conversation_id]


# ─── Messages ───────────────────────────────────────────────────

async def test_send_message_broadcasts_events(client, seed_users, notifier):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)

    res = await _send(client, seed_users.alice, conversation_id, "  Hi Bob  ", "tmp-1")

    assert res.status_code == 200
    message = res.json()
    assert message["content"] == "Hi Bob"
    assert message["sender"]["firstName"] == "Alice"

    [new_message] = notifier.events_named("new-message")
    assert new_message[0] == f"private-conversation-{conversation_id}"
    assert new_message[2]["clientId"] == "tmp-1"
    assert new_message[2]["id"] == message["id"]

    updates = notifier.events_named("conversation-update")
    assert {channel for channel, _, _ in updates} == {
        f"private-user-{seed_users.alice.id}", f"private-user-{seed_users.bob.id}",
    }
    assert updates[0][2]["conversationId"] == conversation_id


async def test_send_message_validation(client, seed_users):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)
    headers = auth_header(seed_users.alice.id)

    blank = await client.post(
        MESSAGES, json={"conversationId": conversation_id, "content": "   "},
        headers=headers,
    )
    missing = await client.post(MESSAGES, json={"content": "hi"}, headers=headers)

    assert blank.status_code == 400
    assert missing.status_code == 400


async def test_non_participant_cannot_send_or_read(client, seed_users, notifier):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)

    sent = await _send(client, seed_users.carol, conversation_id, "let me in")
    read = await client.get(
        MESSAGES, params={"conversationId": conversation_id},
        headers=auth_header(seed_users.carol.id),
    )

    assert sent.status_code == 403
    assert read.status_code == 403
    assert notifier.events == []


async def test_list_messages_newest_first_without_deleted(client, seed_users):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)
    first = (await _send(client, seed_users.alice, conversation_id, "first")).json()
    await _send(client, seed_users.bob, conversation_id, "second")
    await client.request(
        "DELETE", MESSAGES, json={"messageId": first["id"]},
        headers=auth_header(seed_users.alice.id),
    )

    res = await client.get(
        MESSAGES, params={"conversationId": conversation_id},
        headers=auth_header(seed_users.alice.id),
    )
    assert [m["content"] for m in res.json()] == ["second"]


async def test_list_messages_caps_page_size(client, seed_users, test_db):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)
    test_db.add_all([
        Message(
            conversation_id=uuid.UUID(conversation_id),
            sender_id=seed_users.alice.id,
            content=f"message {i}",
        )
        for i in range(55)
    ])
    await test_db.commit()

    res = await client.get(
        MESSAGES, params={"conversationId": conversation_id},
        headers=auth_header(seed_users.bob.id),
    )
    assert len(res.json()) == 50


async def test_list_messages_requires_conversation_id(client, seed_users):
    res = await client.get(MESSAGES, headers=auth_header(seed_users.alice.id))
    assert res.status_code == 400


# ─── Deletion ───────────────────────────────────────────────────

async def test_delete_message_soft_deletes_and_notifies(
    client, seed_users, notifier, test_db,
):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)
    message = (await _send(client, seed_users.alice, conversation_id, "oops")).json()

    res = await client.request(
        "DELETE", MESSAGES, json={"messageId": message["id"]},
        headers=auth_header(seed_users.alice.id),
    )

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["messageId"] == message["id"]
    assert body["deletedMessage"]["isDeleted"] is True

    row = await test_db.get(Message, uuid.UUID(message["id"]))
    assert row.is_deleted is True
    assert row.deleted_at is not None

    deleted_events = notifier.events_named("message-deleted")
    assert len(deleted_events) == 2
    assert deleted_events[0][2] == {
        "messageId": message["id"],
        "conversationId": conversation_id,
        "deletedBy": str(seed_users.alice.id),
    }


async def test_delete_rules(client, seed_users, test_db):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)
    message = (await _send(client, seed_users.alice, conversation_id, "mine")).json()
    body = {"messageId": message["id"]}

    by_other = await client.request(
        "DELETE", MESSAGES, json=body, headers=auth_header(seed_users.bob.id),
    )
    unknown = await client.request(
        "DELETE", MESSAGES, json={"messageId": str(uuid.uuid4())},
        headers=auth_header(seed_users.alice.id),
    )
    missing = await client.request(
        "DELETE", MESSAGES, json={}, headers=auth_header(seed_users.alice.id),
    )

    assert by_other.status_code == 403
    assert unknown.status_code == 404
    assert missing.status_code == 400

    await test_db.execute(
        update(ConversationParticipant)
        .where(ConversationParticipant.user_id == seed_users.alice.id)
        .values(is_active=False),
    )
    await test_db.commit()
    after_leaving = await client.request(
        "DELETE", MESSAGES, json=body, headers=auth_header(seed_users.alice.id),
    )
    assert after_leaving.status_code == 403


async def test_deleting_twice_returns_404(client, seed_users):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)
    message = (await _send(client, seed_users.alice, conversation_id, "twice")).json()
    headers = auth_header(seed_users.alice.id)

    await client.request("DELETE", MESSAGES, json={"messageId": message["id"]}, headers=headers)
    again = await client.request(
        "DELETE", MESSAGES, json={"messageId": message["id"]}, headers=headers,
    )
    assert again.status_code == 404


# ─── Channel Authorization ──────────────────────────────────────

async def test_user_channel_only_for_same_user(client, seed_users):
    own = await client.post(
        AUTH,
        data={"socket_id": "123.456", "channel_name": f"private-user-{seed_users.alice.id}"},
        headers=auth_header(seed_users.alice.id),
    )
    other = await client.post(
        AUTH,
        data={"socket_id": "123.456", "channel_name": f"private-user-{seed_users.bob.id}"},
        headers=auth_header(seed_users.alice.id),
    )
    assert own.status_code == 200
    assert "auth" in own.json()
    assert other.status_code == 403


async def test_conversation_channel_only_for_participants(client, seed_users):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)
    channel = f"private-conversation-{conversation_id}"

    member = await client.post(
        AUTH, data={"socket_id": "1.2", "channel_name": channel},
        headers=auth_header(seed_users.bob.id),
    )
    outsider = await client.post(
        AUTH, data={"socket_id": "1.2", "channel_name": channel},
        headers=auth_header(seed_users.carol.id),
    )
    assert member.status_code == 200
    assert outsider.status_code == 403


async def test_channel_auth_rejects_unknown_channels_and_missing_fields(client, seed_users):
    headers = auth_header(seed_users.alice.id)
    public = await client.post(
        AUTH, data={"socket_id": "1.2", "channel_name": "presence-lobby"}, headers=headers,
    )
    malformed = await client.post(
        AUTH, data={"socket_id": "1.2", "channel_name": "private-conversation-nope"},
        headers=headers,
    )
    missing = await client.post(AUTH, data={"socket_id": "1.2"}, headers=headers)

    assert public.status_code == 403
    assert malformed.status_code == 403
    assert missing.status_code == 400


async def test_conversation_row_tracks_last_responder(client, seed_users, test_db):
    conversation_id = await _direct(client, seed_users.alice, seed_users.bob)
    await _send(client, seed_users.bob, conversation_id, "reply")

    row = await test_db.get(Conversation, uuid.UUID(conversation_id))
    assert row.last_responder_id == seed_users.bob.id
    assert row.needs_response is True
