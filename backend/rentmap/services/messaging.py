"""Messaging — conversations, messages, realtime fan-out and channel authorization.

Invariants:
    - Every read or write requires an active participant row for the caller
    - Message deletion is soft and only by the sender, who must still participate
    - Sending a message moves the conversation's updated_at forward and records
      the sender as last responder
    - Realtime events are published after the commit; a push failure never
      fails the request (RealtimeNotifier.trigger is best effort)

Design Decisions:
    - Conversation category is derived from property_id at creation time
      (property-linked threads are landlord inquiries)
    - Last messages come from one ranked query (row_number per conversation),
      so an inbox loads one message row per conversation whatever the history
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.core.domain_types import (
    ConversationCategory, ConversationSort, ConversationType, MessageType, ParticipantRole,
)
from rentmap.core.errors import (
    InvalidRequestError, PermissionDeniedError, ResourceNotFoundError,
)
from rentmap.infrastructure.realtime import (
    RealtimeNotifier, conversation_channel, user_channel,
)
from rentmap.models.conversation import Conversation, ConversationParticipant
from rentmap.models.message import Message
from rentmap.models.user import User
from rentmap.schemas.messaging import ConversationCreate, MessageCreate

logger = logging.getLogger(__name__)

MESSAGE_PAGE_SIZE = 50

_USER_CHANNEL_PREFIX = "private-user-"
_CONVERSATION_CHANNEL_PREFIX = "private-conversation-"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


# ─── Serialization ──────────────────────────────────────────────

def serialize_user_brief(user: User | None) -> dict | None:
    if user is None:
        return None
    customer = user.customer
    return {
        "id": str(user.id),
        "username": user.username,
        "firstName": customer.first_name if customer else None,
        "lastName": customer.last_name if customer else None,
    }


def serialize_message(message: Message, sender: User | None = None) -> dict:
    return {
        "id": str(message.id),
        "conversationId": str(message.conversation_id),
        "content": message.content,
        "messageType": message.message_type,
        "senderId": str(message.sender_id),
        "replyToId": str(message.reply_to_id) if message.reply_to_id else None,
        "tags": list(message.tags or []),
        "isEdited": message.is_edited,
        "isDeleted": message.is_deleted,
        "createdAt": _iso(message.created_at),
        "updatedAt": _iso(message.updated_at),
        "sender": serialize_user_brief(sender),
    }


def serialize_conversation(conversation: Conversation) -> dict:
    return {
        "id": str(conversation.id),
        "conversationType": conversation.conversation_type,
        "title": conversation.title,
        "propertyId": str(conversation.property_id) if conversation.property_id else None,
        "category": conversation.category,
        "needsResponse": conversation.needs_response,
        "lastResponderId": (
            str(conversation.last_responder_id) if conversation.last_responder_id else None
        ),
        "priority": conversation.priority,
        "createdAt": _iso(conversation.created_at),
        "updatedAt": _iso(conversation.updated_at),
    }


def _serialize_participant(participant: ConversationParticipant) -> dict:
    return {
        "userId": str(participant.user_id),
        "role": participant.role,
        "isActive": participant.is_active,
        "user": serialize_user_brief(participant.user),
    }


# ─── Access ─────────────────────────────────────────────────────

async def user_has_conversation_access(
    db: AsyncSession, user_id: uuid.UUID, conversation_id: uuid.UUID,
) -> bool:
    result = await db.execute(
        select(ConversationParticipant.id).where(
            ConversationParticipant.conversation_id == conversation_id,
            ConversationParticipant.user_id == user_id,
            ConversationParticipant.is_active.is_(True),
        ),
    )
    return result.first() is not None


async def _require_access(
    db: AsyncSession, user_id: uuid.UUID, conversation_id: uuid.UUID,
) -> None:
    if not await user_has_conversation_access(db, user_id, conversation_id):
        raise PermissionDeniedError("Not a participant in this conversation")


# ─── Conversations ──────────────────────────────────────────────

async def _last_messages(
    db: AsyncSession, conversation_ids: list[uuid.UUID],
) -> dict[uuid.UUID, Message]:
    if not conversation_ids:
        return {}
    ranked = (
        select(
            Message.id,
            func.row_number().over(
                partition_by=Message.conversation_id,
                order_by=Message.created_at.desc(),
            ).label("position"),
        )
        .where(
            Message.conversation_id.in_(conversation_ids),
            Message.is_deleted.is_(False),
        )
        .subquery()
    )
    result = await db.execute(
        select(Message)
        .join(ranked, ranked.c.id == Message.id)
        .where(ranked.c.position == 1),
    )
    return {message.conversation_id: message for message in result.scalars().all()}


def _matches_category(conversation: Conversation, category: str | None) -> bool:
    if not category or category == "all":
        return True
    if category == ConversationCategory.LANDLORD_INQUIRY.value:
        return conversation.property_id is not None
    if category == ConversationCategory.GENERAL.value:
        return conversation.property_id is None
    return True


async def get_user_conversations(
    db: AsyncSession,
    user_id: uuid.UUID,
    *,
    category: str | None = None,
    sort_by: ConversationSort = ConversationSort.NEWEST,
    archived: bool = False,
) -> list[dict]:
    """The caller's inbox: participants and last message per conversation."""
    result = await db.execute(
        select(Conversation)
        .join(
            ConversationParticipant,
            ConversationParticipant.conversation_id == Conversation.id,
        )
        .where(
            ConversationParticipant.user_id == user_id,
            ConversationParticipant.is_active.is_(True),
            ConversationParticipant.is_archived.is_(archived),
        ),
    )
    conversations = [
        c for c in result.scalars().unique().all() if _matches_category(c, category)
    ]
    latest = await _last_messages(db, [c.id for c in conversations])

    conversations.sort(key=lambda c: c.updated_at, reverse=sort_by != ConversationSort.OLDEST)
    if sort_by == ConversationSort.UNRESPONDED:
        # Stable sort keeps newest-first order within each group
        conversations.sort(
            key=lambda c: not (c.id in latest and latest[c.id].sender_id != user_id),
        )

    inbox = []
    for conversation in conversations:
        last = latest.get(conversation.id)
        sender = next(
            (p.user for p in conversation.participants if last and p.user_id == last.sender_id),
            None,
        )
        inbox.append({
            **serialize_conversation(conversation),
            "participants": [
                _serialize_participant(p) for p in conversation.participants if p.is_active
            ],
            "lastMessage": serialize_message(last, sender) if last else None,
        })
    return inbox


async def create_conversation(
    db: AsyncSession, user_id: uuid.UUID, body: ConversationCreate,
) -> dict:
    if user_id in body.participant_ids:
        raise InvalidRequestError(
            "participant_ids must not include the creator", field="participant_ids",
        )
    if body.participant_ids:
        found = await db.execute(select(User.id).where(User.id.in_(body.participant_ids)))
        if len(found.scalars().all()) != len(body.participant_ids):
            raise InvalidRequestError(
                "One or more participant IDs are invalid.", field="participant_ids",
            )

    is_group = body.conversation_type == ConversationType.GROUP
    keeps_title = body.conversation_type in (ConversationType.GROUP, ConversationType.SUPPORT)
    now = datetime.now(timezone.utc)
    conversation = Conversation(
        conversation_type=body.conversation_type.value,
        property_id=body.property_id,
        title=body.title if keeps_title else None,
        category=(
            ConversationCategory.LANDLORD_INQUIRY if body.property_id
            else ConversationCategory.GENERAL
        ).value,
        created_at=now,
        updated_at=now,
    )
    conversation.participants = [
        ConversationParticipant(
            user_id=user_id,
            role=(ParticipantRole.ADMIN if is_group else ParticipantRole.MEMBER).value,
        ),
        *(
            ConversationParticipant(user_id=pid, role=ParticipantRole.MEMBER.value)
            for pid in body.participant_ids
        ),
    ]
    db.add(conversation)
    await db.flush()

    if body.content:
        db.add(Message(
            conversation_id=conversation.id,
            sender_id=user_id,
            content=body.content,
            message_type=MessageType.TEXT.value,
            created_at=now,
            updated_at=now,
        ))
        conversation.last_responder_id = user_id
        conversation.needs_response = True

    await db.commit()
    logger.info(
        f"Conversation {conversation.id} created ({body.conversation_type.value})",
        extra={"user_id": str(user_id), "conversation_id": str(conversation.id)},
    )
    return {
        "conversation": serialize_conversation(conversation),
        "participants_count": len(conversation.participants),
        "success": True,
    }


# ─── Messages ───────────────────────────────────────────────────

async def list_messages(
    db: AsyncSession, user_id: uuid.UUID, conversation_id: uuid.UUID,
) -> list[dict]:
    await _require_access(db, user_id, conversation_id)
    result = await db.execute(
        select(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.is_deleted.is_(False),
        )
        .order_by(Message.created_at.desc())
        .limit(MESSAGE_PAGE_SIZE),
    )
    return [serialize_message(m, m.sender) for m in result.scalars().all()]


async def send_message(
    db: AsyncSession,
    notifier: RealtimeNotifier,
    user_id: uuid.UUID,
    body: MessageCreate,
) -> dict:
    await _require_access(db, user_id, body.conversation_id)

    conversation = await db.get(Conversation, body.conversation_id)
    if conversation is None:
        raise ResourceNotFoundError("Conversation", str(body.conversation_id))

    now = datetime.now(timezone.utc)
    message = Message(
        conversation_id=body.conversation_id,
        sender_id=user_id,
        content=body.content,
        message_type=MessageType.TEXT.value,
        created_at=now,
        updated_at=now,
    )
    db.add(message)
    conversation.updated_at = now
    conversation.last_responder_id = user_id
    conversation.needs_response = True
    await db.commit()

    sender = await db.get(User, user_id)
    payload = serialize_message(message, sender)
    broadcast = {**payload, "clientId": body.client_id}

    await notifier.trigger(
        conversation_channel(body.conversation_id), "new-message", broadcast,
    )
    await notifier.trigger_many(
        [user_channel(p.user_id) for p in conversation.participants],
        "conversation-update",
        {"conversationId": str(body.conversation_id), "lastMessage": broadcast},
    )
    logger.info(
        "Message sent",
        extra={"user_id": str(user_id), "conversation_id": str(body.conversation_id)},
    )
    return payload


async def delete_message(
    db: AsyncSession,
    notifier: RealtimeNotifier,
    user_id: uuid.UUID,
    message_id: uuid.UUID,
) -> dict:
    result = await db.execute(
        select(Message).where(Message.id == message_id, Message.is_deleted.is_(False)),
    )
    message = result.scalar_one_or_none()
    if message is None:
        raise ResourceNotFoundError("Message", str(message_id))
    if message.sender_id != user_id:
        raise PermissionDeniedError("You can only delete your own messages")
    await _require_access(db, user_id, message.conversation_id)

    now = datetime.now(timezone.utc)
    message.is_deleted = True
    message.deleted_at = now
    message.updated_at = now
    await db.commit()

    active = await db.execute(
        select(ConversationParticipant.user_id).where(
            ConversationParticipant.conversation_id == message.conversation_id,
            ConversationParticipant.is_active.is_(True),
        ),
    )
    await notifier.trigger_many(
        [user_channel(uid) for uid in active.scalars().all()],
        "message-deleted",
        {
            "messageId": str(message_id),
            "conversationId": str(message.conversation_id),
            "deletedBy": str(user_id),
        },
    )
    return {
        "success": True,
        "messageId": str(message_id),
        "deletedMessage": serialize_message(message),
    }


# ─── Realtime Channel Authorization ─────────────────────────────

async def authorize_channel(
    db: AsyncSession,
    notifier: RealtimeNotifier,
    user_id: uuid.UUID,
    socket_id: str,
    channel: str,
) -> dict:
    """Sign a private-channel subscription the caller is entitled to."""
    authorized = False
    if channel.startswith(_USER_CHANNEL_PREFIX):
        authorized = channel[len(_USER_CHANNEL_PREFIX):] == str(user_id)
    elif channel.startswith(_CONVERSATION_CHANNEL_PREFIX):
        try:
            conversation_id = uuid.UUID(channel[len(_CONVERSATION_CHANNEL_PREFIX):])
        except ValueError:
            conversation_id = None
        if conversation_id is not None:
            authorized = await user_has_conversation_access(db, user_id, conversation_id)

    if not authorized:
        logger.warning(
            f"Channel authorization denied for {channel}",
            extra={"user_id": str(user_id)},
        )
        raise PermissionDeniedError()
    return notifier.authorize(socket_id, channel)
