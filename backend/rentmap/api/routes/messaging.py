"""Messaging Routes — conversations, messages and realtime channel auth.

Invariants:
    - Every route requires a session
    - Realtime events are published by the service after the DB commit
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Form, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.api.dependencies import get_current_user_id, get_notifier
from rentmap.core.domain_types import ConversationSort
from rentmap.core.errors import InvalidRequestError
from rentmap.infrastructure.database import get_db
from rentmap.infrastructure.realtime import RealtimeNotifier
from rentmap.schemas.messaging import ConversationCreate, MessageCreate, MessageDelete
from rentmap.services import messaging

router = APIRouter(prefix="/api/v1/messaging", tags=["messaging"])


@router.get("/conversations")
async def list_conversations(
    category: str | None = Query(None),
    sort_by: ConversationSort = Query(ConversationSort.NEWEST, alias="sortBy"),
    archived: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return await messaging.get_user_conversations(
        db, user_id, category=category, sort_by=sort_by, archived=archived,
    )


@router.post("/conversations")
async def create_conversation(
    body: ConversationCreate,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return await messaging.create_conversation(db, user_id, body)


@router.get("/messages")
async def list_messages(
    conversation_id: UUID = Query(..., alias="conversationId"),
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return await messaging.list_messages(db, user_id, conversation_id)


@router.post("/messages")
async def send_message(
    body: MessageCreate,
    db: AsyncSession = Depends(get_db),
    notifier: RealtimeNotifier = Depends(get_notifier),
    user_id: UUID = Depends(get_current_user_id),
):
    return await messaging.send_message(db, notifier, user_id, body)


@router.delete("/messages")
async def delete_message(
    body: MessageDelete,
    db: AsyncSession = Depends(get_db),
    notifier: RealtimeNotifier = Depends(get_notifier),
    user_id: UUID = Depends(get_current_user_id),
):
    return await messaging.delete_message(db, notifier, user_id, body.message_id)


@router.post("/auth")
async def authorize_channel(
    socket_id: str | None = Form(None),
    channel_name: str | None = Form(None),
    db: AsyncSession = Depends(get_db),
    notifier: RealtimeNotifier = Depends(get_notifier),
    user_id: UUID = Depends(get_current_user_id),
):
    """Pusher private-channel authorization endpoint (form-encoded)."""
    if not socket_id or not channel_name:
        raise InvalidRequestError("Missing socket_id or channel_name")
    return await messaging.authorize_channel(
        db, notifier, user_id, socket_id, channel_name,
    )
