"""AI Routes — model-backed search helpers, chat, vision extraction and the assistant.

Invariants:
    - Only /property-assistant needs a session (it keeps per-user context)
    - Model failures surface as AI_SERVICE_ERROR except in /decide-action,
      which always answers with an action
"""

from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.api.dependencies import get_ai_client, get_current_user_id
from rentmap.core.errors import InvalidRequestError
from rentmap.infrastructure.anthropic_client import ResilientAnthropicClient
from rentmap.infrastructure.database import get_db
from rentmap.schemas.ai import (
    ChatRequest, ExtractPropertyDataRequest, PromptRequest, PropertyAssistantRequest,
)
from rentmap.services import ai_chat
from rentmap.services.ocr_extraction import extract_listing_fields
from rentmap.services.property_assistant import run_property_assistant

router = APIRouter(prefix="/api/v1/ai", tags=["ai"])


@router.post("/query-to-filter")
async def query_to_filter(
    body: PromptRequest,
    client: ResilientAnthropicClient = Depends(get_ai_client),
):
    return await ai_chat.query_to_filter(client, body.prompt)


@router.post("/image-to-data")
async def image_to_data(
    image: UploadFile | None = File(None),
    client: ResilientAnthropicClient = Depends(get_ai_client),
):
    if image is None:
        raise InvalidRequestError("No file provided", field="image")
    data = await image.read()
    if not data:
        raise InvalidRequestError("Uploaded file is empty", field="image")
    return await ai_chat.image_to_data(client, data, image.content_type)


@router.post("/chat")
async def chat(
    body: ChatRequest,
    client: ResilientAnthropicClient = Depends(get_ai_client),
):
    return await ai_chat.chat(client, body.prompt, body.chat_history)


@router.post("/decide-action")
async def decide_action(
    body: ChatRequest,
    client: ResilientAnthropicClient = Depends(get_ai_client),
):
    return await ai_chat.decide_action(client, body.prompt, body.chat_history)


@router.post("/property-assistant")
async def property_assistant(
    body: PropertyAssistantRequest,
    db: AsyncSession = Depends(get_db),
    client: ResilientAnthropicClient = Depends(get_ai_client),
    user_id: UUID = Depends(get_current_user_id),
):
    return await run_property_assistant(
        db, client, user_id, body.message, body.conversation_history,
    )


@router.post("/extract-property-data")
async def extract_property_data(body: ExtractPropertyDataRequest):
    """Regex extraction over OCR text from one or more listing screenshots."""
    return extract_listing_fields(body.extracted_texts)
