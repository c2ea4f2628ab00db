"""AI Chat Services — query-to-filter, image-to-data, chat and action routing.

Invariants:
    - Every model call goes through ResilientAnthropicClient (never the raw SDK)
    - An empty model reply is an AIServiceError (502), never an empty 200
    - decide_action never fails: any AIServiceError degrades to "chat"
    - Only user/ai turns of a chat history reach the model, as a plain transcript

Design Decisions:
    - The transcript is sent as a single user message: the client history mixes
      system/error rows that do not map onto strictly alternating roles
    - Filter extraction and routing use the fast model; chat and vision use the main one
"""

import base64
import logging

from rentmap.config import get_settings
from rentmap.core.domain_types import ChatAction
from rentmap.core.errors import AIServiceError, ErrorContext, UnsupportedMediaError
from rentmap.core.model_output import (
    clean_extracted_fields, parse_action, parse_filter_response, parse_model_json,
)
from rentmap.infrastructure.anthropic_client import ResilientAnthropicClient, response_text
from rentmap.schemas.ai import ChatHistoryMessage
from rentmap.services.ai_prompts import (
    CHAT_PROMPT,
    IMAGE_TO_DATA_PROMPT,
    IMAGE_TO_DATA_SYSTEM_PROMPT,
    QUERY_TO_FILTER_PROMPT,
    build_decide_action_prompt,
)

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


def render_transcript(history: list[ChatHistoryMessage], prompt: str) -> str:
    """Flatten a chat history plus the new prompt into "User:/Assistant:" lines."""
    turns = [
        f"{'User' if m.type == 'user' else 'Assistant'}: {m.text}"
        for m in history
        if m.type in ("user", "ai")
    ]
    if not turns:
        return f"User: {prompt}"
    return "\n".join(turns) + f"\n\nUser: {prompt}"


def _require_text(response, operation: str) -> str:
    text = response_text(response)
    if not text.strip():
        raise AIServiceError(
            "No response from the AI model",
            "empty_response",
            context=ErrorContext(details=operation),
            http_status=502,
        )
    return text


# ─── Query To Filter ────────────────────────────────────────────

async def query_to_filter(client: ResilientAnthropicClient, prompt: str) -> dict:
    settings = get_settings()
    response = await client.create_message(
        model=settings.ai_fast_model,
        max_tokens=settings.ai_max_tokens,
        system=QUERY_TO_FILTER_PROMPT,
        messages=[{"role": "user", "content": prompt}],
        temperature=0,
        context=ErrorContext(details="query-to-filter"),
    )
    text = _require_text(response, "query-to-filter")
    filters = parse_filter_response(text)
    logger.info(f"Query-to-filter parsed {len(filters or {})} filters")
    return {"response": text, "filters": filters}


# ─── Image To Data ──────────────────────────────────────────────

async def image_to_data(
    client: ResilientAnthropicClient, data: bytes, media_type: str | None,
) -> dict[str, str]:
    """Ask the vision model for listing fields visible in an image."""
    if media_type not in SUPPORTED_IMAGE_TYPES:
        raise UnsupportedMediaError(media_type or "")

    settings = get_settings()
    response = await client.create_message(
        model=settings.ai_model,
        max_tokens=settings.ai_max_tokens,
        system=IMAGE_TO_DATA_SYSTEM_PROMPT,
        messages=[{
            "role": "user",
            "content": [
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": media_type,
                        "data": base64.b64encode(data).decode("ascii"),
                    },
                },
                {"type": "text", "text": IMAGE_TO_DATA_PROMPT},
            ],
        }],
        context=ErrorContext(details="image-to-data"),
    )
    text = _require_text(response, "image-to-data")
    parsed = parse_model_json(text)
    if parsed is None:
        logger.error(f"Unparseable image extraction reply: {text[:200]}")
        raise AIServiceError(
            "Failed to parse extracted data",
            "invalid_response",
            context=ErrorContext(details="image-to-data"),
            http_status=502,
        )
    return clean_extracted_fields(parsed)


# ─── Chat & Routing ─────────────────────────────────────────────

async def chat(
    client: ResilientAnthropicClient, prompt: str, history: list[ChatHistoryMessage],
) -> dict:
    settings = get_settings()
    response = await client.create_message(
        model=settings.ai_model,
        max_tokens=settings.ai_max_tokens,
        system=CHAT_PROMPT,
        messages=[{"role": "user", "content": render_transcript(history, prompt)}],
        context=ErrorContext(details="chat"),
    )
    return {"response": _require_text(response, "chat")}


async def decide_action(
    client: ResilientAnthropicClient, prompt: str, history: list[ChatHistoryMessage],
) -> dict:
    """Route the next turn to a listing search or a chat reply."""
    settings = get_settings()
    has_found_properties = any(m.property_listings for m in history)
    try:
        response = await client.create_message(
            model=settings.ai_fast_model,
            max_tokens=10,
            system=build_decide_action_prompt(has_found_properties),
            messages=[{"role": "user", "content": render_transcript(history, prompt)}],
            temperature=0,
            context=ErrorContext(details="decide-action"),
        )
    except AIServiceError as e:
        logger.warning(f"Action routing failed, defaulting to chat: {e.message}")
        return {"action": ChatAction.CHAT.value}
    return {"action": parse_action(response_text(response))}
