"""Property Assistant — rule-based extraction + model reply + matching listings.

Invariants:
    - Each user has one in-memory assistant context ("{user_id}-default")
    - Listings are searched only when the message carries search criteria or a
      search/filter intent, and at most ASSISTANT_RESULT_LIMIT are returned
    - Every returned listing is recorded as viewed in the assistant context
    - Model messages always start with a user turn and alternate roles

Design Decisions:
    - Filters come from the deterministic extractor, not the model: the reply is
      free text and the search stays reproducible for the same message
"""

import logging
import time
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.config import get_settings
from rentmap.core.conversation_context import context_store
from rentmap.core.domain_types import SearchIntent, SortOption
from rentmap.core.errors import ErrorContext
from rentmap.core.filter_extraction import (
    analyze_intent, convert_to_filter_options, extract_filters_from_text, has_search_criteria,
)
from rentmap.core.formatters import describe_filters
from rentmap.infrastructure.anthropic_client import (
    ResilientAnthropicClient, response_text, response_tokens,
)
from rentmap.schemas.ai import AssistantTurn
from rentmap.schemas.filters import FilterOptions
from rentmap.services.ai_prompts import build_property_assistant_prompt
from rentmap.services.property_search import search_properties_with_filter

logger = logging.getLogger(__name__)

ASSISTANT_RESULT_LIMIT = 5
CONFIDENT_INTENT = 0.7

_DEFAULT_FOLLOW_UPS = [
    "What's your preferred location?",
    "What's your budget range?",
    "How many bedrooms do you need?",
]


def build_model_messages(history: list[AssistantTurn], message: str) -> list[dict]:
    """Merge same-role neighbours and drop leading assistant turns."""
    messages: list[dict] = []
    for turn in [*history, AssistantTurn(role="user", content=message)]:
        if not turn.content.strip():
            continue
        if not messages and turn.role == "assistant":
            continue
        if messages and messages[-1]["role"] == turn.role:
            messages[-1]["content"] += "\n\n" + turn.content
        else:
            messages.append({"role": turn.role, "content": turn.content})
    return messages


async def run_property_assistant(
    db: AsyncSession,
    client: ResilientAnthropicClient,
    user_id: uuid.UUID,
    message: str,
    history: list[AssistantTurn],
) -> dict:
    settings = get_settings()
    conversation = context_store.get_or_create_default(str(user_id))

    extracted = extract_filters_from_text(message)
    intent = analyze_intent(message)
    recommendations = context_store.contextual_recommendations(conversation.id)
    logger.info(
        f"Assistant extracted {sorted(extracted)} (intent={intent['type']})",
        extra={"user_id": str(user_id)},
    )

    system = build_property_assistant_prompt(
        recent_filters=conversation.recent_filters,
        filter_summary=describe_filters(conversation.recent_filters or {}),
        preferences=conversation.preferences.to_dict(),
        viewed_count=len(conversation.viewed_properties),
        favorite_count=len(conversation.favorite_properties),
        extracted_filters=extracted,
        intent=intent,
        recommendations=recommendations,
    )
    started = time.perf_counter()
    response = await client.create_message(
        model=settings.ai_model,
        max_tokens=settings.ai_max_tokens,
        system=system,
        messages=build_model_messages(history, message),
        temperature=0.7,
        context=ErrorContext(user_id=str(user_id), details="property-assistant"),
    )
    processing_ms = int((time.perf_counter() - started) * 1000)
    reply = response_text(response)

    filter_options: dict | None = None
    properties: list[dict] = []
    if extracted:
        filter_options = convert_to_filter_options(extracted)
        context_store.update_filters(conversation.id, filter_options)
        wants_search = intent["type"] in (SearchIntent.SEARCH.value, SearchIntent.FILTER.value)
        if wants_search or has_search_criteria(extracted):
            properties = await search_properties_with_filter(
                db,
                FilterOptions.model_validate(filter_options),
                SortOption.PRICE_ASC,
                limit=ASSISTANT_RESULT_LIMIT,
            )
            for pair in properties:
                context_store.add_viewed_property(conversation.id, pair["properties"]["id"])

    context_store.append_message(conversation.id, "user", message)
    if reply:
        context_store.append_message(conversation.id, "assistant", reply)

    follow_ups: list[str] = []
    if not properties and intent["type"] == SearchIntent.SEARCH.value:
        follow_ups = recommendations.get("suggestedQuestions") or _DEFAULT_FOLLOW_UPS

    return {
        "message": reply,
        "intent": {
            "type": intent["type"],
            "confidence": intent["confidence"],
            "extractedFilters": extracted,
            "searchQuery": message,
        },
        "properties": properties,
        "filterOptions": filter_options,
        "conversationContext": {
            "needsMoreInfo": intent["confidence"] < CONFIDENT_INTENT,
            "followUpQuestions": follow_ups,
            "topicShift": False,
            "contextualTips": recommendations.get("contextualTips", []),
            "conversationSummary": context_store.summary(conversation.id),
        },
        "metadata": {
            "tokensUsed": response_tokens(response),
            "processingTime": processing_ms,
            "propertyCount": len(properties),
            "searchType": intent["type"],
            "extractedFilters": extracted,
            "conversationId": conversation.id,
        },
    }
