"""Model Output Parsing — turn free-form model text into JSON-safe structures.

Invariants:
    - Never raises on malformed model output; returns None instead
    - clean_extracted_fields keeps only non-empty string values, trimmed

Design Decisions:
    - Three-level fallback (direct JSON, fenced block, first {...} span): models
      sometimes wrap JSON in prose or markdown fences despite instructions
"""

import json
import re

from rentmap.core.domain_types import ChatAction

BAD_QUERY = "bad_query"

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def parse_model_json(text: str) -> dict | None:
    """Extract a JSON object from model text, or None."""
    if not text:
        return None
    candidates = [text.strip()]
    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    span = _JSON_OBJECT.search(text)
    if span:
        candidates.append(span.group(0))

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


def is_bad_query(text: str) -> bool:
    return text.strip().strip('"').strip().lower() == BAD_QUERY


def parse_filter_response(text: str) -> dict | None:
    """Parse a query-to-filter reply; None for bad_query or unparseable text."""
    if is_bad_query(text):
        return None
    parsed = parse_model_json(text)
    if parsed is None:
        return None
    return {k: v for k, v in parsed.items() if v is not None}


def clean_extracted_fields(data: dict) -> dict[str, str]:
    cleaned: dict[str, str] = {}
    for key, value in data.items():
        if isinstance(value, str) and value.strip():
            cleaned[key] = value.strip()
    return cleaned


def parse_action(text: str | None) -> str:
    """Routing reply to an action: only an exact "search" searches."""
    if text and text.strip().lower() == ChatAction.SEARCH.value:
        return ChatAction.SEARCH.value
    return ChatAction.CHAT.value
