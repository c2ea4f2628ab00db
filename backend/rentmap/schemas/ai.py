"""AI Schemas — prompts, chat transcripts and OCR extraction requests.

Invariants:
    - Prompts are stripped and non-empty
    - Only user/ai turns of a chat history are rendered into a transcript
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from rentmap.schemas.base import CamelModel


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("cannot be empty or whitespace")
    return v


class PromptRequest(BaseModel):
    prompt: str = Field(min_length=1, max_length=4000)

    @field_validator("prompt")
    @classmethod
    def strip_prompt(cls, v: str) -> str:
        return _strip_required(v)


class ChatHistoryMessage(CamelModel):
    text: str = ""
    type: Literal["user", "ai", "system", "error"]
    property_listings: list[dict] | None = None


class ChatRequest(CamelModel):
    prompt: str = Field(min_length=1, max_length=4000)
    chat_history: list[ChatHistoryMessage] = Field(default_factory=list)

    @field_validator("prompt")
    @classmethod
    def strip_prompt(cls, v: str) -> str:
        return _strip_required(v)


class AssistantTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class PropertyAssistantRequest(CamelModel):
    message: str = Field(min_length=1, max_length=4000)
    conversation_history: list[AssistantTurn] = Field(default_factory=list)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        return _strip_required(v)


class OCRExtractRequest(BaseModel):
    image: str = Field(min_length=1)
    filename: str | None = None


class ExtractPropertyDataRequest(CamelModel):
    extracted_texts: list[str]
