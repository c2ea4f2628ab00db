"""Messaging Schemas — conversation creation, message send/delete.

Invariants:
    - direct: exactly one other participant
    - group: at least two other participants and a non-blank title
    - support: a non-blank title
    - message content is stripped and non-empty (max 5000 chars)

Design Decisions:
    - Type rules validated here (400 via the validation handler); participant
      existence needs the DB and is checked in services/messaging.py
"""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from rentmap.core.domain_types import ConversationType
from rentmap.schemas.base import CamelModel


class ConversationCreate(BaseModel):
    conversation_type: ConversationType = ConversationType.DIRECT
    participant_ids: list[UUID] = Field(default_factory=list)
    content: str | None = Field(None, max_length=5000)
    property_id: UUID | None = None
    title: str | None = Field(None, max_length=200)

    @field_validator("participant_ids")
    @classmethod
    def dedupe_participants(cls, v: list[UUID]) -> list[UUID]:
        return list(dict.fromkeys(v))

    @field_validator("title", "content")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @model_validator(mode="after")
    def check_type_rules(self):
        count = len(self.participant_ids)
        if self.conversation_type == ConversationType.DIRECT and count != 1:
            raise ValueError("Direct conversations need exactly one other participant")
        if self.conversation_type == ConversationType.GROUP:
            if count < 2:
                raise ValueError("Group conversations need at least two other participants")
            if not self.title:
                raise ValueError("Group conversations need a title")
        if self.conversation_type == ConversationType.SUPPORT and not self.title:
            raise ValueError("Support conversations need a title")
        return self


class MessageCreate(CamelModel):
    conversation_id: UUID
    content: str = Field(min_length=1, max_length=5000)
    client_id: str | None = Field(None, max_length=100)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content cannot be empty or whitespace")
        return v


class MessageDelete(CamelModel):
    message_id: UUID
