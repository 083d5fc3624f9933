"""Request models for the console API.

Bodies are accepted in camelCase (what the dashboard sends) or snake_case.
Unknown keys are rejected so typos surface as 400 instead of being dropped.
Create models describe the subset of columns a client may set; ids,
timestamps and counters are owned by the database.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gharpey.domain.enums import (
    Channel,
    ContactType,
    Direction,
    Language,
    MessageStatus,
    Sentiment,
)


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def provided_fields(self) -> dict[str, Any]:
        """Fields explicitly present in the request body (partial updates)."""
        return self.model_dump(exclude_unset=True)


# ── Contacts ──────────────────────────────────────────────────────────────────


class ContactCreate(_RequestModel):
    name: str = Field(min_length=1)
    phone: str | None = None
    email: str | None = None
    type: ContactType
    language: Language = "en"
    location: str | None = None
    notes: str | None = None
    metadata: dict[str, Any] | None = None


class ContactUpdate(_RequestModel):
    name: str | None = Field(default=None, min_length=1)
    phone: str | None = None
    email: str | None = None
    type: ContactType | None = None
    language: Language | None = None
    location: str | None = None
    notes: str | None = None
    metadata: dict[str, Any] | None = None


# ── Conversations ─────────────────────────────────────────────────────────────


class ConversationCreate(_RequestModel):
    contact_id: str = Field(min_length=1)
    channel: Channel
    subject: str | None = None
    unread_count: int = Field(default=0, ge=0)
    status: str = "active"


class ConversationUpdate(_RequestModel):
    subject: str | None = None
    status: str | None = Field(default=None, min_length=1)


# ── Messages ──────────────────────────────────────────────────────────────────


class MessageCreate(_RequestModel):
    conversation_id: str = Field(min_length=1)
    contact_id: str = Field(min_length=1)
    direction: Direction
    channel: Channel
    content: str = Field(min_length=1)
    language: Language | None = None
    translated_content: str | None = None
    status: MessageStatus = "pending"
    sentiment: Sentiment | None = None
    intent: str | None = None
    metadata: dict[str, Any] | None = None
    is_voice: bool = False
    voice_url: str | None = None
    transcription: str | None = None


# ── Templates ─────────────────────────────────────────────────────────────────


class TemplateCreate(_RequestModel):
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    channel: Channel
    content: dict[str, Any]
    variables: list[str] | None = None
    language: Language = "en"
    is_active: bool = True


class TemplateUpdate(_RequestModel):
    name: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    channel: Channel | None = None
    content: dict[str, Any] | None = None
    variables: list[str] | None = None
    language: Language | None = None
    is_active: bool | None = None


# ── AI utilities ──────────────────────────────────────────────────────────────


class GenerateResponseRequest(_RequestModel):
    message_history: list[str]
    language: str | None = None


class TranslateRequest(_RequestModel):
    content: str = Field(min_length=1)
    target_language: str = Field(min_length=1)


class ProcessRequest(_RequestModel):
    content: str = Field(min_length=1)
    target_language: str | None = None
