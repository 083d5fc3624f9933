"""Conversations (inbox) endpoints.

GET   /api/conversations                 → list with contact, latest activity first
POST  /api/conversations                 → create (201)
GET   /api/conversations/{id}            → read
PATCH /api/conversations/{id}            → update subject/status
GET   /api/conversations/{id}/messages   → messages, oldest first
POST  /api/conversations/{id}/read       → reset unread counter
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Path
from psycopg2 import errors as pg_errors

from gharpey.domain.schemas import ConversationCreate, ConversationUpdate
from gharpey.infra.db import txn
from gharpey.infra.repositories import conversations_repository, messages_repository

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


@router.get("")
def list_conversations() -> list[dict]:
    with txn() as cur:
        return conversations_repository.list_conversations(cur)


@router.post("", status_code=201)
def create_conversation(body: ConversationCreate) -> dict:
    """Open a conversation for an existing contact (400 if the contact is unknown)."""
    try:
        with txn() as cur:
            return conversations_repository.create_conversation(cur, body.model_dump())
    except pg_errors.ForeignKeyViolation:
        raise HTTPException(status_code=400, detail="Invalid conversation data: unknown contact")


@router.get("/{conversation_id}")
def get_conversation(conversation_id: str = Path(..., description="Conversation ID")) -> dict:
    with txn() as cur:
        conversation = conversations_repository.get_conversation(cur, conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


@router.patch("/{conversation_id}")
def update_conversation(
    conversation_id: str = Path(..., description="Conversation ID"),
    body: ConversationUpdate = ...,
) -> dict:
    fields = body.provided_fields()
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        with txn() as cur:
            conversation = conversations_repository.update_conversation(
                cur, conversation_id, fields
            )
    except pg_errors.NotNullViolation:
        raise HTTPException(status_code=400, detail="Invalid conversation data")

    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


@router.get("/{conversation_id}/messages")
def list_conversation_messages(
    conversation_id: str = Path(..., description="Conversation ID"),
) -> list[dict]:
    with txn() as cur:
        if conversations_repository.get_conversation(cur, conversation_id) is None:
            raise HTTPException(status_code=404, detail="Conversation not found")
        return messages_repository.list_messages(cur, conversation_id)


@router.post("/{conversation_id}/read")
def mark_conversation_read(
    conversation_id: str = Path(..., description="Conversation ID"),
) -> dict:
    """Operator opened the conversation: unread counter back to zero."""
    with txn() as cur:
        conversation = conversations_repository.mark_conversation_read(cur, conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation
