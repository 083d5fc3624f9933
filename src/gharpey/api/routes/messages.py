"""Message endpoints.

POST /api/messages          → create; inbound messages are enriched first (201)
GET  /api/messages/recent   → latest messages across all conversations
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from psycopg2 import errors as pg_errors

from gharpey.api.deps import get_enrichment_client
from gharpey.domain.schemas import MessageCreate
from gharpey.enrichment.client import EnrichmentClient
from gharpey.infra.db import txn
from gharpey.infra.repositories import messages_repository
from gharpey.services.ingestion import ingest_message

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.post("", status_code=201)
def create_message(
    body: MessageCreate,
    client: EnrichmentClient = Depends(get_enrichment_client),
) -> dict:
    """Store a message.

    For ``direction=inbound`` the response waits on the enrichment call; its
    suggested reply is returned as ``aiSuggestion`` and not stored.
    """
    try:
        result = ingest_message(body.model_dump(), client)
    except pg_errors.ForeignKeyViolation:
        raise HTTPException(
            status_code=400, detail="Invalid message data: unknown conversation or contact"
        )

    return {
        "message": result.message,
        "aiSuggestion": result.suggested_response,
        "enrichment": result.enrichment_status(),
    }


@router.get("/recent")
def list_recent_messages(
    limit: int = Query(
        messages_repository.DEFAULT_RECENT_LIMIT,
        ge=1,
        le=messages_repository.MAX_RECENT_LIMIT,
    ),
) -> list[dict]:
    with txn() as cur:
        return messages_repository.list_recent_messages(cur, limit)
