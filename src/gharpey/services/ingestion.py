"""Message ingestion: enrichment of inbound messages, then one write.

Inbound messages are analyzed before they are stored and the analysis
overwrites language, sentiment and intent (and translated_content when the
model produced one). Outbound messages are stored exactly as given.

The LLM call runs before the transaction is opened so no database
connection is held while waiting on the external API. The message insert
and the conversation bookkeeping share the transaction.

The suggested reply is returned to the caller and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from psycopg2.extensions import connection as PgConnection, cursor as PgCursor

from gharpey.channels.models import NormalizedInbound
from gharpey.enrichment.client import EnrichmentClient
from gharpey.enrichment.results import Analysis, EnrichmentResult
from gharpey.infra.db import txn
from gharpey.infra.repositories import (
    contacts_repository,
    conversations_repository,
    messages_repository,
)
from gharpey.observability.logging import get_logger
from gharpey.observability.redaction import safe_log_context

logger = get_logger(__name__)

# Defaults for contacts first seen through a webhook.
NEW_CONTACT_TYPE = "employer"
NEW_CONTACT_LANGUAGE = "en"

_CHANNEL_LABELS = {"whatsapp": "WhatsApp", "email": "Email"}


@dataclass(frozen=True)
class IngestionResult:
    message: dict[str, Any]
    enrichment: EnrichmentResult[Analysis] | None = None
    contact_created: bool = False
    conversation_created: bool = False

    @property
    def suggested_response(self) -> str | None:
        if self.enrichment is None:
            return None
        return self.enrichment.value.suggested_response

    def enrichment_status(self) -> dict[str, Any]:
        if self.enrichment is None:
            return {"status": "skipped"}
        return self.enrichment.describe()


def apply_analysis(data: dict[str, Any], analysis: Analysis) -> dict[str, Any]:
    """Copy of ``data`` with the analysis written over the enrichment fields."""
    enriched = dict(data)
    enriched["language"] = analysis.language
    enriched["sentiment"] = analysis.sentiment
    enriched["intent"] = analysis.intent
    if analysis.translated_content:
        enriched["translated_content"] = analysis.translated_content
    return enriched


def _log_stored(result: IngestionResult, source: str) -> None:
    message = result.message
    logger.info(
        "message stored",
        extra={
            "extra_fields": safe_log_context(
                source=source,
                message_id=message["id"],
                conversation_id=message["conversationId"],
                direction=message["direction"],
                channel=message["channel"],
                enrichment=result.enrichment_status()["status"],
            )
        },
    )


def ingest_message(
    data: dict[str, Any],
    client: EnrichmentClient,
    *,
    conn: PgConnection | None = None,
) -> IngestionResult:
    """Store a message created through the API.

    Args:
        data: Validated message fields (``MessageCreate.model_dump()``).
        client: Enrichment client; only used for inbound messages.
        conn: Optional existing connection (tests, scripts).

    Raises:
        psycopg2.Error: If the write fails; nothing is stored in that case.
    """
    enrichment: EnrichmentResult[Analysis] | None = None
    if data["direction"] == "inbound":
        enrichment = client.analyze(data["content"])
        data = apply_analysis(data, enrichment.value)

    with txn(conn) as cur:
        message = messages_repository.create_message(cur, data)

    result = IngestionResult(message=message, enrichment=enrichment)
    _log_stored(result, "api")
    return result


def _resolve_contact(cur: PgCursor, inbound: NormalizedInbound) -> tuple[dict[str, Any], bool]:
    contacts_repository.lock_channel_address(cur, inbound.channel, inbound.sender)

    if inbound.channel == "whatsapp":
        contact = contacts_repository.find_contact_by_phone(cur, inbound.sender)
    else:
        contact = contacts_repository.find_contact_by_email(cur, inbound.sender)
    if contact is not None:
        return contact, False

    label = _CHANNEL_LABELS[inbound.channel]
    data: dict[str, Any] = {
        "name": f"{label} {inbound.sender}",
        "type": NEW_CONTACT_TYPE,
        "language": NEW_CONTACT_LANGUAGE,
    }
    if inbound.channel == "whatsapp":
        data["phone"] = inbound.sender
    else:
        data["email"] = inbound.sender
    if inbound.sender_name:
        data["metadata"] = {"displayName": inbound.sender_name}

    return contacts_repository.create_contact(cur, data), True


def _resolve_conversation(
    cur: PgCursor, contact_id: str, inbound: NormalizedInbound
) -> tuple[dict[str, Any], bool]:
    conversation = conversations_repository.find_conversation(cur, contact_id, inbound.channel)
    if conversation is not None:
        return conversation, False

    subject = inbound.subject or f"{_CHANNEL_LABELS[inbound.channel]} Conversation"
    created = conversations_repository.create_conversation(
        cur,
        {"contact_id": contact_id, "channel": inbound.channel, "subject": subject},
    )
    return created, True


def ingest_inbound(
    inbound: NormalizedInbound,
    client: EnrichmentClient,
    *,
    conn: PgConnection | None = None,
) -> IngestionResult:
    """Store a message delivered by a channel webhook.

    Finds (or creates) the contact by channel address and its conversation
    on that channel, then stores one enriched inbound message.
    """
    enrichment = client.analyze(inbound.text)

    with txn(conn) as cur:
        contact, contact_created = _resolve_contact(cur, inbound)
        conversation, conversation_created = _resolve_conversation(cur, contact["id"], inbound)

        metadata: dict[str, Any] = {"receivedAt": inbound.received_at.isoformat()}
        if inbound.external_id:
            metadata["externalId"] = inbound.external_id
        if inbound.kind != "text":
            metadata["kind"] = inbound.kind

        data = apply_analysis(
            {
                "conversation_id": conversation["id"],
                "contact_id": contact["id"],
                "direction": "inbound",
                "channel": inbound.channel,
                "content": inbound.text,
                "status": "delivered",
                "metadata": metadata,
            },
            enrichment.value,
        )
        message = messages_repository.create_message(cur, data)

    result = IngestionResult(
        message=message,
        enrichment=enrichment,
        contact_created=contact_created,
        conversation_created=conversation_created,
    )
    _log_stored(result, f"webhook:{inbound.channel}")
    return result
