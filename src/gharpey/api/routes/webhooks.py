"""Inbound channel webhooks.

POST /api/webhooks/whatsapp   → flat relay form or Meta Cloud API envelope
GET  /api/webhooks/whatsapp   → Meta subscription handshake
POST /api/webhooks/email      → mail relay form

Each delivery finds or creates the sender's contact and conversation and
stores one enriched inbound message. Sender addresses and message text are
PII: they are only logged through safe_log_context, text never at all.
"""

import json
import os
from typing import Any

from fastapi import APIRouter, Depends, Header, Query, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from gharpey.api.deps import get_enrichment_client
from gharpey.channels import email_adapter, whatsapp_adapter
from gharpey.channels.models import (
    InvalidPayloadError,
    NormalizedInbound,
    UnsupportedMessageError,
)
from gharpey.enrichment.client import EnrichmentClient
from gharpey.observability.logging import get_logger
from gharpey.observability.redaction import safe_log_context
from gharpey.services.ingestion import ingest_inbound

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])

logger = get_logger(__name__)


async def _read_json(request: Request) -> Any:
    raw = await request.body()
    try:
        return json.loads(raw or b"null")
    except ValueError:
        return None


async def _store(inbound: NormalizedInbound, client: EnrichmentClient) -> dict:
    logger.info(
        "inbound delivery accepted",
        extra={
            "extra_fields": safe_log_context(
                channel=inbound.channel,
                sender=inbound.sender,
                external_id=inbound.external_id,
                kind=inbound.kind,
            )
        },
    )
    # Blocking DB and LLM calls stay off the event loop.
    result = await run_in_threadpool(ingest_inbound, inbound, client)
    return {
        "success": True,
        "messageId": result.message["id"],
        "conversationId": result.message["conversationId"],
        "suggestion": result.suggested_response,
        "enrichment": result.enrichment_status(),
    }


@router.get("/whatsapp")
async def whatsapp_webhook_verify(
    hub_mode: str | None = Query(None, alias="hub.mode"),
    hub_verify_token: str | None = Query(None, alias="hub.verify_token"),
    hub_challenge: str | None = Query(None, alias="hub.challenge"),
) -> Response:
    """Echo hub.challenge when hub.verify_token matches WHATSAPP_VERIFY_TOKEN."""
    expected_token = os.environ.get("WHATSAPP_VERIFY_TOKEN", "")

    if expected_token and hub_mode == "subscribe" and hub_verify_token == expected_token:
        logger.info(
            "whatsapp webhook verification successful",
            extra={"extra_fields": safe_log_context(hub_mode=hub_mode)},
        )
        return Response(status_code=200, content=hub_challenge or "")

    logger.warning(
        "whatsapp webhook verification failed",
        extra={
            "extra_fields": safe_log_context(
                hub_mode=hub_mode or "missing",
                token_configured=bool(expected_token),
            )
        },
    )
    return Response(status_code=403, content="verification failed")


@router.post("/whatsapp")
async def whatsapp_webhook(
    request: Request,
    x_hub_signature_256: str | None = Header(None, alias=whatsapp_adapter.SIGNATURE_HEADER),
    client: EnrichmentClient = Depends(get_enrichment_client),
) -> Response:
    """Receive a WhatsApp message.

    Returns:
        200 with the stored message id and the suggested reply.
        200 with ``ignored`` for deliveries that carry no text (status updates).
        400 if the payload is not JSON or has no sender/body.
        401 if WHATSAPP_APP_SECRET is set and the signature does not match.
    """
    app_secret = os.environ.get("WHATSAPP_APP_SECRET", "")
    if app_secret:
        raw_body = await request.body()
        try:
            whatsapp_adapter.verify_signature(raw_body, x_hub_signature_256, app_secret)
        except whatsapp_adapter.SignatureVerificationError as exc:
            logger.warning(
                "whatsapp webhook signature rejected",
                extra={"extra_fields": safe_log_context(reason=str(exc))},
            )
            return JSONResponse(status_code=401, content={"detail": "Invalid signature"})

    payload = await _read_json(request)
    try:
        inbound = whatsapp_adapter.normalize(payload)
    except UnsupportedMessageError as exc:
        logger.info(
            "whatsapp delivery ignored",
            extra={"extra_fields": safe_log_context(reason=str(exc))},
        )
        return JSONResponse(status_code=200, content={"success": True, "ignored": str(exc)})
    except InvalidPayloadError as exc:
        logger.warning(
            "invalid whatsapp payload",
            extra={"extra_fields": safe_log_context(reason=str(exc))},
        )
        return JSONResponse(status_code=400, content={"detail": f"Invalid webhook payload: {exc}"})

    return JSONResponse(status_code=200, content=await _store(inbound, client))


@router.post("/email")
async def email_webhook(
    request: Request,
    client: EnrichmentClient = Depends(get_enrichment_client),
) -> Response:
    """Receive an e-mail forwarded by the mail relay."""
    payload = await _read_json(request)
    try:
        inbound = email_adapter.normalize(payload)
    except InvalidPayloadError as exc:
        logger.warning(
            "invalid email payload",
            extra={"extra_fields": safe_log_context(reason=str(exc))},
        )
        return JSONResponse(status_code=400, content={"detail": f"Invalid webhook payload: {exc}"})

    return JSONResponse(status_code=200, content=await _store(inbound, client))
