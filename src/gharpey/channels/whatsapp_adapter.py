"""WhatsApp webhook adapter - validate and normalize inbound payloads.

Two shapes are accepted:

- the flat relay form ``{"from": "+91...", "body": "...", "messageId": "..."}``
- the Meta Cloud API envelope::

    {
      "object": "whatsapp_business_account",
      "entry": [{
        "changes": [{
          "value": {
            "contacts": [{"profile": {"name": "..."}, "wa_id": "..."}],
            "messages": [{"from": "PHONE", "id": "wamid...", "timestamp": "...",
                          "type": "text", "text": {"body": "..."}}]
          },
          "field": "messages"
        }]
      }]
    }
"""

import hashlib
import hmac
from typing import Any

from gharpey.infra.time import from_epoch, utc_now

from .models import InvalidPayloadError, NormalizedInbound, UnsupportedMessageError

SIGNATURE_HEADER = "X-Hub-Signature-256"


class SignatureVerificationError(Exception):
    """Raised when the webhook HMAC signature is missing or wrong."""


def verify_signature(payload_bytes: bytes, signature_header: str | None, app_secret: str) -> None:
    """Check a ``sha256=<hex>`` HMAC signature over the raw request body.

    Raises:
        SignatureVerificationError: If the header is missing, malformed or wrong.
    """
    if not signature_header:
        raise SignatureVerificationError("missing signature header")
    if not signature_header.startswith("sha256="):
        raise SignatureVerificationError("invalid signature format")

    expected = signature_header[len("sha256="):]
    computed = hmac.new(app_secret.encode("utf-8"), payload_bytes, hashlib.sha256).hexdigest()
    if not hmac.compare_digest(computed, expected):
        raise SignatureVerificationError("signature mismatch")


def normalize_phone(raw: str) -> str:
    """Canonical phone form used to match contacts: digits with a leading +.

    Meta sends bare digits (``919876543210``), relays usually send
    ``+91 98765 43210`` or a JID (``919876543210@s.whatsapp.net``).
    """
    number = raw.split("@", 1)[0]
    digits = "".join(ch for ch in number if ch.isdigit())
    if not digits:
        return ""
    return f"+{digits}"


def _first_meta_value(payload: dict[str, Any]) -> dict[str, Any] | None:
    entry = payload.get("entry")
    if not isinstance(entry, list) or not entry or not isinstance(entry[0], dict):
        return None
    changes = entry[0].get("changes")
    if not isinstance(changes, list) or not changes or not isinstance(changes[0], dict):
        return None
    value = changes[0].get("value")
    return value if isinstance(value, dict) else None


def _normalize_meta(payload: dict[str, Any]) -> NormalizedInbound:
    value = _first_meta_value(payload)
    if value is None:
        raise InvalidPayloadError("no change value in payload")

    messages = value.get("messages") or []
    if not messages and value.get("statuses"):
        raise UnsupportedMessageError("delivery status update")
    if not isinstance(messages, list) or not messages or not isinstance(messages[0], dict):
        raise InvalidPayloadError("no message found in payload")
    message = messages[0]

    sender = normalize_phone(str(message.get("from") or ""))
    if not sender:
        raise InvalidPayloadError("missing sender phone number")

    kind = str(message.get("type") or "unknown")
    text = None
    if kind == "text":
        text_obj = message.get("text")
        text = text_obj.get("body") if isinstance(text_obj, dict) else None
    elif kind in ("image", "video", "document"):
        media = message.get(kind)
        text = media.get("caption") if isinstance(media, dict) else None
    if not text:
        raise UnsupportedMessageError(f"message of type {kind} has no text")

    profile_name = None
    contacts = value.get("contacts") or []
    if isinstance(contacts, list) and contacts and isinstance(contacts[0], dict):
        profile = contacts[0].get("profile")
        if isinstance(profile, dict):
            profile_name = profile.get("name")

    return NormalizedInbound(
        channel="whatsapp",
        sender=sender,
        text=str(text),
        received_at=from_epoch(message.get("timestamp")),
        external_id=message.get("id"),
        sender_name=profile_name,
        kind=kind,
    )


def _normalize_flat(payload: dict[str, Any]) -> NormalizedInbound:
    sender = normalize_phone(str(payload.get("from") or ""))
    if not sender:
        raise InvalidPayloadError("missing sender phone number")

    text = payload.get("body")
    if not isinstance(text, str) or not text.strip():
        raise InvalidPayloadError("missing message body")

    message_id = payload.get("messageId")
    return NormalizedInbound(
        channel="whatsapp",
        sender=sender,
        text=text,
        received_at=utc_now(),
        external_id=str(message_id) if message_id else None,
    )


def normalize(payload: Any) -> NormalizedInbound:
    """Normalize either accepted payload shape.

    Raises:
        InvalidPayloadError: If required fields are missing or invalid.
    """
    if not isinstance(payload, dict):
        raise InvalidPayloadError("payload is not a JSON object")
    if "entry" in payload:
        return _normalize_meta(payload)
    return _normalize_flat(payload)
