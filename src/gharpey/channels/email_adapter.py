"""Email webhook adapter.

The mail relay posts ``{"from": ..., "subject": ..., "body": ..., "messageId": ...}``.
``from`` may be a bare address or ``Display Name <address>``.
"""

from email.utils import parseaddr
from typing import Any

from gharpey.infra.time import utc_now

from .models import InvalidPayloadError, NormalizedInbound


def normalize(payload: Any) -> NormalizedInbound:
    """Validate an email webhook body.

    Raises:
        InvalidPayloadError: If sender or body are missing or invalid.
    """
    if not isinstance(payload, dict):
        raise InvalidPayloadError("payload is not a JSON object")

    display_name, address = parseaddr(str(payload.get("from") or ""))
    address = address.strip().lower()
    if "@" not in address:
        raise InvalidPayloadError("missing or invalid sender address")

    body = payload.get("body")
    if not isinstance(body, str) or not body.strip():
        raise InvalidPayloadError("missing message body")

    subject = payload.get("subject")
    message_id = payload.get("messageId")
    return NormalizedInbound(
        channel="email",
        sender=address,
        text=body,
        received_at=utc_now(),
        external_id=str(message_id) if message_id else None,
        subject=str(subject) if subject else None,
        sender_name=display_name or None,
    )
