"""Inbound message shape shared by the channel adapters."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


@dataclass(frozen=True)
class NormalizedInbound:
    """A message received from a contact, as delivered by a webhook.

    ``sender`` is the channel address (phone number or e-mail address) and
    ``text`` the message body. Both are PII: keep them out of logs.
    """

    channel: Literal["whatsapp", "email"]
    sender: str
    text: str
    received_at: datetime
    external_id: str | None = None
    subject: str | None = None
    sender_name: str | None = None
    kind: str = "text"


class InvalidPayloadError(Exception):
    """Raised when a webhook payload does not have a usable shape."""


class UnsupportedMessageError(InvalidPayloadError):
    """Well-formed delivery that carries nothing to store (status update, voice note)."""
