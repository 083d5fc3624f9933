"""Correlation ID handling so every log line of a request can be tied together."""

import uuid
from contextvars import ContextVar, Token

CORRELATION_ID_HEADER = "X-Correlation-ID"

# Upper bound for ids accepted from callers; anything longer is replaced.
MAX_INCOMING_LENGTH = 128

_correlation_id: ContextVar[str] = ContextVar("gharpey_correlation_id", default="")


def new_correlation_id() -> str:
    return uuid.uuid4().hex


def resolve_correlation_id(incoming: str | None) -> str:
    """Reuse the caller's id when it is usable, otherwise mint a new one."""
    if incoming:
        incoming = incoming.strip()
        if incoming and len(incoming) <= MAX_INCOMING_LENGTH:
            return incoming
    return new_correlation_id()


def get_correlation_id() -> str:
    return _correlation_id.get()


def bind_correlation_id(cid: str) -> Token[str]:
    return _correlation_id.set(cid)


def unbind_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)
