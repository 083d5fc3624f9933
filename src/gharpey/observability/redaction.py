"""Redaction helpers for log context.

Contacts reach us by phone number and e-mail address, and both end up in
webhook payloads. Anything coming from outside goes through these helpers
before it is attached to a log record.
"""

import re
from typing import Any

_PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-()]{7,}\d")
_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_REDACTED = "[REDACTED]"

# Keys whose values are free text written by a contact; never logged at all.
_CONTENT_KEYS = frozenset({"content", "body", "text", "translated_content"})


def redact_string(value: str) -> str:
    """Mask phone numbers and e-mail addresses inside a string."""
    result = _EMAIL_PATTERN.sub(_REDACTED, value)
    return _PHONE_PATTERN.sub(_REDACTED, result)


def redact_value(value: Any) -> str:
    """Render any value as a log-safe string."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        return f"dict(keys={sorted(value.keys())})"
    if isinstance(value, (list, tuple)):
        return f"list(len={len(value)})"
    return f"<{type(value).__name__}>"


def safe_log_context(**kwargs: Any) -> dict[str, str]:
    """Build an ``extra_fields`` dict where every value has been redacted."""
    context: dict[str, str] = {}
    for key, value in kwargs.items():
        if key in _CONTENT_KEYS and isinstance(value, str):
            context[key] = f"<text len={len(value)}>"
        else:
            context[key] = redact_value(value)
    return context
