"""Time helpers shared by the row mappers and the channel adapters."""

from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(timezone.utc)


def to_iso(value: Any) -> str | None:
    """Serialize a timestamp column for JSON output."""
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def from_epoch(seconds: str | int | None) -> datetime:
    """Parse provider epoch timestamps, falling back to now when absent or bad."""
    if seconds is None:
        return utc_now()
    try:
        return datetime.fromtimestamp(int(seconds), timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return utc_now()
