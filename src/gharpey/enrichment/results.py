"""Result types returned by the enrichment client.

Callers get a usable ``value`` in every case. ``status`` says where it came
from: the model (``ok``), the disabled fallback (``disabled``, no credential
configured) or the failure fallback (``failed``, with a ``reason``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

EnrichmentStatus = Literal["ok", "disabled", "failed"]


@dataclass(frozen=True)
class EnrichmentResult(Generic[T]):
    status: EnrichmentStatus
    value: T
    reason: str | None = None

    @classmethod
    def ok(cls, value: T) -> EnrichmentResult[T]:
        return cls(status="ok", value=value)

    @classmethod
    def disabled(cls, value: T) -> EnrichmentResult[T]:
        return cls(status="disabled", value=value)

    @classmethod
    def failed(cls, value: T, reason: str) -> EnrichmentResult[T]:
        return cls(status="failed", value=value, reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"

    @property
    def is_disabled(self) -> bool:
        return self.status == "disabled"

    @property
    def is_failed(self) -> bool:
        return self.status == "failed"

    def describe(self) -> dict[str, Any]:
        """Status block included in API responses."""
        info: dict[str, Any] = {"status": self.status}
        if self.reason:
            info["reason"] = self.reason
        return info


@dataclass(frozen=True)
class Analysis:
    """Structured annotations for one inbound message."""

    language: str
    sentiment: str
    intent: str
    translated_content: str | None = None
    suggested_response: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "sentiment": self.sentiment,
            "intent": self.intent,
            "translatedContent": self.translated_content,
            "suggestedResponse": self.suggested_response,
        }
