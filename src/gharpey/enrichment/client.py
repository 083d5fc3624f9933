"""LLM enrichment client: analyze, translate, generate_reply.

Talks to an OpenAI-compatible ``/chat/completions`` endpoint with
``requests``. One best-effort call per operation, no retries.

Whether enrichment is enabled is decided once, in
``create_enrichment_client()``: without an API key the caller gets a
``DisabledEnrichmentClient`` that answers every operation with its fallback.
Neither client raises; failures come back as ``EnrichmentResult.failed``.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

import requests

from gharpey.domain.enums import DEFAULT_LANGUAGE, DEFAULT_SENTIMENT, LANGUAGES, SENTIMENTS
from gharpey.enrichment import prompts
from gharpey.enrichment.results import Analysis, EnrichmentResult
from gharpey.observability.logging import get_logger
from gharpey.observability.redaction import safe_log_context

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-5"
DEFAULT_TIMEOUT_SECONDS = 30.0

REPLY_MAX_TOKENS = 300
TRANSLATION_MAX_TOKENS = 500

DISABLED_ANALYSIS = Analysis(
    language=DEFAULT_LANGUAGE,
    sentiment=DEFAULT_SENTIMENT,
    intent="Message received",
    suggested_response="Thank you for your message. We'll get back to you soon.",
)
FAILED_ANALYSIS = Analysis(
    language=DEFAULT_LANGUAGE,
    sentiment=DEFAULT_SENTIMENT,
    intent="unknown",
)
DISABLED_REPLY = (
    "Thank you for your message. Our AI assistant is currently unavailable. "
    "A team member will respond shortly."
)
FAILED_REPLY = "I apologize, but I'm having trouble generating a response right now."


class EnrichmentError(Exception):
    """Raised inside the LLM client when a call or its output is unusable."""


@dataclass(frozen=True)
class EnrichmentConfig:
    """Settings for the LLM endpoint. ``api_key=None`` disables enrichment."""

    api_key: str | None
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> EnrichmentConfig:
        """Read OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_MODEL, LLM_TIMEOUT_SECONDS."""
        raw_timeout = os.environ.get("LLM_TIMEOUT_SECONDS", "")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
        except ValueError:
            timeout = DEFAULT_TIMEOUT_SECONDS

        return cls(
            api_key=os.environ.get("OPENAI_API_KEY") or None,
            base_url=(os.environ.get("OPENAI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            model=os.environ.get("OPENAI_MODEL") or DEFAULT_MODEL,
            timeout_seconds=timeout,
        )


class EnrichmentClient(Protocol):
    def analyze(
        self, content: str, target_language: str | None = None
    ) -> EnrichmentResult[Analysis]: ...

    def translate(self, content: str, target_language: str) -> EnrichmentResult[str]: ...

    def generate_reply(
        self, history: Sequence[str], language: str
    ) -> EnrichmentResult[str]: ...


class DisabledEnrichmentClient:
    """Client used when no API key is configured."""

    enabled = False

    def analyze(
        self, content: str, target_language: str | None = None
    ) -> EnrichmentResult[Analysis]:
        return EnrichmentResult.disabled(DISABLED_ANALYSIS)

    def translate(self, content: str, target_language: str) -> EnrichmentResult[str]:
        return EnrichmentResult.disabled(content)

    def generate_reply(self, history: Sequence[str], language: str) -> EnrichmentResult[str]:
        return EnrichmentResult.disabled(DISABLED_REPLY)


def parse_analysis(raw: str) -> Analysis:
    """Parse the model's JSON answer into an Analysis.

    Unknown language or sentiment values fall back to the defaults so the
    result always fits the enum columns.

    Raises:
        EnrichmentError: If the text is not a JSON object.
    """
    try:
        data = json.loads(raw or "{}")
    except json.JSONDecodeError as exc:
        raise EnrichmentError(f"analysis is not valid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise EnrichmentError("analysis is not a JSON object")

    language = str(data.get("language") or DEFAULT_LANGUAGE).strip().lower()
    if language not in LANGUAGES:
        language = DEFAULT_LANGUAGE

    sentiment = str(data.get("sentiment") or DEFAULT_SENTIMENT).strip().lower()
    if sentiment not in SENTIMENTS:
        sentiment = DEFAULT_SENTIMENT

    translated = data.get("translatedContent", data.get("translated_content"))
    suggested = data.get("suggestedResponse", data.get("suggested_response"))

    return Analysis(
        language=language,
        sentiment=sentiment,
        intent=str(data.get("intent") or ""),
        translated_content=str(translated) if translated else None,
        suggested_response=str(suggested) if suggested else None,
    )


class LLMEnrichmentClient:
    """Client backed by a chat-completions endpoint."""

    enabled = True

    def __init__(self, config: EnrichmentConfig, session: requests.Session | None = None) -> None:
        if not config.api_key:
            raise ValueError("LLMEnrichmentClient requires an api_key")
        self._config = config
        self._session = session or requests.Session()

    def _complete(self, messages: list[dict[str, str]], **options: Any) -> str:
        """POST one chat completion and return the first choice's text."""
        payload: dict[str, Any] = {"model": self._config.model, "messages": messages, **options}
        try:
            response = self._session.post(
                f"{self._config.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self._config.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self._config.timeout_seconds,
            )
            response.raise_for_status()
            body = response.json()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "unknown"
            raise EnrichmentError(f"LLM endpoint returned HTTP {status}") from exc
        except requests.RequestException as exc:
            raise EnrichmentError(f"LLM request failed: {type(exc).__name__}") from exc
        except ValueError as exc:
            raise EnrichmentError("LLM response body is not JSON") from exc

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise EnrichmentError("LLM response has no message content") from exc
        return content or ""

    def _log_failure(self, operation: str, reason: str) -> None:
        logger.warning(
            "enrichment call failed",
            extra={
                "extra_fields": safe_log_context(
                    operation=operation,
                    model=self._config.model,
                    reason=reason,
                )
            },
        )

    def analyze(
        self, content: str, target_language: str | None = None
    ) -> EnrichmentResult[Analysis]:
        messages = [
            {"role": "system", "content": prompts.analysis_system_prompt(target_language)},
            {"role": "user", "content": content},
        ]
        try:
            raw = self._complete(messages, response_format={"type": "json_object"})
            return EnrichmentResult.ok(parse_analysis(raw))
        except EnrichmentError as exc:
            self._log_failure("analyze", str(exc))
            return EnrichmentResult.failed(FAILED_ANALYSIS, str(exc))

    def translate(self, content: str, target_language: str) -> EnrichmentResult[str]:
        messages = [
            {"role": "system", "content": prompts.translation_system_prompt(target_language)},
            {"role": "user", "content": content},
        ]
        try:
            translated = self._complete(messages, max_completion_tokens=TRANSLATION_MAX_TOKENS)
        except EnrichmentError as exc:
            self._log_failure("translate", str(exc))
            return EnrichmentResult.failed(content, str(exc))

        if not translated.strip():
            self._log_failure("translate", "empty completion")
            return EnrichmentResult.failed(content, "empty completion")
        return EnrichmentResult.ok(translated)

    def generate_reply(self, history: Sequence[str], language: str) -> EnrichmentResult[str]:
        # History alternates contact/operator turns, starting with the contact.
        messages = [{"role": "system", "content": prompts.reply_system_prompt(language)}]
        messages.extend(
            {"role": "user" if i % 2 == 0 else "assistant", "content": text}
            for i, text in enumerate(history)
        )
        try:
            reply = self._complete(messages, max_completion_tokens=REPLY_MAX_TOKENS)
        except EnrichmentError as exc:
            self._log_failure("generate_reply", str(exc))
            return EnrichmentResult.failed(FAILED_REPLY, str(exc))

        if not reply.strip():
            self._log_failure("generate_reply", "empty completion")
            return EnrichmentResult.failed(FAILED_REPLY, "empty completion")
        return EnrichmentResult.ok(reply)


def create_enrichment_client(config: EnrichmentConfig | None = None) -> EnrichmentClient:
    """Build the client for this process from an explicit config (env by default)."""
    if config is None:
        config = EnrichmentConfig.from_env()

    if not config.api_key:
        logger.info("OPENAI_API_KEY not set - message enrichment disabled")
        return DisabledEnrichmentClient()

    logger.info(
        "message enrichment enabled",
        extra={"extra_fields": {"model": config.model, "base_url": config.base_url}},
    )
    return LLMEnrichmentClient(config)
