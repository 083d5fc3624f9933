"""Tests for the enrichment client: config, disabled fallbacks, LLM calls."""

import json
import os
from unittest.mock import MagicMock, patch

import pytest
import requests

from gharpey.enrichment.client import (
    DISABLED_ANALYSIS,
    DISABLED_REPLY,
    FAILED_ANALYSIS,
    FAILED_REPLY,
    DisabledEnrichmentClient,
    EnrichmentConfig,
    EnrichmentError,
    LLMEnrichmentClient,
    create_enrichment_client,
    parse_analysis,
)

CONFIG = EnrichmentConfig(
    api_key="sk-test",
    base_url="https://llm.example.com/v1",
    model="test-model",
    timeout_seconds=5.0,
)


def _session_returning(content: str | None = None, *, body: dict | None = None) -> MagicMock:
    """requests.Session stub whose post() answers with one chat completion."""
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = (
        body if body is not None else {"choices": [{"message": {"content": content}}]}
    )
    session = MagicMock()
    session.post.return_value = response
    return session


def _session_raising(exc: Exception) -> MagicMock:
    session = MagicMock()
    session.post.side_effect = exc
    return session


class TestEnrichmentConfig:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = EnrichmentConfig.from_env()
        assert config.api_key is None
        assert config.base_url == "https://api.openai.com/v1"
        assert config.model == "gpt-5"
        assert config.timeout_seconds == 30.0

    def test_reads_environment(self):
        env = {
            "OPENAI_API_KEY": "sk-live",
            "OPENAI_BASE_URL": "https://proxy.example.com/v1/",
            "OPENAI_MODEL": "small-model",
            "LLM_TIMEOUT_SECONDS": "12.5",
        }
        with patch.dict(os.environ, env, clear=True):
            config = EnrichmentConfig.from_env()
        assert config.api_key == "sk-live"
        assert config.base_url == "https://proxy.example.com/v1"
        assert config.model == "small-model"
        assert config.timeout_seconds == 12.5

    def test_bad_timeout_uses_default(self):
        with patch.dict(os.environ, {"LLM_TIMEOUT_SECONDS": "soon"}, clear=True):
            assert EnrichmentConfig.from_env().timeout_seconds == 30.0


class TestCreateEnrichmentClient:
    def test_no_key_gives_disabled_client(self):
        client = create_enrichment_client(EnrichmentConfig(api_key=None))
        assert isinstance(client, DisabledEnrichmentClient)
        assert client.enabled is False

    def test_key_gives_llm_client(self):
        client = create_enrichment_client(CONFIG)
        assert isinstance(client, LLMEnrichmentClient)
        assert client.enabled is True

    def test_llm_client_requires_key(self):
        with pytest.raises(ValueError):
            LLMEnrichmentClient(EnrichmentConfig(api_key=None))


class TestDisabledClient:
    def test_analyze_fallback(self):
        result = DisabledEnrichmentClient().analyze("Namaste")
        assert result.is_disabled
        assert result.value == DISABLED_ANALYSIS
        assert result.value.language == "en"
        assert result.value.sentiment == "neutral"
        assert result.value.suggested_response

    def test_translate_returns_original(self):
        result = DisabledEnrichmentClient().translate("ನಮಸ್ಕಾರ", "en")
        assert result.is_disabled
        assert result.value == "ನಮಸ್ಕಾರ"

    def test_generate_reply_fallback(self):
        result = DisabledEnrichmentClient().generate_reply(["Hi"], "en")
        assert result.value == DISABLED_REPLY
        assert result.describe() == {"status": "disabled"}


class TestParseAnalysis:
    def test_full_answer(self):
        analysis = parse_analysis(
            json.dumps(
                {
                    "language": "kn",
                    "sentiment": "positive",
                    "intent": "job_application",
                    "translatedContent": "I do cooking and cleaning.",
                    "suggestedResponse": "ಧನ್ಯವಾದಗಳು!",
                }
            )
        )
        assert analysis.language == "kn"
        assert analysis.sentiment == "positive"
        assert analysis.intent == "job_application"
        assert analysis.translated_content == "I do cooking and cleaning."
        assert analysis.suggested_response == "ಧನ್ಯವಾದಗಳು!"

    def test_missing_keys_default(self):
        analysis = parse_analysis("{}")
        assert analysis.language == "en"
        assert analysis.sentiment == "neutral"
        assert analysis.intent == ""
        assert analysis.translated_content is None

    def test_out_of_enum_values_coerced(self):
        analysis = parse_analysis('{"language": "fr", "sentiment": "ecstatic"}')
        assert analysis.language == "en"
        assert analysis.sentiment == "neutral"

    def test_case_insensitive_enum_values(self):
        analysis = parse_analysis('{"language": "HI", "sentiment": "Urgent"}')
        assert analysis.language == "hi"
        assert analysis.sentiment == "urgent"

    def test_invalid_json_raises(self):
        with pytest.raises(EnrichmentError):
            parse_analysis("not json")

    def test_non_object_raises(self):
        with pytest.raises(EnrichmentError):
            parse_analysis("[1, 2]")


class TestLLMClientAnalyze:
    def test_ok(self):
        session = _session_returning(
            '{"language": "hi", "sentiment": "neutral", "intent": "inquiry"}'
        )
        result = LLMEnrichmentClient(CONFIG, session=session).analyze("मुझे सहायक चाहिए")

        assert result.is_ok
        assert result.value.language == "hi"
        assert result.value.intent == "inquiry"

    def test_request_shape(self):
        session = _session_returning("{}")
        LLMEnrichmentClient(CONFIG, session=session).analyze("Hello", "hi")

        args, kwargs = session.post.call_args
        assert args[0] == "https://llm.example.com/v1/chat/completions"
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        assert kwargs["timeout"] == 5.0
        payload = kwargs["json"]
        assert payload["model"] == "test-model"
        assert payload["response_format"] == {"type": "json_object"}
        assert payload["messages"][0]["role"] == "system"
        assert "translation to hi" in payload["messages"][0]["content"]
        assert payload["messages"][1] == {"role": "user", "content": "Hello"}

    def test_malformed_json_is_failed(self):
        session = _session_returning("I think it's Hindi")
        result = LLMEnrichmentClient(CONFIG, session=session).analyze("Hello")

        assert result.is_failed
        assert result.value == FAILED_ANALYSIS
        assert "JSON" in result.reason

    def test_http_error_is_failed(self):
        error_response = MagicMock(status_code=503)
        session = _session_returning("{}")
        session.post.return_value.raise_for_status.side_effect = requests.HTTPError(
            response=error_response
        )
        result = LLMEnrichmentClient(CONFIG, session=session).analyze("Hello")

        assert result.is_failed
        assert result.reason == "LLM endpoint returned HTTP 503"
        assert result.describe() == {"status": "failed", "reason": result.reason}

    def test_timeout_is_failed(self):
        session = _session_raising(requests.Timeout("read timed out"))
        result = LLMEnrichmentClient(CONFIG, session=session).analyze("Hello")

        assert result.is_failed
        assert "Timeout" in result.reason
        assert result.value.intent == "unknown"

    def test_response_without_choices_is_failed(self):
        session = _session_returning(body={"error": "quota"})
        result = LLMEnrichmentClient(CONFIG, session=session).analyze("Hello")
        assert result.is_failed


class TestLLMClientTranslate:
    def test_ok(self):
        session = _session_returning("Hello, I need house work.")
        result = LLMEnrichmentClient(CONFIG, session=session).translate("ನಮಸ್ಕಾರ", "English")

        assert result.is_ok
        assert result.value == "Hello, I need house work."
        payload = session.post.call_args.kwargs["json"]
        assert payload["max_completion_tokens"] == 500

    def test_empty_completion_returns_original(self):
        session = _session_returning("   ")
        result = LLMEnrichmentClient(CONFIG, session=session).translate("ನಮಸ್ಕಾರ", "English")

        assert result.is_failed
        assert result.value == "ನಮಸ್ಕಾರ"

    def test_connection_error_returns_original(self):
        session = _session_raising(requests.ConnectionError("refused"))
        result = LLMEnrichmentClient(CONFIG, session=session).translate("ನಮಸ್ಕಾರ", "English")
        assert result.is_failed
        assert result.value == "ನಮಸ್ಕಾರ"


class TestLLMClientGenerateReply:
    def test_history_alternates_roles(self):
        session = _session_returning("We can help you with that.")
        result = LLMEnrichmentClient(CONFIG, session=session).generate_reply(
            ["Need a cook", "Which area?", "Koramangala"], "en"
        )

        assert result.is_ok
        payload = session.post.call_args.kwargs["json"]
        roles = [m["role"] for m in payload["messages"]]
        assert roles == ["system", "user", "assistant", "user"]
        assert payload["max_completion_tokens"] == 300

    def test_failure_fallback(self):
        session = _session_raising(requests.ConnectionError("refused"))
        result = LLMEnrichmentClient(CONFIG, session=session).generate_reply(["Hi"], "en")
        assert result.is_failed
        assert result.value == FAILED_REPLY

    def test_empty_completion_is_failed(self):
        session = _session_returning(None)
        result = LLMEnrichmentClient(CONFIG, session=session).generate_reply(["Hi"], "en")
        assert result.is_failed
        assert result.reason == "empty completion"
        assert result.value == FAILED_REPLY
