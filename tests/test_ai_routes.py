"""Tests for /api/ai endpoints."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from gharpey.api.factory import create_app
from gharpey.enrichment.client import DISABLED_REPLY, FAILED_REPLY
from gharpey.enrichment.results import Analysis, EnrichmentResult


def _client_with(enrichment) -> TestClient:
    return TestClient(create_app(enrichment_client=enrichment))


class TestGenerateResponse:
    def test_disabled(self, client):
        response = client.post(
            "/api/ai/generate-response", json={"messageHistory": ["Hi"], "language": "en"}
        )
        assert response.status_code == 200
        assert response.json() == {"response": DISABLED_REPLY, "enrichment": {"status": "disabled"}}

    def test_language_defaults_to_english(self):
        enrichment = MagicMock()
        enrichment.generate_reply.return_value = EnrichmentResult.ok("Hello!")
        response = _client_with(enrichment).post(
            "/api/ai/generate-response", json={"messageHistory": ["Hi"]}
        )
        assert response.status_code == 200
        enrichment.generate_reply.assert_called_once_with(["Hi"], "en")

    def test_failed(self):
        enrichment = MagicMock()
        enrichment.generate_reply.return_value = EnrichmentResult.failed(FAILED_REPLY, "boom")
        response = _client_with(enrichment).post(
            "/api/ai/generate-response", json={"messageHistory": ["Hi"], "language": "hi"}
        )
        assert response.json() == {
            "response": FAILED_REPLY,
            "enrichment": {"status": "failed", "reason": "boom"},
        }

    def test_history_must_be_list(self, client):
        response = client.post("/api/ai/generate-response", json={"messageHistory": "Hi"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid AI request"


class TestTranslate:
    def test_disabled_returns_original(self, client):
        response = client.post(
            "/api/ai/translate", json={"content": "ನಮಸ್ಕಾರ", "targetLanguage": "en"}
        )
        assert response.status_code == 200
        assert response.json()["translatedContent"] == "ನಮಸ್ಕಾರ"

    def test_missing_target_language(self, client):
        response = client.post("/api/ai/translate", json={"content": "hi"})
        assert response.status_code == 400


class TestProcess:
    def test_returns_analysis(self):
        enrichment = MagicMock()
        enrichment.analyze.return_value = EnrichmentResult.ok(
            Analysis(language="hi", sentiment="urgent", intent="complaint")
        )
        response = _client_with(enrichment).post(
            "/api/ai/process", json={"content": "तुरंत मदद चाहिए", "targetLanguage": "en"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "language": "hi",
            "sentiment": "urgent",
            "intent": "complaint",
            "translatedContent": None,
            "suggestedResponse": None,
            "enrichment": {"status": "ok"},
        }
        enrichment.analyze.assert_called_once_with("तुरंत मदद चाहिए", "en")

    def test_disabled(self, client):
        response = client.post("/api/ai/process", json={"content": "hello"})
        assert response.json()["intent"] == "Message received"
        assert response.json()["enrichment"] == {"status": "disabled"}
