"""Health endpoint tests."""

from fastapi.testclient import TestClient

from gharpey.api.app import app

client = TestClient(app)


def test_health_returns_200():
    response = client.get("/health")
    assert response.status_code == 200


def test_health_returns_ok_status():
    response = client.get("/health")
    assert response.json() == {"status": "ok"}


def test_health_carries_correlation_id():
    response = client.get("/health")
    assert response.headers.get("X-Correlation-ID")
