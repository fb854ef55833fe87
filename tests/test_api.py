"""
Tests for the SimpleFlash HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from simpleflash.api.app import create_app
from simpleflash.errors import InferenceFailed
from simpleflash.services import ClientSession

from conftest import MULTIMODAL_MODEL, TEXT_MODEL


@pytest.fixture
def client(session):
    """Create a test client serving the fake-backed session."""
    with TestClient(create_app(session=session)) as test_client:
        yield test_client


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "SimpleFlash API"
    assert "/query" in data["endpoints"].values()


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "cache_enabled": True}


def test_query(client, model_client):
    """Test query endpoint returns trimmed text and the routed model."""
    response = client.post("/query", json={"prompt": "Write a haiku"})
    assert response.status_code == 200
    data = response.json()
    assert data["text"] == "haiku text"
    assert data["model"] == TEXT_MODEL
    assert len(data["cache_key"]) == 64

    client.post("/query", json={"prompt": "Write a haiku"})
    assert len(model_client.calls) == 1


def test_query_multimodal(client):
    """Test inline data routes to the multimodal model."""
    response = client.post(
        "/query",
        json={"prompt": "describe", "inline_data": "aGVsbG8=", "data_mime_type": "image/png"},
    )
    assert response.status_code == 200
    assert response.json()["model"] == MULTIMODAL_MODEL


def test_query_invalid_payload(client, model_client):
    """Test malformed base64 is a client error."""
    response = client.post(
        "/query",
        json={"prompt": "describe", "inline_data": "not base64!!", "data_mime_type": "image/png"},
    )
    assert response.status_code == 400
    assert model_client.calls == []


def test_query_empty_prompt_rejected(client):
    """Test request validation."""
    response = client.post("/query", json={"prompt": ""})
    assert response.status_code == 422


def test_query_model_failure(client, model_client):
    """Test remote failures map to 502."""
    model_client.error = InferenceFailed("quota exceeded", model=TEXT_MODEL)
    response = client.post("/query", json={"prompt": "fails"})
    assert response.status_code == 502


def test_query_model_timeout(client, model_client):
    """Test remote timeouts map to 504."""
    model_client.error = InferenceFailed("timed out", model=TEXT_MODEL, timed_out=True)
    response = client.post("/query", json={"prompt": "slow"})
    assert response.status_code == 504


def test_count_tokens(client, model_client):
    """Test token count endpoint."""
    response = client.post("/tokens", json={"prompt": "hello"})
    assert response.status_code == 200
    assert response.json() == {"prompt": "hello", "model": TEXT_MODEL, "total_tokens": 7}
    assert len(model_client.token_calls) == 1


def test_timeout_endpoints(client, session):
    """Test reading and changing the request timeout."""
    assert client.get("/timeout").json() == {"seconds": 5.0}

    response = client.put("/timeout", json={"seconds": 10})
    assert response.status_code == 200
    assert session.timeout == 10.0

    assert client.put("/timeout", json={"seconds": 0}).status_code == 422


def test_stats(client):
    """Test stats endpoint."""
    client.post("/query", json={"prompt": "hello"})
    response = client.get("/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["cache_enabled"] is True
    assert data["metrics"]["cache_misses"] == 1
    assert data["cache"]["backend"] == "memory"


def test_stats_without_cache(uncached_session):
    """Test stats endpoint when running without a cache."""
    with TestClient(create_app(session=uncached_session)) as client:
        data = client.get("/stats").json()
    assert data["cache_enabled"] is False
    assert data["cache"] is None


def test_injected_session_is_not_closed(session, model_client):
    """Test the app leaves a caller-owned session open on shutdown."""
    with TestClient(create_app(session=session)):
        pass
    assert model_client.closed is False
    assert isinstance(session, ClientSession)
