"""Tests for the manuscript HTTP routes."""

import base64
import json

import pytest
from fastapi.testclient import TestClient

from manuscript_ai.ai.groq.exceptions import GroqTransportError
from manuscript_ai.ai.manuscript.dependencies import (
    get_chat_service,
    get_session_store,
)
from manuscript_ai.ai.manuscript.session import SessionStore
from manuscript_ai.main import app

DOCUMENT_B64 = base64.b64encode(b"%PDF-1.4 silent river").decode()


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def client(chat_service, store):
    """Create a test client wired to the fake provider and a fresh store."""
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    app.dependency_overrides[get_session_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _ingest(client, session_id="reader-1"):
    return client.post(
        f"/api/manuscripts/{session_id}/ingest",
        json={"document_base64": DOCUMENT_B64, "language": "en"},
    )


def _sse_events(body: str) -> list[dict]:
    events = []
    for block in body.strip().split("\n\n"):
        event = {"event": None, "data": None}
        for line in block.split("\n"):
            if line.startswith("event: "):
                event["event"] = line[len("event: ") :]
            elif line.startswith("data: "):
                event["data"] = line[len("data: ") :]
        events.append(event)
    return events


class TestHealth:
    def test_healthcheck(self, client):
        response = client.get("/healthcheck")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestIngest:
    """Test suite for the ingest endpoint."""

    def test_ingest_returns_extraction(self, client, store):
        response = _ingest(client)

        assert response.status_code == 200
        body = response.json()
        assert body["session_id"] == "reader-1"
        assert [a["term"] for a in body["axioms"]] == ["Memory of water", "Patience"]
        assert body["metadata"]["title"] == "The Silent River"
        assert body["chunk_count"] == len(store.get("reader-1").chunks)
        assert body["chunk_count"] > 0

    def test_invalid_base64_is_rejected(self, client):
        response = client.post(
            "/api/manuscripts/reader-1/ingest",
            json={"document_base64": "%%% not base64 %%%"},
        )

        assert response.status_code == 422

    def test_missing_key_returns_503(self, client, fake_provider):
        fake_provider.configured = False

        response = _ingest(client)

        assert response.status_code == 503
        assert response.json()["detail"] == "GROQ_API_KEY_MISSING"

    def test_unparseable_response_returns_502(self, client, fake_provider):
        fake_provider.json_response = "not json"

        response = _ingest(client)

        assert response.status_code == 502

    def test_transport_error_returns_502(self, client, fake_provider):
        fake_provider.json_response = GroqTransportError("upstream unavailable")

        response = _ingest(client)

        assert response.status_code == 502
        assert response.json()["detail"] == "upstream unavailable"


class TestSessionRoutes:
    def test_unknown_session_returns_404(self, client):
        assert client.get("/api/manuscripts/nobody").status_code == 404
        assert client.get("/api/manuscripts/nobody/snippets").status_code == 404
        assert client.get("/api/manuscripts/nobody/history").status_code == 404

    def test_summary_and_snippets(self, client):
        _ingest(client)

        summary = client.get("/api/manuscripts/reader-1").json()
        snippets = client.get("/api/manuscripts/reader-1/snippets").json()

        assert summary["axiom_count"] == 2
        assert summary["snippet_count"] == 2
        assert summary["history_length"] == 0
        assert snippets["snippets"][0] == "Water remembers every stone it has passed over."

    def test_delete_session(self, client):
        _ingest(client)

        assert client.delete("/api/manuscripts/reader-1").status_code == 204
        assert client.delete("/api/manuscripts/reader-1").status_code == 404
        assert client.get("/api/manuscripts/reader-1").status_code == 404


class TestChat:
    """Test suite for the SSE chat endpoint."""

    def test_chat_without_document_creates_session(self, client, fake_provider):
        fake_provider.stream_fragments = ["No manuscript yet."]

        response = client.post(
            "/api/manuscripts/newcomer/chat", json={"message": "Hello there"}
        )

        assert response.status_code == 200
        assert _sse_events(response.text)[-1] == {"event": "done", "data": "complete"}
        history = client.get("/api/manuscripts/newcomer/history").json()["messages"]
        assert [m["role"] for m in history] == ["user", "assistant"]
        assert "Scan the entire manuscript" in history[0]["content"]

    def test_empty_message_is_rejected(self, client):
        _ingest(client)

        response = client.post("/api/manuscripts/reader-1/chat", json={"message": ""})

        assert response.status_code == 422

    def test_chat_streams_fragments_then_done(self, client, fake_provider):
        _ingest(client)
        fake_provider.stream_fragments = ["Water ", "remembers.\nAlways."]

        response = client.post(
            "/api/manuscripts/reader-1/chat",
            json={"message": "What does water remember?", "language": "en"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        events = _sse_events(response.text)
        assert events == [
            {"event": None, "data": "Water "},
            {"event": None, "data": "remembers.\\nAlways."},
            {"event": "done", "data": "complete"},
        ]

        history = client.get("/api/manuscripts/reader-1/history").json()["messages"]
        assert [m["role"] for m in history] == ["user", "assistant"]
        assert history[1]["content"] == "Water remembers.\nAlways."

    def test_chat_stream_error_is_sent_as_event(self, client, fake_provider):
        _ingest(client)
        fake_provider.stream_fragments = ["partial"]
        fake_provider.stream_error = GroqTransportError("stream dropped")

        response = client.post(
            "/api/manuscripts/reader-1/chat", json={"message": "Question here"}
        )

        events = _sse_events(response.text)
        assert events[0] == {"event": None, "data": "partial"}
        assert events[-1] == {"event": "error", "data": "stream dropped"}
        history = client.get("/api/manuscripts/reader-1/history").json()["messages"]
        assert history == []

    def test_chat_missing_key_returns_503(self, client, fake_provider, store):
        store.get_or_create("reader-1")
        fake_provider.configured = False

        response = client.post(
            "/api/manuscripts/reader-1/chat", json={"message": "Question here"}
        )

        assert response.status_code == 503
        assert json.loads(response.text)["detail"] == "GROQ_API_KEY_MISSING"
