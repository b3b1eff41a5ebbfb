"""Shared fixtures for manuscript AI tests."""

import json

import pytest

from manuscript_ai.ai.base import AIProvider, ChatMessage, ChatStreamChunk
from manuscript_ai.ai.groq.exceptions import GroqConfigurationError
from manuscript_ai.ai.manuscript.config import ManuscriptSettings
from manuscript_ai.ai.manuscript.rate_gate import RateGate
from manuscript_ai.ai.manuscript.service import ManuscriptChatService
from manuscript_ai.ai.manuscript.session import ManuscriptSession


class FakeProvider(AIProvider):
    """In-memory provider that replays scripted responses and records calls."""

    def __init__(self) -> None:
        self.configured = True
        self.json_response: str | Exception = ""
        self.stream_fragments: list[str] = []
        self.stream_error: Exception | None = None
        self.json_calls: list[list[dict]] = []
        self.stream_calls: list[dict] = []

    def ensure_configured(self) -> None:
        if not self.configured:
            raise GroqConfigurationError("GROQ_API_KEY_MISSING")

    async def generate_json(self, content_parts, **kwargs) -> str:
        self.json_calls.append(content_parts)
        if isinstance(self.json_response, Exception):
            raise self.json_response
        return self.json_response

    async def stream_chat(
        self, messages: list[ChatMessage], instructions: str | None = None, **kwargs
    ):
        self.stream_calls.append(
            {"messages": list(messages), "instructions": instructions}
        )
        for fragment in self.stream_fragments:
            yield ChatStreamChunk(content=fragment)
        if self.stream_error is not None:
            raise self.stream_error
        yield ChatStreamChunk(finish_reason="stop")


MANUSCRIPT_TEXT = (
    "The Silent River, a treatise by Layla Haddad. "
    + "Water remembers every stone it has passed over. " * 40
    + "The ferryman teaches patience to travellers who cross at dawn. " * 40
    + "Lanterns along the harbour burn through the long winter nights. " * 40
)


def extraction_payload(**overrides) -> dict:
    payload = {
        "axioms": [
            {
                "term": "Memory of water",
                "definition": "Rivers carry the traces of what they touched",
                "significance": "Frames the book's view of history",
            },
            {
                "term": "Patience",
                "definition": "Waiting as an active discipline",
                "significance": "Central virtue of the ferryman",
            },
        ],
        "snippets": [
            "Water remembers every stone it has passed over.",
            "The ferryman teaches patience.",
        ],
        "metadata": {
            "title": "The Silent River",
            "author": "Layla Haddad",
            "chapters": "I. Source, II. Ferry, III. Harbour",
        },
        "fullText": MANUSCRIPT_TEXT,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def fake_provider() -> FakeProvider:
    """Create a configured fake provider with a valid extraction response."""
    provider = FakeProvider()
    provider.json_response = json.dumps(extraction_payload())
    return provider


@pytest.fixture
def manuscript_settings() -> ManuscriptSettings:
    """Settings with throttling disabled so tests run instantly."""
    return ManuscriptSettings(min_request_gap_seconds=0)


@pytest.fixture
def rate_gate(manuscript_settings) -> RateGate:
    return RateGate(manuscript_settings.min_request_gap_seconds)


@pytest.fixture
def chat_service(fake_provider, rate_gate, manuscript_settings) -> ManuscriptChatService:
    return ManuscriptChatService(
        provider=fake_provider,
        rate_gate=rate_gate,
        settings=manuscript_settings,
    )


@pytest.fixture
def session() -> ManuscriptSession:
    return ManuscriptSession("session-123")
