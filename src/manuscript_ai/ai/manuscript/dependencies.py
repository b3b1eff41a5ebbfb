"""
FastAPI dependencies for manuscript chat.

The session store and the rate gate are process-wide singletons: every
session shares one gate so the provider's request budget is respected.
"""

from manuscript_ai.ai.manuscript.config import get_manuscript_settings
from manuscript_ai.ai.manuscript.rate_gate import RateGate
from manuscript_ai.ai.manuscript.service import ManuscriptChatService
from manuscript_ai.ai.manuscript.session import SessionStore
from manuscript_ai.ai.providers.groq import GroqProvider
from manuscript_ai.utils.logger import logger

_session_store: SessionStore | None = None
_rate_gate: RateGate | None = None
_chat_service: ManuscriptChatService | None = None


def get_session_store() -> SessionStore:
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store


def get_rate_gate() -> RateGate:
    global _rate_gate
    if _rate_gate is None:
        settings = get_manuscript_settings()
        _rate_gate = RateGate(settings.min_request_gap_seconds)
    return _rate_gate


def get_chat_service() -> ManuscriptChatService:
    """
    Get or create the manuscript chat service singleton.

    Returns:
        ManuscriptChatService: The chat service instance
    """
    global _chat_service
    if _chat_service is None:
        _chat_service = ManuscriptChatService(
            provider=GroqProvider(),
            rate_gate=get_rate_gate(),
        )
        logger.info("Initialized ManuscriptChatService")
    return _chat_service
