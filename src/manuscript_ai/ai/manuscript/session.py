"""
Per-user manuscript session state.

A session holds everything derived from one ingested manuscript (metadata,
axioms, snippets, full text, chunks) plus the conversation about it.
Sessions live in memory for the life of the process.
"""

from manuscript_ai.ai.base import ChatMessage, ChatRole
from manuscript_ai.ai.manuscript.exceptions import SessionNotFoundError
from manuscript_ai.ai.manuscript.schemas import (
    Axiom,
    ExtractionResult,
    ManuscriptMetadata,
)
from manuscript_ai.utils.logger import logger


class ManuscriptSession:
    """State of one manuscript conversation.

    History is append-only; the only removal is ``discard_last_turn``, which
    undoes a user turn that never received an answer.
    """

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.history: list[ChatMessage] = []
        self.chunks: list[str] = []
        self.full_text: str = ""
        self.axioms: list[Axiom] = []
        self.snippets: list[str] = []
        self.metadata = ManuscriptMetadata()
        self.pending_document: str | None = None

    def begin_ingestion(self, document_base64: str) -> None:
        """Start over for a new document and hold it for the extraction call."""
        self.history = []
        self.pending_document = document_base64

    def discard_pending_document(self) -> None:
        self.pending_document = None

    def reset_for_new_document(
        self, result: ExtractionResult, chunks: list[str]
    ) -> None:
        """Replace all document-derived state with a new extraction result."""
        self.history = []
        self.metadata = result.metadata
        self.axioms = list(result.axioms)
        self.snippets = list(result.snippets)
        self.full_text = result.full_text
        self.chunks = list(chunks)
        self.discard_pending_document()
        logger.info(
            "Session reset for new document",
            session_id=self.session_id,
            axiom_count=len(self.axioms),
            snippet_count=len(self.snippets),
            chunk_count=len(self.chunks),
        )

    def append_turn(self, role: ChatRole, content: str) -> ChatMessage:
        turn = ChatMessage(role=role, content=content)
        self.history.append(turn)
        return turn

    def discard_last_turn(self, turn: ChatMessage) -> bool:
        """Remove ``turn`` if it is still the newest history entry.

        Returns:
            bool: True if the turn was removed
        """
        if self.history and self.history[-1] is turn:
            self.history.pop()
            return True
        return False

    def history_window(self, max_messages: int) -> list[ChatMessage]:
        """Most recent ``max_messages`` history entries (all of them when 0)."""
        if max_messages <= 0:
            return list(self.history)
        return self.history[-max_messages:]

    def get_snippets(self) -> list[str]:
        return list(self.snippets)


class SessionStore:
    """In-memory registry of manuscript sessions keyed by session id."""

    def __init__(self) -> None:
        self._sessions: dict[str, ManuscriptSession] = {}

    def get_or_create(self, session_id: str) -> ManuscriptSession:
        session = self._sessions.get(session_id)
        if session is None:
            session = ManuscriptSession(session_id)
            self._sessions[session_id] = session
            logger.info("Created manuscript session", session_id=session_id)
        return session

    def get(self, session_id: str) -> ManuscriptSession:
        """Look up an existing session.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return session

    def delete(self, session_id: str) -> bool:
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("Deleted manuscript session", session_id=session_id)
        return removed

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
