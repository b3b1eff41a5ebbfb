"""FastAPI router for manuscript ingestion and chat with SSE streaming."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from manuscript_ai.ai.base import SSEEvent
from manuscript_ai.ai.groq.exceptions import (
    GroqConfigurationError,
    GroqTransportError,
)
from manuscript_ai.ai.manuscript.dependencies import (
    get_chat_service,
    get_session_store,
)
from manuscript_ai.ai.manuscript.exceptions import (
    ManuscriptParseError,
    SessionNotFoundError,
)
from manuscript_ai.ai.manuscript.schemas import (
    ChatRequest,
    HistoryResponse,
    IngestRequest,
    IngestResponse,
    SessionSummary,
    SnippetsResponse,
)
from manuscript_ai.ai.manuscript.service import ManuscriptChatService
from manuscript_ai.ai.manuscript.session import ManuscriptSession, SessionStore
from manuscript_ai.utils.logger import logger

router = APIRouter(prefix="/manuscripts", tags=["Manuscripts"])

StoreDep = Annotated[SessionStore, Depends(get_session_store)]
ServiceDep = Annotated[ManuscriptChatService, Depends(get_chat_service)]


def _get_session(store: SessionStore, session_id: str) -> ManuscriptSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


def _configuration_error(e: GroqConfigurationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message
    )


@router.post("/{session_id}/ingest", response_model=IngestResponse)
async def ingest_manuscript(
    session_id: str,
    request: IngestRequest,
    store: StoreDep,
    chat_service: ServiceDep,
) -> IngestResponse:
    """
    Ingest a manuscript into a session, replacing any previous document.

    Args:
        session_id: Client-chosen session identifier
        request: Base64 PDF and interface language

    Returns:
        IngestResponse: Extracted axioms, snippets, metadata and chunk count
    """
    session = store.get_or_create(session_id)
    try:
        axioms = await chat_service.extract_axioms(
            session, request.document_base64, request.language
        )
    except GroqConfigurationError as e:
        raise _configuration_error(e)
    except (GroqTransportError, ManuscriptParseError) as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    return IngestResponse(
        session_id=session_id,
        axioms=axioms,
        snippets=session.get_snippets(),
        metadata=session.metadata,
        chunk_count=len(session.chunks),
    )


@router.get("/{session_id}", response_model=SessionSummary)
async def get_session_summary(session_id: str, store: StoreDep) -> SessionSummary:
    """Summarize the document and conversation held by a session."""
    session = _get_session(store, session_id)
    return SessionSummary(
        session_id=session_id,
        metadata=session.metadata,
        axiom_count=len(session.axioms),
        snippet_count=len(session.snippets),
        chunk_count=len(session.chunks),
        history_length=len(session.history),
    )


@router.get("/{session_id}/snippets", response_model=SnippetsResponse)
async def get_snippets(session_id: str, store: StoreDep) -> SnippetsResponse:
    session = _get_session(store, session_id)
    return SnippetsResponse(session_id=session_id, snippets=session.get_snippets())


@router.get("/{session_id}/history", response_model=HistoryResponse)
async def get_history(session_id: str, store: StoreDep) -> HistoryResponse:
    session = _get_session(store, session_id)
    return HistoryResponse(session_id=session_id, messages=session.history)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, store: StoreDep) -> None:
    if not store.delete(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session not found: {session_id}",
        )


@router.post("/{session_id}/chat")
async def stream_manuscript_chat(
    session_id: str,
    request: ChatRequest,
    store: StoreDep,
    chat_service: ServiceDep,
) -> StreamingResponse:
    """
    Stream an answer about the session's manuscript via Server-Sent Events.

    Each text fragment is sent as a ``data:`` event with newlines escaped,
    followed by ``event: done``. Failures during the stream are sent as
    ``event: error``. A session with no ingested document is created on first
    use and answered without retrieved context.

    Returns:
        StreamingResponse: SSE stream of the answer
    """
    session = store.get_or_create(session_id)
    try:
        chat_service.provider.ensure_configured()
    except GroqConfigurationError as e:
        raise _configuration_error(e)

    logger.info(
        "Manuscript chat request",
        session_id=session_id,
        question_chars=len(request.message),
        language=request.language.value,
    )

    async def event_generator():
        """Generate SSE events from the chat stream."""
        try:
            async for fragment in chat_service.stream_chat_response(
                session, request.message, request.language
            ):
                # Escape newlines in content for SSE format
                yield SSEEvent(data=fragment.replace("\n", "\\n")).format()
            yield SSEEvent(event="done", data="complete").format()
        except Exception as e:
            logger.error(
                "Error in manuscript chat stream",
                session_id=session_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            yield SSEEvent(event="error", data=str(e)).format()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )
