"""
Manuscript chat service.

Runs the two provider calls of a manuscript conversation:

- the one-shot extraction call that turns a PDF into axioms, snippets,
  metadata and full text, and
- the streaming chat call that answers a question using retrieved chunks,
  the axioms and the running history.

Both calls go through the shared rate gate.
"""

from contextlib import aclosing
from typing import AsyncGenerator, Callable

from manuscript_ai.ai.base import AIProvider
from manuscript_ai.ai.manuscript.chunker import chunk_text
from manuscript_ai.ai.manuscript.config import (
    ManuscriptSettings,
    get_manuscript_settings,
)
from manuscript_ai.ai.manuscript.constants import PDF_DATA_URL_PREFIX, Language
from manuscript_ai.ai.manuscript.exceptions import ManuscriptParseError
from manuscript_ai.ai.manuscript.prompts import (
    build_augmented_prompt,
    build_extraction_prompt,
    build_system_instruction,
)
from manuscript_ai.ai.manuscript.rate_gate import RateGate
from manuscript_ai.ai.manuscript.retriever import (
    RetrievalPolicy,
    retrieve_relevant_chunks,
)
from manuscript_ai.ai.manuscript.schemas import Axiom, ExtractionResult
from manuscript_ai.ai.manuscript.session import ManuscriptSession
from manuscript_ai.utils.logger import logger


class ManuscriptChatService:
    """Service for ingesting a manuscript and chatting about it."""

    def __init__(
        self,
        provider: AIProvider,
        rate_gate: RateGate,
        settings: ManuscriptSettings | None = None,
    ):
        """Initialize the manuscript chat service.

        Args:
            provider: Language-model provider used for both calls
            rate_gate: Process-wide gate shared by every call site
            settings: Manuscript settings (defaults to the global settings)
        """
        self.provider = provider
        self.rate_gate = rate_gate
        self.settings = settings or get_manuscript_settings()
        self.retrieval_policy = RetrievalPolicy.from_settings(self.settings)

    def chunk(self, text: str) -> list[str]:
        return chunk_text(
            text,
            chunk_size=self.settings.chunk_size,
            overlap=self.settings.chunk_overlap,
            min_chunk_length=self.settings.min_chunk_length,
        )

    async def extract_axioms(
        self,
        session: ManuscriptSession,
        document_base64: str,
        language: Language,
    ) -> list[Axiom]:
        """Ingest a manuscript and populate the session from the extraction.

        The session's history is cleared as soon as ingestion starts. Document
        state (metadata, axioms, snippets, full text, chunks) is only replaced
        once the response has been decoded.

        Args:
            session: Session to populate
            document_base64: Base64-encoded PDF
            language: Interface language of the user

        Returns:
            list[Axiom]: Extracted axioms

        Raises:
            GroqConfigurationError: If the provider has no usable API key
            GroqTransportError: If the provider call fails
            ManuscriptParseError: If the response cannot be decoded
        """
        self.provider.ensure_configured()
        await self.rate_gate.throttle()

        session.begin_ingestion(document_base64)
        try:
            prompt = (
                build_system_instruction(session.metadata, session.axioms, language)
                + "\n\n"
                + build_extraction_prompt(
                    self.settings.axiom_count, self.settings.snippet_count
                )
            )
            content_parts = [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"{PDF_DATA_URL_PREFIX}{session.pending_document}"},
                },
            ]

            logger.info(
                "Extracting manuscript axioms",
                session_id=session.session_id,
                document_chars=len(document_base64),
            )
            raw = await self.provider.generate_json(content_parts)
            if not raw:
                raise ManuscriptParseError("No content returned from Groq")

            result = ExtractionResult.parse_response(raw)
        except Exception as e:
            logger.error(
                "Error extracting manuscript axioms",
                session_id=session.session_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        finally:
            session.discard_pending_document()

        session.reset_for_new_document(result, self.chunk(result.full_text))
        return result.axioms

    async def stream_chat_response(
        self,
        session: ManuscriptSession,
        user_prompt: str,
        language: Language,
    ) -> AsyncGenerator[str, None]:
        """Answer a question about the manuscript, yielding text fragments.

        The augmented question is appended to history before the provider is
        called; the full answer is appended once the stream completes. If the
        stream fails or is abandoned, no assistant turn is recorded and, with
        ``rollback_failed_turns``, the user turn is removed again.

        Args:
            session: Session holding the ingested manuscript
            user_prompt: Question as typed by the user
            language: Interface language of the user

        Yields:
            str: Incremental answer fragments

        Raises:
            GroqConfigurationError: If the provider has no usable API key
            GroqTransportError: If the provider call fails
        """
        self.provider.ensure_configured()
        await self.rate_gate.throttle()

        relevant_chunks = retrieve_relevant_chunks(
            user_prompt,
            session.chunks,
            top_k=self.settings.top_k,
            policy=self.retrieval_policy,
        )
        augmented_prompt = build_augmented_prompt(user_prompt, relevant_chunks)
        instructions = build_system_instruction(
            session.metadata, session.axioms, language
        )

        user_turn = session.append_turn("user", augmented_prompt)
        messages = session.history_window(self.settings.max_history_messages)

        logger.info(
            "Streaming manuscript chat",
            session_id=session.session_id,
            retrieved_chunks=len(relevant_chunks),
            message_count=len(messages),
        )

        full_response = ""
        completed = False
        try:
            async for chunk in self.provider.stream_chat(
                messages=messages, instructions=instructions
            ):
                if not chunk.content:
                    continue
                yield chunk.content
                full_response += chunk.content

            session.append_turn("assistant", full_response)
            completed = True
            logger.info(
                "Chat stream completed",
                session_id=session.session_id,
                response_chars=len(full_response),
            )
        except Exception as e:
            logger.error(
                "Stream error in manuscript chat",
                session_id=session.session_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        finally:
            if not completed and self.settings.rollback_failed_turns:
                session.discard_last_turn(user_turn)

    async def chat_stream(
        self,
        session: ManuscriptSession,
        user_prompt: str,
        language: Language,
        on_chunk: Callable[[str], None],
    ) -> None:
        """Answer a question, passing each fragment to ``on_chunk`` as it arrives.

        Returns once the whole answer has been streamed; there is no separate
        end-of-stream callback.
        """
        async with aclosing(
            self.stream_chat_response(session, user_prompt, language)
        ) as fragments:
            async for fragment in fragments:
                on_chunk(fragment)
