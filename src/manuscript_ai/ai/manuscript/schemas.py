"""
Pydantic schemas for manuscript extraction and the manuscript chat API.

``ExtractionResult`` is the validated decode of the provider's JSON answer:
a field that is absent (or null) falls back to an empty value, while a field
that is present with the wrong shape rejects the whole response.
"""

import base64
import binascii
import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from manuscript_ai.ai.base import ChatMessage
from manuscript_ai.ai.manuscript.constants import Language
from manuscript_ai.ai.manuscript.exceptions import ManuscriptParseError

# ========== Extraction Schemas ==========


class Axiom(BaseModel):
    """One distilled unit of manuscript knowledge."""

    term: str = ""
    definition: str = ""
    significance: str = ""

    @field_validator("term", "definition", "significance", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ManuscriptMetadata(BaseModel):
    """Bibliographic details of the ingested manuscript."""

    title: str | None = None
    author: str | None = None
    chapters: str | None = None
    summary: str | None = None

    @field_validator("chapters", mode="before")
    @classmethod
    def _join_chapter_list(cls, value: Any) -> Any:
        # Models sometimes answer with a list of chapter titles
        if isinstance(value, list):
            titles = [item for item in value if item is not None]
            if all(isinstance(item, str) for item in titles):
                return ", ".join(titles)
        return value


class ExtractionResult(BaseModel):
    """Structured output of the extraction call."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    axioms: list[Axiom] = Field(default_factory=list)
    snippets: list[str] = Field(default_factory=list)
    metadata: ManuscriptMetadata = Field(default_factory=ManuscriptMetadata)
    full_text: str = Field(default="", alias="fullText")

    @field_validator("axioms", "snippets", mode="before")
    @classmethod
    def _drop_null_entries(cls, value: Any) -> Any:
        # A null entry carries no content; the rest of the list is kept
        if value is None:
            return []
        if isinstance(value, list):
            return [item for item in value if item is not None]
        return value

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("full_text", mode="before")
    @classmethod
    def _null_full_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def parse_response(cls, raw: str) -> "ExtractionResult":
        """Decode the provider's JSON text.

        Args:
            raw: Response body returned by the provider

        Returns:
            ExtractionResult: Decoded result with defaults for absent fields

        Raises:
            ManuscriptParseError: If the body is not a JSON object or a field
                is malformed
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ManuscriptParseError(
                f"Extraction response is not valid JSON: {e}", e
            ) from e

        if not isinstance(data, dict):
            raise ManuscriptParseError(
                f"Extraction response must be a JSON object, got {type(data).__name__}"
            )

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ManuscriptParseError(
                f"Extraction response has {e.error_count()} malformed field(s)", e
            ) from e


# ========== API Schemas ==========


class IngestRequest(BaseModel):
    """Request to ingest a manuscript into a session."""

    document_base64: str = Field(
        ..., min_length=1, description="Base64-encoded PDF manuscript"
    )
    language: Language = Field(
        default=Language.ENGLISH, description="Interface language of the user"
    )

    @field_validator("document_base64")
    @classmethod
    def _must_be_base64(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("document_base64 is not valid base64") from e
        return value


class IngestResponse(BaseModel):
    """Result of ingesting a manuscript."""

    session_id: str
    axioms: list[Axiom]
    snippets: list[str]
    metadata: ManuscriptMetadata
    chunk_count: int


class ChatRequest(BaseModel):
    """A single question about the ingested manuscript."""

    message: str = Field(..., min_length=1, description="User question")
    language: Language = Field(
        default=Language.ENGLISH, description="Interface language of the user"
    )


class SessionSummary(BaseModel):
    """Current state of a manuscript session."""

    session_id: str
    metadata: ManuscriptMetadata
    axiom_count: int
    snippet_count: int
    chunk_count: int
    history_length: int


class SnippetsResponse(BaseModel):
    """Verbatim snippets extracted during ingestion."""

    session_id: str
    snippets: list[str]


class HistoryResponse(BaseModel):
    """Conversation history of a session."""

    session_id: str
    messages: list[ChatMessage]
