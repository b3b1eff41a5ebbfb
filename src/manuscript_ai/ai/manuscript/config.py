"""
Configuration for manuscript ingestion, retrieval and chat.

Every tunable that shapes chunking, scoring, throttling and history handling
lives here so behavior can be changed through ``MANUSCRIPT_*`` environment
variables.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from manuscript_ai.ai.manuscript.constants import DEFAULT_AUTHOR_QUERY_WORDS
from manuscript_ai.utils.logger import logger


class ManuscriptSettings(BaseSettings):
    """Settings for manuscript chat using Pydantic settings."""

    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="MANUSCRIPT_"
    )

    # Chunking
    chunk_size: int = Field(default=1800, gt=0, description="Window size in characters")
    chunk_overlap: int = Field(
        default=250, ge=0, description="Characters shared by consecutive windows"
    )
    min_chunk_length: int = Field(
        default=200,
        ge=0,
        description="Windows shorter than this after stripping are dropped",
    )

    # Retrieval
    top_k: int = Field(default=2, gt=0, description="Maximum chunks per question")
    min_score: int = Field(
        default=4, description="Chunks scoring below this are never retrieved"
    )
    min_keyword_length: int = Field(
        default=3,
        ge=0,
        description="Query tokens must be longer than this to be scored",
    )
    keyword_weight: int = Field(
        default=2, description="Score added per query token found in a chunk"
    )
    author_boost: int = Field(
        default=5,
        description="Score added to the first chunk when the question asks for the author",
    )
    author_query_words: list[str] = Field(
        default_factory=lambda: list(DEFAULT_AUTHOR_QUERY_WORDS),
        description="Words that mark a question as asking for the author",
    )

    # Rate limiting
    min_request_gap_seconds: float = Field(
        default=3.5,
        ge=0.0,
        description="Minimum delay between consecutive provider calls",
    )

    # Extraction
    axiom_count: int = Field(default=13, gt=0, description="Axioms requested per document")
    snippet_count: int = Field(
        default=10, gt=0, description="Verbatim snippets requested per document"
    )

    # History
    max_history_messages: int = Field(
        default=40,
        ge=0,
        description="Most recent history messages sent with each chat turn (0 sends all)",
    )
    rollback_failed_turns: bool = Field(
        default=True,
        description="Remove the user turn from history when its answer fails to stream",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "ManuscriptSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be less than chunk_size")
        return self


_manuscript_settings: ManuscriptSettings | None = None


def get_manuscript_settings() -> ManuscriptSettings:
    """
    Get the global manuscript settings instance.

    Returns:
        ManuscriptSettings: The global settings instance
    """
    global _manuscript_settings
    if _manuscript_settings is None:
        _manuscript_settings = ManuscriptSettings()
        logger.info("Manuscript settings loaded")
    return _manuscript_settings


def set_manuscript_settings(settings: ManuscriptSettings | None) -> None:
    """
    Set the global manuscript settings instance.

    Args:
        settings: The settings to set, or None to reload from the environment
    """
    global _manuscript_settings
    _manuscript_settings = settings
