"""Keyword-overlap retrieval of manuscript chunks.

Scoring is literal substring containment of query words; there is no
embedding or vector search.
"""

from pydantic import BaseModel, Field

from manuscript_ai.ai.manuscript.config import ManuscriptSettings
from manuscript_ai.ai.manuscript.constants import DEFAULT_AUTHOR_QUERY_WORDS


class RetrievalPolicy(BaseModel):
    """Scoring constants for keyword retrieval."""

    min_score: int = 4
    min_keyword_length: int = 3
    keyword_weight: int = 2
    author_boost: int = 5
    author_query_words: list[str] = Field(
        default_factory=lambda: list(DEFAULT_AUTHOR_QUERY_WORDS)
    )

    @classmethod
    def from_settings(cls, settings: ManuscriptSettings) -> "RetrievalPolicy":
        return cls(
            min_score=settings.min_score,
            min_keyword_length=settings.min_keyword_length,
            keyword_weight=settings.keyword_weight,
            author_boost=settings.author_boost,
            author_query_words=settings.author_query_words,
        )


class ScoredChunk(BaseModel):
    """A chunk with its position in the document and its query score."""

    index: int
    text: str
    score: int


def extract_keywords(query: str, min_keyword_length: int = 3) -> list[str]:
    """Split a query on whitespace and keep case-folded words longer than the minimum.

    Repeated words are kept; each occurrence counts when scoring.
    """
    return [
        word for word in query.casefold().split() if len(word) > min_keyword_length
    ]


def asks_for_author(query: str, author_query_words: list[str]) -> bool:
    folded = query.casefold()
    return any(word.casefold() in folded for word in author_query_words)


def score_chunks(
    query: str,
    chunks: list[str],
    policy: RetrievalPolicy | None = None,
) -> list[ScoredChunk]:
    """Score every chunk against the query, in document order."""
    policy = policy or RetrievalPolicy()
    keywords = extract_keywords(query, policy.min_keyword_length)
    author_question = asks_for_author(query, policy.author_query_words)

    scored: list[ScoredChunk] = []
    for index, chunk in enumerate(chunks):
        folded = chunk.casefold()
        score = sum(policy.keyword_weight for word in keywords if word in folded)
        # The opening chunk usually carries the title page
        if author_question and index == 0:
            score += policy.author_boost
        scored.append(ScoredChunk(index=index, text=chunk, score=score))
    return scored


def retrieve_relevant_chunks(
    query: str,
    chunks: list[str],
    top_k: int = 2,
    policy: RetrievalPolicy | None = None,
) -> list[str]:
    """Return up to ``top_k`` chunks that best match the query.

    Chunks scoring below ``policy.min_score`` are dropped, the rest are
    ordered by score (highest first, ties in document order).

    Args:
        query: User question
        chunks: Manuscript chunks in document order
        top_k: Maximum number of chunks to return
        policy: Scoring constants (defaults to ``RetrievalPolicy()``)

    Returns:
        list[str]: Selected chunks, best first
    """
    if not chunks:
        return []

    policy = policy or RetrievalPolicy()
    scored = [
        item for item in score_chunks(query, chunks, policy) if item.score >= policy.min_score
    ]
    ranked = sorted(scored, key=lambda item: item.score, reverse=True)
    return [item.text for item in ranked[:top_k]]
