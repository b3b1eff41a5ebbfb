"""Prompt assembly for manuscript extraction and chat."""

from manuscript_ai.ai.manuscript.constants import CHUNK_SEPARATOR, Language
from manuscript_ai.ai.manuscript.schemas import Axiom, ManuscriptMetadata

SYSTEM_PROMPT_HEADER = """You are an Elite Intellectual Researcher, the primary consciousness of the Knowledge AI infrastructure.
IDENTITY: You are developed exclusively by the Knowledge AI team. Never mention any third-party AI vendor names."""

SYSTEM_PROMPT_PROTOCOL = """MANDATORY OPERATIONAL PROTOCOL:
1. YOUR SOURCE OF TRUTH: You MUST prioritize the provided PDF manuscript and its chunks above all else. Use the Axioms above as your "mental map" of the document.
2. AUTHOR STYLE MIRRORING: You MUST adopt the exact linguistic style, tone, and intellectual depth of the author.
3. ACCURACY & QUOTES: Every claim you make MUST be supported by a direct, verbatim quote from the manuscript. Use the format: "Quote from text" (Source/Context).
4. NO GENERALIZATIONS: Do not give generic answers. Scan the provided context thoroughly for specific details.
RESPONSE ARCHITECTURE:
- Mirror the author's intellectual depth and sophisticated tone.
- Use Markdown: ### for headers, **Bold** for key terms, and LaTeX for formulas.
- Respond in the SAME language as the user's question.
- RESPOND DIRECTLY. No introductions or meta-talk.
- ELABORATE: Provide comprehensive, detailed, and in-depth answers. Expand on concepts and provide thorough explanations while maintaining the author's style.
- BE SUPER FAST.
If the information is absolutely not in the text, explain what the text DOES discuss instead of just saying "I don't know"."""


def format_metadata(metadata: ManuscriptMetadata) -> str:
    if not metadata.title:
        return ""
    return (
        "MANUSCRIPT METADATA:\n"
        f"- Title: {metadata.title}\n"
        f"- Author: {metadata.author or 'Unknown'}\n"
        f"- Structure: {metadata.chapters or 'Unknown'}"
    )


def format_axioms(axioms: list[Axiom]) -> str:
    if not axioms:
        return ""
    lines = "\n".join(
        f"• {axiom.term}: {axiom.definition} ({axiom.significance})" for axiom in axioms
    )
    return (
        "CORE KNOWLEDGE AXIOMS (GLOBAL CONTEXT MAP):\n"
        f"{lines}\n"
        "Use these axioms to understand the deeper meaning of the text without needing to re-read everything."
    )


def build_system_instruction(
    metadata: ManuscriptMetadata,
    axioms: list[Axiom],
    language: Language,
) -> str:
    """Build the system prompt from the session's current metadata and axioms.

    Recomputed for every call so it always reflects the latest extraction.
    """
    sections = [
        SYSTEM_PROMPT_HEADER,
        format_metadata(metadata),
        format_axioms(axioms),
        SYSTEM_PROMPT_PROTOCOL,
        f"When the language of the question is unclear, answer in {language.display_name}.",
    ]
    return "\n".join(section for section in sections if section)


def build_extraction_prompt(axiom_count: int = 13, snippet_count: int = 10) -> str:
    """Instructions for the one-shot extraction call."""
    return f"""1. Extract exactly {axiom_count} high-quality 'Knowledge Axioms' from this manuscript.
2. Extract {snippet_count} short, profound, and useful snippets or quotes DIRECTLY from the text (verbatim).
3. Extract the FULL TEXT of this PDF accurately.
4. Identify the Title, Author, and a brief list of Chapters/Structure.
IMPORTANT: The 'axioms', 'snippets', and 'metadata' MUST be in the SAME LANGUAGE as the PDF manuscript itself.
Return ONLY JSON with this structure:
{{
  "axioms": [{{ "term": "...", "definition": "...", "significance": "..." }}],
  "snippets": ["..."],
  "metadata": {{ "title": "...", "author": "...", "chapters": "..." }},
  "fullText": "..."
}}"""


def build_augmented_prompt(user_prompt: str, relevant_chunks: list[str]) -> str:
    """Wrap the user's question with retrieved context, or ask for a full scan."""
    if relevant_chunks:
        context_text = CHUNK_SEPARATOR.join(relevant_chunks)
        return f"""CRITICAL CONTEXT FROM MANUSCRIPT:
{context_text}
USER QUESTION:
{user_prompt}
INSTRUCTION: You MUST answer based on the provided context. Adopt the author's style. Support your answer with direct quotes."""

    return f"""USER QUESTION: {user_prompt}
INSTRUCTION: Scan the entire manuscript to find the answer. Adopt the author's style. Be specific and provide quotes."""
