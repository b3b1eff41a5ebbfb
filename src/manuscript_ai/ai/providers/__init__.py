"""AI provider implementations."""

from manuscript_ai.ai.providers.groq import GroqProvider

__all__ = ["GroqProvider"]
