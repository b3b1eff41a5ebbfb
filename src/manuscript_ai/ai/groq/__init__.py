"""Groq module for hosted language-model calls."""

from manuscript_ai.ai.groq.config import (
    GroqSettings,
    get_groq_settings,
    set_groq_settings,
)
from manuscript_ai.ai.groq.exceptions import (
    GroqConfigurationError,
    GroqError,
    GroqTransportError,
)

__all__ = [
    "GroqSettings",
    "get_groq_settings",
    "set_groq_settings",
    "GroqError",
    "GroqConfigurationError",
    "GroqTransportError",
]
