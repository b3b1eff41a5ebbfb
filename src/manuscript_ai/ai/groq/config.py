"""Groq API configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from manuscript_ai.utils.logger import logger

# Values that front-end build tooling leaves behind when the key was never set
PLACEHOLDER_API_KEYS = frozenset({"undefined", "null", "none", "your-api-key"})


class GroqSettings(BaseSettings):
    """Settings for the Groq API integration.

    Groq exposes an OpenAI-compatible chat completions endpoint, so the
    OpenAI SDK is pointed at ``base_url``.

    Attributes:
        api_key: Groq API key. Left optional here so that a missing key is
            reported as a configuration error at call time, not at import.
        base_url: OpenAI-compatible Groq endpoint
        model_name: Model used for both ingestion and chat
        temperature: Sampling temperature for both calls
        request_timeout: HTTP request timeout in seconds
    """

    model_config = SettingsConfigDict(
        env_prefix="GROQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Groq API key",
    )
    base_url: str = Field(
        default="https://api.groq.com/openai/v1",
        description="OpenAI-compatible Groq API base URL",
    )
    model_name: str = Field(
        default="meta-llama/llama-4-maverick-17b-128e-instruct",
        description="Model identifier used for extraction and chat",
    )
    temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for extraction and chat",
    )
    request_timeout: int = Field(
        default=300,
        gt=0,
        description="HTTP request timeout in seconds",
    )

    @property
    def has_usable_api_key(self) -> bool:
        """Whether api_key is set to something other than a placeholder."""
        if not self.api_key or not self.api_key.strip():
            return False
        return self.api_key.strip().lower() not in PLACEHOLDER_API_KEYS


_groq_settings: GroqSettings | None = None


def get_groq_settings() -> GroqSettings:
    """
    Get the global Groq settings instance.

    Returns:
        GroqSettings: The global settings instance
    """
    global _groq_settings
    if _groq_settings is None:
        _groq_settings = GroqSettings()
        logger.info("Groq settings loaded", model_name=_groq_settings.model_name)
    return _groq_settings


def set_groq_settings(settings: GroqSettings | None) -> None:
    """
    Set the global Groq settings instance.

    Args:
        settings: The settings to set, or None to reload from the environment
    """
    global _groq_settings
    _groq_settings = settings
