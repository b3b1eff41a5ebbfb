"""Groq provider implementation.

Groq serves an OpenAI-compatible Chat Completions API, so requests go through
the OpenAI SDK's ``AsyncOpenAI`` client with Groq's base URL.
"""

from typing import Any, AsyncGenerator

import httpx
from openai import AsyncOpenAI

from manuscript_ai.ai.base import AIProvider, ChatMessage, ChatStreamChunk
from manuscript_ai.ai.groq.config import GroqSettings, get_groq_settings
from manuscript_ai.ai.groq.exceptions import (
    GroqConfigurationError,
    GroqTransportError,
)
from manuscript_ai.utils.logger import logger


class GroqProvider(AIProvider):
    """Groq provider implementation.

    Used for both the one-shot manuscript extraction (JSON output with a PDF
    attachment) and the streaming chat turns.
    """

    def __init__(self, settings: GroqSettings | None = None):
        """Initialize Groq provider.

        Args:
            settings: Groq settings (defaults to the global settings)
        """
        self.settings = settings or get_groq_settings()
        self._client: AsyncOpenAI | None = None

    def ensure_configured(self) -> None:
        """Fail fast when GROQ_API_KEY is missing or a placeholder."""
        if not self.settings.has_usable_api_key:
            logger.error("[GROQ] API key missing or placeholder")
            raise GroqConfigurationError("GROQ_API_KEY_MISSING")

    def _get_client(self) -> AsyncOpenAI:
        """Get or create the OpenAI-compatible client."""
        self.ensure_configured()
        if self._client is None:
            timeout = httpx.Timeout(
                timeout=self.settings.request_timeout,
                connect=10.0,
            )
            self._client = AsyncOpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                timeout=timeout,
            )
            logger.info(
                "[GROQ] Client initialized",
                base_url=self.settings.base_url,
                timeout_seconds=self.settings.request_timeout,
            )
        return self._client

    def _build_params(self, **kwargs) -> dict[str, Any]:
        temperature = kwargs.get("temperature")
        return {
            "model": kwargs.get("model") or self.settings.model_name,
            "temperature": (
                temperature if temperature is not None else self.settings.temperature
            ),
        }

    async def generate_json(
        self,
        content_parts: list[dict[str, Any]],
        **kwargs,
    ) -> str:
        """Send one multimodal user message and return the JSON response text.

        Args:
            content_parts: Content parts (``text`` and ``image_url`` items)
            **kwargs: Additional options:
                - model: Model name (default from settings)
                - temperature: Sampling temperature (default from settings)

        Returns:
            str: Response content, or an empty string if none was returned

        Raises:
            GroqConfigurationError: If the API key is not usable
            GroqTransportError: If the request fails
        """
        client = self._get_client()
        params = self._build_params(**kwargs)

        try:
            logger.info("[GROQ] Generating JSON content", model=params["model"])
            response = await client.chat.completions.create(
                **params,
                messages=[{"role": "user", "content": content_parts}],
                response_format={"type": "json_object"},
            )
        except Exception as e:
            logger.error("[GROQ] JSON generation failed", error=str(e))
            raise GroqTransportError(f"Failed to generate content: {e}", e) from e

        if not response.choices:
            return ""
        content = response.choices[0].message.content or ""
        logger.info(
            "[GROQ] JSON generation complete",
            finish_reason=response.choices[0].finish_reason,
            content_length=len(content),
        )
        return content

    async def stream_chat(
        self,
        messages: list[ChatMessage],
        instructions: str | None = None,
        **kwargs,
    ) -> AsyncGenerator[ChatStreamChunk, None]:
        """Stream chat responses from the Chat Completions API.

        Args:
            messages: Conversation turns, oldest first
            instructions: Optional system prompt placed before the messages
            **kwargs: Additional options:
                - model: Model name (default from settings)
                - temperature: Sampling temperature (default from settings)

        Yields:
            ChatStreamChunk: One chunk per non-empty text delta, plus a final
            chunk carrying the finish reason

        Raises:
            GroqConfigurationError: If the API key is not usable
            GroqTransportError: If the request or the stream fails
        """
        client = self._get_client()
        params = self._build_params(**kwargs)

        payload: list[dict[str, str]] = []
        if instructions:
            payload.append({"role": "system", "content": instructions})
        payload.extend(message.model_dump() for message in messages)

        try:
            logger.info(
                "[STREAM] Creating chat completion stream",
                model=params["model"],
                message_count=len(payload),
            )
            stream = await client.chat.completions.create(
                **params,
                messages=payload,
                stream=True,
            )

            async for event in stream:
                if not event.choices:
                    continue
                choice = event.choices[0]
                content = choice.delta.content if choice.delta else None
                if content:
                    yield ChatStreamChunk(content=content)
                if choice.finish_reason:
                    logger.info(
                        "[STREAM] Completed", finish_reason=choice.finish_reason
                    )
                    yield ChatStreamChunk(finish_reason=choice.finish_reason)
        except Exception as e:
            logger.error("[STREAM] Streaming chat failed", error=str(e))
            raise GroqTransportError(f"Streaming chat failed: {e}", e) from e
