"""Base classes for AI provider abstraction."""

from abc import ABC, abstractmethod
from typing import Any, AsyncGenerator, Literal

from pydantic import BaseModel

ChatRole = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """A single conversation turn sent to, or received from, the model."""

    role: ChatRole
    content: str


class ChatStreamChunk(BaseModel):
    """Chunk from a streaming chat response.

    ``content`` carries the incremental text fragment (possibly empty) and
    ``finish_reason`` is set on the final chunk of the stream.
    """

    content: str = ""
    finish_reason: str | None = None


class SSEEvent(BaseModel):
    """Server-Sent Event wrapper for type-safe SSE formatting.

    Follows the W3C Server-Sent Events specification:
    https://html.spec.whatwg.org/multipage/server-sent-events.html
    """

    data: str
    event: Literal["done", "error"] | None = None
    id: str | None = None
    retry: int | None = None

    def format(self) -> str:
        """Format as SSE protocol string.

        Returns:
            str: Properly formatted SSE event with trailing newlines
        """
        lines = []
        if self.event:
            lines.append(f"event: {self.event}")
        if self.id:
            lines.append(f"id: {self.id}")
        if self.retry is not None:
            lines.append(f"retry: {self.retry}")
        lines.append(f"data: {self.data}")
        lines.append("")  # Empty line as event delimiter
        return "\n".join(lines) + "\n"


class AIProvider(ABC):
    """Abstract base class for language-model providers.

    Keeps the manuscript service independent of the concrete SDK so tests can
    substitute an in-memory provider.
    """

    @abstractmethod
    def ensure_configured(self) -> None:
        """Validate credentials without touching the network.

        Raises:
            GroqConfigurationError: If the provider cannot be used
        """
        pass

    @abstractmethod
    async def generate_json(
        self,
        content_parts: list[dict[str, Any]],
        **kwargs,
    ) -> str:
        """Run a single non-streaming request that must answer with a JSON object.

        Args:
            content_parts: Multimodal content parts of the single user message
            **kwargs: Provider-specific options (temperature, model)

        Returns:
            str: Raw JSON text of the response (may be empty)
        """
        pass

    @abstractmethod
    def stream_chat(
        self,
        messages: list[ChatMessage],
        instructions: str | None = None,
        **kwargs,
    ) -> AsyncGenerator[ChatStreamChunk, None]:
        """Stream a chat completion.

        Args:
            messages: Conversation turns (user and assistant)
            instructions: Optional system prompt sent ahead of the messages
            **kwargs: Provider-specific options (temperature, model)

        Yields:
            ChatStreamChunk: Incremental text fragments
        """
        pass
