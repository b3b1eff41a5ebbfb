"""Groq API exceptions."""


class GroqError(Exception):
    """Base exception for Groq API errors."""

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize Groq error.

        Args:
            message: Error message
            original_error: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class GroqConfigurationError(GroqError):
    """Raised when the API key is missing or still a placeholder."""

    pass


class GroqTransportError(GroqError):
    """Raised when a request to the Groq API fails."""

    pass
