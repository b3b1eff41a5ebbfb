"""Custom exceptions for the manuscript chat package."""


class ManuscriptError(Exception):
    """Base exception for all manuscript-related errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ManuscriptParseError(ManuscriptError):
    """Raised when the extraction response is not the expected JSON shape."""

    pass


class SessionNotFoundError(ManuscriptError):
    """Raised when a session id is not known to the session store."""

    pass
