"""
Exception classes for pastens.

All exceptions inherit from PastensError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class PastensError(Exception):
    """Base exception for all pastens errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class LookupFailedError(PastensError):
    """Raised when the history API answers with a non-success status or a malformed body."""

    pass


class RateLimitedError(LookupFailedError):
    """Raised when the history API signals rate limiting (HTTP 429)."""

    pass


class TransportError(PastensError):
    """Raised when the history API cannot be reached (connect errors, timeouts)."""

    pass


class PersistenceError(PastensError):
    """Raised when local storage operations fail (file I/O, unreadable JSON)."""

    pass


class ConfigError(PastensError):
    """Raised when a configuration file cannot be loaded or is invalid."""

    pass
