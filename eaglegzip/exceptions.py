"""
Custom exceptions for the gzip middleware.
"""
from typing import Optional, Dict, Any


class GzipError(Exception):
    """Base exception for all gzip middleware errors."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            context: Additional context about the error
            original_exception: The original exception that caused this error
        """
        super().__init__(message)
        self.context = context or {}
        self.original_exception = original_exception


class CompressionLevelError(GzipError, ValueError):
    """Raised when a gzip writer is requested with an invalid compression level."""
    pass


class WriterClosedError(GzipError):
    """Raised when a gzip writer is used after it has been closed."""
    pass


class ResponseClosedError(GzipError):
    """Raised when body bytes are written after the response has finished."""
    pass


__all__ = [
    "GzipError",
    "CompressionLevelError",
    "WriterClosedError",
    "ResponseClosedError",
]
