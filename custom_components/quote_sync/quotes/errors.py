"""Exceptions raised by the quote store and sync engine."""

from __future__ import annotations


class QuoteSyncError(RuntimeError):
    """Base class for recoverable quote store failures."""

    def __init__(self, message: str, *, reason: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason


class QuoteValidationError(QuoteSyncError):
    """Raised when a quote is missing its text or category."""


class QuoteNetworkError(QuoteSyncError):
    """Raised when the remote quote source cannot be reached or misbehaves."""


class QuoteFormatError(QuoteSyncError):
    """Raised when an imported document cannot be turned into quotes."""


class QuotePersistenceError(QuoteSyncError):
    """Raised when a mutation could not be written to the persistent store."""


__all__ = [
    "QuoteSyncError",
    "QuoteValidationError",
    "QuoteNetworkError",
    "QuoteFormatError",
    "QuotePersistenceError",
]
