"""Exceptions shared by every club domain."""

from __future__ import annotations


class ClubError(Exception):
    """Base class for club domain errors."""


class NotFoundError(ClubError):
    """Raised when a requested entity does not exist."""


class ContentionError(ClubError):
    """Raised when a serialization point could not be acquired in time.

    The operation had no effect and may be retried by the caller with backoff.
    """

    retryable = True

    def __init__(self, key: str, timeout: float | None = None) -> None:
        if timeout is None:
            message = f"Concurrent update of {key}"
        else:
            message = f"Timed out after {timeout:.1f}s waiting for {key}"
        super().__init__(message)
        self.key = key
        self.timeout = timeout
