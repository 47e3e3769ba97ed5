"""Shared domain building blocks."""

from .exceptions import ClubError, ContentionError, NotFoundError

__all__ = [
    "ClubError",
    "ContentionError",
    "NotFoundError",
]
