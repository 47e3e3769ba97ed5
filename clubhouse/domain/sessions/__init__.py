"""Session domain exports.

The lifecycle service lives in :mod:`clubhouse.domain.sessions.service`; it
depends on the registration package, which in turn imports these models.
"""

from .exceptions import (
    InvalidSessionDetailsError,
    SessionAlreadyExistsError,
    SessionError,
    SessionImmutableError,
    SessionNotFoundError,
    StateTransitionError,
)
from .models import SessionDetailsInput, SessionSnapshot, SessionStatus

__all__ = [
    "InvalidSessionDetailsError",
    "SessionAlreadyExistsError",
    "SessionDetailsInput",
    "SessionError",
    "SessionImmutableError",
    "SessionNotFoundError",
    "SessionSnapshot",
    "SessionStatus",
    "StateTransitionError",
]
