"""Registration and waitlist exceptions."""

from __future__ import annotations

from clubhouse.domain.common.exceptions import ClubError, NotFoundError
from clubhouse.domain.sessions.exceptions import StateTransitionError


class RegistrationError(ClubError):
    """Base class for registration related domain errors."""


class RegistrationNotFoundError(RegistrationError, NotFoundError):
    """Raised when no registration holds the requested position."""


class DuplicateRegistrationError(RegistrationError):
    """Raised when the name is already on the session's list."""

    def __init__(self, session_id: str, name: str) -> None:
        super().__init__(f"{name!r} is already registered for session {session_id}")
        self.session_id = session_id
        self.name = name


class RegistrationClosedError(StateTransitionError):
    """Raised when the session's status does not accept this registration change."""


class CapacityInvariantViolation(RegistrationError):
    """The stored positions of a session no longer form a valid roster.

    This is never expected in normal operation; the operation that detects it is
    aborted instead of repairing the data.
    """

    def __init__(self, session_id: str, detail: str) -> None:
        super().__init__(f"Roster of session {session_id} is inconsistent: {detail}")
        self.session_id = session_id
        self.detail = detail


class InvalidRegistrationError(RegistrationError, ValueError):
    """Raised when a registration request is malformed (for example an empty name)."""
