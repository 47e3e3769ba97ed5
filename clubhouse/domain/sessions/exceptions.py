"""Session lifecycle exceptions."""

from __future__ import annotations

from clubhouse.domain.common.exceptions import ClubError, NotFoundError


class SessionError(ClubError):
    """Base class for session related domain errors."""


class SessionNotFoundError(SessionError, NotFoundError):
    """Raised when the requested session cannot be found."""


class SessionAlreadyExistsError(SessionError):
    """Raised when creating a session under an id that is already taken."""


class StateTransitionError(SessionError):
    """Raised when an operation is not allowed from the session's current status."""

    def __init__(self, session_id: str, current: str, action: str) -> None:
        super().__init__(f"Cannot {action} session {session_id} while it is {current}")
        self.session_id = session_id
        self.current = current
        self.action = action


class SessionImmutableError(StateTransitionError):
    """Raised on any attempt to change a closed session or its registrations."""

    def __init__(self, session_id: str, action: str) -> None:
        super().__init__(session_id, "closed", action)


class InvalidSessionDetailsError(SessionError, ValueError):
    """Raised when capacity or price are out of range."""
