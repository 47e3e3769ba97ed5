"""Notification specific exceptions."""

from clubhouse.domain.common.exceptions import ClubError


class NotificationDispatchError(ClubError):
    """Raised when one or more sinks rejected events of an already committed operation."""

    def __init__(self, failures: list[tuple[str, Exception]]) -> None:
        kinds = ", ".join(kind for kind, _ in failures)
        super().__init__(f"Failed to dispatch {len(failures)} notification(s): {kinds}")
        self.failures = failures
