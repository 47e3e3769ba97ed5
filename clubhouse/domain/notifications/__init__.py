"""Notification trigger interface."""

from .dispatcher import (
    LoggingNotificationSink,
    NotificationDispatcher,
    NotificationSink,
    RecordingNotificationSink,
)
from .events import (
    NotificationEvent,
    Occupancy,
    RegistrationCancelled,
    SessionPublished,
    SlotAutoFilled,
    SlotAvailable,
)
from .exceptions import NotificationDispatchError

__all__ = [
    "LoggingNotificationSink",
    "NotificationDispatcher",
    "NotificationDispatchError",
    "NotificationEvent",
    "NotificationSink",
    "Occupancy",
    "RecordingNotificationSink",
    "RegistrationCancelled",
    "SessionPublished",
    "SlotAutoFilled",
    "SlotAvailable",
]
