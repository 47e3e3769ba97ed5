"""Fan-out of committed events to notification sinks."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Iterable, Protocol, Sequence

from .events import NotificationEvent
from .exceptions import NotificationDispatchError

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    async def deliver(self, event: NotificationEvent) -> None:
        ...


class LoggingNotificationSink:
    """Writes every event to the application log."""

    async def deliver(self, event: NotificationEvent) -> None:
        logger.info("Notification %s: %s", event.kind, asdict(event))


class RecordingNotificationSink:
    """Keeps delivered events in memory, in delivery order."""

    def __init__(self) -> None:
        self.events: list[NotificationEvent] = []

    async def deliver(self, event: NotificationEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: str) -> list[NotificationEvent]:
        return [event for event in self.events if event.kind == kind]

    def clear(self) -> None:
        self.events.clear()


class NotificationDispatcher:
    def __init__(self, sinks: Iterable[NotificationSink] = ()) -> None:
        self._sinks: list[NotificationSink] = list(sinks)

    def add_sink(self, sink: NotificationSink) -> None:
        self._sinks.append(sink)

    async def dispatch(self, events: Sequence[NotificationEvent]) -> None:
        """Deliver each event to every sink.

        All deliveries are attempted; failures are logged and raised together
        afterwards as a NotificationDispatchError.
        """
        failures: list[tuple[str, Exception]] = []
        for event in events:
            for sink in self._sinks:
                try:
                    await sink.deliver(event)
                except Exception as exc:
                    logger.error("Sink %s failed to deliver %s: %s", type(sink).__name__, event.kind, exc)
                    failures.append((event.kind, exc))
        if failures:
            raise NotificationDispatchError(failures)
