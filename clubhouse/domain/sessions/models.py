"""Domain models for play sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional


class SessionStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    LOCKED = "locked"
    CLOSED = "closed"


# forward-only lifecycle: action -> statuses it may start from
TRANSITIONS: dict[str, tuple[SessionStatus, tuple[SessionStatus, ...]]] = {
    "publish": (SessionStatus.PUBLISHED, (SessionStatus.DRAFT,)),
    "lock": (SessionStatus.LOCKED, (SessionStatus.PUBLISHED,)),
    "close": (SessionStatus.CLOSED, (SessionStatus.PUBLISHED, SessionStatus.LOCKED)),
}


@dataclass(slots=True)
class SessionSnapshot:
    id: str
    status: SessionStatus
    day_label: Optional[str]
    session_date: date
    start_time: Optional[time]
    end_time: Optional[time]
    max_players: int
    payment_amount: int
    created_at: Optional[datetime]
    published_at: Optional[datetime]
    locked_at: Optional[datetime]
    closed_at: Optional[datetime]

    @property
    def time_label(self) -> str:
        if self.start_time is None:
            return ""
        label = self.start_time.strftime("%H:%M")
        if self.end_time is not None:
            label = f"{label} - {self.end_time.strftime('%H:%M')}"
        return label

    def starts_at(self, utc_offset_hours: int) -> Optional[datetime]:
        if self.start_time is None:
            return None
        tz = timezone(timedelta(hours=utc_offset_hours))
        return datetime.combine(self.session_date, self.start_time, tzinfo=tz)

    def is_due_for_lock(self, now: datetime, *, lock_hours: int, utc_offset_hours: int) -> bool:
        start = self.starts_at(utc_offset_hours)
        if start is None or self.status is not SessionStatus.PUBLISHED:
            return False
        return now >= start - timedelta(hours=lock_hours)


@dataclass(slots=True)
class SessionDetailsInput:
    """Partial update of a draft session; ``None`` leaves a field unchanged."""

    day_label: Optional[str] = None
    session_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    max_players: Optional[int] = None
    payment_amount: Optional[int] = None


def to_session_snapshot(model) -> SessionSnapshot:
    return SessionSnapshot(
        id=model.id,
        status=SessionStatus(model.status),
        day_label=model.day_label,
        session_date=model.session_date,
        start_time=model.start_time,
        end_time=model.end_time,
        max_players=model.max_players,
        payment_amount=model.payment_amount,
        created_at=model.created_at,
        published_at=model.published_at,
        locked_at=model.locked_at,
        closed_at=model.closed_at,
    )
