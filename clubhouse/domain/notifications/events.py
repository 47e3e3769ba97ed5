"""Structured events announced by the session and registration services.

The core decides which event fires and with what payload; wording, language and
delivery belong to whatever sink receives them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import ClassVar, Optional, Union


@dataclass(frozen=True, slots=True)
class Occupancy:
    current: int
    maximum: int

    @property
    def available(self) -> int:
        return max(self.maximum - self.current, 0)

    def __str__(self) -> str:
        return f"{self.current}/{self.maximum}"


@dataclass(frozen=True, slots=True)
class SessionPublished:
    kind: ClassVar[str] = "session_published"

    session_id: str
    day: Optional[str]
    time: str
    date: date
    price: int
    occupancy: Occupancy


@dataclass(frozen=True, slots=True)
class SlotAvailable:
    kind: ClassVar[str] = "slot_available"

    session_id: str
    cancelled_by: str
    occupancy: Occupancy
    day: Optional[str]
    time: str
    date: date


@dataclass(frozen=True, slots=True)
class SlotAutoFilled:
    kind: ClassVar[str] = "slot_auto_filled"

    session_id: str
    promoted_name: str
    occupancy: Occupancy


@dataclass(frozen=True, slots=True)
class RegistrationCancelled:
    kind: ClassVar[str] = "registration_cancelled"

    session_id: str
    name: str
    occupancy: Occupancy
    day: Optional[str]
    time: str
    date: date


NotificationEvent = Union[SessionPublished, SlotAvailable, SlotAutoFilled, RegistrationCancelled]
