"""Registration records and the roster view of one session."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from clubhouse.domain.notifications.events import Occupancy

from .exceptions import CapacityInvariantViolation


@dataclass(slots=True)
class RegistrationRecord:
    id: str
    session_id: str
    name: str
    position: int
    paid: bool
    clicked_payment_link: bool
    is_guest: bool
    registered_by: str
    user_id: Optional[str]
    registered_at: Optional[datetime]
    is_regular: bool = False

    @property
    def payer(self) -> str:
        return payer_of(self)


@dataclass(slots=True)
class Roster:
    session_id: str
    max_players: int
    active: list[RegistrationRecord] = field(default_factory=list)
    waitlist: list[RegistrationRecord] = field(default_factory=list)

    @property
    def occupancy(self) -> Occupancy:
        return Occupancy(len(self.active), self.max_players)

    @property
    def is_full(self) -> bool:
        return len(self.active) >= self.max_players


@dataclass(frozen=True, slots=True)
class RegularPlayerRecord:
    weekday: int
    name: str
    user_id: str
    sort_order: int


def guest_display_name(host_name: str, guest_name: str, separator: str) -> str:
    return f"{host_name.strip()}{separator}{guest_name.strip()}"


def check_positions(session_id: str, positions: Iterable[int], max_players: int) -> None:
    """Verify that active positions are exactly 1..k and the waitlist is strictly increasing."""
    ordered = sorted(positions)
    if len(set(ordered)) != len(ordered):
        raise CapacityInvariantViolation(session_id, f"duplicate positions {ordered}")
    if ordered and ordered[0] < 1:
        raise CapacityInvariantViolation(session_id, f"non-positive position {ordered[0]}")

    active = [p for p in ordered if p <= max_players]
    if active != list(range(1, len(active) + 1)):
        raise CapacityInvariantViolation(session_id, f"active positions {active} have gaps")
    if len(active) < max_players and len(active) < len(ordered):
        raise CapacityInvariantViolation(
            session_id,
            f"waitlist is not empty while only {len(active)} of {max_players} places are taken",
        )


def payer_of(registration) -> str:
    """Wallet account charged for a place: the host for guests."""
    if registration.is_guest or not registration.user_id:
        return registration.registered_by
    return registration.user_id


def to_registration_record(model) -> RegistrationRecord:
    return RegistrationRecord(
        id=model.id,
        session_id=model.session_id,
        name=model.name,
        position=model.position,
        paid=bool(model.paid),
        clicked_payment_link=bool(model.clicked_payment_link),
        is_guest=bool(model.is_guest),
        is_regular=bool(model.is_regular),
        registered_by=model.registered_by,
        user_id=model.user_id,
        registered_at=model.registered_at,
    )


def build_roster(session_id: str, max_players: int, registrations: Iterable) -> Roster:
    roster = Roster(session_id=session_id, max_players=max_players)
    for model in sorted(registrations, key=lambda r: r.position):
        record = to_registration_record(model)
        if record.position <= max_players:
            roster.active.append(record)
        else:
            roster.waitlist.append(record)
    return roster


def to_regular_player_record(model) -> RegularPlayerRecord:
    return RegularPlayerRecord(
        weekday=model.weekday,
        name=model.name,
        user_id=model.user_id,
        sort_order=model.sort_order,
    )
