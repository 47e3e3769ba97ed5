"""Registration and waitlist use cases for one session's ordered player list.

Positions are a per-session counter: a new registration always takes the
highest position + 1. Positions up to ``max_players`` form the active roster,
the rest is the waiting list. A freed active place is filled by the earliest
waitlisted registrant; with an empty waitlist the last active registrant
moves down into it so the active positions stay 1..k.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from sqlalchemy.exc import IntegrityError

from clubhouse.core.config import Settings
from clubhouse.core.locks import regulars_key, session_key
from clubhouse.db.models import (
    PlaySession as PlaySessionModel,
    Registration as RegistrationModel,
    RegularPlayer as RegularPlayerModel,
)
from clubhouse.domain.notifications.events import (
    Occupancy,
    RegistrationCancelled,
    SlotAutoFilled,
    SlotAvailable,
)
from clubhouse.domain.sessions.exceptions import SessionImmutableError, SessionNotFoundError
from clubhouse.domain.sessions.models import SessionStatus
from clubhouse.domain.sessions.repository import SessionRepository
from clubhouse.domain.wallets.ledger import WalletLedger
from clubhouse.domain.wallets.plan import LedgerPlan
from clubhouse.infrastructure.database.repositories.regular_player_repository import SqlRegularPlayerRepository
from clubhouse.infrastructure.database.repositories.registration_repository import SqlRegistrationRepository
from clubhouse.infrastructure.database.repositories.session_repository import SqlSessionRepository
from clubhouse.infrastructure.database.unit_of_work import UnitOfWork

from .exceptions import (
    CapacityInvariantViolation,
    DuplicateRegistrationError,
    InvalidRegistrationError,
    RegistrationClosedError,
    RegistrationNotFoundError,
)
from .models import (
    RegistrationRecord,
    RegularPlayerRecord,
    Roster,
    build_roster,
    check_positions,
    guest_display_name,
    payer_of,
    to_registration_record,
    to_regular_player_record,
)
from .repository import RegistrationRepository

logger = logging.getLogger(__name__)


class RosterEdit:
    """In-memory view of one locked session's registrations while they are changed.

    Wallet effects are collected in :attr:`plan` and notification events are
    emitted on the unit of work; nothing reaches a wallet until :meth:`finish`.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session: PlaySessionModel,
        rows: list[RegistrationModel],
        repository: RegistrationRepository,
    ) -> None:
        self.uow = uow
        self.session = session
        self.rows = sorted(rows, key=lambda r: r.position)
        self.repository = repository
        self.plan = LedgerPlan()

    @property
    def session_id(self) -> str:
        return self.session.id

    @property
    def status(self) -> SessionStatus:
        return SessionStatus(self.session.status)

    @property
    def live(self) -> bool:
        """Draft sessions have no wallet or notification effects."""
        return self.status is not SessionStatus.DRAFT

    @property
    def active(self) -> list[RegistrationModel]:
        return [r for r in self.rows if r.position <= self.session.max_players]

    @property
    def waitlist(self) -> list[RegistrationModel]:
        return [r for r in self.rows if r.position > self.session.max_players]

    @property
    def occupancy(self) -> Occupancy:
        return Occupancy(len(self.active), self.session.max_players)

    def check(self) -> None:
        check_positions(self.session_id, (r.position for r in self.rows), self.session.max_players)

    def find(self, position: int) -> RegistrationModel:
        for row in self.rows:
            if row.position == position:
                return row
        raise RegistrationNotFoundError(f"No registration at position {position} in session {self.session_id}")

    def next_position(self) -> int:
        return self.rows[-1].position + 1 if self.rows else 1

    def charge(self, registration: RegistrationModel) -> None:
        if registration.paid:
            return
        self.plan.charge(
            payer_of(registration),
            self.session.payment_amount,
            self.session_id,
            f"Session {self.session_id}: {registration.name}",
        )
        registration.paid = True

    async def add(self, registration: RegistrationModel) -> None:
        try:
            await self.repository.add(registration)
        except IntegrityError as exc:
            raise CapacityInvariantViolation(self.session_id, str(exc.orig)) from exc
        self.rows.append(registration)
        self.rows.sort(key=lambda r: r.position)

    async def remove(self, registration: RegistrationModel, *, announce: bool = True) -> RegistrationRecord:
        record = to_registration_record(registration)
        vacated = registration.position
        was_active = vacated <= self.session.max_players

        if registration.paid:
            self.plan.refund(
                payer_of(registration),
                self.session.payment_amount,
                self.session_id,
                f"Refund session {self.session_id}: {registration.name}",
            )
        self.rows.remove(registration)
        await self.repository.delete(registration)

        if not was_active:
            if announce and self.live:
                self._emit_cancelled(record.name)
            return record

        waitlist = self.waitlist
        if waitlist:
            promoted = waitlist[0]
            await self._move(promoted, vacated)
            if self.live:
                self.charge(promoted)
                self.uow.emit(SlotAutoFilled(self.session_id, promoted.name, self.occupancy))
            logger.info("Promoted %s into position %s of session %s", promoted.name, vacated, self.session_id)
            return record

        if self.rows and self.rows[-1].position > vacated:
            await self._move(self.rows[-1], vacated)
        if announce and self.live:
            self.uow.emit(
                SlotAvailable(
                    session_id=self.session_id,
                    cancelled_by=record.name,
                    occupancy=self.occupancy,
                    day=self.session.day_label,
                    time=_time_label(self.session),
                    date=self.session.session_date,
                )
            )
        return record

    async def compact(self) -> None:
        """Close gaps in the active range after a capacity change, keeping the order."""
        for index, registration in enumerate(list(self.rows[: self.session.max_players])):
            if registration.position != index + 1:
                await self._move(registration, index + 1)

    async def finish(self, ledger: WalletLedger) -> None:
        self.check()
        await self.plan.execute(ledger)

    async def _move(self, registration: RegistrationModel, position: int) -> None:
        try:
            await self.repository.move(registration, position)
        except IntegrityError as exc:
            raise CapacityInvariantViolation(self.session_id, str(exc.orig)) from exc
        self.rows.sort(key=lambda r: r.position)

    def _emit_cancelled(self, name: str) -> None:
        self.uow.emit(
            RegistrationCancelled(
                session_id=self.session_id,
                name=name,
                occupancy=self.occupancy,
                day=self.session.day_label,
                time=_time_label(self.session),
                date=self.session.session_date,
            )
        )


@dataclass(slots=True)
class RegistrationService:
    unit_of_work: Callable[[], UnitOfWork]
    settings: Settings

    async def register(
        self,
        session_id: str,
        name: str,
        *,
        acting_user_id: str,
        is_guest: bool = False,
        user_id: Optional[str] = None,
    ) -> RegistrationRecord:
        """Append ``name`` to the session's list.

        A new active registrant on a published session is charged at once; a
        waitlisted one is charged when promoted. Guests are paid for by the
        acting user.
        """
        clean = name.strip()
        if not clean:
            raise InvalidRegistrationError("Registration name cannot be empty")

        async with self.unit_of_work() as uow:
            edit = await self._open(uow, session_id, "register")
            if any(r.name.casefold() == clean.casefold() for r in edit.rows):
                logger.warning("Duplicate registration %r for session %s", clean, session_id)
                raise DuplicateRegistrationError(session_id, clean)

            registration = RegistrationModel(
                session_id=session_id,
                name=clean,
                user_id=None if is_guest else (user_id or acting_user_id),
                position=edit.next_position(),
                paid=False,
                clicked_payment_link=False,
                is_guest=is_guest,
                is_regular=False,
                registered_by=acting_user_id,
            )
            if edit.live and registration.position <= edit.session.max_players:
                edit.charge(registration)
            await edit.add(registration)
            await edit.finish(WalletLedger.for_unit(uow, self.settings))
            record = to_registration_record(registration)

        logger.info(
            "Registered %s at position %s of session %s (%s)",
            record.name,
            record.position,
            session_id,
            "active" if record.position <= edit.session.max_players else "waitlist",
        )
        return record

    async def register_guest(
        self,
        session_id: str,
        host_name: str,
        guest_name: str,
        *,
        acting_user_id: str,
    ) -> RegistrationRecord:
        if not guest_name.strip():
            raise InvalidRegistrationError("Guest name cannot be empty")
        name = guest_display_name(host_name, guest_name, self.settings.registration.guest_separator)
        return await self.register(session_id, name, acting_user_id=acting_user_id, is_guest=True)

    async def cancel(self, session_id: str, position: int, *, admin: bool = False) -> RegistrationRecord:
        """Remove the registration at ``position``, refunding and promoting as needed.

        Locked sessions only accept removals by an admin.
        """
        async with self.unit_of_work() as uow:
            edit = await self._open(uow, session_id, "cancel", admin=admin)
            record = await edit.remove(edit.find(position))
            await edit.finish(WalletLedger.for_unit(uow, self.settings))

        logger.info("Cancelled %s (position %s) from session %s", record.name, position, session_id)
        return record

    async def cancel_for_user(self, session_id: str, user_id: str) -> list[RegistrationRecord]:
        """Cancel the user's own place and every guest they registered, as one change."""
        async with self.unit_of_work() as uow:
            edit = await self._open(uow, session_id, "cancel")
            targets = [
                r
                for r in edit.rows
                if (r.is_guest and r.registered_by == user_id) or (not r.is_guest and r.user_id == user_id)
            ]
            if not targets:
                raise RegistrationNotFoundError(f"{user_id} has no registration in session {session_id}")

            # waitlisted entries go first so none of them is promoted before being removed
            removed = []
            for registration in sorted(targets, key=lambda r: r.position, reverse=True):
                removed.append(await edit.remove(registration))
            await edit.finish(WalletLedger.for_unit(uow, self.settings))

        logger.info("Cancelled %s registrations of %s from session %s", len(removed), user_id, session_id)
        return removed

    async def refund_waiting_list(self, session_id: str) -> list[RegistrationRecord]:
        async with self.unit_of_work() as uow:
            edit = await self._open(uow, session_id, "refund the waiting list of", admin=True)
            removed = []
            for registration in reversed(edit.waitlist):
                removed.append(await edit.remove(registration, announce=False))
            await edit.finish(WalletLedger.for_unit(uow, self.settings))

        logger.info("Removed %s waitlisted registrations from session %s", len(removed), session_id)
        return removed

    async def mark_payment_link_clicked(self, session_id: str, position: int) -> RegistrationRecord:
        async with self.unit_of_work() as uow:
            await uow.lock(session_key(session_id))
            session = await _load_session(SqlSessionRepository(uow.session), session_id)
            if session.status == SessionStatus.CLOSED.value:
                raise SessionImmutableError(session_id, "update a registration of")
            repository = SqlRegistrationRepository(uow.session)
            rows = list(await repository.list_for_session(session_id, for_update=True))
            edit = RosterEdit(uow, session, rows, repository)
            registration = edit.find(position)
            registration.clicked_payment_link = True
            await repository.save(registration)
            return to_registration_record(registration)

    async def list_regular_players(self, weekday: Optional[int] = None) -> list[RegularPlayerRecord]:
        if weekday is not None:
            _check_weekday(weekday)
        async with self.unit_of_work() as uow:
            models = await SqlRegularPlayerRepository(uow.session).list_players(weekday)
            return [to_regular_player_record(m) for m in models]

    async def set_regular_players(
        self,
        weekday: int,
        players: Iterable[tuple[str, str]],
    ) -> list[RegularPlayerRecord]:
        """Replace the regular players of an ISO weekday (1 = Monday) with ``(name, user_id)`` pairs."""
        _check_weekday(weekday)
        cleaned: list[tuple[str, str]] = []
        for name, user_id in players:
            name, user_id = name.strip(), user_id.strip()
            if not name or not user_id:
                raise InvalidRegistrationError("Regular players need a name and a user id")
            if any(name.casefold() == other.casefold() for other, _ in cleaned):
                raise InvalidRegistrationError(f"{name} is listed twice for weekday {weekday}")
            cleaned.append((name, user_id))

        async with self.unit_of_work() as uow:
            await uow.lock(regulars_key(weekday))
            models = [
                RegularPlayerModel(weekday=weekday, name=name, user_id=user_id, sort_order=index)
                for index, (name, user_id) in enumerate(cleaned)
            ]
            await SqlRegularPlayerRepository(uow.session).replace(weekday, models)
            records = [to_regular_player_record(m) for m in models]

        logger.info("Weekday %s now has %s regular players", weekday, len(records))
        return records

    async def load_regular_players(self, session_id: str, *, acting_user_id: str) -> list[RegistrationRecord]:
        """Append the regular players of the session's weekday to a draft session.

        Players already on the list are skipped. Nobody is charged until the
        session is published.
        """
        action = "load regular players into"
        async with self.unit_of_work() as uow:
            await uow.lock(session_key(session_id))
            session = await _load_session(SqlSessionRepository(uow.session), session_id, for_update=True)
            status = SessionStatus(session.status)
            if status is SessionStatus.CLOSED:
                raise SessionImmutableError(session_id, action)
            if status is not SessionStatus.DRAFT:
                logger.warning("Rejected loading regular players into session %s while %s", session_id, status.value)
                raise RegistrationClosedError(session_id, status.value, action)

            repository = SqlRegistrationRepository(uow.session)
            rows = list(await repository.list_for_session(session_id, for_update=True))
            edit = RosterEdit(uow, session, rows, repository)
            edit.check()

            weekday = session.session_date.isoweekday()
            regulars = await SqlRegularPlayerRepository(uow.session).list_players(weekday)
            names = {r.name.casefold() for r in edit.rows}
            users = {r.user_id for r in edit.rows if not r.is_guest and r.user_id}
            added = []
            for regular in regulars:
                if regular.name.casefold() in names or regular.user_id in users:
                    continue
                registration = RegistrationModel(
                    session_id=session_id,
                    name=regular.name,
                    user_id=regular.user_id,
                    position=edit.next_position(),
                    paid=False,
                    clicked_payment_link=False,
                    is_guest=False,
                    is_regular=True,
                    registered_by=acting_user_id,
                )
                await edit.add(registration)
                names.add(regular.name.casefold())
                users.add(regular.user_id)
                added.append(to_registration_record(registration))
            edit.check()

        logger.info("Loaded %s regular players into session %s", len(added), session_id)
        return added

    async def get_roster(self, session_id: str) -> Roster:
        async with self.unit_of_work() as uow:
            session = await _load_session(SqlSessionRepository(uow.session), session_id)
            rows = await SqlRegistrationRepository(uow.session).list_for_session(session_id)
            return build_roster(session_id, session.max_players, rows)

    async def _open(self, uow: UnitOfWork, session_id: str, action: str, *, admin: bool = False) -> RosterEdit:
        await uow.lock(session_key(session_id))
        session = await _load_session(SqlSessionRepository(uow.session), session_id, for_update=True)
        self._ensure_open(session, action, admin=admin)
        repository = SqlRegistrationRepository(uow.session)
        rows = list(await repository.list_for_session(session_id, for_update=True))
        edit = RosterEdit(uow, session, rows, repository)
        edit.check()
        return edit

    def _ensure_open(self, session: PlaySessionModel, action: str, *, admin: bool) -> None:
        status = SessionStatus(session.status)
        if status is SessionStatus.CLOSED:
            raise SessionImmutableError(session.id, action)
        if status is SessionStatus.PUBLISHED:
            return
        if status is SessionStatus.DRAFT and self.settings.registration.allow_draft_registration:
            return
        if status is SessionStatus.LOCKED and admin:
            return
        logger.warning("Rejected %s on session %s while %s", action, session.id, status.value)
        raise RegistrationClosedError(session.id, status.value, action)


async def _load_session(
    repository: SessionRepository,
    session_id: str,
    *,
    for_update: bool = False,
) -> PlaySessionModel:
    session = await repository.get(session_id, for_update=for_update)
    if session is None:
        raise SessionNotFoundError(f"Session not found: {session_id}")
    return session


def _time_label(session: PlaySessionModel) -> str:
    if session.start_time is None:
        return ""
    label = session.start_time.strftime("%H:%M")
    if session.end_time is not None:
        label = f"{label} - {session.end_time.strftime('%H:%M')}"
    return label


def _check_weekday(weekday: int) -> None:
    if not 1 <= weekday <= 7:
        raise InvalidRegistrationError(f"Weekday must be 1 (Monday) to 7 (Sunday), got {weekday}")
