"""Session lifecycle: draft -> published -> locked -> closed."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Callable, Optional

from clubhouse.core.config import Settings
from clubhouse.core.locks import session_key
from clubhouse.db.models import PlaySession as PlaySessionModel
from clubhouse.domain.notifications.events import SessionPublished
from clubhouse.domain.registrations.service import RosterEdit
from clubhouse.domain.wallets.ledger import WalletLedger
from clubhouse.infrastructure.database.repositories.registration_repository import SqlRegistrationRepository
from clubhouse.infrastructure.database.repositories.session_repository import SqlSessionRepository
from clubhouse.infrastructure.database.unit_of_work import UnitOfWork

from .exceptions import (
    InvalidSessionDetailsError,
    SessionAlreadyExistsError,
    SessionImmutableError,
    SessionNotFoundError,
    StateTransitionError,
)
from .models import TRANSITIONS, SessionDetailsInput, SessionSnapshot, SessionStatus, to_session_snapshot
from .repository import SessionRepository

logger = logging.getLogger(__name__)

_STAMPS = {
    SessionStatus.PUBLISHED: "published_at",
    SessionStatus.LOCKED: "locked_at",
    SessionStatus.CLOSED: "closed_at",
}


@dataclass(slots=True)
class SessionService:
    unit_of_work: Callable[[], UnitOfWork]
    settings: Settings

    async def create_session(
        self,
        session_date: date,
        *,
        session_id: Optional[str] = None,
        day_label: Optional[str] = None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        max_players: Optional[int] = None,
        payment_amount: Optional[int] = None,
    ) -> SessionSnapshot:
        """Create a draft session, keyed by its date unless an id is given."""
        defaults = self.settings.sessions
        max_players = defaults.default_max_players if max_players is None else max_players
        payment_amount = defaults.default_payment_amount if payment_amount is None else payment_amount
        _validate_details(max_players, payment_amount)
        session_id = session_id or session_date.isoformat()

        async with self.unit_of_work() as uow:
            await uow.lock(session_key(session_id))
            repository = SqlSessionRepository(uow.session)
            if await repository.get(session_id) is not None:
                raise SessionAlreadyExistsError(f"Session already exists: {session_id}")
            model = PlaySessionModel(
                id=session_id,
                status=SessionStatus.DRAFT.value,
                day_label=day_label or session_date.strftime("%A"),
                session_date=session_date,
                start_time=start_time,
                end_time=end_time,
                max_players=max_players,
                payment_amount=payment_amount,
            )
            await repository.add(model)
            snapshot = to_session_snapshot(model)

        logger.info("Created session %s (%s players, price %s)", session_id, max_players, payment_amount)
        return snapshot

    async def get_session(self, session_id: str) -> SessionSnapshot:
        async with self.unit_of_work() as uow:
            return to_session_snapshot(await _load(SqlSessionRepository(uow.session), session_id))

    async def list_sessions(self, status: Optional[SessionStatus] = None) -> list[SessionSnapshot]:
        async with self.unit_of_work() as uow:
            repository = SqlSessionRepository(uow.session)
            statuses = [status] if status is not None else list(SessionStatus)
            snapshots = []
            for item in statuses:
                snapshots.extend(to_session_snapshot(m) for m in await repository.list_by_status(item.value))
            return snapshots

    async def update_details(self, session_id: str, details: SessionDetailsInput) -> SessionSnapshot:
        """Change day, time, date, capacity or price; only while the session is a draft."""
        async with self.unit_of_work() as uow:
            await uow.lock(session_key(session_id))
            repository = SqlSessionRepository(uow.session)
            model = await _load(repository, session_id, for_update=True)
            status = SessionStatus(model.status)
            if status is SessionStatus.CLOSED:
                raise SessionImmutableError(session_id, "update")
            if status is not SessionStatus.DRAFT:
                raise StateTransitionError(session_id, status.value, "update")

            max_players = model.max_players if details.max_players is None else details.max_players
            payment_amount = model.payment_amount if details.payment_amount is None else details.payment_amount
            _validate_details(max_players, payment_amount)

            for field in ("day_label", "session_date", "start_time", "end_time"):
                value = getattr(details, field)
                if value is not None:
                    setattr(model, field, value)
            capacity_changed = max_players != model.max_players
            model.max_players = max_players
            model.payment_amount = payment_amount
            await repository.save(model)
            if capacity_changed:
                registrations = SqlRegistrationRepository(uow.session)
                rows = list(await registrations.list_for_session(session_id, for_update=True))
                edit = RosterEdit(uow, model, rows, registrations)
                await edit.compact()
                edit.check()
            snapshot = to_session_snapshot(model)

        logger.info("Updated details of session %s", session_id)
        return snapshot

    async def publish(self, session_id: str) -> SessionSnapshot:
        """Charge every unpaid active registrant, then open the session.

        Either every charge succeeds and the session becomes published, or
        nothing changes.
        """
        async with self.unit_of_work() as uow:
            await uow.lock(session_key(session_id))
            repository = SqlSessionRepository(uow.session)
            model = await _load(repository, session_id, for_update=True)
            _check_transition(model, "publish")

            registrations = SqlRegistrationRepository(uow.session)
            rows = list(await registrations.list_for_session(session_id, for_update=True))
            edit = RosterEdit(uow, model, rows, registrations)
            edit.check()
            active = edit.active
            for registration in active:
                edit.charge(registration)
            await edit.finish(WalletLedger.for_unit(uow, self.settings))

            _apply_transition(model, "publish")
            await repository.save(model)
            snapshot = to_session_snapshot(model)
            uow.emit(
                SessionPublished(
                    session_id=session_id,
                    day=snapshot.day_label,
                    time=snapshot.time_label,
                    date=snapshot.session_date,
                    price=snapshot.payment_amount,
                    occupancy=edit.occupancy,
                )
            )

        logger.info("Published session %s with %s charges", session_id, len(edit.plan))
        return snapshot

    async def lock(self, session_id: str) -> SessionSnapshot:
        return await self._transition(session_id, "lock")

    async def close(self, session_id: str) -> SessionSnapshot:
        return await self._transition(session_id, "close")

    async def lock_due(self, now: Optional[datetime] = None) -> list[SessionSnapshot]:
        """Lock every published session starting within the configured lead time."""
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        config = self.settings.sessions

        def due(snapshot: SessionSnapshot) -> bool:
            return snapshot.is_due_for_lock(
                now,
                lock_hours=config.lock_hours_before_start,
                utc_offset_hours=config.utc_offset_hours,
            )

        candidates = [s for s in await self.list_sessions(SessionStatus.PUBLISHED) if due(s)]
        locked = []
        for candidate in candidates:
            async with self.unit_of_work() as uow:
                await uow.lock(session_key(candidate.id))
                repository = SqlSessionRepository(uow.session)
                model = await _load(repository, candidate.id, for_update=True)
                # re-checked under the session lock: it may have changed since listing
                if not due(to_session_snapshot(model)):
                    continue
                _apply_transition(model, "lock")
                await repository.save(model)
                locked.append(to_session_snapshot(model))
            logger.info("Auto-locked session %s", candidate.id)
        return locked

    async def _transition(self, session_id: str, action: str) -> SessionSnapshot:
        async with self.unit_of_work() as uow:
            await uow.lock(session_key(session_id))
            repository = SqlSessionRepository(uow.session)
            model = await _load(repository, session_id, for_update=True)
            _apply_transition(model, action)
            await repository.save(model)
            snapshot = to_session_snapshot(model)
        logger.info("Session %s is now %s", session_id, snapshot.status.value)
        return snapshot


async def _load(repository: SessionRepository, session_id: str, *, for_update: bool = False) -> PlaySessionModel:
    model = await repository.get(session_id, for_update=for_update)
    if model is None:
        raise SessionNotFoundError(f"Session not found: {session_id}")
    return model


def _check_transition(model: PlaySessionModel, action: str) -> SessionStatus:
    target, sources = TRANSITIONS[action]
    current = SessionStatus(model.status)
    if current is SessionStatus.CLOSED:
        raise SessionImmutableError(model.id, action)
    if current not in sources:
        logger.warning("Rejected %s of session %s while %s", action, model.id, current.value)
        raise StateTransitionError(model.id, current.value, action)
    return target


def _apply_transition(model: PlaySessionModel, action: str) -> None:
    target = _check_transition(model, action)
    model.status = target.value
    setattr(model, _STAMPS[target], datetime.now(timezone.utc))


def _validate_details(max_players: int, payment_amount: int) -> None:
    if max_players <= 0:
        raise InvalidSessionDetailsError("max_players must be positive")
    if payment_amount < 0:
        raise InvalidSessionDetailsError("payment_amount cannot be negative")
