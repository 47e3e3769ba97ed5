from datetime import date, datetime, time, timezone

import pytest

from clubhouse.core.config import RegistrationSettings
from clubhouse.domain.registrations import RegistrationClosedError
from clubhouse.domain.sessions import (
    InvalidSessionDetailsError,
    SessionAlreadyExistsError,
    SessionDetailsInput,
    SessionImmutableError,
    SessionNotFoundError,
    SessionStatus,
    StateTransitionError,
)
from clubhouse.domain.wallets import InsufficientBalanceError, TransactionType


async def test_session_is_keyed_by_date(container):
    session = await container.sessions.create_session(date(2026, 10, 21), start_time=time(19), end_time=time(21))

    assert session.id == "2026-10-21"
    assert session.status is SessionStatus.DRAFT
    assert session.day_label == "Wednesday"
    assert session.time_label == "19:00 - 21:00"
    assert session.max_players == container.settings.sessions.default_max_players

    with pytest.raises(SessionAlreadyExistsError):
        await container.sessions.create_session(date(2026, 10, 21))


async def test_explicit_session_id(container):
    session = await container.sessions.create_session(date(2026, 10, 21), session_id="wed-late")
    assert (await container.sessions.get_session("wed-late")).session_date == session.session_date


async def test_missing_session(container):
    with pytest.raises(SessionNotFoundError):
        await container.sessions.publish("2000-01-01")


@pytest.mark.parametrize(("max_players", "payment_amount"), [(0, 100), (5, -1)])
async def test_invalid_details_are_rejected(container, max_players, payment_amount):
    with pytest.raises(InvalidSessionDetailsError):
        await container.sessions.create_session(
            date(2026, 10, 21),
            max_players=max_players,
            payment_amount=payment_amount,
        )


async def test_publish_charges_active_roster_only(container, draft_session, fund, sink, balance_of):
    await fund({"alice": 500, "bob": 500, "carol": 500, "dave": 500})
    session = await draft_session(["alice", "bob", "carol", "dave"], max_players=3, payment_amount=150)

    published = await container.sessions.publish(session.id)

    assert published.status is SessionStatus.PUBLISHED
    assert published.published_at is not None
    assert [await balance_of(u) for u in ("alice", "bob", "carol", "dave")] == [350, 350, 350, 500]
    roster = await container.registrations.get_roster(session.id)
    assert [r.paid for r in roster.active] == [True, True, True]
    assert [r.paid for r in roster.waitlist] == [False]

    charge = (await container.wallets.list_transactions("alice"))[0]
    assert charge.type is TransactionType.SESSION_CHARGE
    assert charge.amount == -150
    assert charge.session_id == session.id

    [event] = sink.of_kind("session_published")
    assert event.price == 150
    assert event.date == date(2026, 10, 21)
    assert str(event.occupancy) == "3/3"


async def test_publish_is_all_or_nothing(container, draft_session, fund, sink, balance_of):
    players = [f"player{i}" for i in range(10)]
    await fund({p: 1000 for p in players[:-1]})
    await fund({players[-1]: 100})
    session = await draft_session(players, max_players=12, payment_amount=150)

    with pytest.raises(InsufficientBalanceError) as excinfo:
        await container.sessions.publish(session.id)

    assert excinfo.value.user_id == "player9"
    assert (await container.sessions.get_session(session.id)).status is SessionStatus.DRAFT
    for player in players[:-1]:
        assert await balance_of(player) == 1000
        assert len(await container.wallets.list_transactions(player)) == 1
    assert await balance_of("player9") == 100
    roster = await container.registrations.get_roster(session.id)
    assert not any(r.paid for r in roster.active)
    assert sink.events == []


async def test_free_session_marks_paid_without_ledger_rows(container, draft_session):
    session = await draft_session(["alice"], payment_amount=0)

    await container.sessions.publish(session.id)

    roster = await container.registrations.get_roster(session.id)
    assert roster.active[0].paid
    assert await container.wallets.list_transactions("alice") == []


async def test_lifecycle_moves_forward_only(container, draft_session):
    session = await draft_session()

    with pytest.raises(StateTransitionError):
        await container.sessions.lock(session.id)
    with pytest.raises(StateTransitionError):
        await container.sessions.close(session.id)

    await container.sessions.publish(session.id)
    with pytest.raises(StateTransitionError):
        await container.sessions.publish(session.id)

    locked = await container.sessions.lock(session.id)
    assert locked.status is SessionStatus.LOCKED
    assert locked.locked_at is not None

    closed = await container.sessions.close(session.id)
    assert closed.status is SessionStatus.CLOSED
    assert closed.closed_at is not None

    for action in (container.sessions.publish, container.sessions.lock, container.sessions.close):
        with pytest.raises(SessionImmutableError):
            await action(session.id)


async def test_list_sessions_filters_by_status(container, draft_session):
    first = await draft_session(session_date=date(2026, 10, 21))
    second = await draft_session(session_date=date(2026, 10, 28))
    await container.sessions.publish(second.id)

    assert [s.id for s in await container.sessions.list_sessions()] == [first.id, second.id]
    drafts = await container.sessions.list_sessions(SessionStatus.DRAFT)
    assert [s.id for s in drafts] == [first.id]
    published = await container.sessions.list_sessions(SessionStatus.PUBLISHED)
    assert [s.id for s in published] == [second.id]


async def test_published_session_can_close_without_lock(container, draft_session):
    session = await draft_session()
    await container.sessions.publish(session.id)
    assert (await container.sessions.close(session.id)).status is SessionStatus.CLOSED


async def test_closed_session_rejects_registration_changes(container, published_session):
    session = await published_session(["alice"])
    await container.sessions.close(session.id)

    with pytest.raises(SessionImmutableError):
        await container.registrations.register(session.id, "bob", acting_user_id="bob")
    with pytest.raises(SessionImmutableError):
        await container.registrations.cancel(session.id, 1, admin=True)
    with pytest.raises(SessionImmutableError):
        await container.registrations.mark_payment_link_clicked(session.id, 1)


async def test_update_details_only_in_draft(container, draft_session):
    session = await draft_session(payment_amount=100)

    updated = await container.sessions.update_details(
        session.id,
        SessionDetailsInput(max_players=8, payment_amount=120, start_time=time(18, 30)),
    )
    assert updated.max_players == 8
    assert updated.payment_amount == 120
    assert updated.time_label == "18:30"
    assert updated.day_label == session.day_label

    await container.sessions.publish(session.id)
    with pytest.raises(StateTransitionError):
        await container.sessions.update_details(session.id, SessionDetailsInput(payment_amount=999))


async def test_draft_registration_can_be_disabled(make_container, draft_session):
    container = make_container(registration=RegistrationSettings(allow_draft_registration=False))
    session = await draft_session()

    with pytest.raises(RegistrationClosedError):
        await container.registrations.register(session.id, "alice", acting_user_id="alice")


async def test_lock_due_locks_sessions_about_to_start(container, draft_session):
    # 19:00 at UTC+7 is 12:00 UTC; the default lead time is two hours
    session = await draft_session(start_time=time(19), end_time=time(21))
    later = await draft_session(session_date=date(2026, 10, 22), start_time=time(19))
    await container.sessions.publish(session.id)
    await container.sessions.publish(later.id)

    assert await container.sessions.lock_due(datetime(2026, 10, 21, 9, 59, tzinfo=timezone.utc)) == []

    locked = await container.sessions.lock_due(datetime(2026, 10, 21, 10, 0, tzinfo=timezone.utc))

    assert [s.id for s in locked] == [session.id]
    assert (await container.sessions.get_session(session.id)).status is SessionStatus.LOCKED
    assert (await container.sessions.get_session(later.id)).status is SessionStatus.PUBLISHED


async def test_lock_due_ignores_drafts_and_sessions_without_time(container, draft_session):
    await draft_session(start_time=time(19))
    untimed = await draft_session(session_date=date(2026, 10, 20))
    await container.sessions.publish(untimed.id)

    assert await container.sessions.lock_due(datetime(2026, 10, 21, 11, 0, tzinfo=timezone.utc)) == []
