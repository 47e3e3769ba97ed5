import asyncio

import pytest

from clubhouse.domain.registrations import (
    CapacityInvariantViolation,
    DuplicateRegistrationError,
    InvalidRegistrationError,
    RegistrationClosedError,
    RegistrationNotFoundError,
    check_positions,
)
from clubhouse.domain.sessions import SessionDetailsInput
from clubhouse.domain.wallets import InsufficientBalanceError, TransactionType, WalletNotFoundError


def positions(roster):
    return [r.position for r in roster.active], [r.position for r in roster.waitlist]


def names(records):
    return [r.name for r in records]


async def test_positions_fill_roster_then_waitlist(container, draft_session):
    session = await draft_session(["alice", "bob", "carol", "dave", "erin"], max_players=3)

    roster = await container.registrations.get_roster(session.id)

    assert positions(roster) == ([1, 2, 3], [4, 5])
    assert names(roster.waitlist) == ["dave", "erin"]
    assert str(roster.occupancy) == "3/3"
    assert roster.is_full


async def test_registration_on_published_session_charges_only_active(container, published_session, fund, balance_of):
    session = await published_session(["alice", "bob"], max_players=3)
    await fund({"carol": 500, "dave": 500})

    carol = await container.registrations.register(session.id, "carol", acting_user_id="carol")
    dave = await container.registrations.register(session.id, "dave", acting_user_id="dave")

    assert (carol.position, carol.paid) == (3, True)
    assert (dave.position, dave.paid) == (4, False)
    assert await balance_of("carol") == 350
    assert await balance_of("dave") == 500


async def test_registration_needs_funds_when_active(container, published_session, fund):
    session = await published_session(["alice"], max_players=3)
    await fund({"bob": 100})

    with pytest.raises(InsufficientBalanceError):
        await container.registrations.register(session.id, "bob", acting_user_id="bob")

    roster = await container.registrations.get_roster(session.id)
    assert names(roster.active) == ["alice"]


async def test_duplicate_name_is_rejected(container, draft_session):
    session = await draft_session(["Alice"])

    with pytest.raises(DuplicateRegistrationError):
        await container.registrations.register(session.id, " alice ", acting_user_id="someone")


async def test_blank_name_is_rejected(container, draft_session):
    session = await draft_session()
    with pytest.raises(InvalidRegistrationError):
        await container.registrations.register(session.id, "   ", acting_user_id="alice")


async def test_guest_is_paid_by_host(container, published_session, balance_of):
    session = await published_session(["alice"], max_players=3)

    guest = await container.registrations.register_guest(session.id, "alice", "bob", acting_user_id="alice")

    assert guest.name == "alice venn: bob"
    assert guest.is_guest
    assert guest.user_id is None
    assert guest.registered_by == "alice"
    assert guest.payer == "alice"
    assert await balance_of("alice") == 1000 - 150 - 150


async def test_cancel_active_with_waitlist_promotes_earliest(container, published_session, fund, sink, balance_of):
    session = await published_session(["alice", "bob", "carol"], max_players=3)
    await fund({"dave": 500, "erin": 500})
    await container.registrations.register(session.id, "dave", acting_user_id="dave")
    await container.registrations.register(session.id, "erin", acting_user_id="erin")

    cancelled = await container.registrations.cancel(session.id, 2)

    assert cancelled.name == "bob"
    roster = await container.registrations.get_roster(session.id)
    assert names(roster.active) == ["alice", "dave", "carol"]
    assert positions(roster) == ([1, 2, 3], [5])
    assert roster.active[1].paid
    assert await balance_of("bob") == 1000
    assert await balance_of("dave") == 350
    assert await balance_of("erin") == 500

    assert sink.of_kind("slot_available") == []
    [filled] = sink.of_kind("slot_auto_filled")
    assert filled.promoted_name == "dave"
    assert str(filled.occupancy) == "3/3"

    refund = (await container.wallets.list_transactions("bob"))[0]
    assert refund.type is TransactionType.CANCELLATION_REFUND
    assert refund.amount == 150


async def test_cancel_active_without_waitlist_announces_free_slot(container, published_session, sink):
    session = await published_session(["alice", "bob", "carol"], max_players=4)

    await container.registrations.cancel(session.id, 1)

    roster = await container.registrations.get_roster(session.id)
    assert names(roster.active) == ["carol", "bob"]
    assert positions(roster) == ([1, 2], [])
    [event] = sink.events
    assert event.kind == "slot_available"
    assert event.cancelled_by == "alice"
    assert str(event.occupancy) == "2/4"

    newcomer = await container.registrations.register(session.id, "dave", acting_user_id="alice")
    assert newcomer.position == 3


async def test_cancel_waitlisted_has_no_promotion(container, published_session, fund, sink):
    session = await published_session(["alice", "bob"], max_players=2)
    await fund({"carol": 500, "dave": 500})
    await container.registrations.register(session.id, "carol", acting_user_id="carol")
    await container.registrations.register(session.id, "dave", acting_user_id="dave")

    await container.registrations.cancel(session.id, 3)

    roster = await container.registrations.get_roster(session.id)
    assert positions(roster) == ([1, 2], [4])
    assert [e.kind for e in sink.events] == ["registration_cancelled"]
    assert sink.events[0].name == "carol"
    assert [t.type for t in await container.wallets.list_transactions("carol")] == [TransactionType.TOP_UP]


async def test_failed_promotion_charge_aborts_cancel(container, published_session, fund, sink, balance_of):
    session = await published_session(["alice", "bob"], max_players=2)
    await fund({"carol": 10})
    await container.registrations.register(session.id, "carol", acting_user_id="carol")

    with pytest.raises(InsufficientBalanceError):
        await container.registrations.cancel(session.id, 1)

    roster = await container.registrations.get_roster(session.id)
    assert names(roster.active) == ["alice", "bob"]
    assert names(roster.waitlist) == ["carol"]
    assert await balance_of("alice") == 850
    assert sink.events == []


async def test_locked_session_allows_only_admin_removal(container, published_session, fund, sink):
    session = await published_session(["alice", "bob"], max_players=2)
    await fund({"carol": 500})
    await container.registrations.register(session.id, "carol", acting_user_id="carol")
    await container.sessions.lock(session.id)

    with pytest.raises(RegistrationClosedError):
        await container.registrations.cancel(session.id, 1)
    with pytest.raises(RegistrationClosedError):
        await container.registrations.cancel_for_user(session.id, "alice")
    with pytest.raises(RegistrationClosedError):
        await container.registrations.register(session.id, "dave", acting_user_id="dave")

    await container.registrations.cancel(session.id, 1, admin=True)

    roster = await container.registrations.get_roster(session.id)
    assert names(roster.active) == ["carol", "bob"]
    assert [e.kind for e in sink.events] == ["slot_auto_filled"]


async def test_draft_cancel_has_no_wallet_or_notification_effects(container, draft_session, sink):
    session = await draft_session(["alice", "bob", "carol"], max_players=2)

    await container.registrations.cancel(session.id, 1)

    roster = await container.registrations.get_roster(session.id)
    assert names(roster.active) == ["carol", "bob"]
    assert not any(r.paid for r in roster.active)
    assert sink.events == []
    with pytest.raises(WalletNotFoundError):
        await container.wallets.get_wallet("carol")


async def test_cancel_unknown_position(container, published_session):
    session = await published_session(["alice"])
    with pytest.raises(RegistrationNotFoundError):
        await container.registrations.cancel(session.id, 7)


async def test_cancel_for_user_removes_own_place_and_guests(container, published_session, fund, balance_of):
    session = await published_session(["alice", "bob"], max_players=3)
    await container.registrations.register_guest(session.id, "alice", "gina", acting_user_id="alice")
    await fund({"carol": 500, "dave": 500})
    await container.registrations.register(session.id, "carol", acting_user_id="carol")
    await container.registrations.register_guest(session.id, "alice", "hank", acting_user_id="alice")
    await container.registrations.register(session.id, "dave", acting_user_id="dave")

    removed = await container.registrations.cancel_for_user(session.id, "alice")

    assert sorted(names(removed)) == ["alice", "alice venn: gina", "alice venn: hank"]
    roster = await container.registrations.get_roster(session.id)
    assert names(roster.active) == ["dave", "bob", "carol"]
    assert positions(roster) == ([1, 2, 3], [])
    # charged twice (self and gina), refunded twice, never charged for hank
    assert await balance_of("alice") == 1000
    assert await balance_of("carol") == 350
    assert await balance_of("dave") == 350


async def test_cancel_for_user_without_registration(container, published_session):
    session = await published_session(["alice"])
    with pytest.raises(RegistrationNotFoundError):
        await container.registrations.cancel_for_user(session.id, "zed")


async def test_refund_waiting_list(container, published_session, fund, sink):
    session = await published_session(["alice"], max_players=1)
    await fund({"bob": 500, "carol": 500})
    await container.registrations.register(session.id, "bob", acting_user_id="bob")
    await container.registrations.register(session.id, "carol", acting_user_id="carol")
    await container.sessions.lock(session.id)

    removed = await container.registrations.refund_waiting_list(session.id)

    assert sorted(names(removed)) == ["bob", "carol"]
    roster = await container.registrations.get_roster(session.id)
    assert positions(roster) == ([1], [])
    assert sink.events == []


async def test_payment_link_click_is_recorded(container, published_session):
    session = await published_session(["alice"])

    record = await container.registrations.mark_payment_link_clicked(session.id, 1)

    assert record.clicked_payment_link
    assert (await container.registrations.get_roster(session.id)).active[0].clicked_payment_link


async def test_concurrent_registrations_get_distinct_positions(container, published_session, fund):
    session = await published_session(max_players=5)
    players = [f"p{i}" for i in range(8)]
    await fund({p: 500 for p in players})

    records = await asyncio.gather(
        *(container.registrations.register(session.id, p, acting_user_id=p) for p in players)
    )

    assert sorted(r.position for r in records) == list(range(1, 9))
    assert sum(r.paid for r in records) == 5
    roster = await container.registrations.get_roster(session.id)
    assert positions(roster) == ([1, 2, 3, 4, 5], [6, 7, 8])


async def test_concurrent_cancellations_promote_distinct_registrants(
    container, published_session, sink, balance_of
):
    session = await published_session(["alice", "bob", "carol", "dave", "erin", "frank"], max_players=3)

    cancelled = await asyncio.gather(
        container.registrations.cancel(session.id, 1),
        container.registrations.cancel(session.id, 2),
    )

    assert sorted(names(cancelled)) == ["alice", "bob"]
    roster = await container.registrations.get_roster(session.id)
    check_positions(session.id, [r.position for r in roster.active + roster.waitlist], roster.max_players)
    assert sorted(names(roster.active)) == ["carol", "dave", "erin"]
    assert names(roster.waitlist) == ["frank"]
    assert all(r.paid for r in roster.active)
    assert not roster.waitlist[0].paid

    assert sorted(e.promoted_name for e in sink.of_kind("slot_auto_filled")) == ["dave", "erin"]
    for promoted in ("dave", "erin"):
        charges = [
            t for t in await container.wallets.list_transactions(promoted)
            if t.type is TransactionType.SESSION_CHARGE
        ]
        assert len(charges) == 1
        assert await balance_of(promoted) == 850
    assert await balance_of("frank") == 1000
    for player in ("alice", "bob"):
        assert await balance_of(player) == 1000


async def test_roster_stays_gap_free_through_mixed_changes(container, published_session, fund):
    players = ["a", "b", "c", "d", "e", "f", "g"]
    session = await published_session(players[:4], max_players=4)
    await fund({p: 1000 for p in players[4:]})
    for player in players[4:]:
        await container.registrations.register(session.id, player, acting_user_id=player)

    for position in (2, 4, 1, 1):
        await container.registrations.cancel(session.id, position)
        roster = await container.registrations.get_roster(session.id)
        check_positions(session.id, [r.position for r in roster.active + roster.waitlist], roster.max_players)

    for user_id in players:
        assert (await container.wallets.reconcile(user_id)).consistent


@pytest.mark.parametrize(
    "stored",
    [
        [1, 2, 4],
        [1, 1, 2],
        [0, 1],
        [1, 5],
    ],
)
def test_check_positions_detects_broken_rosters(stored):
    with pytest.raises(CapacityInvariantViolation):
        check_positions("s1", stored, 3)


def test_check_positions_accepts_waitlist_gaps():
    check_positions("s1", [1, 2, 3, 5, 9], 3)
    check_positions("s1", [], 3)


async def test_draft_capacity_increase_closes_waitlist_gaps(container, draft_session):
    session = await draft_session(["alice", "bob", "carol", "dave", "erin"], max_players=2)
    await container.registrations.cancel(session.id, 4)

    await container.sessions.update_details(session.id, SessionDetailsInput(max_players=4))

    roster = await container.registrations.get_roster(session.id)
    assert names(roster.active) == ["alice", "bob", "carol", "erin"]
    assert positions(roster) == ([1, 2, 3, 4], [])
