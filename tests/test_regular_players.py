import pytest

from clubhouse.domain.registrations import InvalidRegistrationError, RegistrationClosedError
from clubhouse.domain.sessions import SessionImmutableError
from clubhouse.domain.wallets import TransactionType

WEDNESDAY = 3


async def test_regular_players_are_kept_per_weekday(container):
    await container.registrations.set_regular_players(WEDNESDAY, [("alice", "alice"), ("bob", "u-bob")])
    await container.registrations.set_regular_players(5, [("carol", "carol")])

    wednesday = await container.registrations.list_regular_players(WEDNESDAY)
    assert [(p.name, p.user_id, p.sort_order) for p in wednesday] == [("alice", "alice", 0), ("bob", "u-bob", 1)]
    assert [p.weekday for p in await container.registrations.list_regular_players()] == [3, 3, 5]

    replaced = await container.registrations.set_regular_players(WEDNESDAY, [("dave", "dave")])
    assert [p.name for p in replaced] == ["dave"]
    assert [p.name for p in await container.registrations.list_regular_players(WEDNESDAY)] == ["dave"]
    assert [p.name for p in await container.registrations.list_regular_players(5)] == ["carol"]


@pytest.mark.parametrize(
    ("weekday", "players"),
    [
        (0, [("alice", "alice")]),
        (8, [("alice", "alice")]),
        (WEDNESDAY, [("alice", "alice"), ("Alice", "alice2")]),
        (WEDNESDAY, [("alice", " ")]),
    ],
)
async def test_invalid_regular_players_are_rejected(container, weekday, players):
    with pytest.raises(InvalidRegistrationError):
        await container.registrations.set_regular_players(weekday, players)


async def test_load_appends_missing_regulars_without_charging(container, draft_session, sink):
    session = await draft_session(["bob"], max_players=3)
    await container.registrations.set_regular_players(
        WEDNESDAY,
        [("alice", "alice"), ("Bob", "bob"), ("carol", "carol"), ("dave", "dave")],
    )

    added = await container.registrations.load_regular_players(session.id, acting_user_id="admin")

    assert [(r.name, r.position) for r in added] == [("alice", 2), ("carol", 3), ("dave", 4)]
    assert all(r.is_regular and not r.paid for r in added)
    assert all(r.registered_by == "admin" for r in added)
    roster = await container.registrations.get_roster(session.id)
    assert [r.name for r in roster.active] == ["bob", "alice", "carol"]
    assert [r.name for r in roster.waitlist] == ["dave"]
    assert not roster.active[0].is_regular
    assert sink.events == []

    assert await container.registrations.load_regular_players(session.id, acting_user_id="admin") == []


async def test_loaded_regulars_are_charged_on_publish(container, draft_session, fund, balance_of):
    session = await draft_session(max_players=2, payment_amount=150)
    await container.registrations.set_regular_players(
        WEDNESDAY, [("alice", "alice"), ("bob", "bob"), ("carol", "carol")]
    )
    await container.registrations.load_regular_players(session.id, acting_user_id="admin")
    await fund({"alice": 1000, "bob": 1000, "carol": 1000})

    await container.sessions.publish(session.id)

    assert await balance_of("alice") == 850
    assert await balance_of("bob") == 850
    assert await balance_of("carol") == 1000
    latest = (await container.wallets.list_transactions("alice"))[0]
    assert latest.type is TransactionType.SESSION_CHARGE
    assert latest.amount == -150
    assert latest.session_id == session.id
    roster = await container.registrations.get_roster(session.id)
    assert [r.paid for r in roster.active] == [True, True]
    assert not roster.waitlist[0].paid


async def test_regulars_of_other_weekdays_are_ignored(container, draft_session):
    session = await draft_session()
    await container.registrations.set_regular_players(4, [("alice", "alice")])

    assert await container.registrations.load_regular_players(session.id, acting_user_id="admin") == []


async def test_load_only_into_draft_sessions(container, published_session):
    session = await published_session(["alice"])
    await container.registrations.set_regular_players(WEDNESDAY, [("bob", "bob")])

    with pytest.raises(RegistrationClosedError):
        await container.registrations.load_regular_players(session.id, acting_user_id="admin")

    await container.sessions.close(session.id)
    with pytest.raises(SessionImmutableError):
        await container.registrations.load_regular_players(session.id, acting_user_id="admin")
