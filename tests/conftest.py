"""Shared fixtures: one SQLite file database and one container per test."""

from datetime import date
from typing import Iterable

import pytest

from clubhouse.core.config import ConcurrencySettings, DatabaseSettings, Settings
from clubhouse.core.container import ApplicationContainer
from clubhouse.domain.notifications import NotificationDispatcher, RecordingNotificationSink
from clubhouse.infrastructure.database import build_engine, build_session_factory, create_tables

SESSION_DATE = date(2026, 10, 21)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'clubhouse-test.db'}"),
        concurrency=ConcurrencySettings(lock_timeout=5.0),
    )


@pytest.fixture
async def engine(settings):
    engine = build_engine(settings.database_url)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def sink() -> RecordingNotificationSink:
    return RecordingNotificationSink()


@pytest.fixture
def make_container(settings, engine, sink):
    """Build a container over the test database, optionally replacing settings sections."""

    def _make(**sections) -> ApplicationContainer:
        return ApplicationContainer.build(
            settings.model_copy(update=sections),
            build_session_factory(engine),
            NotificationDispatcher([sink]),
        )

    return _make


@pytest.fixture
def container(make_container) -> ApplicationContainer:
    return make_container()


@pytest.fixture
def fund(container):
    async def _fund(balances: dict[str, int]) -> None:
        for user_id, amount in balances.items():
            await container.wallets.top_up(user_id, amount)

    return _fund


@pytest.fixture
def draft_session(container):
    """Create a draft session and register players (as themselves) in order."""

    async def _create(
        players: Iterable[str] = (),
        *,
        max_players: int = 3,
        payment_amount: int = 150,
        session_date: date = SESSION_DATE,
        **details,
    ):
        session = await container.sessions.create_session(
            session_date,
            max_players=max_players,
            payment_amount=payment_amount,
            **details,
        )
        for player in players:
            await container.registrations.register(session.id, player, acting_user_id=player)
        return session

    return _create


@pytest.fixture
def published_session(container, draft_session, fund, sink):
    """A published session whose players were funded with exactly enough, events cleared."""

    async def _create(players: Iterable[str] = (), *, funds: int = 1000, **kwargs):
        players = list(players)
        await fund({player: funds for player in players})
        session = await draft_session(players, **kwargs)
        session = await container.sessions.publish(session.id)
        sink.clear()
        return session

    return _create


@pytest.fixture
def balance_of(container):
    async def _balance(user_id: str) -> int:
        return (await container.wallets.get_wallet(user_id)).balance

    return _balance
