from datetime import date, datetime, timedelta, timezone

import pytest

from clubhouse.core.config import SettlementSettings
from clubhouse.domain.settlements import (
    InvalidSettlementPeriodError,
    ReportNotFoundError,
    SettlementInputMissingError,
    SettlementInputs,
    week_id_for,
)

INPUTS = SettlementInputs(
    court_cost=600,
    shuttlecock_cost=400,
    weeks_to_distribute=4,
    players_per_week=12,
    wallet_pool_balance=2400,
)


def club_today(container) -> date:
    offset = timedelta(hours=container.settings.sessions.utc_offset_hours)
    return datetime.now(timezone(offset)).date()


@pytest.fixture
def period(container):
    today = club_today(container)
    return today - timedelta(days=1), today + timedelta(days=1)


@pytest.fixture
async def closed_week(container, published_session, fund):
    """Two closed sessions and one still open; one refunded cancellation."""
    first = await published_session(["alice", "bob", "carol"], max_players=3, payment_amount=150)
    second = await published_session(
        ["dave", "erin"],
        max_players=4,
        payment_amount=100,
        session_date=date(2026, 10, 23),
    )
    await container.registrations.cancel(second.id, 2)
    await container.sessions.close(first.id)
    await container.sessions.close(second.id)

    still_open = await published_session(["frank"], payment_amount=200, session_date=date(2026, 10, 25))
    return first, second, still_open


async def test_settlement_aggregates_closed_sessions(container, closed_week, period):
    start, end = period

    report = await container.settlements.run(start, end, INPUTS)

    assert report.week_id == week_id_for(end)
    assert report.revision == 1
    assert report.session_count == 2
    assert report.total_players == 4
    assert report.total_income == 3 * 150 + 2 * 100
    assert report.total_refunds == 100
    assert report.total_expenses == 1000
    assert report.gross_profit == 650 - 1000
    assert report.price.weekly_cost == 1000
    assert report.price.base_price == 83
    assert report.price.balance_to_distribute == 600
    assert report.price.price_adjustment == 50
    assert report.price.recommended_price == 33
    assert report.is_current


async def test_rerun_with_same_inputs_returns_existing_report(container, closed_week, period):
    first = await container.settlements.run(*period, INPUTS)
    again = await container.settlements.run(*period, INPUTS)

    assert again.id == first.id
    assert again.revision == 1
    assert len(await container.settlements.list_reports(first.week_id)) == 1


async def test_changed_inputs_create_a_new_revision(container, closed_week, period):
    first = await container.settlements.run(*period, INPUTS)
    changed = SettlementInputs(court_cost=700, shuttlecock_cost=400, weeks_to_distribute=4,
                               players_per_week=12, wallet_pool_balance=2400)

    second = await container.settlements.run(*period, changed)

    assert second.revision == 2
    assert second.total_expenses == 1100
    current = await container.settlements.get_report(first.week_id)
    assert current.id == second.id
    history = await container.settlements.list_reports(first.week_id)
    assert [r.revision for r in history] == [1, 2]
    assert history[0].superseded_at is not None
    assert history[0].total_expenses == 1000
    assert history[1].is_current


async def test_missing_inputs_fail_before_writing(container, period):
    partial = SettlementInputs(court_cost=600, shuttlecock_cost=400, players_per_week=12)

    with pytest.raises(SettlementInputMissingError) as excinfo:
        await container.settlements.run(*period, partial)

    assert set(excinfo.value.fields) == {"weeks_to_distribute", "wallet_pool_balance"}
    with pytest.raises(ReportNotFoundError):
        await container.settlements.get_report(week_id_for(period[1]))


async def test_non_positive_divisor_is_treated_as_missing(container, period):
    bad = SettlementInputs(court_cost=600, shuttlecock_cost=400, weeks_to_distribute=0,
                           players_per_week=12, wallet_pool_balance=0)

    with pytest.raises(SettlementInputMissingError) as excinfo:
        await container.settlements.run(*period, bad)
    assert excinfo.value.fields == ["weeks_to_distribute"]


async def test_configured_inputs_fill_the_gaps(make_container, closed_week, period):
    container = make_container(
        settlement=SettlementSettings(court_cost=600, shuttlecock_cost=400, weeks_to_distribute=4,
                                      players_per_week=12, wallet_pool_balance=2400),
    )

    report = await container.settlements.run(*period, SettlementInputs(wallet_pool_balance=-1200))

    assert report.price.balance_to_distribute == -300
    assert report.price.price_adjustment == -25
    assert report.price.recommended_price == 108


async def test_empty_period_reports_zero_income(container, period):
    start, end = period
    report = await container.settlements.run(start - timedelta(days=30), start - timedelta(days=20), INPUTS)

    assert report.session_count == 0
    assert report.total_income == 0
    assert report.gross_profit == -1000


async def test_end_before_start_is_rejected(container):
    with pytest.raises(InvalidSettlementPeriodError):
        await container.settlements.run(date(2026, 10, 20), date(2026, 10, 19), INPUTS)
