"""Weekly settlement: aggregate closed sessions and recommend next week's price."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional

from clubhouse.core.config import Settings
from clubhouse.core.locks import settlement_key
from clubhouse.db.models import WeeklyBalanceReport
from clubhouse.domain.wallets.models import TransactionType
from clubhouse.infrastructure.database.repositories.registration_repository import SqlRegistrationRepository
from clubhouse.infrastructure.database.repositories.report_repository import SqlReportRepository
from clubhouse.infrastructure.database.repositories.session_repository import SqlSessionRepository
from clubhouse.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from clubhouse.infrastructure.database.unit_of_work import UnitOfWork

from .exceptions import InvalidSettlementPeriodError, ReportNotFoundError, SettlementInputMissingError
from .models import SettlementInputs, WeeklyReport, week_id_for
from .pricing import PriceCalculation, calculate_price
from .repository import ReportRepository

logger = logging.getLogger(__name__)

# columns that identify a run's result; equal values mean the same report
_COMPARED = (
    "start_date",
    "end_date",
    "session_count",
    "total_players",
    "total_income",
    "total_refunds",
    "court_cost",
    "shuttlecock_cost",
    "total_expenses",
    "gross_profit",
) + tuple(f.name for f in fields(PriceCalculation))


@dataclass(slots=True)
class SettlementService:
    """Reads sessions and the ledger; writes only weekly balance reports."""

    unit_of_work: Callable[[], UnitOfWork]
    settings: Settings

    async def run(
        self,
        start_date: date,
        end_date: date,
        inputs: Optional[SettlementInputs] = None,
    ) -> WeeklyReport:
        if end_date < start_date:
            raise InvalidSettlementPeriodError("end_date precedes start_date")

        resolved = (inputs or SettlementInputs()).merged_over(self._configured_inputs())
        problems = resolved.problems()
        if problems:
            logger.warning("Settlement %s..%s rejected: %s", start_date, end_date, problems)
            raise SettlementInputMissingError(problems)

        week_id = week_id_for(end_date)
        async with self.unit_of_work() as uow:
            await uow.lock(settlement_key(week_id))
            values = await self._aggregate(uow, start_date, end_date, resolved)

            reports: ReportRepository = SqlReportRepository(uow.session)
            current = await reports.get_current(week_id)
            if current is not None and all(getattr(current, k) == values[k] for k in _COMPARED):
                logger.info("Settlement %s unchanged, keeping revision %s", week_id, current.revision)
                return _to_report(current)

            now = datetime.now(timezone.utc)
            revision = 1
            if current is not None:
                await reports.supersede(current, now)
                revision = current.revision + 1
            model = WeeklyBalanceReport(week_id=week_id, revision=revision, created_at=now, **values)
            await reports.add(model)
            report = _to_report(model)

        logger.info(
            "Settlement %s revision %s: income %s, expenses %s, recommended price %s",
            week_id,
            report.revision,
            report.total_income,
            report.total_expenses,
            report.price.recommended_price,
        )
        return report

    async def get_report(self, week_id: str) -> WeeklyReport:
        async with self.unit_of_work() as uow:
            model = await SqlReportRepository(uow.session).get_current(week_id)
            if model is None:
                raise ReportNotFoundError(f"No settlement report for {week_id}")
            return _to_report(model)

    async def list_reports(self, week_id: str) -> list[WeeklyReport]:
        async with self.unit_of_work() as uow:
            return [_to_report(m) for m in await SqlReportRepository(uow.session).list_revisions(week_id)]

    def _configured_inputs(self) -> SettlementInputs:
        return SettlementInputs(**self.settings.settlement.model_dump())

    async def _aggregate(
        self,
        uow: UnitOfWork,
        start_date: date,
        end_date: date,
        inputs: SettlementInputs,
    ) -> dict:
        start, end = self._period_bounds(start_date, end_date)
        sessions = await SqlSessionRepository(uow.session).list_closed_between(start, end)
        session_ids = [s.id for s in sessions]

        registrations = SqlRegistrationRepository(uow.session)
        total_players = 0
        for session in sessions:
            rows = await registrations.list_for_session(session.id)
            total_players += sum(1 for r in rows if r.position <= session.max_players)

        wallets = SqlWalletRepository(uow.session)
        total_income = abs(await wallets.sum_for_sessions(TransactionType.SESSION_CHARGE.value, session_ids))
        total_refunds = await wallets.sum_for_sessions(TransactionType.CANCELLATION_REFUND.value, session_ids)

        total_expenses = inputs.court_cost + inputs.shuttlecock_cost
        price = calculate_price(
            weekly_cost=total_expenses,
            players_per_week=inputs.players_per_week,
            current_balance=inputs.wallet_pool_balance,
            weeks_to_distribute=inputs.weeks_to_distribute,
        )
        return {
            "start_date": start_date,
            "end_date": end_date,
            "session_count": len(sessions),
            "total_players": total_players,
            "total_income": total_income,
            "total_refunds": total_refunds,
            "court_cost": inputs.court_cost,
            "shuttlecock_cost": inputs.shuttlecock_cost,
            "total_expenses": total_expenses,
            "gross_profit": total_income - total_expenses,
            **{f.name: getattr(price, f.name) for f in fields(price)},
        }

    def _period_bounds(self, start_date: date, end_date: date) -> tuple[datetime, datetime]:
        """Club-local days [start_date, end_date] as a half-open UTC interval."""
        tz = timezone(timedelta(hours=self.settings.sessions.utc_offset_hours))
        start = datetime.combine(start_date, time.min, tzinfo=tz)
        end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=tz)
        return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def _to_report(model: WeeklyBalanceReport) -> WeeklyReport:
    return WeeklyReport(
        id=model.id,
        week_id=model.week_id,
        revision=model.revision,
        start_date=model.start_date,
        end_date=model.end_date,
        session_count=model.session_count,
        total_players=model.total_players,
        total_income=model.total_income,
        total_refunds=model.total_refunds,
        court_cost=model.court_cost,
        shuttlecock_cost=model.shuttlecock_cost,
        total_expenses=model.total_expenses,
        gross_profit=model.gross_profit,
        price=PriceCalculation(**{f.name: getattr(model, f.name) for f in fields(PriceCalculation)}),
        created_at=model.created_at,
        superseded_at=model.superseded_at,
    )
