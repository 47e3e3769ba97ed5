"""SQLAlchemy implementation for weekly balance report repository"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clubhouse.db.models import WeeklyBalanceReport


class SqlReportRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_current(self, week_id: str) -> WeeklyBalanceReport | None:
        stmt = (
            select(WeeklyBalanceReport)
            .where(
                WeeklyBalanceReport.week_id == week_id,
                WeeklyBalanceReport.superseded_at.is_(None),
            )
            .order_by(WeeklyBalanceReport.revision.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_revisions(self, week_id: str) -> Sequence[WeeklyBalanceReport]:
        stmt = (
            select(WeeklyBalanceReport)
            .where(WeeklyBalanceReport.week_id == week_id)
            .order_by(WeeklyBalanceReport.revision)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def add(self, model: WeeklyBalanceReport) -> WeeklyBalanceReport:
        self.session.add(model)
        await self.session.flush()
        return model

    async def supersede(self, model: WeeklyBalanceReport, at: datetime) -> WeeklyBalanceReport:
        model.superseded_at = at
        await self.session.flush()
        return model
