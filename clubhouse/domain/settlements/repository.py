"""Repository protocol for weekly balance reports."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from clubhouse.db.models import WeeklyBalanceReport


class ReportRepository(Protocol):
    async def get_current(self, week_id: str) -> WeeklyBalanceReport | None:
        ...

    async def list_revisions(self, week_id: str) -> Sequence[WeeklyBalanceReport]:
        ...

    async def add(self, model: WeeklyBalanceReport) -> WeeklyBalanceReport:
        ...

    async def supersede(self, model: WeeklyBalanceReport, at: datetime) -> WeeklyBalanceReport:
        ...
