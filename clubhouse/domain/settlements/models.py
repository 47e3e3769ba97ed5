"""Settlement inputs and weekly balance reports."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Optional

from .pricing import PriceCalculation


@dataclass(slots=True)
class SettlementInputs:
    court_cost: Optional[int] = None
    shuttlecock_cost: Optional[int] = None
    weeks_to_distribute: Optional[int] = None
    players_per_week: Optional[int] = None
    wallet_pool_balance: Optional[int] = None

    def merged_over(self, defaults: "SettlementInputs") -> "SettlementInputs":
        """Values set here win; unset ones fall back to ``defaults``."""
        return SettlementInputs(
            **{
                f.name: getattr(self, f.name) if getattr(self, f.name) is not None else getattr(defaults, f.name)
                for f in fields(self)
            }
        )

    def problems(self) -> list[str]:
        missing = [f.name for f in fields(self) if getattr(self, f.name) is None]
        for name in ("court_cost", "shuttlecock_cost"):
            value = getattr(self, name)
            if value is not None and value < 0:
                missing.append(name)
        for name in ("weeks_to_distribute", "players_per_week"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                missing.append(name)
        return missing


@dataclass(slots=True)
class WeeklyReport:
    id: str
    week_id: str
    revision: int
    start_date: date
    end_date: date
    session_count: int
    total_players: int
    total_income: int
    total_refunds: int
    court_cost: int
    shuttlecock_cost: int
    total_expenses: int
    gross_profit: int
    price: PriceCalculation
    created_at: Optional[datetime]
    superseded_at: Optional[datetime]

    @property
    def is_current(self) -> bool:
        return self.superseded_at is None


def week_id_for(day: date) -> str:
    year, week, _ = day.isocalendar()
    return f"{year}-W{week:02d}"
