"""SQLAlchemy implementation for the weekday regular player lists"""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from clubhouse.db.models import RegularPlayer


class SqlRegularPlayerRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_players(self, weekday: Optional[int] = None) -> Sequence[RegularPlayer]:
        stmt = select(RegularPlayer).order_by(RegularPlayer.weekday, RegularPlayer.sort_order)
        if weekday is not None:
            stmt = stmt.where(RegularPlayer.weekday == weekday)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def replace(self, weekday: int, models: Sequence[RegularPlayer]) -> Sequence[RegularPlayer]:
        await self.session.execute(delete(RegularPlayer).where(RegularPlayer.weekday == weekday))
        self.session.add_all(models)
        await self.session.flush()
        return models
