"""SQLAlchemy implementation for play session repository"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clubhouse.db.models import PlaySession


class SqlSessionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, session_id: str, *, for_update: bool = False) -> PlaySession | None:
        stmt = select(PlaySession).where(PlaySession.id == session_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add(self, model: PlaySession) -> PlaySession:
        self.session.add(model)
        await self.session.flush()
        return model

    async def save(self, model: PlaySession) -> PlaySession:
        await self.session.flush()
        return model

    async def list_by_status(self, status: str) -> Sequence[PlaySession]:
        stmt = (
            select(PlaySession)
            .where(PlaySession.status == status)
            .order_by(PlaySession.session_date, PlaySession.start_time)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_closed_between(self, start: datetime, end: datetime) -> Sequence[PlaySession]:
        """Closed sessions with start <= closed_at < end."""
        stmt = (
            select(PlaySession)
            .where(
                PlaySession.status == "closed",
                PlaySession.closed_at >= start,
                PlaySession.closed_at < end,
            )
            .order_by(PlaySession.closed_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
