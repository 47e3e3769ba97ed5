"""SQLAlchemy implementation for registration repository"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clubhouse.db.models import Registration


class SqlRegistrationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_for_session(self, session_id: str, *, for_update: bool = False) -> Sequence[Registration]:
        stmt = (
            select(Registration)
            .where(Registration.session_id == session_id)
            .order_by(Registration.position)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def add(self, model: Registration) -> Registration:
        self.session.add(model)
        await self.session.flush()
        return model

    async def delete(self, model: Registration) -> None:
        await self.session.delete(model)
        # the freed position must be gone before another row is moved into it
        await self.session.flush()

    async def move(self, model: Registration, position: int) -> Registration:
        model.position = position
        await self.session.flush()
        return model

    async def save(self, model: Registration) -> Registration:
        await self.session.flush()
        return model
