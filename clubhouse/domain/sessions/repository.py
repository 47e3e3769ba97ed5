"""Repository protocol for play sessions."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from clubhouse.db.models import PlaySession as PlaySessionModel


class SessionRepository(Protocol):
    async def get(self, session_id: str, *, for_update: bool = False) -> PlaySessionModel | None:
        ...

    async def add(self, model: PlaySessionModel) -> PlaySessionModel:
        ...

    async def save(self, model: PlaySessionModel) -> PlaySessionModel:
        ...

    async def list_by_status(self, status: str) -> Sequence[PlaySessionModel]:
        ...

    async def list_closed_between(self, start: datetime, end: datetime) -> Sequence[PlaySessionModel]:
        ...
