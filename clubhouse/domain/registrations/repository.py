"""Repository protocols for registrations and weekday regular players."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from clubhouse.db.models import Registration as RegistrationModel, RegularPlayer as RegularPlayerModel


class RegistrationRepository(Protocol):
    async def list_for_session(self, session_id: str, *, for_update: bool = False) -> Sequence[RegistrationModel]:
        ...

    async def add(self, model: RegistrationModel) -> RegistrationModel:
        ...

    async def delete(self, model: RegistrationModel) -> None:
        ...

    async def move(self, model: RegistrationModel, position: int) -> RegistrationModel:
        ...

    async def save(self, model: RegistrationModel) -> RegistrationModel:
        ...


class RegularPlayerRepository(Protocol):
    async def list_players(self, weekday: Optional[int] = None) -> Sequence[RegularPlayerModel]:
        ...

    async def replace(self, weekday: int, models: Sequence[RegularPlayerModel]) -> Sequence[RegularPlayerModel]:
        ...
