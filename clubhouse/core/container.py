"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from clubhouse.core.config import Settings, get_settings
from clubhouse.core.locks import KeyedLockRegistry
from clubhouse.domain.notifications import LoggingNotificationSink, NotificationDispatcher
from clubhouse.domain.registrations.service import RegistrationService
from clubhouse.domain.sessions.service import SessionService
from clubhouse.domain.settlements.service import SettlementService
from clubhouse.domain.wallets.service import WalletService
from clubhouse.infrastructure.database.session import get_session_factory
from clubhouse.infrastructure.database.unit_of_work import UnitOfWork


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    session_factory: async_sessionmaker[AsyncSession]
    locks: KeyedLockRegistry
    dispatcher: NotificationDispatcher

    @classmethod
    def build(
        cls,
        settings: Settings,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
    ) -> "ApplicationContainer":
        return cls(
            settings=settings,
            session_factory=session_factory or get_session_factory(),
            locks=KeyedLockRegistry(settings.lock_timeout),
            dispatcher=dispatcher or NotificationDispatcher([LoggingNotificationSink()]),
        )

    def unit_of_work(self) -> UnitOfWork:
        return UnitOfWork(self.session_factory, self.locks, self.dispatcher)

    @property
    def sessions(self) -> SessionService:
        return SessionService(self.unit_of_work, self.settings)

    @property
    def registrations(self) -> RegistrationService:
        return RegistrationService(self.unit_of_work, self.settings)

    @property
    def wallets(self) -> WalletService:
        return WalletService(self.unit_of_work, self.settings)

    @property
    def settlements(self) -> SettlementService:
        return SettlementService(self.unit_of_work, self.settings)


@lru_cache()
def get_container() -> ApplicationContainer:
    return ApplicationContainer.build(get_settings())


__all__ = ["ApplicationContainer", "get_container"]
