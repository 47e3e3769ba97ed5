"""Unit of work: one database transaction plus the locks and events it owns."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from clubhouse.core.locks import KeyedLockRegistry

if TYPE_CHECKING:
    from clubhouse.domain.notifications import NotificationDispatcher, NotificationEvent

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Groups every write of one logical operation.

    Keys locked through :meth:`lock` stay held until the transaction has been
    committed or rolled back. Events recorded with :meth:`emit` are handed to
    the dispatcher only after a successful commit.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        locks: KeyedLockRegistry,
        dispatcher: NotificationDispatcher | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._locks = locks
        self._dispatcher = dispatcher
        self._session: AsyncSession | None = None
        self._held: list[str] = []
        self.events: list[NotificationEvent] = []

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork used outside of 'async with'")
        return self._session

    async def __aenter__(self) -> "UnitOfWork":
        self._session = self._session_factory()
        self._held = []
        self.events = []
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self.session
        try:
            if exc_type is None:
                await session.commit()
            else:
                await session.rollback()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
            self._release_all()
            self._session = None

        if exc_type is None and self.events and self._dispatcher is not None:
            await self._dispatcher.dispatch(self.events)

    async def lock(self, *keys: str) -> None:
        """Acquire the given keys in sorted order; keys already held are skipped."""
        for key in sorted(set(keys)):
            if key in self._held:
                continue
            await self._locks.acquire(key)
            self._held.append(key)

    def emit(self, event: NotificationEvent) -> None:
        self.events.append(event)

    def _release_all(self) -> None:
        while self._held:
            self._locks.release(self._held.pop())
