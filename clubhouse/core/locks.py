"""Keyed asyncio locks with bounded acquisition."""

from __future__ import annotations

import asyncio
import logging

from clubhouse.domain.common.exceptions import ContentionError

logger = logging.getLogger(__name__)


def session_key(session_id: str) -> str:
    return f"session:{session_id}"


def wallet_key(user_id: str) -> str:
    return f"wallet:{user_id}"


class KeyedLockRegistry:
    """One lock per key (a session or a wallet), kept only while it is held or awaited.

    Acquisition never blocks longer than ``timeout`` seconds; on expiry a
    ``ContentionError`` is raised.
    """

    def __init__(self, timeout: float) -> None:
        self._timeout = timeout
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @property
    def timeout(self) -> float:
        return self._timeout

    def is_locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    async def acquire(self, key: str, timeout: float | None = None) -> None:
        wait = self._timeout if timeout is None else timeout
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1

        waiter = asyncio.ensure_future(lock.acquire())
        try:
            done, _ = await asyncio.wait({waiter}, timeout=wait)
        except asyncio.CancelledError:
            await self._abandon(key, waiter)
            raise
        if waiter not in done:
            await self._abandon(key, waiter)
            logger.warning("Lock %s not acquired within %.1fs", key, wait)
            raise ContentionError(key, wait)

    def release(self, key: str) -> None:
        self._locks[key].release()
        self._forget(key)

    async def _abandon(self, key: str, waiter: asyncio.Future) -> None:
        waiter.cancel()
        try:
            await waiter
        except asyncio.CancelledError:
            pass
        else:
            # granted as the wait ran out
            self._locks[key].release()
        self._forget(key)

    def _forget(self, key: str) -> None:
        remaining = self._users[key] - 1
        if remaining:
            self._users[key] = remaining
        else:
            del self._users[key]
            del self._locks[key]


def settlement_key(week_id: str) -> str:
    return f"settlement:{week_id}"


def regulars_key(weekday: int) -> str:
    return f"regulars:{weekday}"
