"""Wallet domain service"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from clubhouse.core.config import Settings
from clubhouse.infrastructure.database.unit_of_work import UnitOfWork

from .exceptions import InvalidAmountError
from .ledger import WalletLedger
from .models import (
    LedgerReconciliation,
    TransactionType,
    TransferResult,
    WalletSnapshot,
    WalletTransactionRecord,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WalletService:
    """Stand-alone wallet use cases, each committed as its own unit of work."""

    unit_of_work: Callable[[], UnitOfWork]
    settings: Settings

    async def top_up(self, user_id: str, amount: int, description: Optional[str] = None) -> WalletTransactionRecord:
        if amount <= 0:
            raise InvalidAmountError("Top-up amount must be positive")
        async with self.unit_of_work() as uow:
            return await WalletLedger.for_unit(uow, self.settings).apply_transaction(
                user_id,
                amount,
                TransactionType.TOP_UP,
                description=description or "Cash deposit",
            )

    async def adjust(self, user_id: str, amount: int, description: Optional[str] = None) -> WalletTransactionRecord:
        async with self.unit_of_work() as uow:
            return await WalletLedger.for_unit(uow, self.settings).apply_transaction(
                user_id,
                amount,
                TransactionType.ADJUSTMENT,
                description=description or "Balance correction",
            )

    async def transfer(
        self,
        from_user_id: str,
        to_user_id: str,
        amount: int,
        description: Optional[str] = None,
    ) -> TransferResult:
        async with self.unit_of_work() as uow:
            result = await WalletLedger.for_unit(uow, self.settings).transfer(
                from_user_id,
                to_user_id,
                amount,
                description=description,
            )
        logger.info("Transfer %s: %s -> %s (%s)", result.transfer_id, from_user_id, to_user_id, amount)
        return result

    async def set_overdraft_limit(self, user_id: str, overdraft_limit: int) -> WalletSnapshot:
        async with self.unit_of_work() as uow:
            return await WalletLedger.for_unit(uow, self.settings).set_overdraft_limit(user_id, overdraft_limit)

    async def get_wallet(self, user_id: str) -> WalletSnapshot:
        async with self.unit_of_work() as uow:
            return await WalletLedger.for_unit(uow, self.settings).get_wallet(user_id)

    async def list_transactions(self, user_id: str, limit: int = 20, offset: int = 0) -> list[WalletTransactionRecord]:
        async with self.unit_of_work() as uow:
            return await WalletLedger.for_unit(uow, self.settings).list_transactions(user_id, limit, offset)

    async def reconcile(self, user_id: str) -> LedgerReconciliation:
        async with self.unit_of_work() as uow:
            return await WalletLedger.for_unit(uow, self.settings).reconcile(user_id)
