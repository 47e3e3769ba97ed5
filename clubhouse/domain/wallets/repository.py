"""Repository protocol for wallet operations."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol, Sequence

from clubhouse.db.models import Wallet as WalletModel, WalletTransaction as WalletTransactionModel


class WalletRepository(Protocol):
    async def get_wallet(self, user_id: str, *, for_update: bool = False) -> WalletModel | None:
        ...

    async def create_wallet(self, user_id: str, currency: str) -> WalletModel:
        ...

    async def save_balance(self, wallet: WalletModel, *, balance: int, last_sequence: int) -> WalletModel:
        ...

    async def set_overdraft_limit(self, wallet: WalletModel, overdraft_limit: int) -> WalletModel:
        ...

    async def add_transaction(
        self,
        *,
        user_id: str,
        sequence: int,
        amount: int,
        type: str,
        session_id: str | None,
        counterparty_id: str | None,
        transfer_id: str | None,
        description: str | None,
        balance_after: int,
        created_at: datetime,
    ) -> WalletTransactionModel:
        ...

    async def list_transactions(self, user_id: str, limit: int, offset: int) -> Sequence[WalletTransactionModel]:
        ...

    async def last_transaction(self, user_id: str) -> WalletTransactionModel | None:
        ...

    async def ledger_totals(self, user_id: str) -> tuple[int, int]:
        ...

    async def sum_for_sessions(self, type: str, session_ids: Iterable[str]) -> int:
        ...
