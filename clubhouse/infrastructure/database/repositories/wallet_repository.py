"""SQLAlchemy implementation for wallet domain"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clubhouse.db.models import Wallet, WalletTransaction


class SqlWalletRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_wallet(self, user_id: str, *, for_update: bool = False) -> Wallet | None:
        stmt = select(Wallet).where(Wallet.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create_wallet(self, user_id: str, currency: str) -> Wallet:
        wallet = Wallet(user_id=user_id, currency=currency, balance=0, overdraft_limit=0, last_sequence=0)
        self.session.add(wallet)
        await self.session.flush()
        return wallet

    async def save_balance(self, wallet: Wallet, *, balance: int, last_sequence: int) -> Wallet:
        wallet.balance = balance
        wallet.last_sequence = last_sequence
        await self.session.flush()
        return wallet

    async def set_overdraft_limit(self, wallet: Wallet, overdraft_limit: int) -> Wallet:
        wallet.overdraft_limit = overdraft_limit
        await self.session.flush()
        return wallet

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
    ) -> WalletTransaction:
        tx = WalletTransaction(
            user_id=user_id,
            sequence=sequence,
            amount=amount,
            type=type,
            session_id=session_id,
            counterparty_id=counterparty_id,
            transfer_id=transfer_id,
            description=description,
            balance_after=balance_after,
            created_at=created_at,
        )
        self.session.add(tx)
        await self.session.flush()
        return tx

    async def list_transactions(self, user_id: str, limit: int, offset: int) -> Sequence[WalletTransaction]:
        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.user_id == user_id)
            .order_by(desc(WalletTransaction.sequence))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def last_transaction(self, user_id: str) -> WalletTransaction | None:
        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.user_id == user_id)
            .order_by(desc(WalletTransaction.sequence))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def ledger_totals(self, user_id: str) -> tuple[int, int]:
        """Return (sum of amounts, number of transactions) for one user."""
        stmt = select(
            func.coalesce(func.sum(WalletTransaction.amount), 0),
            func.count(WalletTransaction.id),
        ).where(WalletTransaction.user_id == user_id)
        result = await self.session.execute(stmt)
        total, count = result.one()
        return int(total), int(count)

    async def sum_for_sessions(self, type: str, session_ids: Iterable[str]) -> int:
        ids = list(session_ids)
        if not ids:
            return 0
        stmt = select(func.coalesce(func.sum(WalletTransaction.amount), 0)).where(
            WalletTransaction.type == type,
            WalletTransaction.session_id.in_(ids),
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
