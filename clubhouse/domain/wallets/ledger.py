"""Wallet ledger: the only writer of balances.

Every balance change appends an immutable transaction and moves the cached
balance in the same database transaction. Writers of one wallet are
serialized through the unit of work's wallet lock, so ``balance_after`` and
``sequence`` form a gap-free chain per user.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError

from clubhouse.core.config import Settings
from clubhouse.core.locks import wallet_key
from clubhouse.db.models import Wallet as WalletModel, WalletTransaction as WalletTransactionModel
from clubhouse.domain.common.exceptions import ContentionError
from clubhouse.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from clubhouse.infrastructure.database.unit_of_work import UnitOfWork

from .exceptions import InsufficientBalanceError, InvalidAmountError, WalletNotFoundError
from .models import (
    EXPECTED_SIGN,
    LedgerReconciliation,
    TransactionType,
    TransferResult,
    WalletSnapshot,
    WalletTransactionRecord,
)
from .repository import WalletRepository

logger = logging.getLogger(__name__)


class WalletLedger:
    def __init__(
        self,
        uow: UnitOfWork,
        repository: WalletRepository,
        *,
        balance_floor: int = 0,
        currency: str = "THB",
    ) -> None:
        self._uow = uow
        self._repository = repository
        self._balance_floor = balance_floor
        self._currency = currency

    @classmethod
    def for_unit(cls, uow: UnitOfWork, settings: Settings) -> "WalletLedger":
        return cls(
            uow,
            SqlWalletRepository(uow.session),
            balance_floor=settings.balance_floor,
            currency=settings.wallet.currency,
        )

    async def lock_accounts(self, *user_ids: str) -> None:
        await self._uow.lock(*(wallet_key(user_id) for user_id in user_ids))

    async def apply_transaction(
        self,
        user_id: str,
        amount: int,
        type: TransactionType,
        *,
        related_session_id: Optional[str] = None,
        description: Optional[str] = None,
        counterparty_id: Optional[str] = None,
        transfer_id: Optional[str] = None,
    ) -> WalletTransactionRecord:
        type = TransactionType(type)
        _check_amount(amount, type)
        await self.lock_accounts(user_id)

        wallet = await self._load_wallet(user_id)
        new_balance = wallet.balance + amount
        floor = self._floor_for(wallet)
        if amount < 0 and new_balance < floor:
            logger.warning(
                "Rejected %s of %s for %s: balance %s, floor %s",
                type.value,
                amount,
                user_id,
                wallet.balance,
                floor,
            )
            raise InsufficientBalanceError(user_id, wallet.balance, -amount, floor)

        sequence = wallet.last_sequence + 1
        tx = await self._repository.add_transaction(
            user_id=user_id,
            sequence=sequence,
            amount=amount,
            type=type.value,
            session_id=related_session_id,
            counterparty_id=counterparty_id,
            transfer_id=transfer_id,
            description=description,
            balance_after=new_balance,
            created_at=datetime.now(timezone.utc),
        )
        await self._repository.save_balance(wallet, balance=new_balance, last_sequence=sequence)
        logger.info("Ledger %s #%s %s %+d -> %s", user_id, sequence, type.value, amount, new_balance)
        return _to_transaction(tx)

    async def transfer(
        self,
        from_user_id: str,
        to_user_id: str,
        amount: int,
        *,
        description: Optional[str] = None,
    ) -> TransferResult:
        if amount <= 0:
            raise InvalidAmountError("Transfer amount must be positive")
        if from_user_id == to_user_id:
            raise InvalidAmountError("Cannot transfer to the same wallet")

        # both wallets are locked before either side is written
        await self.lock_accounts(from_user_id, to_user_id)
        transfer_id = str(uuid.uuid4())
        debit = await self.apply_transaction(
            from_user_id,
            -amount,
            TransactionType.PEER_TRANSFER_OUT,
            counterparty_id=to_user_id,
            transfer_id=transfer_id,
            description=description or f"Gift to {to_user_id}",
        )
        credit = await self.apply_transaction(
            to_user_id,
            amount,
            TransactionType.PEER_TRANSFER_IN,
            counterparty_id=from_user_id,
            transfer_id=transfer_id,
            description=description or f"Gift from {from_user_id}",
        )
        return TransferResult(transfer_id=transfer_id, debit=debit, credit=credit)

    async def set_overdraft_limit(self, user_id: str, overdraft_limit: int) -> WalletSnapshot:
        if overdraft_limit < 0:
            raise InvalidAmountError("Overdraft limit cannot be negative")
        await self.lock_accounts(user_id)
        wallet = await self._load_wallet(user_id)
        wallet = await self._repository.set_overdraft_limit(wallet, overdraft_limit)
        logger.info("Overdraft limit for %s set to %s", user_id, overdraft_limit)
        return _to_snapshot(wallet)

    async def get_wallet(self, user_id: str) -> WalletSnapshot:
        wallet = await self._repository.get_wallet(user_id)
        if wallet is None:
            raise WalletNotFoundError(f"Wallet not found: {user_id}")
        return _to_snapshot(wallet)

    async def list_transactions(self, user_id: str, limit: int = 20, offset: int = 0) -> list[WalletTransactionRecord]:
        rows = await self._repository.list_transactions(user_id, limit, offset)
        return [_to_transaction(row) for row in rows]

    async def reconcile(self, user_id: str) -> LedgerReconciliation:
        wallet = await self._repository.get_wallet(user_id)
        if wallet is None:
            raise WalletNotFoundError(f"Wallet not found: {user_id}")
        total, count = await self._repository.ledger_totals(user_id)
        last = await self._repository.last_transaction(user_id)
        result = LedgerReconciliation(
            user_id=user_id,
            cached_balance=wallet.balance,
            ledger_sum=total,
            last_balance_after=last.balance_after if last is not None else 0,
            transaction_count=count,
        )
        if not result.consistent:
            logger.error(
                "Ledger mismatch for %s: cached %s, sum %s, last balance_after %s",
                user_id,
                result.cached_balance,
                result.ledger_sum,
                result.last_balance_after,
            )
        return result

    def _floor_for(self, wallet: WalletModel) -> int:
        return self._balance_floor - (wallet.overdraft_limit or 0)

    async def _load_wallet(self, user_id: str) -> WalletModel:
        wallet = await self._repository.get_wallet(user_id, for_update=True)
        if wallet is not None:
            return wallet
        try:
            return await self._repository.create_wallet(user_id, self._currency)
        except IntegrityError as exc:
            # created concurrently by another process; the whole operation can be retried
            raise ContentionError(wallet_key(user_id)) from exc


def _check_amount(amount: int, type: TransactionType) -> None:
    if amount == 0:
        raise InvalidAmountError("Transaction amount cannot be zero")
    sign = EXPECTED_SIGN[type]
    if sign and (amount > 0) != (sign > 0):
        raise InvalidAmountError(f"{type.value} amount has the wrong sign: {amount}")


def _to_snapshot(model: WalletModel) -> WalletSnapshot:
    return WalletSnapshot(
        user_id=model.user_id,
        balance=model.balance,
        overdraft_limit=model.overdraft_limit,
        last_sequence=model.last_sequence,
        currency=model.currency,
        updated_at=model.updated_at,
    )


def _to_transaction(model: WalletTransactionModel) -> WalletTransactionRecord:
    return WalletTransactionRecord(
        id=model.id,
        user_id=model.user_id,
        sequence=model.sequence,
        amount=model.amount,
        type=TransactionType(model.type),
        session_id=model.session_id,
        counterparty_id=model.counterparty_id,
        transfer_id=model.transfer_id,
        description=model.description,
        balance_after=model.balance_after,
        created_at=model.created_at,
    )
