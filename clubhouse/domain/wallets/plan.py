"""Ledger plans: the wallet side of a multi-step operation as an ordered script.

A plan is built first, then executed inside the caller's unit of work. All
involved wallets are locked up front in sorted order; if any step fails the
unit of work rolls back, which undoes every step already applied.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from .ledger import WalletLedger
from .models import TransactionType, WalletTransactionRecord


@dataclass(frozen=True, slots=True)
class LedgerStep:
    user_id: str
    amount: int
    type: TransactionType
    session_id: Optional[str] = None
    description: Optional[str] = None


class LedgerPlan:
    def __init__(self) -> None:
        self._steps: list[LedgerStep] = []

    def add(self, step: LedgerStep) -> None:
        # a free session still marks players paid but writes nothing to the ledger
        if step.amount != 0:
            self._steps.append(step)

    def charge(self, user_id: str, amount: int, session_id: str, description: str) -> None:
        self.add(LedgerStep(user_id, -amount, TransactionType.SESSION_CHARGE, session_id, description))

    def refund(self, user_id: str, amount: int, session_id: str, description: str) -> None:
        self.add(LedgerStep(user_id, amount, TransactionType.CANCELLATION_REFUND, session_id, description))

    def __iter__(self) -> Iterator[LedgerStep]:
        return iter(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def accounts(self) -> list[str]:
        return sorted({step.user_id for step in self._steps})

    async def execute(self, ledger: WalletLedger) -> list[WalletTransactionRecord]:
        await ledger.lock_accounts(*self.accounts())
        applied: list[WalletTransactionRecord] = []
        for step in self._steps:
            applied.append(
                await ledger.apply_transaction(
                    step.user_id,
                    step.amount,
                    step.type,
                    related_session_id=step.session_id,
                    description=step.description,
                )
            )
        return applied
