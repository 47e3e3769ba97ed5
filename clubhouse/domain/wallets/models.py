"""Domain models for wallet operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    TOP_UP = "topUp"
    SESSION_CHARGE = "sessionCharge"
    CANCELLATION_REFUND = "cancellationRefund"
    PEER_TRANSFER_OUT = "peerTransferOut"
    PEER_TRANSFER_IN = "peerTransferIn"
    ADJUSTMENT = "adjustment"


# +1 credit only, -1 debit only, 0 either direction
EXPECTED_SIGN: dict[TransactionType, int] = {
    TransactionType.TOP_UP: 1,
    TransactionType.SESSION_CHARGE: -1,
    TransactionType.CANCELLATION_REFUND: 1,
    TransactionType.PEER_TRANSFER_OUT: -1,
    TransactionType.PEER_TRANSFER_IN: 1,
    TransactionType.ADJUSTMENT: 0,
}


@dataclass(slots=True)
class WalletSnapshot:
    user_id: str
    balance: int
    overdraft_limit: int
    last_sequence: int
    currency: str
    updated_at: Optional[datetime]


@dataclass(slots=True)
class WalletTransactionRecord:
    id: str
    user_id: str
    sequence: int
    amount: int
    type: TransactionType
    session_id: Optional[str]
    counterparty_id: Optional[str]
    transfer_id: Optional[str]
    description: Optional[str]
    balance_after: int
    created_at: datetime


@dataclass(slots=True)
class TransferResult:
    transfer_id: str
    debit: WalletTransactionRecord
    credit: WalletTransactionRecord


@dataclass(slots=True)
class LedgerReconciliation:
    user_id: str
    cached_balance: int
    ledger_sum: int
    last_balance_after: int
    transaction_count: int

    @property
    def consistent(self) -> bool:
        return self.cached_balance == self.ledger_sum == self.last_balance_after
