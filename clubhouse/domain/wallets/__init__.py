"""Wallet domain exports"""

from .exceptions import InsufficientBalanceError, InvalidAmountError, WalletError, WalletNotFoundError
from .ledger import WalletLedger
from .models import (
    LedgerReconciliation,
    TransactionType,
    TransferResult,
    WalletSnapshot,
    WalletTransactionRecord,
)
from .plan import LedgerPlan, LedgerStep
from .service import WalletService

__all__ = [
    "InsufficientBalanceError",
    "InvalidAmountError",
    "LedgerPlan",
    "LedgerReconciliation",
    "LedgerStep",
    "TransactionType",
    "TransferResult",
    "WalletError",
    "WalletLedger",
    "WalletNotFoundError",
    "WalletService",
    "WalletSnapshot",
    "WalletTransactionRecord",
]
