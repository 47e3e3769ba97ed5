"""Wallet domain specific exceptions."""

from clubhouse.domain.common.exceptions import ClubError, NotFoundError


class WalletError(ClubError):
    """Base class for wallet related domain errors."""


class WalletNotFoundError(WalletError, NotFoundError):
    """Raised when the requested wallet does not exist."""


class InvalidAmountError(WalletError, ValueError):
    """Raised for a zero amount or one whose sign does not match its transaction type."""


class InsufficientBalanceError(WalletError):
    """Raised when a debit would take a balance below the account's floor."""

    def __init__(self, user_id: str, balance: int, required: int, floor: int) -> None:
        super().__init__(
            f"Insufficient balance for {user_id}: has {balance}, needs {required} (floor {floor})"
        )
        self.user_id = user_id
        self.balance = balance
        self.required = required
        self.floor = floor
