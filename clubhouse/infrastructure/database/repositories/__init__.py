"""SQLAlchemy-backed repository implementations."""

from .regular_player_repository import SqlRegularPlayerRepository
from .registration_repository import SqlRegistrationRepository
from .report_repository import SqlReportRepository
from .session_repository import SqlSessionRepository
from .wallet_repository import SqlWalletRepository

__all__ = [
    "SqlRegularPlayerRepository",
    "SqlRegistrationRepository",
    "SqlReportRepository",
    "SqlSessionRepository",
    "SqlWalletRepository",
]
