"""Settlement domain exports"""

from .exceptions import (
    InvalidSettlementPeriodError,
    ReportNotFoundError,
    SettlementError,
    SettlementInputMissingError,
)
from .models import SettlementInputs, WeeklyReport, week_id_for
from .pricing import PriceCalculation, calculate_price, round_half_up
from .service import SettlementService

__all__ = [
    "InvalidSettlementPeriodError",
    "PriceCalculation",
    "ReportNotFoundError",
    "SettlementError",
    "SettlementInputMissingError",
    "SettlementInputs",
    "SettlementService",
    "WeeklyReport",
    "calculate_price",
    "round_half_up",
    "week_id_for",
]
