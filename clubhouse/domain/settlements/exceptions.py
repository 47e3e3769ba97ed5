"""Settlement exceptions."""

from __future__ import annotations

from typing import Sequence

from clubhouse.domain.common.exceptions import ClubError, NotFoundError


class SettlementError(ClubError):
    """Base class for settlement errors."""


class SettlementInputMissingError(SettlementError):
    """Raised before anything is written when required inputs are absent or out of range."""

    def __init__(self, fields: Sequence[str]) -> None:
        super().__init__(f"Settlement inputs missing or invalid: {', '.join(fields)}")
        self.fields = list(fields)


class InvalidSettlementPeriodError(SettlementError, ValueError):
    """Raised when the end date precedes the start date."""


class ReportNotFoundError(SettlementError, NotFoundError):
    """Raised when no report exists for the requested week."""
