"""Translation of domain errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from clubhouse.domain.common.exceptions import ClubError, ContentionError, NotFoundError
from clubhouse.domain.notifications.exceptions import NotificationDispatchError
from clubhouse.domain.registrations.exceptions import CapacityInvariantViolation
from clubhouse.domain.settlements.exceptions import SettlementInputMissingError

logger = logging.getLogger(__name__)


def http_error(exc: ClubError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ContentionError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
            headers={"Retry-After": "1"},
        )
    if isinstance(exc, (ValueError, SettlementInputMissingError)):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, CapacityInvariantViolation):
        logger.error("Roster invariant violated: %s", exc)
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    if isinstance(exc, NotificationDispatchError):
        # the change itself was committed
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
