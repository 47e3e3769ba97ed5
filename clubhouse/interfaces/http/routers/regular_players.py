"""Regular players kept per weekday and loaded into draft sessions."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from clubhouse.domain.common.exceptions import ClubError
from clubhouse.domain.registrations.service import RegistrationService
from clubhouse.interfaces.http.deps import get_registration_service
from clubhouse.interfaces.http.errors import http_error
from clubhouse.schemas import RegularPlayerListResponse, RegularPlayerResponse, RegularPlayersUpdateRequest

router = APIRouter()


@router.get("", response_model=RegularPlayerListResponse, summary="List regular players")
async def list_regular_players(
    weekday: Optional[int] = Query(default=None, ge=1, le=7),
    service: RegistrationService = Depends(get_registration_service),
) -> RegularPlayerListResponse:
    try:
        records = await service.list_regular_players(weekday)
    except ClubError as exc:
        raise http_error(exc) from exc
    return RegularPlayerListResponse(players=[RegularPlayerResponse.model_validate(r) for r in records])


@router.put("/{weekday}", response_model=RegularPlayerListResponse, summary="Replace a weekday's regular players")
async def set_regular_players(
    payload: RegularPlayersUpdateRequest,
    weekday: int = Path(..., ge=1, le=7),
    service: RegistrationService = Depends(get_registration_service),
) -> RegularPlayerListResponse:
    try:
        records = await service.set_regular_players(weekday, [(p.name, p.user_id) for p in payload.players])
    except ClubError as exc:
        raise http_error(exc) from exc
    return RegularPlayerListResponse(players=[RegularPlayerResponse.model_validate(r) for r in records])
