"""Registration and waitlist endpoints, nested under a session."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from clubhouse.domain.common.exceptions import ClubError
from clubhouse.domain.registrations.service import RegistrationService
from clubhouse.interfaces.http.deps import get_acting_user, get_registration_service, is_admin
from clubhouse.interfaces.http.errors import http_error
from clubhouse.schemas import (
    CancellationResponse,
    RegistrationCreateRequest,
    RegistrationListResponse,
    RegistrationResponse,
    RosterResponse,
)

router = APIRouter()


@router.get("/{session_id}/roster", response_model=RosterResponse, summary="Active roster and waiting list")
async def get_roster(
    session_id: str,
    service: RegistrationService = Depends(get_registration_service),
) -> RosterResponse:
    try:
        roster = await service.get_roster(session_id)
    except ClubError as exc:
        raise http_error(exc) from exc
    return RosterResponse.model_validate(roster)


@router.post(
    "/{session_id}/registrations",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a player or a guest",
)
async def register(
    session_id: str,
    payload: RegistrationCreateRequest,
    acting_user: str = Depends(get_acting_user),
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationResponse:
    try:
        if payload.guest_name:
            record = await service.register_guest(
                session_id,
                payload.name,
                payload.guest_name,
                acting_user_id=acting_user,
            )
        else:
            record = await service.register(session_id, payload.name, acting_user_id=acting_user)
    except ClubError as exc:
        raise http_error(exc) from exc
    return RegistrationResponse.model_validate(record)


@router.delete(
    "/{session_id}/registrations/{position}",
    response_model=CancellationResponse,
    summary="Cancel the registration at a position",
)
async def cancel_registration(
    session_id: str,
    position: int = Path(..., gt=0),
    admin: bool = Depends(is_admin),
    service: RegistrationService = Depends(get_registration_service),
) -> CancellationResponse:
    try:
        record = await service.cancel(session_id, position, admin=admin)
    except ClubError as exc:
        raise http_error(exc) from exc
    return CancellationResponse(cancelled=[RegistrationResponse.model_validate(record)])


@router.post(
    "/{session_id}/cancel-mine",
    response_model=CancellationResponse,
    summary="Cancel the acting user's place and their guests",
)
async def cancel_mine(
    session_id: str,
    acting_user: str = Depends(get_acting_user),
    service: RegistrationService = Depends(get_registration_service),
) -> CancellationResponse:
    try:
        records = await service.cancel_for_user(session_id, acting_user)
    except ClubError as exc:
        raise http_error(exc) from exc
    return CancellationResponse(cancelled=[RegistrationResponse.model_validate(r) for r in records])


@router.post(
    "/{session_id}/registrations/{position}/payment-link",
    response_model=RegistrationResponse,
    summary="Record that the payment link was opened",
)
async def payment_link_clicked(
    session_id: str,
    position: int = Path(..., gt=0),
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationResponse:
    try:
        record = await service.mark_payment_link_clicked(session_id, position)
    except ClubError as exc:
        raise http_error(exc) from exc
    return RegistrationResponse.model_validate(record)


@router.post(
    "/{session_id}/refund-waiting-list",
    response_model=CancellationResponse,
    summary="Remove every waitlisted registration",
)
async def refund_waiting_list(
    session_id: str,
    service: RegistrationService = Depends(get_registration_service),
) -> CancellationResponse:
    try:
        records = await service.refund_waiting_list(session_id)
    except ClubError as exc:
        raise http_error(exc) from exc
    return CancellationResponse(cancelled=[RegistrationResponse.model_validate(r) for r in records])


@router.post(
    "/{session_id}/load-regulars",
    response_model=RegistrationListResponse,
    summary="Add the weekday's regular players to a draft session",
)
async def load_regular_players(
    session_id: str,
    acting_user: str = Depends(get_acting_user),
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationListResponse:
    try:
        records = await service.load_regular_players(session_id, acting_user_id=acting_user)
    except ClubError as exc:
        raise http_error(exc) from exc
    return RegistrationListResponse(registrations=[RegistrationResponse.model_validate(r) for r in records])
