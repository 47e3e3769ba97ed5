"""Session lifecycle endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from clubhouse.domain.common.exceptions import ClubError
from clubhouse.domain.sessions.models import SessionDetailsInput, SessionStatus
from clubhouse.domain.sessions.service import SessionService
from clubhouse.interfaces.http.deps import get_session_service
from clubhouse.interfaces.http.errors import http_error
from clubhouse.schemas import (
    LockDueRequest,
    SessionCreateRequest,
    SessionListResponse,
    SessionResponse,
    SessionUpdateRequest,
)

router = APIRouter()


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED, summary="Create a draft session")
async def create_session(
    payload: SessionCreateRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    try:
        snapshot = await service.create_session(**payload.model_dump())
    except ClubError as exc:
        raise http_error(exc) from exc
    return SessionResponse.model_validate(snapshot)


@router.get("", response_model=SessionListResponse, summary="List sessions")
async def list_sessions(
    status_filter: Optional[SessionStatus] = Query(default=None, alias="status"),
    service: SessionService = Depends(get_session_service),
) -> SessionListResponse:
    snapshots = await service.list_sessions(status_filter)
    return SessionListResponse(
        total=len(snapshots),
        sessions=[SessionResponse.model_validate(s) for s in snapshots],
    )


@router.post("/lock-due", response_model=SessionListResponse, summary="Lock sessions that start soon")
async def lock_due_sessions(
    payload: LockDueRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionListResponse:
    try:
        locked = await service.lock_due(payload.now)
    except ClubError as exc:
        raise http_error(exc) from exc
    return SessionListResponse(total=len(locked), sessions=[SessionResponse.model_validate(s) for s in locked])


@router.get("/{session_id}", response_model=SessionResponse, summary="Get a session")
async def get_session(session_id: str, service: SessionService = Depends(get_session_service)) -> SessionResponse:
    try:
        snapshot = await service.get_session(session_id)
    except ClubError as exc:
        raise http_error(exc) from exc
    return SessionResponse.model_validate(snapshot)


@router.patch("/{session_id}", response_model=SessionResponse, summary="Update a draft session")
async def update_session(
    session_id: str,
    payload: SessionUpdateRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    try:
        snapshot = await service.update_details(session_id, SessionDetailsInput(**payload.model_dump()))
    except ClubError as exc:
        raise http_error(exc) from exc
    return SessionResponse.model_validate(snapshot)


@router.post("/{session_id}/publish", response_model=SessionResponse, summary="Publish and charge the roster")
async def publish_session(session_id: str, service: SessionService = Depends(get_session_service)) -> SessionResponse:
    try:
        snapshot = await service.publish(session_id)
    except ClubError as exc:
        raise http_error(exc) from exc
    return SessionResponse.model_validate(snapshot)


@router.post("/{session_id}/lock", response_model=SessionResponse, summary="Lock a published session")
async def lock_session(session_id: str, service: SessionService = Depends(get_session_service)) -> SessionResponse:
    try:
        snapshot = await service.lock(session_id)
    except ClubError as exc:
        raise http_error(exc) from exc
    return SessionResponse.model_validate(snapshot)


@router.post("/{session_id}/close", response_model=SessionResponse, summary="Close a session")
async def close_session(session_id: str, service: SessionService = Depends(get_session_service)) -> SessionResponse:
    try:
        snapshot = await service.close(session_id)
    except ClubError as exc:
        raise http_error(exc) from exc
    return SessionResponse.model_validate(snapshot)
