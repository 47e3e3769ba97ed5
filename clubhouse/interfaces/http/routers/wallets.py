"""Wallet endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from clubhouse.domain.common.exceptions import ClubError
from clubhouse.domain.wallets.service import WalletService
from clubhouse.interfaces.http.deps import get_acting_user, get_wallet_service
from clubhouse.interfaces.http.errors import http_error
from clubhouse.schemas import (
    LedgerReconciliationResponse,
    WalletAmountRequest,
    WalletOverdraftRequest,
    WalletSnapshotResponse,
    WalletTransactionListResponse,
    WalletTransactionResponse,
    WalletTransferRequest,
    WalletTransferResponse,
)

router = APIRouter()


@router.post("/transfer", response_model=WalletTransferResponse, summary="Send credit to another player")
async def transfer(
    payload: WalletTransferRequest,
    acting_user: str = Depends(get_acting_user),
    service: WalletService = Depends(get_wallet_service),
) -> WalletTransferResponse:
    try:
        result = await service.transfer(acting_user, payload.to_user_id, payload.amount, payload.description)
    except ClubError as exc:
        raise http_error(exc) from exc
    return WalletTransferResponse.model_validate(result)


@router.get("/{user_id}", response_model=WalletSnapshotResponse, summary="Wallet balance")
async def get_wallet(user_id: str, service: WalletService = Depends(get_wallet_service)) -> WalletSnapshotResponse:
    try:
        snapshot = await service.get_wallet(user_id)
    except ClubError as exc:
        raise http_error(exc) from exc
    return WalletSnapshotResponse.model_validate(snapshot)


@router.get("/{user_id}/transactions", response_model=WalletTransactionListResponse, summary="Transaction history")
async def list_transactions(
    user_id: str,
    limit: int = Query(default=20, gt=0, le=200),
    offset: int = Query(default=0, ge=0),
    service: WalletService = Depends(get_wallet_service),
) -> WalletTransactionListResponse:
    records = await service.list_transactions(user_id, limit, offset)
    return WalletTransactionListResponse(
        items=[WalletTransactionResponse.model_validate(r) for r in records],
        limit=limit,
        offset=offset,
    )


@router.post("/{user_id}/top-up", response_model=WalletTransactionResponse, summary="Record a deposit")
async def top_up(
    user_id: str,
    payload: WalletAmountRequest,
    service: WalletService = Depends(get_wallet_service),
) -> WalletTransactionResponse:
    try:
        record = await service.top_up(user_id, payload.amount, payload.description)
    except ClubError as exc:
        raise http_error(exc) from exc
    return WalletTransactionResponse.model_validate(record)


@router.post("/{user_id}/adjust", response_model=WalletTransactionResponse, summary="Correct a balance")
async def adjust(
    user_id: str,
    payload: WalletAmountRequest,
    service: WalletService = Depends(get_wallet_service),
) -> WalletTransactionResponse:
    try:
        record = await service.adjust(user_id, payload.amount, payload.description)
    except ClubError as exc:
        raise http_error(exc) from exc
    return WalletTransactionResponse.model_validate(record)


@router.put("/{user_id}/overdraft", response_model=WalletSnapshotResponse, summary="Set the overdraft allowance")
async def set_overdraft(
    user_id: str,
    payload: WalletOverdraftRequest,
    service: WalletService = Depends(get_wallet_service),
) -> WalletSnapshotResponse:
    try:
        snapshot = await service.set_overdraft_limit(user_id, payload.overdraft_limit)
    except ClubError as exc:
        raise http_error(exc) from exc
    return WalletSnapshotResponse.model_validate(snapshot)


@router.get("/{user_id}/reconcile", response_model=LedgerReconciliationResponse, summary="Check balance against ledger")
async def reconcile(user_id: str, service: WalletService = Depends(get_wallet_service)) -> LedgerReconciliationResponse:
    try:
        result = await service.reconcile(user_id)
    except ClubError as exc:
        raise http_error(exc) from exc
    return LedgerReconciliationResponse.model_validate(result)
