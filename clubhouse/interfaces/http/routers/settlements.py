"""Weekly settlement endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from clubhouse.domain.common.exceptions import ClubError
from clubhouse.domain.settlements.models import SettlementInputs
from clubhouse.domain.settlements.service import SettlementService
from clubhouse.interfaces.http.deps import get_settlement_service
from clubhouse.interfaces.http.errors import http_error
from clubhouse.schemas import SettlementRunRequest, WeeklyReportListResponse, WeeklyReportResponse

router = APIRouter()


@router.post("", response_model=WeeklyReportResponse, status_code=status.HTTP_201_CREATED, summary="Run a settlement")
async def run_settlement(
    payload: SettlementRunRequest,
    service: SettlementService = Depends(get_settlement_service),
) -> WeeklyReportResponse:
    inputs = SettlementInputs(**payload.model_dump(exclude={"start_date", "end_date"}))
    try:
        report = await service.run(payload.start_date, payload.end_date, inputs)
    except ClubError as exc:
        raise http_error(exc) from exc
    return WeeklyReportResponse.model_validate(report)


@router.get("/{week_id}", response_model=WeeklyReportResponse, summary="Current report of a week")
async def get_report(week_id: str, service: SettlementService = Depends(get_settlement_service)) -> WeeklyReportResponse:
    try:
        report = await service.get_report(week_id)
    except ClubError as exc:
        raise http_error(exc) from exc
    return WeeklyReportResponse.model_validate(report)


@router.get("/{week_id}/revisions", response_model=WeeklyReportListResponse, summary="Every revision of a week")
async def list_reports(
    week_id: str,
    service: SettlementService = Depends(get_settlement_service),
) -> WeeklyReportListResponse:
    reports = await service.list_reports(week_id)
    return WeeklyReportListResponse(
        week_id=week_id,
        reports=[WeeklyReportResponse.model_validate(r) for r in reports],
    )
