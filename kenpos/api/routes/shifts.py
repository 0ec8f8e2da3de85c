"""Shift endpoints."""

from fastapi import APIRouter, Depends, status

from kenpos.api.dependencies import (
    get_end_shift_use_case,
    get_shift_status_use_case,
    get_start_shift_use_case,
)
from kenpos.application.dto.requests import EndShiftRequest, StartShiftRequest
from kenpos.application.dto.responses import (
    ErrorResponse,
    ShiftReportResponse,
    ShiftStatusResponse,
)
from kenpos.application.use_cases import (
    EndShiftUseCase,
    ShiftStatusUseCase,
    StartShiftUseCase,
)
from kenpos.core.entities import Shift

router = APIRouter(prefix="/api/shifts", tags=["shifts"])


@router.post(
    "/start",
    response_model=Shift,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def start_shift(
    request: StartShiftRequest,
    use_case: StartShiftUseCase = Depends(get_start_shift_use_case),
) -> Shift:
    return await use_case.execute(request)


@router.post(
    "/end",
    response_model=Shift,
    responses={409: {"model": ErrorResponse}},
)
async def end_shift(
    request: EndShiftRequest,
    use_case: EndShiftUseCase = Depends(get_end_shift_use_case),
) -> Shift:
    """Close the active shift and record the cash variance."""
    return await use_case.execute(request)


@router.get("/status/{user_id}", response_model=ShiftStatusResponse)
async def shift_status(
    user_id: str,
    use_case: ShiftStatusUseCase = Depends(get_shift_status_use_case),
) -> ShiftStatusResponse:
    return await use_case.status(user_id)


@router.get(
    "/{shift_id}/report",
    response_model=ShiftReportResponse,
    responses={404: {"model": ErrorResponse}},
)
async def shift_report(
    shift_id: str,
    use_case: ShiftStatusUseCase = Depends(get_shift_status_use_case),
) -> ShiftReportResponse:
    """Z-report for an active or closed shift."""
    report = await use_case.report(shift_id)
    return use_case.to_response(report)
