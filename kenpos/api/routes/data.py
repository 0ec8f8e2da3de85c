"""Backup and restore endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from kenpos.api.dependencies import get_backup_restore_use_case
from kenpos.application.dto.responses import ErrorResponse, RestoreResponse
from kenpos.application.use_cases import BackupRestoreUseCase

router = APIRouter(prefix="/api/data", tags=["data"])


@router.get("/backup")
async def backup(
    user_id: str,
    use_case: BackupRestoreUseCase = Depends(get_backup_restore_use_case),
) -> dict[str, Any]:
    """Export every collection as one JSON document."""
    return await use_case.backup(user_id)


@router.post(
    "/restore",
    response_model=RestoreResponse,
    responses={400: {"model": ErrorResponse}},
)
async def restore(
    user_id: str,
    payload: Any = Body(...),
    use_case: BackupRestoreUseCase = Depends(get_backup_restore_use_case),
) -> RestoreResponse:
    """Replace the collections in the payload. Nothing is written if any record is invalid."""
    return RestoreResponse(restored=await use_case.restore(payload, user_id))
