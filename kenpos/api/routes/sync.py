"""Offline sync and connectivity endpoints."""

from fastapi import APIRouter, Depends

from kenpos.api.dependencies import get_connectivity_state, get_sync_use_case
from kenpos.application.connectivity import ConnectivityState
from kenpos.application.dto.requests import ConnectivityRequest
from kenpos.application.dto.responses import SyncResponse, SyncStatusResponse
from kenpos.application.use_cases import SyncOfflineSalesUseCase

router = APIRouter(prefix="/api/sync", tags=["sync"])


@router.post("/run", response_model=SyncResponse)
async def run_sync(
    use_case: SyncOfflineSalesUseCase = Depends(get_sync_use_case),
    connectivity: ConnectivityState = Depends(get_connectivity_state),
) -> SyncResponse:
    """Push every queued sale once, after any reconnect walk in progress."""
    report = await connectivity.run_exclusive(use_case.execute)
    return use_case.to_response(report)


@router.get("/status", response_model=SyncStatusResponse)
async def sync_status(
    use_case: SyncOfflineSalesUseCase = Depends(get_sync_use_case),
    connectivity: ConnectivityState = Depends(get_connectivity_state),
) -> SyncStatusResponse:
    return SyncStatusResponse(
        online=connectivity.is_online,
        queued_count=await use_case.pending_count(),
    )


@router.put("/connectivity", response_model=SyncStatusResponse)
async def set_connectivity(
    request: ConnectivityRequest,
    use_case: SyncOfflineSalesUseCase = Depends(get_sync_use_case),
    connectivity: ConnectivityState = Depends(get_connectivity_state),
) -> SyncStatusResponse:
    """Report a connectivity change; coming online starts a sync in the background."""
    connectivity.set_online(request.online)
    return SyncStatusResponse(
        online=connectivity.is_online,
        queued_count=await use_case.pending_count(),
    )
