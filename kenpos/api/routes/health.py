"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from kenpos import __version__
from kenpos.api.dependencies import get_connectivity_state, get_store
from kenpos.application.connectivity import ConnectivityState
from kenpos.application.dto.responses import HealthResponse
from kenpos.config import get_logger
from kenpos.core.exceptions import StorageError
from kenpos.core.interfaces import Collection, IPersistenceStore

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(
    store: IPersistenceStore = Depends(get_store),
    connectivity: ConnectivityState = Depends(get_connectivity_state),
) -> HealthResponse:
    """
    Basic health check.

    Returns service status, uptime, connectivity and whether the store
    answers a read.
    """
    database = "ok"
    try:
        await store.get(Collection.CUSTOMERS, "__health__")
    except StorageError as e:
        logger.warning("health_database_failed", error=str(e))
        database = "unavailable"

    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        online=connectivity.is_online,
        database=database,
    )
