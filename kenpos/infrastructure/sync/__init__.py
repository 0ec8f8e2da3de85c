"""Remote sync adapters."""

from kenpos.config import get_settings
from kenpos.core.interfaces.sync import IRemoteSyncEndpoint
from kenpos.infrastructure.sync.http_endpoint import HttpSyncEndpoint, NullSyncEndpoint
from kenpos.infrastructure.sync.resilience import CircuitBreakerState

# Singleton instance
_endpoint: IRemoteSyncEndpoint | None = None


def get_sync_endpoint() -> IRemoteSyncEndpoint:
    """Get the configured endpoint; a local no-op when no URL is set."""
    global _endpoint
    if _endpoint is None:
        if get_settings().sync.endpoint_url:
            _endpoint = HttpSyncEndpoint()
        else:
            _endpoint = NullSyncEndpoint()
    return _endpoint


async def close_sync_endpoint() -> None:
    global _endpoint
    if _endpoint is not None:
        await _endpoint.close()
        _endpoint = None


__all__ = [
    "CircuitBreakerState",
    "HttpSyncEndpoint",
    "NullSyncEndpoint",
    "get_sync_endpoint",
    "close_sync_endpoint",
]
