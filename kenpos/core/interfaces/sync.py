"""Abstract interface for the remote sales endpoint."""

from abc import ABC, abstractmethod

from kenpos.core.entities.sale import Sale


class IRemoteSyncEndpoint(ABC):
    """Remote system that receives sales recorded while offline."""

    @abstractmethod
    async def push_sale(self, sale: Sale) -> bool:
        """Send one sale. Returns True once the remote has accepted it.

        Must be safe to call again for a sale the remote already holds.
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check whether the endpoint is reachable."""
        pass

    async def close(self) -> None:
        """Release network resources."""
        return None
