"""Core interfaces (ports) for dependency injection."""

from kenpos.core.interfaces.storage import Collection, IPersistenceStore, collection_name
from kenpos.core.interfaces.sync import IRemoteSyncEndpoint

__all__ = [
    "Collection",
    "IPersistenceStore",
    "collection_name",
    "IRemoteSyncEndpoint",
]
