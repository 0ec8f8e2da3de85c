"""
Connectivity tracking.

Sale completion reads ``is_online`` to choose between the primary sales
collection and the offline queue. Regaining connectivity schedules a sync
run; losing it asks the running sync to stop between records.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from kenpos.config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

SyncRunner = Callable[[asyncio.Event], Awaitable[Any]]


class ConnectivityState:
    """Online/offline flag with a reconnect hook."""

    def __init__(self, online: bool = True, on_reconnect: SyncRunner | None = None):
        self._online = online
        self._on_reconnect = on_reconnect
        self._cancel_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None
        self._run_lock = asyncio.Lock()

    @property
    def is_online(self) -> bool:
        return self._online

    @property
    def sync_task(self) -> asyncio.Task | None:
        return self._task

    def set_sync_runner(self, runner: SyncRunner | None) -> None:
        self._on_reconnect = runner

    def set_online(self, online: bool) -> asyncio.Task | None:
        """Record a connectivity change.

        Returns the scheduled sync task on an offline to online transition.
        Must be called from a running event loop when a runner is set.
        """
        if online == self._online:
            return None
        self._online = online

        if not online:
            logger.info("connectivity_lost")
            if self._cancel_event is not None:
                self._cancel_event.set()
            return None

        logger.info("connectivity_restored")
        if self._on_reconnect is None:
            return None

        self._cancel_event = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self._run(self._cancel_event))
        return self._task

    async def run_exclusive(self, work: Callable[[], Awaitable[T]]) -> T:
        """Run ``work`` once no sync walk is in progress."""
        async with self._run_lock:
            return await work()

    async def _run(self, cancel_event: asyncio.Event) -> Any:
        # One sync walk at a time; a walk cancelled while waiting never starts
        async with self._run_lock:
            if cancel_event.is_set() or self._on_reconnect is None:
                return None
            return await self._on_reconnect(cancel_event)


# Global connectivity state
_connectivity: ConnectivityState | None = None


def get_connectivity() -> ConnectivityState:
    global _connectivity
    if _connectivity is None:
        _connectivity = ConnectivityState()
    return _connectivity


def reset_connectivity() -> None:
    """Reset connectivity state (for testing)."""
    global _connectivity
    _connectivity = None
