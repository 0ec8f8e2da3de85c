"""Circuit breaker guarding the remote sync endpoint.

After ``failure_threshold`` consecutive failures the breaker opens and sync
pushes are refused until ``cooldown_seconds`` have passed. The first push
after the cooldown is a trial: success closes the breaker, failure reopens
it for another cooldown. Queued sales simply wait for the next pass.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from kenpos.config import get_logger
from kenpos.core.exceptions import CircuitBreakerOpenError

logger = get_logger(__name__)


class BreakerState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreakerState:
    name: str = "sync"
    failure_threshold: int = 3
    cooldown_seconds: int = 60
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    state: BreakerState = BreakerState.CLOSED
    failures: int = 0
    opened_at: float | None = None

    @property
    def is_open(self) -> bool:
        return self.state is BreakerState.OPEN

    @property
    def cooldown_remaining(self) -> float:
        if self.opened_at is None:
            return 0.0
        return max(0.0, self.cooldown_seconds - (self.clock() - self.opened_at))

    def check(self) -> None:
        """Allow a call or raise CircuitBreakerOpenError."""
        if self.state is not BreakerState.OPEN:
            return
        remaining = self.cooldown_remaining
        if remaining > 0:
            raise CircuitBreakerOpenError(self.name, remaining)
        self.state = BreakerState.HALF_OPEN
        logger.info("sync_breaker_half_open", endpoint=self.name)

    def record_failure(self) -> None:
        self.failures += 1
        if self.state is BreakerState.HALF_OPEN or self.failures >= self.failure_threshold:
            self._open()

    def record_success(self) -> None:
        if self.state is not BreakerState.CLOSED:
            logger.info("sync_breaker_closed", endpoint=self.name)
        self.state = BreakerState.CLOSED
        self.failures = 0
        self.opened_at = None

    def _open(self) -> None:
        if self.state is not BreakerState.OPEN:
            logger.warning(
                "sync_breaker_opened",
                endpoint=self.name,
                failures=self.failures,
                cooldown=self.cooldown_seconds,
            )
        self.state = BreakerState.OPEN
        self.opened_at = self.clock()
