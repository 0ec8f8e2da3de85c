"""Tests for the sync circuit breaker."""

import pytest

from kenpos.core.exceptions import CircuitBreakerOpenError
from kenpos.infrastructure.sync.resilience import BreakerState, CircuitBreakerState


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def breaker(clock) -> CircuitBreakerState:
    return CircuitBreakerState(
        name="backoffice", failure_threshold=2, cooldown_seconds=30, clock=clock
    )


class TestCircuitBreaker:
    def test_opens_at_threshold(self, breaker):
        breaker.record_failure()
        breaker.check()
        breaker.record_failure()
        assert breaker.is_open
        with pytest.raises(CircuitBreakerOpenError):
            breaker.check()

    def test_success_resets_count(self, breaker):
        breaker.record_failure()
        breaker.record_success()
        breaker.record_failure()
        assert breaker.state is BreakerState.CLOSED

    def test_trial_after_cooldown(self, breaker, clock):
        breaker.record_failure()
        breaker.record_failure()
        clock.now += 31
        breaker.check()
        assert breaker.state is BreakerState.HALF_OPEN

        breaker.record_success()
        assert breaker.state is BreakerState.CLOSED
        assert breaker.cooldown_remaining == 0

    def test_failed_trial_reopens(self, breaker, clock):
        breaker.record_failure()
        breaker.record_failure()
        clock.now += 31
        breaker.check()
        breaker.record_failure()
        assert breaker.is_open
        assert breaker.cooldown_remaining == 30
