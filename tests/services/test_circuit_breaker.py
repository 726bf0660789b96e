# tests/services/test_circuit_breaker.py
"""Circuit breaker state transitions."""

from chetana.services.circuit_breaker import CircuitBreaker, CircuitState


class FakeClock:
    def __init__(self) -> None:
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value


def test_opens_after_threshold_failures() -> None:
    breaker = CircuitBreaker(failure_threshold=3, recovery_timeout=60, clock=FakeClock())

    breaker.record_failure()
    breaker.record_failure()
    assert breaker.state is CircuitState.CLOSED
    assert breaker.allow_request()

    breaker.record_failure()
    assert breaker.state is CircuitState.OPEN
    assert not breaker.allow_request()


def test_success_resets_failure_count_while_closed() -> None:
    breaker = CircuitBreaker(failure_threshold=3, clock=FakeClock())

    breaker.record_failure()
    breaker.record_failure()
    breaker.record_success()

    assert breaker.failure_count == 0
    breaker.record_failure()
    assert breaker.state is CircuitState.CLOSED


def test_half_open_after_cool_down_then_closes_on_success() -> None:
    clock = FakeClock()
    breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=120, clock=clock)
    breaker.record_failure()

    clock.value += 119
    assert breaker.is_open()

    clock.value += 1
    assert not breaker.is_open()
    assert breaker.state is CircuitState.HALF_OPEN

    breaker.record_success()
    assert breaker.state is CircuitState.CLOSED
    assert breaker.failure_count == 0


def test_failure_while_half_open_reopens() -> None:
    clock = FakeClock()
    breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=10, clock=clock)
    for _ in range(5):
        breaker.record_failure()

    clock.value += 10
    assert breaker.state is CircuitState.HALF_OPEN

    breaker.record_failure()
    assert breaker.state is CircuitState.OPEN
    assert not breaker.allow_request()
