# src/chetana/services/circuit_breaker.py
"""Circuit breaker guarding optional integrations."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class CircuitState(Enum):
    """Circuit breaker states.

    A tripped breaker stops calls to a failing dependency for a cool-down
    period, then lets a trial call through before closing again.
    """
    CLOSED = "closed"      # Normal operation - calls allowed
    OPEN = "open"          # Dependency failing - calls skipped
    HALF_OPEN = "half_open"  # Cool-down elapsed - trial calls allowed


@dataclass
class CircuitBreaker:
    """Failure counter with closed, open and half-open states."""

    failure_threshold: int = 5
    recovery_timeout: float = 120.0
    success_threshold: int = 1
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    _state: CircuitState = CircuitState.CLOSED
    _failure_count: int = 0
    _success_count: int = 0
    _last_failure_time: float = 0.0

    def is_open(self) -> bool:
        """Return True while calls should be skipped."""
        if self._state == CircuitState.OPEN:
            if self.clock() - self._last_failure_time >= self.recovery_timeout:
                self._state = CircuitState.HALF_OPEN
                self._success_count = 0
            return self._state == CircuitState.OPEN
        return False

    def allow_request(self) -> bool:
        """Return True if a call may be attempted now."""
        return not self.is_open()

    def record_success(self) -> None:
        """Record a successful call."""
        if self._state == CircuitState.HALF_OPEN:
            self._success_count += 1
            if self._success_count >= self.success_threshold:
                self._state = CircuitState.CLOSED
                self._failure_count = 0
        elif self._state == CircuitState.CLOSED:
            self._failure_count = 0

    def record_failure(self) -> None:
        """Record a failed call; a failure while half-open reopens immediately."""
        self._failure_count += 1
        self._last_failure_time = self.clock()

        if self._state == CircuitState.HALF_OPEN or self._failure_count >= self.failure_threshold:
            self._state = CircuitState.OPEN

    @property
    def state(self) -> CircuitState:
        """Current state, accounting for an elapsed cool-down."""
        self.is_open()
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count
