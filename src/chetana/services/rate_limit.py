# src/chetana/services/rate_limit.py
"""Sliding-window rate limiting for forum actions."""

from __future__ import annotations

import logging
import time
import uuid
from collections import deque
from collections.abc import Callable
from threading import Lock

import redis

from chetana.core.settings import settings
from chetana.services.circuit_breaker import CircuitBreaker
from chetana.services.errors import RateLimitExceededError

logger = logging.getLogger(__name__)

# How long to stay on the in-process window after a Redis failure.
REDIS_RETRY_SECONDS = 30.0


class SlidingWindowRateLimiter:
    """Allow at most ``max_actions`` per client within a rolling window.

    With a Redis URL the window is a sorted set per client shared by every
    instance; otherwise timestamps are kept in process memory and reset on
    restart. A Redis failure degrades to the in-memory window until the
    store has been quiet for ``REDIS_RETRY_SECONDS``.
    """

    def __init__(
        self,
        *,
        max_actions: int | None = None,
        window_seconds: float | None = None,
        redis_url: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_actions = max_actions or settings.rate_limit_max_actions
        self.window_seconds = float(window_seconds or settings.rate_limit_window_seconds)
        self._clock = clock
        self._lock = Lock()
        self._actions: dict[str, deque[float]] = {}
        self._last_sweep = clock()
        self._redis: redis.Redis | None = None
        if redis_url:
            self._redis = redis.Redis.from_url(redis_url)
        self.redis_breaker = CircuitBreaker(
            failure_threshold=1,
            recovery_timeout=REDIS_RETRY_SECONDS,
            clock=clock,
        )

    def hit(self, client_key: str) -> bool:
        """Record an action for ``client_key``; return False if it is over budget."""
        now = self._clock()
        if self._redis is not None and self.redis_breaker.allow_request():
            try:
                allowed = self._hit_redis(client_key, now)
            except redis.RedisError:
                self.redis_breaker.record_failure()
                logger.warning("Rate limit store unavailable; using in-process window")
            else:
                self.redis_breaker.record_success()
                return allowed

        cutoff = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            actions = self._actions.setdefault(client_key, deque())
            while actions and actions[0] <= cutoff:
                actions.popleft()
            if len(actions) >= self.max_actions:
                return False
            actions.append(now)
            return True

    def _sweep(self, cutoff: float) -> None:
        """Drop clients with no actions left inside the window."""
        stale = [
            key for key, actions in self._actions.items() if not actions or actions[-1] <= cutoff
        ]
        for key in stale:
            del self._actions[key]

    def _hit_redis(self, client_key: str, now: float) -> bool:
        assert self._redis is not None
        key = f"ratelimit:forum:{client_key}"
        pipe = self._redis.pipeline()
        pipe.zremrangebyscore(key, 0, now - self.window_seconds)
        pipe.zcard(key)
        _, count = pipe.execute()
        if int(count) >= self.max_actions:
            return False

        pipe = self._redis.pipeline()
        pipe.zadd(key, {f"{now}:{uuid.uuid4().hex}": now})
        pipe.expire(key, int(self.window_seconds) + 1)
        pipe.execute()
        return True

    def check(self, client_key: str) -> None:
        """Record an action and raise ``RateLimitExceededError`` when over budget."""
        if not self.hit(client_key):
            logger.info("Rate limit exceeded for %s", client_key)
            raise RateLimitExceededError()

    def reset(self) -> None:
        """Forget in-process history."""
        with self._lock:
            self._actions.clear()

    @property
    def tracked_clients(self) -> int:
        """Number of clients held in the in-process window."""
        with self._lock:
            return len(self._actions)


_limiter: SlidingWindowRateLimiter | None = None


def get_rate_limiter() -> SlidingWindowRateLimiter:
    """Return the shared limiter for forum actions."""
    global _limiter
    if _limiter is None:
        _limiter = SlidingWindowRateLimiter(redis_url=settings.redis_url)
    return _limiter
