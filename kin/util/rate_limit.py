"""Fixed-window rate limiting.

The in-memory limiter is process-local: state lives in a dict owned by the
limiter instance, which the DI container holds for the lifetime of the app.
Multiple processes each keep their own counters.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import logfire


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate limit check."""

    allowed: bool
    count: int
    retry_after_seconds: int = 0


@dataclass
class _Window:
    started_at: datetime
    count: int


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RateLimiter(ABC):
    """Counts requests per key within a time window."""

    @abstractmethod
    def check_and_increment(self, key: str) -> RateLimitDecision:
        """Record a request for ``key`` unless the limit is already reached.

        Args:
            key: Throttling key (e.g. a lower-cased email)

        Returns:
            Decision; a rejected request does not increment the counter
        """
        pass

    @abstractmethod
    def reset(self, key: str) -> None:
        """Forget the window for ``key``."""
        pass


class InMemoryRateLimiter(RateLimiter):
    """Fixed-window limiter backed by a per-process dict.

    - First request for a key opens a window with count 1.
    - Requests inside an open window increment the count.
    - Once count reaches ``limit`` inside the window, requests are rejected.
    - The first request after the window has elapsed resets the count to 1.
    """

    def __init__(
        self,
        limit: int = 5,
        window: timedelta = timedelta(minutes=15),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize limiter.

        Args:
            limit: Maximum requests per window
            window: Window length
            clock: Source of the current time
        """
        self.limit = limit
        self.window = window
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def check_and_increment(self, key: str) -> RateLimitDecision:
        now = self._clock()
        current = self._windows.get(key)

        if current is None or now - current.started_at >= self.window:
            self._windows[key] = _Window(started_at=now, count=1)
            return RateLimitDecision(allowed=True, count=1)

        if current.count >= self.limit:
            remaining = current.started_at + self.window - now
            retry_after = max(1, int(remaining.total_seconds()))
            logfire.warn(
                "Rate limit exceeded",
                count=current.count,
                limit=self.limit,
                retry_after_seconds=retry_after,
            )
            return RateLimitDecision(
                allowed=False, count=current.count, retry_after_seconds=retry_after
            )

        current.count += 1
        return RateLimitDecision(allowed=True, count=current.count)

    def reset(self, key: str) -> None:
        self._windows.pop(key, None)
