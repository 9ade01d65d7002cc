"""Unit tests for the fixed-window rate limiter."""

from datetime import datetime, timedelta, timezone

from kin.util.rate_limit import InMemoryRateLimiter


class FakeClock:
    """Controllable time source."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


class TestInMemoryRateLimiter:
    """Tests for InMemoryRateLimiter."""

    def test_allows_up_to_limit_then_rejects(self):
        """The (limit + 1)th request within the window should be rejected."""
        # Arrange
        clock = FakeClock()
        limiter = InMemoryRateLimiter(limit=3, window=timedelta(minutes=15), clock=clock)

        # Act
        decisions = [limiter.check_and_increment("a@example.com") for _ in range(4)]

        # Assert
        assert [d.allowed for d in decisions] == [True, True, True, False]
        assert decisions[2].count == 3
        assert decisions[3].retry_after_seconds == 15 * 60

    def test_rejection_does_not_increment(self):
        clock = FakeClock()
        limiter = InMemoryRateLimiter(limit=1, clock=clock)

        limiter.check_and_increment("k")
        limiter.check_and_increment("k")
        decision = limiter.check_and_increment("k")

        assert decision.count == 1

    def test_window_reset_after_elapsed(self):
        """The first request after the window should start a new count."""
        clock = FakeClock()
        limiter = InMemoryRateLimiter(limit=2, window=timedelta(minutes=15), clock=clock)
        limiter.check_and_increment("k")
        limiter.check_and_increment("k")
        assert not limiter.check_and_increment("k").allowed

        clock.now += timedelta(minutes=15)
        decision = limiter.check_and_increment("k")

        assert decision.allowed
        assert decision.count == 1

    def test_retry_after_counts_down(self):
        clock = FakeClock()
        limiter = InMemoryRateLimiter(limit=1, window=timedelta(minutes=15), clock=clock)
        limiter.check_and_increment("k")

        clock.now += timedelta(minutes=10)
        decision = limiter.check_and_increment("k")

        assert decision.retry_after_seconds == 5 * 60

    def test_keys_are_independent(self):
        clock = FakeClock()
        limiter = InMemoryRateLimiter(limit=1, clock=clock)

        assert limiter.check_and_increment("a").allowed
        assert limiter.check_and_increment("b").allowed
        assert not limiter.check_and_increment("a").allowed

    def test_reset_forgets_key(self):
        limiter = InMemoryRateLimiter(limit=1, clock=FakeClock())
        limiter.check_and_increment("k")

        limiter.reset("k")

        assert limiter.check_and_increment("k").allowed
