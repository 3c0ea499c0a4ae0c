"""Tests for the conversion rate limiter."""

from copyembed.ratelimit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestRateLimiter:
    """Tests for RateLimiter."""

    def test_first_call_allowed(self):
        limiter = RateLimiter(0.5, clock=FakeClock())
        assert limiter.try_acquire() is True

    def test_rejects_calls_within_interval(self):
        """A second call 100ms later is refused."""
        clock = FakeClock()
        limiter = RateLimiter(0.5, clock=clock)
        limiter.try_acquire()

        clock.now += 0.1

        assert limiter.try_acquire() is False
        assert abs(limiter.remaining() - 0.4) < 1e-9

    def test_allows_after_interval(self):
        clock = FakeClock()
        limiter = RateLimiter(0.5, clock=clock)
        limiter.try_acquire()

        clock.now += 0.5

        assert limiter.try_acquire() is True

    def test_rejected_call_does_not_extend_wait(self):
        """Only accepted calls reset the interval."""
        clock = FakeClock()
        limiter = RateLimiter(0.5, clock=clock)
        limiter.try_acquire()
        clock.now += 0.3
        limiter.try_acquire()
        clock.now += 0.2

        assert limiter.try_acquire() is True

    def test_remaining_zero_before_first_call(self):
        assert RateLimiter(0.5).remaining() == 0.0
