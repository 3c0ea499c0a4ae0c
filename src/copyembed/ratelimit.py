"""Minimum interval between conversions."""

import time


class RateLimiter:
    """Refuse calls that arrive less than min_interval seconds apart.

    Re-encoding every image of a large note is expensive; hosts that convert
    on a hotkey or on file events use this to drop repeated requests.
    """

    def __init__(self, min_interval: float = 0.5, clock=time.monotonic):
        self.min_interval = min_interval
        self._clock = clock
        self._last: float | None = None

    def try_acquire(self) -> bool:
        """Record a call and return True, or return False if too soon."""
        now = self._clock()
        if self._last is not None and now - self._last < self.min_interval:
            return False
        self._last = now
        return True

    def remaining(self) -> float:
        """Seconds until the next call would be accepted."""
        if self._last is None:
            return 0.0
        return max(0.0, self.min_interval - (self._clock() - self._last))
