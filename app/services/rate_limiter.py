# /app/services/rate_limiter.py

import time
from typing import Callable, Optional


class CooldownRateLimiter:
    """
    Remembers the last upstream failure on one call path and suppresses that
    path until a fixed cooldown has elapsed.

    One instance is shared by every request in the process (it lives in the
    app's dependency set). Reads and writes are not synchronised; the flag is
    advisory, so a request racing past it at worst makes one extra attempt.
    """

    def __init__(self, cooldown_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._is_limited = False
        self._limited_at: Optional[float] = None

    def is_suppressed(self) -> bool:
        if not self._is_limited or self._limited_at is None:
            return False
        if self._clock() - self._limited_at >= self.cooldown_seconds:
            # Cooldown over; let the next request try again.
            self.reset()
            return False
        return True

    def record_failure(self) -> None:
        self._is_limited = True
        self._limited_at = self._clock()

    def reset(self) -> None:
        self._is_limited = False
        self._limited_at = None

    def seconds_remaining(self) -> float:
        if not self._is_limited or self._limited_at is None:
            return 0.0
        return max(0.0, self.cooldown_seconds - (self._clock() - self._limited_at))
