"""Fixed-window rate limiter for extraction submissions."""

import math
import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class _Window:
    count: int
    reset_at: float
    blocked: bool = False


@dataclass
class RateDecision:
    allowed: bool
    reason: str = ""
    retry_after: int = 0


class RateLimiter:
    """
    Per-key attempt counter.

    A key gets max_attempts per window. The attempt after that blocks the key
    for block_seconds.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        window_seconds: float = 60.0,
        block_seconds: float = 900.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.block_seconds = block_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def check(self, key: str) -> RateDecision:
        """Record an attempt for key and decide whether it may proceed."""
        now = self._clock()
        window = self._windows.get(key)

        if window and window.blocked and now < window.reset_at:
            return RateDecision(
                allowed=False,
                reason="Too many requests. Please try again later.",
                retry_after=math.ceil(window.reset_at - now),
            )

        if window is None or now >= window.reset_at:
            self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
            return RateDecision(allowed=True)

        if window.count >= self.max_attempts:
            self._windows[key] = _Window(
                count=window.count + 1,
                reset_at=now + self.block_seconds,
                blocked=True,
            )
            return RateDecision(
                allowed=False,
                reason="Too many requests. Please wait before submitting again.",
                retry_after=math.ceil(self.block_seconds),
            )

        window.count += 1
        return RateDecision(allowed=True)

    def reset(self, key: str) -> None:
        self._windows.pop(key, None)

    def cleanup(self) -> None:
        """Drop expired, unblocked windows."""
        now = self._clock()
        expired = [
            k for k, w in self._windows.items() if now >= w.reset_at and not w.blocked
        ]
        for key in expired:
            del self._windows[key]
