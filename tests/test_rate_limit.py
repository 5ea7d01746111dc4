"""Tests for the extraction rate limiter."""

import pytest

from braindump.core.rate_limit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(max_attempts=3, window_seconds=60, block_seconds=900, clock=clock)


class TestRateLimiter:
    def test_allows_up_to_max(self, limiter):
        assert all(limiter.check("u").allowed for _ in range(3))

    def test_blocks_after_max(self, limiter):
        for _ in range(3):
            limiter.check("u")
        decision = limiter.check("u")
        assert not decision.allowed
        assert decision.retry_after == 900

    def test_block_outlasts_window(self, limiter, clock):
        for _ in range(4):
            limiter.check("u")
        clock.now += 120
        decision = limiter.check("u")
        assert not decision.allowed
        assert decision.retry_after == 780

    def test_block_expires(self, limiter, clock):
        for _ in range(4):
            limiter.check("u")
        clock.now += 901
        assert limiter.check("u").allowed

    def test_window_resets(self, limiter, clock):
        for _ in range(3):
            limiter.check("u")
        clock.now += 61
        assert limiter.check("u").allowed

    def test_keys_are_independent(self, limiter):
        for _ in range(4):
            limiter.check("a")
        assert limiter.check("b").allowed

    def test_reset(self, limiter):
        for _ in range(4):
            limiter.check("u")
        limiter.reset("u")
        assert limiter.check("u").allowed

    def test_cleanup_drops_expired_windows(self, limiter, clock):
        limiter.check("a")
        for _ in range(4):
            limiter.check("b")
        clock.now += 61
        limiter.cleanup()
        assert set(limiter._windows) == {"b"}
