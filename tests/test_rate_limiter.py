"""Tests for rate limiter."""

import time

import pytest

from httpkit import RateLimiter, RateLimitExceeded, WindowRateLimiter


class TestWindowRateLimiter:
    """Tests for WindowRateLimiter."""

    def test_inert_by_default(self, fake_clock):
        """Test limiter without ceiling never waits."""
        limiter = WindowRateLimiter(clock=fake_clock, sleep=fake_clock.sleep)
        for _ in range(100):
            limiter.acquire()
            limiter.record()

        assert limiter.enabled is False
        assert fake_clock.sleeps == []
        assert limiter.window.count == 100

    def test_inert_with_only_limit(self, fake_clock):
        """Test both limit and window are needed."""
        limiter = WindowRateLimiter(limit=1, clock=fake_clock, sleep=fake_clock.sleep)
        for _ in range(3):
            limiter.acquire()
            limiter.record()
        assert fake_clock.sleeps == []

    def test_idle_does_not_wait(self, fake_clock):
        """Test requests under the limit pass immediately."""
        limiter = WindowRateLimiter(3, 10, clock=fake_clock, sleep=fake_clock.sleep)
        for _ in range(3):
            limiter.acquire()
            limiter.record()
        assert fake_clock.sleeps == []

    def test_at_capacity_sleeps_remaining_window(self, fake_clock):
        """Test the request after the limit sleeps for the rest of the window."""
        limiter = WindowRateLimiter(2, 10, clock=fake_clock, sleep=fake_clock.sleep)
        limiter.acquire()
        limiter.record()
        fake_clock.advance(3)
        limiter.acquire()
        limiter.record()

        limiter.acquire()
        assert fake_clock.sleeps == [pytest.approx(7)]

    def test_reset_after_wait(self, fake_clock):
        """Test window resets count and start after waiting."""
        limiter = WindowRateLimiter(1, 10, clock=fake_clock, sleep=fake_clock.sleep)
        limiter.acquire()
        limiter.record()
        limiter.acquire()

        window = limiter.window
        assert window.count == 0
        assert window.window_start == fake_clock.now

    def test_expired_window_resets_without_sleep(self, fake_clock):
        """Test an elapsed window resets immediately."""
        limiter = WindowRateLimiter(1, 10, clock=fake_clock, sleep=fake_clock.sleep)
        limiter.acquire()
        limiter.record()
        fake_clock.advance(15)

        limiter.acquire()
        assert fake_clock.sleeps == []
        assert limiter.window.count == 0

    def test_limit_one_reenters_capacity(self, fake_clock):
        """Test with limit 1 every second request waits a full window."""
        limiter = WindowRateLimiter(1, 5, clock=fake_clock, sleep=fake_clock.sleep)
        for _ in range(3):
            limiter.acquire()
            limiter.record()
        assert fake_clock.sleeps == [pytest.approx(5), pytest.approx(5)]

    def test_count_in_bounds_after_check(self, fake_clock):
        """Test count stays within [0, limit] right after every check."""
        limiter = WindowRateLimiter(3, 1, clock=fake_clock, sleep=fake_clock.sleep)
        for _ in range(10):
            limiter.acquire()
            assert 0 <= limiter.window.count < 3
            limiter.record()

    def test_non_blocking_raises(self, fake_clock):
        """Test fail-fast mode raises instead of sleeping."""
        limiter = WindowRateLimiter(
            1, 10, blocking=False, clock=fake_clock, sleep=fake_clock.sleep
        )
        limiter.acquire()
        limiter.record()
        fake_clock.advance(4)

        with pytest.raises(RateLimitExceeded) as exc_info:
            limiter.acquire()

        assert exc_info.value.retry_after == pytest.approx(6)
        assert exc_info.value.limit == 1
        assert fake_clock.sleeps == []

    def test_configure_validation(self):
        """Test invalid ceilings are rejected."""
        limiter = WindowRateLimiter()
        with pytest.raises(ValueError):
            limiter.configure(0, 10)
        with pytest.raises(ValueError):
            limiter.configure(1, -1)

    def test_configure_keeps_count(self, fake_clock):
        """Test configuring later counts earlier requests."""
        limiter = WindowRateLimiter(clock=fake_clock, sleep=fake_clock.sleep)
        limiter.record()
        limiter.configure(1, 10)

        limiter.acquire()
        assert fake_clock.sleeps == [pytest.approx(10)]

    def test_window_is_a_copy(self):
        """Test mutating the returned window does not affect the limiter."""
        limiter = WindowRateLimiter(1, 10)
        window = limiter.window
        window.count = 99
        assert limiter.window.count == 0

    def test_satisfies_protocol(self):
        """Test the limiter implements the RateLimiter protocol."""
        assert isinstance(WindowRateLimiter(), RateLimiter)

    def test_real_sleep(self):
        """Test blocking with the real clock."""
        limiter = WindowRateLimiter(1, 0.2)
        limiter.acquire()
        limiter.record()

        start = time.monotonic()
        limiter.acquire()
        elapsed = time.monotonic() - start

        assert elapsed >= 0.15
