"""Request-count rate limiting over a resettable window."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Callable, Protocol, runtime_checkable

from ..models import RateLimitExceeded, RateLimitWindow

logger = logging.getLogger(__name__)


@runtime_checkable
class RateLimiter(Protocol):
    """Protocol for the limiter consulted around every request attempt.

    ``acquire`` runs before the network call and may block or raise;
    ``record`` runs after every attempt, whatever its outcome.
    """

    def acquire(self) -> None:
        """Wait (or fail) until another request may be sent."""
        ...

    def record(self) -> None:
        """Count one request attempt."""
        ...


class WindowRateLimiter:
    """Count requests and pause once a window's allowance is spent.

    The window is a count-then-reset period: once ``limit`` attempts have
    been recorded, the next ``acquire`` sleeps for whatever remains of
    ``window_seconds`` since the window started, then opens a new window.
    Rate limiting is inert until both ``limit`` and ``window_seconds`` are set.

    Not thread-safe; callers sharing one limiter must serialize access.
    """

    def __init__(
        self,
        limit: int | None = None,
        window_seconds: float | None = None,
        blocking: bool = True,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the limiter.

        Args:
            limit: Requests allowed per window.
            window_seconds: Window length in seconds.
            blocking: If True, sleep when at capacity. If False, raise
                RateLimitExceeded instead.
            clock: Monotonic time source.
            sleep: Function used to wait.
        """
        self._clock = clock
        self._sleep = sleep
        self._blocking = blocking
        self._window = RateLimitWindow(
            limit=None, window_seconds=None, count=0, window_start=clock()
        )
        if limit is not None or window_seconds is not None:
            self.configure(limit, window_seconds)

    def configure(self, limit: int | None, window_seconds: float | None) -> None:
        """Set the ceiling without resetting the current count.

        Args:
            limit: Requests allowed per window (>= 1), or None to disable.
            window_seconds: Window length in seconds (>= 0), or None to disable.
        """
        if limit is not None and limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds is not None and window_seconds < 0:
            raise ValueError("window_seconds must be >= 0")
        self._window.limit = limit
        self._window.window_seconds = window_seconds

    @property
    def enabled(self) -> bool:
        """Whether a ceiling is configured."""
        return self._window.enabled

    @property
    def window(self) -> RateLimitWindow:
        """Copy of the current window (for debugging)."""
        return replace(self._window)

    def _wait_time(self) -> float:
        elapsed = self._clock() - self._window.window_start
        return max(0.0, self._window.window_seconds - elapsed)  # type: ignore[operator]

    def _reset(self) -> None:
        self._window.count = 0
        self._window.window_start = self._clock()

    def acquire(self) -> None:
        """Block until the window admits another request.

        Raises:
            RateLimitExceeded: When non-blocking and the window is spent.
        """
        if not self._window.at_capacity:
            return

        wait_time = self._wait_time()
        if wait_time > 0:
            if not self._blocking:
                raise RateLimitExceeded(self._window.limit, retry_after=wait_time)  # type: ignore[arg-type]
            logger.debug(
                "Rate limit of %d per %ss reached, sleeping %.2fs",
                self._window.limit,
                self._window.window_seconds,
                wait_time,
            )
            self._sleep(wait_time)
        self._reset()

    def record(self) -> None:
        """Count one attempt, regardless of its outcome."""
        self._window.count += 1
