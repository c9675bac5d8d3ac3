"""Request pacing primitives."""

from .rate_limiter import RateLimiter, WindowRateLimiter

__all__ = [
    "RateLimiter",
    "WindowRateLimiter",
]
