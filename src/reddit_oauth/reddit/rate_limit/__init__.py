"""Rate limiting for the Reddit API.

Tracks the per-session budget reported in x-ratelimit-* response
headers and suspends requests once it is exhausted.
"""

from .limiter import RateLimiter
from .schemas import RateLimitState

__all__ = [
    "RateLimitState",
    "RateLimiter",
]
