"""Pydantic schemas for Reddit rate limit data.

Reddit reports the per-client budget on every response:
- x-ratelimit-remaining: requests left in the window (may be fractional)
- x-ratelimit-used: requests made in the window
- x-ratelimit-reset: seconds until the window resets

See: https://support.reddithelp.com/hc/en-us/articles/16160319875092
"""

import math
from datetime import UTC, datetime, timedelta
from typing import Self

from pydantic import BaseModel, Field

HEADER_REMAINING = "x-ratelimit-remaining"
HEADER_USED = "x-ratelimit-used"
HEADER_RESET = "x-ratelimit-reset"


class RateLimitState(BaseModel):
    """Remaining budget and reset instant for one session."""

    remaining: int = Field(ge=0, description="Requests remaining in current window")
    reset_at: datetime = Field(description="UTC datetime when the window resets")
    used: int | None = Field(default=None, ge=0, description="Requests used in current window")

    @property
    def seconds_until_reset(self) -> float:
        """Seconds until the window resets (0 if already past)."""
        delta = self.reset_at - datetime.now(UTC)
        return max(0.0, delta.total_seconds())

    @property
    def is_exhausted(self) -> bool:
        return self.remaining == 0

    def decremented(self) -> Self:
        """Copy with one request optimistically spent."""
        return self.model_copy(update={"remaining": max(0, self.remaining - 1)})

    @classmethod
    def initial(cls, remaining: int) -> Self:
        """Optimistic state used before any response has been seen."""
        return cls(remaining=remaining, reset_at=datetime.now(UTC))

    @classmethod
    def from_response_headers(
        cls,
        headers: dict[str, str],
        now: datetime | None = None,
    ) -> Self | None:
        """Parse from HTTP response headers.

        Args:
            headers: Response headers (lower-case keys)
            now: Reference instant for the relative reset value

        Returns:
            RateLimitState, or None when the headers are missing or unparseable
        """
        raw_remaining = headers.get(HEADER_REMAINING)
        raw_reset = headers.get(HEADER_RESET)
        if raw_remaining is None or raw_reset is None:
            return None

        try:
            remaining = float(raw_remaining)
            reset_seconds = float(raw_reset)
            raw_used = headers.get(HEADER_USED)
            used = int(float(raw_used)) if raw_used is not None else None
        except ValueError:
            return None

        if not (math.isfinite(remaining) and math.isfinite(reset_seconds)):
            return None

        reference = now or datetime.now(UTC)
        return cls(
            remaining=max(0, math.floor(remaining)),
            reset_at=reference + timedelta(seconds=max(0.0, reset_seconds)),
            used=max(0, used) if used is not None else None,
        )
