"""Header-driven rate limiting for one Reddit session.

The limiter gates every outgoing request. While budget remains it lets
requests through immediately and spends one unit locally; the server
value replaces the local guess on the next response. Once the budget is
exhausted, callers are suspended until the window resets, a single probe
request is allowed through, and everyone else waits for that probe's
headers before the budget is consulted again.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from reddit_oauth.config import RateLimitConfig, get_settings
from reddit_oauth.logging import get_logger
from reddit_oauth.reddit.exceptions import RequestDeadlineExceeded

from .schemas import RateLimitState

logger = get_logger(__name__)


class RateLimiter:
    """Tracks one session's request budget and suspends callers when it runs out.

    Usage:
        limiter = RateLimiter()

        reserved = await limiter.before_send()
        response = await http.get(url)
        limiter.after_receive(response.headers, reserved=reserved)

    State is owned by the limiter; it is only written by before_send(),
    after_receive() and cancel_send().
    """

    def __init__(self, config: RateLimitConfig | None = None) -> None:
        """Initialize the limiter with an optimistic budget.

        Args:
            config: Optional rate limit configuration (uses settings if not provided)
        """
        self._config = config or get_settings().rate_limit
        self._state = RateLimitState.initial(self._config.initial_remaining)
        self._constrained = True
        self._probe_in_flight = False
        self._updated = asyncio.Event()
        self._exhaustion_logged = False

    @property
    def state(self) -> RateLimitState:
        """Current budget (a snapshot; mutating it has no effect)."""
        return self._state.model_copy()

    @property
    def is_constrained(self) -> bool:
        """False when the last response carried no usable rate limit headers."""
        return self._constrained

    # -------------------------------------------------------------------------
    # Gate
    # -------------------------------------------------------------------------
    async def before_send(self, timeout: float | None = None) -> bool:
        """Suspend until the budget allows one more request.

        Args:
            timeout: Seconds the caller is willing to wait (None = unbounded)

        Returns:
            True if this is the one send let through after exhaustion; the caller
            must hand the flag back to after_receive() or cancel_send()

        Raises:
            RequestDeadlineExceeded: If the wait cannot finish within timeout
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout if timeout is not None else None

        while True:
            if not self._constrained:
                return False

            if self._state.remaining > 0:
                self._state = self._state.decremented()
                return False

            if self._probe_in_flight:
                await self._wait_for_update(deadline)
                continue

            delay = self._state.seconds_until_reset
            if delay > 0:
                capped = delay > self._config.max_wait_seconds
                delay = min(delay, self._config.max_wait_seconds)
                if not self._exhaustion_logged:
                    logger.info("Rate limit reached, waiting {:.1f}s for reset", delay)
                    self._exhaustion_logged = True
                await self._sleep(delay, deadline)
                # A skewed reset_at must not hold the session forever
                if capped and self._state.remaining == 0 and not self._probe_in_flight:
                    self._probe_in_flight = True
                    return True
                continue

            self._probe_in_flight = True
            return True

    def after_receive(self, headers: Mapping[str, str], *, reserved: bool = False) -> None:
        """Update the budget from a completed exchange's headers.

        Runs for error responses too; a missing or unparseable header set
        leaves the session unconstrained until headers reappear.

        Args:
            headers: Response headers
            reserved: The value before_send() returned for this exchange; only the
                reserved send's own response releases the waiters held behind it
        """
        if reserved:
            self._probe_in_flight = False
        try:
            if not self._config.track_from_headers:
                return

            normalized = {key.lower(): value for key, value in headers.items()}
            state = RateLimitState.from_response_headers(normalized)
            if state is None:
                logger.debug("No usable rate limit headers; treating budget as unconstrained")
                self._constrained = False
                return

            self._state = state
            self._constrained = True
            if state.remaining > 0:
                self._exhaustion_logged = False
        finally:
            self._notify()

    def cancel_send(self, *, reserved: bool = False) -> None:
        """Release a send slot whose exchange produced no response."""
        if reserved and self._probe_in_flight:
            self._probe_in_flight = False
            self._notify()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------
    def _notify(self) -> None:
        self._updated.set()
        self._updated = asyncio.Event()

    async def _wait_for_update(self, deadline: float | None) -> None:
        event = self._updated
        remaining = self._remaining_until(deadline)
        try:
            await asyncio.wait_for(event.wait(), timeout=remaining)
        except TimeoutError:
            raise RequestDeadlineExceeded(
                "Deadline exceeded while waiting for rate limit probe"
            ) from None

    async def _sleep(self, delay: float, deadline: float | None) -> None:
        remaining = self._remaining_until(deadline)
        if remaining is not None and delay > remaining:
            raise RequestDeadlineExceeded(
                f"Rate limit resets in {delay:.1f}s, beyond the {remaining:.1f}s deadline"
            )
        await asyncio.sleep(delay)

    @staticmethod
    def _remaining_until(deadline: float | None) -> float | None:
        if deadline is None:
            return None
        remaining = deadline - asyncio.get_running_loop().time()
        if remaining <= 0:
            raise RequestDeadlineExceeded("Deadline exceeded before the request was sent")
        return remaining

    def to_dict(self) -> dict[str, Any]:
        """Export current state as dictionary (for logging/CLI).

        Returns:
            Dict with the budget and whether it is enforced
        """
        return {
            "constrained": self._constrained,
            "remaining": self._state.remaining,
            "used": self._state.used,
            "reset_at": self._state.reset_at.isoformat(),
            "seconds_until_reset": round(self._state.seconds_until_reset, 2),
            "probe_in_flight": self._probe_in_flight,
        }
