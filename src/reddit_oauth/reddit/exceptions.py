"""Reddit client exceptions."""

from datetime import datetime
from enum import StrEnum


class RedditClientError(Exception):
    """Base exception for Reddit client errors."""

    pass


class RedditRetryableError(RedditClientError):
    """Base class for errors the caller may retry.

    The client never retries these on its own (except a single 429
    retry); they are raised so the caller can decide.
    """

    pass


class AuthErrorReason(StrEnum):
    """Why a token could not be produced."""

    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_CREDENTIALS = "invalid_credentials"
    REFRESH_TOKEN_MISSING = "refresh_token_missing"
    NETWORK_ERROR = "network_error"


class AuthError(RedditClientError):
    """Raised when a valid token cannot be obtained."""

    def __init__(self, reason: AuthErrorReason, message: str | None = None) -> None:
        super().__init__(message or reason.value.replace("_", " "))
        self.reason = reason

    @property
    def retryable(self) -> bool:
        """Only transport failures during a grant are worth retrying."""
        return self.reason is AuthErrorReason.NETWORK_ERROR


class HttpError(RedditClientError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status: int, body: str, message: str | None = None) -> None:
        super().__init__(message or f"Reddit API error ({status})")
        self.status = status
        self.body = body


class RateLimitExceededError(HttpError, RedditRetryableError):
    """Raised when a 429 survives the single resynchronizing retry."""

    def __init__(self, body: str, reset_at: datetime | None = None) -> None:
        super().__init__(429, body, "Reddit rate limit exceeded")
        self.reset_at = reset_at


class DecodeError(RedditClientError):
    """Raised when a response body is not the JSON shape expected."""

    def __init__(self, message: str, body: str = "") -> None:
        super().__init__(message)
        self.body = body


class RedditNetworkError(RedditRetryableError):
    """Raised when a resource request fails below HTTP (timeout, DNS, reset)."""

    pass


class RequestDeadlineExceeded(RedditClientError):
    """Raised when a token or rate-limit wait would outlast the caller's deadline."""

    pass


class RedditAPIError(RedditClientError):
    """Raised when a 2xx ``api_type=json`` response reports errors in its body.

    Reddit answers form endpoints (submit, comment, compose) with
    ``{"json": {"errors": [[code, message, field], ...]}}``.
    """

    def __init__(self, errors: list[list[str]]) -> None:
        summary = "; ".join(": ".join(str(part) for part in error[:2]) for error in errors)
        super().__init__(f"Reddit rejected the request: {summary}")
        self.errors = errors
