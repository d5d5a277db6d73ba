"""Reddit API client module.

This module provides:
- RedditClient: Async request pipeline (token gate, rate-limit gate, JSON decoding)
- Credentials & tokens: ScriptCredential, WebCredential, StaticToken, TokenManager
- Rate limiting: RateLimiter, RateLimitState
- Listings: Paginator, ListingPage
- Endpoints: RedditAPI
"""

from .api import RedditAPI
from .auth import (
    Credential,
    ScriptCredential,
    StaticToken,
    Token,
    TokenManager,
    TokenState,
    WebCredential,
    credential_from_settings,
    parse_credential,
)
from .client import RedditClient
from .exceptions import (
    AuthError,
    AuthErrorReason,
    DecodeError,
    HttpError,
    RateLimitExceededError,
    RedditAPIError,
    RedditClientError,
    RedditNetworkError,
    RedditRetryableError,
    RequestDeadlineExceeded,
)
from .pagination import ListingPage, PageCallback, Paginator
from .rate_limit import RateLimiter, RateLimitState

__all__ = [
    # Client
    "RedditAPI",
    "RedditClient",
    # Exceptions
    "AuthError",
    "AuthErrorReason",
    "DecodeError",
    "HttpError",
    "RateLimitExceededError",
    "RedditAPIError",
    "RedditClientError",
    "RedditNetworkError",
    "RedditRetryableError",
    "RequestDeadlineExceeded",
    # Auth
    "Credential",
    "ScriptCredential",
    "StaticToken",
    "Token",
    "TokenManager",
    "TokenState",
    "WebCredential",
    "credential_from_settings",
    "parse_credential",
    # Rate limiting
    "RateLimitState",
    "RateLimiter",
    # Listings
    "ListingPage",
    "PageCallback",
    "Paginator",
]
