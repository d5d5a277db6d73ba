"""Async Reddit API client built on httpx.

This module provides the request pipeline every Reddit call goes through:
base-URL resolution, the token gate, the rate-limit gate, the network
exchange, the rate-limit update and JSON decoding.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

import httpx

from reddit_oauth.config import Settings, get_settings
from reddit_oauth.logging import bind_request, get_logger

from .auth.credentials import (
    ScriptCredential,
    StaticToken,
    WebCredential,
    credential_from_settings,
)
from .auth.manager import TokenManager
from .exceptions import (
    DecodeError,
    HttpError,
    RateLimitExceededError,
    RedditNetworkError,
    RequestDeadlineExceeded,
)
from .pagination import ListingPage, PageCallback, Paginator
from .rate_limit.limiter import RateLimiter

if TYPE_CHECKING:
    from loguru import Logger

    from .auth.token import Token

logger = get_logger(__name__)


class RedditClient:
    """Async Reddit API client for one session.

    A session has one credential, one token and one rate-limit budget.
    Without a credential the client is anonymous and talks to the public
    host instead of the OAuth host.

    Usage:
        credential = ScriptCredential(
            client_id="...", client_secret="...", username="...", password="..."
        )
        async with RedditClient(credential) as client:
            me = await client.fetch("api/v1/me")
            posts = await client.paginate("r/python/new", item_limit=250)

    Or without context manager:
        client = RedditClient(credential)
        me = await client.get("api/v1/me")
        await client.close()
    """

    def __init__(
        self,
        credential: ScriptCredential | WebCredential | StaticToken | None = None,
        *,
        settings: Settings | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            credential: How this session authenticates; None for an anonymous session
            settings: Optional settings (uses cached settings if not provided)
            user_agent: User-Agent header (defaults to settings.user_agent)
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
            http: Optional pre-built httpx.AsyncClient; the caller keeps ownership
        """
        self._settings = settings or get_settings()
        self._user_agent = user_agent or self._settings.user_agent

        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            transport=transport,
            timeout=self._settings.api.timeout_seconds,
        )

        self._rate_limiter = RateLimiter(self._settings.rate_limit)
        self._token_manager: TokenManager | None = None
        if credential is not None:
            self._token_manager = TokenManager(
                credential,
                self._http,
                user_agent=self._user_agent,
                api_config=self._settings.api,
                auth_config=self._settings.auth,
            )
        self._paginator = Paginator(self, self._settings.pagination)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        **kwargs: Any,
    ) -> RedditClient:
        """Build an authenticated client from REDDIT_* settings.

        Raises:
            AuthError: MISSING_CREDENTIALS if no credential is configured
        """
        settings = settings or get_settings()
        return cls(credential_from_settings(settings), settings=settings, **kwargs)

    @property
    def is_authenticated(self) -> bool:
        return self._token_manager is not None

    @property
    def base_url(self) -> str:
        """Host paths are resolved against (OAuth or public)."""
        api = self._settings.api
        return api.oauth_base_url if self.is_authenticated else api.public_base_url

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    @property
    def token_manager(self) -> TokenManager | None:
        """Token lifecycle manager (None for anonymous sessions)."""
        return self._token_manager

    @property
    def paginator(self) -> Paginator:
        return self._paginator

    async def close(self) -> None:
        """Close the underlying HTTP client (if this client created it)."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> RedditClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Request Pipeline
    # -------------------------------------------------------------------------
    async def fetch(
        self,
        path: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Send one request through the full pipeline and decode the JSON body.

        Args:
            path: API path relative to the session's base URL (e.g. "api/v1/me")
            method: HTTP method
            params: Query parameters
            data: Form body (POST endpoints)
            timeout: Seconds allowed for the token and rate-limit waits
                     (defaults to settings.api.request_deadline_seconds)

        Returns:
            Decoded JSON body (None for an empty 2xx body)

        Raises:
            HttpError: On a non-2xx status (RateLimitExceededError for 429)
            AuthError: If a valid token cannot be obtained
            DecodeError: If the body is not valid JSON
            RedditNetworkError: If the exchange fails below HTTP
            RequestDeadlineExceeded: If a gate wait outlasts the deadline
        """
        url, query = self._resolve(path, params)
        log = bind_request(method, path)

        if timeout is None:
            timeout = self._settings.api.request_deadline_seconds
        deadline = asyncio.get_running_loop().time() + timeout if timeout is not None else None

        response = await self._send(method, url, query, data, deadline, log)
        if response.status_code == 429 and self._settings.api.retry_on_429:
            # The budget was just resynchronized from this response's headers
            log.warning("Received 429 despite rate limiting; retrying once")
            response = await self._send(method, url, query, data, deadline, log)

        return self._handle_response(response, log)

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> Any:
        return await self.fetch(path, params=params, timeout=timeout)

    async def post(
        self,
        path: str,
        data: dict[str, Any] | None = None,
        *,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        return await self.fetch(path, method="POST", params=params, data=data, timeout=timeout)

    def _resolve(
        self,
        path: str,
        params: dict[str, Any] | None,
    ) -> tuple[str, dict[str, Any]]:
        """Resolve a path against the session host and normalize the query."""
        query = dict(params or {})
        if self._settings.api.raw_json:
            query.setdefault("raw_json", 1)

        if path.startswith(("http://", "https://")):
            return path, query

        relative = path.lstrip("/")
        if not self.is_authenticated:
            # The public host only serves JSON for *.json paths
            relative = relative.rstrip("/")
            if not relative.endswith(".json"):
                relative = f"{relative}.json"

        return str(httpx.URL(self.base_url).join(relative)), query

    async def _send(
        self,
        method: str,
        url: str,
        query: dict[str, Any],
        data: dict[str, Any] | None,
        deadline: float | None,
        log: Logger,
    ) -> httpx.Response:
        """Pass both gates, perform the exchange and record its rate limit headers."""
        headers = {"User-Agent": self._user_agent}

        token: Token | None = None
        if self._token_manager is not None:
            token = await self._token_manager.ensure_valid_token(timeout=_time_left(deadline))

        reserved = await self._rate_limiter.before_send(timeout=_time_left(deadline))

        try:
            if self._token_manager is not None and token is not None:
                if not token.is_valid():
                    log.debug("Token expired during rate limit wait; re-acquiring")
                    token = await self._token_manager.ensure_valid_token(
                        timeout=_time_left(deadline)
                    )
                headers["Authorization"] = f"bearer {token.access_token}"

            response = await self._http.request(
                method,
                url,
                params=query,
                data=data,
                headers=headers,
            )
        except httpx.HTTPError as e:
            self._rate_limiter.cancel_send(reserved=reserved)
            raise RedditNetworkError(f"{method} {url} failed: {e}") from e
        except BaseException:
            self._rate_limiter.cancel_send(reserved=reserved)
            raise

        self._rate_limiter.after_receive(response.headers, reserved=reserved)
        log.debug("{} {} -> {}", method, response.url.path, response.status_code)
        return response

    def _handle_response(self, response: httpx.Response, log: Logger) -> Any:
        """Classify the status and decode the body."""
        if response.status_code == 429:
            log.warning("Rate limit exceeded after resync")
            raise RateLimitExceededError(
                response.text,
                reset_at=self._rate_limiter.state.reset_at,
            )
        if not response.is_success:
            raise HttpError(response.status_code, response.text)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError("Response body is not valid JSON", body=response.text[:500]) from e

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------
    async def paginate(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        item_limit: int | None = None,
        on_page: PageCallback | None = None,
        *,
        page_size: int | None = None,
        timeout: float | None = None,
    ) -> list[Any]:
        """Collect a listing into one ordered list (see Paginator.paginate)."""
        return await self._paginator.paginate(
            endpoint,
            params,
            item_limit,
            on_page,
            page_size=page_size,
            timeout=timeout,
        )

    def iter_listing(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        *,
        item_limit: int | None = None,
        page_size: int | None = None,
        timeout: float | None = None,
    ) -> AsyncIterator[ListingPage[Any]]:
        """Iterate over listing pages lazily (for early termination)."""
        return self._paginator.iter_pages(
            endpoint,
            params,
            item_limit=item_limit,
            page_size=page_size,
            timeout=timeout,
        )


def _time_left(deadline: float | None) -> float | None:
    if deadline is None:
        return None
    left = deadline - asyncio.get_running_loop().time()
    if left <= 0:
        raise RequestDeadlineExceeded("Request deadline exceeded")
    return left
