"""OAuth2 token lifecycle for one Reddit session.

The manager owns the session's credential and its current token. Callers
ask for a valid token before every request; when the held token is absent
or about to expire, exactly one grant call is made and every concurrent
caller awaits that same call.

Grant flows:
- script: password grant, repeated on every expiry
- web: refresh-token grant
- static: no grant possible; expiry is terminal
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

import httpx
from pydantic import ValidationError

from reddit_oauth.config import ApiConfig, AuthConfig, get_settings
from reddit_oauth.logging import get_logger
from reddit_oauth.reddit.exceptions import (
    AuthError,
    AuthErrorReason,
    RequestDeadlineExceeded,
)

from .credentials import ScriptCredential, StaticToken, WebCredential
from .token import Token, TokenGrantResponse

logger = get_logger(__name__)

TokenCallback = Callable[[Token], Awaitable[None] | None]


class TokenState(StrEnum):
    """Where the session is in its token lifecycle."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class TokenManager:
    """Keeps one session supplied with a valid bearer token.

    Usage:
        async with httpx.AsyncClient() as http:
            manager = TokenManager(credential, http)
            token = await manager.ensure_valid_token()
            headers = {"Authorization": f"bearer {token.access_token}"}

    The token is only ever written by the grant performed inside
    ensure_valid_token(); there is no public setter.
    """

    def __init__(
        self,
        credential: ScriptCredential | WebCredential | StaticToken,
        http: httpx.AsyncClient,
        *,
        user_agent: str | None = None,
        api_config: ApiConfig | None = None,
        auth_config: AuthConfig | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            credential: How this session authenticates (fixed for its lifetime)
            http: HTTP client used for grant requests
            user_agent: User-Agent for grant requests (uses settings if not provided)
            api_config: Optional API configuration (uses settings if not provided)
            auth_config: Optional auth configuration (uses settings if not provided)
        """
        settings = get_settings()
        self._credential = credential
        self._http = http
        self._user_agent = user_agent or settings.user_agent
        self._api_config = api_config or settings.api
        self._auth_config = auth_config or settings.auth

        self._token: Token | None = self._initial_token(credential)
        self._inflight: asyncio.Task[Token] | None = None
        self._grant_count = 0

        self._callbacks: list[TokenCallback] = []
        self._callback_tasks: set[asyncio.Task[None]] = set()  # Prevent task GC

    @staticmethod
    def _initial_token(
        credential: ScriptCredential | WebCredential | StaticToken,
    ) -> Token | None:
        if isinstance(credential, StaticToken):
            return Token(access_token=credential.access_token, expiry=credential.expiry)
        if isinstance(credential, WebCredential) and credential.access_token and credential.expiry:
            return Token(
                access_token=credential.access_token,
                refresh_token=credential.refresh_token,
                expiry=credential.expiry,
            )
        return None

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------
    @property
    def credential(self) -> ScriptCredential | WebCredential | StaticToken:
        return self._credential

    @property
    def token(self) -> Token | None:
        """The currently held token (may be expired)."""
        return self._token

    @property
    def grant_count(self) -> int:
        """Number of grant requests sent by this session."""
        return self._grant_count

    @property
    def state(self) -> TokenState:
        if self._inflight is not None:
            return TokenState.AUTHENTICATING
        if self._token is not None and self._token.is_valid():
            return TokenState.AUTHENTICATED
        return TokenState.UNAUTHENTICATED

    # -------------------------------------------------------------------------
    # Token Gate
    # -------------------------------------------------------------------------
    async def ensure_valid_token(self, timeout: float | None = None) -> Token:
        """Return a token that is valid now, acquiring one if needed.

        Concurrent callers share one in-flight grant. A caller whose
        timeout expires stops waiting, but the grant keeps running for
        the others.

        Args:
            timeout: Seconds to wait for an in-flight grant (None = unbounded)

        Returns:
            A token expiring after now plus the configured margin

        Raises:
            AuthError: If the grant fails or the credential cannot renew
            RequestDeadlineExceeded: If the grant does not finish within timeout
        """
        token = self._token
        if token is not None and token.is_valid(margin=self._auth_config.expiry_margin_seconds):
            return token

        task = self._inflight
        if task is None:
            task = asyncio.create_task(self._acquire(), name="reddit-token-grant")
            task.add_done_callback(_retrieve_exception)
            self._inflight = task

        try:
            return await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
        except TimeoutError:
            if task.done():
                raise
            raise RequestDeadlineExceeded(
                f"Token acquisition did not finish within {timeout:.1f}s"
            ) from None

    async def _acquire(self) -> Token:
        """Perform the grant for this session's credential (single-flight)."""
        try:
            credential = self._credential
            previous = self._token

            if isinstance(credential, StaticToken):
                raise AuthError(
                    AuthErrorReason.REFRESH_TOKEN_MISSING,
                    "Static token has expired and cannot be renewed",
                )

            if isinstance(credential, ScriptCredential):
                logger.info("Requesting access token (password grant)")
                form = {
                    "grant_type": "password",
                    "username": credential.username,
                    "password": credential.password,
                }
                grant = await self._request_grant(credential, form)
                token = Token.from_grant(grant).model_copy(update={"refresh_token": None})
            else:
                refresh_token = (previous.refresh_token if previous else None) or (
                    credential.refresh_token
                )
                if not refresh_token:
                    raise AuthError(
                        AuthErrorReason.REFRESH_TOKEN_MISSING,
                        "Web app token expired and no refresh token is held",
                    )
                logger.info("Refreshing access token (refresh_token grant)")
                form = {"grant_type": "refresh_token", "refresh_token": refresh_token}
                grant = await self._request_grant(credential, form)
                token = Token.from_grant(grant, previous_refresh_token=refresh_token)

            self._token = token
            logger.info(
                "Access token acquired (expires_at={}, scopes={})",
                token.expiry.isoformat() if token.expiry else "never",
                _describe_scopes(token),
            )
            self._fire_callbacks(token)
            return token
        except AuthError as e:
            if e.reason is AuthErrorReason.INVALID_CREDENTIALS:
                self._token = None
            logger.warning("Token acquisition failed ({}): {}", e.reason.value, e)
            raise
        finally:
            self._inflight = None

    async def _request_grant(
        self,
        credential: ScriptCredential | WebCredential,
        form: dict[str, str],
    ) -> TokenGrantResponse:
        """POST a grant to the token endpoint and validate the answer."""
        self._grant_count += 1
        try:
            response = await self._http.post(
                self._api_config.token_url,
                data=form,
                auth=httpx.BasicAuth(credential.client_id, credential.client_secret),
                headers={"User-Agent": self._user_agent},
                timeout=self._api_config.timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise AuthError(AuthErrorReason.NETWORK_ERROR, f"Token request failed: {e}") from e

        if response.status_code >= 500:
            raise AuthError(
                AuthErrorReason.NETWORK_ERROR,
                f"Token endpoint unavailable ({response.status_code})",
            )

        try:
            body: Any = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400 or not isinstance(body, dict) or "error" in body:
            detail = body.get("error") if isinstance(body, dict) else None
            raise AuthError(
                AuthErrorReason.INVALID_CREDENTIALS,
                f"Token grant rejected: {detail or response.status_code}",
            )

        try:
            return TokenGrantResponse.model_validate(body)
        except ValidationError as e:
            raise AuthError(
                AuthErrorReason.INVALID_CREDENTIALS,
                f"Malformed token grant response: {e}",
            ) from e

    # -------------------------------------------------------------------------
    # Callbacks & Observability
    # -------------------------------------------------------------------------
    def on_token_acquired(self, callback: TokenCallback) -> None:
        """Register a callback fired after every successful grant.

        Args:
            callback: Async or sync function receiving the new Token
        """
        self._callbacks.append(callback)

    def remove_callback(self, callback: TokenCallback) -> bool:
        """Remove a previously registered callback.

        Returns:
            True if callback was found and removed
        """
        try:
            self._callbacks.remove(callback)
            return True
        except ValueError:
            return False

    def _fire_callbacks(self, token: Token) -> None:
        for callback in self._callbacks:
            try:
                result = callback(token)
                if asyncio.iscoroutine(result):
                    task = asyncio.create_task(result)
                    self._callback_tasks.add(task)
                    task.add_done_callback(self._callback_tasks.discard)
            except Exception as e:
                logger.error("Token callback failed: {}", e)

    def to_dict(self) -> dict[str, Any]:
        """Export token lifecycle state (never the token itself)."""
        token = self._token
        return {
            "flow": self._credential.kind,
            "state": self.state.value,
            "expires_at": token.expiry.isoformat() if token and token.expiry else None,
            "scopes": _describe_scopes(token) if token else None,
            "grants": self._grant_count,
        }


def _retrieve_exception(task: asyncio.Task[Token]) -> None:
    # Avoid "exception was never retrieved" when every waiter timed out
    if not task.cancelled():
        task.exception()


def _describe_scopes(token: Token) -> str:
    if token.scopes is None:
        return "unknown"
    if token.scopes == "*":
        return "*"
    return " ".join(sorted(token.scopes))
