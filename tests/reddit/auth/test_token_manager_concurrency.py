"""Concurrency tests for TokenManager.

These tests verify that concurrent callers needing a token share a single
grant call, through the manager directly and through RedditClient.fetch().
"""

import asyncio
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from reddit_oauth.config import Settings
from reddit_oauth.reddit import RedditClient, TokenManager, WebCredential
from reddit_oauth.reddit.exceptions import AuthError, AuthErrorReason
from tests.fixtures import (
    ACCOUNT_ME,
    FakeReddit,
    json_response,
    make_token_response,
    text_response,
)


class TestTokenManagerConcurrency:
    """Tests for single-flight token acquisition."""

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_grant(self, script_credential) -> None:
        """Ten callers with no token held cause exactly one grant."""
        fake = FakeReddit(grant_delay=0.05)
        async with httpx.AsyncClient(transport=fake.transport()) as http:
            manager = TokenManager(script_credential, http)

            tokens = await asyncio.gather(*(manager.ensure_valid_token() for _ in range(10)))

        assert fake.grant_count == 1
        assert {token.access_token for token in tokens} == {"access-1"}

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_failure(self, script_credential) -> None:
        """A failed grant is reported to every waiter, then retried by the next call."""
        fake = FakeReddit(grant_delay=0.05)
        fake.on_grant(
            text_response("upstream", status=502),
            json_response(make_token_response("second")),
        )
        async with httpx.AsyncClient(transport=fake.transport()) as http:
            manager = TokenManager(script_credential, http)

            results = await asyncio.gather(
                *(manager.ensure_valid_token() for _ in range(10)),
                return_exceptions=True,
            )
            assert fake.grant_count == 1
            assert all(isinstance(result, AuthError) for result in results)
            assert {result.reason for result in results} == {AuthErrorReason.NETWORK_ERROR}

            token = await manager.ensure_valid_token()

        assert token.access_token == "second"
        assert fake.grant_count == 2


class TestClientConcurrency:
    """Concurrent fetches through the full pipeline."""

    @pytest.mark.asyncio
    async def test_script_session_fetches_share_one_grant(
        self, script_credential, settings: Settings
    ) -> None:
        """Ten concurrent fetches on a fresh script session: one grant, ten successes."""
        fake = FakeReddit(grant_delay=0.05)
        fake.route("/api/v1/me", json_response(ACCOUNT_ME))

        async with RedditClient(
            script_credential, settings=settings, transport=fake.transport()
        ) as client:
            results = await asyncio.gather(*(client.fetch("api/v1/me") for _ in range(10)))

        assert fake.grant_count == 1
        assert len(results) == 10
        assert all(result["name"] == "spez_bot" for result in results)
        assert {r.headers["Authorization"] for r in fake.requests} == {"bearer access-1"}

    @pytest.mark.asyncio
    async def test_expired_web_token_refreshed_once(self, settings: Settings) -> None:
        """Ten concurrent fetches with an expired token: exactly one refresh grant."""
        credential = WebCredential(
            client_id="web-id",
            client_secret="web-secret",
            refresh_token="refresh-abc",
            access_token="stale",
            expiry=datetime.now(UTC) - timedelta(minutes=5),
        )
        fake = FakeReddit(grant_delay=0.05)
        fake.route("/api/v1/me", json_response(ACCOUNT_ME))

        async with RedditClient(
            credential, settings=settings, transport=fake.transport()
        ) as client:
            results = await asyncio.gather(*(client.fetch("api/v1/me") for _ in range(10)))

        assert fake.grant_count == 1
        assert len(results) == 10
        assert "bearer stale" not in {r.headers["Authorization"] for r in fake.requests}
