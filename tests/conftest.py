"""Pytest configuration and shared fixtures.

Usage Guide:
- For pipeline tests: use `fake_reddit` with `script_client` / `web_client`
- For response payloads: import builders from tests.fixtures
- For settings: use `settings` (never reads .env or the real environment's file)
"""

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta

import pytest

from reddit_oauth.config import RateLimitConfig, Settings
from reddit_oauth.reddit import RedditClient, ScriptCredential, WebCredential
from tests.fixtures import FakeReddit

# -----------------------------------------------------------------------------
# Test Timeline Constants
# -----------------------------------------------------------------------------
NOW = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)
ONE_HOUR_LATER = NOW + timedelta(hours=1)


# -----------------------------------------------------------------------------
# Settings & Credentials
# -----------------------------------------------------------------------------
@pytest.fixture
def settings() -> Settings:
    """Settings isolated from .env, with a short rate limit cap."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        rate_limit=RateLimitConfig(max_wait_seconds=5.0),
    )


@pytest.fixture
def script_credential() -> ScriptCredential:
    return ScriptCredential(
        client_id="script-id",
        client_secret="script-secret",
        username="spez_bot",
        password="hunter2",
    )


@pytest.fixture
def web_credential() -> WebCredential:
    return WebCredential(
        client_id="web-id",
        client_secret="web-secret",
        refresh_token="refresh-abc",
    )


# -----------------------------------------------------------------------------
# Fake Reddit & Clients
# -----------------------------------------------------------------------------
@pytest.fixture
def fake_reddit() -> FakeReddit:
    """In-memory Reddit answering token grants and routed paths."""
    return FakeReddit()


@pytest.fixture
async def script_client(
    fake_reddit: FakeReddit,
    script_credential: ScriptCredential,
    settings: Settings,
) -> AsyncIterator[RedditClient]:
    """Authenticated client (password grant) talking to fake_reddit."""
    async with RedditClient(
        script_credential,
        settings=settings,
        transport=fake_reddit.transport(),
    ) as client:
        yield client


@pytest.fixture
async def web_client(
    fake_reddit: FakeReddit,
    web_credential: WebCredential,
    settings: Settings,
) -> AsyncIterator[RedditClient]:
    """Authenticated client (refresh grant) talking to fake_reddit."""
    async with RedditClient(
        web_credential,
        settings=settings,
        transport=fake_reddit.transport(),
    ) as client:
        yield client


@pytest.fixture
async def anonymous_client(
    fake_reddit: FakeReddit,
    settings: Settings,
) -> AsyncIterator[RedditClient]:
    """Anonymous client talking to fake_reddit's public host."""
    async with RedditClient(settings=settings, transport=fake_reddit.transport()) as client:
        yield client
