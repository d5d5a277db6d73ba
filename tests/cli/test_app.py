"""Tests for the redditoauth CLI."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from reddit_oauth import __version__
from reddit_oauth.cli.app import app
from reddit_oauth.config import Settings
from reddit_oauth.logging import reset_logging
from reddit_oauth.reddit import AuthError, AuthErrorReason, RedditClient
from tests.fixtures import (
    ACCOUNT_ME,
    FakeReddit,
    json_response,
    make_link_pages,
    make_rate_limit_headers,
)

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_logging_state():
    """Drop the handlers the app callback binds to the runner's streams."""
    yield
    reset_logging()


@pytest.fixture
def build_client(fake_reddit: FakeReddit, script_credential, settings: Settings):
    """Route CLI clients to fake_reddit instead of Reddit."""

    def _build(anonymous: bool) -> RedditClient:
        credential = None if anonymous else script_credential
        return RedditClient(credential, settings=settings, transport=fake_reddit.transport())

    with patch("reddit_oauth.cli.reddit._build_client", side_effect=_build) as mock_build:
        yield mock_build


class TestGlobalFlags:
    """Tests for global CLI flags (--version, --verbose, --quiet)."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_global_help_shows_flags(self):
        """Main help text shows --verbose and --quiet."""
        result = runner.invoke(app, ["--help"])
        assert "--verbose" in result.stdout
        assert "--quiet" in result.stdout
        assert "reddit" in result.stdout


class TestRedditTestCommand:
    """Tests for the 'reddit test' command."""

    def test_prints_account_and_rate_limit(self, fake_reddit: FakeReddit, build_client):
        fake_reddit.route(
            "/api/v1/me",
            json_response(ACCOUNT_ME, headers=make_rate_limit_headers(remaining=599, reset=300)),
        )

        result = runner.invoke(app, ["reddit", "test"])

        assert result.exit_code == 0, result.stdout
        assert "u/spez_bot" in result.stdout
        assert "599 remaining" in result.stdout
        assert "Connection OK" in result.stdout

    def test_rate_limit_not_reported(self, fake_reddit: FakeReddit, build_client):
        fake_reddit.route("/api/v1/me", json_response(ACCOUNT_ME))

        result = runner.invoke(app, ["reddit", "test"])

        assert result.exit_code == 0
        assert "not reported" in result.stdout

    def test_auth_failure_exits_1(self, fake_reddit: FakeReddit, build_client):
        fake_reddit.on_grant(json_response({"error": "invalid_grant"}))

        result = runner.invoke(app, ["reddit", "test"])

        assert result.exit_code == 1
        assert "Connection test failed" in result.stdout

    def test_missing_credentials_exits_1(self):
        error = AuthError(AuthErrorReason.MISSING_CREDENTIALS, "No Reddit credentials configured")
        with patch(
            "reddit_oauth.cli.reddit.RedditClient.from_settings", side_effect=error
        ):
            result = runner.invoke(app, ["reddit", "test"])

        assert result.exit_code == 1
        assert "No Reddit credentials configured" in result.stdout


class TestListingCommand:
    """Tests for the 'reddit listing' command."""

    def test_prints_items(self, fake_reddit: FakeReddit, build_client):
        fake_reddit.route("/r/python/new", json_response(make_link_pages(3)[0]))

        result = runner.invoke(app, ["reddit", "listing", "r/python/new", "--limit", "3"])

        assert result.exit_code == 0, result.stdout
        assert "page 1: 3 items" in result.stdout
        assert "t3_l0" in result.stdout
        assert "t3_l2" in result.stdout
        assert fake_reddit.requests[0].url.params["limit"] == "3"

    def test_short_limit_option(self, fake_reddit: FakeReddit, build_client):
        fake_reddit.route("/r/python/new", json_response(make_link_pages(5)[0]))

        result = runner.invoke(app, ["reddit", "listing", "r/python/new", "-n", "2"])

        assert result.exit_code == 0, result.stdout
        assert fake_reddit.requests[0].url.params["limit"] == "2"

    def test_anonymous_flag(self, fake_reddit: FakeReddit, build_client):
        fake_reddit.route("/r/python/new.json", json_response(make_link_pages(2)[0]))

        result = runner.invoke(app, ["reddit", "listing", "r/python/new", "--anonymous"])

        assert result.exit_code == 0, result.stdout
        build_client.assert_called_once_with(True)
        assert fake_reddit.grant_count == 0

    def test_http_error_exits_1(self, fake_reddit: FakeReddit, build_client):
        result = runner.invoke(app, ["reddit", "listing", "r/nowhere/new"])

        assert result.exit_code == 1
        assert "Listing failed" in result.stdout

    def test_limit_must_be_positive(self):
        result = runner.invoke(app, ["reddit", "listing", "r/python/new", "--limit", "0"])

        assert result.exit_code == 2
