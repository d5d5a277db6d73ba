"""Tests for credential variants and settings resolution."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from reddit_oauth.config import Settings
from reddit_oauth.reddit.auth import (
    ScriptCredential,
    StaticToken,
    WebCredential,
    credential_from_settings,
    parse_credential,
)
from reddit_oauth.reddit.exceptions import AuthError, AuthErrorReason


class TestCredentialModels:
    """Tests for the credential variants."""

    def test_script_credential_requires_all_fields(self) -> None:
        """Test that an empty password is rejected."""
        with pytest.raises(ValidationError):
            ScriptCredential(client_id="id", client_secret="secret", username="u", password="")

    def test_credentials_are_frozen(self, script_credential: ScriptCredential) -> None:
        """Test that a session's credential cannot be mutated."""
        with pytest.raises(ValidationError):
            script_credential.username = "someone_else"  # type: ignore[misc]

    def test_password_not_in_repr(self, script_credential: ScriptCredential) -> None:
        """Test that secrets stay out of repr (and therefore logs)."""
        assert "hunter2" not in repr(script_credential)

    def test_web_credential_refresh_token_optional(self) -> None:
        """Test that a web credential may be built without a refresh token."""
        credential = WebCredential(client_id="id", client_secret="secret")

        assert credential.refresh_token is None
        assert credential.kind == "web"

    def test_static_token_expiry_optional(self) -> None:
        """Test that a static token may have no known expiry."""
        token = StaticToken(access_token="bearer-xyz")

        assert token.expiry is None

    def test_naive_expiry_read_as_utc(self) -> None:
        """Test that a naive expiry is normalized for both token-bearing kinds."""
        naive = datetime(2030, 1, 1, 12, 0)

        static = StaticToken(access_token="bearer-xyz", expiry=naive)
        web = WebCredential(client_id="id", client_secret="secret", expiry=naive)

        for expiry in (static.expiry, web.expiry):
            assert expiry is not None
            assert expiry.tzinfo is not None
            assert expiry == datetime(2030, 1, 1, 12, 0, tzinfo=UTC)

    def test_aware_expiry_kept(self) -> None:
        aware = datetime(2030, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

        token = StaticToken(access_token="bearer-xyz", expiry=aware)

        assert token.expiry == aware
        assert token.expiry.utcoffset() == timedelta(hours=2)


class TestParseCredential:
    """Tests for the kind-tagged credential union."""

    def test_parse_script(self) -> None:
        """Test kind=script selects ScriptCredential."""
        credential = parse_credential(
            {
                "kind": "script",
                "client_id": "id",
                "client_secret": "secret",
                "username": "u",
                "password": "p",
            }
        )
        assert isinstance(credential, ScriptCredential)

    def test_parse_web(self) -> None:
        """Test kind=web selects WebCredential with its initial token."""
        expiry = datetime(2030, 1, 1, tzinfo=UTC)
        credential = parse_credential(
            {
                "kind": "web",
                "client_id": "id",
                "client_secret": "secret",
                "access_token": "initial",
                "expiry": expiry.isoformat(),
            }
        )
        assert isinstance(credential, WebCredential)
        assert credential.expiry == expiry

    def test_parse_static(self) -> None:
        """Test kind=static selects StaticToken."""
        credential = parse_credential({"kind": "static", "access_token": "bearer-xyz"})
        assert isinstance(credential, StaticToken)

    def test_unknown_kind_is_missing_credentials(self) -> None:
        """Test that an unknown kind raises AuthError, not ValidationError."""
        with pytest.raises(AuthError) as exc_info:
            parse_credential({"kind": "installed", "client_id": "id"})

        assert exc_info.value.reason is AuthErrorReason.MISSING_CREDENTIALS

    def test_incomplete_script_is_missing_credentials(self) -> None:
        """Test that a script credential without a password is rejected."""
        with pytest.raises(AuthError) as exc_info:
            parse_credential({"kind": "script", "client_id": "id", "client_secret": "s"})

        assert exc_info.value.reason is AuthErrorReason.MISSING_CREDENTIALS
        assert not exc_info.value.retryable


class TestCredentialFromSettings:
    """Tests for building a credential from REDDIT_* settings."""

    def test_refresh_token_selects_web(self) -> None:
        """Test a refresh token takes precedence over a password."""
        settings = Settings(
            _env_file=None,
            reddit_client_id="id",
            reddit_client_secret="secret",
            reddit_refresh_token="refresh",
            reddit_username="u",
            reddit_password="p",
        )

        credential = credential_from_settings(settings)

        assert isinstance(credential, WebCredential)
        assert credential.refresh_token == "refresh"

    def test_access_token_selects_static(self) -> None:
        """Test a bare access token selects StaticToken."""
        settings = Settings(
            _env_file=None, reddit_refresh_token="", reddit_access_token="bearer-xyz"
        )

        credential = credential_from_settings(settings)

        assert isinstance(credential, StaticToken)
        assert credential.expiry is None

    def test_username_and_password_select_script(self) -> None:
        """Test username and password select the password grant."""
        settings = Settings(
            _env_file=None,
            reddit_refresh_token="",
            reddit_access_token="",
            reddit_client_id="id",
            reddit_client_secret="secret",
            reddit_username="u",
            reddit_password="p",
        )

        assert isinstance(credential_from_settings(settings), ScriptCredential)

    def test_partial_script_settings_rejected(self) -> None:
        """Test a username without an app id is reported as missing credentials."""
        settings = Settings(
            _env_file=None,
            reddit_client_id="",
            reddit_refresh_token="",
            reddit_access_token="",
            reddit_username="u",
            reddit_password="p",
        )

        with pytest.raises(AuthError) as exc_info:
            credential_from_settings(settings)

        assert exc_info.value.reason is AuthErrorReason.MISSING_CREDENTIALS

    def test_nothing_configured(self) -> None:
        """Test that empty settings raise MISSING_CREDENTIALS."""
        settings = Settings(
            _env_file=None,
            reddit_client_id="",
            reddit_refresh_token="",
            reddit_access_token="",
            reddit_username="",
            reddit_password="",
        )

        with pytest.raises(AuthError) as exc_info:
            credential_from_settings(settings)

        assert exc_info.value.reason is AuthErrorReason.MISSING_CREDENTIALS
