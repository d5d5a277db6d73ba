"""Credential variants accepted by a Reddit session.

A session authenticates in exactly one way, chosen when it is built:

- ScriptCredential: personal scripts and bots (password grant)
- WebCredential: web apps holding a refresh token (refresh grant)
- StaticToken: a bearer token obtained elsewhere (no renewal)
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from reddit_oauth.config import Settings, get_settings
from reddit_oauth.reddit.exceptions import AuthError, AuthErrorReason

from .token import UtcDatetime


class _CredentialBase(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class ScriptCredential(_CredentialBase):
    """Credentials for a script app (password grant)."""

    kind: Literal["script"] = "script"
    client_id: str = Field(min_length=1, description="Application client id")
    client_secret: str = Field(min_length=1, description="Application secret")
    username: str = Field(min_length=1, description="Reddit account name")
    password: str = Field(min_length=1, repr=False, description="Reddit account password")


class WebCredential(_CredentialBase):
    """Credentials for a web app (refresh-token grant).

    An access token obtained by the caller's authorization-code exchange
    may be supplied so the first request skips the refresh.
    """

    kind: Literal["web"] = "web"
    client_id: str = Field(min_length=1, description="Application client id")
    client_secret: str = Field(min_length=1, description="Application secret")
    refresh_token: str | None = Field(default=None, repr=False, description="Refresh token")
    access_token: str | None = Field(default=None, repr=False, description="Initial access token")
    expiry: UtcDatetime | None = Field(
        default=None,
        description="Initial access token expiry (naive values are read as UTC)",
    )


class StaticToken(_CredentialBase):
    """A pre-obtained bearer token that the session cannot renew."""

    kind: Literal["static"] = "static"
    access_token: str = Field(min_length=1, repr=False, description="Bearer token")
    expiry: UtcDatetime | None = Field(
        default=None,
        description="Token expiry, if known (naive values are read as UTC)",
    )


Credential = Annotated[
    ScriptCredential | WebCredential | StaticToken,
    Field(discriminator="kind"),
]

_credential_adapter: TypeAdapter[ScriptCredential | WebCredential | StaticToken] = TypeAdapter(
    Credential
)


def parse_credential(data: dict[str, object]) -> ScriptCredential | WebCredential | StaticToken:
    """Validate a credential mapping tagged with ``kind``.

    Args:
        data: Mapping with a ``kind`` of "script", "web" or "static"

    Returns:
        The matching credential variant

    Raises:
        AuthError: MISSING_CREDENTIALS if the mapping does not validate
    """
    try:
        return _credential_adapter.validate_python(data)
    except ValidationError as e:
        raise AuthError(AuthErrorReason.MISSING_CREDENTIALS, f"Invalid credentials: {e}") from e


def credential_from_settings(
    settings: Settings | None = None,
) -> ScriptCredential | WebCredential | StaticToken:
    """Build a credential from REDDIT_* settings.

    Preference order: refresh token (web), bare access token (static),
    username and password (script).

    Raises:
        AuthError: MISSING_CREDENTIALS if nothing usable is configured
    """
    settings = settings or get_settings()

    if settings.reddit_refresh_token:
        return parse_credential(
            {
                "kind": "web",
                "client_id": settings.reddit_client_id,
                "client_secret": settings.reddit_client_secret,
                "refresh_token": settings.reddit_refresh_token,
            }
        )
    if settings.reddit_access_token:
        return StaticToken(access_token=settings.reddit_access_token)
    if settings.reddit_username or settings.reddit_password:
        return parse_credential(
            {
                "kind": "script",
                "client_id": settings.reddit_client_id,
                "client_secret": settings.reddit_client_secret,
                "username": settings.reddit_username,
                "password": settings.reddit_password,
            }
        )

    raise AuthError(
        AuthErrorReason.MISSING_CREDENTIALS,
        "No Reddit credentials configured. Set REDDIT_REFRESH_TOKEN, "
        "REDDIT_ACCESS_TOKEN, or REDDIT_USERNAME and REDDIT_PASSWORD.",
    )
