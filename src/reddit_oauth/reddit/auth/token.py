"""OAuth2 token schemas."""

from datetime import UTC, datetime, timedelta
from typing import Annotated, Literal, Self

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from reddit_oauth.schemas.enums import OAuthScope

Scopes = frozenset[str] | Literal["*"]


def as_utc(value: datetime) -> datetime:
    """Read a naive datetime as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


def parse_scopes(scope: str | None) -> Scopes | None:
    """Parse the space-separated ``scope`` value of a grant response."""
    if scope is None:
        return None
    scope = scope.strip()
    if scope == "*":
        return "*"
    return frozenset(scope.split())


class TokenGrantResponse(BaseModel):
    """Successful body of POST /api/v1/access_token."""

    access_token: str = Field(min_length=1)
    token_type: str = Field(default="bearer")
    expires_in: float = Field(gt=0, description="Lifetime in seconds")
    scope: str | None = Field(default=None, description="Space-separated granted scopes")
    refresh_token: str | None = Field(
        default=None,
        description="Only returned for duration=permanent authorizations",
    )


class Token(BaseModel):
    """A bearer token held by one session.

    ``expiry`` is None only for a static token supplied without one.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(repr=False)
    refresh_token: str | None = Field(default=None, repr=False)
    expiry: UtcDatetime | None = None
    scopes: Scopes | None = None

    def is_valid(self, now: datetime | None = None, margin: float = 0.0) -> bool:
        """Whether the token expires strictly after ``now + margin``."""
        if self.expiry is None:
            return True
        reference = as_utc(now) if now else datetime.now(UTC)
        return self.expiry > reference + timedelta(seconds=margin)

    def has_scope(self, scope: str | OAuthScope) -> bool:
        if self.scopes is None:
            return False
        name = scope.value if isinstance(scope, OAuthScope) else scope
        return self.scopes == "*" or name in self.scopes

    @classmethod
    def from_grant(
        cls,
        grant: TokenGrantResponse,
        *,
        previous_refresh_token: str | None = None,
        now: datetime | None = None,
    ) -> Self:
        """Build a token from a grant response.

        Reddit omits ``refresh_token`` on refresh grants; the previously
        held one stays usable in that case.
        """
        issued_at = now or datetime.now(UTC)
        return cls(
            access_token=grant.access_token,
            refresh_token=grant.refresh_token or previous_refresh_token,
            expiry=issued_at + timedelta(seconds=grant.expires_in),
            scopes=parse_scopes(grant.scope),
        )
