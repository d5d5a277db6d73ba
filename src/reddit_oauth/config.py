"""Configuration settings for the Reddit OAuth client."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiConfig(BaseModel):
    """Configuration for the HTTP pipeline.

    Controls the hosts requests are resolved against and the behavior
    of a single request.
    """

    oauth_base_url: str = Field(
        default="https://oauth.reddit.com/",
        description="Base URL for authenticated requests",
    )
    public_base_url: str = Field(
        default="https://www.reddit.com/",
        description="Base URL for anonymous requests",
    )
    token_url: str = Field(
        default="https://www.reddit.com/api/v1/access_token",
        description="OAuth2 token endpoint used for every grant",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Network timeout for a single HTTP exchange",
    )
    raw_json: bool = Field(
        default=True,
        description="Request unescaped content (raw_json=1) on every call",
    )
    retry_on_429: bool = Field(
        default=True,
        description="Retry once after a 429 once the budget is resynchronized",
    )
    request_deadline_seconds: float | None = Field(
        default=None,
        gt=0.0,
        description="Default bound on token and rate-limit waits per request",
    )


class AuthConfig(BaseModel):
    """Configuration for the token lifecycle."""

    expiry_margin_seconds: float = Field(
        default=10.0,
        ge=0.0,
        description="Treat a token as expired this many seconds before its expiry",
    )


class RateLimitConfig(BaseModel):
    """Configuration for header-driven rate limiting.

    Reddit reports the budget on every response through the
    x-ratelimit-* headers.
    """

    initial_remaining: int = Field(
        default=60,
        ge=1,
        description="Optimistic budget assumed before the first response",
    )
    max_wait_seconds: float = Field(
        default=600.0,
        gt=0.0,
        description="Upper bound on a single wait for the window to reset",
    )
    track_from_headers: bool = Field(
        default=True,
        description="Passively track limits from response headers",
    )


class PaginationConfig(BaseModel):
    """Configuration for listing traversal."""

    page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Items requested per listing page",
    )
    max_page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Largest limit Reddit honors; larger page sizes are clamped to it",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Reddit Credentials
    # --------------------------------------------------------------------------
    reddit_client_id: str = Field(default="", description="OAuth2 application client id")
    reddit_client_secret: str = Field(default="", description="OAuth2 application secret")
    reddit_username: str = Field(default="", description="Account name for script apps")
    reddit_password: str = Field(default="", description="Account password for script apps")
    reddit_refresh_token: str = Field(default="", description="Refresh token for web apps")
    reddit_access_token: str = Field(default="", description="Pre-obtained bearer token")

    user_agent: str = Field(
        default="python:reddit-oauth:v0.1.0",
        description="User-Agent sent with every request",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Request Pipeline
    # --------------------------------------------------------------------------
    api: ApiConfig = Field(
        default_factory=ApiConfig,
        description="HTTP pipeline configuration",
    )
    auth: AuthConfig = Field(
        default_factory=AuthConfig,
        description="Token lifecycle configuration",
    )
    rate_limit: RateLimitConfig = Field(
        default_factory=RateLimitConfig,
        description="Rate limit configuration",
    )
    pagination: PaginationConfig = Field(
        default_factory=PaginationConfig,
        description="Listing pagination configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
