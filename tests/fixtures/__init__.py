"""Test fixtures for reddit-oauth."""

from .reddit_responses import (
    ACCOUNT_ME,
    FakeReddit,
    form_of,
    json_response,
    make_link,
    make_link_pages,
    make_listing,
    make_rate_limit_headers,
    make_token_response,
    raise_error,
    text_response,
)

__all__ = [
    # Fake server
    "FakeReddit",
    "form_of",
    "json_response",
    "raise_error",
    "text_response",
    # Response builders
    "ACCOUNT_ME",
    "make_link",
    "make_link_pages",
    "make_listing",
    "make_rate_limit_headers",
    "make_token_response",
]
