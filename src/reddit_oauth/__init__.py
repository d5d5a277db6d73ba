"""Async Reddit API client with OAuth2 token lifecycle, rate limiting and pagination."""

__version__ = "0.1.0"
