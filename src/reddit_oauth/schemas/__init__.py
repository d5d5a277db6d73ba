"""Pydantic schemas for Reddit API payloads.

These are decoded by the endpoint builders; the request pipeline itself
treats every payload as opaque JSON.
"""

from .enums import FullnameType, ListingSort, OAuthScope, TimeFilter
from .fullname import is_fullname, make_fullname, split_fullname
from .reddit_api import (
    Account,
    Comment,
    Link,
    Message,
    RedditThing,
    ScopeDescription,
    SubmitResult,
    Subreddit,
    Trophy,
    WikiPage,
)

__all__ = [
    # Enums
    "FullnameType",
    "ListingSort",
    "OAuthScope",
    "TimeFilter",
    # Fullnames
    "is_fullname",
    "make_fullname",
    "split_fullname",
    # Reddit API
    "Account",
    "Comment",
    "Link",
    "Message",
    "RedditThing",
    "ScopeDescription",
    "SubmitResult",
    "Subreddit",
    "Trophy",
    "WikiPage",
]
