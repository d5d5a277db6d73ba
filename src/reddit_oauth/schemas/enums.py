"""Enums for Reddit API schemas."""

from enum import Enum


class FullnameType(str, Enum):
    """Type prefixes of Reddit fullnames (``{prefix}_{base36 id}``)."""

    COMMENT = "t1"
    ACCOUNT = "t2"
    LINK = "t3"
    MESSAGE = "t4"
    SUBREDDIT = "t5"
    AWARD = "t6"


class OAuthScope(str, Enum):
    """OAuth2 scopes a token may be granted."""

    CREDDITS = "creddits"
    EDIT = "edit"
    FLAIR = "flair"
    HISTORY = "history"
    IDENTITY = "identity"
    LIVE_MANAGE = "livemanage"
    MOD_CONFIG = "modconfig"
    MOD_FLAIR = "modflair"
    MOD_LOG = "modlog"
    MOD_POSTS = "modposts"
    MOD_WIKI = "modwiki"
    MY_SUBREDDITS = "mysubreddits"
    PRIVATE_MESSAGES = "privatemessages"
    READ = "read"
    REPORT = "report"
    SAVE = "save"
    SUBMIT = "submit"
    SUBSCRIBE = "subscribe"
    VOTE = "vote"
    WIKI_READ = "wikiread"
    WIKI_EDIT = "wikiedit"


class ListingSort(str, Enum):
    """Sort orders of subreddit and user listings."""

    HOT = "hot"
    NEW = "new"
    TOP = "top"
    RISING = "rising"
    CONTROVERSIAL = "controversial"


class TimeFilter(str, Enum):
    """Time windows for top/controversial listings and search."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"
