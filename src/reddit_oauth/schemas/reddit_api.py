"""Pydantic schemas for parsing Reddit API responses.

Only the commonly used fields are declared; every model keeps the rest of
the payload as extra attributes, so schema drift on Reddit's side never
breaks decoding.
See: https://www.reddit.com/dev/api
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class RedditThing(BaseModel):
    """Base for objects returned inside a Thing wrapper."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Base36 id")
    name: str | None = Field(default=None, description="Fullname (e.g. t3_15bfi0)")
    created_utc: float | None = Field(default=None, description="Creation time (epoch seconds)")

    @property
    def created_at(self) -> datetime | None:
        if self.created_utc is None:
            return None
        return datetime.fromtimestamp(self.created_utc, tz=UTC)


class Account(RedditThing):
    """Reddit account (t2). Returned by api/v1/me and user/{name}/about."""

    name: str | None = Field(default=None, description="Username")
    link_karma: int = Field(default=0, description="Karma from links")
    comment_karma: int = Field(default=0, description="Karma from comments")
    is_mod: bool = Field(default=False, description="Whether the user moderates any subreddit")
    has_verified_email: bool | None = Field(default=None, description="Verified email flag")


class Link(RedditThing):
    """Submission (t3)."""

    title: str = Field(description="Post title")
    author: str | None = Field(default=None, description="Author username ([deleted] possible)")
    subreddit: str = Field(description="Subreddit name without r/")
    selftext: str = Field(default="", description="Self post body (markdown)")
    url: str | None = Field(default=None, description="Link target or self post URL")
    permalink: str = Field(description="Relative permalink")
    score: int | None = Field(default=None, description="Score (hidden scores are null)")
    num_comments: int = Field(default=0, description="Comment count")
    is_self: bool = Field(default=False, description="Whether this is a self post")
    over_18: bool = Field(default=False, description="NSFW flag")


class Comment(RedditThing):
    """Comment (t1)."""

    author: str | None = Field(default=None, description="Author username")
    body: str = Field(default="", description="Comment body (markdown)")
    link_id: str = Field(description="Fullname of the parent link")
    parent_id: str = Field(description="Fullname of the parent comment or link")
    subreddit: str = Field(description="Subreddit name without r/")
    score: int | None = Field(default=None, description="Score")
    permalink: str | None = Field(default=None, description="Relative permalink")


class Subreddit(RedditThing):
    """Subreddit (t5)."""

    display_name: str = Field(description="Name without r/")
    title: str = Field(default="", description="Subreddit title")
    public_description: str = Field(default="", description="Short description")
    subscribers: int | None = Field(default=None, description="Subscriber count")
    over18: bool = Field(default=False, description="NSFW flag")
    subreddit_type: str = Field(default="public", description="public, private, restricted, ...")


class Message(RedditThing):
    """Private message (t4)."""

    author: str | None = Field(default=None, description="Sender username")
    dest: str | None = Field(default=None, description="Recipient username")
    subject: str = Field(default="", description="Message subject")
    body: str = Field(default="", description="Message body (markdown)")
    new: bool = Field(default=False, description="Unread flag")


class Trophy(BaseModel):
    """Trophy (t6) as listed by api/v1/user/{name}/trophies."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(description="Trophy name")
    description: str | None = Field(default=None, description="Trophy description")
    icon_70: str | None = Field(default=None, description="Icon URL")
    award_id: str | None = Field(default=None, description="Award id")


class ScopeDescription(BaseModel):
    """One entry of api/v1/scopes."""

    id: str = Field(description="Scope id (e.g. identity)")
    name: str = Field(description="Human readable name")
    description: str = Field(description="What the scope grants")


class WikiPage(BaseModel):
    """Wiki page content returned by r/{subreddit}/wiki/{page}."""

    model_config = ConfigDict(extra="allow")

    content_md: str = Field(description="Page source (markdown)")
    revision_id: str | None = Field(default=None, description="Current revision id")
    revision_date: float | None = Field(default=None, description="Revision time (epoch seconds)")
    may_revise: bool = Field(default=False, description="Whether the user may edit the page")


class SubmitResult(BaseModel):
    """The ``json.data`` part of an api/submit response."""

    model_config = ConfigDict(extra="allow")

    id: str | None = Field(default=None, description="Base36 id of the new link")
    name: str | None = Field(default=None, description="Fullname of the new link")
    url: str | None = Field(default=None, description="URL of the new link")
