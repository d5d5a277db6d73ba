"""Endpoint builders on top of the request pipeline.

Each method supplies a path template and parameter shape, hands it to
RedditClient.fetch() or RedditClient.paginate(), and decodes the JSON
into a schema model. None of them add pipeline behavior of their own.
"""

from __future__ import annotations

from typing import Any

from reddit_oauth.logging import get_logger
from reddit_oauth.schemas import (
    Account,
    Comment,
    Link,
    ListingSort,
    Message,
    ScopeDescription,
    SubmitResult,
    Subreddit,
    TimeFilter,
    Trophy,
    WikiPage,
)

from .client import RedditClient
from .exceptions import DecodeError, RedditAPIError
from .pagination import PageCallback

logger = get_logger(__name__)


class RedditAPI:
    """Typed Reddit endpoints.

    Usage:
        async with RedditClient(credential) as client:
            api = RedditAPI(client)
            me = await api.me()
            posts = await api.subreddit_links("python", ListingSort.NEW, limit=250)
    """

    def __init__(self, client: RedditClient) -> None:
        self._client = client

    @property
    def client(self) -> RedditClient:
        return self._client

    # -------------------------------------------------------------------------
    # Account & Profile
    # -------------------------------------------------------------------------
    async def me(self) -> Account:
        """Get the authenticated user's account.

        Scopes: identity
        """
        return Account.model_validate(await self._client.fetch("api/v1/me"))

    async def scopes(self, scopes: list[str] | None = None) -> dict[str, ScopeDescription]:
        """Describe OAuth scopes (all of them unless ``scopes`` is given)."""
        params = {"scopes": ",".join(scopes)} if scopes else None
        data = await self._client.fetch("api/v1/scopes", params=params)
        return {key: ScopeDescription.model_validate(value) for key, value in data.items()}

    async def user_about(self, username: str) -> Account:
        """Get a user's public profile."""
        data = await self._client.fetch(f"user/{username}/about")
        return Account.model_validate(_unwrap_thing(data))

    async def trophies(self, username: str) -> list[Trophy]:
        """List a user's trophies."""
        data = _unwrap_thing(await self._client.fetch(f"api/v1/user/{username}/trophies"))
        return [Trophy.model_validate(_unwrap_thing(item)) for item in data.get("trophies", [])]

    # -------------------------------------------------------------------------
    # Subreddits
    # -------------------------------------------------------------------------
    async def subreddit_about(self, subreddit: str) -> Subreddit:
        """Get subreddit metadata."""
        data = await self._client.fetch(f"r/{subreddit}/about")
        return Subreddit.model_validate(_unwrap_thing(data))

    async def subreddit_links(
        self,
        subreddit: str,
        sort: ListingSort = ListingSort.HOT,
        *,
        time_filter: TimeFilter | None = None,
        limit: int | None = 100,
        on_page: PageCallback | None = None,
    ) -> list[Link]:
        """List a subreddit's submissions.

        Args:
            subreddit: Subreddit name without r/
            sort: Listing sort order
            time_filter: Window for top/controversial
            limit: Stop requesting pages after this many items (None = all)
            on_page: Callback receiving each raw page
        """
        params = {"t": time_filter.value} if time_filter else None
        items = await self._client.paginate(f"r/{subreddit}/{sort.value}", params, limit, on_page)
        return [Link.model_validate(item) for item in items]

    async def wiki_page(self, subreddit: str, page: str = "index") -> WikiPage:
        """Get a wiki page's current revision.

        Scopes: wikiread
        """
        data = await self._client.fetch(f"r/{subreddit}/wiki/{page}")
        return WikiPage.model_validate(_unwrap_thing(data))

    # -------------------------------------------------------------------------
    # Users' Content
    # -------------------------------------------------------------------------
    async def user_submissions(
        self,
        username: str,
        *,
        sort: ListingSort = ListingSort.NEW,
        limit: int | None = 100,
        on_page: PageCallback | None = None,
    ) -> list[Link]:
        """List a user's submissions.

        Scopes: history
        """
        items = await self._client.paginate(
            f"user/{username}/submitted", {"sort": sort.value}, limit, on_page
        )
        return [Link.model_validate(item) for item in items]

    async def user_comments(
        self,
        username: str,
        *,
        sort: ListingSort = ListingSort.NEW,
        limit: int | None = 100,
        on_page: PageCallback | None = None,
    ) -> list[Comment]:
        """List a user's comments.

        Scopes: history
        """
        items = await self._client.paginate(
            f"user/{username}/comments", {"sort": sort.value}, limit, on_page
        )
        return [Comment.model_validate(item) for item in items]

    async def inbox(
        self,
        *,
        limit: int | None = 100,
        on_page: PageCallback | None = None,
    ) -> list[Message]:
        """List private messages.

        Scopes: privatemessages
        """
        items = await self._client.paginate("message/messages", None, limit, on_page)
        return [Message.model_validate(item) for item in items]

    async def search(
        self,
        query: str,
        *,
        subreddit: str | None = None,
        sort: str = "relevance",
        time_filter: TimeFilter = TimeFilter.ALL,
        limit: int | None = 100,
        on_page: PageCallback | None = None,
    ) -> list[Link]:
        """Search submissions site-wide or within one subreddit."""
        params: dict[str, Any] = {"q": query, "sort": sort, "t": time_filter.value, "type": "link"}
        endpoint = "search"
        if subreddit:
            endpoint = f"r/{subreddit}/search"
            params["restrict_sr"] = 1
        items = await self._client.paginate(endpoint, params, limit, on_page)
        return [Link.model_validate(item) for item in items]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    async def submit(
        self,
        subreddit: str,
        title: str,
        *,
        text: str | None = None,
        url: str | None = None,
    ) -> SubmitResult:
        """Submit a self post (``text``) or a link post (``url``).

        Scopes: submit
        """
        if (text is None) == (url is None):
            raise ValueError("Provide exactly one of text or url")
        form: dict[str, Any] = {"api_type": "json", "sr": subreddit, "title": title}
        if url is not None:
            form.update(kind="link", url=url)
        else:
            form.update(kind="self", text=text)

        body = _check_json_errors(await self._client.post("api/submit", form))
        return SubmitResult.model_validate(body.get("data") or {})

    async def comment(self, parent: str, text: str) -> dict[str, Any]:
        """Reply to a link, comment or message.

        Args:
            parent: Fullname of the parent (t1_, t3_ or t4_)
            text: Comment body (markdown)

        Scopes: submit, privatemessages (for replying to messages)
        """
        form = {"api_type": "json", "parent_id": parent, "text": text}
        return _check_json_errors(await self._client.post("api/comment", form))

    async def compose(self, to: str, subject: str, text: str) -> None:
        """Send a private message.

        Scopes: privatemessages
        """
        form = {"api_type": "json", "to": to, "subject": subject, "text": text}
        _check_json_errors(await self._client.post("api/compose", form))
        logger.info("Message sent to {}", to)


def _unwrap_thing(payload: Any) -> Any:
    """Return ``data`` of a ``{"kind": ..., "data": ...}`` wrapper."""
    if isinstance(payload, dict) and "kind" in payload and "data" in payload:
        return payload["data"]
    return payload


def _check_json_errors(payload: Any) -> dict[str, Any]:
    """Raise RedditAPIError for ``api_type=json`` bodies that report errors."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise DecodeError(f"Unexpected response shape: {type(payload).__name__}")
    body = payload.get("json", payload)
    errors = body.get("errors") or []
    if errors:
        raise RedditAPIError(errors)
    return body
