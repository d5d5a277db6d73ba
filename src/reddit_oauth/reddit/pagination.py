"""Cursor-based traversal of Reddit listings.

Every list-shaped endpoint answers with the same envelope:

    {"kind": "Listing",
     "data": {"children": [{"kind": "t3", "data": {...}}, ...],
              "after": "t3_abc" | null,
              "before": "t3_xyz" | null}}

The paginator follows ``after`` cursors until the listing ends or enough
items have been collected. Pages are always delivered whole; the item
limit only decides whether another page is requested.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TYPE_CHECKING, Any, Generic, Self, TypeVar

from pydantic import BaseModel, Field, ValidationError

from reddit_oauth.config import PaginationConfig, get_settings
from reddit_oauth.logging import bind_listing

from .exceptions import DecodeError

if TYPE_CHECKING:
    from .client import RedditClient

T = TypeVar("T")

PageCallback = Callable[[list[Any]], Awaitable[None] | None]


class _Thing(BaseModel):
    kind: str | None = None
    data: Any


class _ListingData(BaseModel):
    children: list[_Thing]
    after: str | None = None
    before: str | None = None


class _ListingEnvelope(BaseModel):
    kind: str | None = None
    data: _ListingData


class ListingPage(BaseModel, Generic[T]):
    """One page of a listing: its items in server order plus both cursors."""

    items: list[T] = Field(default_factory=list)
    after: str | None = Field(default=None, description="Cursor of the next page")
    before: str | None = Field(default=None, description="Cursor of the previous page")

    @classmethod
    def from_response(cls, payload: Any) -> Self:
        """Parse a decoded listing response.

        Args:
            payload: Decoded JSON body of a listing endpoint

        Returns:
            ListingPage with the unwrapped ``children[].data`` items

        Raises:
            DecodeError: If the payload is not a listing envelope
        """
        try:
            envelope = _ListingEnvelope.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(f"Response is not a listing: {e}") from e

        return cls(
            items=[child.data for child in envelope.data.children],
            after=envelope.data.after,
            before=envelope.data.before,
        )


class Paginator:
    """Walks listing pages through a RedditClient.

    Usage:
        paginator = Paginator(client)
        posts = await paginator.paginate("r/python/new", item_limit=250)

        # Or lazily, page by page
        async for page in paginator.iter_pages("r/python/new"):
            handle(page.items)
    """

    def __init__(self, client: RedditClient, config: PaginationConfig | None = None) -> None:
        """Initialize the paginator.

        Args:
            client: Client every page is fetched through
            config: Optional pagination configuration (uses settings if not provided)
        """
        self._client = client
        self._config = config or get_settings().pagination

    async def iter_pages(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        *,
        item_limit: int | None = None,
        page_size: int | None = None,
        timeout: float | None = None,
    ) -> AsyncIterator[ListingPage[Any]]:
        """Yield listing pages lazily, following ``after`` cursors.

        Page N+1 is only requested once page N has been consumed, so breaking
        out of the loop stops the traversal.

        Args:
            endpoint: Listing path (e.g. "r/python/new")
            params: Extra query parameters sent with every page
            item_limit: Stop requesting pages once this many items were seen
            page_size: Items per page (defaults to configuration, capped at max_page_size)
            timeout: Per-request deadline for token and rate-limit waits

        Yields:
            ListingPage objects in traversal order
        """
        if item_limit is not None and item_limit < 1:
            raise ValueError("item_limit must be at least 1")
        if page_size is not None and page_size < 1:
            raise ValueError("page_size must be at least 1")

        log = bind_listing(endpoint)
        size = page_size or self._config.page_size
        if size > self._config.max_page_size:
            log.debug("Clamping page size {} to {}", size, self._config.max_page_size)
            size = self._config.max_page_size
        cursor: str | None = None
        requested: set[str] = set()
        count = 0

        while True:
            query = dict(params or {})
            query["limit"] = size
            if cursor is not None:
                query["after"] = cursor
                query["count"] = count

            payload = await self._client.fetch(endpoint, params=query, timeout=timeout)
            page: ListingPage[Any] = ListingPage.from_response(payload)
            count += len(page.items)
            log.debug(
                "Fetched page of {} items (total={}, after={})", len(page.items), count, page.after
            )

            yield page

            if page.after is None:
                return
            if item_limit is not None and count >= item_limit:
                return
            if page.after in requested:
                log.warning("Listing returned an already requested cursor {}; stopping", page.after)
                return

            requested.add(page.after)
            cursor = page.after

    async def paginate(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        item_limit: int | None = None,
        on_page: PageCallback | None = None,
        *,
        page_size: int | None = None,
        timeout: float | None = None,
    ) -> list[Any]:
        """Collect a listing into one ordered list.

        Items keep server order and are never deduplicated or truncated.
        If a page fails, the error propagates; pages already handed to
        ``on_page`` stay delivered.

        Args:
            endpoint: Listing path (e.g. "r/python/new")
            params: Extra query parameters sent with every page
            item_limit: Stop requesting pages once this many items were collected
            on_page: Sync or async callback receiving each page's items
            page_size: Items per page (defaults to configuration, capped at max_page_size)
            timeout: Per-request deadline for token and rate-limit waits

        Returns:
            All collected items (may exceed item_limit by up to one page)
        """
        items: list[Any] = []
        async for page in self.iter_pages(
            endpoint,
            params,
            item_limit=item_limit,
            page_size=page_size,
            timeout=timeout,
        ):
            items.extend(page.items)
            if on_page is not None:
                result = on_page(list(page.items))
                if asyncio.iscoroutine(result):
                    await result
        return items
