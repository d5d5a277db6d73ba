"""Reddit API verification commands."""

from typing import Any

import typer
from rich.table import Table

from reddit_oauth.cli.common import AnonymousOption, LimitOption, console, run_async_command
from reddit_oauth.config import get_settings
from reddit_oauth.reddit import AuthError, RedditAPI, RedditClient

app = typer.Typer(help="Reddit API commands")


def _build_client(anonymous: bool) -> RedditClient:
    if anonymous:
        return RedditClient()
    try:
        return RedditClient.from_settings()
    except AuthError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


@app.command("test")
def test_connection() -> None:
    """Authenticate, fetch the current account and show the rate limit budget.

    Examples:
        redditoauth reddit test
    """

    async def _test() -> None:
        async with _build_client(anonymous=False) as client:
            console.print("[bold]Authenticating...[/bold]")
            me = await RedditAPI(client).me()
            console.print(f"  Logged in as [cyan]u/{me.name}[/cyan]")
            console.print(f"  Karma: {me.link_karma} link / {me.comment_karma} comment")

            if client.token_manager is not None:
                auth = client.token_manager.to_dict()
                console.print(f"  Flow: {auth['flow']}, scopes: {auth['scopes']}")

            budget = client.rate_limiter.to_dict()
            if budget["constrained"]:
                console.print(
                    f"  Rate limit: {budget['remaining']} remaining "
                    f"(resets in {budget['seconds_until_reset']:.0f}s)"
                )
            else:
                console.print("  Rate limit: not reported")

        console.print("\n[green]Connection OK[/green]")

    run_async_command(_test(), error_prefix="Connection test failed")


@app.command("listing")
def listing(
    endpoint: str = typer.Argument(help="Listing path (e.g. r/python/new)"),
    limit: LimitOption = 25,
    anonymous: AnonymousOption = False,
) -> None:
    """Paginate a listing and print the collected items.

    Examples:
        redditoauth reddit listing r/python/new --limit 250
        redditoauth reddit listing r/python/top --anonymous
    """
    settings = get_settings()

    async def _listing() -> list[Any]:
        pages = 0

        def _count_page(items: list[Any]) -> None:
            nonlocal pages
            pages += 1
            console.print(f"  page {pages}: {len(items)} items", style="dim")

        async with _build_client(anonymous) as client:
            items = await client.paginate(
                endpoint,
                item_limit=limit,
                on_page=_count_page,
                page_size=min(limit, settings.pagination.page_size),
            )
        return items

    items = run_async_command(_listing(), error_prefix="Listing failed")

    table = Table(title=f"{endpoint} ({len(items)} items)")
    table.add_column("Fullname", style="cyan")
    table.add_column("Author")
    table.add_column("Title / Body", max_width=60)
    for item in items:
        if not isinstance(item, dict):
            continue
        text = item.get("title") or item.get("body") or ""
        table.add_row(
            str(item.get("name", "")),
            str(item.get("author", "")),
            text[:57] + "..." if len(text) > 60 else text,
        )
    console.print(table)
