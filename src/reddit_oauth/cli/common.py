"""Common CLI helpers.

Provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- Shared option type aliases
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Annotated, TypeVar

import typer
from rich.console import Console

from reddit_oauth.reddit.exceptions import RedditClientError

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from a synchronous CLI command with unified error handling.

    Reddit client errors are printed and turned into exit code 1; anything
    else propagates so genuine bugs keep their traceback.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        raise
    except RedditClientError as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


# Listing command options, declared once as Annotated aliases.

LimitOption = Annotated[
    int,
    typer.Option(
        "--limit",
        "-n",
        min=1,
        help="Stop requesting pages once this many items were collected",
    ),
]
"""Item limit option for listing commands.

Usage:
    def command(limit: LimitOption = 25):
"""

AnonymousOption = Annotated[
    bool,
    typer.Option(
        "--anonymous",
        help="Use the public host without credentials",
    ),
]
"""Anonymous session option.

Usage:
    def command(anonymous: AnonymousOption = False):
"""
