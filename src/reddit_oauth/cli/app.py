"""Main CLI application for reddit-oauth."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from reddit_oauth import __version__
from reddit_oauth.cli import reddit as reddit_cmd
from reddit_oauth.config import get_settings
from reddit_oauth.logging import setup_logging

app = typer.Typer(
    name="redditoauth",
    help="Async Reddit API client with OAuth2, rate limiting and pagination.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"redditoauth version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """reddit-oauth - talk to the Reddit API from the command line."""
    settings = get_settings()
    log_config = settings.logging

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


app.add_typer(reddit_cmd.app, name="reddit")


if __name__ == "__main__":
    app()
