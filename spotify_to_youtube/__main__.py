"""Entrypoint and CLI handler."""
from __future__ import annotations

import asyncio
import functools
import logging
import sys
import typing as t

import httpx
import rich
import rich_click as click
from rich.logging import RichHandler
from rich.progress import Progress
from rich.prompt import Prompt

from spotify_to_youtube import server
from spotify_to_youtube.config import load_config, load_credentials_file, save_config
from spotify_to_youtube.exceptions import ConfigError
from spotify_to_youtube.main import migrate as migrate_playlist
from spotify_to_youtube.paths import CREDENTIALS_PATH
from spotify_to_youtube.registry import InMemoryRunRegistry
from spotify_to_youtube.typings.core import MigrationRequest

console = rich.get_console()


def async_cmd(func: t.Callable) -> t.Callable:
    """
    Hack to make click support async commands.

    Reference:
        https://stackoverflow.com/q/67558717/10830115
    """

    @functools.wraps(func)
    def wrapper(*args: t.Any, **kwargs: t.Any) -> t.Any:
        return asyncio.run(func(*args, **kwargs))

    return wrapper


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, markup=True, console=console)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug output.")
def cli(verbose: bool) -> None:
    setup_logging(verbose)


@cli.command()
@async_cmd
async def setup() -> None:
    """
    Store Spotify and Google client credentials.
    """
    spotify_to_youtube_text = "[bold][green]Spotify[/green][reset]-to-[/reset][red]YouTube[/red][/bold]"
    welcome_text = f"{spotify_to_youtube_text} first time setup! [i grey53](Ctrl + C to exit)[/i grey53]\n"

    existing = await load_credentials_file()
    if existing:
        welcome_text += "[grey53]* Your secrets are already set! Press enter to keep a value.[/grey53]\n"

    rich.print(welcome_text)

    def style_prompt(prompt: str) -> str:
        return f"[bold white]{prompt}[/bold white][grey53]"

    values: dict[str, str] = {}
    for key, label in (
        ("spotify_client_id", "Spotify Client ID"),
        ("spotify_client_secret", "Spotify Client Secret"),
        ("google_client_id", "Google Client ID"),
        ("google_client_secret", "Google Client Secret"),
    ):
        values[key] = Prompt.ask(style_prompt(label), default=existing.get(key))  # type: ignore

    await save_config(values)
    rich.print(f"[bold green]Saved to [white]{CREDENTIALS_PATH}[/white]![/bold green]")


@cli.command()
@click.option("--host", type=str, default=None, help="Address to bind to.")
@click.option("--port", type=int, default=None, help="Port to listen on.")
def serve(host: str | None, port: int | None) -> None:
    """
    Run the migration HTTP server.
    """
    try:
        config = asyncio.run(load_config())
    except ConfigError as exc:
        rich.print(f"[bold red]{exc}. Please run `[white]setup[/white]` first.[/bold red]")
        sys.exit(1)

    updates = {k: v for k, v in (("host", host), ("port", port)) if v is not None}
    server.run(config.model_copy(update=updates))


@cli.command()
@async_cmd
@click.option("-s", "--spotify-url", required=True, type=str, help="Spotify playlist URL to migrate.")
@click.option("-y", "--youtube-url", type=str, default=None, help="Existing YouTube playlist URL to append to.")
@click.option("--access-token", envvar="YOUTUBE_ACCESS_TOKEN", required=True, type=str, help="YouTube OAuth access token.")
@click.option("--refresh-token", envvar="YOUTUBE_REFRESH_TOKEN", type=str, default=None, help="YouTube OAuth refresh token.")
async def migrate(
    spotify_url: str,
    youtube_url: str | None,
    access_token: str,
    refresh_token: str | None,
) -> None:
    """
    Migrate a Spotify playlist to YouTube.
    """
    try:
        config = await load_config()
    except ConfigError as exc:
        rich.print(f"[bold red]{exc}. Please run `[white]setup[/white]` first.[/bold red]")
        sys.exit(1)

    request = MigrationRequest(
        spotify_url=spotify_url,
        youtube_url=youtube_url,
        access_token=access_token,
        refresh_token=refresh_token,
    )

    async with httpx.AsyncClient(timeout=config.http_timeout) as client:
        with Progress(console=console) as progress:
            result = await migrate_playlist(
                request,
                config=config,
                registry=InMemoryRunRegistry(),
                client=client,
                progress=progress,
            )

    if result.failure is not None:
        rich.print(f"[bold red]ERROR ({result.failure.category}):[/bold red] {result.failure.message}")
        sys.exit(1)

    rich.print(f"[bold][red]YOUTUBE PLAYLIST:[/red] [white]{result.playlist_url}[/white][/bold]")


if __name__ == "__main__":
    cli()
