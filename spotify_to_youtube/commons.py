from __future__ import annotations

import re

from spotify_to_youtube.exceptions import ValidationError
from spotify_to_youtube.typings.core import SourcePlaylistRef, TargetPlaylistRef

# open.spotify.com/playlist/<id>?si=... and spotify:playlist:<id>
SPOTIFY_PLAYLIST_ID_REGEX = re.compile(r"(playlist\/|spotify:playlist:)(?P<id>[a-zA-Z0-9]+)")
# youtube.com/playlist?list=<id> and watch?v=...&list=<id>
YOUTUBE_PLAYLIST_ID_REGEX = re.compile(r"[?&]list=(?P<id>[a-zA-Z0-9_-]+)")

YOUTUBE_PLAYLIST_URL = "https://www.youtube.com/playlist?list={playlist_id}"


def parse_spotify_playlist_id(url: str | None) -> SourcePlaylistRef:
    if not url:
        raise ValidationError("Spotify URL is required")

    match = SPOTIFY_PLAYLIST_ID_REGEX.search(url)
    if not match:
        raise ValidationError("Invalid Spotify URL")

    return SourcePlaylistRef(service_id=match.group("id"))


def parse_youtube_playlist_id(url: str | None) -> TargetPlaylistRef | None:
    if not url:
        return None

    match = YOUTUBE_PLAYLIST_ID_REGEX.search(url)
    if not match:
        raise ValidationError("Invalid YouTube playlist URL")

    return TargetPlaylistRef(service_id=match.group("id"), is_new=False)


def youtube_playlist_url(playlist_id: str) -> str:
    return YOUTUBE_PLAYLIST_URL.format(playlist_id=playlist_id)


def task_description(*, querying: str, color: str, subtype: str | None = None) -> str:
    desc = f"[bold][{color}]Migrating {querying}"

    if subtype is not None:
        desc += f" [ [white]{subtype}[/white] ] "

    desc += f"[/{color}][/bold]..."
    return desc


def loaded_message(
    *,
    source: str,
    loaded: str,
    color: str,
    name: str | None = None,
    tracks_count: int | None = None,
) -> str:
    msg = f"[bold {color}]{source.upper()}:[/bold {color}] Loaded {loaded} "

    tracks_parens = ("(", ")")
    if name is not None:
        tracks_parens = ("[", "]")
        msg += f"([grey53]{name}[/grey53]) "
    if tracks_count is not None:
        left, right = tracks_parens
        msg += f"{left}[{color}]{tracks_count}[/{color}] [grey53]tracks[/grey53]{right}"

    return msg


def skipping_message(*, text: str, reason: str) -> str:
    return (
        f"[bold yellow1]SKIPPING:[/bold yellow1] {text} [yellow1][{reason}][/yellow1]"
    )


def migrated_message(*, url: str, inserted: int, skipped: int) -> str:
    return (
        f"[bold red]YOUTUBE:[/bold red] Migrated [red]{inserted}[/red] [grey53]tracks[/grey53] "
        f"([yellow1]{skipped}[/yellow1] [grey53]skipped[/grey53]) "
        f"to [blue underline]{url}[/blue underline]"
    )
