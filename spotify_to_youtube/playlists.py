from __future__ import annotations

import asyncio
import logging
import typing as t

from spotify_to_youtube.exceptions import InsertionConflictError
from spotify_to_youtube.typings.core import TargetPlaylistRef

if t.TYPE_CHECKING:
    from spotify_to_youtube.youtube import YouTubeClient

logger = logging.getLogger(__name__)

PLAYLIST_DESCRIPTION: t.Final = "Migrated from Spotify by spotify-to-youtube"
PLAYLIST_PRIVACY_STATUS: t.Final = "private"

Sleep = t.Callable[[float], t.Awaitable[t.Any]]


async def ensure_playlist(
    youtube: YouTubeClient,
    existing_id: str | None,
    source_playlist_name: str | t.Callable[[], t.Awaitable[str]],
) -> TargetPlaylistRef:
    """
    Returns the playlist to migrate into.

    A supplied id is trusted without checking it exists; a bad one shows up as an insertion failure.
    Otherwise a private playlist named after the source playlist is created.
    `source_playlist_name` may be a coroutine function so the name is only fetched when needed.
    """
    if existing_id:
        return TargetPlaylistRef(service_id=existing_id, is_new=False)

    if callable(source_playlist_name):
        source_playlist_name = await source_playlist_name()

    playlist_id = await youtube.create_playlist(
        title=source_playlist_name,
        description=PLAYLIST_DESCRIPTION,
        privacy_status=PLAYLIST_PRIVACY_STATUS,
    )
    logger.info(f"[bold red]YOUTUBE:[/bold red] Created Playlist ([grey53]{source_playlist_name}[/grey53])")

    return TargetPlaylistRef(service_id=playlist_id, is_new=True)


async def insert_with_retry(
    youtube: YouTubeClient,
    playlist_id: str,
    video_id: str,
    max_retries: int = 1,
    *,
    delay: float = 1.0,
    sleep: Sleep = asyncio.sleep,
) -> int:
    """
    Insert a video, retrying only on 409 conflicts.

    Makes at most `max_retries + 1` attempts with a fixed `delay` between them.
    Returns the number of attempts made.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            await youtube.insert_item(playlist_id, video_id)
        except InsertionConflictError:
            if attempt > max_retries:
                raise
            logger.warning(f"409 error on video {video_id}, retrying in {delay}s...")
            await sleep(delay)
        else:
            return attempt
