from __future__ import annotations

import asyncio
import functools
import logging
import typing as t

import httpx

from spotify_to_youtube import spotify
from spotify_to_youtube.commons import (
    migrated_message,
    parse_spotify_playlist_id,
    parse_youtube_playlist_id,
    task_description,
    youtube_playlist_url,
)
from spotify_to_youtube.exceptions import MigrationError, UpstreamError, ValidationError
from spotify_to_youtube.playlists import Sleep, ensure_playlist, insert_with_retry
from spotify_to_youtube.resolver import match_track
from spotify_to_youtube.typings.core import (
    MigrationRequest,
    MigrationResult,
    SourcePlaylistRef,
    TargetPlaylistRef,
    YouTubeCredentials,
)
from spotify_to_youtube.youtube import YouTubeClient

if t.TYPE_CHECKING:
    from rich.progress import Progress

    from spotify_to_youtube.config import AppConfig
    from spotify_to_youtube.registry import RunRegistry

logger = logging.getLogger(__name__)


def validate_request(
    request: MigrationRequest,
) -> tuple[SourcePlaylistRef, TargetPlaylistRef | None, YouTubeCredentials]:
    source = parse_spotify_playlist_id(request.spotify_url)
    target = parse_youtube_playlist_id(request.youtube_url)

    if not request.access_token:
        raise ValidationError("YouTube access token is required")

    credentials = YouTubeCredentials(
        access_token=request.access_token,
        refresh_token=request.refresh_token or None,
    )
    return source, target, credentials


async def migrate(
    request: MigrationRequest,
    *,
    config: AppConfig,
    registry: RunRegistry,
    client: httpx.AsyncClient,
    sleep: Sleep = asyncio.sleep,
    progress: Progress | None = None,
) -> MigrationResult:
    """
    Migrate one Spotify playlist into a YouTube playlist.

    Expected failures come back as a failed `MigrationResult` rather than being raised.
    The user's run guard is released on every way out.
    """
    result = MigrationResult()

    try:
        source, target, credentials = validate_request(request)

        youtube = YouTubeClient(client, credentials, config)
        user_id = await youtube.get_own_identity()

        async with registry.acquire(user_id):
            await run_migration(
                youtube,
                source,
                target,
                result,
                config=config,
                client=client,
                sleep=sleep,
                progress=progress,
            )
    except MigrationError as exc:
        logger.error(f"[bold red]FAILED:[/bold red] {exc.message}")
        return MigrationResult.failed(exc, **result.model_dump(exclude={"failure"}))
    except httpx.HTTPError as exc:
        logger.error(f"[bold red]FAILED:[/bold red] {exc!r}")
        error = UpstreamError(str(exc) or type(exc).__name__)
        return MigrationResult.failed(error, **result.model_dump(exclude={"failure"}))

    logger.info(
        migrated_message(
            url=result.playlist_url,
            inserted=result.tracks_inserted,
            skipped=result.tracks_skipped,
        )
    )
    return result


async def run_migration(
    youtube: YouTubeClient,
    source: SourcePlaylistRef,
    target: TargetPlaylistRef | None,
    result: MigrationResult,
    *,
    config: AppConfig,
    client: httpx.AsyncClient,
    sleep: Sleep,
    progress: Progress | None = None,
) -> None:
    """
    The pipeline itself, run while the user's guard is held.
    `result` is filled in as it goes so a failure still reports what was done.
    """
    token = await spotify.get_service_token(client, config.spotify_client_id, config.spotify_client_secret)
    tracks = await spotify.fetch_all_tracks(client, token, source.service_id)
    result.tracks_total = len(tracks)

    playlist = await ensure_playlist(
        youtube,
        target.service_id if target else None,
        functools.partial(spotify.get_playlist_name, client, token, source.service_id),
    )
    result.playlist_id = playlist.service_id
    result.playlist_url = youtube_playlist_url(playlist.service_id)
    result.is_new_playlist = playlist.is_new

    task_id = None
    if progress is not None:
        task_id = progress.add_task(task_description(querying="YouTube", color="red"), total=len(tracks))

    for index, track in enumerate(tracks):
        match = await match_track(youtube, index, track)

        if match.target_item_id is None:
            result.tracks_skipped += 1
        else:
            await insert_with_retry(
                youtube,
                playlist.service_id,
                match.target_item_id,
                config.max_retries,
                delay=config.retry_delay,
                sleep=sleep,
            )
            result.tracks_inserted += 1
            await sleep(config.pacing_interval)

        if progress is not None and task_id is not None:
            progress.advance(task_id, advance=1)
