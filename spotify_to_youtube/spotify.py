from __future__ import annotations

import json
import logging
import typing as t

import httpx
import pydantic

from spotify_to_youtube.commons import loaded_message, skipping_message
from spotify_to_youtube.exceptions import SourceFetchError
from spotify_to_youtube.typings.core import Track
from spotify_to_youtube.typings.spotify import (
    SpotifyPage,
    SpotifyPlaylist,
    SpotifyToken,
    SpotifyTrack,
    error_reason,
)

logger = logging.getLogger(__name__)

SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_API = "https://api.spotify.com/v1"
SPOTIFY_PLAYLIST_URL = SPOTIFY_API + "/playlists/{playlist_id}"
SPOTIFY_PLAYLIST_TRACKS_URL = SPOTIFY_PLAYLIST_URL + "/tracks"

PAGE_LIMIT = 100


def _json_or_none(resp: httpx.Response) -> t.Any:
    try:
        return resp.json()
    except json.decoder.JSONDecodeError:
        return None


def _raise_for_spotify_error(resp: httpx.Response, default: str) -> t.Any:
    data = _json_or_none(resp)
    if not resp.is_success:
        raise SourceFetchError(error_reason(data, default), status=resp.status_code)
    return data


async def get_service_token(client: httpx.AsyncClient, client_id: str, client_secret: str) -> str:
    """
    Client credentials grant.
    Only public catalog data can be read with it, which is all a migration needs.
    """
    resp = await client.post(
        SPOTIFY_TOKEN_URL,
        data={"grant_type": "client_credentials"},
        auth=(client_id, client_secret),
    )
    data = _raise_for_spotify_error(resp, "Failed to fetch Spotify token")
    return SpotifyToken(**data).access_token


async def get_playlist_name(client: httpx.AsyncClient, token: str, playlist_id: str) -> str:
    resp = await client.get(
        SPOTIFY_PLAYLIST_URL.format(playlist_id=playlist_id),
        params={"fields": "name"},
        headers={"Authorization": f"Bearer {token}"},
    )
    data = _raise_for_spotify_error(resp, "Failed to fetch playlist")
    return SpotifyPlaylist(**data).name


async def get_playlist_page(
    client: httpx.AsyncClient, token: str, playlist_id: str, cursor: str | None = None
) -> SpotifyPage:
    """
    Fetch one page of playlist items.
    `cursor` is the `next` url of the previous page, None for the first page.
    """
    headers = {"Authorization": f"Bearer {token}"}

    if cursor is None:
        url = SPOTIFY_PLAYLIST_TRACKS_URL.format(playlist_id=playlist_id)
        resp = await client.get(url, params={"limit": PAGE_LIMIT}, headers=headers)
    else:
        resp = await client.get(cursor, headers=headers)

    data = _raise_for_spotify_error(resp, "Failed to fetch tracks")
    return SpotifyPage(**data)


def spotify_items_to_tracks(spotify_items: t.Iterable[dict[str, t.Any]]) -> list[Track]:
    tracks: list[Track] = []
    for spotify_item in spotify_items:
        track_data = spotify_item.get("track")
        # removed or region locked tracks come back as null
        if not track_data:
            continue
        try:
            spotify_track = SpotifyTrack(**track_data)
        # blank names show up on some 'various artists' uploads,
        # w/o a name there's nothing to search for
        except pydantic.ValidationError:
            logger.debug(skipping_message(text=repr(track_data.get("id")), reason="Blank Name"))
            continue

        track = Track(title=spotify_track.name, artist=spotify_track.primary_artist_name)
        tracks.append(track)

    return tracks


async def fetch_all_tracks(client: httpx.AsyncClient, token: str, playlist_id: str) -> tuple[Track, ...]:
    """
    Load every track of a playlist in playlist order, following `next` until it runs out.
    A failing page discards everything loaded so far.
    """
    spotify_items: list[dict[str, t.Any]] = []

    page = await get_playlist_page(client, token, playlist_id)
    spotify_items.extend(page.items)

    # load all pages
    while page.next:
        page = await get_playlist_page(client, token, playlist_id, cursor=page.next)
        spotify_items.extend(page.items)

    tracks = tuple(spotify_items_to_tracks(spotify_items))

    logger.info(
        loaded_message(
            source="Spotify",
            loaded="Playlist",
            name=playlist_id,
            tracks_count=len(tracks),
            color="green",
        )
    )
    return tracks
