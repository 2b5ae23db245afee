from __future__ import annotations

import json
import logging
import typing as t
import urllib.parse

import httpx

from spotify_to_youtube.exceptions import (
    AuthorizationError,
    InsertionConflictError,
    InsertionError,
    PlaylistCreationError,
    ResolutionError,
    UpstreamError,
)
from spotify_to_youtube.typings.core import YouTubeCredentials
from spotify_to_youtube.typings.youtube import (
    GoogleTokens,
    YouTubeChannelList,
    YouTubePlaylist,
    YouTubeSearchResponse,
    error_reason,
)

if t.TYPE_CHECKING:
    from spotify_to_youtube.config import AppConfig

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
YOUTUBE_API = "https://www.googleapis.com/youtube/v3"

YOUTUBE_SCOPES: t.Final = (
    "https://www.googleapis.com/auth/youtube",
    "https://www.googleapis.com/auth/youtube.force-ssl",
)

# playlist is being modified by youtube itself, goes away after a moment
CONFLICT_STATUS: t.Final = 409


def _json_or_none(resp: httpx.Response) -> t.Any:
    try:
        return resp.json()
    except json.decoder.JSONDecodeError:
        return None


def authorization_url(config: AppConfig, state: str | None = None) -> str:
    params = {
        "client_id": config.google_client_id or "",
        "redirect_uri": config.google_redirect_uri,
        "response_type": "code",
        "access_type": "offline",
        "prompt": "consent",
        "scope": " ".join(YOUTUBE_SCOPES),
    }
    if state is not None:
        params["state"] = state
    return f"{GOOGLE_AUTH_URL}?{urllib.parse.urlencode(params)}"


async def _token_request(client: httpx.AsyncClient, data: dict[str, str]) -> GoogleTokens:
    resp = await client.post(GOOGLE_TOKEN_URL, data=data)
    body = _json_or_none(resp)
    if not resp.is_success:
        raise AuthorizationError(error_reason(body, "Failed to fetch YouTube token"))
    return GoogleTokens(**body)


async def exchange_auth_code(client: httpx.AsyncClient, config: AppConfig, code: str) -> GoogleTokens:
    return await _token_request(
        client,
        {
            "code": code,
            "client_id": config.google_client_id or "",
            "client_secret": config.google_client_secret or "",
            "redirect_uri": config.google_redirect_uri,
            "grant_type": "authorization_code",
        },
    )


async def refresh_access_token(client: httpx.AsyncClient, config: AppConfig, refresh_token: str) -> GoogleTokens:
    return await _token_request(
        client,
        {
            "refresh_token": refresh_token,
            "client_id": config.google_client_id or "",
            "client_secret": config.google_client_secret or "",
            "grant_type": "refresh_token",
        },
    )


class YouTubeClient:
    """
    YouTube Data API v3 calls made on behalf of one user.

    The credentials belong to a single migration run. An expired access token is
    refreshed once per request when a refresh token and Google client secrets are available.
    """

    def __init__(
        self: YouTubeClient,
        client: httpx.AsyncClient,
        credentials: YouTubeCredentials,
        config: AppConfig | None = None,
    ) -> None:
        self.client = client
        self.credentials = credentials
        self.config = config

    @property
    def can_refresh(self: YouTubeClient) -> bool:
        return bool(self.credentials.refresh_token and self.config and self.config.can_refresh_tokens)

    async def _refresh(self: YouTubeClient) -> None:
        # only called once `can_refresh` holds
        tokens = await refresh_access_token(self.client, self.config, self.credentials.refresh_token)
        self.credentials.access_token = tokens.access_token
        if tokens.refresh_token:
            self.credentials.refresh_token = tokens.refresh_token
        logger.debug("Refreshed YouTube access token")

    async def request(
        self: YouTubeClient,
        method: str,
        path: str,
        *,
        error_cls: type[UpstreamError],
        default_reason: str,
        params: dict[str, t.Any] | None = None,
        json_body: dict[str, t.Any] | None = None,
    ) -> t.Any:
        url = f"{YOUTUBE_API}/{path}"

        async def send() -> httpx.Response:
            headers = {"Authorization": f"Bearer {self.credentials.access_token}"}
            return await self.client.request(method, url, params=params, json=json_body, headers=headers)

        resp = await send()
        if resp.status_code == 401 and self.can_refresh:
            await self._refresh()
            resp = await send()

        data = _json_or_none(resp)
        if resp.status_code == 401:
            raise AuthorizationError(error_reason(data, "YouTube credentials were rejected"))
        if resp.status_code == CONFLICT_STATUS and issubclass(error_cls, InsertionError):
            raise InsertionConflictError(error_reason(data, default_reason), status=resp.status_code)
        if not resp.is_success:
            raise error_cls(error_reason(data, default_reason), status=resp.status_code)

        return data

    async def get_own_identity(self: YouTubeClient) -> str:
        """
        Id of the channel the credentials belong to.
        """
        try:
            data = await self.request(
                "GET",
                "channels",
                params={"part": "id", "mine": "true"},
                error_cls=UpstreamError,
                default_reason="Failed to fetch YouTube channel",
            )
        except UpstreamError as exc:
            raise AuthorizationError(exc.reason) from exc

        channels = YouTubeChannelList(**data)
        if not channels.items:
            raise AuthorizationError("No YouTube channel found for these credentials")

        return channels.items[0].id

    async def search_one(self: YouTubeClient, query: str) -> str | None:
        data = await self.request(
            "GET",
            "search",
            params={"part": "snippet", "q": query, "maxResults": 1, "type": "video"},
            error_cls=ResolutionError,
            default_reason="Failed to search YouTube",
        )
        search = YouTubeSearchResponse(**data)

        if not search.items:
            return None

        return search.items[0].id.video_id

    async def create_playlist(
        self: YouTubeClient, title: str, description: str, privacy_status: str = "private"
    ) -> str:
        data = await self.request(
            "POST",
            "playlists",
            params={"part": "snippet,status"},
            json_body={
                "snippet": {"title": title, "description": description},
                "status": {"privacyStatus": privacy_status},
            },
            error_cls=PlaylistCreationError,
            default_reason="Failed to create YouTube playlist",
        )
        return YouTubePlaylist(**data).id

    async def insert_item(self: YouTubeClient, playlist_id: str, video_id: str) -> None:
        await self.request(
            "POST",
            "playlistItems",
            params={"part": "snippet"},
            json_body={
                "snippet": {
                    "playlistId": playlist_id,
                    "resourceId": {"kind": "youtube#video", "videoId": video_id},
                }
            },
            error_cls=InsertionError,
            default_reason=f"Failed to insert video {video_id}",
        )
