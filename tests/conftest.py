from __future__ import annotations

import json
import typing as t
import urllib.parse

import httpx
import pytest

from spotify_to_youtube.config import AppConfig
from spotify_to_youtube.registry import InMemoryRunRegistry

SPOTIFY_PAGE_SIZE = 100


def spotify_item(title: str, artist: str | None = None) -> dict[str, t.Any]:
    artists = [{"name": artist}] if artist else []
    return {"track": {"name": title, "artists": artists, "is_local": False}}


class FakeApi:
    """
    Stands in for Spotify, YouTube and Google OAuth behind an `httpx.MockTransport`.
    """

    def __init__(self: FakeApi) -> None:
        self.requests: list[httpx.Request] = []

        self.playlist_name = "Road Trip"
        self.spotify_items: list[dict[str, t.Any]] = []
        self.spotify_token_status = 200
        # page index -> status code
        self.spotify_page_statuses: dict[int, int] = {}

        self.channel_ids: list[str] = ["UC-listener"]
        self.channel_status = 200
        # query -> video ids, unknown queries have no results
        self.search_results: dict[str, list[str]] = {}
        self.created_playlist_id = "PLnew123"
        # consumed in order, 200 once empty
        self.insert_statuses: list[int] = []
        self.inserted: list[tuple[str, str]] = []
        self.created: list[dict[str, t.Any]] = []

        self.valid_access_tokens = {"ya29.valid"}
        self.refreshed_token = "ya29.refreshed"

    # helpers

    def add_tracks(self: FakeApi, *tracks: tuple[str, str | None]) -> None:
        self.spotify_items.extend(spotify_item(title, artist) for title, artist in tracks)

    def requests_to(self: FakeApi, host: str, path_suffix: str = "") -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host and r.url.path.endswith(path_suffix)]

    @property
    def searches(self: FakeApi) -> list[str]:
        return [r.url.params["q"] for r in self.requests_to("www.googleapis.com", "/search")]

    # routing

    def handler(self: FakeApi, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host

        if host == "accounts.spotify.com":
            return self.spotify_token(request)
        if host == "api.spotify.com":
            return self.spotify_api(request)
        if host == "oauth2.googleapis.com":
            return self.google_token(request)
        if host == "www.googleapis.com":
            return self.youtube_api(request)

        return httpx.Response(404)

    def spotify_token(self: FakeApi, request: httpx.Request) -> httpx.Response:
        if self.spotify_token_status != 200:
            body = {"error": "invalid_client", "error_description": "Invalid client secret"}
            return httpx.Response(self.spotify_token_status, json=body)
        return httpx.Response(200, json={"access_token": "spotify-app-token", "token_type": "Bearer", "expires_in": 3600})

    def spotify_api(self: FakeApi, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        playlist_id = path.split("/")[3]

        if not path.endswith("/tracks"):
            return httpx.Response(200, json={"name": self.playlist_name})

        offset = int(request.url.params.get("offset", 0))
        page_index = offset // SPOTIFY_PAGE_SIZE
        status = self.spotify_page_statuses.get(page_index, 200)
        if status != 200:
            return httpx.Response(status, json={"error": {"status": status, "message": "Invalid playlist Id"}})

        items = self.spotify_items[offset : offset + SPOTIFY_PAGE_SIZE]
        next_offset = offset + SPOTIFY_PAGE_SIZE
        next_url = None
        if next_offset < len(self.spotify_items):
            next_url = f"https://api.spotify.com/v1/playlists/{playlist_id}/tracks?offset={next_offset}&limit={SPOTIFY_PAGE_SIZE}"

        body = {"items": items, "next": next_url, "total": len(self.spotify_items)}
        return httpx.Response(200, json=body)

    def google_token(self: FakeApi, request: httpx.Request) -> httpx.Response:
        form = dict(urllib.parse.parse_qsl(request.content.decode()))
        if form.get("code") == "bad-code" or form.get("refresh_token") == "revoked":
            return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Bad Request"})

        self.valid_access_tokens.add(self.refreshed_token)
        body = {"access_token": self.refreshed_token, "expires_in": 3599, "token_type": "Bearer"}
        if form.get("grant_type") == "authorization_code":
            body["refresh_token"] = "1//refresh"
        return httpx.Response(200, json=body)

    def youtube_api(self: FakeApi, request: httpx.Request) -> httpx.Response:
        token = request.headers.get("Authorization", "").removeprefix("Bearer ")
        if token not in self.valid_access_tokens:
            return httpx.Response(401, json={"error": {"code": 401, "message": "Invalid Credentials"}})

        resource = request.url.path.rsplit("/", 1)[-1]

        if resource == "channels":
            if self.channel_status != 200:
                return httpx.Response(self.channel_status, json={"error": {"code": self.channel_status, "message": "Forbidden"}})
            return httpx.Response(200, json={"items": [{"id": c} for c in self.channel_ids]})

        if resource == "search":
            video_ids = self.search_results.get(request.url.params["q"], [])
            items = [{"id": {"kind": "youtube#video", "videoId": v}} for v in video_ids]
            return httpx.Response(200, json={"items": items})

        if resource == "playlists":
            self.created.append(json.loads(request.content))
            return httpx.Response(200, json={"id": self.created_playlist_id})

        if resource == "playlistItems":
            status = self.insert_statuses.pop(0) if self.insert_statuses else 200
            if status != 200:
                body = {"error": {"code": status, "message": "The operation was aborted."}}
                return httpx.Response(status, json=body)
            snippet = json.loads(request.content)["snippet"]
            self.inserted.append((snippet["playlistId"], snippet["resourceId"]["videoId"]))
            return httpx.Response(200, json={"id": f"item-{len(self.inserted)}"})

        return httpx.Response(404)


class RecordingSleep:
    def __init__(self: RecordingSleep) -> None:
        self.calls: list[float] = []

    async def __call__(self: RecordingSleep, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def client(fake_api: FakeApi) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def registry() -> InMemoryRunRegistry:
    return InMemoryRunRegistry()


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        spotify_client_id="spotify-id",
        spotify_client_secret="spotify-secret",
        google_client_id="google-id",
        google_client_secret="google-secret",
    )
