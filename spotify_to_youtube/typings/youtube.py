from __future__ import annotations

import typing as t

from pydantic import BaseModel, ConfigDict, Field


class YouTubeResourceId(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: str
    video_id: t.Optional[str] = Field(default=None, alias="videoId")


class YouTubeSearchItem(BaseModel):
    id: YouTubeResourceId


class YouTubeSearchResponse(BaseModel):
    items: list[YouTubeSearchItem] = []


class YouTubeChannel(BaseModel):
    id: str


class YouTubeChannelList(BaseModel):
    items: list[YouTubeChannel] = []


class YouTubePlaylist(BaseModel):
    id: str


class GoogleTokens(BaseModel):
    access_token: str
    refresh_token: t.Optional[str] = None
    expires_in: t.Optional[int] = None
    scope: t.Optional[str] = None
    token_type: str = "Bearer"


def error_reason(data: t.Any, default: str) -> str:
    """
    Pulls the message out of a Google API error body:
    `{"error": {"code": 409, "message": "...", "errors": [...]}}`
    OAuth endpoints use `{"error": "...", "error_description": "..."}` instead.
    """
    if not isinstance(data, dict):
        return default

    error = data.get("error")
    if isinstance(error, dict):
        return error.get("message") or default

    return data.get("error_description") or error or default
