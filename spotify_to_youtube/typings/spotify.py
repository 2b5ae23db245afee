from __future__ import annotations

import typing as t

from pydantic import BaseModel, field_validator

from spotify_to_youtube.exceptions import BlankNameError


class SpotifyToken(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600


class SpotifyPage(BaseModel):
    # raw items; tracks are validated one at a time so a single bad item can be skipped
    items: list[dict[str, t.Any]]
    next: t.Optional[str] = None


class SpotifyPlaylist(BaseModel):
    name: str


class SpotifyArtist(BaseModel):
    name: t.Optional[str] = None


class SpotifyTrack(BaseModel):
    name: str
    artists: list[SpotifyArtist] = []

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:  # noqa: N805
        if not v.strip():
            raise BlankNameError("track")
        return v

    @property
    def primary_artist_name(self: SpotifyTrack) -> str | None:
        # local files and some podcast episodes come back with no artists or blank ones
        if not self.artists or not self.artists[0].name:
            return None
        return self.artists[0].name


def error_reason(data: t.Any, default: str) -> str:
    """
    Pulls the human readable reason out of a Spotify error body.
    The Web API nests it (`{"error": {"message": ...}}`),
    the accounts service doesn't (`{"error": ..., "error_description": ...}`).
    """
    if not isinstance(data, dict):
        return default

    error = data.get("error")
    if isinstance(error, dict):
        return error.get("message") or default

    return data.get("error_description") or error or default
