from __future__ import annotations

import typing as t
from dataclasses import field

from pydantic import BaseModel, ConfigDict, Field
from pydantic.dataclasses import dataclass

if t.TYPE_CHECKING:
    from spotify_to_youtube.exceptions import MigrationError


@dataclass(frozen=True)
class Track:
    title: str
    # first listed artist only
    artist: t.Optional[str] = None

    @property
    def colorized_query(self: Track) -> str:
        """
        Colorized track name used w/ rich lib for printing
        """
        if not self.artist:
            return f"[grey53]{self.title}[/grey53]"
        return f"[bold white]{self.artist}[/bold white] - [grey53]{self.title}[/grey53]"


@dataclass(frozen=True)
class SourcePlaylistRef:
    service_id: str


@dataclass(frozen=True)
class TargetPlaylistRef:
    service_id: str
    is_new: bool = False


@dataclass(frozen=True)
class CatalogMatch:
    track_index: int
    target_item_id: t.Optional[str] = None

    @property
    def matched(self: CatalogMatch) -> bool:
        return self.target_item_id is not None


@dataclass
class UserRunState:
    user_id: str
    pending: bool = False


@dataclass
class YouTubeCredentials:
    access_token: str
    refresh_token: t.Optional[str] = field(default=None, repr=False)


class MigrationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    spotify_url: t.Optional[str] = Field(default=None, alias="spotifyUrl")
    youtube_url: t.Optional[str] = Field(default=None, alias="youtubeUrl")
    access_token: t.Optional[str] = Field(default=None, alias="accessToken", repr=False)
    refresh_token: t.Optional[str] = Field(default=None, alias="refreshToken", repr=False)


class MigrationFailure(BaseModel):
    category: str
    message: str
    status_code: int = 500


class MigrationResult(BaseModel):
    playlist_id: t.Optional[str] = None
    playlist_url: t.Optional[str] = None
    is_new_playlist: bool = False
    tracks_total: int = 0
    tracks_inserted: int = 0
    tracks_skipped: int = 0
    failure: t.Optional[MigrationFailure] = None

    @property
    def ok(self: MigrationResult) -> bool:
        return self.failure is None

    @classmethod
    def failed(cls: type[MigrationResult], error: MigrationError, **kwargs: t.Any) -> MigrationResult:
        failure = MigrationFailure(
            category=error.category,
            message=error.message,
            status_code=error.status_code,
        )
        return cls(failure=failure, **kwargs)
