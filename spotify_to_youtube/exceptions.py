from __future__ import annotations

import typing as t


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""

    def __init__(self: ConfigError, key: str, problem: str = "Missing") -> None:
        super().__init__(f"{problem} configuration value: {key!r}")
        self.key = key


class MigrationError(Exception):
    """Base class for every failure a migration run can report."""

    category: t.ClassVar[str] = "internal"
    status_code: t.ClassVar[int] = 500

    def __init__(self: MigrationError, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MigrationError):
    """Raised when the request is missing or has malformed input."""

    category = "validation"
    status_code = 400


class AuthorizationError(MigrationError):
    """Raised when the YouTube user can't be identified with the given credentials."""

    category = "authorization"
    status_code = 401


class ConflictError(MigrationError):
    """Raised when a migration is already running for the same YouTube user."""

    category = "run_in_progress"
    status_code = 409

    def __init__(self: ConflictError, user_id: str) -> None:
        super().__init__("A migration is already in progress for this user.")
        self.user_id = user_id


class UpstreamError(MigrationError):
    """Raised when Spotify or YouTube rejects a call."""

    category = "upstream"
    status_code = 502
    service: t.ClassVar[str] = "upstream service"

    def __init__(self: UpstreamError, reason: str, status: int | None = None) -> None:
        super().__init__(f"{self.service} rejected the request: {reason}")
        self.reason = reason
        self.status = status


class SourceFetchError(UpstreamError):
    category = "source_fetch"
    service = "Spotify"


class ResolutionError(UpstreamError):
    category = "resolution"
    service = "YouTube search"


class PlaylistCreationError(UpstreamError):
    category = "playlist_creation"
    service = "YouTube"


class InsertionError(UpstreamError):
    category = "insertion"
    service = "YouTube"


class InsertionConflictError(InsertionError):
    """YouTube answered 409: the playlist is being modified, safe to retry shortly."""


class BlankNameError(ValueError):
    """Raised when a name is blank."""

    def __init__(self: BlankNameError, name: str) -> None:
        super().__init__(f"{name.capitalize()!r} name can't be blank")
