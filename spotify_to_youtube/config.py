from __future__ import annotations

import contextlib
import json
import os
import pathlib
import typing as t

import aiofiles
import pydantic
from pydantic import BaseModel

from spotify_to_youtube.exceptions import ConfigError
from spotify_to_youtube.paths import CREDENTIALS_PATH

# config key -> environment variable
ENV_VARIABLES: t.Final[dict[str, str]] = {
    "spotify_client_id": "SPOTIFY_CLIENT_ID",
    "spotify_client_secret": "SPOTIFY_CLIENT_SECRET",
    "google_client_id": "GOOGLE_CLIENT_ID",
    "google_client_secret": "GOOGLE_CLIENT_SECRET",
    "google_redirect_uri": "GOOGLE_REDIRECT_URI",
    "success_redirect_url": "SUCCESS_REDIRECT_URL",
    "host": "HOST",
    "port": "PORT",
    "pacing_interval": "PACING_INTERVAL",
    "retry_delay": "RETRY_DELAY",
    "max_retries": "MAX_RETRIES",
    "http_timeout": "HTTP_TIMEOUT",
}
REQUIRED_KEYS: t.Final = ("spotify_client_id", "spotify_client_secret")


class AppConfig(BaseModel):
    spotify_client_id: str
    spotify_client_secret: str
    google_client_id: t.Optional[str] = None
    google_client_secret: t.Optional[str] = None
    google_redirect_uri: str = "http://localhost:5000/oauth2callback"
    # frontend page the OAuth callback forwards tokens to, json response if unset
    success_redirect_url: t.Optional[str] = None
    host: str = "localhost"
    port: int = 5000
    # seconds
    pacing_interval: float = 0.3
    retry_delay: float = 1.0
    max_retries: int = 1
    http_timeout: float = 60

    @property
    def can_refresh_tokens(self: AppConfig) -> bool:
        return bool(self.google_client_id and self.google_client_secret)


def dict_or_env_value(data: dict[str, t.Any], key: str, env_variable: str | None = None) -> t.Any:
    """
    Gets a value from a provided dictionary or the system's environment variables.
    """
    with contextlib.suppress(KeyError):
        return data[key]
    with contextlib.suppress(KeyError):
        return os.environ[env_variable or key]
    return None


async def load_credentials_file(path: pathlib.Path = CREDENTIALS_PATH) -> dict[str, t.Any]:
    if not path.is_file():
        return {}

    async with aiofiles.open(path, "r") as file:
        credentials_text = await file.read()

    return json.loads(credentials_text)


def config_from_dict(data: dict[str, t.Any]) -> AppConfig:
    values: dict[str, t.Any] = {}
    for key, env_variable in ENV_VARIABLES.items():
        value = dict_or_env_value(data, key, env_variable)
        if value is not None and value != "":
            values[key] = value

    for key in REQUIRED_KEYS:
        if key not in values:
            raise ConfigError(key)

    try:
        return AppConfig(**values)
    except pydantic.ValidationError as exc:
        raise ConfigError(str(exc.errors()[0]["loc"][0]), "Invalid") from exc


async def load_config(path: pathlib.Path = CREDENTIALS_PATH) -> AppConfig:
    """
    Load configuration from the credentials file, falling back to environment variables
    for any key the file doesn't set.
    """
    data = await load_credentials_file(path)
    return config_from_dict(data)


async def save_config(values: dict[str, t.Any], path: pathlib.Path = CREDENTIALS_PATH) -> None:
    existing = await load_credentials_file(path)
    existing.update({k: v for k, v in values.items() if v is not None})

    path.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(path, "w") as file:
        await file.write(json.dumps(existing, indent=4))
