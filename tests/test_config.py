from __future__ import annotations

import json
import pathlib

import pytest

from spotify_to_youtube import paths
from spotify_to_youtube.config import ENV_VARIABLES, load_config, save_config
from spotify_to_youtube.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for env_variable in ENV_VARIABLES.values():
        monkeypatch.delenv(env_variable, raising=False)


@pytest.mark.asyncio
async def test_load_config_from_file(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps({"spotify_client_id": "id", "spotify_client_secret": "secret", "port": 8080}))

    config = await load_config(path)

    assert config.spotify_client_id == "id"
    assert config.port == 8080
    assert config.pacing_interval == 0.3
    assert config.retry_delay == 1.0
    assert config.max_retries == 1
    assert not config.can_refresh_tokens


@pytest.mark.asyncio
async def test_load_config_falls_back_to_env(tmp_path: pathlib.Path, monkeypatch) -> None:
    monkeypatch.setenv("SPOTIFY_CLIENT_ID", "env-id")
    monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "env-secret")
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "google-id")
    monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "google-secret")
    monkeypatch.setenv("PORT", "3000")

    config = await load_config(tmp_path / "missing.json")

    assert config.spotify_client_id == "env-id"
    assert config.port == 3000
    assert config.can_refresh_tokens


@pytest.mark.asyncio
async def test_file_wins_over_env(tmp_path: pathlib.Path, monkeypatch) -> None:
    monkeypatch.setenv("SPOTIFY_CLIENT_ID", "env-id")
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps({"spotify_client_id": "file-id", "spotify_client_secret": "secret"}))

    assert (await load_config(path)).spotify_client_id == "file-id"


@pytest.mark.asyncio
async def test_load_config_requires_spotify_credentials(tmp_path: pathlib.Path) -> None:
    with pytest.raises(ConfigError, match="spotify_client_id"):
        await load_config(tmp_path / "missing.json")


@pytest.mark.asyncio
async def test_load_config_invalid_value(tmp_path: pathlib.Path, monkeypatch) -> None:
    monkeypatch.setenv("SPOTIFY_CLIENT_ID", "id")
    monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "secret")
    monkeypatch.setenv("PORT", "not-a-port")

    with pytest.raises(ConfigError, match="port"):
        await load_config(tmp_path / "missing.json")


@pytest.mark.asyncio
async def test_save_config_merges(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "nested" / "credentials.json"

    await save_config({"spotify_client_id": "id", "spotify_client_secret": "secret"}, path)
    await save_config({"google_client_id": "google-id", "spotify_client_secret": None}, path)

    assert json.loads(path.read_text()) == {
        "spotify_client_id": "id",
        "spotify_client_secret": "secret",
        "google_client_id": "google-id",
    }


def test_app_data_override(monkeypatch, tmp_path: pathlib.Path) -> None:
    monkeypatch.setenv("SPOTIFY_TO_YOUTUBE_HOME", str(tmp_path))

    assert paths._app_data() == tmp_path


def test_app_data_is_namespaced(monkeypatch) -> None:
    monkeypatch.delenv("SPOTIFY_TO_YOUTUBE_HOME", raising=False)

    assert paths._app_data().name == paths.APP_NAME
