from __future__ import annotations

import os
import pathlib
import sys

APP_NAME = "spotify-to-youtube"


def _app_data() -> pathlib.Path:
    """
    Directory the credentials file lives in.

    `SPOTIFY_TO_YOUTUBE_HOME` wins when set, otherwise the platform's data dir:
    # linux: $XDG_DATA_HOME or ~/.local/share
    # macOS: ~/Library/Application Support
    # windows: %APPDATA%
    """
    override = os.environ.get("SPOTIFY_TO_YOUTUBE_HOME")
    if override:
        return pathlib.Path(override)

    home = pathlib.Path.home()
    if sys.platform == "win32":
        return pathlib.Path(os.environ.get("APPDATA", home / "AppData/Roaming")) / APP_NAME
    if sys.platform == "darwin":
        return home / "Library/Application Support" / APP_NAME
    # linux and the other unixes
    return pathlib.Path(os.environ.get("XDG_DATA_HOME", home / ".local/share")) / APP_NAME


APP_DATA = _app_data()
CREDENTIALS_PATH = APP_DATA / "credentials.json"
