from __future__ import annotations

import pytest

from spotify_to_youtube.commons import (
    parse_spotify_playlist_id,
    parse_youtube_playlist_id,
    skipping_message,
    youtube_playlist_url,
)
from spotify_to_youtube.exceptions import ValidationError


@pytest.mark.parametrize(
    "url,expected_id",
    [
        ("https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M", "37i9dQZF1DXcBWIGoYBM5M"),
        ("https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M?si=a1b2c3", "37i9dQZF1DXcBWIGoYBM5M"),
        ("https://open.spotify.com/intl-de/playlist/5ABHKGoOzxkaa28ttQV9sE", "5ABHKGoOzxkaa28ttQV9sE"),
        ("spotify:playlist:5ABHKGoOzxkaa28ttQV9sE", "5ABHKGoOzxkaa28ttQV9sE"),
    ],
)
def test_parse_spotify_playlist_id(url: str, expected_id: str) -> None:
    assert parse_spotify_playlist_id(url).service_id == expected_id


@pytest.mark.parametrize(
    "url",
    [
        "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC",
        "https://open.spotify.com/playlist/",
        "not a url",
    ],
)
def test_parse_spotify_playlist_id_rejects_malformed(url: str) -> None:
    with pytest.raises(ValidationError, match="Invalid Spotify URL"):
        parse_spotify_playlist_id(url)


@pytest.mark.parametrize("url", [None, ""])
def test_parse_spotify_playlist_id_requires_url(url: str | None) -> None:
    with pytest.raises(ValidationError, match="required"):
        parse_spotify_playlist_id(url)


@pytest.mark.parametrize(
    "url,expected_id",
    [
        ("https://www.youtube.com/playlist?list=PLrAXtmErZgOeiKm4sgNOknGvNjby9efdf", "PLrAXtmErZgOeiKm4sgNOknGvNjby9efdf"),
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PL_a-b", "PL_a-b"),
    ],
)
def test_parse_youtube_playlist_id(url: str, expected_id: str) -> None:
    ref = parse_youtube_playlist_id(url)

    assert ref is not None
    assert ref.service_id == expected_id
    assert not ref.is_new


def test_parse_youtube_playlist_id_is_optional() -> None:
    assert parse_youtube_playlist_id(None) is None
    assert parse_youtube_playlist_id("") is None


def test_parse_youtube_playlist_id_rejects_malformed() -> None:
    with pytest.raises(ValidationError, match="Invalid YouTube playlist URL"):
        parse_youtube_playlist_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ")


def test_youtube_playlist_url() -> None:
    assert youtube_playlist_url("PLnew123") == "https://www.youtube.com/playlist?list=PLnew123"


def test_skipping_message() -> None:
    msg = skipping_message(text="Song", reason="No Results")

    assert "SKIPPING" in msg
    assert "No Results" in msg
