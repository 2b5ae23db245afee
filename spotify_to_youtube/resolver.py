from __future__ import annotations

import logging
import typing as t

from spotify_to_youtube.commons import skipping_message
from spotify_to_youtube.typings.core import CatalogMatch, Track

if t.TYPE_CHECKING:
    from spotify_to_youtube.youtube import YouTubeClient

logger = logging.getLogger(__name__)


def build_query(track: Track) -> str:
    if not track.artist:
        return track.title
    return f"{track.artist} {track.title}"


async def resolve_track(youtube: YouTubeClient, track: Track) -> str | None:
    """
    Best guess YouTube video id for a track.

    YouTube's own ranking is trusted as-is: the first hit wins, whether or not it's the right song.
    """
    video_id = await youtube.search_one(build_query(track))

    if video_id is None:
        logger.info(skipping_message(text=track.colorized_query, reason="No Results"))

    return video_id


async def match_track(youtube: YouTubeClient, track_index: int, track: Track) -> CatalogMatch:
    video_id = await resolve_track(youtube, track)
    return CatalogMatch(track_index=track_index, target_item_id=video_id)
