"""
YouTube Service

URL parsing and video metadata lookup.

Metadata comes from a placeholder provider unless YOUTUBE_API_KEY is set, in
which case the YouTube Data API is queried. Both satisfy the same contract:
{url} in, {success, video, extractedIds} or {success: False, error} out.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import httpx

from credtube.core.config import settings
from credtube.core.http_client import get_json


logger = logging.getLogger(__name__)


YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"

VIDEO_ID_PATTERN = re.compile(
    r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([a-zA-Z0-9_-]{11})"
)
PLAYLIST_ID_PATTERN = re.compile(r"[?&]list=([a-zA-Z0-9_-]+)")

FALLBACK_VIDEO_ID = "dQw4w9WgXcQ"
PLACEHOLDER_DURATION = 600  # seconds

FETCH_FAILED_MESSAGE = "Failed to fetch YouTube data"


class InvalidYouTubeURL(ValueError):
    """Neither a video id nor a playlist id could be extracted."""


class MetadataUnavailable(Exception):
    """The metadata provider could not describe the video."""


@dataclass(frozen=True)
class ExtractedIds:
    video_id: Optional[str]
    playlist_id: Optional[str]

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"videoId": self.video_id, "playlistId": self.playlist_id}


def extract_youtube_ids(url: str) -> ExtractedIds:
    """
    Pull the video and/or playlist id out of a YouTube URL.

    Supports watch?v=, youtu.be/ and embed/ video links, and any URL with a
    list= parameter.

    Raises:
        InvalidYouTubeURL: If neither id is present.
    """
    video_match = VIDEO_ID_PATTERN.search(url)
    playlist_match = PLAYLIST_ID_PATTERN.search(url)

    ids = ExtractedIds(
        video_id=video_match.group(1) if video_match else None,
        playlist_id=playlist_match.group(1) if playlist_match else None,
    )
    if ids.video_id is None and ids.playlist_id is None:
        raise InvalidYouTubeURL("Invalid YouTube URL format")
    return ids


def thumbnail_url_for(video_id: Optional[str]) -> str:
    return f"https://img.youtube.com/vi/{video_id or FALLBACK_VIDEO_ID}/maxresdefault.jpg"


def parse_duration(duration_str: str) -> int:
    """
    Parse ISO 8601 duration string to seconds.

    Example: PT1H30M45S -> 5445 seconds
    """
    total = 0
    for amount, unit in re.findall(r"(\d+)([HMS])", duration_str):
        total += int(amount) * {"H": 3600, "M": 60, "S": 1}[unit]
    return total


# ============== Providers ==============

class MetadataProvider(Protocol):
    async def describe(self, ids: ExtractedIds) -> Dict[str, Any]:
        """Return {title, description, thumbnail, duration}."""
        ...


class PlaceholderMetadataProvider:
    """Fixed metadata; makes no network calls."""

    async def describe(self, ids: ExtractedIds) -> Dict[str, Any]:
        return {
            "title": "Sample YouTube Video Title",
            "description": (
                "This is a sample description of the YouTube video content that "
                "demonstrates the learning platform capabilities."
            ),
            "thumbnail": thumbnail_url_for(ids.video_id),
            "duration": PLACEHOLDER_DURATION,
        }


class YouTubeDataApiProvider:
    """Looks the video up through the YouTube Data API v3."""

    def __init__(self, api_key: str):
        self._api_key = api_key

    async def describe(self, ids: ExtractedIds) -> Dict[str, Any]:
        if ids.video_id is None:
            return await self._describe_playlist(ids.playlist_id)

        try:
            data = await get_json(
                f"{YOUTUBE_API_BASE}/videos",
                params={
                    "part": "snippet,contentDetails",
                    "id": ids.video_id,
                    "key": self._api_key,
                },
            )
        except httpx.HTTPError as e:
            raise MetadataUnavailable(f"YouTube API error: {e}") from e

        if not data.get("items"):
            raise MetadataUnavailable(f"Video not found: {ids.video_id}")

        try:
            item = data["items"][0]
            snippet = item["snippet"]
            return {
                "title": snippet["title"],
                "description": snippet.get("description", ""),
                "thumbnail": thumbnail_url_for(ids.video_id),
                "duration": parse_duration(item["contentDetails"]["duration"]),
            }
        except (KeyError, TypeError) as e:
            raise MetadataUnavailable(f"Incomplete video item for {ids.video_id}: {e}") from e

    async def _describe_playlist(self, playlist_id: Optional[str]) -> Dict[str, Any]:
        try:
            data = await get_json(
                f"{YOUTUBE_API_BASE}/playlists",
                params={"part": "snippet", "id": playlist_id, "key": self._api_key},
            )
        except httpx.HTTPError as e:
            raise MetadataUnavailable(f"YouTube API error: {e}") from e

        if not data.get("items"):
            raise MetadataUnavailable(f"Playlist not found: {playlist_id}")

        try:
            snippet = data["items"][0]["snippet"]
            return {
                "title": snippet["title"],
                "description": snippet.get("description", ""),
                "thumbnail": thumbnail_url_for(None),
                "duration": 0,
            }
        except (KeyError, TypeError) as e:
            raise MetadataUnavailable(f"Incomplete playlist item for {playlist_id}: {e}") from e


def get_metadata_provider() -> MetadataProvider:
    if settings.YOUTUBE_API_KEY:
        return YouTubeDataApiProvider(settings.YOUTUBE_API_KEY)
    return PlaceholderMetadataProvider()


# ============== Entry Point ==============

async def fetch_youtube_data(
    url: Optional[str],
    provider: Optional[MetadataProvider] = None,
) -> Dict[str, Any]:
    """
    Resolve a YouTube URL to video metadata.

    Returns:
        {"success": True, "video": {...}, "extractedIds": {...}} or
        {"success": False, "error": "..."}.
    """
    if not url:
        return {"success": False, "error": "YouTube URL is required"}

    try:
        ids = extract_youtube_ids(url)
    except InvalidYouTubeURL as e:
        return {"success": False, "error": str(e)}

    provider = provider or get_metadata_provider()
    try:
        video = await provider.describe(ids)
    except MetadataUnavailable as e:
        logger.error("Metadata lookup failed for %s: %s", url, e)
        return {"success": False, "error": FETCH_FAILED_MESSAGE}

    return {
        "success": True,
        "video": video,
        "extractedIds": ids.to_dict(),
    }
