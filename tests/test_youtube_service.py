"""
YouTube Service Unit Tests

Tests for URL parsing, the placeholder metadata provider and the Data API
provider.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from credtube.services.youtube_service import (
    FETCH_FAILED_MESSAGE,
    ExtractedIds,
    InvalidYouTubeURL,
    MetadataUnavailable,
    PlaceholderMetadataProvider,
    YouTubeDataApiProvider,
    extract_youtube_ids,
    fetch_youtube_data,
    get_metadata_provider,
    parse_duration,
)


class TestExtractYouTubeIds:
    """Tests for extract_youtube_ids."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ",
            "https://www.youtube.com/embed/dQw4w9WgXcQ",
        ],
    )
    def test_video_url_forms(self, url):
        ids = extract_youtube_ids(url)

        assert ids.video_id == "dQw4w9WgXcQ"
        assert ids.playlist_id is None

    def test_playlist_url(self):
        ids = extract_youtube_ids("https://www.youtube.com/playlist?list=PLabc_123-xyz")

        assert ids.video_id is None
        assert ids.playlist_id == "PLabc_123-xyz"

    def test_video_inside_playlist(self):
        ids = extract_youtube_ids("https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PLabc")

        assert ids.to_dict() == {"videoId": "dQw4w9WgXcQ", "playlistId": "PLabc"}

    def test_unrecognized_url_raises(self):
        with pytest.raises(InvalidYouTubeURL):
            extract_youtube_ids("https://vimeo.com/123456")


class TestParseDuration:

    def test_full_duration(self):
        assert parse_duration("PT1H30M45S") == 5445

    def test_minutes_only(self):
        assert parse_duration("PT10M") == 600

    def test_empty(self):
        assert parse_duration("P0D") == 0


class TestFetchYouTubeData:
    """Tests for fetch_youtube_data."""

    @pytest.mark.asyncio
    async def test_missing_url(self):
        result = await fetch_youtube_data("")

        assert result == {"success": False, "error": "YouTube URL is required"}

    @pytest.mark.asyncio
    async def test_invalid_url(self):
        result = await fetch_youtube_data("https://example.com/video")

        assert result == {"success": False, "error": "Invalid YouTube URL format"}

    @pytest.mark.asyncio
    async def test_placeholder_metadata(self):
        result = await fetch_youtube_data(
            "https://youtu.be/abcdefghijk",
            provider=PlaceholderMetadataProvider(),
        )

        assert result["success"] is True
        assert result["video"]["duration"] == 600
        assert result["video"]["thumbnail"] == "https://img.youtube.com/vi/abcdefghijk/maxresdefault.jpg"
        assert result["extractedIds"] == {"videoId": "abcdefghijk", "playlistId": None}

    @pytest.mark.asyncio
    async def test_playlist_only_uses_fallback_thumbnail(self):
        result = await fetch_youtube_data(
            "https://www.youtube.com/playlist?list=PLabc",
            provider=PlaceholderMetadataProvider(),
        )

        assert result["video"]["thumbnail"] == "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"

    @pytest.mark.asyncio
    async def test_provider_failure(self):
        provider = AsyncMock()
        provider.describe = AsyncMock(side_effect=MetadataUnavailable("quota exceeded"))

        result = await fetch_youtube_data("https://youtu.be/abcdefghijk", provider=provider)

        assert result == {"success": False, "error": FETCH_FAILED_MESSAGE}


class TestProviderSelection:

    def test_placeholder_without_api_key(self):
        with patch("credtube.services.youtube_service.settings") as mock_settings:
            mock_settings.YOUTUBE_API_KEY = ""
            assert isinstance(get_metadata_provider(), PlaceholderMetadataProvider)

    def test_data_api_with_key(self):
        with patch("credtube.services.youtube_service.settings") as mock_settings:
            mock_settings.YOUTUBE_API_KEY = "test-key"
            assert isinstance(get_metadata_provider(), YouTubeDataApiProvider)


class TestYouTubeDataApiProvider:
    """Tests for the Data API provider with get_json patched."""

    @pytest.mark.asyncio
    async def test_describes_video(self):
        payload = {
            "items": [
                {
                    "snippet": {"title": "Graph Theory", "description": "Nodes and edges"},
                    "contentDetails": {"duration": "PT12M3S"},
                }
            ]
        }
        with patch(
            "credtube.services.youtube_service.get_json",
            new=AsyncMock(return_value=payload),
        ) as get_json:
            video = await YouTubeDataApiProvider("key").describe(
                ExtractedIds(video_id="abcdefghijk", playlist_id=None)
            )

        assert video["title"] == "Graph Theory"
        assert video["duration"] == 723
        assert get_json.await_args.kwargs["params"]["id"] == "abcdefghijk"

    @pytest.mark.asyncio
    async def test_unknown_video(self):
        with patch(
            "credtube.services.youtube_service.get_json",
            new=AsyncMock(return_value={"items": []}),
        ):
            with pytest.raises(MetadataUnavailable):
                await YouTubeDataApiProvider("key").describe(
                    ExtractedIds(video_id="abcdefghijk", playlist_id=None)
                )

    @pytest.mark.asyncio
    async def test_http_error_becomes_unavailable(self):
        with patch(
            "credtube.services.youtube_service.get_json",
            new=AsyncMock(side_effect=httpx.ConnectError("down")),
        ):
            with pytest.raises(MetadataUnavailable):
                await YouTubeDataApiProvider("key").describe(
                    ExtractedIds(video_id=None, playlist_id="PLabc")
                )

    @pytest.mark.asyncio
    async def test_item_without_content_details_becomes_unavailable(self):
        payload = {"items": [{"snippet": {"title": "Graph Theory"}}]}
        with patch(
            "credtube.services.youtube_service.get_json",
            new=AsyncMock(return_value=payload),
        ):
            with pytest.raises(MetadataUnavailable):
                await YouTubeDataApiProvider("key").describe(
                    ExtractedIds(video_id="abcdefghijk", playlist_id=None)
                )

    @pytest.mark.asyncio
    async def test_playlist_item_without_snippet_becomes_unavailable(self):
        with patch(
            "credtube.services.youtube_service.get_json",
            new=AsyncMock(return_value={"items": [{"id": "PLabc"}]}),
        ):
            with pytest.raises(MetadataUnavailable):
                await YouTubeDataApiProvider("key").describe(
                    ExtractedIds(video_id=None, playlist_id="PLabc")
                )

    @pytest.mark.asyncio
    async def test_partial_item_reports_fetch_failure(self):
        payload = {"items": [{"contentDetails": {"duration": "PT3M"}}]}
        with patch(
            "credtube.services.youtube_service.get_json",
            new=AsyncMock(return_value=payload),
        ):
            result = await fetch_youtube_data(
                "https://youtu.be/abcdefghijk",
                provider=YouTubeDataApiProvider("key"),
            )

        assert result == {"success": False, "error": FETCH_FAILED_MESSAGE}
