"""YouTube Data API v3 client"""

import logging
from typing import Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error

from .config import PLACEHOLDER_API_KEYS, config
from .duration import is_short, parse_duration
from .exceptions import (
    CredentialInvalid,
    CredentialMissing,
    CredentialRejected,
    QuotaOrNetworkError,
)
from .models import ChannelMetadata, VideoMetadata

logger = logging.getLogger(__name__)

# Errors raised by the discovery client for a single request
TRANSPORT_ERRORS = (HttpError, HttpLib2Error, OSError)


def describe_http_error(error: Exception) -> str:
    """Short human-readable description of a failed API request"""
    if isinstance(error, HttpError):
        reason = getattr(error, "reason", None) or error.resp.reason
        return f"API returned {error.resp.status}: {reason}"
    return str(error) or error.__class__.__name__


class YouTubeClient:
    """Client for YouTube Data API v3"""

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else config.youtube_api_key
        if not self.api_key:
            raise CredentialMissing()
        if self.api_key in PLACEHOLDER_API_KEYS:
            raise CredentialInvalid()

        self.youtube = build("youtube", "v3", developerKey=self.api_key, cache_discovery=False)

    def validate_credential(self) -> None:
        """
        Check the key against the API with one minimal search request

        Raises:
            CredentialRejected: the API refused the key
            QuotaOrNetworkError: the API could not be reached
        """
        try:
            self.youtube.search().list(
                part="snippet", q="test", type="video", maxResults=1
            ).execute()
        except HttpError as e:
            logger.error(f"API key validation failed: {e}")
            raise CredentialRejected(describe_http_error(e)) from e
        except (HttpLib2Error, OSError) as e:
            logger.error(f"API key validation could not reach the API: {e}")
            raise QuotaOrNetworkError(describe_http_error(e)) from e

    def list_videos(self, video_ids: list[str]) -> list[VideoMetadata]:
        """
        Fetch details for up to 50 videos in one request

        Args:
            video_ids: YouTube video IDs

        Returns:
            VideoMetadata for every id the API resolved; deleted or private
            videos are simply missing
        """
        response = self.youtube.videos().list(
            part="contentDetails,snippet", id=",".join(video_ids), maxResults=len(video_ids)
        ).execute()

        videos = []
        for item in response.get("items", []):
            try:
                videos.append(self._parse_video_metadata(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed video item {item.get('id')}: {e}")
        return videos

    def list_channels(self, channel_ids: list[str]) -> list[ChannelMetadata]:
        """Fetch snippet details for up to 50 channels in one request"""
        response = self.youtube.channels().list(
            part="snippet", id=",".join(channel_ids), maxResults=len(channel_ids)
        ).execute()

        channels = []
        for item in response.get("items", []):
            try:
                channels.append(self._parse_channel_metadata(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed channel item {item.get('id')}: {e}")
        return channels

    def _parse_video_metadata(self, item: dict) -> VideoMetadata:
        """Parse YouTube API response into VideoMetadata"""
        snippet = item.get("snippet", {})
        content_details = item.get("contentDetails", {})

        duration = parse_duration(content_details.get("duration", "PT0S"))

        return VideoMetadata(
            id=item["id"],
            duration_seconds=duration,
            is_short=is_short(duration),
            title=snippet.get("title", ""),
        )

    def _parse_channel_metadata(self, item: dict) -> ChannelMetadata:
        """Parse YouTube API response into ChannelMetadata"""
        snippet = item["snippet"]

        # Medium thumbnail first, then whatever the API has
        thumbnails = snippet.get("thumbnails", {})
        thumbnail_url = (
            thumbnails.get("medium", {}).get("url")
            or thumbnails.get("default", {}).get("url")
            or ""
        )

        return ChannelMetadata(
            id=item["id"],
            display_name=snippet["title"],
            thumbnail_url=thumbnail_url,
        )
