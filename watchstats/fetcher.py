"""Batched, paced metadata enrichment against the YouTube Data API"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, Optional, TypeVar

from .config import MAX_BATCH_SIZE, config
from .exceptions import QuotaOrNetworkError
from .identifiers import extract_channel_id, is_valid_video_id
from .models import ChannelMetadata, ChannelStat, VideoMetadata
from .youtube_client import TRANSPORT_ERRORS, YouTubeClient, describe_http_error

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]
T = TypeVar("T", VideoMetadata, ChannelMetadata)


@dataclass
class FetchResult(Generic[T]):
    """Best-effort enrichment: whatever resolved, plus the batches that failed"""

    metadata: dict[str, T] = field(default_factory=dict)
    failures: list[QuotaOrNetworkError] = field(default_factory=list)
    requested: int = 0


def _is_valid_channel_id(value: str) -> bool:
    return bool(value) and all(c.isalnum() or c in "_-." for c in value)


class MetadataFetcher:
    """
    Enrich video and channel ids in sequential batches

    Batches run strictly in order. Each blocking API call runs in the default
    executor so the event loop stays free, and a fixed delay separates
    consecutive batches. A failed batch is recorded and skipped.
    """

    def __init__(
        self,
        client: Optional[YouTubeClient] = None,
        api_key: Optional[str] = None,
        batch_size: Optional[int] = None,
        batch_delay: Optional[float] = None,
    ):
        self._client = client
        self._api_key = api_key
        self._validated = False
        self.batch_size = max(1, min(batch_size or config.batch_size, MAX_BATCH_SIZE))
        self.batch_delay = config.batch_delay_seconds if batch_delay is None else batch_delay

    async def ensure_credential(self) -> YouTubeClient:
        """
        Build the client and validate its key once per fetcher

        Raises:
            CredentialMissing, CredentialInvalid: before any network call
            CredentialRejected, QuotaOrNetworkError: from the validation call
        """
        if self._client is None:
            self._client = YouTubeClient(self._api_key)

        if not self._validated:
            logger.info("Validating YouTube API key...")
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._client.validate_credential)
            self._validated = True
            logger.info("API key validated successfully")

        return self._client

    async def fetch_video_metadata(
        self, video_ids: Iterable[str], progress: Optional[ProgressCallback] = None
    ) -> FetchResult[VideoMetadata]:
        """
        Fetch duration and title for every valid video id

        Args:
            video_ids: Candidate ids; malformed ones are dropped silently
            progress: Called with the processed fraction after each batch

        Returns:
            FetchResult keyed by video id
        """
        client = await self.ensure_credential()

        candidates = list(dict.fromkeys(video_ids))
        valid_ids = [video_id for video_id in candidates if is_valid_video_id(video_id)]
        logger.info(f"Processing {len(valid_ids)} valid video IDs out of {len(candidates)} total")

        return await self._fetch_batches(valid_ids, client.list_videos, "video", progress)

    async def fetch_channel_metadata(
        self, channels: Iterable[ChannelStat], progress: Optional[ProgressCallback] = None
    ) -> FetchResult[ChannelMetadata]:
        """
        Fetch display name and thumbnail for the given ranked channels

        Only the channels passed in are looked up, so callers bound the call
        volume by passing the top-ranked channels rather than the full history.
        """
        client = await self.ensure_credential()

        channel_ids = []
        for channel in channels:
            channel_id = extract_channel_id(channel.url)
            if channel_id and _is_valid_channel_id(channel_id):
                channel_ids.append(channel_id)
        channel_ids = list(dict.fromkeys(channel_ids))
        logger.info(f"Fetching details for {len(channel_ids)} channels")

        return await self._fetch_batches(channel_ids, client.list_channels, "channel", progress)

    async def _fetch_batches(
        self,
        ids: list[str],
        call: Callable[[list[str]], list],
        kind: str,
        progress: Optional[ProgressCallback],
    ) -> FetchResult:
        result: FetchResult = FetchResult(requested=len(ids))
        total = len(ids)
        loop = asyncio.get_running_loop()

        if total == 0:
            logger.info(f"No {kind} IDs to fetch")
            if progress is not None:
                progress(1.0)
            return result

        for start in range(0, total, self.batch_size):
            batch = ids[start:start + self.batch_size]
            end = start + len(batch)
            logger.info(f"Fetching {kind} batch {start}-{end}")

            try:
                items = await loop.run_in_executor(None, call, batch)
            except TRANSPORT_ERRORS as e:
                failure = QuotaOrNetworkError(describe_http_error(e), (start, end))
                logger.error(f"Error fetching {kind} batch {start}-{end}: {failure.detail}")
                result.failures.append(failure)
            else:
                for item in items:
                    result.metadata[item.id] = item
                logger.info(f"Successfully fetched {len(items)} {kind} details")

            if progress is not None:
                progress(end / total)

            if end < total and self.batch_delay > 0:
                await asyncio.sleep(self.batch_delay)

        logger.info(
            f"Resolved {len(result.metadata)} of {total} {kind} IDs "
            f"({len(result.failures)} failed batches)"
        )
        return result
