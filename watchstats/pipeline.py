"""End-to-end analysis: normalize, enrich, aggregate"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .aggregator import aggregate, rank_channels
from .config import config
from .exceptions import CredentialError, QuotaOrNetworkError
from .fetcher import MetadataFetcher, ProgressCallback
from .models import ChannelMetadata, StatisticsBundle, VideoMetadata
from .normalizer import normalize

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    bundle: StatisticsBundle
    # Single user-facing message when enrichment was degraded or skipped
    advisory: Optional[str] = None
    failures: list[QuotaOrNetworkError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "statistics": self.bundle.model_dump(mode="json"),
            "advisory": self.advisory,
            "failed_batches": [
                {"range": list(f.batch_range) if f.batch_range else None, "detail": f.detail}
                for f in self.failures
            ],
        }


NO_API_KEY_ADVISORY = "No YouTube API key configured; showing count-based statistics only."
ENRICHMENT_DISABLED_ADVISORY = "Enrichment turned off; showing count-based statistics only."


def default_fetcher() -> Optional[MetadataFetcher]:
    """A fetcher for the configured API key, or None when no key is set"""
    if not config.youtube_api_key:
        return None
    return MetadataFetcher()


async def analyze_history(
    raw: Any,
    fetcher: Optional[MetadataFetcher] = None,
    progress: Optional[ProgressCallback] = None,
    skip_reason: Optional[str] = None,
) -> AnalysisResult:
    """
    Run the full pipeline over one raw history export

    Enrichment problems never stop the analysis: without metadata the bundle
    holds count-based statistics only and the reason is put in the advisory.
    skip_reason explains a missing fetcher; it defaults to the no-key message.

    Raises:
        FormatError: if raw is not a history array
    """
    entries = normalize(raw)

    video_metadata: dict[str, VideoMetadata] = {}
    channel_metadata: dict[str, ChannelMetadata] = {}
    failures: list[QuotaOrNetworkError] = []
    advisory = None

    video_ids = [entry.video_id for entry in entries if entry.title_url and entry.video_id]
    logger.info(f"Extracted {len(video_ids)} video IDs from {len(entries)} entries")

    if fetcher is None:
        advisory = skip_reason or NO_API_KEY_ADVISORY
    elif not video_ids:
        advisory = "No valid YouTube video IDs found in the data"
    else:
        try:
            videos = await fetcher.fetch_video_metadata(video_ids, progress)
            video_metadata = videos.metadata
            failures.extend(videos.failures)

            top_regular, top_shorts = rank_channels(
                entries, video_metadata, limit=config.top_channel_count
            )
            top_channels = [*top_regular, *top_shorts]
            if top_channels:
                channels = await fetcher.fetch_channel_metadata(top_channels, progress)
                channel_metadata = channels.metadata
                failures.extend(channels.failures)
        except (CredentialError, QuotaOrNetworkError) as e:
            logger.error(f"API Error: {e}")
            advisory = str(e)

    if failures and advisory is None:
        advisory = f"{len(failures)} metadata batch(es) failed; some durations are missing."

    bundle = aggregate(entries, video_metadata, channel_metadata)
    return AnalysisResult(bundle=bundle, advisory=advisory, failures=failures)


def enrichment_for(enrich: bool) -> tuple[Optional[MetadataFetcher], Optional[str]]:
    """Fetcher to use and, when there is none, the reason to report"""
    if not enrich:
        return None, ENRICHMENT_DISABLED_ADVISORY
    fetcher = default_fetcher()
    if fetcher is None:
        return None, NO_API_KEY_ADVISORY
    return fetcher, None
