"""Error taxonomy for import, enrichment and download failures"""

from typing import Optional


class WatchStatsError(Exception):
    """Base class for all watch history errors"""


class FormatError(WatchStatsError):
    """The imported payload is not a usable history array"""


class CredentialError(WatchStatsError):
    """Enrichment credential problem; fatal to the enrichment phase only"""


class CredentialMissing(CredentialError):
    def __init__(self, message: str = "YouTube API key not found. Set YOUTUBE_API_KEY in your .env file."):
        super().__init__(message)


class CredentialInvalid(CredentialError):
    def __init__(self, message: str = "YouTube API key is a placeholder. Replace it with a real key."):
        super().__init__(message)


class CredentialRejected(CredentialError):
    """The remote service refused the credential"""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(
            f"API key validation failed: {detail}. Check that the key is correct, "
            "that YouTube Data API v3 is enabled and that key restrictions allow this client."
        )


class QuotaOrNetworkError(WatchStatsError):
    """A single API call failed; recorded and skipped unless raised during validation"""

    def __init__(self, detail: str, batch_range: Optional[tuple[int, int]] = None):
        self.detail = detail
        self.batch_range = batch_range
        if batch_range is None:
            super().__init__(f"Network error: {detail}")
        else:
            start, end = batch_range
            super().__init__(f"Batch {start}-{end} failed: {detail}")


class TakeoutError(WatchStatsError):
    """The delegated history export could not be completed"""
