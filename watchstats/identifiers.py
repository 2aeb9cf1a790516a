"""Pull canonical video and channel ids out of YouTube URLs"""

import re
from typing import Optional

VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

# Checked in order; first match wins
_VIDEO_URL_PATTERNS = [
    re.compile(r"youtube\.com/watch\?(?:[^#]*&)?v=([A-Za-z0-9_-]{11})"),
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\.com/embed/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\.com/v/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\.com/shorts/([A-Za-z0-9_-]{11})"),
    re.compile(r"music\.youtube\.com/watch\?(?:[^#]*&)?v=([A-Za-z0-9_-]{11})"),
]

_CHANNEL_URL_PATTERNS = [
    re.compile(r"youtube\.com/channel/([A-Za-z0-9_-]+)"),
    re.compile(r"youtube\.com/c/([A-Za-z0-9_-]+)"),
    re.compile(r"youtube\.com/user/([A-Za-z0-9_-]+)"),
    re.compile(r"youtube\.com/@([A-Za-z0-9_.-]+)"),
]


def is_valid_video_id(value: object) -> bool:
    return isinstance(value, str) and bool(VIDEO_ID_PATTERN.match(value))


def extract_video_id(url: Optional[str]) -> Optional[str]:
    """
    Extract the 11-character video id from a watch, short, embed or music URL

    Returns None for empty input or unrecognised URLs.
    """
    if not url or not isinstance(url, str):
        return None

    for pattern in _VIDEO_URL_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)

    return None


def extract_channel_id(url: Optional[str]) -> Optional[str]:
    """
    Extract the channel token from a /channel/, /c/, /user/ or /@handle URL

    The token is only a true channel id for /channel/ URLs; the other forms
    yield a custom name or handle that the API may not resolve.
    """
    if not url or not isinstance(url, str):
        return None

    for pattern in _CHANNEL_URL_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)

    return None
