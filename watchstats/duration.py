"""ISO 8601 duration parsing and human-readable time formatting"""

import re

# Anything under a minute is counted as a Short. The export carries no
# ground-truth flag, so this is a heuristic, not YouTube's own classification.
SHORT_VIDEO_MAX_SECONDS = 60

_DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def parse_duration(duration_str: str) -> int:
    """
    Parse ISO 8601 duration to seconds

    Example: PT1H2M10S -> 3730 seconds. Malformed input yields 0.
    """
    if not isinstance(duration_str, str):
        return 0

    match = _DURATION_PATTERN.search(duration_str)

    if not match:
        return 0

    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    seconds = int(match.group(3) or 0)

    return hours * 3600 + minutes * 60 + seconds


def format_duration(seconds: int) -> str:
    """Format seconds as '1h 1m', '2m 5s' or '45s'"""
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def is_short(duration_seconds: int) -> bool:
    return duration_seconds < SHORT_VIDEO_MAX_SECONDS


def format_hour(hour: int) -> str:
    """Render an hour bucket on a 12-hour clock"""
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"
