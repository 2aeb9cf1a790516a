"""Plain-text rendering of a StatisticsBundle"""

from .duration import format_duration, format_hour
from .models import StatisticsBundle


def format_report(bundle: StatisticsBundle) -> str:
    """Format statistics for human-readable output."""
    lines = []

    lines.append(f"Total videos: {bundle.total_videos}")
    lines.append(f"  YouTube: {bundle.youtube_videos}")
    lines.append(f"  YouTube Music: {bundle.youtube_music_videos}")

    if bundle.date_range:
        lines.append(
            f"Date range: {bundle.date_range.start.date()} to {bundle.date_range.end.date()} "
            f"({bundle.day_span} days, {bundle.avg_per_day} per day)"
        )

    if bundle.enriched:
        lines.append(f"\nWatch time: {format_duration(bundle.total_watch_time)} total")
        lines.append(
            f"  Regular videos: {bundle.total_regular_videos} "
            f"({format_duration(bundle.total_regular_time)})"
        )
        lines.append(f"  Shorts: {bundle.total_shorts} ({format_duration(bundle.total_shorts_time)})")

    if bundle.top_regular_channels:
        lines.append("\nTop channels (videos):")
        for rank, channel in enumerate(bundle.top_regular_channels, 1):
            lines.append(f"  {rank}. {channel.display_name or channel.name}: {channel.video_count}")

    if bundle.top_shorts_channels:
        lines.append("\nTop channels (Shorts):")
        for rank, channel in enumerate(bundle.top_shorts_channels, 1):
            lines.append(f"  {rank}. {channel.display_name or channel.name}: {channel.short_count}")

    if bundle.daily_stats:
        lines.append("\nRecent activity:")
        for day in bundle.daily_stats:
            lines.append(f"  {day.date}: {day.count}")

    if bundle.most_active_timeframe:
        lines.append(
            f"\nMost active hour: {format_hour(bundle.most_active_hour.hour)} "
            f"({bundle.most_active_hour.count} videos)"
        )
        lines.append(
            f"Most active time of day: {bundle.most_active_timeframe.name} "
            f"({bundle.most_active_timeframe.count} videos)"
        )

    return "\n".join(lines)
