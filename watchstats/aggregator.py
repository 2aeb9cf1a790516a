"""Reduce normalized history entries to a StatisticsBundle"""

import math
from collections import Counter
from datetime import datetime
from typing import Mapping, Optional, Sequence

from .identifiers import extract_channel_id
from .models import (
    YOUTUBE,
    YOUTUBE_MUSIC,
    ChannelMetadata,
    ChannelStat,
    DateRange,
    DayStat,
    HistoryEntry,
    HourStat,
    RegularChannelStat,
    ShortsChannelStat,
    StatisticsBundle,
    TimeframeStat,
    VideoMetadata,
    WeekdayStat,
)

TOP_CHANNEL_LIMIT = 10
RECENT_DAY_LIMIT = 7

# (name, first hour, last hour), in reporting and tie-break order
TIMEFRAMES = [
    ("Midnight", 0, 2),
    ("Late Night", 3, 5),
    ("Early Morning", 6, 8),
    ("Morning", 9, 11),
    ("Midday", 12, 12),
    ("Afternoon", 13, 16),
    ("Evening", 17, 19),
    ("Night", 20, 23),
]

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def timeframe_name(hour: int) -> str:
    for name, first, last in TIMEFRAMES:
        if first <= hour <= last:
            return name
    raise ValueError(f"hour out of range: {hour}")


def _local_time(entry: HistoryEntry) -> Optional[datetime]:
    # Naive timestamps are taken as already local
    if entry.time is None:
        return None
    return entry.time.astimezone()


def _channel_counters(
    entries: Sequence[HistoryEntry], video_metadata: Mapping[str, VideoMetadata]
) -> tuple[dict[str, RegularChannelStat], dict[str, ShortsChannelStat]]:
    """Per-channel-name counts split by video kind, in first-encounter order"""
    regular: dict[str, RegularChannelStat] = {}
    shorts: dict[str, ShortsChannelStat] = {}

    for entry in entries:
        if not entry.title_url:
            continue
        channel = entry.channel
        if channel is None:
            continue

        meta = video_metadata.get(entry.video_id) if entry.video_id else None
        if meta is not None and meta.is_short:
            stat = shorts.setdefault(channel.name, ShortsChannelStat(name=channel.name, url=channel.url))
            stat.short_count += 1
        else:
            stat = regular.setdefault(channel.name, RegularChannelStat(name=channel.name, url=channel.url))
            stat.video_count += 1

    return regular, shorts


def _top(stats, count_field: str, limit: int) -> list:
    # sorted() is stable, so equal counts keep first-encounter order
    ranked = sorted(stats, key=lambda stat: getattr(stat, count_field), reverse=True)
    return ranked[:limit]


def rank_channels(
    entries: Sequence[HistoryEntry],
    video_metadata: Mapping[str, VideoMetadata],
    limit: int = TOP_CHANNEL_LIMIT,
) -> tuple[list[RegularChannelStat], list[ShortsChannelStat]]:
    """
    Rank channels by watched regular videos and by watched Shorts

    Channels are keyed by display name, so two channels sharing a name are
    counted as one.
    """
    regular, shorts = _channel_counters(entries, video_metadata)
    return (
        _top(regular.values(), "video_count", limit),
        _top(shorts.values(), "short_count", limit),
    )


def _decorate(channels: list[ChannelStat], channel_metadata: Mapping[str, ChannelMetadata]) -> None:
    for channel in channels:
        channel_id = extract_channel_id(channel.url)
        meta = channel_metadata.get(channel_id) if channel_id else None
        if meta is not None:
            channel.channel_id = meta.id
            channel.display_name = meta.display_name
            channel.thumbnail_url = meta.thumbnail_url


def aggregate(
    entries: Sequence[HistoryEntry],
    video_metadata: Optional[Mapping[str, VideoMetadata]] = None,
    channel_metadata: Optional[Mapping[str, ChannelMetadata]] = None,
) -> StatisticsBundle:
    """
    Compute the full statistics bundle for one history load

    A video id missing from video_metadata means duration unknown: it counts
    as zero seconds and as a regular video. Pure function; nothing here
    touches the network.
    """
    video_metadata = video_metadata or {}
    bundle = StatisticsBundle(total_videos=len(entries), enriched=bool(video_metadata))

    platforms: Counter = Counter()
    day_counts: Counter = Counter()
    hour_counts = [0] * 24
    weekday_counts = [0] * 7
    timeframe_counts: Counter = Counter()
    times: list[datetime] = []

    for entry in entries:
        platforms[entry.header] += 1

        if entry.title_url:
            meta = video_metadata.get(entry.video_id) if entry.video_id else None
            duration = meta.duration_seconds if meta is not None else 0
            bundle.total_watch_time += duration
            if meta is not None and meta.is_short:
                bundle.total_shorts += 1
                bundle.total_shorts_time += duration
            else:
                bundle.total_regular_videos += 1
                bundle.total_regular_time += duration

        local = _local_time(entry)
        if local is None:
            continue
        times.append(local)
        day_counts[local.date()] += 1
        hour_counts[local.hour] += 1
        weekday_counts[local.weekday()] += 1
        timeframe_counts[timeframe_name(local.hour)] += 1

    bundle.youtube_videos = platforms[YOUTUBE]
    bundle.youtube_music_videos = platforms[YOUTUBE_MUSIC]

    regular, shorts = rank_channels(entries, video_metadata)
    if channel_metadata:
        _decorate(regular, channel_metadata)
        _decorate(shorts, channel_metadata)
    bundle.top_regular_channels = regular
    bundle.top_shorts_channels = shorts

    recent_days = sorted(day_counts.items(), reverse=True)[:RECENT_DAY_LIMIT]
    bundle.daily_stats = [DayStat(date=day.isoformat(), count=count) for day, count in recent_days]

    bundle.hourly_stats = [HourStat(hour=hour, count=count) for hour, count in enumerate(hour_counts)]
    peak = bundle.hourly_stats[0]
    for stat in bundle.hourly_stats:
        if stat.count > peak.count:
            peak = stat
    bundle.most_active_hour = peak

    bundle.weekday_stats = [
        WeekdayStat(weekday=name, count=count) for name, count in zip(WEEKDAYS, weekday_counts)
    ]

    bundle.timeframe_stats = [
        TimeframeStat(name=name, count=timeframe_counts[name]) for name, _, _ in TIMEFRAMES
    ]
    if times:
        bundle.most_active_timeframe = max(bundle.timeframe_stats, key=lambda stat: stat.count)

        start, end = min(times), max(times)
        bundle.date_range = DateRange(start=start, end=end)
        elapsed_days = (end - start).total_seconds() / 86400
        # Single-day histories would otherwise divide by zero
        bundle.day_span = max(1, math.ceil(elapsed_days))
        bundle.avg_per_day = round(len(entries) / bundle.day_span, 1)

    return bundle
