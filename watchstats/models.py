"""Data models for watch history and statistics"""

from datetime import datetime
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from .identifiers import extract_video_id

YOUTUBE = "YouTube"
YOUTUBE_MUSIC = "YouTube Music"


def _optional_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


class Subtitle(BaseModel):
    """Attribution line of a history entry; the first one is the channel"""

    name: Optional[str] = None
    url: Optional[str] = None

    @field_validator("name", "url", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> Optional[str]:
        return _optional_str(value)


class HistoryEntry(BaseModel):
    """One watched video or track from a history export

    Every field is optional: deleted videos, ads and private content routinely
    arrive without a title URL or channel line.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    header: Optional[str] = None
    title: Optional[str] = None
    title_url: Optional[str] = Field(default=None, alias="titleUrl")
    subtitles: list[Subtitle] = Field(default_factory=list)
    time: Optional[datetime] = None
    products: list[str] = Field(default_factory=list)
    activity_controls: list[str] = Field(default_factory=list, alias="activityControls")

    @field_validator("header", "title", "title_url", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> Optional[str]:
        return _optional_str(value)

    @field_validator("subtitles", mode="before")
    @classmethod
    def _keep_mapping_subtitles(cls, value: Any) -> list:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    @field_validator("products", "activity_controls", mode="before")
    @classmethod
    def _keep_string_items(cls, value: Any) -> list:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]

    @field_validator("time", mode="wrap")
    @classmethod
    def _parse_time(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Optional[datetime]:
        # Unreadable timestamps become absent rather than rejecting the entry
        try:
            return handler(value)
        except ValidationError:
            return None

    @property
    def video_id(self) -> Optional[str]:
        return extract_video_id(self.title_url)

    @property
    def channel(self) -> Optional[Subtitle]:
        """Attributed channel, if the entry names one"""
        if self.subtitles and self.subtitles[0].name:
            return self.subtitles[0]
        return None


class VideoMetadata(BaseModel):
    """Enrichment record for one video"""

    id: str
    duration_seconds: int = Field(ge=0)
    is_short: bool
    title: str = ""


class ChannelMetadata(BaseModel):
    """Enrichment record for one channel"""

    id: str
    display_name: str
    thumbnail_url: str = ""


class ChannelStat(BaseModel):
    """Fields shared by both ranked channel variants"""

    name: str
    url: Optional[str] = None

    # Filled in from channel enrichment, when available
    channel_id: Optional[str] = None
    display_name: Optional[str] = None
    thumbnail_url: Optional[str] = None


class RegularChannelStat(ChannelStat):
    video_count: int = 0


class ShortsChannelStat(ChannelStat):
    short_count: int = 0


class DayStat(BaseModel):
    date: str  # ISO calendar date, local time
    count: int


class HourStat(BaseModel):
    hour: int = Field(ge=0, le=23)
    count: int


class WeekdayStat(BaseModel):
    weekday: str
    count: int


class TimeframeStat(BaseModel):
    name: str
    count: int


class DateRange(BaseModel):
    start: datetime
    end: datetime


class StatisticsBundle(BaseModel):
    """Everything derived from one analysis run"""

    # Totals
    total_videos: int = 0
    youtube_videos: int = 0
    youtube_music_videos: int = 0
    total_regular_videos: int = 0
    total_shorts: int = 0

    # Watch time, seconds
    total_watch_time: int = 0
    total_regular_time: int = 0
    total_shorts_time: int = 0

    # Rankings
    top_regular_channels: list[RegularChannelStat] = Field(default_factory=list)
    top_shorts_channels: list[ShortsChannelStat] = Field(default_factory=list)

    # Temporal
    daily_stats: list[DayStat] = Field(default_factory=list)
    hourly_stats: list[HourStat] = Field(default_factory=list)
    weekday_stats: list[WeekdayStat] = Field(default_factory=list)
    most_active_hour: HourStat = Field(default_factory=lambda: HourStat(hour=0, count=0))
    timeframe_stats: list[TimeframeStat] = Field(default_factory=list)
    most_active_timeframe: Optional[TimeframeStat] = None

    # Range
    date_range: Optional[DateRange] = None
    day_span: int = 0
    avg_per_day: float = 0.0

    enriched: bool = False
