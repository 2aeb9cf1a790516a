import pytest

from watchstats.duration import is_short
from watchstats.models import ChannelMetadata, HistoryEntry, VideoMetadata


class FakeYouTubeClient:
    """Stands in for YouTubeClient; records every batch it is asked for"""

    def __init__(self, durations=None, channels=None, fail_batches=(), validation_error=None):
        self.durations = durations or {}
        self.channels = channels or {}
        self.fail_batches = set(fail_batches)
        self.validation_error = validation_error
        self.validate_calls = 0
        self.video_calls = []
        self.channel_calls = []

    def validate_credential(self):
        self.validate_calls += 1
        if self.validation_error is not None:
            raise self.validation_error

    def list_videos(self, video_ids):
        self.video_calls.append(list(video_ids))
        if len(self.video_calls) - 1 in self.fail_batches:
            raise OSError("connection reset")
        return [
            VideoMetadata(id=video_id, duration_seconds=seconds, is_short=is_short(seconds), title=video_id)
            for video_id, seconds in self.durations.items()
            if video_id in video_ids
        ]

    def list_channels(self, channel_ids):
        self.channel_calls.append(list(channel_ids))
        return [
            ChannelMetadata(id=channel_id, display_name=name, thumbnail_url=f"https://img.example/{channel_id}.jpg")
            for channel_id, name in self.channels.items()
            if channel_id in channel_ids
        ]


def watch_url(video_id):
    return f"https://www.youtube.com/watch?v={video_id}"


def entry_dict(video_id=None, channel=None, time="2024-03-01T10:00:00", header="YouTube", channel_url=None):
    raw = {
        "header": header,
        "title": f"Watched {video_id}",
        "time": time,
        "products": ["YouTube"],
        "activityControls": ["YouTube watch history"],
    }
    if video_id:
        raw["titleUrl"] = watch_url(video_id)
    if channel:
        raw["subtitles"] = [
            {"name": channel, "url": channel_url or f"https://www.youtube.com/channel/UC{channel}"}
        ]
    return raw


@pytest.fixture
def make_entry():
    def _make(**kwargs):
        return HistoryEntry.model_validate(entry_dict(**kwargs))

    return _make


@pytest.fixture
def fake_client():
    return FakeYouTubeClient()
