from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from watchstats import youtube_client
from watchstats.config import config
from watchstats.exceptions import (
    CredentialInvalid,
    CredentialMissing,
    CredentialRejected,
    QuotaOrNetworkError,
)
from watchstats.youtube_client import YouTubeClient


@pytest.fixture
def api():
    service = MagicMock()
    return service


@pytest.fixture
def client(monkeypatch, api):
    monkeypatch.setattr(youtube_client, "build", lambda *args, **kwargs: api)
    return YouTubeClient("AIzaTestKey")


def http_error(status, message):
    body = f'{{"error": {{"code": {status}, "message": "{message}"}}}}'.encode()
    return HttpError(httplib2.Response({"status": str(status)}), body)


def test_missing_key(monkeypatch):
    monkeypatch.setattr(config, "youtube_api_key", "")

    with pytest.raises(CredentialMissing):
        YouTubeClient()


def test_placeholder_key():
    with pytest.raises(CredentialInvalid):
        YouTubeClient("your_youtube_api_key_here")


def test_validate_credential_success(client, api):
    client.validate_credential()

    api.search.return_value.list.assert_called_once_with(
        part="snippet", q="test", type="video", maxResults=1
    )


def test_validate_credential_rejected(client, api):
    api.search.return_value.list.return_value.execute.side_effect = http_error(400, "API key not valid")

    with pytest.raises(CredentialRejected) as excinfo:
        client.validate_credential()

    assert "400" in excinfo.value.detail


def test_validate_credential_network_failure(client, api):
    api.search.return_value.list.return_value.execute.side_effect = OSError("Name or service not known")

    with pytest.raises(QuotaOrNetworkError) as excinfo:
        client.validate_credential()

    assert excinfo.value.batch_range is None
    assert "Name or service not known" in excinfo.value.detail


def test_list_videos_parses_items(client, api):
    api.videos.return_value.list.return_value.execute.return_value = {
        "items": [
            {"id": "aaaaaaaaaaa", "snippet": {"title": "Long one"}, "contentDetails": {"duration": "PT1H2M10S"}},
            {"id": "bbbbbbbbbbb", "snippet": {"title": "Short one"}, "contentDetails": {"duration": "PT45S"}},
            {"snippet": {"title": "No id"}, "contentDetails": {"duration": "PT1M"}},
        ]
    }

    videos = client.list_videos(["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"])

    api.videos.return_value.list.assert_called_once_with(
        part="contentDetails,snippet", id="aaaaaaaaaaa,bbbbbbbbbbb,ccccccccccc", maxResults=3
    )
    assert [(v.id, v.duration_seconds, v.is_short) for v in videos] == [
        ("aaaaaaaaaaa", 3730, False),
        ("bbbbbbbbbbb", 45, True),
    ]
    assert videos[0].title == "Long one"


def test_list_videos_propagates_quota_error(client, api):
    api.videos.return_value.list.return_value.execute.side_effect = http_error(403, "quotaExceeded")

    with pytest.raises(HttpError):
        client.list_videos(["aaaaaaaaaaa"])


def test_list_channels_thumbnail_fallback(client, api):
    api.channels.return_value.list.return_value.execute.return_value = {
        "items": [
            {
                "id": "UCone",
                "snippet": {"title": "One", "thumbnails": {"medium": {"url": "https://m/1"}, "default": {"url": "https://d/1"}}},
            },
            {"id": "UCtwo", "snippet": {"title": "Two", "thumbnails": {"default": {"url": "https://d/2"}}}},
            {"id": "UCthree", "snippet": {"title": "Three"}},
        ]
    }

    channels = client.list_channels(["UCone", "UCtwo", "UCthree"])

    assert [(c.id, c.display_name, c.thumbnail_url) for c in channels] == [
        ("UCone", "One", "https://m/1"),
        ("UCtwo", "Two", "https://d/2"),
        ("UCthree", "Three", ""),
    ]
