import pytest

from watchstats.duration import format_duration, format_hour, is_short, parse_duration


@pytest.mark.parametrize(
    "text,seconds",
    [
        ("PT1H2M10S", 3730),
        ("PT1H", 3600),
        ("PT5M30S", 330),
        ("PT45S", 45),
        ("PT2H5S", 7205),
        ("PT0S", 0),
        ("PT", 0),
    ],
)
def test_parse_duration(text, seconds):
    assert parse_duration(text) == seconds


@pytest.mark.parametrize("text", ["", "garbage", "1:02:03", None, 42])
def test_parse_duration_malformed_is_zero(text):
    assert parse_duration(text) == 0


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "0s"), (45, "45s"), (125, "2m 5s"), (3665, "1h 1m"), (3600, "1h 0m")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_parse_agree():
    assert format_duration(parse_duration("PT2M5S")) == "2m 5s"
    assert format_duration(parse_duration("PT1H1M5S")) == "1h 1m"


def test_short_threshold():
    assert is_short(0)
    assert is_short(59)
    assert not is_short(60)
    assert not is_short(3600)


@pytest.mark.parametrize(
    "hour,expected",
    [(0, "12 AM"), (1, "1 AM"), (11, "11 AM"), (12, "12 PM"), (13, "1 PM"), (23, "11 PM")],
)
def test_format_hour(hour, expected):
    assert format_hour(hour) == expected
