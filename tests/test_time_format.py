import re
from datetime import time

import pytest

from campus_attendance.core.time_format import format_display_time, format_time_24, parse_time_24


@pytest.mark.parametrize(
    "value, expected",
    [
        ("00:00", "12:00 AM"),
        ("00:05", "12:05 AM"),
        ("09:00", "9:00 AM"),
        ("11:59", "11:59 AM"),
        ("12:00", "12:00 PM"),
        ("12:45", "12:45 PM"),
        ("13:05", "1:05 PM"),
        ("14:30", "2:30 PM"),
        ("23:59", "11:59 PM"),
        ("08:15:00", "8:15 AM"),
    ],
)
def test_display_time(value: str, expected: str) -> None:
    assert format_display_time(value) == expected


def test_display_time_is_total_over_the_day() -> None:
    pattern = re.compile(r"^(1[0-2]|[1-9]):[0-5]\d (AM|PM)$")
    for hour in range(24):
        for minute in range(60):
            label = format_display_time(f"{hour:02d}:{minute:02d}")
            assert pattern.match(label), label
            assert label.endswith("AM") == (hour < 12)
            assert label.split(" ")[0].endswith(f":{minute:02d}")


def test_display_time_accepts_time_objects() -> None:
    assert format_display_time(time(16, 20)) == "4:20 PM"


@pytest.mark.parametrize("value", ["24:00", "12:60", "9:5", "noon", ""])
def test_invalid_times_rejected(value: str) -> None:
    with pytest.raises(ValueError):
        format_display_time(value)


def test_parse_and_format_24h() -> None:
    assert parse_time_24("07:30") == time(7, 30)
    assert parse_time_24("07:30:15") == time(7, 30, 15)
    assert format_time_24(time(7, 5)) == "07:05"
