"""24-hour time parsing and 12-hour display formatting for timetable slots."""

from datetime import datetime, time
from typing import Union


def parse_time_24(v: Union[str, time]) -> time:
    """Parse 24-hour time string (HH:MM or HH:MM:SS) to time."""
    if isinstance(v, time):
        return v
    if isinstance(v, str):
        v = v.strip()
        if len(v) == 5:  # HH:MM
            return datetime.strptime(v, "%H:%M").time()
        return datetime.strptime(v, "%H:%M:%S").time()
    raise ValueError("start_time/end_time must be 24-hour string (e.g. 09:00, 14:30) or time")


def format_time_24(t: time) -> str:
    return t.strftime("%H:%M")


def format_display_time(value: Union[str, time]) -> str:
    """12-hour clock label for a 24-hour start time: "14:30" -> "2:30 PM", "00:05" -> "12:05 AM"."""
    t = parse_time_24(value)
    hour = t.hour
    suffix = "AM" if hour < 12 else "PM"
    if hour > 12:
        display_hour = hour - 12
    elif hour == 0:
        display_hour = 12
    else:
        display_hour = hour
    return f"{display_hour}:{t.minute:02d} {suffix}"
