from __future__ import annotations

import math
from datetime import date, datetime, time

from app.application.exceptions import MalformedTimeError


def convert_to_24_hour(time_12h: str) -> str:
    """Convert "h:mm AM|PM" to "HH:MM:00".

    "12" is first mapped to "00" and PM then adds 12, so "12:00 AM" is
    midnight and "12:00 PM" is noon.
    """
    parts = (time_12h or "").strip().split(" ")
    if len(parts) != 2:
        raise MalformedTimeError(f"Invalid appointment time: {time_12h!r}")
    clock, modifier = parts
    if modifier not in ("AM", "PM"):
        raise MalformedTimeError(f"Invalid appointment time: {time_12h!r}")

    pieces = clock.split(":")
    if len(pieces) != 2 or not pieces[0].isdigit() or not pieces[1].isdigit():
        raise MalformedTimeError(f"Invalid appointment time: {time_12h!r}")
    hours, minutes = pieces

    if hours == "12":
        hours = "00"
    if modifier == "PM":
        hours = str(int(hours) + 12)

    if not (0 <= int(hours) <= 23 and 0 <= int(minutes) <= 59):
        raise MalformedTimeError(f"Invalid appointment time: {time_12h!r}")
    return f"{int(hours):02d}:{minutes}:00"


def appointment_datetime(appointment_date: date, appointment_time: str) -> datetime:
    """Combine a naive calendar date with a 12-hour time string."""
    hours, minutes, _ = convert_to_24_hour(appointment_time).split(":")
    return datetime.combine(appointment_date, time(hour=int(hours), minute=int(minutes)))


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def describe_time_remaining(total_hours: float) -> str:
    hours = math.floor(total_hours)
    days = hours // 24
    remaining = hours % 24
    if days == 1:
        return f"in {days} day and {remaining} hours"
    if days > 1:
        return f"in {days} days and {remaining} hours"
    return f"in {hours} hours"
