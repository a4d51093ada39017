"""
Human-readable renderings of intervals and start times.
"""
from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

from tasktimer.domain.timer.duration import MS_PER_MINUTE, encode, split_minutes


def format_time(hours: int, minutes: int) -> str:
    """'45m' under an hour, otherwise '2h 5m'."""
    if hours == 0:
        return f"{minutes}m"
    return f"{hours}h {minutes}m"


def format_elapsed(interval: Optional[str]) -> str:
    """Interval as 'Hh Mm', always showing hours ('0h 0m' when empty)."""
    hours, minutes = split_minutes(interval)
    return f"{hours}h {minutes}m"


def format_ms(ms: int) -> str:
    total_minutes = max(0, ms) // MS_PER_MINUTE
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def format_clock(ms: int) -> str:
    """Running display, HH:MM:SS."""
    return encode(ms)


def format_datetime(dt: Optional[datetime], tz: tzinfo) -> str:
    """Local date and 12-hour time, e.g. '17.10.2026 9:05 AM'. Empty when unset."""
    if dt is None:
        return ""
    local = dt.astimezone(tz)
    hours = local.hour % 12 or 12
    ampm = "PM" if local.hour >= 12 else "AM"
    return f"{local.day}.{local.month}.{local.year} {hours}:{local.minute:02d} {ampm}"
