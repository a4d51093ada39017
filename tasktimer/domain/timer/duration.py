"""
Duration codec.

Converts between wall-clock durations (integer milliseconds) and the persisted
interval text. Intervals are written as HH:MM:SS; hours are not wrapped at 24.
Older rows may hold descriptive text such as "2 hours 15 mins", which is
accepted on decode only.
"""
from __future__ import annotations

import re
from typing import Optional

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE

_HOURS_RE = re.compile(r"(\d+)\s*hours?", re.IGNORECASE)
_MINS_RE = re.compile(r"(\d+)\s*mins?", re.IGNORECASE)
_SECS_RE = re.compile(r"(\d+)\s*secs?", re.IGNORECASE)


def encode(ms: int) -> str:
    """
    Encode milliseconds as HH:MM:SS.

    Sub-second remainders are dropped.

    Examples:
        >>> encode(0)
        '00:00:00'
        >>> encode(3661000)
        '01:01:01'
        >>> encode(27 * 3600000)
        '27:00:00'
    """
    ms = max(0, int(ms))
    hours = ms // MS_PER_HOUR
    minutes = (ms % MS_PER_HOUR) // MS_PER_MINUTE
    seconds = (ms % MS_PER_MINUTE) // MS_PER_SECOND
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def _field(raw: str) -> float:
    raw = raw.strip()
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return 0


def decode(interval: Optional[str]) -> int:
    """
    Decode an interval into milliseconds.

    Colon form takes precedence: "H:M:S" with missing trailing fields read
    as 0. Anything else is scanned for "<n> hour(s)", "<n> min(s)" and
    "<n> sec(s)".

    Examples:
        >>> decode("01:02:03")
        3723000
        >>> decode("2 hours 15 mins")
        8100000
        >>> decode("")
        0
    """
    if not interval:
        return 0

    if ":" in interval:
        fields = interval.split(":")[:3]
        hours, minutes, seconds = (list(map(_field, fields)) + [0, 0, 0])[:3]
        total = ((hours * 3600) + (minutes * 60) + seconds) * MS_PER_SECOND
        return max(0, int(round(total)))

    total_ms = 0
    hours_match = _HOURS_RE.search(interval)
    if hours_match:
        total_ms += int(hours_match.group(1)) * MS_PER_HOUR
    mins_match = _MINS_RE.search(interval)
    if mins_match:
        total_ms += int(mins_match.group(1)) * MS_PER_MINUTE
    secs_match = _SECS_RE.search(interval)
    if secs_match:
        total_ms += int(secs_match.group(1)) * MS_PER_SECOND
    return total_ms


def split_minutes(interval: Optional[str]) -> tuple[int, int]:
    """Whole (hours, minutes) of an interval; seconds are truncated."""
    total_minutes = decode(interval) // MS_PER_MINUTE
    return total_minutes // 60, total_minutes % 60
