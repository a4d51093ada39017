from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return dt


def to_iso(dt: datetime) -> str:
    ensure_aware(dt)
    # UTC: stored text must sort chronologically, offsets change with DST
    return dt.astimezone(timezone.utc).isoformat()


def from_iso(s: str) -> datetime:
    # Python can parse ISO with offset via fromisoformat
    return datetime.fromisoformat(s)


def local_date(dt: datetime, tz: tzinfo) -> date:
    """Calendar day of `dt` as seen on a wall clock in `tz` (not UTC)."""
    ensure_aware(dt)
    return dt.astimezone(tz).date()


def date_key(d: date) -> str:
    """Date-only storage key (YYYY-MM-DD); sorts chronologically."""
    return d.isoformat()
