"""
Tests for text rendering of tasks, history and intervals, plus sort rules.
"""
from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from fakes import HELSINKI
from tasktimer.domain.common.errors import ValidationError
from tasktimer.domain.timer.formatting import format_datetime, format_elapsed, format_ms, format_time
from tasktimer.domain.timer.models import HistoryEntry, Task, TaskSort
from tasktimer.domain.timer.rules import clean_name, default_sort, next_sort, validate_priority
from tasktimer.ui.telegram.views import render_history, render_task_card, render_task_line, render_tasks

CREATED = datetime(2026, 10, 1, 8, 0, tzinfo=timezone.utc)


def _task(**overrides) -> Task:
    fields = dict(
        id="t-1",
        user_id=1,
        name="Write report",
        priority="P2",
        is_running=False,
        last_start_time=datetime(2026, 10, 17, 6, 5, tzinfo=timezone.utc),
        total_elapsed_time="02:05:30",
        created_at=CREATED,
        updated_at=CREATED,
    )
    fields.update(overrides)
    return Task(**fields)


def test_format_time_hides_zero_hours():
    assert format_time(0, 45) == "45m"
    assert format_time(2, 5) == "2h 5m"
    assert format_time(1, 0) == "1h 0m"


def test_format_elapsed_always_shows_hours():
    assert format_elapsed("00:45:59") == "0h 45m"
    assert format_elapsed("") == "0h 0m"
    assert format_ms(3 * 3600000 + 61000) == "3h 1m"


def test_format_datetime_local_twelve_hour():
    # 06:05 UTC is 09:05 in Helsinki (summer time)
    assert format_datetime(datetime(2026, 10, 17, 6, 5, tzinfo=timezone.utc), HELSINKI) == "17.10.2026 9:05 AM"
    assert format_datetime(datetime(2026, 10, 17, 10, 0, tzinfo=timezone.utc), HELSINKI) == "17.10.2026 1:00 PM"
    assert format_datetime(datetime(2026, 10, 16, 21, 30, tzinfo=timezone.utc), HELSINKI) == "17.10.2026 12:30 AM"
    assert format_datetime(None, HELSINKI) == ""


def test_stopped_task_line_shows_stored_total():
    line = render_task_line(_task(), live_ms=0, tz=HELSINKI)
    assert line == "Write report [P2] 2h 5m · 17.10.2026 9:05 AM"


def test_running_task_line_shows_live_clock():
    line = render_task_line(_task(is_running=True), live_ms=2 * 3600000 + 61000, tz=HELSINKI)
    assert line.startswith("▶️ Write report [P2] 02:01:01")


def test_never_started_task():
    card = render_task_card(_task(last_start_time=None, total_elapsed_time="00:00:00"), 0, HELSINKI)
    assert "Last start: Not started" in card
    assert "Total: 0h 0m" in card


def test_empty_task_list():
    assert render_tasks([], [], HELSINKI) == "No tasks yet. Create one with /new."
    text = render_tasks([_task()], [0], HELSINKI)
    assert text.splitlines()[0] == "Your tasks:"


def test_history_lines():
    entries = [
        HistoryEntry("h-1", 1, "t-1", date(2026, 10, 12), "01:00:00", CREATED, CREATED),
        HistoryEntry("h-2", 1, "t-1", date(2026, 10, 13), "00:30:00", CREATED, CREATED),
    ]
    assert render_history(_task(), entries).splitlines() == [
        "History: Write report",
        "2026-10-12  1h 0m",
        "2026-10-13  0h 30m",
    ]
    assert render_history(_task(), []) == "No history for this task yet."


def test_clean_name():
    assert clean_name("  Thesis  ") == "Thesis"
    assert clean_name("   ") is None
    with pytest.raises(ValidationError):
        clean_name("x" * 201)


def test_validate_priority():
    assert validate_priority(" p1 ") == "P1"
    with pytest.raises(ValidationError):
        validate_priority("P9")


def test_sort_toggle():
    assert default_sort() == TaskSort("last_start_time", "desc")
    flipped = next_sort(TaskSort("name", "asc"), "name")
    assert flipped == TaskSort("name", "desc")
    assert next_sort(flipped, "priority") == TaskSort("priority", "asc")
    with pytest.raises(ValidationError):
        next_sort(flipped, "color")


def test_stored_timestamps_are_utc_and_round_trip():
    from tasktimer.domain.common.time import from_iso, to_iso

    local = datetime(2026, 10, 25, 3, 30, tzinfo=HELSINKI)
    assert to_iso(local) == "2026-10-25T00:30:00+00:00"
    assert from_iso(to_iso(local)) == local
    with pytest.raises(ValueError):
        to_iso(datetime(2026, 10, 25, 3, 30))
