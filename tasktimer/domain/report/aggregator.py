"""
Report aggregation over daily history rows.

Works at minute granularity: each row's interval is cut down to whole
minutes before summing, so seconds never add up across rows.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Mapping

from tasktimer.constants import TOP_TASKS_LIMIT
from tasktimer.domain.report.models import Report, TaskTime, TimeEntry
from tasktimer.domain.timer.duration import split_minutes


def _day_key(value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


def aggregate(rows: Iterable[Mapping[str, Any]], top_limit: int = TOP_TASKS_LIMIT) -> Report:
    """
    rows: [{"task_name": ..., "start_date": ..., "elapsed_time": ...}]

    Returns grand total, per-day entries (date ascending, each with a
    per-task breakdown) and the top tasks by total time. Ties in the ranking
    keep the order in which tasks were first seen.
    """
    grand = TaskTime(name="")
    task_totals: Dict[str, TaskTime] = {}
    entries: Dict[str, TimeEntry] = {}

    for row in rows:
        day = _day_key(row["start_date"])
        name = row["task_name"]
        hours, minutes = split_minutes(row["elapsed_time"])

        grand.add(hours, minutes)

        if name not in task_totals:
            task_totals[name] = TaskTime(name=name)
        task_totals[name].add(hours, minutes)

        entry = entries.get(day)
        if entry is None:
            entry = entries[day] = TimeEntry(date=day)
        day_total = TaskTime(name="", hours=entry.hours, minutes=entry.minutes)
        day_total.add(hours, minutes)
        entry.hours, entry.minutes = day_total.hours, day_total.minutes

        existing = next((t for t in entry.tasks if t.name == name), None)
        if existing is not None:
            existing.add(hours, minutes)
        else:
            entry.tasks.append(TaskTime(name=name, hours=hours, minutes=minutes))

    totals: List[TaskTime] = list(task_totals.values())
    ranked = sorted(totals, key=lambda t: t.total_minutes, reverse=True)[:top_limit]

    return Report(
        total_hours=grand.hours,
        total_minutes=grand.minutes,
        entries=sorted(entries.values(), key=lambda e: e.date),
        top_tasks=[TaskTime(t.name, t.hours, t.minutes) for t in ranked],
        task_totals=totals,
    )
