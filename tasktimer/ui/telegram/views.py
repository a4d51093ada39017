"""
Message texts for tasks and history. Pure functions, no aiogram.
"""
from __future__ import annotations

from datetime import tzinfo
from typing import Sequence

from tasktimer.domain.timer.formatting import format_clock, format_datetime, format_elapsed, format_ms
from tasktimer.domain.timer.models import HistoryEntry, Task
from tasktimer.ui.telegram import texts


def render_task_line(task: Task, live_ms: int, tz: tzinfo) -> str:
    started = format_datetime(task.last_start_time, tz) or texts.tasks.NOT_STARTED
    if task.is_running:
        return f"▶️ {task.name} [{task.priority}] {format_clock(live_ms)} (running since {started})"
    return f"{task.name} [{task.priority}] {format_elapsed(task.total_elapsed_time)} · {started}"


def render_tasks(tasks: Sequence[Task], live_ms: Sequence[int], tz: tzinfo) -> str:
    if not tasks:
        return texts.tasks.NO_TASKS
    lines = [texts.tasks.TASKS_HEADER]
    for task, ms in zip(tasks, live_ms):
        lines.append(render_task_line(task, ms, tz))
    return "\n".join(lines)


def render_task_card(task: Task, live_ms: int, tz: tzinfo) -> str:
    lines = [
        task.name,
        f"Priority: {task.priority}",
        f"Total: {format_ms(live_ms)}",
        f"Last start: {format_datetime(task.last_start_time, tz) or texts.tasks.NOT_STARTED}",
    ]
    if task.is_running:
        lines.append("Timer running.")
    return "\n".join(lines)


def render_history(task: Task, entries: Sequence[HistoryEntry]) -> str:
    if not entries:
        return texts.tasks.NO_HISTORY
    lines = [f"History: {task.name}"]
    for e in entries:
        lines.append(f"{e.start_date.isoformat()}  {format_elapsed(e.elapsed_time)}")
    return "\n".join(lines)
