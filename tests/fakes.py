"""
In-memory stand-ins for the persistence collaborator, a steppable clock and
sequential ids. Any repository call can be made to fail by adding its name to
`fail_on`.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Set
from zoneinfo import ZoneInfo

from tasktimer.domain.common.errors import PersistenceFailure
from tasktimer.domain.common.time import from_iso
from tasktimer.domain.timer.duration import decode
from tasktimer.domain.timer.models import HistoryEntry, Task
from tasktimer.domain.timer.ports import Clock, HistoryRepository, IdGenerator, TaskRepository

HELSINKI = ZoneInfo("Europe/Helsinki")


class FakeClock(Clock):
    def __init__(self, start: datetime) -> None:
        self._now = start

    @property
    def tz(self):
        return self._now.tzinfo

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **kwargs) -> None:
        self._now = self._now + timedelta(**kwargs)


class SeqIds(IdGenerator):
    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._n = 0

    def new_id(self) -> str:
        self._n += 1
        return f"{self._prefix}-{self._n}"


class _Failing:
    def __init__(self) -> None:
        self.fail_on: Set[str] = set()
        self.calls: List[str] = []

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise PersistenceFailure(f"{name} failed", operation=name)


class InMemoryTasks(TaskRepository, _Failing):
    def __init__(self) -> None:
        _Failing.__init__(self)
        self.rows: Dict[str, Task] = {}
        self.users: Set[int] = set()

    async def ensure_user(self, user_id: int, now_iso: str) -> None:
        self._call("ensure_user")
        self.users.add(user_id)

    async def list_tasks(self, user_id: int, order_by: str, ascending: bool) -> Sequence[Task]:
        self._call("list_tasks")
        mine = [t for t in self.rows.values() if t.user_id == user_id]
        present = [t for t in mine if getattr(t, order_by) is not None]
        missing = [t for t in mine if getattr(t, order_by) is None]
        present.sort(key=lambda t: getattr(t, order_by), reverse=not ascending)
        return present + missing

    async def get_task(self, user_id: int, task_id: str) -> Optional[Task]:
        self._call("get_task")
        task = self.rows.get(task_id)
        return task if task is not None and task.user_id == user_id else None

    async def insert_task(self, task_id, user_id, name, priority, total_elapsed_time, now_iso) -> Task:
        self._call("insert_task")
        now = from_iso(now_iso)
        task = Task(
            id=task_id,
            user_id=user_id,
            name=name,
            priority=priority,
            is_running=False,
            last_start_time=None,
            total_elapsed_time=total_elapsed_time,
            created_at=now,
            updated_at=now,
        )
        self.rows[task_id] = task
        return task

    async def update_task(self, task_id: str, fields: Dict[str, Any], now_iso: str) -> None:
        self._call("update_task")
        self.rows[task_id] = replace(self.rows[task_id], updated_at=from_iso(now_iso), **fields)

    async def delete_task(self, task_id: str) -> None:
        self._call("delete_task")
        self.rows.pop(task_id, None)


class InMemoryHistory(HistoryRepository, _Failing):
    def __init__(self, tasks: Optional[InMemoryTasks] = None) -> None:
        _Failing.__init__(self)
        self.rows: Dict[str, HistoryEntry] = {}
        self._tasks = tasks

    def for_task(self, task_id: str) -> List[HistoryEntry]:
        return sorted((e for e in self.rows.values() if e.task_id == task_id), key=lambda e: e.start_date)

    async def get_entry(self, task_id: str, start_date: date) -> Optional[HistoryEntry]:
        self._call("get_entry")
        for e in self.rows.values():
            if e.task_id == task_id and e.start_date == start_date:
                return e
        return None

    async def list_for_task(self, task_id: str) -> Sequence[HistoryEntry]:
        self._call("list_for_task")
        return self.for_task(task_id)

    async def list_for_range(self, user_id: int, start: date, end: date) -> Sequence[Dict[str, Any]]:
        self._call("list_for_range")
        rows = [e for e in self.rows.values() if e.user_id == user_id and start <= e.start_date <= end]
        rows.sort(key=lambda e: e.start_date)
        names = self._tasks.rows if self._tasks is not None else {}
        return [
            {
                "task_name": names[e.task_id].name if e.task_id in names else e.task_id,
                "start_date": e.start_date.isoformat(),
                "elapsed_time": e.elapsed_time,
            }
            for e in rows
        ]

    async def insert_entry(self, entry_id, user_id, task_id, start_date, elapsed_time, now_iso) -> HistoryEntry:
        self._call("insert_entry")
        if any(e.task_id == task_id and e.start_date == start_date for e in self.rows.values()):
            raise PersistenceFailure("duplicate (task_id, start_date)", operation="insert_entry")
        now = from_iso(now_iso)
        entry = HistoryEntry(
            id=entry_id,
            user_id=user_id,
            task_id=task_id,
            start_date=start_date,
            elapsed_time=elapsed_time,
            created_at=now,
            updated_at=now,
        )
        self.rows[entry_id] = entry
        return entry

    async def update_entry(self, entry_id: str, elapsed_time: str, now_iso: str) -> None:
        self._call("update_entry")
        self.rows[entry_id] = replace(self.rows[entry_id], elapsed_time=elapsed_time, updated_at=from_iso(now_iso))

    async def delete_entry(self, entry_id: str) -> None:
        self._call("delete_entry")
        self.rows.pop(entry_id, None)

    async def delete_for_task(self, task_id: str) -> int:
        self._call("delete_for_task")
        doomed = [i for i, e in self.rows.items() if e.task_id == task_id]
        for i in doomed:
            del self.rows[i]
        return len(doomed)


def total_ms(history: InMemoryHistory, task_id: str) -> int:
    return sum(decode(e.elapsed_time) for e in history.for_task(task_id))
