from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Awaitable, Callable, List, Optional

from tasktimer.constants import DEFAULT_PRIORITY, DEFAULT_TASK_NAME, SORT_TOTAL_ELAPSED, ZERO_INTERVAL
from tasktimer.domain.common.errors import NotFoundError, PersistenceFailure
from tasktimer.domain.common.time import local_date, to_iso
from tasktimer.domain.timer.cache import TaskCache
from tasktimer.domain.timer.duration import decode, encode
from tasktimer.domain.timer.models import HistoryEntry, StopResult, Task, TaskSort
from tasktimer.domain.timer.ports import Clock, HistoryRepository, IdGenerator, TaskRepository
from tasktimer.domain.timer.rules import clean_name, default_sort, validate_priority

logger = logging.getLogger(__name__)

_ONE_MS = timedelta(milliseconds=1)


class TimerService:
    """
    Task timers and the per-day history ledger. No aiogram. No sqlite.

    Every method takes the acting user's id; the repositories never see a
    task outside that user's rows. The cache is only touched after the
    corresponding write has returned.
    """

    def __init__(
        self,
        tasks: TaskRepository,
        history: HistoryRepository,
        clock: Clock,
        ids: IdGenerator,
        cache: Optional[TaskCache] = None,
    ) -> None:
        self._tasks = tasks
        self._history = history
        self._clock = clock
        self._ids = ids
        self._cache = cache if cache is not None else TaskCache()

    @property
    def cache(self) -> TaskCache:
        return self._cache

    # ----- Queries -----

    async def list_tasks(self, user_id: int, sort: Optional[TaskSort] = None) -> List[Task]:
        sort = sort or default_sort()
        tasks = list(await self._tasks.list_tasks(user_id, order_by=sort.field, ascending=sort.ascending))
        if sort.field == SORT_TOTAL_ELAPSED:
            # interval text does not sort numerically ("100:00:00" < "20:00:00")
            tasks.sort(key=lambda t: decode(t.total_elapsed_time), reverse=not sort.ascending)
        self._cache.replace_all(user_id, tasks)
        return tasks

    async def get_task(self, user_id: int, task_id: str) -> Task:
        task = self._cache.get(user_id, task_id)
        if task is not None:
            return task
        task = await self._tasks.get_task(user_id, task_id)
        if task is None:
            raise NotFoundError("Task not found.")
        self._cache.put(task)
        return task

    async def task_history(self, user_id: int, task_id: str) -> List[HistoryEntry]:
        task = await self.get_task(user_id, task_id)
        entries = await self._history.list_for_task(task.id)
        return sorted(entries, key=lambda e: e.start_date)

    def live_elapsed_ms(self, task: Task) -> int:
        """Stored total plus the open session, if any. Computed on demand."""
        total = decode(task.total_elapsed_time)
        if task.is_running and task.last_start_time is not None:
            running_ms = (self._clock.now() - task.last_start_time) // _ONE_MS
            total += max(0, running_ms)
        return total

    # ----- Commands -----

    async def create_task(self, user_id: int) -> Task:
        now_iso = to_iso(self._clock.now())
        await self._tasks.ensure_user(user_id, now_iso)
        task = await self._tasks.insert_task(
            task_id=self._ids.new_id(),
            user_id=user_id,
            name=DEFAULT_TASK_NAME,
            priority=DEFAULT_PRIORITY,
            total_elapsed_time=ZERO_INTERVAL,
            now_iso=now_iso,
        )
        self._cache.put(task)
        logger.info(f"Task created: task_id={task.id} user_id={user_id}")
        return task

    async def start(self, user_id: int, task_id: str) -> Task:
        task = await self.get_task(user_id, task_id)
        if task.is_running:
            logger.warning(f"Start ignored, task already running: task_id={task.id}")
            return task

        now = self._clock.now()
        await self._tasks.update_task(
            task.id,
            {"last_start_time": now, "is_running": True},
            to_iso(now),
        )
        started = replace(task, last_start_time=now, is_running=True, updated_at=now)
        self._cache.put(started)
        logger.info(f"Timer started: task_id={task.id} at={to_iso(now)}")
        return started

    async def stop(self, user_id: int, task_id: str) -> Optional[StopResult]:
        """
        Close the running session and book it.

        The day's history row is written first, then the task. A failed
        history write leaves the task running so the user can stop again.
        A failed task write rolls the history write back before the error
        is raised. Returns None when the task was not running.
        """
        task = await self.get_task(user_id, task_id)
        if not task.is_running or task.last_start_time is None:
            logger.warning(f"Stop ignored, task not running: task_id={task.id}")
            return None

        now = self._clock.now()
        now_iso = to_iso(now)

        session_ms = (now - task.last_start_time) // _ONE_MS
        regressed = session_ms < 0
        if regressed:
            logger.warning(
                "Clock regression on stop: task_id=%s last_start_time=%s now=%s; session booked as 0",
                task.id,
                to_iso(task.last_start_time),
                now_iso,
            )
            session_ms = 0

        new_total = encode(decode(task.total_elapsed_time) + session_ms)
        day = local_date(task.last_start_time, now.tzinfo)

        entry, undo = await self._book_session(task, day, session_ms, now)
        try:
            await self._tasks.update_task(
                task.id,
                {"is_running": False, "total_elapsed_time": new_total},
                now_iso,
            )
        except PersistenceFailure:
            logger.error(f"Stop failed on task write, reverting history: task_id={task.id}", exc_info=True)
            await self._compensate(task.id, undo)
            raise

        stopped = replace(task, is_running=False, total_elapsed_time=new_total, updated_at=now)
        self._cache.put(stopped)
        logger.info(f"Timer stopped: task_id={task.id} session_ms={session_ms} total={new_total} day={day}")
        return StopResult(task=stopped, entry=entry, session_ms=session_ms, clock_regressed=regressed)

    async def rename(self, user_id: int, task_id: str, new_name: str) -> Task:
        task = await self.get_task(user_id, task_id)
        name = clean_name(new_name)
        if name is None:
            return task

        now = self._clock.now()
        await self._tasks.update_task(task.id, {"name": name}, to_iso(now))
        renamed = replace(task, name=name, updated_at=now)
        self._cache.put(renamed)
        return renamed

    async def set_priority(self, user_id: int, task_id: str, priority: str) -> Task:
        value = validate_priority(priority)
        task = await self.get_task(user_id, task_id)

        now = self._clock.now()
        await self._tasks.update_task(task.id, {"priority": value}, to_iso(now))
        updated = replace(task, priority=value, updated_at=now)
        self._cache.put(updated)
        return updated

    async def delete(self, user_id: int, task_id: str) -> int:
        """
        Delete a task and its history. History goes first; if that fails the
        task row is left alone. Returns the number of history rows removed.
        """
        task = await self.get_task(user_id, task_id)
        removed = await self._history.delete_for_task(task.id)
        await self._tasks.delete_task(task.id)
        self._cache.remove(user_id, task.id)
        logger.info(f"Task deleted: task_id={task.id} history_rows={removed}")
        return removed

    # ----- History ledger internals -----

    async def _book_session(self, task: Task, day: date, session_ms: int, now: datetime):
        now_iso = to_iso(now)
        existing = await self._history.get_entry(task.id, day)
        if existing is not None:
            merged = encode(decode(existing.elapsed_time) + session_ms)
            await self._history.update_entry(existing.id, merged, now_iso)
            entry = replace(existing, elapsed_time=merged, updated_at=now)

            async def undo() -> None:
                await self._history.update_entry(existing.id, existing.elapsed_time, now_iso)

            return entry, undo

        entry = await self._history.insert_entry(
            entry_id=self._ids.new_id(),
            user_id=task.user_id,
            task_id=task.id,
            start_date=day,
            elapsed_time=encode(session_ms),
            now_iso=now_iso,
        )

        async def undo() -> None:
            await self._history.delete_entry(entry.id)

        return entry, undo

    async def _compensate(self, task_id: str, undo: Callable[[], Awaitable[None]]) -> None:
        try:
            await undo()
        except PersistenceFailure:
            # history now holds a session the task total does not; a retry will book it twice
            logger.error(f"History rollback failed: task_id={task_id}", exc_info=True)
