from __future__ import annotations

from typing import Dict, Iterable, Optional

from tasktimer.domain.timer.models import Task


class TaskCache:
    """
    Per-user snapshot of tasks as last confirmed by persistence.

    The service writes here only after the matching repository call
    returned, so a failed write never shows up locally.
    """

    def __init__(self) -> None:
        self._by_user: Dict[int, Dict[str, Task]] = {}

    def replace_all(self, user_id: int, tasks: Iterable[Task]) -> None:
        self._by_user[user_id] = {t.id: t for t in tasks}

    def get(self, user_id: int, task_id: str) -> Optional[Task]:
        return self._by_user.get(user_id, {}).get(task_id)

    def put(self, task: Task) -> None:
        self._by_user.setdefault(task.user_id, {})[task.id] = task

    def remove(self, user_id: int, task_id: str) -> None:
        self._by_user.get(user_id, {}).pop(task_id, None)
