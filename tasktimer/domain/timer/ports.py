from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional, Sequence

from tasktimer.domain.timer.models import HistoryEntry, Task

AuthListener = Callable[[Optional[int]], None]


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime: ...


class IdGenerator(ABC):
    @abstractmethod
    def new_id(self) -> str: ...


class AuthProvider(ABC):
    @abstractmethod
    def get_current_user_id(self) -> Optional[int]: ...

    @abstractmethod
    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register a sign-in/sign-out listener; returns an unsubscribe callable."""


class TaskRepository(ABC):
    @abstractmethod
    async def ensure_user(self, user_id: int, now_iso: str) -> None: ...

    @abstractmethod
    async def list_tasks(self, user_id: int, order_by: str, ascending: bool) -> Sequence[Task]: ...

    @abstractmethod
    async def get_task(self, user_id: int, task_id: str) -> Optional[Task]: ...

    @abstractmethod
    async def insert_task(
        self,
        task_id: str,
        user_id: int,
        name: str,
        priority: str,
        total_elapsed_time: str,
        now_iso: str,
    ) -> Task: ...

    @abstractmethod
    async def update_task(self, task_id: str, fields: Dict[str, Any], now_iso: str) -> None: ...

    @abstractmethod
    async def delete_task(self, task_id: str) -> None: ...


class HistoryRepository(ABC):
    @abstractmethod
    async def get_entry(self, task_id: str, start_date: date) -> Optional[HistoryEntry]: ...

    @abstractmethod
    async def list_for_task(self, task_id: str) -> Sequence[HistoryEntry]: ...

    @abstractmethod
    async def list_for_range(self, user_id: int, start: date, end: date) -> Sequence[Dict[str, Any]]:
        """Rows {task_name, start_date, elapsed_time} with start <= start_date <= end, by date asc."""

    @abstractmethod
    async def insert_entry(
        self,
        entry_id: str,
        user_id: int,
        task_id: str,
        start_date: date,
        elapsed_time: str,
        now_iso: str,
    ) -> HistoryEntry: ...

    @abstractmethod
    async def update_entry(self, entry_id: str, elapsed_time: str, now_iso: str) -> None: ...

    @abstractmethod
    async def delete_entry(self, entry_id: str) -> None: ...

    @abstractmethod
    async def delete_for_task(self, task_id: str) -> int: ...
