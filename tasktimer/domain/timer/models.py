from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal, Optional

Priority = Literal["P1", "P2", "P3", "P4", "P5"]


@dataclass(frozen=True)
class Task:
    id: str
    user_id: int
    name: str
    priority: Priority  # P1 highest
    is_running: bool
    last_start_time: Optional[datetime]
    total_elapsed_time: str  # interval, HH:MM:SS
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    user_id: int
    task_id: str
    start_date: date  # local calendar day of the session start
    elapsed_time: str  # interval accrued that day
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class StopResult:
    task: Task
    entry: HistoryEntry
    session_ms: int
    clock_regressed: bool = False


@dataclass(frozen=True)
class TaskSort:
    field: str
    order: str  # asc | desc

    @property
    def ascending(self) -> bool:
        return self.order == "asc"
