from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List


@dataclass
class TaskTime:
    name: str
    hours: int = 0
    minutes: int = 0

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    def add(self, hours: int, minutes: int) -> None:
        self.hours += hours
        self.minutes += minutes
        if self.minutes >= 60:
            self.hours += self.minutes // 60
            self.minutes %= 60


@dataclass
class TimeEntry:
    """One calendar day: its total and a per-task breakdown."""

    date: str  # YYYY-MM-DD
    hours: int = 0
    minutes: int = 0
    tasks: List[TaskTime] = field(default_factory=list)

    @property
    def fractional_hours(self) -> float:
        return round(self.hours + self.minutes / 60, 2)


@dataclass(frozen=True)
class DateRange:
    selector: str
    start: date
    end: date  # inclusive


@dataclass
class Report:
    total_hours: int
    total_minutes: int
    entries: List[TimeEntry]
    top_tasks: List[TaskTime]
    task_totals: List[TaskTime] = field(default_factory=list)

    def chart_series(self) -> List[float]:
        return [e.fractional_hours for e in self.entries]


@dataclass(frozen=True)
class RangeReport:
    range: DateRange
    report: Report
