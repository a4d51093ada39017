from __future__ import annotations

import logging

from tasktimer.domain.report.aggregator import aggregate
from tasktimer.domain.report.models import RangeReport
from tasktimer.domain.report.ranges import compute_range
from tasktimer.domain.timer.ports import Clock, HistoryRepository

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, history: HistoryRepository, clock: Clock) -> None:
        self._history = history
        self._clock = clock

    async def build(self, user_id: int, selector: str) -> RangeReport:
        rng = compute_range(selector, self._clock.now())
        rows = await self._history.list_for_range(user_id, rng.start, rng.end)
        logger.debug(f"Report {selector}: user_id={user_id} {rng.start}..{rng.end} rows={len(rows)}")
        return RangeReport(range=rng, report=aggregate(rows))
