from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from tasktimer.domain.report.service import ReportService
from tasktimer.domain.session import SessionContext
from tasktimer.domain.timer.service import TimerService
from tasktimer.infra.clock.system_clock import SystemClock


class DIMiddleware(BaseMiddleware):
    """
    Inject dependencies to handlers via `data` dict.

    Handlers can request args by name, e.g.
      async def handler(message: Message, timer_service: TimerService, session: SessionContext): ...
    """

    def __init__(
        self,
        timer_service: TimerService,
        report_service: ReportService,
        session: SessionContext,
        clock: SystemClock,
    ) -> None:
        self._timer = timer_service
        self._reports = report_service
        self._session = session
        self._clock = clock

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        # keep names stable across the project
        data["timer_service"] = self._timer
        data["report_service"] = self._reports
        data["session"] = self._session
        data["clock"] = self._clock

        return await handler(event, data)
