from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from aiogram import Bot, Dispatcher
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import ExceptionTypeFilter
from aiogram.types import ErrorEvent

from tasktimer.config import load_settings
from tasktimer.domain.common.time import to_iso
from tasktimer.domain.report.service import ReportService
from tasktimer.domain.session import SessionContext
from tasktimer.domain.timer.service import TimerService
from tasktimer.infra.auth.owner_auth import OwnerAuthProvider
from tasktimer.infra.clock.system_clock import SystemClock
from tasktimer.infra.db.connection import Database
from tasktimer.infra.db.repo.history_sqlite import HistorySqliteRepo
from tasktimer.infra.db.repo.tasks_sqlite import TasksSqliteRepo
from tasktimer.infra.db.schema_version import apply_migrations
from tasktimer.infra.ids.uuid_gen import UuidGenerator
from tasktimer.ui.telegram.handlers.cancel import router as cancel_router
from tasktimer.ui.telegram.handlers.report import router as report_router
from tasktimer.ui.telegram.handlers.start import router as start_router
from tasktimer.ui.telegram.handlers.tasks import router as tasks_router
from tasktimer.ui.telegram.middlewares.auth import OwnerOnlyMiddleware
from tasktimer.ui.telegram.middlewares.di import DIMiddleware

logger = logging.getLogger(__name__)


async def handle_old_callback_query(event: ErrorEvent) -> None:
    """Ignore TelegramBadRequest for old/invalid callback queries (e.g. after bot restart)."""
    msg = str(event.exception).lower()
    if "query is too old" in msg or "query id is invalid" in msg or "message is not modified" in msg:
        logger.debug("Ignoring stale callback query: %s", event.exception)
        return
    raise event.exception


def build_dispatcher(
    auth: OwnerAuthProvider,
    session: SessionContext,
    timer_service: TimerService,
    report_service: ReportService,
    clock: SystemClock,
) -> Dispatcher:
    dp = Dispatcher()

    # --- middlewares ---
    for observer in (dp.message, dp.callback_query):
        observer.middleware(OwnerOnlyMiddleware(auth))
        observer.middleware(DIMiddleware(timer_service, report_service, session, clock))

    # --- routers ---
    dp.include_router(start_router)
    dp.include_router(cancel_router)
    dp.include_router(tasks_router)
    dp.include_router(report_router)

    dp.error.register(handle_old_callback_query, ExceptionTypeFilter(TelegramBadRequest))
    return dp


async def main() -> None:
    settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - [PID:%(process)d] - %(message)s'
    )
    pid = os.getpid()
    logger.info(f"Bot starting - PID: {pid}")

    repo_root = Path(__file__).resolve().parents[3]  # .../tasktimer/ui/telegram/main.py -> repo root

    # --- DB path: one place, always absolute, ensure dir exists ---
    db_path = settings.db_path
    if not db_path.is_absolute():
        db_path = repo_root / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"DB_PATH: {db_path}")

    db = Database(str(db_path))
    clock = SystemClock(settings.timezone)
    ids = UuidGenerator()

    # --- migrations ---
    applied = await apply_migrations(db=db, now_iso=to_iso(clock.now()))
    logger.info(f"Migrations applied: {applied}")

    # --- auth / session ---
    auth = OwnerAuthProvider(settings.owner_telegram_id)
    session = SessionContext.bind(auth)

    # --- services ---
    tasks_repo = TasksSqliteRepo(db)
    history_repo = HistorySqliteRepo(db)
    timer_service = TimerService(tasks=tasks_repo, history=history_repo, clock=clock, ids=ids)
    report_service = ReportService(history=history_repo, clock=clock)

    # --- bot/dispatcher ---
    bot = Bot(token=settings.bot_token)
    dp = build_dispatcher(auth, session, timer_service, report_service, clock)

    logger.info(f"Starting polling - PID: {pid}")
    try:
        await dp.start_polling(bot)
    except Exception:
        logger.error(f"Bot crashed - PID: {pid}", exc_info=True)
        raise
    finally:
        auth.sign_out()
        session.close()
        await bot.session.close()
        logger.info(f"Bot shutdown complete - PID: {pid}")


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")


if __name__ == "__main__":
    run()
