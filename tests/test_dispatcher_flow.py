"""
End-to-end message flow through the bot's dispatcher, with Telegram API calls
patched out. Routers are module-level and can be attached to one dispatcher
only, so every scenario runs against a single dispatcher.

Run with: python -m pytest tests/test_dispatcher_flow.py -v
"""
from __future__ import annotations

import asyncio
from datetime import datetime
from itertools import count
from unittest.mock import AsyncMock, patch

from aiogram import Bot
from aiogram.types import Chat, Message, Update, User

from fakes import HELSINKI, FakeClock, InMemoryHistory, InMemoryTasks, SeqIds
from tasktimer.domain.report.service import ReportService
from tasktimer.domain.session import SessionContext
from tasktimer.domain.timer.service import TimerService
from tasktimer.infra.auth.owner_auth import OwnerAuthProvider
from tasktimer.ui.telegram.main import build_dispatcher

OWNER = 4242
_ids = count(1)


def _update(text: str) -> Update:
    n = next(_ids)
    return Update(
        update_id=n,
        message=Message(
            message_id=n,
            date=datetime(2026, 10, 17, 12, 0),
            chat=Chat(id=OWNER, type="private"),
            from_user=User(id=OWNER, is_bot=False, first_name="Owner"),
            text=text,
        ),
    )


def _sent_texts(api: AsyncMock) -> list:
    return [getattr(c.args[0], "text", None) for c in api.await_args_list]


def test_commands_during_rename_reach_their_own_handlers():
    async def run():
        tasks = InMemoryTasks()
        history = InMemoryHistory(tasks)
        clock = FakeClock(datetime(2026, 10, 17, 12, 0, tzinfo=HELSINKI))
        timer = TimerService(tasks=tasks, history=history, clock=clock, ids=SeqIds())
        reports = ReportService(history=history, clock=clock)
        auth = OwnerAuthProvider(OWNER)
        session = SessionContext.bind(auth)

        dp = build_dispatcher(auth, session, timer, reports, clock)
        bot = Bot(token="42:TEST")
        state = dp.fsm.get_context(bot=bot, chat_id=OWNER, user_id=OWNER)

        with patch.object(Bot, "__call__", new_callable=AsyncMock) as api:
            # /new goes straight into name editing
            await dp.feed_update(bot, _update("/new"))
            first = next(iter(tasks.rows))
            assert await state.get_state() is not None

            # a command is handled by its own router, not taken as the name
            await dp.feed_update(bot, _update("/report week"))
            assert tasks.rows[first].name == "New Task"
            assert any(t and t.startswith("Task Time Report (WEEK)") for t in _sent_texts(api))
            assert await state.get_state() is None

            # editing was left, so plain text no longer renames
            await dp.feed_update(bot, _update("Thesis"))
            assert tasks.rows[first].name == "New Task"

            # same for a command registered after the rename handler
            await dp.feed_update(bot, _update("/new"))
            second = [i for i in tasks.rows if i != first][0]
            await dp.feed_update(bot, _update("/history New"))
            assert tasks.rows[second].name == "New Task"
            assert await state.get_state() is None

            # plain text while editing renames
            await dp.feed_update(bot, _update("/new"))
            third = [i for i in tasks.rows if i not in (first, second)][0]
            await dp.feed_update(bot, _update("Thesis"))
            assert tasks.rows[third].name == "Thesis"
            assert await state.get_state() is None

        await bot.session.close()

    asyncio.run(run())
