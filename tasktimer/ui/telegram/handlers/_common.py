from __future__ import annotations

import logging

from aiogram.types import Message

from tasktimer.domain.common.errors import DomainError, PersistenceFailure
from tasktimer.ui.telegram.keyboards.common import dismiss_kb

logger = logging.getLogger(__name__)


async def show_error(message: Message, err: DomainError) -> None:
    """Dismissible error message; the action can simply be triggered again."""
    if isinstance(err, PersistenceFailure):
        logger.error(f"Persistence failure ({err.operation or 'unknown'}): {err}")
        text = "Could not save changes. Please try again."
    else:
        text = str(err) or "Something went wrong."
    await message.answer(f"⚠️ {text}", reply_markup=dismiss_kb())
