from __future__ import annotations

from typing import Any, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message

from tasktimer.infra.auth.owner_auth import OwnerAuthProvider
from tasktimer.ui.telegram import texts


class OwnerOnlyMiddleware(BaseMiddleware):
    """
    Signs the sender in with the auth provider and stops the update when the
    provider rejects them.
    """

    def __init__(self, auth: OwnerAuthProvider) -> None:
        self._auth = auth

    async def __call__(self, handler: Callable, event, data: Dict[str, Any]):
        user_id = None
        if isinstance(event, (Message, CallbackQuery)) and event.from_user is not None:
            user_id = event.from_user.id

        if not self._auth.sign_in(user_id):
            if isinstance(event, Message):
                await event.answer(texts.tasks.NOT_AUTHORIZED)
            elif isinstance(event, CallbackQuery):
                await event.answer(texts.tasks.NOT_AUTHORIZED, show_alert=True)
            return

        return await handler(event, data)
