from __future__ import annotations

import logging
from typing import Callable, List, Optional

from tasktimer.domain.timer.ports import AuthListener, AuthProvider

logger = logging.getLogger(__name__)


class OwnerAuthProvider(AuthProvider):
    """
    Single-owner auth: the configured Telegram user is the only account.

    Every incoming update presents its sender via sign_in(); listeners hear
    about it only when the signed-in user actually changes. A rejected
    sender leaves the current session alone, so a stranger's update cannot
    sign the owner out while one of the owner's updates is still in flight.
    """

    def __init__(self, owner_id: int) -> None:
        self._owner_id = owner_id
        self._current: Optional[int] = None
        self._listeners: List[AuthListener] = []

    def get_current_user_id(self) -> Optional[int]:
        return self._current

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, telegram_user_id: Optional[int]) -> bool:
        if telegram_user_id is None or telegram_user_id != self._owner_id:
            logger.warning(f"[AUTH] blocked user_id={telegram_user_id} owner_id={self._owner_id}")
            return False
        self._set(telegram_user_id)
        return True

    def sign_out(self) -> None:
        self._set(None)

    def _set(self, user_id: Optional[int]) -> None:
        if user_id == self._current:
            return
        self._current = user_id
        for listener in list(self._listeners):
            listener(user_id)
