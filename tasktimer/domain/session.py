from __future__ import annotations

from typing import Callable, Optional

from tasktimer.domain.common.errors import NotAuthenticatedError
from tasktimer.domain.timer.ports import AuthProvider


class SessionContext:
    """
    Who is signed in, as last reported by the auth provider.

    Built once in the composition root and handed to whoever needs it;
    kept current by the provider's sign-in/sign-out events.
    """

    def __init__(self, user_id: Optional[int] = None) -> None:
        self._user_id = user_id
        self._unsubscribe: Optional[Callable[[], None]] = None

    @classmethod
    def bind(cls, auth: AuthProvider) -> "SessionContext":
        ctx = cls(auth.get_current_user_id())
        ctx._unsubscribe = auth.subscribe(ctx._on_auth_change)
        return ctx

    def _on_auth_change(self, user_id: Optional[int]) -> None:
        self._user_id = user_id

    @property
    def user_id(self) -> Optional[int]:
        return self._user_id

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    def require_user(self) -> int:
        if self._user_id is None:
            raise NotAuthenticatedError("Not signed in.")
        return self._user_id

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
