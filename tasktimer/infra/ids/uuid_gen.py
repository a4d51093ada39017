from __future__ import annotations

import uuid

from tasktimer.domain.timer.ports import IdGenerator


class UuidGenerator(IdGenerator):
    """Random uuid4 ids for tasks and history rows (36 chars, fits callback data)."""

    def new_id(self) -> str:
        return str(uuid.uuid4())
