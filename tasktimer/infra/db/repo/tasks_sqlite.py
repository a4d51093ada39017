from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from tasktimer.constants import SORT_FIELDS
from tasktimer.domain.common.errors import NotFoundError, ValidationError
from tasktimer.domain.common.time import from_iso, to_iso
from tasktimer.domain.timer.models import Task
from tasktimer.domain.timer.ports import TaskRepository
from tasktimer.infra.db.connection import Database

_UPDATABLE = {"name", "priority", "is_running", "last_start_time", "total_elapsed_time"}


class TasksSqliteRepo(TaskRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def ensure_user(self, user_id: int, now_iso: str) -> None:
        row = await self._db.fetchone("SELECT user_id FROM users WHERE user_id = ?;", (user_id,))
        if row:
            await self._db.execute("UPDATE users SET last_seen_at = ? WHERE user_id = ?;", (now_iso, user_id))
            return
        await self._db.execute(
            "INSERT INTO users(user_id, created_at, last_seen_at) VALUES (?, ?, ?);",
            (user_id, now_iso, now_iso),
        )

    async def list_tasks(self, user_id: int, order_by: str, ascending: bool) -> Sequence[Task]:
        if order_by not in SORT_FIELDS:
            raise ValidationError(f"Unknown sort field: {order_by}")
        direction = "ASC" if ascending else "DESC"
        rows = await self._db.fetchall(
            f"""
            SELECT *
            FROM tasks
            WHERE user_id = ?
            ORDER BY {order_by} {direction} NULLS LAST, created_at DESC;
            """,
            (user_id,),
        )
        return [self._row_to_task(r) for r in rows]

    async def get_task(self, user_id: int, task_id: str) -> Optional[Task]:
        row = await self._db.fetchone(
            "SELECT * FROM tasks WHERE id = ? AND user_id = ?;",
            (task_id, user_id),
        )
        return self._row_to_task(row) if row else None

    async def insert_task(
        self,
        task_id: str,
        user_id: int,
        name: str,
        priority: str,
        total_elapsed_time: str,
        now_iso: str,
    ) -> Task:
        await self._db.execute(
            """
            INSERT INTO tasks(
              id, user_id, name, priority, is_running,
              last_start_time, total_elapsed_time, created_at, updated_at
            ) VALUES (?, ?, ?, ?, 0, NULL, ?, ?, ?);
            """,
            (task_id, user_id, name, priority, total_elapsed_time, now_iso, now_iso),
        )
        task = await self.get_task(user_id, task_id)
        if task is None:
            raise NotFoundError("Inserted task could not be read back.")
        return task

    async def update_task(self, task_id: str, fields: Dict[str, Any], now_iso: str) -> None:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValidationError(f"Cannot update task fields: {', '.join(sorted(unknown))}")
        if not fields:
            return

        columns = sorted(fields)
        assignments = ", ".join(f"{c} = ?" for c in columns)
        params = [self._to_column(fields[c]) for c in columns]
        await self._db.execute(
            f"UPDATE tasks SET {assignments}, updated_at = ? WHERE id = ?;",
            (*params, now_iso, task_id),
        )

    async def delete_task(self, task_id: str) -> None:
        await self._db.execute("DELETE FROM tasks WHERE id = ?;", (task_id,))

    @staticmethod
    def _to_column(value: Any) -> Any:
        if isinstance(value, bool):
            return 1 if value else 0
        if isinstance(value, datetime):
            return to_iso(value)
        return value

    def _row_to_task(self, row) -> Task:
        return Task(
            id=row["id"],
            user_id=int(row["user_id"]),
            name=row["name"],
            priority=row["priority"],
            is_running=bool(row["is_running"]),
            last_start_time=from_iso(row["last_start_time"]) if row["last_start_time"] else None,
            total_elapsed_time=row["total_elapsed_time"] or "",
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )
