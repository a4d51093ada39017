from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from tasktimer.domain.common.errors import NotFoundError
from tasktimer.domain.common.time import date_key, from_iso
from tasktimer.domain.timer.models import HistoryEntry
from tasktimer.domain.timer.ports import HistoryRepository
from tasktimer.infra.db.connection import Database


class HistorySqliteRepo(HistoryRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def get_entry(self, task_id: str, start_date: date) -> Optional[HistoryEntry]:
        row = await self._db.fetchone(
            "SELECT * FROM task_history WHERE task_id = ? AND start_date = ?;",
            (task_id, date_key(start_date)),
        )
        return self._row_to_entry(row) if row else None

    async def list_for_task(self, task_id: str) -> Sequence[HistoryEntry]:
        rows = await self._db.fetchall(
            "SELECT * FROM task_history WHERE task_id = ? ORDER BY start_date ASC;",
            (task_id,),
        )
        return [self._row_to_entry(r) for r in rows]

    async def list_for_range(self, user_id: int, start: date, end: date) -> Sequence[Dict[str, Any]]:
        rows = await self._db.fetchall(
            """
            SELECT h.id, h.task_id, h.start_date, h.elapsed_time, t.name AS task_name
            FROM task_history h
            JOIN tasks t ON t.id = h.task_id
            WHERE h.user_id = ?
              AND h.start_date >= ?
              AND h.start_date <= ?
            ORDER BY h.start_date ASC;
            """,
            (user_id, date_key(start), date_key(end)),
        )
        return [
            {
                "id": r["id"],
                "task_id": r["task_id"],
                "task_name": r["task_name"],
                "start_date": r["start_date"],
                "elapsed_time": r["elapsed_time"],
            }
            for r in rows
        ]

    async def insert_entry(
        self,
        entry_id: str,
        user_id: int,
        task_id: str,
        start_date: date,
        elapsed_time: str,
        now_iso: str,
    ) -> HistoryEntry:
        await self._db.execute(
            """
            INSERT INTO task_history(
              id, user_id, task_id, start_date, elapsed_time, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?);
            """,
            (entry_id, user_id, task_id, date_key(start_date), elapsed_time, now_iso, now_iso),
        )
        entry = await self.get_entry(task_id, start_date)
        if entry is None:
            raise NotFoundError("Inserted history entry could not be read back.")
        return entry

    async def update_entry(self, entry_id: str, elapsed_time: str, now_iso: str) -> None:
        await self._db.execute(
            "UPDATE task_history SET elapsed_time = ?, updated_at = ? WHERE id = ?;",
            (elapsed_time, now_iso, entry_id),
        )

    async def delete_entry(self, entry_id: str) -> None:
        await self._db.execute("DELETE FROM task_history WHERE id = ?;", (entry_id,))

    async def delete_for_task(self, task_id: str) -> int:
        return await self._db.execute("DELETE FROM task_history WHERE task_id = ?;", (task_id,))

    def _row_to_entry(self, row) -> HistoryEntry:
        return HistoryEntry(
            id=row["id"],
            user_id=int(row["user_id"]),
            task_id=row["task_id"],
            start_date=date.fromisoformat(row["start_date"]),
            elapsed_time=row["elapsed_time"] or "",
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )
