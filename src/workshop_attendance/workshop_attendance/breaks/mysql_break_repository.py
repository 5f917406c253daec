from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import ResilientDataAccess
from ..database.mysql_base import db_cursor, fetchone
from ..database.projection import ProjectionTiers, select_with_fallback
from .model import BreakWindow
from .repository import BreakWindowRepository

BREAK_PROJECTION = ProjectionTiers(
    table="breakTimes",
    tiers=(
        ("id", "name", "startTime", "endTime", "durationMinutes", "isActive"),
        ("id", "name", "startTime", "endTime"),
    ),
)


def _to_window(r: Dict[str, Any]) -> BreakWindow:
    # Rows read through a narrowed projection have no isActive column: treat as active.
    is_active = r.get("isActive")
    return BreakWindow(
        break_id=int(r["id"]),
        name=r["name"],
        start_time=str(r["startTime"]),
        end_time=str(r["endTime"]),
        duration_minutes=int(r.get("durationMinutes") or 0),
        is_active=is_active is None or str(is_active) == "true",
    )


class MySQLBreakWindowRepository(BreakWindowRepository):
    def __init__(self, data_access: ResilientDataAccess):
        self._db = data_access

    async def list_all(self) -> Sequence[BreakWindow]:
        if not self._db.configured:
            return []
        async with db_cursor(self._db) as (_, cur):
            rows = await select_with_fallback(cur, BREAK_PROJECTION, "ORDER BY `startTime`, `id`")
            return [_to_window(r) for r in rows]

    async def get_by_id(self, break_id: int) -> Optional[BreakWindow]:
        if not self._db.configured:
            return None
        async with db_cursor(self._db) as (_, cur):
            rows = await select_with_fallback(cur, BREAK_PROJECTION, "WHERE `id`=%s", (int(break_id),))
            return _to_window(rows[0]) if rows else None

    async def has_any(self) -> bool:
        if not self._db.configured:
            return False
        async with db_cursor(self._db) as (_, cur):
            await cur.execute("SELECT id FROM breakTimes LIMIT 1")
            return await fetchone(cur) is not None

    async def create(self, window: BreakWindow) -> int:
        async with db_cursor(self._db) as (_, cur):
            await cur.execute(
                """
                INSERT INTO breakTimes(name, startTime, endTime, durationMinutes, isActive)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    window.name,
                    window.start_time,
                    window.end_time,
                    int(window.duration_minutes),
                    "true" if window.is_active else "false",
                ),
            )
            return int(cur.lastrowid)

    async def set_active(self, break_id: int, is_active: bool) -> bool:
        async with db_cursor(self._db) as (_, cur):
            await cur.execute(
                "UPDATE breakTimes SET isActive=%s WHERE id=%s",
                ("true" if is_active else "false", int(break_id)),
            )
            return cur.rowcount > 0

    async def delete(self, break_id: int) -> bool:
        async with db_cursor(self._db) as (_, cur):
            await cur.execute("DELETE FROM breakTimes WHERE id=%s", (int(break_id),))
            return cur.rowcount > 0
