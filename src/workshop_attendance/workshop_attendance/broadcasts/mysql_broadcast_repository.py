from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import ResilientDataAccess
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .repository import BroadcastRepository


class MySQLBroadcastRepository(BroadcastRepository):
    def __init__(self, data_access: ResilientDataAccess):
        self._db = data_access

    async def list_expired_ids(self, now: datetime) -> Sequence[int]:
        if not self._db.configured:
            return []
        async with db_cursor(self._db) as (_, cur):
            await cur.execute("SELECT id FROM salesBroadcasts WHERE expiresAt < %s ORDER BY id", (now,))
            return [int(r["id"]) for r in await fetchall(cur)]

    async def delete_reads_for(self, broadcast_ids: Sequence[int]) -> int:
        if not broadcast_ids:
            return 0
        async with db_cursor(self._db) as (_, cur):
            await cur.execute(
                f"DELETE FROM salesBroadcastReads WHERE broadcastId IN ({in_clause(broadcast_ids)})",
                tuple(int(i) for i in broadcast_ids),
            )
            return int(cur.rowcount)

    async def delete_broadcasts(self, broadcast_ids: Sequence[int]) -> int:
        if not broadcast_ids:
            return 0
        async with db_cursor(self._db) as (_, cur):
            await cur.execute(
                f"DELETE FROM salesBroadcasts WHERE id IN ({in_clause(broadcast_ids)})",
                tuple(int(i) for i in broadcast_ids),
            )
            return int(cur.rowcount)
