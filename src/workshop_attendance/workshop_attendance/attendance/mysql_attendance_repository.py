from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Tuple

from ..core.enums import EditField
from ..core.exceptions import DuplicateClockInError
from ..database.connection import ResilientDataAccess, is_missing_column_error
from ..database.mysql_base import db_cursor, fetchall, is_duplicate_entry_error
from ..database.projection import ProjectionTiers, select_with_fallback
from .model import AttendanceEditLog, AttendanceRecord, AttendanceUpdate
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

ATTENDANCE_PROJECTION = ProjectionTiers(
    table="attendanceRecords",
    tiers=(
        ("id", "userId", "clockIn", "clockOut", "workDuration", "clockInDevice", "clockOutDevice"),
        ("id", "userId", "clockIn", "clockOut", "workDuration"),
        ("id", "userId", "clockIn", "clockOut"),
    ),
)

Statement = Tuple[str, Tuple[Any, ...]]


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    duration = r.get("workDuration")
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        user_id=int(r["userId"]),
        clock_in=r["clockIn"],
        clock_out=r.get("clockOut"),
        work_duration_minutes=int(duration) if duration is not None else None,
        clock_in_device=r.get("clockInDevice"),
        clock_out_device=r.get("clockOutDevice"),
    )


async def _execute_first_supported(cur, variants: Sequence[Statement]) -> None:
    """Execute the first statement variant whose columns exist in the live schema."""

    for index, (sql, params) in enumerate(variants):
        try:
            await cur.execute(sql, params)
            return
        except Exception as exc:
            if not is_missing_column_error(exc) or index == len(variants) - 1:
                raise
            logger.info("[database] write variant %d not supported by schema (%s), narrowing", index, exc)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, data_access: ResilientDataAccess):
        self._db = data_access

    async def _select(self, tail: str, params: Sequence[Any] = ()) -> Sequence[AttendanceRecord]:
        if not self._db.configured:
            return []
        async with db_cursor(self._db) as (_, cur):
            rows = await select_with_fallback(cur, ATTENDANCE_PROJECTION, tail, params)
            return [_to_record(r) for r in rows]

    async def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        rows = await self._select("WHERE `id`=%s LIMIT 1", (int(attendance_id),))
        return rows[0] if rows else None

    async def find_first_for_user_between(
        self, user_id: int, start: datetime, end: datetime
    ) -> Optional[AttendanceRecord]:
        rows = await self._select(
            "WHERE `userId`=%s AND `clockIn` >= %s AND `clockIn` <= %s ORDER BY `clockIn` LIMIT 1",
            (int(user_id), start, end),
        )
        return rows[0] if rows else None

    async def find_oldest_open_for_user(self, user_id: int) -> Optional[AttendanceRecord]:
        rows = await self._select(
            "WHERE `userId`=%s AND `clockOut` IS NULL ORDER BY `clockIn` LIMIT 1",
            (int(user_id),),
        )
        return rows[0] if rows else None

    async def list_open_between(self, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        return await self._select(
            "WHERE `clockIn` >= %s AND `clockIn` <= %s AND `clockOut` IS NULL ORDER BY `clockIn`",
            (start, end),
        )

    async def create_clock_in(self, *, user_id: int, clock_in: datetime, device: str) -> int:
        try:
            async with db_cursor(self._db) as (_, cur):
                await _execute_first_supported(
                    cur,
                    [
                        (
                            "INSERT INTO attendanceRecords(userId, clockIn, clockInDevice) VALUES(%s,%s,%s)",
                            (int(user_id), clock_in, device),
                        ),
                        (
                            "INSERT INTO attendanceRecords(userId, clockIn) VALUES(%s,%s)",
                            (int(user_id), clock_in),
                        ),
                    ],
                )
                return int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_entry_error(exc):
                raise DuplicateClockInError("An open attendance record already exists") from exc
            raise

    async def close_record(
        self,
        *,
        attendance_id: int,
        clock_out: datetime,
        device: str,
        work_duration_minutes: int,
    ) -> bool:
        async with db_cursor(self._db) as (_, cur):
            await _execute_first_supported(
                cur,
                [
                    (
                        """
                        UPDATE attendanceRecords
                        SET clockOut=%s, clockOutDevice=%s, workDuration=%s
                        WHERE id=%s AND clockOut IS NULL
                        """,
                        (clock_out, device, int(work_duration_minutes), int(attendance_id)),
                    ),
                    (
                        "UPDATE attendanceRecords SET clockOut=%s, workDuration=%s WHERE id=%s AND clockOut IS NULL",
                        (clock_out, int(work_duration_minutes), int(attendance_id)),
                    ),
                ],
            )
            return cur.rowcount > 0

    async def apply_update(
        self,
        *,
        attendance_id: int,
        update: AttendanceUpdate,
        work_duration_minutes: Optional[int],
    ) -> bool:
        assignments: list[str] = []
        params: list[object] = []

        if update.clock_in is not None:
            assignments.append("clockIn=%s")
            params.append(update.clock_in)
        if update.clock_out is not None:
            assignments.append("clockOut=%s")
            params.append(update.clock_out)
        if work_duration_minutes is not None:
            assignments.append("workDuration=%s")
            params.append(int(work_duration_minutes))

        if not assignments:
            return False

        params.append(int(attendance_id))
        async with db_cursor(self._db) as (_, cur):
            await cur.execute(
                f"UPDATE attendanceRecords SET {', '.join(assignments)} WHERE id=%s",
                tuple(params),
            )
            return cur.rowcount > 0

    async def insert_edit_log(
        self,
        *,
        attendance_id: int,
        editor_id: int,
        field_name: EditField,
        old_value: Optional[datetime],
        new_value: Optional[datetime],
    ) -> int:
        async with db_cursor(self._db) as (_, cur):
            await cur.execute(
                """
                INSERT INTO attendanceEditLogs(attendanceId, editorId, fieldName, oldValue, newValue)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(attendance_id), int(editor_id), EditField(field_name).value, old_value, new_value),
            )
            return int(cur.lastrowid)

    async def list_edit_logs(self, attendance_id: Optional[int] = None) -> Sequence[AttendanceEditLog]:
        if not self._db.configured:
            return []

        where = ""
        params: tuple = ()
        if attendance_id is not None:
            where = "WHERE attendanceId=%s"
            params = (int(attendance_id),)

        async with db_cursor(self._db) as (_, cur):
            await cur.execute(
                f"""
                SELECT id, attendanceId, editorId, fieldName, oldValue, newValue, createdAt
                FROM attendanceEditLogs
                {where}
                ORDER BY createdAt, id
                """,
                params,
            )
            rows = await fetchall(cur)
            return [
                AttendanceEditLog(
                    log_id=int(r["id"]),
                    attendance_id=int(r["attendanceId"]),
                    editor_id=int(r["editorId"]),
                    field_name=EditField(r["fieldName"]),
                    old_value=r.get("oldValue"),
                    new_value=r.get("newValue"),
                    created_at=r.get("createdAt"),
                )
                for r in rows
            ]

    async def delete(self, attendance_id: int) -> bool:
        async with db_cursor(self._db) as (_, cur):
            await cur.execute("DELETE FROM attendanceRecords WHERE id=%s", (int(attendance_id),))
            return cur.rowcount > 0
