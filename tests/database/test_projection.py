from __future__ import annotations

import asyncio
from datetime import datetime

import pytest
from mysql.connector import errors

from src.workshop_attendance.workshop_attendance.attendance.duration import WorkDurationCalculator
from src.workshop_attendance.workshop_attendance.attendance.mysql_attendance_repository import (
    MySQLAttendanceRepository,
)
from src.workshop_attendance.workshop_attendance.attendance.service import AttendanceService
from src.workshop_attendance.workshop_attendance.breaks.mysql_break_repository import MySQLBreakWindowRepository
from src.workshop_attendance.workshop_attendance.breaks.service import BreakWindowService
from src.workshop_attendance.workshop_attendance.core.enums import Role
from src.workshop_attendance.workshop_attendance.core.exceptions import DuplicateClockInError, InternalUnavailableError
from src.workshop_attendance.workshop_attendance.database.connection import DBConfig, ResilientDataAccess

CONFIG = DBConfig(host="db", port=3306, user="app", password="pw", database="workshop")

CLOCK_IN = datetime(2026, 2, 2, 9, 0)


class SchemaCursor:
    """Answers SELECTs against a fixed set of existing columns."""

    def __init__(self, conn):
        self._conn = conn
        self._rows = []
        self.rowcount = 0
        self.lastrowid = None

    async def execute(self, sql, params=()):
        self._conn.executed.append(sql)
        if sql.startswith("SELECT 1"):
            self._rows = []
            return
        for column in self._conn.missing:
            if f"`{column}`" in sql or f" {column}" in sql or f"{column}," in sql or f"{column})" in sql:
                raise errors.ProgrammingError(msg=f"Unknown column '{column}'", errno=1054)
        if sql.startswith("INSERT") and self._conn.duplicate:
            raise errors.IntegrityError(msg="Duplicate entry", errno=1062)
        if sql.startswith("SELECT"):
            self._rows = [{k: v for k, v in row.items() if k not in self._conn.missing} for row in self._conn.rows]
        else:
            self.rowcount = 1
            self.lastrowid = 42

    async def fetchall(self):
        return self._rows

    async def fetchone(self):
        return self._rows[0] if self._rows else None

    async def close(self):
        pass


class SchemaConnection:
    def __init__(self, rows, missing=(), duplicate=False):
        self.rows = rows
        self.missing = set(missing)
        self.duplicate = duplicate
        self.executed: list[str] = []

    async def cursor(self, dictionary=False):
        return SchemaCursor(self)

    async def commit(self):
        pass

    async def rollback(self):
        pass

    async def close(self):
        pass


def _access(conn):
    async def connector(**kwargs):
        return conn

    return ResilientDataAccess(CONFIG, connector=connector)


ROW = {
    "id": 1,
    "userId": 7,
    "clockIn": CLOCK_IN,
    "clockOut": None,
    "workDuration": None,
    "clockInDevice": "mobile",
    "clockOutDevice": None,
}


def test_full_projection_when_schema_is_current():
    repo = MySQLAttendanceRepository(_access(SchemaConnection([ROW])))

    rec = asyncio.run(repo.get_by_id(1))

    assert rec.clock_in_device == "mobile"


def test_missing_device_columns_degrade_to_null():
    conn = SchemaConnection([ROW], missing={"clockInDevice", "clockOutDevice"})
    repo = MySQLAttendanceRepository(_access(conn))

    rec = asyncio.run(repo.find_oldest_open_for_user(7))

    assert rec.attendance_id == 1
    assert rec.clock_in == CLOCK_IN
    assert rec.clock_in_device is None
    assert sum(1 for sql in conn.executed if sql.startswith("SELECT `id`")) == 2


def test_minimal_projection_when_duration_column_missing_too():
    conn = SchemaConnection([ROW], missing={"clockInDevice", "clockOutDevice", "workDuration"})
    repo = MySQLAttendanceRepository(_access(conn))

    records = asyncio.run(repo.list_open_between(CLOCK_IN.replace(hour=0), CLOCK_IN.replace(hour=23)))

    assert len(records) == 1
    assert records[0].work_duration_minutes is None


def test_insert_falls_back_without_device_column():
    conn = SchemaConnection([], missing={"clockInDevice"})
    repo = MySQLAttendanceRepository(_access(conn))

    new_id = asyncio.run(repo.create_clock_in(user_id=7, clock_in=CLOCK_IN, device="pc"))

    assert new_id == 42
    inserts = [sql for sql in conn.executed if sql.startswith("INSERT")]
    assert len(inserts) == 2


def test_unique_open_record_violation_is_duplicate_clock_in():
    repo = MySQLAttendanceRepository(_access(SchemaConnection([], duplicate=True)))

    with pytest.raises(DuplicateClockInError):
        asyncio.run(repo.create_clock_in(user_id=7, clock_in=CLOCK_IN, device="pc"))


def test_unconfigured_reads_are_empty_and_writes_fail():
    repo = MySQLAttendanceRepository(ResilientDataAccess(None))

    assert asyncio.run(repo.get_by_id(1)) is None
    assert asyncio.run(repo.list_open_between(CLOCK_IN, CLOCK_IN)) == []
    with pytest.raises(InternalUnavailableError):
        asyncio.run(repo.create_clock_in(user_id=7, clock_in=CLOCK_IN, device="pc"))


def test_break_rows_without_is_active_are_treated_as_active():
    rows = [{"id": 1, "name": "Lunch", "startTime": "12:00", "endTime": "13:20", "durationMinutes": 80, "isActive": "false"}]
    conn = SchemaConnection(rows, missing={"durationMinutes", "isActive"})
    repo = MySQLBreakWindowRepository(_access(conn))

    windows = asyncio.run(repo.list_all())

    assert windows[0].is_active is True
    assert windows[0].duration_minutes == 0


def test_stale_open_record_blocks_next_day_clock_in(breaks_repo):
    # Yesterday's record was never closed: today's guard finds nothing, the unique open key rejects the insert.
    repo = MySQLAttendanceRepository(_access(SchemaConnection([], duplicate=True)))
    durations = WorkDurationCalculator(BreakWindowService(breaks_repo))
    service = AttendanceService(repo, durations, clock=lambda: datetime(2026, 2, 3, 8, 30))

    with pytest.raises(DuplicateClockInError):
        asyncio.run(service.clock_in(7))
    with pytest.raises(DuplicateClockInError):
        asyncio.run(service.admin_clock_in(7, datetime(2026, 1, 20, 9, 0), current_role=Role.ADMIN))
