from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from src.workshop_attendance.workshop_attendance.attendance.duration import WorkDurationCalculator
from src.workshop_attendance.workshop_attendance.attendance.model import (
    AttendanceEditLog,
    AttendanceRecord,
    AttendanceUpdate,
)
from src.workshop_attendance.workshop_attendance.attendance.service import AttendanceService
from src.workshop_attendance.workshop_attendance.breaks.model import BreakWindow
from src.workshop_attendance.workshop_attendance.breaks.service import BreakWindowService
from src.workshop_attendance.workshop_attendance.core.enums import EditField

LUNCH = BreakWindow(name="Lunch", start_time="12:00", end_time="13:20", duration_minutes=80, break_id=1)


class InMemoryBreaks:
    def __init__(self, windows=None):
        self.windows: list[BreakWindow] = list(windows or [])

    async def list_all(self):
        return list(self.windows)

    async def get_by_id(self, break_id: int) -> Optional[BreakWindow]:
        return next((w for w in self.windows if w.break_id == break_id), None)

    async def has_any(self) -> bool:
        return bool(self.windows)

    async def create(self, window: BreakWindow) -> int:
        new_id = len(self.windows) + 1
        self.windows.append(replace(window, break_id=new_id))
        return new_id

    async def set_active(self, break_id: int, is_active: bool) -> bool:
        for i, w in enumerate(self.windows):
            if w.break_id == break_id:
                self.windows[i] = replace(w, is_active=is_active)
                return True
        return False

    async def delete(self, break_id: int) -> bool:
        before = len(self.windows)
        self.windows = [w for w in self.windows if w.break_id != break_id]
        return len(self.windows) < before


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self.edit_logs: list[AttendanceEditLog] = []
        self._id = 0

    def add(self, **kwargs) -> AttendanceRecord:
        self._id += 1
        rec = AttendanceRecord(attendance_id=self._id, **kwargs)
        self.records[self._id] = rec
        return rec

    async def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(int(attendance_id))

    async def find_first_for_user_between(self, user_id, start, end):
        items = [r for r in self.records.values() if r.user_id == user_id and start <= r.clock_in <= end]
        items.sort(key=lambda r: r.clock_in)
        return items[0] if items else None

    async def find_oldest_open_for_user(self, user_id):
        items = [r for r in self.records.values() if r.user_id == user_id and r.clock_out is None]
        items.sort(key=lambda r: r.clock_in)
        return items[0] if items else None

    async def list_open_between(self, start, end):
        items = [r for r in self.records.values() if r.clock_out is None and start <= r.clock_in <= end]
        return sorted(items, key=lambda r: r.clock_in)

    async def create_clock_in(self, *, user_id, clock_in, device) -> int:
        return self.add(user_id=user_id, clock_in=clock_in, clock_in_device=device).attendance_id

    async def close_record(self, *, attendance_id, clock_out, device, work_duration_minutes) -> bool:
        rec = self.records.get(attendance_id)
        if rec is None or rec.clock_out is not None:
            return False
        self.records[attendance_id] = replace(
            rec,
            clock_out=clock_out,
            clock_out_device=device,
            work_duration_minutes=work_duration_minutes,
        )
        return True

    async def apply_update(self, *, attendance_id, update: AttendanceUpdate, work_duration_minutes) -> bool:
        rec = self.records.get(attendance_id)
        if rec is None:
            return False
        self.records[attendance_id] = replace(
            rec,
            clock_in=update.clock_in or rec.clock_in,
            clock_out=update.clock_out or rec.clock_out,
            work_duration_minutes=(
                work_duration_minutes if work_duration_minutes is not None else rec.work_duration_minutes
            ),
        )
        return True

    async def insert_edit_log(self, *, attendance_id, editor_id, field_name, old_value, new_value) -> int:
        log = AttendanceEditLog(
            log_id=len(self.edit_logs) + 1,
            attendance_id=attendance_id,
            editor_id=editor_id,
            field_name=EditField(field_name),
            old_value=old_value,
            new_value=new_value,
        )
        self.edit_logs.append(log)
        return log.log_id

    async def list_edit_logs(self, attendance_id=None):
        return [l for l in self.edit_logs if attendance_id is None or l.attendance_id == attendance_id]

    async def delete(self, attendance_id) -> bool:
        return self.records.pop(int(attendance_id), None) is not None


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 0, 0)


@pytest.fixture
def breaks_repo() -> InMemoryBreaks:
    return InMemoryBreaks([LUNCH])


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def attendance_service(attendance_repo, breaks_repo, fixed_now) -> AttendanceService:
    durations = WorkDurationCalculator(BreakWindowService(breaks_repo))
    return AttendanceService(attendance_repo, durations, clock=lambda: fixed_now)
