from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time
from typing import Iterable, List, Optional, Sequence

from ..common.datetime_utils import Clock, end_of_day, now_local, start_of_day
from ..common.validators import require_admin, require_device
from ..core.enums import DeviceType, EditField, Role
from ..core.exceptions import (
    DuplicateClockInError,
    NoOpenRecordError,
    NotFoundError,
    ValidationError,
)
from .duration import WorkDurationCalculator
from .model import AttendanceEditLog, AttendanceRecord, AttendanceUpdate, StaffAttendanceRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

AUTO_CLOSE_TIME = time(23, 59, 59)


class AttendanceService:
    """Clock-in / clock-out state machine and worked-time accounting.

    A record is open until ``clock_out`` is set; closing computes
    ``max(0, elapsed - break overlap)``. Only administrative edits touch a
    closed record, and they recompute the duration in place.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        durations: WorkDurationCalculator,
        *,
        clock: Clock = now_local,
    ):
        self._attendance = attendance
        self._durations = durations
        self._clock = clock

    async def _ensure_not_clocked_in(self, user_id: int, day: datetime) -> None:
        existing = await self._attendance.find_first_for_user_between(user_id, start_of_day(day), end_of_day(day))
        if existing:
            raise DuplicateClockInError("Already clocked in on this day")

    async def _close(self, record: AttendanceRecord, clock_out: datetime, device: DeviceType) -> int:
        minutes = await self._durations.work_minutes(record.clock_in, clock_out)
        closed = await self._attendance.close_record(
            attendance_id=record.attendance_id,
            clock_out=clock_out,
            device=device.value,
            work_duration_minutes=minutes,
        )
        if not closed:
            raise NoOpenRecordError("Attendance record was already closed")
        return minutes

    async def clock_in(
        self,
        user_id: int,
        device: DeviceType | str | None = DeviceType.PC,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        device = require_device(device)

        # Check-then-act: the store's unique open-record index backs this up.
        await self._ensure_not_clocked_in(user_id, now)
        attendance_id = await self._attendance.create_clock_in(user_id=user_id, clock_in=now, device=device.value)

        logger.info("User %s clocked in at %s (%s)", user_id, now.isoformat(), device.value)
        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            clock_in=now,
            clock_in_device=device.value,
        )

    async def clock_out(
        self,
        user_id: int,
        device: DeviceType | str | None = DeviceType.PC,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        device = require_device(device)

        record = await self._attendance.find_oldest_open_for_user(user_id)
        if not record:
            raise NoOpenRecordError("No open attendance record")

        minutes = await self._close(record, now, device)
        logger.info("User %s clocked out at %s, worked %d min", user_id, now.isoformat(), minutes)
        return replace(record, clock_out=now, work_duration_minutes=minutes, clock_out_device=device.value)

    async def admin_clock_in(
        self,
        user_id: int,
        clock_in_time: datetime,
        device: DeviceType | str | None = DeviceType.PC,
        *,
        current_role: Role,
    ) -> AttendanceRecord:
        require_admin(current_role)
        device = require_device(device)

        await self._ensure_not_clocked_in(user_id, clock_in_time)
        attendance_id = await self._attendance.create_clock_in(
            user_id=user_id, clock_in=clock_in_time, device=device.value
        )

        logger.info("Admin clock-in for user %s at %s", user_id, clock_in_time.isoformat())
        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            clock_in=clock_in_time,
            clock_in_device=device.value,
        )

    async def admin_clock_out(
        self,
        user_id: int,
        clock_out_time: datetime,
        *,
        current_role: Role,
    ) -> AttendanceRecord:
        require_admin(current_role)

        record = await self._attendance.find_oldest_open_for_user(user_id)
        if not record:
            raise NoOpenRecordError("No open attendance record")

        minutes = await self._close(record, clock_out_time, DeviceType.PC)
        logger.info("Admin clock-out for user %s at %s, worked %d min", user_id, clock_out_time.isoformat(), minutes)
        return replace(
            record,
            clock_out=clock_out_time,
            work_duration_minutes=minutes,
            clock_out_device=DeviceType.PC.value,
        )

    async def update_attendance(
        self,
        attendance_id: int,
        update: AttendanceUpdate,
        *,
        editor_id: int,
        current_role: Role,
    ) -> AttendanceRecord:
        require_admin(current_role)
        if update.is_empty:
            raise ValidationError("Nothing to update")

        record = await self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")

        clock_in = update.clock_in or record.clock_in
        clock_out = update.clock_out or record.clock_out

        minutes: Optional[int] = None
        if clock_out is not None:
            # A reversed pair is stored with a zero duration.
            minutes = await self._durations.work_minutes(clock_in, clock_out)

        await self._attendance.apply_update(
            attendance_id=record.attendance_id,
            update=update,
            work_duration_minutes=minutes,
        )

        # Separate writes: a failure here leaves the update without its audit rows.
        if update.clock_in is not None:
            await self._attendance.insert_edit_log(
                attendance_id=record.attendance_id,
                editor_id=editor_id,
                field_name=EditField.CLOCK_IN,
                old_value=record.clock_in,
                new_value=update.clock_in,
            )
        if update.clock_out is not None:
            await self._attendance.insert_edit_log(
                attendance_id=record.attendance_id,
                editor_id=editor_id,
                field_name=EditField.CLOCK_OUT,
                old_value=record.clock_out,
                new_value=update.clock_out,
            )

        logger.info("Attendance %s edited by user %s", record.attendance_id, editor_id)
        return replace(
            record,
            clock_in=clock_in,
            clock_out=clock_out,
            work_duration_minutes=minutes if minutes is not None else record.work_duration_minutes,
        )

    async def auto_close_open_records(self, now: Optional[datetime] = None) -> int:
        """Close every record opened today and still open at 23:59:59 of its clock-in date.

        Only records still matching ``clockOut IS NULL`` are touched, so
        repeated runs in the same minute do nothing more.
        """

        now = now or self._clock()
        records = await self._attendance.list_open_between(start_of_day(now), end_of_day(now))
        if not records:
            return 0

        windows = await self._durations.active_windows()
        closed = 0
        for record in records:
            clock_out = datetime.combine(record.clock_in.date(), AUTO_CLOSE_TIME)
            minutes = await self._durations.work_minutes(record.clock_in, clock_out, windows=windows)
            if await self._attendance.close_record(
                attendance_id=record.attendance_id,
                clock_out=clock_out,
                device=DeviceType.AUTO_CLOSE.value,
                work_duration_minutes=minutes,
            ):
                closed += 1

        if closed:
            logger.info("[auto-close] %d open attendance records closed at 23:59", closed)
        return closed

    async def _with_fresh_duration(self, record: Optional[AttendanceRecord], windows=None) -> Optional[AttendanceRecord]:
        if record is None or record.clock_out is None:
            return record
        minutes = await self._durations.work_minutes(record.clock_in, record.clock_out, windows=windows)
        return replace(record, work_duration_minutes=minutes)

    async def get_today_status(self, user_id: int, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        now = now or self._clock()
        record = await self._attendance.find_first_for_user_between(user_id, start_of_day(now), end_of_day(now))
        return await self._with_fresh_duration(record)

    async def list_staff_for_date(self, day: date, user_ids: Iterable[int]) -> List[StaffAttendanceRow]:
        start = datetime.combine(day, time.min)
        end = datetime.combine(day, time.max)
        windows = await self._durations.active_windows()

        rows: List[StaffAttendanceRow] = []
        for user_id in user_ids:
            record = await self._attendance.find_first_for_user_between(int(user_id), start, end)
            rows.append(StaffAttendanceRow(user_id=int(user_id), record=await self._with_fresh_duration(record, windows)))
        return rows

    async def delete_attendance(self, attendance_id: int, *, current_role: Role) -> None:
        require_admin(current_role)
        if not await self._attendance.delete(attendance_id):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance %s deleted", attendance_id)

    async def list_edit_logs(
        self,
        attendance_id: Optional[int] = None,
        *,
        current_role: Role,
    ) -> Sequence[AttendanceEditLog]:
        require_admin(current_role)
        return await self._attendance.list_edit_logs(attendance_id)
