from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EditField
from .model import AttendanceEditLog, AttendanceRecord, AttendanceUpdate


class AttendanceRepository(Protocol):
    async def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    async def find_first_for_user_between(
        self, user_id: int, start: datetime, end: datetime
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    async def find_oldest_open_for_user(self, user_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    async def list_open_between(self, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    async def create_clock_in(self, *, user_id: int, clock_in: datetime, device: str) -> int:
        """Insert an open record; raises DuplicateClockInError if the store
        already holds an open record for the user."""

        raise NotImplementedError

    async def close_record(
        self,
        *,
        attendance_id: int,
        clock_out: datetime,
        device: str,
        work_duration_minutes: int,
    ) -> bool:
        """Close a record that is still open; False if it was closed meanwhile."""

        raise NotImplementedError

    async def apply_update(
        self,
        *,
        attendance_id: int,
        update: AttendanceUpdate,
        work_duration_minutes: Optional[int],
    ) -> bool:
        raise NotImplementedError

    async def insert_edit_log(
        self,
        *,
        attendance_id: int,
        editor_id: int,
        field_name: EditField,
        old_value: Optional[datetime],
        new_value: Optional[datetime],
    ) -> int:
        raise NotImplementedError

    async def list_edit_logs(self, attendance_id: Optional[int] = None) -> Sequence[AttendanceEditLog]:
        raise NotImplementedError

    async def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError
