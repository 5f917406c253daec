from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EditField


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one clock-in / clock-out pair.

    ``clock_out`` None means the record is still open; ``work_duration_minutes``
    is only set once the record is closed.
    """

    attendance_id: int
    user_id: int
    clock_in: datetime
    clock_out: Optional[datetime] = None
    work_duration_minutes: Optional[int] = None
    clock_in_device: Optional[str] = None
    clock_out_device: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out is None


@dataclass(frozen=True)
class AttendanceEditLog:
    """Immutable audit row, one per changed timestamp field."""

    log_id: int
    attendance_id: int
    editor_id: int
    field_name: EditField
    old_value: Optional[datetime]
    new_value: Optional[datetime]
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceUpdate:
    """Administrative edit; only the fields that are not None are applied."""

    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return self.clock_in is None and self.clock_out is None


@dataclass(frozen=True)
class StaffAttendanceRow:
    """Read-model: a user's attendance (if any) on one day."""

    user_id: int
    record: Optional[AttendanceRecord]
