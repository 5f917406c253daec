from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles; only ADMIN may run privileged attendance operations."""

    ADMIN = "admin"
    SUB_ADMIN = "sub_admin"
    SALES_OFFICE = "sales_office"
    FIELD_WORKER = "field_worker"


class DeviceType(str, Enum):
    """Device tag stored with every clock-in / clock-out."""

    PC = "pc"
    MOBILE = "mobile"
    AUTO_CLOSE = "auto-23:59"


class EditField(str, Enum):
    """Attendance fields tracked in the edit log."""

    CLOCK_IN = "clockIn"
    CLOCK_OUT = "clockOut"
