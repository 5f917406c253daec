from __future__ import annotations

from typing import Union

from ..core.enums import DeviceType, Role
from ..core.exceptions import ForbiddenError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_admin(current_role: Union[Role, str, None]) -> None:
    try:
        role = Role(current_role)
    except ValueError:
        role = None
    if role != Role.ADMIN:
        raise ForbiddenError("Administrator privileges required")


def require_device(value: Union[DeviceType, str, None], *, default: DeviceType = DeviceType.PC) -> DeviceType:
    """Normalize a user-supplied device tag; the auto-close tag is reserved."""
    if value is None or value == "":
        return default
    try:
        device = DeviceType(value)
    except ValueError:
        raise ValidationError(f"Unknown device type: {value!r}")
    if device == DeviceType.AUTO_CLOSE:
        raise ValidationError("Device type auto-23:59 is reserved for the scheduler")
    return device

