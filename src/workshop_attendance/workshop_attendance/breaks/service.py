from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Sequence

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_admin, require_non_empty
from ..core import constants
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from .model import BreakWindow
from .repository import BreakWindowRepository

logger = logging.getLogger(__name__)


def window_length_minutes(start_time: str, end_time: str) -> int:
    start = datetime.combine(datetime.min.date(), parse_hhmm(start_time))
    end = datetime.combine(datetime.min.date(), parse_hhmm(end_time))
    if end < start:
        end += timedelta(days=1)
    return int((end - start).total_seconds() // 60)


class BreakWindowService:
    def __init__(self, breaks: BreakWindowRepository):
        self._breaks = breaks

    async def list_active(self) -> List[BreakWindow]:
        """Active windows usable for overlap computation.

        Rows with a malformed wall-clock time are skipped so a single bad
        admin entry cannot block clock-outs.
        """

        active: List[BreakWindow] = []
        for window in await self._breaks.list_all():
            if not window.is_active:
                continue
            try:
                parse_hhmm(window.start_time)
                parse_hhmm(window.end_time)
            except ValidationError as exc:
                logger.warning("Skipping break window %r: %s", window.name, exc)
                continue
            active.append(window)
        return active

    async def list_all(self) -> Sequence[BreakWindow]:
        return await self._breaks.list_all()

    async def ensure_defaults(self) -> bool:
        """Seed the default lunch break once, when no window exists yet."""

        if await self._breaks.has_any():
            logger.info("Break windows already initialized")
            return False

        await self._breaks.create(
            BreakWindow(
                name=constants.DEFAULT_BREAK_NAME,
                start_time=constants.DEFAULT_BREAK_START,
                end_time=constants.DEFAULT_BREAK_END,
                duration_minutes=constants.DEFAULT_BREAK_MINUTES,
                is_active=True,
            )
        )
        logger.info("Default break windows initialized")
        return True

    async def create_window(
        self,
        *,
        current_role: Role,
        name: str,
        start_time: str,
        end_time: str,
        is_active: bool = True,
    ) -> int:
        require_admin(current_role)
        name = require_non_empty(name, "name")
        if parse_hhmm(start_time) == parse_hhmm(end_time):
            raise ValidationError("Break window must not be empty")

        return await self._breaks.create(
            BreakWindow(
                name=name,
                start_time=start_time.strip(),
                end_time=end_time.strip(),
                duration_minutes=window_length_minutes(start_time, end_time),
                is_active=is_active,
            )
        )

    async def set_active(self, break_id: int, is_active: bool, *, current_role: Role) -> None:
        require_admin(current_role)
        if await self._breaks.get_by_id(int(break_id)) is None:
            raise NotFoundError("Break window not found")
        await self._breaks.set_active(int(break_id), bool(is_active))

    async def delete_window(self, break_id: int, *, current_role: Role) -> None:
        require_admin(current_role)
        if not await self._breaks.delete(int(break_id)):
            raise NotFoundError("Break window not found")
