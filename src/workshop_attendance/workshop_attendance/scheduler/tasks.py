from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime

from ..attendance.service import AttendanceService
from ..broadcasts.service import BroadcastService
from ..common.datetime_utils import Clock, now_local
from ..core import constants

logger = logging.getLogger(__name__)


class MaintenanceTask(ABC):
    """One idempotent unit of periodic work."""

    name: str = "task"
    interval_seconds: float = 60
    run_at_start: bool = False

    def __init__(self, *, clock: Clock = now_local):
        self._clock = clock

    @abstractmethod
    async def run(self) -> int:
        """Do one pass; return the number of rows affected."""
        raise NotImplementedError


def is_auto_close_window(now: datetime) -> bool:
    return now.hour == constants.AUTO_CLOSE_HOUR and now.minute >= constants.AUTO_CLOSE_MINUTE


class AutoCloseTask(MaintenanceTask):
    """Force-close today's open attendance records during the last minute of the day.

    Every tick outside 23:59 is a no-op. If the process is not running
    through that minute the day is skipped; later scans only look at their
    own day.
    """

    name = "auto-close"
    interval_seconds = constants.AUTO_CLOSE_INTERVAL_SECONDS

    def __init__(self, attendance: AttendanceService, *, clock: Clock = now_local, interval_seconds: float | None = None):
        super().__init__(clock=clock)
        self._attendance = attendance
        if interval_seconds is not None:
            self.interval_seconds = interval_seconds

    async def run(self) -> int:
        now = self._clock()
        if not is_auto_close_window(now):
            return 0
        return await self._attendance.auto_close_open_records(now)


class ExpirySweepTask(MaintenanceTask):
    name = "expiry-sweep"
    interval_seconds = constants.EXPIRY_SWEEP_INTERVAL_SECONDS
    run_at_start = True

    def __init__(self, broadcasts: BroadcastService, *, clock: Clock = now_local, interval_seconds: float | None = None):
        super().__init__(clock=clock)
        self._broadcasts = broadcasts
        if interval_seconds is not None:
            self.interval_seconds = interval_seconds

    async def run(self) -> int:
        return await self._broadcasts.purge_expired(self._clock())
