from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..breaks.model import BreakWindow
from ..breaks.overlap import overlap_minutes
from ..breaks.service import BreakWindowService
from ..common.datetime_utils import elapsed_minutes


def compute_work_minutes(clock_in: datetime, clock_out: datetime, windows: Sequence[BreakWindow]) -> int:
    """Standard rule: (out - in) - break overlap, not below 0."""
    minutes = elapsed_minutes(clock_in, clock_out)
    minutes -= overlap_minutes(clock_in, clock_out, windows)
    return max(minutes, 0)


class WorkDurationCalculator:
    """Applies the standard rule against the currently active break windows."""

    def __init__(self, breaks: BreakWindowService):
        self._breaks = breaks

    async def active_windows(self) -> Sequence[BreakWindow]:
        return await self._breaks.list_active()

    async def work_minutes(
        self,
        clock_in: datetime,
        clock_out: datetime,
        *,
        windows: Optional[Sequence[BreakWindow]] = None,
    ) -> int:
        if windows is None:
            windows = await self.active_windows()
        return compute_work_minutes(clock_in, clock_out, windows)
