from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from ..common.datetime_utils import iter_days
from .model import BreakWindow


def overlap_minutes(clock_in: datetime, clock_out: datetime, windows: Iterable[BreakWindow]) -> int:
    """Minutes of [clock_in, clock_out] that fall inside active break windows.

    Every window is materialized on each local calendar day the interval
    touches and intersected on its own; overlapping windows are not merged,
    so they must be configured disjoint.
    """

    if clock_out <= clock_in:
        return 0

    active = [w for w in windows if w.is_active]
    total = 0

    for day in iter_days(clock_in.date(), clock_out.date()):
        for window in active:
            window_start = datetime.combine(day, window.start)
            window_end = datetime.combine(day, window.end)
            if window.crosses_midnight:
                window_end += timedelta(days=1)

            start = max(clock_in, window_start)
            end = min(clock_out, window_end)
            if start < end:
                total += int((end - start).total_seconds() // 60)

    return total
