from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import parse_hhmm


@dataclass(frozen=True)
class BreakWindow:
    """Recurring daily break, defined on the local wall clock.

    When ``end_time`` is earlier than ``start_time`` the window crosses
    midnight and ends on the following calendar day.
    """

    name: str
    start_time: str
    end_time: str
    duration_minutes: int = 0
    is_active: bool = True
    break_id: Optional[int] = None

    @property
    def start(self) -> time:
        return parse_hhmm(self.start_time)

    @property
    def end(self) -> time:
        return parse_hhmm(self.end_time)

    @property
    def crosses_midnight(self) -> bool:
        return self.end < self.start
