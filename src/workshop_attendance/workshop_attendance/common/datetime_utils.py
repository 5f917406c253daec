from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Callable, Iterator

from ..core.exceptions import ValidationError

Clock = Callable[[], datetime]


def parse_hhmm(value: str) -> time:
    """Parse a wall-clock "HH:MM" string (24h)."""
    try:
        return datetime.strptime((value or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError(f"Invalid wall-clock time (HH:MM): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.max)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, both inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, floored."""
    return int((end - start).total_seconds() // 60)
