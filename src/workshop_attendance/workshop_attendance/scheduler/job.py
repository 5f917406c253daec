from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .tasks import MaintenanceTask

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]
Timer = Callable[[], float]


class RecurringJob:
    """Runs a task forever on its own asyncio task.

    Ticks are fixed-rate: each deadline is the previous one plus the
    interval, so oversleeping does not drift the schedule. A run that
    overshoots its slot moves the next deadline to now, with no catch-up
    burst. A failing run is logged and the job keeps ticking.
    """

    def __init__(self, task: MaintenanceTask, *, sleep: Sleeper = asyncio.sleep, timer: Optional[Timer] = None):
        self._task = task
        self._sleep = sleep
        self._timer = timer
        self._handle: Optional[asyncio.Task] = None
        self.runs = 0
        self.failures = 0

    @property
    def name(self) -> str:
        return self._task.name

    @property
    def running(self) -> bool:
        return self._handle is not None and not self._handle.done()

    async def run_once(self) -> Optional[int]:
        self.runs += 1
        try:
            return await self._task.run()
        except asyncio.CancelledError:
            raise
        except Exception:
            self.failures += 1
            logger.exception("[%s] run failed, will retry on next tick", self.name)
            return None

    async def _loop(self) -> None:
        now = self._timer or asyncio.get_running_loop().time
        deadline = now()
        if self._task.run_at_start:
            await self.run_once()
        while True:
            deadline = max(deadline + self._task.interval_seconds, now())
            await self._sleep(max(0.0, deadline - now()))
            await self.run_once()

    def start(self) -> None:
        if self.running:
            return
        self._handle = asyncio.get_running_loop().create_task(self._loop(), name=f"job:{self.name}")
        logger.info("[%s] scheduled every %ss", self.name, self._task.interval_seconds)

    async def stop(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        handle.cancel()
        try:
            await handle
        except asyncio.CancelledError:
            pass
