from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from .job import RecurringJob, Sleeper, Timer
from .tasks import MaintenanceTask

logger = logging.getLogger(__name__)


class RecurringJobScheduler:
    """Process-wide owner of the maintenance jobs; each job ticks independently."""

    def __init__(
        self,
        tasks: Sequence[MaintenanceTask],
        *,
        sleep: Sleeper = asyncio.sleep,
        timer: Optional[Timer] = None,
    ):
        self._jobs: List[RecurringJob] = [RecurringJob(t, sleep=sleep, timer=timer) for t in tasks]

    @property
    def jobs(self) -> Sequence[RecurringJob]:
        return tuple(self._jobs)

    def start(self) -> None:
        for job in self._jobs:
            job.start()
        logger.info("Scheduler started with %d jobs", len(self._jobs))

    async def stop(self) -> None:
        for job in self._jobs:
            await job.stop()
        logger.info("Scheduler stopped")
