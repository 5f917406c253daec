from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.duration import WorkDurationCalculator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .breaks.mysql_break_repository import MySQLBreakWindowRepository
from .breaks.service import BreakWindowService
from .broadcasts.mysql_broadcast_repository import MySQLBroadcastRepository
from .broadcasts.service import BroadcastService
from .common.datetime_utils import Clock, now_local
from .core import constants
from .database.connection import DBConfig, ResilientDataAccess, parse_database_url
from .scheduler.service import RecurringJobScheduler
from .scheduler.tasks import AutoCloseTask, ExpirySweepTask


@dataclass(frozen=True)
class Container:
    db_config: Optional[DBConfig]
    data_access: ResilientDataAccess

    breaks_repo: MySQLBreakWindowRepository
    attendance_repo: MySQLAttendanceRepository
    broadcasts_repo: MySQLBroadcastRepository

    break_service: BreakWindowService
    attendance_service: AttendanceService
    broadcast_service: BroadcastService
    scheduler: RecurringJobScheduler


def build_container(
    *,
    database_url: Optional[str],
    clock: Clock = now_local,
    auto_close_interval: float = constants.AUTO_CLOSE_INTERVAL_SECONDS,
    expiry_sweep_interval: float = constants.EXPIRY_SWEEP_INTERVAL_SECONDS,
) -> Container:
    db_config = parse_database_url(database_url)
    data_access = ResilientDataAccess(db_config)

    breaks_repo = MySQLBreakWindowRepository(data_access)
    attendance_repo = MySQLAttendanceRepository(data_access)
    broadcasts_repo = MySQLBroadcastRepository(data_access)

    break_service = BreakWindowService(breaks_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        WorkDurationCalculator(break_service),
        clock=clock,
    )
    broadcast_service = BroadcastService(broadcasts_repo)

    scheduler = RecurringJobScheduler(
        [
            AutoCloseTask(attendance_service, clock=clock, interval_seconds=auto_close_interval),
            ExpirySweepTask(broadcast_service, clock=clock, interval_seconds=expiry_sweep_interval),
        ]
    )

    return Container(
        db_config=db_config,
        data_access=data_access,
        breaks_repo=breaks_repo,
        attendance_repo=attendance_repo,
        broadcasts_repo=broadcasts_repo,
        break_service=break_service,
        attendance_service=attendance_service,
        broadcast_service=broadcast_service,
        scheduler=scheduler,
    )
