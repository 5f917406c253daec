from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

from src.workshop_attendance.workshop_attendance.broadcasts.model import SalesBroadcast
from src.workshop_attendance.workshop_attendance.broadcasts.service import BroadcastService
from src.workshop_attendance.workshop_attendance.scheduler.tasks import ExpirySweepTask

NOW = datetime(2026, 2, 2, 10, 0)


class InMemoryBroadcasts:
    def __init__(self, broadcasts, reads):
        self.broadcasts = {b.broadcast_id: b for b in broadcasts}
        self.reads = list(reads)  # (broadcast_id, user_id)
        self.calls: list[str] = []

    async def list_expired_ids(self, now):
        return [b.broadcast_id for b in self.broadcasts.values() if b.is_expired(now)]

    async def delete_reads_for(self, broadcast_ids):
        self.calls.append("reads")
        before = len(self.reads)
        self.reads = [r for r in self.reads if r[0] not in broadcast_ids]
        return before - len(self.reads)

    async def delete_broadcasts(self, broadcast_ids):
        self.calls.append("broadcasts")
        for i in broadcast_ids:
            self.broadcasts.pop(i, None)
        return len(broadcast_ids)


def _broadcast(broadcast_id, expires_at):
    return SalesBroadcast(
        broadcast_id=broadcast_id,
        vehicle_id=1,
        created_by=7,
        message="Customer visit on Friday",
        expires_at=expires_at,
    )


def test_expired_broadcast_is_deleted_with_its_reads():
    repo = InMemoryBroadcasts(
        [_broadcast(1, NOW - timedelta(minutes=1)), _broadcast(2, NOW + timedelta(days=3))],
        [(1, 10), (1, 11), (2, 10)],
    )
    task = ExpirySweepTask(BroadcastService(repo), clock=lambda: NOW)

    deleted = asyncio.run(task.run())

    assert deleted == 1
    assert list(repo.broadcasts) == [2]
    assert repo.reads == [(2, 10)]
    assert repo.calls == ["reads", "broadcasts"]


def test_expiry_is_strictly_before_now():
    repo = InMemoryBroadcasts([_broadcast(1, NOW)], [(1, 10)])

    assert asyncio.run(BroadcastService(repo).purge_expired(NOW)) == 0
    assert list(repo.broadcasts) == [1]
    assert repo.calls == []


def test_sweep_runs_at_start():
    assert ExpirySweepTask.run_at_start is True
    assert ExpirySweepTask.interval_seconds == 3600
