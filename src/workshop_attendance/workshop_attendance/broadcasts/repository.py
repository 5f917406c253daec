from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence


class BroadcastRepository(Protocol):
    async def list_expired_ids(self, now: datetime) -> Sequence[int]:
        raise NotImplementedError

    async def delete_reads_for(self, broadcast_ids: Sequence[int]) -> int:
        raise NotImplementedError

    async def delete_broadcasts(self, broadcast_ids: Sequence[int]) -> int:
        raise NotImplementedError
