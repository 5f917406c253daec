from __future__ import annotations

import logging
from datetime import datetime

from .repository import BroadcastRepository

logger = logging.getLogger(__name__)


class BroadcastService:
    def __init__(self, broadcasts: BroadcastRepository):
        self._broadcasts = broadcasts

    async def purge_expired(self, now: datetime) -> int:
        """Delete broadcasts whose expiry is strictly before ``now``.

        The store has no cascade: read receipts go first, then the parents.
        """

        expired = list(await self._broadcasts.list_expired_ids(now))
        if not expired:
            return 0

        await self._broadcasts.delete_reads_for(expired)
        deleted = await self._broadcasts.delete_broadcasts(expired)
        logger.info("[expiry-sweep] %d expired broadcasts deleted", deleted)
        return deleted
