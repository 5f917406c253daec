from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SalesBroadcast:
    """Time-bounded announcement from the sales office; read receipts hang off it."""

    broadcast_id: int
    vehicle_id: int
    created_by: int
    message: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now
