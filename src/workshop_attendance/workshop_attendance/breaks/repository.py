from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import BreakWindow


class BreakWindowRepository(Protocol):
    async def list_all(self) -> Sequence[BreakWindow]:
        raise NotImplementedError

    async def has_any(self) -> bool:
        raise NotImplementedError

    async def create(self, window: BreakWindow) -> int:
        raise NotImplementedError

    async def set_active(self, break_id: int, is_active: bool) -> bool:
        raise NotImplementedError

    async def delete(self, break_id: int) -> bool:
        raise NotImplementedError

    async def get_by_id(self, break_id: int) -> Optional[BreakWindow]:
        raise NotImplementedError
