from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from .connection import is_missing_column_error
from .mysql_base import fetchall

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionTiers:
    """Ordered column projections for one table, widest first.

    Columns present in an earlier tier but absent from the one that finally
    succeeds are returned as None.
    """

    table: str
    tiers: Tuple[Tuple[str, ...], ...]

    @property
    def all_columns(self) -> Tuple[str, ...]:
        return self.tiers[0]

    def select_sql(self, tier: Sequence[str], tail: str = "") -> str:
        columns = ", ".join(f"`{c}`" for c in tier)
        return f"SELECT {columns} FROM `{self.table}` {tail}".strip()

    def fill(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {c: row.get(c) for c in self.all_columns}


async def select_with_fallback(
    cur,
    projection: ProjectionTiers,
    tail: str = "",
    params: Sequence[Any] = (),
) -> List[Dict[str, Any]]:
    """Run a SELECT on the widest projection the live schema supports.

    ``tail`` is everything after ``FROM <table>`` (WHERE / ORDER BY / LIMIT).
    Only unknown-column errors fall through to the next tier.
    """

    last_error: Exception | None = None
    for index, tier in enumerate(projection.tiers):
        try:
            await cur.execute(projection.select_sql(tier, tail), tuple(params))
            rows = await fetchall(cur)
        except Exception as exc:
            if not is_missing_column_error(exc):
                raise
            last_error = exc
            logger.info(
                "[database] %s: projection tier %d not supported by schema (%s), narrowing",
                projection.table,
                index,
                exc,
            )
            continue
        return [projection.fill(r) for r in rows]

    # every tier referenced a missing column
    raise last_error
