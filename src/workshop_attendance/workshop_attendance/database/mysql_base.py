from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector

from ..core.constants import ER_BAD_FIELD_ERROR, ER_DUP_ENTRY
from ..core.exceptions import InternalUnavailableError
from .connection import CONNECTIVITY_ERRORS, ResilientDataAccess

logger = logging.getLogger(__name__)


@asynccontextmanager
async def db_cursor(data_access: ResilientDataAccess, *, dictionary: bool = True):
    """Yield ``(conn, cur)`` on the shared connection; commit on success.

    Unknown-column and duplicate-entry errors reach the caller unchanged.
    Any other driver or socket failure drops the shared connection and is
    reported as ``InternalUnavailableError``.
    """

    conn = await data_access.acquire()
    if conn is None:
        raise InternalUnavailableError("Database is not available")

    cur = await conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        await conn.commit()
    except Exception as exc:
        try:
            await conn.rollback()
        except CONNECTIVITY_ERRORS as rollback_exc:
            logger.warning("[database] rollback failed: %s", rollback_exc)
        if is_unavailable_error(exc):
            logger.warning("[database] query failed, dropping connection: %s", exc)
            await data_access.reset()
            raise InternalUnavailableError("Database is not available") from exc
        raise
    finally:
        try:
            await cur.close()
        except CONNECTIVITY_ERRORS as exc:
            logger.debug("[database] error while closing cursor: %s", exc)


async def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = await cur.fetchone()
    return row if row else None


async def fetchall(cur) -> List[Dict[str, Any]]:
    rows = await cur.fetchall()
    return list(rows or [])


def is_duplicate_entry_error(exc: BaseException) -> bool:
    return isinstance(exc, mysql.connector.Error) and getattr(exc, "errno", None) == ER_DUP_ENTRY


def is_unavailable_error(exc: BaseException) -> bool:
    if isinstance(exc, mysql.connector.Error):
        return getattr(exc, "errno", None) not in (ER_BAD_FIELD_ERROR, ER_DUP_ENTRY)
    return isinstance(exc, CONNECTIVITY_ERRORS)


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for ``IN (...)``; callers must not pass an empty sequence."""
    return ", ".join(["%s"] * len(values))
