from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from mysql.connector import aio

from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


async def ensure_database_exists(config: DBConfig) -> None:
    kwargs = config.as_kwargs()
    kwargs.pop("database")
    conn = await aio.connect(**kwargs)
    try:
        cur = await conn.cursor()
        await cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        await conn.commit()
        await cur.close()
    finally:
        await conn.close()


async def apply_schema(config: DBConfig, *, schema_path: Optional[Path] = None) -> int:
    """Create missing tables; idempotent (CREATE TABLE IF NOT EXISTS).

    Uses its own connection: the shared one refuses to come up while the
    probed tables do not exist yet.
    """

    await ensure_database_exists(config)

    sql = _strip_create_db_and_use(Path(schema_path or SCHEMA_PATH).read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))

    conn = await aio.connect(**config.as_kwargs())
    try:
        cur = await conn.cursor()
        for stmt in statements:
            await cur.execute(stmt)
        await conn.commit()
        await cur.close()
    finally:
        await conn.close()

    logger.info("[database] schema ready (%d statements)", len(statements))
    return len(statements)
