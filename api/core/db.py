"""
Async database access helpers (raw SQL) using asyncpg.

Connections are scoped to one invocation: `connect()` opens a connection,
yields it, and always closes it, whether the caller succeeded or failed.
Nothing here holds a connection for the life of the process.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import settings

logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    # asyncpg rejects the libpq-only `sslmode` parameter that hosted Postgres URLs carry.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


class DatabaseConfigError(RuntimeError):
    pass


def database_url(override: str | None = None) -> str:
    url = (override or os.environ.get("DATABASE_URL", "")).strip()
    if not url:
        raise DatabaseConfigError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def _close(conn: asyncpg.Connection) -> None:
    try:
        await asyncio.wait_for(conn.close(), timeout=settings.close_timeout_s())
    except asyncio.TimeoutError:
        logger.warning("db_close_timed_out timeout_s=%s", settings.close_timeout_s())
        conn.terminate()


@asynccontextmanager
async def connect(dsn: str | None = None) -> AsyncIterator[asyncpg.Connection]:
    """
    Open one connection for the duration of the `async with` block.
    """
    conn = await asyncpg.connect(
        dsn=database_url(dsn),
        timeout=settings.connect_timeout_s(),
        command_timeout=settings.command_timeout_s(),
    )
    cancelled = False
    try:
        yield conn
    except asyncio.CancelledError:
        cancelled = True
        raise
    finally:
        if cancelled:
            # The block was cut off mid-operation; do not wait on the server.
            conn.terminate()
        else:
            await _close(conn)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(conn: asyncpg.Connection, sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await conn.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def execute(conn: asyncpg.Connection, sql: str, *args: Any) -> None:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
    """
    await conn.execute(sql, *args)


async def execute_many(conn: asyncpg.Connection, sql: str, records: list[tuple[Any, ...]]) -> None:
    """
    Run one statement for every record.

    asyncpg pipelines the whole batch over the connection instead of waiting
    for each row's round trip.
    """
    if not records:
        return None
    await conn.executemany(sql, records)
