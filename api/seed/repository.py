"""
Seeding persistence.
This module is where all seed-related SQL lives.

Every function takes the caller's connection so the whole run shares one
transaction. DDL is "create if absent" only; existing tables are never altered.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db

# Seeding order; later tables conceptually reference earlier ones.
SEED_TABLES: tuple[str, ...] = ("users", "customers", "invoices", "revenue")


async def ensure_uuid_extension(conn: asyncpg.Connection) -> None:
    await db.execute(conn, 'CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')


async def create_users_table(conn: asyncpg.Connection) -> None:
    await db.execute(
        conn,
        """
        CREATE TABLE IF NOT EXISTS users (
          id UUID DEFAULT uuid_generate_v4() PRIMARY KEY,
          name VARCHAR(255) NOT NULL,
          email TEXT NOT NULL UNIQUE,
          password TEXT NOT NULL
        )
        """,
    )


async def create_customers_table(conn: asyncpg.Connection) -> None:
    await db.execute(
        conn,
        """
        CREATE TABLE IF NOT EXISTS customers (
          id UUID DEFAULT uuid_generate_v4() PRIMARY KEY,
          name VARCHAR(255) NOT NULL,
          email VARCHAR(255) NOT NULL,
          image_url VARCHAR(255) NOT NULL
        )
        """,
    )


async def create_invoices_table(conn: asyncpg.Connection) -> None:
    await db.execute(
        conn,
        """
        CREATE TABLE IF NOT EXISTS invoices (
          id UUID DEFAULT uuid_generate_v4() PRIMARY KEY,
          customer_id UUID NOT NULL,
          amount INT NOT NULL,
          status VARCHAR(255) NOT NULL,
          date DATE NOT NULL
        )
        """,
    )


async def create_revenue_table(conn: asyncpg.Connection) -> None:
    await db.execute(
        conn,
        """
        CREATE TABLE IF NOT EXISTS revenue (
          month VARCHAR(4) NOT NULL UNIQUE,
          revenue INT NOT NULL
        )
        """,
    )


async def insert_users(conn: asyncpg.Connection, records: list[tuple[Any, ...]]) -> None:
    """
    `records` is [(id, name, email, password_hash), ...]

    No conflict target: a row that collides on either id or email is skipped.
    """
    await db.execute_many(
        conn,
        """
        INSERT INTO users (id, name, email, password)
        VALUES ($1, $2, $3, $4)
        ON CONFLICT DO NOTHING
        """,
        records,
    )


async def insert_customers(conn: asyncpg.Connection, records: list[tuple[Any, ...]]) -> None:
    """
    `records` is [(id, name, email, image_url), ...]
    """
    await db.execute_many(
        conn,
        """
        INSERT INTO customers (id, name, email, image_url)
        VALUES ($1, $2, $3, $4)
        ON CONFLICT (id) DO NOTHING
        """,
        records,
    )


async def insert_invoices(conn: asyncpg.Connection, records: list[tuple[Any, ...]]) -> None:
    """
    `records` is [(customer_id, amount, status, date), ...]

    The id is generated per insert, so the conflict clause never fires and a
    rerun adds the same invoices again.
    """
    await db.execute_many(
        conn,
        """
        INSERT INTO invoices (customer_id, amount, status, date)
        VALUES ($1, $2, $3, $4)
        ON CONFLICT (id) DO NOTHING
        """,
        records,
    )


async def insert_revenue(conn: asyncpg.Connection, records: list[tuple[Any, ...]]) -> None:
    """
    `records` is [(month, revenue), ...]
    """
    await db.execute_many(
        conn,
        """
        INSERT INTO revenue (month, revenue)
        VALUES ($1, $2)
        ON CONFLICT (month) DO NOTHING
        """,
        records,
    )


def _checked_table(table: str) -> str:
    if table not in SEED_TABLES:
        raise ValueError(f"Unknown seed table: {table!r}")
    return table


async def table_exists(conn: asyncpg.Connection, table: str) -> bool:
    row = await db.fetch_one(
        conn,
        "SELECT to_regclass($1::text) IS NOT NULL AS ok",
        f"public.{_checked_table(table)}",
    )
    return bool((row or {}).get("ok", False))


async def count_rows(conn: asyncpg.Connection, table: str) -> int:
    # Table names cannot be bound as parameters; only known names get here.
    row = await db.fetch_one(conn, f"SELECT count(*) AS n FROM {_checked_table(table)}")
    return int((row or {}).get("n", 0))
