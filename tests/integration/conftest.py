from __future__ import annotations

import asyncpg
import pytest
from testcontainers.postgres import PostgresContainer


@pytest.fixture(scope="session")
def postgres_url():
    with PostgresContainer("postgres:16-alpine", driver=None) as pg:
        # Normalize in case the container reports a SQLAlchemy-style URL.
        yield pg.get_connection_url().replace("postgresql+psycopg2://", "postgresql://")


@pytest.fixture()
async def database_url(postgres_url: str, monkeypatch: pytest.MonkeyPatch) -> str:
    """Empty database per test: drop whatever a previous test seeded."""
    conn = await asyncpg.connect(postgres_url)
    try:
        await conn.execute("DROP TABLE IF EXISTS users, customers, invoices, revenue")
    finally:
        await conn.close()

    monkeypatch.setenv("DATABASE_URL", postgres_url)
    return postgres_url


@pytest.fixture()
async def pg(database_url: str):
    conn = await asyncpg.connect(database_url)
    try:
        yield conn
    finally:
        await conn.close()
