"""
Seeding business logic.

One run = one connection and one transaction:

    begin -> users -> customers -> invoices -> revenue -> commit | rollback

Each step ensures its table exists, prepares its rows concurrently (bounded by
SEED_MAX_CONCURRENCY) and sends them as one insert-or-skip batch. The whole
run, connect included, sits under a SEED_TIMEOUT_S deadline.

Callers never see an exception: every run ends in an outcome value that is
either a success, a failure with a message, or an opaque failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

import asyncpg

from core import db, security, settings

from . import placeholder_data, repository
from .schemas import Customer, Invoice, Revenue, User

T = TypeVar("T")
R = TypeVar("R")

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"
SUCCESS_MESSAGE = "Database seeded successfully"

logger = logging.getLogger(__name__)


class SeedError(RuntimeError):
    pass


@dataclass(frozen=True)
class Outcome:
    ok: bool
    error: str | None = None
    # True when the failure carried no message worth returning.
    unexpected: bool = False


@dataclass(frozen=True)
class SeedOutcome(Outcome):
    counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class StatusOutcome(Outcome):
    tables: dict[str, dict[str, Any]] = field(default_factory=dict)


def _failure(exc: Exception, *, event: str) -> dict[str, Any]:
    """
    Log `exc` and turn it into Outcome fields.

    Any exception with a message is reported with that message; one without
    a message becomes the opaque UNEXPECTED_ERROR_MESSAGE.
    """
    message = str(exc).strip()
    if message:
        logger.error("%s error_type=%s error=%s", event, exc.__class__.__name__, message)
        return {"ok": False, "error": message}

    logger.error("%s error_type=unexpected", event, exc_info=exc)
    return {"ok": False, "error": UNEXPECTED_ERROR_MESSAGE, "unexpected": True}


def _deadline_failure(timeout_s: float, *, event: str) -> dict[str, Any]:
    message = f"Timed out after {timeout_s:g}s."
    logger.error("%s error_type=deadline error=%s", event, message)
    return {"ok": False, "error": message}


async def _with_deadline(awaitable: Awaitable[R], timeout_s: float) -> R:
    """
    Await `awaitable` under a `timeout_s` deadline.

    Timeouts raised inside (asyncpg's connect or command timeouts) come out as
    SeedError, so a TimeoutError from here always means the deadline expired.
    """

    async def guarded() -> R:
        try:
            return await awaitable
        except asyncio.TimeoutError as exc:
            raise SeedError(str(exc).strip() or "Database operation timed out.") from exc

    return await asyncio.wait_for(guarded(), timeout=timeout_s)


async def gather_bounded(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    *,
    limit: int,
) -> list[R]:
    """
    Run `fn` over `items` with at most `limit` calls in flight.

    Results keep the input order. Every call settles before the first failure
    (if any) is raised.
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def run(item: T) -> R:
        async with semaphore:
            return await fn(item)

    results = await asyncio.gather(*(run(item) for item in items), return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


async def ensure_tables(conn: asyncpg.Connection) -> None:
    """
    Create the uuid extension and all four tables when missing. Safe to repeat.
    """
    await repository.ensure_uuid_extension(conn)
    await repository.create_users_table(conn)
    await repository.create_customers_table(conn)
    await repository.create_invoices_table(conn)
    await repository.create_revenue_table(conn)


async def seed_users(
    conn: asyncpg.Connection,
    users: Sequence[User] = placeholder_data.USERS,
    *,
    limit: int,
) -> int:
    await repository.ensure_uuid_extension(conn)
    await repository.create_users_table(conn)

    rounds = settings.bcrypt_rounds()

    async def to_record(user: User) -> tuple[Any, ...]:
        # bcrypt is CPU-bound; keep it off the event loop.
        password_hash = await asyncio.to_thread(security.hash_password, user.password, rounds=rounds)
        return (user.id, user.name, user.email, password_hash)

    records = await gather_bounded(users, to_record, limit=limit)
    await repository.insert_users(conn, records)
    return len(records)


async def seed_customers(
    conn: asyncpg.Connection,
    customers: Sequence[Customer] = placeholder_data.CUSTOMERS,
) -> int:
    await repository.ensure_uuid_extension(conn)
    await repository.create_customers_table(conn)

    records = [(c.id, c.name, c.email, c.image_url) for c in customers]
    await repository.insert_customers(conn, records)
    return len(records)


async def seed_invoices(
    conn: asyncpg.Connection,
    invoices: Sequence[Invoice] = placeholder_data.INVOICES,
) -> int:
    await repository.ensure_uuid_extension(conn)
    await repository.create_invoices_table(conn)

    records = [(i.customer_id, i.amount, i.status, i.date) for i in invoices]
    await repository.insert_invoices(conn, records)
    return len(records)


async def seed_revenue(
    conn: asyncpg.Connection,
    revenue: Sequence[Revenue] = placeholder_data.REVENUE,
) -> int:
    await repository.create_revenue_table(conn)

    records = [(r.month, r.revenue) for r in revenue]
    await repository.insert_revenue(conn, records)
    return len(records)


async def _rollback(transaction: Any) -> None:
    # Bounded; db.connect terminates a connection that is still hung.
    try:
        await asyncio.wait_for(transaction.rollback(), timeout=settings.rollback_timeout_s())
    except Exception:
        # The original failure is what the caller gets; this one is only logged.
        logger.exception("seed_rollback_failed")


async def _seed_in_transaction(conn: asyncpg.Connection, *, limit: int) -> dict[str, int]:
    transaction = conn.transaction()
    await transaction.start()
    try:
        steps: list[tuple[str, Callable[[], Awaitable[int]]]] = [
            ("users", lambda: seed_users(conn, limit=limit)),
            ("customers", lambda: seed_customers(conn)),
            ("invoices", lambda: seed_invoices(conn)),
            ("revenue", lambda: seed_revenue(conn)),
        ]
        for table, step in steps:
            offered = await step()
            logger.info("seed_step_complete table=%s offered=%s", table, offered)

        counts = {table: await repository.count_rows(conn, table) for table in repository.SEED_TABLES}
        await transaction.commit()
    except BaseException:
        await _rollback(transaction)
        raise
    return counts


async def _run(dsn: str | None, *, limit: int) -> dict[str, int]:
    async with db.connect(dsn) as conn:
        return await _seed_in_transaction(conn, limit=limit)


async def seed_database(
    *,
    dsn: str | None = None,
    timeout_s: float | None = None,
    max_concurrency: int | None = None,
) -> SeedOutcome:
    """
    Create the tables if needed and load the placeholder dataset, all or nothing.
    """
    timeout = settings.seed_timeout_s() if timeout_s is None else timeout_s
    limit = settings.seed_max_concurrency() if max_concurrency is None else max_concurrency

    try:
        counts = await _with_deadline(_run(dsn, limit=limit), timeout)
    except asyncio.TimeoutError:
        return SeedOutcome(**_deadline_failure(timeout, event="seed_failed"))
    except Exception as exc:
        return SeedOutcome(**_failure(exc, event="seed_failed"))

    logger.info(
        "seed_complete users=%s customers=%s invoices=%s revenue=%s",
        counts.get("users"),
        counts.get("customers"),
        counts.get("invoices"),
        counts.get("revenue"),
    )
    return SeedOutcome(ok=True, counts=counts)


async def _read_status(dsn: str | None) -> dict[str, dict[str, Any]]:
    tables: dict[str, dict[str, Any]] = {}
    async with db.connect(dsn) as conn:
        for table in repository.SEED_TABLES:
            exists = await repository.table_exists(conn, table)
            rows = await repository.count_rows(conn, table) if exists else 0
            tables[table] = {"exists": exists, "rows": rows}
    return tables


async def table_status(*, dsn: str | None = None, timeout_s: float | None = None) -> StatusOutcome:
    """
    Report whether each seeded table exists and how many rows it holds.
    """
    timeout = settings.seed_timeout_s() if timeout_s is None else timeout_s
    try:
        tables = await _with_deadline(_read_status(dsn), timeout)
    except asyncio.TimeoutError:
        return StatusOutcome(**_deadline_failure(timeout, event="seed_status_failed"))
    except Exception as exc:
        return StatusOutcome(**_failure(exc, event="seed_status_failed"))
    return StatusOutcome(ok=True, tables=tables)
