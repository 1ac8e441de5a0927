"""
Environment-backed settings.

Every value is read at call time so tests (and long-running processes) pick up
changes to the environment without re-importing modules.
"""

from __future__ import annotations

import os


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def cors_origins() -> list[str]:
    # Next.js dev server defaults.
    return env_list("CORS_ORIGINS", ["http://localhost:3000", "http://127.0.0.1:3000"])


def connect_timeout_s() -> float:
    return env_float("DB_CONNECT_TIMEOUT_S", 10.0)


def command_timeout_s() -> float:
    return env_float("DB_COMMAND_TIMEOUT_S", 30.0)


def bcrypt_rounds() -> int:
    return env_int("BCRYPT_ROUNDS", 10)


def rollback_timeout_s() -> float:
    timeout = env_float("DB_ROLLBACK_TIMEOUT_S", 5.0)
    return timeout if timeout > 0 else 5.0


def close_timeout_s() -> float:
    timeout = env_float("DB_CLOSE_TIMEOUT_S", 5.0)
    return timeout if timeout > 0 else 5.0


def seed_timeout_s() -> float:
    timeout = env_float("SEED_TIMEOUT_S", 60.0)
    return timeout if timeout > 0 else 60.0


def seed_max_concurrency() -> int:
    limit = env_int("SEED_MAX_CONCURRENCY", 8)
    return limit if limit > 0 else 8
