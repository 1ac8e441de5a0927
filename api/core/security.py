"""
Password hashing helpers (bcrypt).
"""

from __future__ import annotations

import bcrypt

from . import settings

# bcrypt only reads the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72

# bcrypt's accepted cost range.
MIN_ROUNDS = 4
MAX_ROUNDS = 31


class PasswordHashError(RuntimeError):
    pass


def hash_password(plain_password: str, *, rounds: int | None = None) -> str:
    """
    Hash `plain_password` with a fresh salt at the given work factor.

    `rounds` defaults to BCRYPT_ROUNDS (10).
    """
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise PasswordHashError("Password is empty.")
    if len(password) > MAX_PASSWORD_BYTES:
        raise PasswordHashError(f"Password is longer than {MAX_PASSWORD_BYTES} bytes.")

    cost = settings.bcrypt_rounds() if rounds is None else rounds
    if not MIN_ROUNDS <= cost <= MAX_ROUNDS:
        raise PasswordHashError(f"bcrypt rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}, got {cost}.")

    return bcrypt.hashpw(password, bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False
