from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from seed.schemas import User


def _user(password: str) -> User:
    return User(id=uuid.uuid4(), name="User", email="user@nextmail.com", password=password)


def test_password_over_72_utf8_bytes_is_rejected():
    with pytest.raises(ValidationError, match="72 bytes"):
        _user("é" * 37)


def test_password_of_exactly_72_bytes_is_accepted():
    assert _user("é" * 36).password == "é" * 36
    assert _user("a" * 72).password == "a" * 72


def test_empty_password_is_rejected():
    with pytest.raises(ValidationError):
        _user("")
