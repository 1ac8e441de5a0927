"""
Seed record models and HTTP response bodies.
"""

from __future__ import annotations

import datetime as dt
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from core.security import MAX_PASSWORD_BYTES


class User(BaseModel):
    id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    # Plaintext; only its bcrypt hash is ever written.
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes in UTF-8")
        return value


class Customer(BaseModel):
    id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    image_url: str = Field(..., min_length=1, max_length=255)


class Invoice(BaseModel):
    customer_id: UUID
    amount: int = Field(..., ge=0)  # cents
    status: Literal["pending", "paid"]
    date: dt.date


class Revenue(BaseModel):
    month: str = Field(..., min_length=1, max_length=4)
    revenue: int = Field(..., ge=0)


class SeedResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class TableStatus(BaseModel):
    exists: bool
    rows: int


class StatusResponse(BaseModel):
    tables: dict[str, TableStatus]
