"""
Seeding API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from . import schemas, service

router = APIRouter()


def _error_response(outcome: service.Outcome) -> JSONResponse:
    body = schemas.ErrorResponse(error=outcome.error or service.UNEXPECTED_ERROR_MESSAGE)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump())


@router.get(
    "/seed",
    response_model=schemas.SeedResponse,
    responses={500: {"model": schemas.ErrorResponse}},
)
async def seed() -> schemas.SeedResponse | JSONResponse:
    """
    Create the dashboard tables if needed and load the placeholder data.

    Safe to call again: users, customers and revenue rows are skipped when
    present. Invoices have no stable key and are added again on every call.
    """
    outcome = await service.seed_database()
    if not outcome.ok:
        return _error_response(outcome)
    return schemas.SeedResponse(message=service.SUCCESS_MESSAGE)


@router.get(
    "/seed/status",
    response_model=schemas.StatusResponse,
    responses={500: {"model": schemas.ErrorResponse}},
)
async def seed_status() -> schemas.StatusResponse | JSONResponse:
    outcome = await service.table_status()
    if not outcome.ok:
        return _error_response(outcome)
    return schemas.StatusResponse(
        tables={name: schemas.TableStatus(**info) for name, info in outcome.tables.items()},
    )
