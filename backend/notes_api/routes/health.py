"""
Notes API: Health and Diagnostic Routes
=======================================

What:  GET /health for liveness probes and GET /db-check for verifying that
       the database answers a trivial query through the pool.

GET /health never touches the database, so it stays green while the
database is down; GET /db-check is the one to watch for storage reachability.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from notes_api.database import Database, driver_error_details, get_database
from notes_api.exceptions import DatabaseUnavailableError
from notes_api.schemas.system import (
    DbCheckResponse,
    DiagnosticErrorResponse,
    HealthResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service liveness check",
)
async def health_check() -> HealthResponse:
    """Report that the process is serving, with the current UTC time."""
    return HealthResponse(ok=True, time=datetime.now(timezone.utc))


@router.get(
    "/db-check",
    response_model=DbCheckResponse,
    responses={
        500: {"description": "Database unreachable", "model": DiagnosticErrorResponse},
    },
    summary="Database reachability check",
    description="Leases a pooled connection and runs SELECT 1.",
)
async def db_check(db: Database = Depends(get_database)) -> DbCheckResponse:
    """
    Round-trip `SELECT 1 AS ok` through the pool.

    Raises:
        DatabaseUnavailableError: rendered with the driver message and code.
    """
    try:
        row = await db.ping()
    except Exception as e:
        detail, code = driver_error_details(e)
        logger.warning("DB check failed: %s (code=%s)", detail, code)
        raise DatabaseUnavailableError(detail=detail, code=code) from e

    return DbCheckResponse(db=row)
