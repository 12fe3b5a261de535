"""Health & Readiness Checks — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /api/v1/health/ always returns 200 if process is up (liveness)
    - GET /api/v1/health/ready returns 503 if the database is unreachable or
      the ledger tables are missing (migrations not applied)
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import calftrack.models  # noqa: F401
from calftrack.db.base import Base
from calftrack.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_VERSION = "1.0.0"


def _not_ready(reason: str, **detail) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason, **detail},
    )


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness check. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "calftrack-api",
        "version": SERVICE_VERSION,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness check: database connectivity, then schema presence."""
    manager = database.db_manager
    if not manager or not await manager.health_check():
        return _not_ready("database_unavailable")

    missing = await manager.missing_tables(Base.metadata.tables)
    if missing:
        logger.warning(f"Readiness: missing tables {missing}")
        return _not_ready("schema_missing", missing_tables=missing)
    return {
        "status": "ready",
        "checks": {"database": "healthy", "schema": "current"},
    }
