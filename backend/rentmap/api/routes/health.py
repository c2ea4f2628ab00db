"""Health & Readiness Probes — liveness and Postgres readiness for the RentMap API.

Invariants:
    - GET /api/v1/health/ always returns 200 if process is up (liveness)
    - GET /api/v1/health/ready returns 503 if the database is unreachable or
      init_db has not run yet (readiness)
    - Public: no session token, no external services (AI, OCR, Pusher) probed

Design Decisions:
    - db_manager is read from the module at call time, so the probe follows
      whatever engine the lifespan (or a test) installed
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from rentmap.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "rentmap-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe, including database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
