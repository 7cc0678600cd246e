"""Health Probes — liveness of the process, readiness of the issue store.

Invariants:
    - GET /api/v1/health/ is 200 whenever the process serves requests
    - GET /api/v1/health/ready is 200 only when the database answers AND the
      issues table exists; otherwise 503 with a machine-readable reason
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from issue_tracker import __version__
from issue_tracker.infrastructure import database
from issue_tracker.models.issue import Issue

router = APIRouter(prefix="/api/v1/health", tags=["health"])


def _not_ready(reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {
        "status": "healthy",
        "service": "issue-tracker-api",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness: database reachable and schema migrated."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return _not_ready("database_unavailable")
    if not await manager.has_table(Issue.__tablename__):
        return _not_ready("schema_missing")
    return {
        "status": "ready",
        "checks": {"database": "healthy", "schema": "migrated"},
    }
