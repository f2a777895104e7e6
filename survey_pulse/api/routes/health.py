"""Health — liveness and database readiness for the Survey Pulse API.

Invariants:
    - GET /health/ answers 200 whenever the process is serving
    - GET /health/ready answers 503 until the response store is reachable
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from survey_pulse.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/")
async def liveness():
    return {"status": "healthy", "service": "survey-pulse-api"}


@router.get("/ready")
async def readiness():
    manager = database.db_manager
    if manager is None or not await manager.ping():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": {"database": "unreachable"}},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
