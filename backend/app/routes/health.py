"""
Journal Board Backend — Health Check Routes
=============================================

What:  Health check endpoints for monitoring and load balancer probes.
Why:   A backend that cannot reach its database cannot serve a single board,
       so the database probe is part of the health verdict.
How:   GET /health reports process status plus a SELECT 1 probe;
       GET /health/db reports the probe alone and answers 503 when it fails.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 200 on /health, 503 on /health/db)
"""

import logging
import time

from fastapi import APIRouter, Response, status
from sqlalchemy import text

from app import __version__
from app.database import engine
from app.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


async def _probe_database() -> str:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        return "disconnected"
    return "connected"


def _build(db_status: str) -> HealthResponse:
    return HealthResponse(
        status="healthy" if db_status == "connected" else "unhealthy",
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return _build(await _probe_database())


@router.get(
    "/health/db",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Database connectivity check",
)
async def database_health(response: Response) -> HealthResponse:
    result = _build(await _probe_database())
    if result.database != "connected":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return result
