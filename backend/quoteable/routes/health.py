"""
So Quoteable Backend — Health Check Route
==========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Counts the people table (proves the connection and the schema) and
       reports Cloudinary configuration and circuit breaker state.

Status levels:
    - healthy:   Database reachable, Cloudinary configured and circuit closed (HTTP 200)
    - degraded:  Database reachable, uploads unavailable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quoteable import __version__
from quoteable.config import settings
from quoteable.database import get_db_session
from quoteable.models.person import Person
from quoteable.schemas.common import HealthResponse
from quoteable.services.circuit_breaker import CircuitBreaker
from quoteable.services.cloudinary_service import cloudinary_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> HealthResponse:
    db_status = "connected"
    people_count = None
    overall = "healthy"

    try:
        result = await db.execute(select(func.count()).select_from(Person))
        people_count = result.scalar_one()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if not settings.cloudinary_configured:
        cloudinary_status = "unconfigured"
    elif cloudinary_service.circuit_breaker.state == CircuitBreaker.OPEN:
        cloudinary_status = "circuit_open"
    else:
        cloudinary_status = "configured"
    if cloudinary_status != "configured" and overall == "healthy":
        overall = "degraded"

    if overall == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        people_count=people_count,
        cloudinary=cloudinary_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
