"""
Health Check Routes - System health and monitoring endpoints.

These endpoints are used for:
1. Load balancer health checks
2. Container liveness/readiness probes
3. Quick system status verification
"""
from datetime import datetime

from fastapi import APIRouter

from healthfeed import __version__
from healthfeed.core.logging_config import get_logger
from healthfeed.database import get_database
from healthfeed.models.common import HealthResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Returns 200 OK while the process is serving requests.",
)
async def health_check() -> HealthResponse:
    """
    Perform a basic health check.

    Does not touch the database; see /health/ready for that.
    """
    logger.debug("Health check requested")

    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.utcnow()
    )


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check endpoint",
    description="Checks database connectivity before reporting ready.",
)
def readiness_check() -> HealthResponse:
    """
    Perform a readiness check.

    Reports "degraded" instead of failing when the database does not
    answer, so probes can tell the two situations apart.
    """
    logger.debug("Readiness check requested")

    database_ok = get_database().check_connection()

    return HealthResponse(
        status="ready" if database_ok else "degraded",
        version=__version__,
        timestamp=datetime.utcnow(),
        database="ok" if database_ok else "unavailable",
    )
