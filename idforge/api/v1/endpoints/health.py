"""
API Health Check Endpoint

Health check for the idforge API and its ID generator configuration.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from idforge.api.schemas.error import ErrorResponse
from idforge.api.v1.endpoints.ids import get_id_service
from idforge.api.v1.schemas.responses import HealthResponse
from idforge.core.config import settings
from idforge.core.exceptions import ApplicationException
from idforge.core.logger import get_logger
from idforge.services.id_service import IdService

logger = get_logger(__name__)

router = APIRouter()


def check_snowflake_health(service: IdService) -> Dict[str, Any]:
    """Report the default generator's configuration."""
    try:
        generator = service.registry.get(
            settings.snowflake__worker_id, settings.snowflake__data_center_id
        )
    except ApplicationException as e:
        logger.warning("Snowflake health check failed: %s", e.message)
        return {"status": "unhealthy", "error": e.message}

    return {
        "status": "healthy",
        "worker_id": generator.worker_id,
        "data_center_id": generator.data_center_id,
        "epoch_ms": generator.epoch_ms,
        "last_timestamp_ms": generator.last_timestamp_ms,
        "registered_generators": len(service.registry),
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="API Health Check",
    description="Check the overall health of the API and its ID generator",
    tags=["health"],
    responses={
        200: {"model": HealthResponse, "description": "Health check results"},
        503: {"model": ErrorResponse, "description": "Service unavailable"},
    },
)
async def health_check(service: IdService = Depends(get_id_service)) -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        HealthResponse: Overall health status and component details
    """
    snowflake = check_snowflake_health(service)
    components = {
        "api": {"status": "healthy", "version": settings.api__version},
        "snowflake": snowflake,
    }

    return HealthResponse(
        status="healthy" if snowflake["status"] == "healthy" else "unhealthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.api__version,
        environment=settings.environment,
        components=components,
    )
