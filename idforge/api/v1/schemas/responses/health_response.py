"""
Health Check Response Schemas

Response models for API health check endpoints.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Response model for API health check endpoint."""

    status: str = Field(
        ..., description="Overall health status", examples=["healthy", "unhealthy"]
    )
    timestamp: str = Field(..., description="Health check timestamp (ISO format)")
    version: str = Field(..., description="API version")
    environment: str = Field(..., description="Environment name")
    components: Dict[str, Any] = Field(
        ..., description="Health status of individual components"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2026-01-15T10:30:00.000Z",
                "version": "1.0.0",
                "environment": "development",
                "components": {
                    "api": {"status": "healthy", "version": "1.0.0"},
                    "snowflake": {
                        "status": "healthy",
                        "worker_id": 0,
                        "data_center_id": 0,
                        "epoch_ms": 1288834974657,
                        "registered_generators": 1,
                    },
                },
            }
        }
    )
