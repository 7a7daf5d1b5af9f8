"""
API Error Response Schemas

Pydantic models for standardized error responses in FastAPI.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Detailed error information."""

    type: str = Field(
        ..., description="Exception type", examples=["ClockRegressionError"]
    )
    message: str = Field(..., description="Human-readable error message")
    code: Optional[str] = Field(
        None,
        description="Machine-readable error code",
        examples=["ID_GENERATION_CLOCK_MOVED_BACKWARDS"],
    )
    details: Optional[Dict[str, Any]] = Field(
        None, description="Additional error details"
    )
    debug: Optional[Dict[str, Any]] = Field(
        None, description="Debug information (only in debug mode)"
    )


class ErrorResponse(BaseModel):
    """Standard error response format."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "error": {
                        "type": "InvalidConfigurationError",
                        "message": "worker_id must be between 0 and 31, got 32",
                        "code": "VALIDATION_VALUE_OUT_OF_RANGE",
                        "details": {
                            "field": "worker_id",
                            "value": 32,
                            "min": 0,
                            "max": 31,
                        },
                    },
                    "request_id": "2f7d3c1e-5a0b-4c43-9d0e-8f0c6a1b2c3d",
                    "path": "/v1/ids/next",
                    "method": "GET",
                }
            ]
        },
    )

    error: ErrorDetail = Field(..., description="Error details")
    request_id: Optional[str] = Field(None, description="Request ID for tracing")
    path: Optional[str] = Field(
        None, description="Request path", examples=["/v1/ids/next"]
    )
    method: Optional[str] = Field(None, description="HTTP method", examples=["GET"])
