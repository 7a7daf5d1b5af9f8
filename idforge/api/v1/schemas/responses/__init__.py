"""
V1 API Response Schemas

Response schemas for all API v1 endpoints.
"""

from .health_response import HealthResponse
from .id_responses import (
    IdBatchResponse,
    IdComponentsResponse,
    IdResponse,
    NanoIdResponse,
    UidResponse,
)

__all__ = [
    "HealthResponse",
    "IdResponse",
    "IdBatchResponse",
    "IdComponentsResponse",
    "UidResponse",
    "NanoIdResponse",
]
