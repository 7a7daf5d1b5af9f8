"""
V1 API Schemas Package

Pydantic models for v1 API request and response data.
"""

from .requests import IdBatchRequest
from .responses import (
    HealthResponse,
    IdBatchResponse,
    IdComponentsResponse,
    IdResponse,
    NanoIdResponse,
    UidResponse,
)

__all__ = [
    "IdBatchRequest",
    "HealthResponse",
    "IdResponse",
    "IdBatchResponse",
    "IdComponentsResponse",
    "UidResponse",
    "NanoIdResponse",
]
