"""
ID Request Schemas

Request models for ID issuing endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class IdBatchRequest(BaseModel):
    """Request model for issuing several IDs at once."""

    count: int = Field(..., ge=1, description="Number of IDs to issue")
    worker_id: Optional[int] = Field(
        None, description="Worker id (defaults to the configured one)"
    )
    data_center_id: Optional[int] = Field(
        None, description="Data center id (defaults to the configured one)"
    )
