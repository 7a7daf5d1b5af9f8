"""
ID Response Schemas

Response models for ID issuing and decoding endpoints. IDs are returned both
as integers and as strings, since 64-bit values do not survive JSON number
parsing in every client.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class IdResponse(BaseModel):
    """A single issued ID."""

    id: int = Field(..., description="Snowflake ID")
    id_str: str = Field(..., description="Snowflake ID as a decimal string")
    worker_id: int = Field(..., description="Worker that issued the ID")
    data_center_id: int = Field(..., description="Data center that issued the ID")


class IdBatchResponse(BaseModel):
    """IDs issued by one batch request, in generation order."""

    ids: List[IdResponse] = Field(..., description="Issued IDs")
    count: int = Field(..., description="Number of IDs issued")


class IdComponentsResponse(BaseModel):
    """Fields decoded from an ID."""

    id: int = Field(..., description="Snowflake ID")
    id_str: str = Field(..., description="Snowflake ID as a decimal string")
    timestamp_ms: int = Field(..., description="Generation time, ms since Unix epoch")
    generated_at: datetime = Field(..., description="Generation time (UTC)")
    worker_id: int = Field(..., description="Worker id")
    data_center_id: int = Field(..., description="Data center id")
    sequence: int = Field(..., description="Sequence within the millisecond")


class UidResponse(BaseModel):
    """Short UID and the integer it encodes."""

    uid: str = Field(..., description="Short UID")
    value: int = Field(..., description="Encoded integer")
    value_str: str = Field(..., description="Encoded integer as a decimal string")
    mode: int = Field(..., description="Codec mode (2 or 3)")


class NanoIdResponse(BaseModel):
    """Generated NanoIds."""

    nanoids: List[str] = Field(..., description="Generated NanoIds")
    size: int = Field(..., description="Length of every NanoId")
