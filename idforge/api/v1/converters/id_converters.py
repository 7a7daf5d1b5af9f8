"""ID API converters."""

from typing import List

from idforge.api.v1.schemas.responses import (
    IdBatchResponse,
    IdComponentsResponse,
    IdResponse,
    UidResponse,
)
from idforge.services.id_service import IdComponentsData, IdData


def convert_id_data_to_response(data: IdData) -> IdResponse:
    """Convert an issued ID to its API response."""

    return IdResponse(
        id=data.id,
        id_str=str(data.id),
        worker_id=data.worker_id,
        data_center_id=data.data_center_id,
    )


def convert_id_batch_to_response(data: List[IdData]) -> IdBatchResponse:
    """Convert a batch of issued IDs to its API response."""

    return IdBatchResponse(
        ids=[convert_id_data_to_response(item) for item in data],
        count=len(data),
    )


def convert_id_components_to_response(
    data: IdComponentsData,
) -> IdComponentsResponse:
    """Convert decoded ID fields to their API response."""

    return IdComponentsResponse(
        id=data.id,
        id_str=str(data.id),
        timestamp_ms=data.timestamp_ms,
        generated_at=data.generated_at,
        worker_id=data.worker_id,
        data_center_id=data.data_center_id,
        sequence=data.sequence,
    )


def convert_uid_to_response(uid: str, value: int, mode: int) -> UidResponse:
    """Pair a short UID with the integer it encodes."""

    return UidResponse(uid=uid, value=value, value_str=str(value), mode=mode)
