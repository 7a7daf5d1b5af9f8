"""Snowflake ID issuing and decoding endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from idforge.api.schemas.error import ErrorResponse
from idforge.api.v1.converters import (
    convert_id_batch_to_response,
    convert_id_components_to_response,
    convert_id_data_to_response,
    convert_uid_to_response,
)
from idforge.api.v1.schemas.requests import IdBatchRequest
from idforge.api.v1.schemas.responses import (
    IdBatchResponse,
    IdComponentsResponse,
    IdResponse,
    UidResponse,
)
from idforge.services.id_service import IdService

router = APIRouter(prefix="/ids", tags=["ids"])

_id_service: Optional[IdService] = None

# Issuing endpoints are plain functions: next_id holds a threading.Lock and may
# spin until the next millisecond, so FastAPI runs them in its threadpool.
_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid worker or data center id"},
    422: {"model": ErrorResponse, "description": "Validation error"},
    503: {"model": ErrorResponse, "description": "Clock moved backwards, retry later"},
}


def get_id_service() -> IdService:
    """Shared IdService backed by the default generator registry."""
    global _id_service
    if _id_service is None:
        _id_service = IdService()
    return _id_service


@router.get(
    "/next",
    response_model=IdResponse,
    summary="Issue one ID",
    responses=_ERROR_RESPONSES,
)
def next_id(
    worker_id: Optional[int] = Query(None, description="Worker id, 0..31"),
    data_center_id: Optional[int] = Query(None, description="Data center id, 0..31"),
    service: IdService = Depends(get_id_service),
) -> IdResponse:
    return convert_id_data_to_response(service.next_id(worker_id, data_center_id))


@router.post(
    "/batch",
    response_model=IdBatchResponse,
    summary="Issue several IDs",
    responses=_ERROR_RESPONSES,
)
def next_ids(
    request: IdBatchRequest, service: IdService = Depends(get_id_service)
) -> IdBatchResponse:
    ids = service.next_ids(request.count, request.worker_id, request.data_center_id)
    return convert_id_batch_to_response(ids)


@router.get(
    "/{snowflake_id}/components",
    response_model=IdComponentsResponse,
    summary="Decode an ID",
    responses={400: {"model": ErrorResponse, "description": "Not a 64-bit ID"}},
)
async def decode_id(
    snowflake_id: int, service: IdService = Depends(get_id_service)
) -> IdComponentsResponse:
    return convert_id_components_to_response(service.decode_id(snowflake_id))


@router.get(
    "/{snowflake_id}/uid",
    response_model=UidResponse,
    summary="Encode an ID as a short UID",
    responses={400: {"model": ErrorResponse, "description": "Invalid value or mode"}},
)
async def encode_uid(
    snowflake_id: int,
    mode: int = Query(3, description="Codec mode (2 or 3)"),
    service: IdService = Depends(get_id_service),
) -> UidResponse:
    uid = service.encode_uid(snowflake_id, mode)
    return convert_uid_to_response(uid, snowflake_id, mode)
