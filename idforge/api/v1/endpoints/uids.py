"""Short UID decoding and NanoId endpoints."""

from fastapi import APIRouter, Depends, Query

from idforge.api.schemas.error import ErrorResponse
from idforge.api.v1.converters import convert_uid_to_response
from idforge.api.v1.endpoints.ids import get_id_service
from idforge.api.v1.schemas.responses import NanoIdResponse, UidResponse
from idforge.services.id_service import IdService

router = APIRouter(tags=["uids"])


@router.get(
    "/uids/{uid}",
    response_model=UidResponse,
    summary="Decode a short UID",
    responses={400: {"model": ErrorResponse, "description": "Malformed UID"}},
)
async def decode_uid(
    uid: str,
    mode: int = Query(3, description="Codec mode (2 or 3)"),
    service: IdService = Depends(get_id_service),
) -> UidResponse:
    return convert_uid_to_response(uid, service.decode_uid(uid, mode), mode)


@router.get(
    "/nanoids",
    response_model=NanoIdResponse,
    summary="Generate NanoIds",
    responses={400: {"model": ErrorResponse, "description": "Invalid count or size"}},
)
def generate_nanoids(
    count: int = Query(1, ge=1, description="Number of NanoIds"),
    size: int = Query(21, ge=1, description="Symbols per NanoId"),
    service: IdService = Depends(get_id_service),
) -> NanoIdResponse:
    return NanoIdResponse(nanoids=service.generate_nanoids(count, size), size=size)
