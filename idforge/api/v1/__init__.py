"""
API Version 1 Package

Version 1 of the idforge API endpoints.
"""

from fastapi import APIRouter

from .endpoints import health_router, ids_router, uids_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(ids_router)
router.include_router(uids_router)

__all__ = ["router"]
