"""
FastAPI router for the idforge API.

Mounts every versioned router; only v1 exists today.
"""

from fastapi import APIRouter

from idforge.api.v1 import router as v1_router

router = APIRouter()
router.include_router(v1_router, prefix="/v1")

__all__ = ["router"]
