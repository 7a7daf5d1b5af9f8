"""
API Endpoints Package

FastAPI endpoint definitions for idforge.
"""

from .health import router as health_router
from .ids import router as ids_router
from .uids import router as uids_router

__all__ = ["health_router", "ids_router", "uids_router"]
