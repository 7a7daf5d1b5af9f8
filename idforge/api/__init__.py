"""
API Package

HTTP surface for issuing and inspecting idforge identifiers.
"""

from .factory import create_api
from .router import router

__all__ = ["router", "create_api"]
