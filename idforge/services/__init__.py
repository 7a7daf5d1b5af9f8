"""
Services Package

Business logic sitting between the API layer and the ID utilities.
"""

from .id_service import IdComponentsData, IdData, IdService

__all__ = ["IdService", "IdData", "IdComponentsData"]
