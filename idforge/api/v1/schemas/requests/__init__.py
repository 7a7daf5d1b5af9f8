"""
V1 API Request Schemas

Request schemas for all API v1 endpoints.
"""

from .id_requests import IdBatchRequest

__all__ = ["IdBatchRequest"]
