"""
API Schemas

Shared response models for the idforge API.
"""

from .error import ErrorDetail, ErrorResponse

__all__ = ["ErrorResponse", "ErrorDetail"]
