"""
API Layer Converters

Converters between API layer schemas and service layer schemas.
"""

from .id_converters import (
    convert_id_batch_to_response,
    convert_id_components_to_response,
    convert_id_data_to_response,
    convert_uid_to_response,
)

__all__ = [
    "convert_id_data_to_response",
    "convert_id_batch_to_response",
    "convert_id_components_to_response",
    "convert_uid_to_response",
]
