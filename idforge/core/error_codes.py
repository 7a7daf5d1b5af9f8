"""
Error Codes

Standardized error codes for idforge.
"""

from enum import StrEnum
from types import MappingProxyType
from typing import Mapping


class ErrorCode(StrEnum):
    """Base error code enum (string-based)."""


class IdGenerationErrorCode(ErrorCode):
    """ID generation error codes."""

    CLOCK_MOVED_BACKWARDS = "ID_GENERATION_CLOCK_MOVED_BACKWARDS"
    GENERATION_FAILED = "ID_GENERATION_FAILED"


class APIErrorCode(ErrorCode):
    """API-related error codes."""

    INTERNAL_ERROR = "API_INTERNAL_ERROR"


class ValidationErrorCode(ErrorCode):
    """Validation-related error codes."""

    INVALID_INPUT = "VALIDATION_INVALID_INPUT"
    VALUE_OUT_OF_RANGE = "VALIDATION_VALUE_OUT_OF_RANGE"


class DataProcessErrorCode(ErrorCode):
    """Data processing error codes."""

    PARSING_FAILED = "DATA_PROCESS_PARSING_FAILED"


# Error code to HTTP status mapping
#
# Values carry a domain prefix (ID_GENERATION_*, API_*, VALIDATION_*,
# DATA_PROCESS_*) so they stay unique once rendered as plain strings.
# Business validation errors are 400; FastAPI's RequestValidationError is
# rendered as 422 by the API layer. Clock faults are 503: the caller may
# retry once the clock catches up.
ERROR_CODE_MAP: Mapping[ErrorCode, int] = MappingProxyType(
    {
        IdGenerationErrorCode.CLOCK_MOVED_BACKWARDS: 503,
        IdGenerationErrorCode.GENERATION_FAILED: 500,
        APIErrorCode.INTERNAL_ERROR: 500,
        ValidationErrorCode.INVALID_INPUT: 400,
        ValidationErrorCode.VALUE_OUT_OF_RANGE: 400,
        DataProcessErrorCode.PARSING_FAILED: 400,
    }
)


_STATUS_BY_VALUE = {code.value: status for code, status in ERROR_CODE_MAP.items()}


def get_http_status_code(error_code: ErrorCode | str) -> int:
    """
    Get HTTP status code for an error code.

    Plain strings match the enum member with the same value.

    Returns:
        HTTP status code (defaults to 500 if not found)
    """
    return _STATUS_BY_VALUE.get(str(error_code), 500)
