"""
Custom Exceptions

Every idforge error is an ApplicationException carrying an ErrorCode, a
details dict and, through ERROR_CODE_MAP, the HTTP status the API answers
with. Each family has a default code used when the caller passes none.
"""

import json
from typing import Any, Dict, Optional

from idforge.core.error_codes import (
    DataProcessErrorCode,
    ErrorCode,
    IdGenerationErrorCode,
    ValidationErrorCode,
    get_http_status_code,
)


def _safe_serialize(obj: Any) -> Any:
    """Return obj if JSON can encode it, otherwise its repr()."""
    try:
        json.dumps(obj)
        return obj
    except (TypeError, ValueError):
        return repr(obj)


class ApplicationException(Exception):
    """Base exception for idforge errors."""

    default_code: Optional[ErrorCode] = None

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used by the API error handler."""
        result: Dict[str, Any] = {
            "message": self.message,
            "code": self.error_code.value if self.error_code else None,
            "details": {k: _safe_serialize(v) for k, v in self.details.items()},
        }
        cause = self.__cause__ or self.__context__
        if cause:
            result["cause"] = {"type": cause.__class__.__name__, "message": str(cause)}
        return result

    def __str__(self) -> str:
        parts = [self.message]
        if self.error_code:
            parts.append(f"[{self.error_code.value}]")
        if self.details:
            parts.append(f"Details: {self.details}")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )

    @property
    def http_status(self) -> int:
        if self.error_code:
            return get_http_status_code(self.error_code)
        return 500


class InvalidConfigurationError(ApplicationException):
    """A generator parameter is outside its allowed range."""

    default_code = ValidationErrorCode.VALUE_OUT_OF_RANGE

    def __init__(self, field: str, value: Any, minimum: int, maximum: int) -> None:
        super().__init__(
            f"{field} must be between {minimum} and {maximum}, got {value!r}",
            details={"field": field, "value": value, "min": minimum, "max": maximum},
        )
        self.field = field
        self.value = value


class IdGenerationException(ApplicationException):
    """No ID could be produced."""

    default_code = IdGenerationErrorCode.GENERATION_FAILED


class ClockRegressionError(IdGenerationException):
    """The wall clock moved backwards further than the generator tolerates."""

    default_code = IdGenerationErrorCode.CLOCK_MOVED_BACKWARDS

    def __init__(self, backward_ms: int, last_timestamp_ms: int) -> None:
        super().__init__(
            f"Clock moved backwards. Refusing to generate id for {backward_ms}ms",
            details={"backward_ms": backward_ms, "last_timestamp_ms": last_timestamp_ms},
        )
        self.backward_ms = backward_ms
        self.last_timestamp_ms = last_timestamp_ms


class ValidationException(ApplicationException):
    """Invalid argument to a business operation (HTTP 400)."""

    default_code = ValidationErrorCode.INVALID_INPUT


class DataProcessException(ApplicationException):
    """Input could not be parsed or transformed."""

    default_code = DataProcessErrorCode.PARSING_FAILED
