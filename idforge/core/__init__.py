"""
Core Package

Configuration, error handling and logging shared by the idforge modules.
"""

# ruff: noqa: F401  # All imports are re-exported via __all__

from .config import DEFAULT_EPOCH_MS, Settings, settings  # noqa: F401
from .error_codes import (  # noqa: F401
    ERROR_CODE_MAP,
    APIErrorCode,
    DataProcessErrorCode,
    IdGenerationErrorCode,
    ValidationErrorCode,
    get_http_status_code,
)
from .exceptions import (  # noqa: F401
    ApplicationException,
    ClockRegressionError,
    DataProcessException,
    IdGenerationException,
    InvalidConfigurationError,
    ValidationException,
)
from .logger import get_logger  # noqa: F401

__all__ = [
    # Configuration
    "DEFAULT_EPOCH_MS",
    "Settings",
    "settings",
    # Error handling
    "IdGenerationErrorCode",
    "APIErrorCode",
    "ValidationErrorCode",
    "DataProcessErrorCode",
    "ERROR_CODE_MAP",
    "get_http_status_code",
    # Exceptions
    "ApplicationException",
    "InvalidConfigurationError",
    "IdGenerationException",
    "ClockRegressionError",
    "ValidationException",
    "DataProcessException",
    # Logger
    "get_logger",
]
