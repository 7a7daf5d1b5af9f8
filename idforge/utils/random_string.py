"""Random alphanumeric strings."""

import secrets
import string

from idforge.core.error_codes import ValidationErrorCode
from idforge.core.exceptions import ValidationException

ALPHANUMERIC = string.digits + string.ascii_lowercase + string.ascii_uppercase


def random_string(length: int, alphabet: str = ALPHANUMERIC) -> str:
    """Return ``length`` symbols drawn uniformly from ``alphabet``."""
    if length < 0:
        raise ValidationException(
            "length must not be negative",
            ValidationErrorCode.VALUE_OUT_OF_RANGE,
            {"length": length},
        )
    if not alphabet:
        raise ValidationException(
            "alphabet must not be empty", ValidationErrorCode.INVALID_INPUT
        )
    return "".join(secrets.choice(alphabet) for _ in range(length))
