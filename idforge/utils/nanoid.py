"""
NanoId Utility

URL-friendly random string identifiers. With the default alphabet and size
a NanoId carries slightly more entropy than a UUID v4.
"""

import math
import secrets
from typing import Callable, Optional

from idforge.core.error_codes import ValidationErrorCode
from idforge.core.exceptions import ValidationException

DEFAULT_ALPHABET = "_-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
DEFAULT_SIZE = 21

RandomBytes = Callable[[int], bytes]


def _mask_for(alphabet_size: int) -> int:
    # smallest 2**n - 1 covering every alphabet index
    if alphabet_size <= 1:
        return 1
    return (2 << int(math.floor(math.log2(alphabet_size - 1)))) - 1


def generate_nanoid(
    size: int = DEFAULT_SIZE,
    alphabet: str = DEFAULT_ALPHABET,
    random_bytes: Optional[RandomBytes] = None,
) -> str:
    """
    Generate a NanoId.

    Random bytes are masked down to the alphabet's bit width and values
    falling outside the alphabet are discarded, so every symbol is equally
    likely.

    Args:
        size: Number of symbols, must be positive
        alphabet: Symbols to draw from, 1 to 255 of them
        random_bytes: ``random_bytes(n)`` source, defaults to ``secrets.token_bytes``

    Returns:
        str: The generated id

    Raises:
        ValidationException: If size or alphabet are out of range
    """
    if not alphabet or len(alphabet) >= 256:
        raise ValidationException(
            "alphabet must contain between 1 and 255 symbols",
            ValidationErrorCode.VALUE_OUT_OF_RANGE,
            {"alphabet_size": len(alphabet)},
        )
    if size <= 0:
        raise ValidationException(
            "size must be greater than zero",
            ValidationErrorCode.VALUE_OUT_OF_RANGE,
            {"size": size},
        )

    random_bytes = random_bytes or secrets.token_bytes
    mask = _mask_for(len(alphabet))
    step = math.ceil(1.6 * mask * size / len(alphabet))

    symbols = []
    while True:
        for byte in random_bytes(step):
            index = byte & mask
            if index < len(alphabet):
                symbols.append(alphabet[index])
                if len(symbols) == size:
                    return "".join(symbols)
