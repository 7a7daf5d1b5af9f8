"""
Short UID Codec

Converts non-negative integer IDs to compact strings and back.

The decimal form of the number is cut into fixed-size digit groups and each
group is written as a fixed-width number in a larger base:

- mode 3: groups of 5 digits -> 3 symbols from ``0-9a-zA-Z``
- mode 2: groups of 3 digits -> 2 symbols from ``0-9a-z``

Groups are emitted least significant first.
"""

import string
from dataclasses import dataclass
from typing import Dict, List

from idforge.core.error_codes import DataProcessErrorCode, ValidationErrorCode
from idforge.core.exceptions import DataProcessException, ValidationException


@dataclass(frozen=True)
class _UidScheme:
    alphabet: str
    group_digits: int
    group_width: int

    @property
    def group_modulus(self) -> int:
        return 10**self.group_digits


_SCHEMES: Dict[int, _UidScheme] = {
    3: _UidScheme(
        alphabet=string.digits + string.ascii_lowercase + string.ascii_uppercase,
        group_digits=5,
        group_width=3,
    ),
    2: _UidScheme(
        alphabet=string.digits + string.ascii_lowercase,
        group_digits=3,
        group_width=2,
    ),
}

SUPPORTED_MODES = tuple(sorted(_SCHEMES))


def _scheme(mode: int) -> _UidScheme:
    try:
        return _SCHEMES[mode]
    except KeyError:
        raise ValidationException(
            f"Unsupported UID mode: {mode}",
            ValidationErrorCode.INVALID_INPUT,
            {"mode": mode, "supported": list(SUPPORTED_MODES)},
        ) from None


def encode_uid(value: int, mode: int = 3) -> str:
    """
    Encode a non-negative integer as a short UID.

    Raises:
        ValidationException: If value is negative or mode unsupported
    """
    scheme = _scheme(mode)
    if value < 0:
        raise ValidationException(
            "UID source value must not be negative",
            ValidationErrorCode.VALUE_OUT_OF_RANGE,
            {"value": value},
        )

    groups: List[int] = []
    remaining = value
    while True:
        remaining, group = divmod(remaining, scheme.group_modulus)
        groups.append(group)
        if remaining == 0:
            break

    base = len(scheme.alphabet)
    chunks = []
    for group in groups:
        symbols = []
        for _ in range(scheme.group_width):
            group, digit = divmod(group, base)
            symbols.append(scheme.alphabet[digit])
        chunks.append("".join(reversed(symbols)))
    return "".join(chunks)


def decode_uid(uid: str, mode: int = 3) -> int:
    """
    Decode a short UID back to its integer.

    Raises:
        ValidationException: If mode is unsupported
        DataProcessException: If the UID is malformed
    """
    scheme = _scheme(mode)
    if not uid or len(uid) % scheme.group_width:
        raise DataProcessException(
            f"UID length must be a positive multiple of {scheme.group_width}",
            DataProcessErrorCode.PARSING_FAILED,
            {"uid": uid, "mode": mode},
        )

    base = len(scheme.alphabet)
    value = 0
    # last chunk holds the most significant group
    for start in range(len(uid) - scheme.group_width, -1, -scheme.group_width):
        group = 0
        for symbol in uid[start : start + scheme.group_width]:
            digit = scheme.alphabet.find(symbol)
            if digit < 0:
                raise DataProcessException(
                    f"Invalid UID symbol {symbol!r}",
                    DataProcessErrorCode.PARSING_FAILED,
                    {"uid": uid, "mode": mode},
                )
            group = group * base + digit
        if group >= scheme.group_modulus:
            raise DataProcessException(
                "UID group out of range",
                DataProcessErrorCode.PARSING_FAILED,
                {"uid": uid, "mode": mode, "group": group},
            )
        value = value * scheme.group_modulus + group
    return value
