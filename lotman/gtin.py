"""
GTIN helpers (GS1 Global Trade Item Number, 14 digits).
"""

import re

_NON_DIGITS = re.compile(r'\D')


def is_valid_gtin(value: str | None) -> bool:
    """14 digits once separators are stripped."""
    if not value:
        return False
    return len(_NON_DIGITS.sub('', value)) == 14


def gtin_check_digit(body: str) -> int:
    """
    GS1 mod-10 check digit for the first 13 digits of a GTIN-14.

    Weights alternate 3, 1, 3, ... starting from the leftmost digit.
    """
    if len(body) != 13 or not body.isdigit():
        raise ValueError(f"GTIN body must be 13 digits, got {body!r}")
    total = sum(int(d) * (3 if i % 2 == 0 else 1) for i, d in enumerate(body))
    return (10 - total % 10) % 10


def has_valid_check_digit(value: str) -> bool:
    digits = _NON_DIGITS.sub('', value or '')
    if len(digits) != 14:
        return False
    return gtin_check_digit(digits[:13]) == int(digits[13])
