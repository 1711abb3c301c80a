from __future__ import annotations

import re

# ISO 4217 style alphabetic code, e.g. "USD", "EUR"
_CURRENCY_CODE_PATTERN = re.compile(r"[A-Z]{3}")


def normalize_currency_code(code: str) -> str:
    """Validate a currency code and return it upper-cased and stripped.

    Args:
        code (str): Currency code (e.g., "USD", "eur").

    Returns:
        str: Normalized currency code (e.g., "USD", "EUR").

    Raises:
        TypeError: If $code is not a string.
        ValueError: If $code is not a 3-letter alphabetic code.
    """
    # Raise: $code must be a string
    if not isinstance(code, str):
        raise TypeError(f"$code must be a string, but provided value is: {code!r}")

    normalized = code.strip().upper()

    # Raise: $code must be a short alphabetic identifier
    if not _CURRENCY_CODE_PATTERN.fullmatch(normalized):
        raise ValueError(f"$code must be a 3-letter alphabetic currency code, but provided value is: '{code}'")

    return normalized


def is_valid_currency_code(code: object) -> bool:
    """Check whether $code would be accepted by `normalize_currency_code`."""
    return isinstance(code, str) and _CURRENCY_CODE_PATTERN.fullmatch(code.strip().upper()) is not None
