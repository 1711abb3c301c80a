from __future__ import annotations

from decimal import Decimal
from typing import TypeAlias

# Use where optimal type is `Decimal`, but other types are also acceptable (and will be converted to `Decimal`)
DecimalLike: TypeAlias = Decimal | int | str | float


def as_decimal(value: DecimalLike) -> Decimal:
    """Converts input to `Decimal` safely.

    Ensures floats are converted via string to avoid precision noise
    (`0.1` becomes `Decimal("0.1")`, not the binary approximation).

    Args:
        value: Input value as `DecimalLike`.

    Returns:
        Value converted to `Decimal`.
    """
    if isinstance(value, Decimal):
        return value

    return Decimal(str(value))


def is_integral_number(value: object) -> bool:
    """Return True for `int` values that are not `bool`.

    `bool` is a subclass of `int` in Python, so `True` would otherwise pass as the
    number 1. Document values like `true` are never amounts.
    """
    return isinstance(value, int) and not isinstance(value, bool)


# Note: No 'as_float' function is provided on purpose; money never goes through `float`.
