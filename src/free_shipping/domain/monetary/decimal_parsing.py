"""Exact conversion of textual and numeric amounts into integer minor units.

All conversions work on the decimal text of a value and use integer arithmetic only.
A value is never multiplied as a binary float, so "0.29" is always 29 minor units and
never 28 or 30.

Precision beyond the minor unit is truncated toward zero, never rounded:
"19.999" is 1999 minor units.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, ROUND_DOWN

from free_shipping.utils.numeric_tools import as_decimal, is_integral_number

# Number of decimal digits in one major unit (cents per dollar)
MINOR_UNIT_DIGITS = 2
MINOR_UNITS_PER_MAJOR = 10**MINOR_UNIT_DIGITS

# Same range as 999_999_999_999_999.99; larger values are not prices
MAX_INTEGER_DIGITS = 15
MAX_ABS_MINOR_UNITS = 10 ** (MAX_INTEGER_DIGITS + MINOR_UNIT_DIGITS) - 1

# Decimal("0.01")
_MINOR_UNIT_EXPONENT = Decimal(1).scaleb(-MINOR_UNIT_DIGITS)

_NON_DIGITS = re.compile(r"[^0-9]")


def _describe(raw_value: object) -> str:
    # repr() of an int beyond the interpreter's digit limit raises ValueError
    if is_integral_number(raw_value) and abs(raw_value) > MAX_ABS_MINOR_UNITS * MINOR_UNITS_PER_MAJOR:
        return f"<int of {raw_value.bit_length()} bits>"
    return repr(raw_value)


class AmountParseError(ValueError):
    """Raised when a raw value cannot be interpreted as a monetary amount.

    Attributes:
        raw_value: The value that failed to parse (any type).
        reason (str): Human readable explanation of what is wrong with $raw_value.
    """

    def __init__(self, raw_value: object, reason: str):
        self.raw_value = raw_value
        self.reason = reason
        super().__init__(f"Cannot parse amount from $raw_value ({_describe(raw_value)}) because {reason}")


def parse_decimal_string(s: str) -> int:
    """Parse a decimal money string like "52.34" into integer minor units (5234).

    Rules:
    - Surrounding whitespace is ignored; an optional leading "-" (or "+") sets the sign.
    - Integer part: all non-digit characters are dropped, so "$1,234.50" is accepted.
      An empty integer part counts as 0 (".5" is 50 minor units).
    - Fractional part: absent or empty contributes 0; one digit means tens of minor
      units ("1.5" is 150); with two or more digits only the first two are used and the
      rest is truncated ("1.239" is 123).

    Args:
        s (str): Decimal money string in major units.

    Returns:
        int: Amount in minor units.

    Raises:
        AmountParseError: If $s is not a string, has more than one decimal point, or has
            a non-empty integer/fractional part without any digit.
    """
    # Raise: only strings carry decimal text
    if not isinstance(s, str):
        raise AmountParseError(s, f"it is of type {type(s).__name__}, not str")

    text = s.strip()
    negative = False
    if text[:1] in ("-", "+"):
        negative = text[0] == "-"
        text = text[1:]

    parts = text.split(".")
    # Raise: "1.2.3" is ambiguous
    if len(parts) > 2:
        raise AmountParseError(s, "it contains more than one decimal point")

    raw_integer = parts[0]
    raw_fraction = parts[1] if len(parts) == 2 else ""
    integer_digits = _NON_DIGITS.sub("", raw_integer)
    fraction_digits = _NON_DIGITS.sub("", raw_fraction)

    # Raise: stray symbols are tolerated only around digits, never instead of them
    if raw_integer and not integer_digits:
        raise AmountParseError(s, f"integer part '{raw_integer}' contains no digits")
    if raw_fraction and not fraction_digits:
        raise AmountParseError(s, f"fractional part '{raw_fraction}' contains no digits")
    if not integer_digits and not fraction_digits:
        raise AmountParseError(s, "it contains no digits")

    # Raise: bound the digits before int() so huge inputs fail as a parse error
    significant_digits = integer_digits.lstrip("0")
    if len(significant_digits) > MAX_INTEGER_DIGITS:
        raise AmountParseError(s, f"integer part has more than {MAX_INTEGER_DIGITS} digits")

    whole = int(significant_digits) if significant_digits else 0
    fraction = int(fraction_digits[:MINOR_UNIT_DIGITS].ljust(MINOR_UNIT_DIGITS, "0")) if fraction_digits else 0

    minor_units = whole * MINOR_UNITS_PER_MAJOR + fraction
    return -minor_units if negative else minor_units


def major_units_to_minor(value: Decimal | int | float | str) -> int:
    """Convert an amount expressed in major units (e.g. dollars) into minor units.

    Strings go through `parse_decimal_string`. Integers are scaled exactly. Floats are
    converted through their shortest decimal representation (`52.34` -> "52.34"), so the
    binary approximation of the float never leaks into the result.

    Raises:
        AmountParseError: If $value is a bool, not a number, NaN, infinite or has more
            than `MAX_INTEGER_DIGITS` integer digits.
    """
    if isinstance(value, str):
        return parse_decimal_string(value)

    if is_integral_number(value):
        return _check_range(value * MINOR_UNITS_PER_MAJOR, value)

    decimal_value = _finite_decimal(value)
    # Raise: checked before quantize, which fails on values beyond the context precision
    if not decimal_value.is_zero() and decimal_value.adjusted() >= MAX_INTEGER_DIGITS:
        raise AmountParseError(value, f"it has more than {MAX_INTEGER_DIGITS} integer digits")

    # quantize truncates the exact value; scaleb alone would round to the context precision
    truncated = decimal_value.quantize(_MINOR_UNIT_EXPONENT, rounding=ROUND_DOWN)
    return int(truncated.scaleb(MINOR_UNIT_DIGITS))


def minor_units_from_number(value: Decimal | int | float) -> int:
    """Accept a number that is already in minor units (e.g. cents).

    Raises:
        AmountParseError: If $value is a bool, not a number, NaN, infinite or has a
            fractional part (half a cent is not a valid minor-unit amount), or is out of
            range.
    """
    if is_integral_number(value):
        return _check_range(value, value)

    decimal_value = _finite_decimal(value)
    # Raise: out of range before any conversion to int
    if not decimal_value.is_zero() and decimal_value.adjusted() >= MAX_INTEGER_DIGITS + MINOR_UNIT_DIGITS:
        raise AmountParseError(value, f"it has more than {MAX_INTEGER_DIGITS + MINOR_UNIT_DIGITS} digits")
    # Raise: minor units are whole by definition
    if decimal_value != decimal_value.to_integral_value():
        raise AmountParseError(value, "a minor-unit amount must be a whole number")
    return int(decimal_value)


def format_minor_units(minor_units: int) -> str:
    """Render minor units as the canonical decimal string ("5234" -> "52.34").

    `parse_decimal_string(format_minor_units(x)) == x` holds for every integer $x with
    `abs(x) <= MAX_ABS_MINOR_UNITS`.
    """
    sign = "-" if minor_units < 0 else ""
    whole, fraction = divmod(abs(minor_units), MINOR_UNITS_PER_MAJOR)
    return f"{sign}{whole}.{fraction:0{MINOR_UNIT_DIGITS}d}"


def _check_range(minor_units: int, raw_value: object) -> int:
    if abs(minor_units) > MAX_ABS_MINOR_UNITS:
        raise AmountParseError(raw_value, f"it is outside the supported range of {MAX_INTEGER_DIGITS} integer digits")
    return minor_units


def _finite_decimal(value: object) -> Decimal:
    # Raise: bool is an int subclass but never an amount
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise AmountParseError(value, f"it is of type {type(value).__name__}, not a number")

    try:
        decimal_value = as_decimal(value)
    except (ValueError, InvalidOperation) as e:
        raise AmountParseError(value, "it cannot be converted to Decimal") from e

    if not decimal_value.is_finite():
        raise AmountParseError(value, "it is not a finite number")
    return decimal_value
