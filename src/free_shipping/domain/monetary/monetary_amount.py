from __future__ import annotations

from dataclasses import dataclass

from free_shipping.domain.monetary.currency_code import normalize_currency_code
from free_shipping.domain.monetary.decimal_parsing import format_minor_units, parse_decimal_string
from free_shipping.utils.numeric_tools import is_integral_number


@dataclass(frozen=True)
class MonetaryAmount:
    """An exact amount of money in minor currency units.

    Attributes:
        minor_units (int): Amount in the smallest denomination (cents for USD). Always an
            integer, so repeated parsing of the same input never drifts.
        currency_code (str): Upper-case 3-letter currency code (e.g., "USD").

    Examples:
        Amount of $52.34:

            amount = MonetaryAmount(5234, "USD")
            amount.to_decimal_str()  # "52.34"
    """

    minor_units: int
    currency_code: str

    def __post_init__(self) -> None:
        """Validate and normalize the amount.

        Raises:
            TypeError: If $minor_units is not an int (bool is rejected too).
            TypeError | ValueError: If $currency_code is not a valid currency code.
        """
        # Raise: $minor_units must be integral
        if not is_integral_number(self.minor_units):
            raise TypeError(f"$minor_units must be an int, but provided value is: {self.minor_units!r}")

        object.__setattr__(self, "currency_code", normalize_currency_code(self.currency_code))

    @classmethod
    def zero(cls, currency_code: str) -> MonetaryAmount:
        """Zero amount in $currency_code, used for free (zero-price) constructs."""
        return cls(0, currency_code)

    @classmethod
    def from_decimal_str(cls, value_str: str, currency_code: str) -> MonetaryAmount:
        """Parse a decimal string in major units, like "52.34".

        Raises:
            AmountParseError: If $value_str is not a valid decimal money string.
        """
        return cls(parse_decimal_string(value_str), currency_code)

    def to_decimal_str(self) -> str:
        """Canonical decimal string in major units, like "52.34" or "-0.05"."""
        return format_minor_units(self.minor_units)

    def __str__(self) -> str:
        """Return string like '52.34 USD'."""
        return f"{self.to_decimal_str()} {self.currency_code}"
