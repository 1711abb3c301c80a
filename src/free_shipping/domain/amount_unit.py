from enum import Enum


class AmountUnit(Enum):
    """Declares how a numeric value found at a candidate path is denominated.

    The unit is always declared per path and never guessed from the magnitude of the
    value; guessing risks a silent 100x error.
    """

    MAJOR = "major"  # currency units, e.g. 52.34 dollars
    MINOR = "minor"  # smallest denomination, e.g. 5234 cents

    @classmethod
    def from_str(cls, value: str) -> "AmountUnit":
        """Get unit from its (case-insensitive) name, e.g. "minor".

        Raises:
            ValueError: If $value is not a known unit.
        """
        if isinstance(value, AmountUnit):
            return value
        if not isinstance(value, str):
            raise TypeError(f"$value must be a string, but provided value is: {value!r}")

        normalized = value.strip().lower()
        for unit in cls:
            if unit.value == normalized:
                return unit
        raise ValueError(f"Unknown amount unit '{value}'. Available units: {[u.value for u in cls]}")
