"""Candidate paths that locate a monetary amount inside a cart/checkout document.

Input documents differ between invocation contexts (cart vs. checkout, v1 vs. v2 cost
fields). Callers list several candidate paths in priority order and the evaluator uses
the first one that resolves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeAlias

from free_shipping.domain.amount_unit import AmountUnit

# A key is a mapping key (str) or a sequence index (int)
PathKey: TypeAlias = str | int


def _as_keys(keys: Sequence[PathKey], name: str) -> tuple[PathKey, ...]:
    # Raise: a single string would be split into characters by tuple()
    if isinstance(keys, str) or not isinstance(keys, Sequence):
        raise TypeError(f"${name} must be a sequence of keys, but provided value is: {keys!r}")

    result = tuple(keys)
    if not result:
        raise ValueError(f"${name} cannot be empty")
    for key in result:
        if isinstance(key, bool) or not isinstance(key, (str, int)):
            raise TypeError(f"Every key in ${name} must be str or int, but found: {key!r}")
    return result


def format_keys(keys: Sequence[PathKey]) -> str:
    """Dotted representation of $keys, e.g. "cart.cost.subtotalAmount.amount"."""
    return ".".join(str(k) for k in keys)


@dataclass(frozen=True)
class CandidatePath:
    """Path of keys from the document root to a single amount value.

    Attributes:
        keys (tuple[PathKey, ...]): Keys traversed in order.
        unit (AmountUnit): Unit of a numeric terminal value. Decimal strings are always
            read as major units.
    """

    keys: tuple[PathKey, ...]
    unit: AmountUnit = AmountUnit.MAJOR

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", _as_keys(self.keys, "keys"))
        if not isinstance(self.unit, AmountUnit):
            raise TypeError(f"$unit must be an AmountUnit, but provided value is: {self.unit!r}")

    def __str__(self) -> str:
        return format_keys(self.keys)


@dataclass(frozen=True)
class LineItemsPath:
    """Path to a list of line items whose amounts are summed into one subtotal.

    Attributes:
        lines_keys (tuple[PathKey, ...]): Keys from the document root to the line items.
        item_keys (tuple[PathKey, ...]): Keys from one line item to its amount value.
        unit (AmountUnit): Unit of numeric line amounts.
    """

    lines_keys: tuple[PathKey, ...]
    item_keys: tuple[PathKey, ...]
    unit: AmountUnit = AmountUnit.MAJOR

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines_keys", _as_keys(self.lines_keys, "lines_keys"))
        object.__setattr__(self, "item_keys", _as_keys(self.item_keys, "item_keys"))
        if not isinstance(self.unit, AmountUnit):
            raise TypeError(f"$unit must be an AmountUnit, but provided value is: {self.unit!r}")

    def __str__(self) -> str:
        return f"{format_keys(self.lines_keys)}[*].{format_keys(self.item_keys)}"


AnyCandidatePath: TypeAlias = CandidatePath | LineItemsPath


def as_candidate_path(path: AnyCandidatePath | Sequence[PathKey]) -> AnyCandidatePath:
    """Accept a path object or a plain sequence of keys (read as major units).

    Raises:
        TypeError | ValueError: If $path is neither a path object nor a valid key sequence.
    """
    if isinstance(path, (CandidatePath, LineItemsPath)):
        return path
    return CandidatePath(path)


# Known subtotal locations, most specific first
DEFAULT_CANDIDATE_PATHS: tuple[AnyCandidatePath, ...] = (
    CandidatePath(("cart", "cost", "subtotalAmount", "amount")),
    CandidatePath(("cart", "subtotalPriceV2", "amount")),
    CandidatePath(("checkout", "subtotalPriceV2", "amount")),
    CandidatePath(("checkout", "totalPriceV2", "amount")),
    CandidatePath(("cart", "subtotalPrice", "amount")),
)
