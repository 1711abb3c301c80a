"""Outcomes of evaluating a document against a money threshold.

`NotFound` and `ParseFailure` are values, not exceptions: the evaluator never raises for
document content. Callers treat both as "threshold not met" but can still tell them
apart for logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias

from free_shipping.domain.monetary.monetary_amount import MonetaryAmount


@dataclass(frozen=True)
class ThresholdDecision:
    """Result of comparing an amount against a threshold.

    Attributes:
        met (bool): True when the amount reached the threshold.
        currency_code (str): Currency of the evaluated amount; used downstream to build
            a zero-price construct in the same currency.
        amount (MonetaryAmount | None): The evaluated amount.
        threshold_minor_units (int | None): The threshold the amount was compared to.
    """

    met: bool
    currency_code: str
    amount: MonetaryAmount | None = field(default=None, compare=False)
    threshold_minor_units: int | None = field(default=None, compare=False)

    def zero_price(self) -> MonetaryAmount:
        """Zero amount in the decision currency ("0.00 USD")."""
        return MonetaryAmount.zero(self.currency_code)


@dataclass(frozen=True)
class NotFound:
    """None of the candidate paths resolved to a terminal value.

    Attributes:
        paths_tried (tuple[str, ...]): Dotted representation of every path that was tried.
    """

    paths_tried: tuple[str, ...] = ()

    @property
    def reason(self) -> str:
        return f"none of the candidate paths resolved: {', '.join(self.paths_tried) or '(no paths)'}"


@dataclass(frozen=True)
class ParseFailure:
    """A terminal value was found but is not a valid monetary amount.

    Attributes:
        path (str): Dotted path where the value was found.
        raw_value (Any): The offending value.
        reason (str): Why the value was rejected.
    """

    path: str
    raw_value: Any
    reason: str


ExtractionResult: TypeAlias = MonetaryAmount | NotFound | ParseFailure
EvaluationOutcome: TypeAlias = ThresholdDecision | NotFound | ParseFailure
