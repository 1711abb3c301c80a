from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from free_shipping.domain.amount_unit import AmountUnit
from free_shipping.domain.candidate_path import AnyCandidatePath, CandidatePath, DEFAULT_CANDIDATE_PATHS, LineItemsPath, PathKey
from free_shipping.domain.monetary.decimal_parsing import format_minor_units, major_units_to_minor
from free_shipping.domain.monetary.monetary_amount import MonetaryAmount
from free_shipping.domain.outcome import EvaluationOutcome, NotFound, ParseFailure, ThresholdDecision
from free_shipping.evaluator.money_threshold_evaluator import (
    DEFAULT_CURRENCY_CODE,
    DEFAULT_CURRENCY_KEY,
    MoneyThresholdEvaluator,
)

logger = logging.getLogger(__name__)

# $50.00
DEFAULT_THRESHOLD_MINOR_UNITS = 5000
DEFAULT_TITLE = "Free Shipping"
DEFAULT_OPTION_ID = "free-shipping"

_CONFIG_KEYS = {"threshold", "threshold_minor_units", "paths", "default_currency", "currency_key", "title", "option_id"}


class FreeShippingRule:
    """Free shipping when the cart subtotal reaches a fixed threshold.

    This is the calling workflow around `MoneyThresholdEvaluator`. It applies the
    fail-safe policy: only a met `ThresholdDecision` grants free shipping, while
    `NotFound` and `ParseFailure` never do. Both are logged so they can be told apart.

    Building the platform-specific result payload is left to the caller; this class
    supplies the decision, the zero price in the right currency, and the option
    $title / $option_id to put on it.

    Usage:
        rule = FreeShippingRule()
        price = rule.free_price(document)  # evaluates once; MonetaryAmount(0, "USD") or None
        if price is not None:
            ...  # build the zero-price delivery option with rule.title / rule.option_id

        rule = FreeShippingRule.from_dict({"threshold": "75.00", "default_currency": "EUR"})
    """

    def __init__(
        self,
        threshold_minor_units: int = DEFAULT_THRESHOLD_MINOR_UNITS,
        candidate_paths: Sequence[AnyCandidatePath] = DEFAULT_CANDIDATE_PATHS,
        default_currency: str = DEFAULT_CURRENCY_CODE,
        currency_key: str = DEFAULT_CURRENCY_KEY,
        title: str = DEFAULT_TITLE,
        option_id: str = DEFAULT_OPTION_ID,
    ) -> None:
        # Raise: $title and $option_id end up in the customer-facing payload
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"$title must be a non-empty string, but provided value is: {title!r}")
        if not isinstance(option_id, str) or not option_id.strip():
            raise ValueError(f"$option_id must be a non-empty string, but provided value is: {option_id!r}")

        self._evaluator = MoneyThresholdEvaluator(
            threshold_minor_units=threshold_minor_units,
            candidate_paths=candidate_paths,
            default_currency=default_currency,
            currency_key=currency_key,
        )
        self._title = title.strip()
        self._option_id = option_id.strip()

    # region Configuration

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> FreeShippingRule:
        """Build a rule from a plain mapping, e.g. parsed from a JSON or TOML file.

        Supported keys (all optional):
        - $threshold: amount in major units as decimal string or number ("50.00", 50)
        - $threshold_minor_units: amount in minor units (5000); exclusive with $threshold
        - $paths: list of `{"keys": [...] | "a.b.c", "unit": "major" | "minor"}` or
          `{"lines": [...], "item": [...], "unit": ...}` entries, in priority order
        - $default_currency, $currency_key, $title, $option_id

        Raises:
            TypeError: If $config or one of its values has the wrong type.
            ValueError: If $config contains unknown keys or invalid values.
        """
        if not isinstance(config, Mapping):
            raise TypeError(f"$config must be a mapping, but provided value is: {config!r}")

        unknown = sorted(set(config) - _CONFIG_KEYS)
        if unknown:
            raise ValueError(f"Unknown rule configuration key(s): {unknown}. Supported keys: {sorted(_CONFIG_KEYS)}")

        if "threshold" in config and "threshold_minor_units" in config:
            raise ValueError("Provide either $threshold or $threshold_minor_units, not both")

        kwargs: dict[str, Any] = {}
        if "threshold" in config:
            kwargs["threshold_minor_units"] = major_units_to_minor(config["threshold"])
        if "threshold_minor_units" in config:
            kwargs["threshold_minor_units"] = config["threshold_minor_units"]
        if "paths" in config:
            kwargs["candidate_paths"] = _paths_from_config(config["paths"])
        for key in ("default_currency", "currency_key", "title", "option_id"):
            if key in config:
                kwargs[key] = config[key]

        return cls(**kwargs)

    @property
    def evaluator(self) -> MoneyThresholdEvaluator:
        return self._evaluator

    @property
    def threshold_minor_units(self) -> int:
        return self._evaluator.threshold_minor_units

    @property
    def title(self) -> str:
        return self._title

    @property
    def option_id(self) -> str:
        return self._option_id

    # endregion

    # region Decisions

    def decide(self, document: Any) -> EvaluationOutcome:
        """Evaluate $document and log the outcome.

        Returns:
            The evaluator outcome unchanged, so callers can inspect why free shipping was
            not granted.
        """
        outcome = self._evaluator.evaluate_document(document)

        if isinstance(outcome, ThresholdDecision):
            logger.debug(
                f"Subtotal {outcome.amount} vs threshold {format_minor_units(self.threshold_minor_units)}: "
                f"{'met' if outcome.met else 'not met'}"
            )
        elif isinstance(outcome, ParseFailure):
            logger.warning(f"Subtotal at '{outcome.path}' could not be parsed ({outcome.reason}); no free shipping")
        elif isinstance(outcome, NotFound):
            logger.info("Subtotal not found in input; no free shipping")

        return outcome

    def qualifies(self, document: Any) -> bool:
        """True only when the subtotal was found, parsed, and reached the threshold."""
        outcome = self.decide(document)
        return isinstance(outcome, ThresholdDecision) and outcome.met

    def free_price(self, document: Any) -> MonetaryAmount | None:
        """Zero shipping price in the subtotal currency, or None when not qualified."""
        outcome = self.decide(document)
        if isinstance(outcome, ThresholdDecision) and outcome.met:
            return outcome.zero_price()
        return None

    # endregion

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(threshold='{format_minor_units(self.threshold_minor_units)}', option_id='{self._option_id}')"


def _keys_from_config(value: Any, name: str) -> tuple[PathKey, ...]:
    # Dotted form "cart.lines.0.amount"; all-digit segments index into lists
    if isinstance(value, str):
        return tuple(int(part) if part.isascii() and part.isdigit() else part for part in value.split("."))
    if isinstance(value, Sequence):
        return tuple(value)
    raise TypeError(f"${name} must be a dotted string or a list of keys, but provided value is: {value!r}")


def _paths_from_config(paths: Any) -> tuple[AnyCandidatePath, ...]:
    if isinstance(paths, str) or not isinstance(paths, Sequence):
        raise TypeError(f"$paths must be a list, but provided value is: {paths!r}")

    result: list[AnyCandidatePath] = []
    for item in paths:
        if not isinstance(item, Mapping):
            raise TypeError(f"Every item in $paths must be a mapping, but found: {item!r}")

        unit = AmountUnit.from_str(item.get("unit", AmountUnit.MAJOR.value))
        if "lines" in item:
            if "item" not in item:
                raise ValueError(f"Line items path {dict(item)} must define $item keys")
            result.append(LineItemsPath(_keys_from_config(item["lines"], "lines"), _keys_from_config(item["item"], "item"), unit))
        elif "keys" in item:
            result.append(CandidatePath(_keys_from_config(item["keys"], "keys"), unit))
        else:
            raise ValueError(f"Path {dict(item)} must define either $keys or $lines")

    return tuple(result)
