from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from free_shipping.domain.amount_unit import AmountUnit
from free_shipping.domain.candidate_path import (
    AnyCandidatePath,
    CandidatePath,
    DEFAULT_CANDIDATE_PATHS,
    LineItemsPath,
    PathKey,
    as_candidate_path,
    format_keys,
)
from free_shipping.domain.monetary.currency_code import is_valid_currency_code, normalize_currency_code
from free_shipping.domain.monetary.decimal_parsing import (
    AmountParseError,
    major_units_to_minor,
    minor_units_from_number,
    parse_decimal_string,
)
from free_shipping.domain.monetary.monetary_amount import MonetaryAmount
from free_shipping.domain.outcome import (
    EvaluationOutcome,
    ExtractionResult,
    NotFound,
    ParseFailure,
    ThresholdDecision,
)
from free_shipping.utils.numeric_tools import is_integral_number

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY_CODE = "USD"
DEFAULT_CURRENCY_KEY = "currencyCode"

# Marks a key that is absent from the document
_MISSING = object()


# region Traversal


def _child(node: Any, key: PathKey) -> Any:
    if isinstance(key, str):
        if isinstance(node, Mapping):
            return node.get(key, _MISSING)
        return _MISSING

    # Integer keys index into lists; strings are sequences too, but never containers here
    if isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
        if 0 <= key < len(node):
            return node[key]
    return _MISSING


def _traverse(node: Any, keys: Sequence[PathKey]) -> tuple[Any, Any]:
    """Walk $keys from $node and return (parent, value).

    Returns (_MISSING, _MISSING) when any key is absent. A `None` intermediate node
    (JSON null) counts as absent; a `None` terminal value is returned as found.
    """
    parent: Any = _MISSING
    current = node
    for key in keys:
        if current is None:
            return _MISSING, _MISSING
        parent = current
        current = _child(current, key)
        if current is _MISSING:
            return _MISSING, _MISSING
    return parent, current


# endregion

# region Conversion


def _to_amount(
    value: Any,
    parent: Any,
    unit: AmountUnit,
    keys: Sequence[PathKey],
    default_currency: str,
    currency_key: str,
) -> MonetaryAmount | ParseFailure:
    """Turn a terminal $value into a `MonetaryAmount`, or describe why it cannot be one."""
    path = format_keys(keys)
    try:
        # Decimal text is always major units; only numbers follow the declared unit
        if isinstance(value, str):
            minor_units = parse_decimal_string(value)
        elif unit is AmountUnit.MINOR:
            minor_units = minor_units_from_number(value)
        else:
            minor_units = major_units_to_minor(value)
    except AmountParseError as e:
        return ParseFailure(path=path, raw_value=value, reason=e.reason)

    currency_code = default_currency
    if isinstance(parent, Mapping):
        raw_currency = parent.get(currency_key)
        if raw_currency is not None:
            # Check: a present currency must be valid; defaulting it would mislabel the amount
            if not is_valid_currency_code(raw_currency):
                currency_path = format_keys(tuple(keys[:-1]) + (currency_key,))
                return ParseFailure(path=currency_path, raw_value=raw_currency, reason="it is not a 3-letter currency code")
            currency_code = raw_currency

    return MonetaryAmount(minor_units, currency_code)


def _extract_single(
    document: Any,
    path: CandidatePath,
    default_currency: str,
    currency_key: str,
) -> ExtractionResult | None:
    parent, value = _traverse(document, path.keys)
    if value is _MISSING:
        return None
    return _to_amount(value, parent, path.unit, path.keys, default_currency, currency_key)


def _extract_line_items(
    document: Any,
    path: LineItemsPath,
    default_currency: str,
    currency_key: str,
) -> ExtractionResult | None:
    _, lines = _traverse(document, path.lines_keys)
    if lines is _MISSING:
        return None

    # Check: line items must be a list (a JSON array)
    if not isinstance(lines, Sequence) or isinstance(lines, (str, bytes)):
        return ParseFailure(path=format_keys(path.lines_keys), raw_value=lines, reason="line items are not a list")

    total_minor_units = 0
    currency_code: str | None = None
    for index, line in enumerate(lines):
        item_keys = path.lines_keys + (index,) + path.item_keys
        parent, value = _traverse(line, path.item_keys)
        if value is _MISSING:
            return ParseFailure(path=format_keys(item_keys), raw_value=line, reason="line item has no amount")

        line_amount = _to_amount(value, parent, path.unit, item_keys, default_currency, currency_key)
        if isinstance(line_amount, ParseFailure):
            return line_amount

        # Check: amounts in different currencies cannot be summed
        if currency_code is None:
            currency_code = line_amount.currency_code
        elif line_amount.currency_code != currency_code:
            return ParseFailure(
                path=format_keys(item_keys),
                raw_value=line_amount.currency_code,
                reason=f"line item currency differs from previous lines ({currency_code})",
            )
        total_minor_units += line_amount.minor_units

    return MonetaryAmount(total_minor_units, currency_code or default_currency)


# endregion

# region Public API


def extract_amount(
    document: Any,
    candidate_paths: Sequence[AnyCandidatePath | Sequence[PathKey]] = DEFAULT_CANDIDATE_PATHS,
    default_currency: str = DEFAULT_CURRENCY_CODE,
    currency_key: str = DEFAULT_CURRENCY_KEY,
) -> ExtractionResult:
    """Find the first parseable monetary amount in $document.

    Candidate paths are tried in order. A path whose keys are absent is skipped. A path
    that resolves to a value which cannot be parsed is remembered and the next path is
    tried, so the first successfully parsed amount wins.

    The currency is read from the $currency_key sibling of the amount (for example
    `cart.cost.subtotalAmount.currencyCode`), falling back to $default_currency.

    Args:
        document: Tree of mappings, sequences and scalars (e.g. `json.loads` output).
        candidate_paths: Paths in priority order. A plain sequence of keys is read as a
            `CandidatePath` in major units.
        default_currency: Currency used when the document does not state one.
        currency_key: Key of the currency code next to the amount.

    Returns:
        `MonetaryAmount` for the first parseable path; otherwise the first `ParseFailure`
        met on the way, or `NotFound` when no path resolved at all.

    Raises:
        TypeError | ValueError: If $default_currency is not a valid currency code or a path
            is malformed. Document content never raises.
    """
    default_currency = normalize_currency_code(default_currency)
    candidate_paths = tuple(as_candidate_path(p) for p in candidate_paths)

    first_failure: ParseFailure | None = None
    for path in candidate_paths:
        if isinstance(path, LineItemsPath):
            result = _extract_line_items(document, path, default_currency, currency_key)
        else:
            result = _extract_single(document, path, default_currency, currency_key)

        if result is None:
            logger.debug(f"Candidate path '{path}' not present in document")
            continue
        if isinstance(result, ParseFailure):
            logger.debug(f"Candidate path '{path}' resolved but failed to parse: {result.reason}")
            if first_failure is None:
                first_failure = result
            continue
        return result

    if first_failure is not None:
        return first_failure
    return NotFound(paths_tried=tuple(str(p) for p in candidate_paths))


def evaluate(amount: MonetaryAmount, threshold_minor_units: int) -> ThresholdDecision:
    """Compare $amount against $threshold_minor_units.

    The threshold is met when `amount.minor_units >= threshold_minor_units`; an amount of
    exactly $50.00 qualifies for a $50.00 threshold.

    Raises:
        TypeError: If $amount is not a `MonetaryAmount` or $threshold_minor_units is not an int.
    """
    # Raise: inputs are programming contracts, not document content
    if not isinstance(amount, MonetaryAmount):
        raise TypeError(f"$amount must be a MonetaryAmount, but provided value is: {amount!r}")
    if not is_integral_number(threshold_minor_units):
        raise TypeError(f"$threshold_minor_units must be an int, but provided value is: {threshold_minor_units!r}")

    return ThresholdDecision(
        met=amount.minor_units >= threshold_minor_units,
        currency_code=amount.currency_code,
        amount=amount,
        threshold_minor_units=threshold_minor_units,
    )


class MoneyThresholdEvaluator:
    """Extracts an amount from a document and compares it to a fixed threshold.

    One configured instance can evaluate any number of documents; it keeps no state
    between calls.

    Args:
        threshold_minor_units: Threshold in minor units (5000 for $50.00).
        candidate_paths: Paths tried in order to locate the amount.
        default_currency: Currency used when the document does not state one.
        currency_key: Key of the currency code next to the amount.
    """

    __slots__ = ("_threshold_minor_units", "_candidate_paths", "_default_currency", "_currency_key")

    def __init__(
        self,
        threshold_minor_units: int,
        candidate_paths: Sequence[AnyCandidatePath | Sequence[PathKey]] = DEFAULT_CANDIDATE_PATHS,
        default_currency: str = DEFAULT_CURRENCY_CODE,
        currency_key: str = DEFAULT_CURRENCY_KEY,
    ) -> None:
        # Raise: threshold must be whole minor units
        if not is_integral_number(threshold_minor_units):
            raise TypeError(f"$threshold_minor_units must be an int, but provided value is: {threshold_minor_units!r}")

        paths = tuple(as_candidate_path(p) for p in candidate_paths)
        # Raise: an evaluator without paths could never find anything
        if not paths:
            raise ValueError("$candidate_paths cannot be empty")

        if not isinstance(currency_key, str) or not currency_key:
            raise ValueError(f"$currency_key must be a non-empty string, but provided value is: {currency_key!r}")

        self._threshold_minor_units = threshold_minor_units
        self._candidate_paths = paths
        self._default_currency = normalize_currency_code(default_currency)
        self._currency_key = currency_key

    @property
    def threshold_minor_units(self) -> int:
        return self._threshold_minor_units

    @property
    def candidate_paths(self) -> tuple[AnyCandidatePath, ...]:
        return self._candidate_paths

    @property
    def default_currency(self) -> str:
        return self._default_currency

    @property
    def currency_key(self) -> str:
        return self._currency_key

    def extract_amount(self, document: Any) -> ExtractionResult:
        return extract_amount(document, self._candidate_paths, self._default_currency, self._currency_key)

    def evaluate_document(self, document: Any) -> EvaluationOutcome:
        """Extract the amount from $document and evaluate it against the threshold.

        Returns:
            `ThresholdDecision` when an amount was found, otherwise the `NotFound` or
            `ParseFailure` explaining why not.
        """
        extracted = self.extract_amount(document)
        if isinstance(extracted, MonetaryAmount):
            return evaluate(extracted, self._threshold_minor_units)
        return extracted

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(threshold_minor_units={self._threshold_minor_units}, paths={len(self._candidate_paths)}, default_currency='{self._default_currency}')"


# endregion
