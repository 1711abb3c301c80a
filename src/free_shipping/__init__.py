__version__ = "0.1.0"

from free_shipping.domain.amount_unit import AmountUnit
from free_shipping.domain.candidate_path import CandidatePath, LineItemsPath, DEFAULT_CANDIDATE_PATHS
from free_shipping.domain.monetary.decimal_parsing import AmountParseError, parse_decimal_string
from free_shipping.domain.monetary.monetary_amount import MonetaryAmount
from free_shipping.domain.outcome import NotFound, ParseFailure, ThresholdDecision
from free_shipping.evaluator.money_threshold_evaluator import MoneyThresholdEvaluator, evaluate, extract_amount
from free_shipping.rule.free_shipping_rule import FreeShippingRule

__all__ = [
    "AmountParseError",
    "AmountUnit",
    "CandidatePath",
    "DEFAULT_CANDIDATE_PATHS",
    "FreeShippingRule",
    "LineItemsPath",
    "MonetaryAmount",
    "MoneyThresholdEvaluator",
    "NotFound",
    "ParseFailure",
    "ThresholdDecision",
    "evaluate",
    "extract_amount",
    "parse_decimal_string",
]
