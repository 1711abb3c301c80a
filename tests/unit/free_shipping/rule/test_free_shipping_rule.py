from __future__ import annotations

import json
import logging

import pytest

from free_shipping.domain.amount_unit import AmountUnit
from free_shipping.domain.candidate_path import CandidatePath, DEFAULT_CANDIDATE_PATHS, LineItemsPath
from free_shipping.domain.monetary.monetary_amount import MonetaryAmount
from free_shipping.domain.outcome import NotFound, ParseFailure, ThresholdDecision
from free_shipping.rule.free_shipping_rule import FreeShippingRule


def cart(amount, currency_code: str = "USD") -> dict:
    return {"cart": {"cost": {"subtotalAmount": {"amount": amount, "currencyCode": currency_code}}}}


def test_default_rule_is_free_shipping_over_50() -> None:
    rule = FreeShippingRule()
    assert rule.threshold_minor_units == 5000
    assert rule.evaluator.candidate_paths == DEFAULT_CANDIDATE_PATHS
    assert rule.title == "Free Shipping"
    assert rule.option_id == "free-shipping"


@pytest.mark.parametrize(
    "amount, qualifies",
    [("50.00", True), ("49.99", False), ("50", True), ("120.10", True), ("0.00", False), ("-60.00", False)],
)
def test_qualifies(amount: str, qualifies: bool) -> None:
    assert FreeShippingRule().qualifies(cart(amount)) is qualifies


def test_missing_or_malformed_subtotal_never_qualifies() -> None:
    rule = FreeShippingRule()
    assert rule.qualifies({}) is False
    assert rule.qualifies(cart("lots")) is False
    assert rule.free_price({}) is None
    assert rule.free_price(cart("lots")) is None


def test_oversized_subtotal_never_qualifies() -> None:
    rule = FreeShippingRule()
    assert rule.qualifies(cart("9" * 5000)) is False
    assert isinstance(rule.decide(cart("9" * 5000)), ParseFailure)


def test_free_price_is_zero_in_subtotal_currency() -> None:
    rule = FreeShippingRule()
    assert rule.free_price(cart("75.00", "EUR")) == MonetaryAmount(0, "EUR")
    assert rule.free_price(cart("49.99", "EUR")) is None
    assert rule.free_price(cart("75.00", "EUR")).to_decimal_str() == "0.00"


def test_decide_returns_distinguishable_outcomes() -> None:
    rule = FreeShippingRule()
    assert isinstance(rule.decide(cart("60.00")), ThresholdDecision)
    assert isinstance(rule.decide({}), NotFound)
    assert isinstance(rule.decide(cart("sixty")), ParseFailure)


def test_decide_logs_not_found_and_parse_failure(caplog: pytest.LogCaptureFixture) -> None:
    rule = FreeShippingRule()
    with caplog.at_level(logging.DEBUG, logger="free_shipping.rule.free_shipping_rule"):
        rule.decide({})
        rule.decide(cart("sixty"))
        rule.decide(cart("60.00"))

    records = [r for r in caplog.records if r.name == "free_shipping.rule.free_shipping_rule"]
    assert [r.levelno for r in records] == [logging.INFO, logging.WARNING, logging.DEBUG]
    assert "Subtotal not found" in records[0].getMessage()
    assert "cart.cost.subtotalAmount.amount" in records[1].getMessage()
    assert "60.00 USD" in records[2].getMessage()


@pytest.mark.parametrize("kwargs", [{"title": ""}, {"option_id": "  "}, {"title": None}])
def test_rule_validates_labels(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        FreeShippingRule(**kwargs)


# region from_dict


def test_from_dict_empty_uses_defaults() -> None:
    rule = FreeShippingRule.from_dict({})
    assert rule.threshold_minor_units == 5000
    assert rule.evaluator.default_currency == "USD"


@pytest.mark.parametrize("threshold, expected", [("75.00", 7500), ("75.5", 7550), (75, 7500), (75.25, 7525)])
def test_from_dict_threshold_in_major_units(threshold: object, expected: int) -> None:
    assert FreeShippingRule.from_dict({"threshold": threshold}).threshold_minor_units == expected


def test_from_dict_threshold_in_minor_units() -> None:
    assert FreeShippingRule.from_dict({"threshold_minor_units": 2500}).threshold_minor_units == 2500


def test_from_dict_rejects_both_thresholds() -> None:
    with pytest.raises(ValueError):
        FreeShippingRule.from_dict({"threshold": "50", "threshold_minor_units": 5000})


def test_from_dict_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError, match="treshold"):
        FreeShippingRule.from_dict({"treshold": "50"})


def test_from_dict_rejects_bad_threshold() -> None:
    with pytest.raises(ValueError):
        FreeShippingRule.from_dict({"threshold": "fifty"})
    with pytest.raises(TypeError):
        FreeShippingRule.from_dict({"threshold_minor_units": "5000"})


def test_from_dict_paths() -> None:
    config = json.loads(
        """
        {
            "threshold": "50.00",
            "default_currency": "CAD",
            "title": "Free delivery",
            "option_id": "free-delivery",
            "paths": [
                {"keys": ["cart", "cost", "subtotalAmount", "amount"]},
                {"keys": "cart.subtotalCents", "unit": "minor"},
                {"lines": "cart.lines", "item": ["cost", "totalAmount", "amount"]}
            ]
        }
        """
    )
    rule = FreeShippingRule.from_dict(config)
    assert rule.evaluator.candidate_paths == (
        CandidatePath(("cart", "cost", "subtotalAmount", "amount")),
        CandidatePath(("cart", "subtotalCents"), AmountUnit.MINOR),
        LineItemsPath(("cart", "lines"), ("cost", "totalAmount", "amount")),
    )
    assert rule.title == "Free delivery"
    assert rule.option_id == "free-delivery"
    assert rule.free_price({"cart": {"subtotalCents": 5000}}) == MonetaryAmount(0, "CAD")


def test_from_dict_dotted_keys_with_index() -> None:
    rule = FreeShippingRule.from_dict({"paths": [{"keys": "cart.lines.0.amount"}]})
    assert rule.evaluator.candidate_paths == (CandidatePath(("cart", "lines", 0, "amount")),)


def test_from_dict_non_ascii_digit_segment_stays_a_key() -> None:
    rule = FreeShippingRule.from_dict({"paths": [{"keys": "cart.\u00b2.amount"}]})
    assert rule.evaluator.candidate_paths == (CandidatePath(("cart", "\u00b2", "amount")),)


@pytest.mark.parametrize(
    "paths, error",
    [
        ("cart.amount", TypeError),
        ([["cart", "amount"]], TypeError),
        ([{"unit": "major"}], ValueError),
        ([{"lines": ["cart", "lines"]}], ValueError),
        ([{"keys": ["cart"], "unit": "cents"}], ValueError),
        ([], ValueError),
    ],
)
def test_from_dict_rejects_bad_paths(paths: object, error: type[Exception]) -> None:
    with pytest.raises(error):
        FreeShippingRule.from_dict({"paths": paths})


def test_from_dict_requires_mapping() -> None:
    with pytest.raises(TypeError):
        FreeShippingRule.from_dict([("threshold", "50")])  # type: ignore[arg-type]


# endregion
