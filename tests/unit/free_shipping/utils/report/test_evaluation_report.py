import logging

import pandas as pd
import pytest

from free_shipping.rule.free_shipping_rule import FreeShippingRule
from free_shipping.utils.report.evaluation_report import EvaluationReport

# Constants
DOCUMENTS = [
    {"cart": {"cost": {"subtotalAmount": {"amount": "50.00", "currencyCode": "USD"}}}},
    {"cart": {"cost": {"subtotalAmount": {"amount": "49.99", "currencyCode": "EUR"}}}},
    {},
    {"cart": {"cost": {"subtotalAmount": {"amount": "n/a", "currencyCode": "USD"}}}},
]


def test_to_dataframe_one_row_per_document():
    df = EvaluationReport(DOCUMENTS).to_dataframe()
    assert list(df.columns) == ["outcome", "met", "minor_units", "currency_code", "path", "reason"]
    assert list(df["outcome"]) == ["met", "not_met", "not_found", "parse_failure"]
    assert list(df["met"]) == [True, False, False, False]
    assert df["minor_units"].iloc[0] == 5000
    assert df["minor_units"].iloc[1] == 4999
    assert pd.isna(df["minor_units"].iloc[2])
    assert df["currency_code"].iloc[1] == "EUR"
    assert df["path"].iloc[3] == "cart.cost.subtotalAmount.amount"
    assert df["minor_units"].dtype == "Int64"


def test_to_dataframe_empty():
    df = EvaluationReport([]).to_dataframe()
    assert len(df) == 0
    assert list(df.columns) == ["outcome", "met", "minor_units", "currency_code", "path", "reason"]


def test_create_report_counts():
    report = EvaluationReport(DOCUMENTS, FreeShippingRule()).create_report()
    assert report[0].startswith("Documents : 4")
    assert "Met       : 1" in report[1]
    assert "Not met : 1" in report[1]
    assert "Not found : 1" in report[2]
    assert "Parse failures : 1" in report[2]
    assert report[3] == "Free shipping rate: 25.0%"


def test_custom_rule_changes_outcomes():
    report = EvaluationReport(DOCUMENTS, FreeShippingRule.from_dict({"threshold": "40"}))
    assert list(report.to_dataframe()["met"]) == [True, True, False, False]


def test_print_report_uses_custom_logger(caplog):
    custom = logging.getLogger("evaluation-report-test")
    with caplog.at_level(logging.INFO, logger="evaluation-report-test"):
        EvaluationReport(DOCUMENTS, custom_logger=custom).print_report()
    messages = [r.getMessage() for r in caplog.records if r.name == "evaluation-report-test"]
    assert messages[0].startswith("+-------------- Report start")
    assert messages[-1].startswith("+-------------- Report end")
    assert any("Free shipping rate: 25.0%" in m for m in messages)


def test_documents_must_be_a_sequence():
    with pytest.raises(ValueError):
        EvaluationReport("not documents")
