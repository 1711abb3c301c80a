import logging
from typing import Any, List, Sequence

import pandas as pd

from free_shipping.domain.outcome import EvaluationOutcome, NotFound, ParseFailure, ThresholdDecision
from free_shipping.rule.free_shipping_rule import FreeShippingRule

logger = logging.getLogger(__name__)

COLUMNS = ["outcome", "met", "minor_units", "currency_code", "path", "reason"]

OUTCOME_MET = "met"
OUTCOME_NOT_MET = "not_met"
OUTCOME_NOT_FOUND = "not_found"
OUTCOME_PARSE_FAILURE = "parse_failure"


def _row(outcome: EvaluationOutcome) -> dict[str, Any]:
    if isinstance(outcome, ThresholdDecision):
        return {
            "outcome": OUTCOME_MET if outcome.met else OUTCOME_NOT_MET,
            "met": outcome.met,
            "minor_units": outcome.amount.minor_units if outcome.amount is not None else None,
            "currency_code": outcome.currency_code,
            "path": None,
            "reason": None,
        }
    if isinstance(outcome, ParseFailure):
        return {
            "outcome": OUTCOME_PARSE_FAILURE,
            "met": False,
            "minor_units": None,
            "currency_code": None,
            "path": outcome.path,
            "reason": outcome.reason,
        }
    return {
        "outcome": OUTCOME_NOT_FOUND,
        "met": False,
        "minor_units": None,
        "currency_code": None,
        "path": None,
        "reason": outcome.reason,
    }


class EvaluationReport:
    """
    Usage:
        Evaluate a batch of recorded cart documents (e.g. replayed from logs) and look at
        how many would get free shipping:

        EvaluationReport(documents).print_report()

        or

        df = EvaluationReport(documents, rule).to_dataframe()
        # one row per document, columns: outcome, met, minor_units, currency_code, path, reason

    Parameters:
        documents: Sequence[Any]
            cart/checkout documents, each evaluated independently
        rule: FreeShippingRule
            rule to evaluate with; defaults to `FreeShippingRule()`
        custom_logger: logging.Logger
            custom logger for printing the report
    """

    def __init__(self, documents: Sequence[Any], rule: FreeShippingRule = None, custom_logger: logging.Logger = None):
        if isinstance(documents, (str, bytes)) or not isinstance(documents, Sequence):
            raise ValueError(f"documents must be a sequence of documents, but is {type(documents)}")
        self.documents = documents
        self.rule = rule if rule is not None else FreeShippingRule()
        self.custom_logger = custom_logger
        self.outcomes: List[EvaluationOutcome] | None = None

    def evaluate(self) -> List[EvaluationOutcome]:
        if self.outcomes is None:
            # Outcomes are pure values; compute once and reuse
            self.outcomes = [self.rule.evaluator.evaluate_document(d) for d in self.documents]
        return self.outcomes

    def to_dataframe(self) -> pd.DataFrame:
        rows = [_row(o) for o in self.evaluate()]
        df = pd.DataFrame(rows, columns=COLUMNS)
        # Nullable integer column; a float column would lose exactness on large amounts
        df["minor_units"] = pd.array([r["minor_units"] for r in rows], dtype="Int64")
        df["met"] = df["met"].astype(bool)
        return df

    def create_report(self) -> List[str]:
        self.log().debug("start calculating report")
        df = self.to_dataframe()
        counts = df["outcome"].value_counts()
        total = len(df)

        met = int(counts.get(OUTCOME_MET, 0))
        not_met = int(counts.get(OUTCOME_NOT_MET, 0))
        not_found = int(counts.get(OUTCOME_NOT_FOUND, 0))
        parse_failure = int(counts.get(OUTCOME_PARSE_FAILURE, 0))

        report = [f"Documents : {total}     Threshold : {self.rule.evaluator.threshold_minor_units} minor units"]
        report.append(f"Met       : {met}     Not met : {not_met}")
        report.append(f"Not found : {not_found}     Parse failures : {parse_failure}")
        rate = 0 if total == 0 else met / total * 100
        report.append(f"Free shipping rate: {rate:.1f}%")

        self.log().debug("end calculating report")
        return report

    def print_report(self):
        r = self.create_report()
        self.log().info("+-------------- Report start ---------------")
        for l in r:
            self.log().info(f"| {l}")
        self.log().info("+-------------- Report end -----------------")

    def log(self) -> logging.Logger:
        if self.custom_logger is not None:
            return self.custom_logger
        else:
            return logger
