"""Tests for severity aggregation and risk scoring."""

from __future__ import annotations

import pytest

from contract_audit.rules.base import Finding
from contract_audit.scoring import AuditSummary, risk_score, score_label, summarize


def test_summarize_counts_every_bucket() -> None:
    findings = [
        _finding("critical"),
        _finding("high"),
        _finding("high"),
        _finding("low"),
        _finding("informational"),
    ]
    summary = summarize(findings)
    assert summary.to_dict() == {
        "critical": 1,
        "high": 2,
        "medium": 0,
        "low": 1,
        "informational": 1,
    }
    assert summary.total == 5


def test_summarize_empty_has_all_buckets_zeroed() -> None:
    assert summarize([]).to_dict() == {
        "critical": 0,
        "high": 0,
        "medium": 0,
        "low": 0,
        "informational": 0,
    }


@pytest.mark.parametrize(
    ("summary", "expected"),
    [
        (AuditSummary(), 10.0),
        (AuditSummary(high=1), 8.0),
        (AuditSummary(high=2), 6.0),
        (AuditSummary(critical=1, medium=1, low=1), 5.5),
        (AuditSummary(low=3), 8.5),
        (AuditSummary(informational=50), 10.0),
        (AuditSummary(critical=4), 0.0),
        (AuditSummary(critical=100, high=100), 0.0),
    ],
)
def test_risk_score_formula(summary: AuditSummary, expected: float) -> None:
    assert risk_score(summary) == expected


def test_risk_score_is_bounded_and_non_increasing() -> None:
    for severity in ("critical", "high", "medium", "low", "informational"):
        previous = risk_score(AuditSummary())
        for count in range(0, 25):
            current = risk_score(AuditSummary(**{severity: count}))
            assert 0.0 <= current <= 10.0
            assert current <= previous
            previous = current


def test_risk_score_tolerates_negative_counts() -> None:
    assert risk_score(AuditSummary(high=-3)) == 10.0


def test_score_label_bands() -> None:
    assert score_label(10.0)[0] == "LOW"
    assert score_label(6.0)[0] == "MEDIUM"
    assert score_label(2.5)[0] == "HIGH"


def _finding(severity: str) -> Finding:
    return Finding(
        rule_id=f"rule_{severity}",
        category="security",
        severity=severity,
        title="t",
        description="d",
        recommendation="r",
        line=1,
    )
