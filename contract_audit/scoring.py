"""Severity aggregation and risk scoring."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from contract_audit.rules.base import Finding

MAX_SCORE = 10.0

# Deduction per finding; informational findings never reduce the score.
SEVERITY_PENALTIES: dict[str, float] = {
    "critical": 3.0,
    "high": 2.0,
    "medium": 1.0,
    "low": 0.5,
    "informational": 0.0,
}


@dataclass(slots=True)
class AuditSummary:
    """Finding counts per severity bucket."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    informational: int = 0

    @property
    def total(self) -> int:
        return self.critical + self.high + self.medium + self.low + self.informational

    def to_dict(self) -> dict[str, int]:
        return {
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
            "informational": self.informational,
        }


def summarize(findings: Iterable[Finding]) -> AuditSummary:
    """Count findings by severity; findings without a severity are skipped."""
    summary = AuditSummary()
    for finding in findings:
        if finding.severity in SEVERITY_PENALTIES:
            setattr(summary, finding.severity, getattr(summary, finding.severity) + 1)
    return summary


def risk_score(summary: AuditSummary) -> float:
    """Return the bounded 0-10 risk score, rounded to one decimal place."""
    deductions = sum(
        SEVERITY_PENALTIES[severity] * max(0, count)
        for severity, count in summary.to_dict().items()
    )
    return round(_clamp(MAX_SCORE - deductions, lower=0.0, upper=MAX_SCORE), 1)


def score_label(score: float) -> tuple[str, str]:
    """Map a risk score to a risk band and display colour."""
    if score >= 8.0:
        return ("LOW", "green")
    if score >= 5.0:
        return ("MEDIUM", "yellow")
    return ("HIGH", "red")


def _clamp(value: float, *, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
