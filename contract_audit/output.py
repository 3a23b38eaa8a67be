"""Output rendering."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import click

from contract_audit.audit import AuditResult, QuickScanResult
from contract_audit.optimization import OptimizationSuggestion
from contract_audit.rules.base import Finding
from contract_audit.scoring import score_label

_SEVERITY_COLORS = {
    "critical": "magenta",
    "high": "red",
    "medium": "yellow",
    "low": "cyan",
    "informational": "white",
}


def build_audit_payload(result: AuditResult) -> dict[str, Any]:
    """Build the camelCase full-audit record consumed by API clients."""
    return {
        "auditId": result.audit_id,
        "status": result.status,
        "summary": result.summary.to_dict(),
        "findings": [_serialize_finding(item) for item in result.findings],
        "gasOptimizations": [_serialize_optimization(item) for item in result.optimizations],
        "score": result.score,
        "timestamp": _isoformat(result.timestamp),
        "reportUrl": result.report_url,
    }


def build_quick_scan_payload(result: QuickScanResult) -> dict[str, Any]:
    """Build the quick-scan record consumed by API clients."""
    return {
        "criticalIssues": [
            {"type": finding.rule_id, "message": finding.title} for finding in result.findings
        ],
        "issueCount": result.issue_count,
        "recommendation": result.recommendation,
    }


def render_audit_json(result: AuditResult) -> str:
    """Render stable JSON output for CI and automation."""
    return json.dumps(build_audit_payload(result), sort_keys=True)


def render_quick_scan_json(result: QuickScanResult) -> str:
    return json.dumps(build_quick_scan_payload(result), sort_keys=True)


def render_audit_human(result: AuditResult) -> str:
    """Render a compact colorized audit report."""
    band, color = score_label(result.score)
    summary = result.summary
    lines: list[str] = [
        click.style(f"Overall score: {result.score}/10 ({band} risk)", fg=color, bold=True),
        (
            f"Critical: {summary.critical}  High: {summary.high}  Medium: {summary.medium}  "
            f"Low: {summary.low}  Informational: {summary.informational}"
        ),
    ]

    if result.findings:
        lines.append(click.style("Security findings:", bold=True))
        for index, finding in enumerate(result.findings, start=1):
            lines.extend(_finding_lines(index, finding))

    if result.optimizations:
        lines.append(click.style("Gas optimizations:", bold=True))
        for index, suggestion in enumerate(result.optimizations, start=1):
            lines.append(f"{index}. {suggestion.title} ({suggestion.impact})")
            lines.append(f"   follow-up: {suggestion.recommendation}")

    lines.append(f"Audit ID: {result.audit_id}")
    lines.append(f"Report: {result.report_url}")
    return "\n".join(lines)


def render_quick_scan_human(result: QuickScanResult) -> str:
    color = "red" if result.should_block else "green"
    lines = [click.style(f"Critical issues found: {result.issue_count}", fg=color, bold=True)]
    for index, finding in enumerate(result.findings, start=1):
        lines.extend(_finding_lines(index, finding))
    lines.append(f"Recommendation: {result.recommendation}")
    return "\n".join(lines)


def _finding_lines(index: int, finding: Finding) -> list[str]:
    severity = (finding.severity or "informational").upper()
    color = _SEVERITY_COLORS.get(finding.severity or "informational", "white")
    lines = [
        f"{index}. {click.style(severity, fg=color, bold=True)} [{finding.rule_id}] "
        f"{finding.title} (line {finding.line})"
    ]
    if finding.snippet:
        lines.append(f"   code: {finding.snippet}")
    lines.append(f"   follow-up: {finding.recommendation}")
    return lines


def _serialize_finding(finding: Finding) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "severity": finding.severity,
        "category": finding.category,
        "title": finding.title,
        "description": finding.description,
        "line": finding.line,
        "recommendation": finding.recommendation,
    }
    if finding.snippet is not None:
        payload["codeSnippet"] = finding.snippet
    return payload


def _serialize_optimization(suggestion: OptimizationSuggestion) -> dict[str, Any]:
    return {
        "title": suggestion.title,
        "potentialSavings": suggestion.impact,
        "description": suggestion.description,
        "recommendation": suggestion.recommendation,
    }


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
