"""Output rendering tests."""

from __future__ import annotations

import json
from dataclasses import replace

import click

from contract_audit.audit import run_audit, run_quick_scan
from contract_audit.output import (
    build_audit_payload,
    build_quick_scan_payload,
    render_audit_human,
    render_audit_json,
    render_quick_scan_human,
)
from tests.helpers_contracts import CLEAN_COUNTER, VULNERABLE_WALLET


def test_audit_payload_has_stable_schema_keys() -> None:
    payload = json.loads(render_audit_json(run_audit(VULNERABLE_WALLET + "uint8 x;\n")))
    assert set(payload.keys()) == {
        "auditId",
        "status",
        "summary",
        "findings",
        "gasOptimizations",
        "score",
        "timestamp",
        "reportUrl",
    }
    assert payload["status"] == "completed"
    assert payload["score"] == 6.0
    assert payload["timestamp"].endswith("Z")
    assert payload["reportUrl"].endswith(payload["auditId"])
    assert set(payload["summary"].keys()) == {"critical", "high", "medium", "low", "informational"}

    first_finding = payload["findings"][0]
    assert set(first_finding.keys()) == {
        "severity",
        "category",
        "title",
        "description",
        "line",
        "recommendation",
        "codeSnippet",
    }
    assert first_finding["line"] == 10

    first_optimization = payload["gasOptimizations"][0]
    assert set(first_optimization.keys()) == {
        "title",
        "potentialSavings",
        "description",
        "recommendation",
    }
    assert first_optimization["potentialSavings"] == "2000 gas per transaction"


def test_code_snippet_is_omitted_when_absent() -> None:
    result = run_audit(VULNERABLE_WALLET)
    result.findings[0] = replace(result.findings[0], snippet=None)
    payload = build_audit_payload(result)
    assert "codeSnippet" not in payload["findings"][0]
    assert "codeSnippet" in payload["findings"][1]


def test_quick_scan_payload_shape() -> None:
    payload = build_quick_scan_payload(run_quick_scan(VULNERABLE_WALLET))
    assert payload == {
        "criticalIssues": [
            {"type": "reentrancy", "message": "Potential reentrancy vulnerability"},
            {"type": "tx_origin", "message": "Use of tx.origin for authorization"},
        ],
        "issueCount": 2,
        "recommendation": "block",
    }


def test_render_human_lists_findings_and_score() -> None:
    output = click.unstyle(render_audit_human(run_audit(VULNERABLE_WALLET)))
    assert "Overall score: 6.0/10 (MEDIUM risk)" in output
    assert "Security findings:" in output
    assert "[tx_origin] Use of tx.origin for authorization (line 16)" in output
    assert "Gas optimizations:" not in output


def test_render_quick_scan_human_clean() -> None:
    output = click.unstyle(render_quick_scan_human(run_quick_scan(CLEAN_COUNTER)))
    assert "Critical issues found: 0" in output
    assert "Recommendation: proceed with caution" in output
