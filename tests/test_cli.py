"""CLI tests."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from contract_audit import __version__
from contract_audit.cli import SCAN_ERROR_EXIT_CODE, app
from tests.helpers_contracts import CLEAN_COUNTER, VULNERABLE_WALLET

runner = CliRunner()


def test_root_help_works() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Scan smart-contract source" in result.stdout
    assert "audit" in result.stdout
    assert "quick-scan" in result.stdout
    assert "config-init" in result.stdout


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_audit_json_from_file(tmp_path: Path) -> None:
    contract = _write(tmp_path, "Wallet.sol", VULNERABLE_WALLET)
    result = runner.invoke(
        app, ["audit", str(contract), "--repo", str(tmp_path), "--format", "json"]
    )
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["score"] == 6.0
    assert payload["summary"]["high"] == 2
    assert [item["line"] for item in payload["findings"]] == [10, 16]


def test_audit_reads_stdin(tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        ["audit", "--stdin", "--repo", str(tmp_path), "--format", "json"],
        input="uint8 public x;\nstring public name;\n",
    )
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["findings"] == []
    assert len(payload["gasOptimizations"]) == 2


def test_audit_no_security_flag_skips_findings(tmp_path: Path) -> None:
    contract = _write(tmp_path, "Wallet.sol", VULNERABLE_WALLET)
    result = runner.invoke(
        app,
        ["audit", str(contract), "--repo", str(tmp_path), "--format", "json", "--no-security"],
    )
    assert result.exit_code == 0
    assert json.loads(result.stdout)["score"] == 10.0


def test_audit_fail_below_sets_exit_code(tmp_path: Path) -> None:
    contract = _write(tmp_path, "Wallet.sol", VULNERABLE_WALLET)
    failing = runner.invoke(
        app, ["audit", str(contract), "--repo", str(tmp_path), "--fail-below", "7"]
    )
    assert failing.exit_code == 1
    assert "Overall score: 6.0/10" in failing.stdout

    passing = runner.invoke(
        app, ["audit", str(contract), "--repo", str(tmp_path), "--fail-below", "6"]
    )
    assert passing.exit_code == 0


def test_audit_rejects_empty_source(tmp_path: Path) -> None:
    contract = _write(tmp_path, "Empty.sol", "   \n")
    result = runner.invoke(app, ["audit", str(contract), "--repo", str(tmp_path)])
    assert result.exit_code == 2


def test_audit_requires_a_source(tmp_path: Path) -> None:
    result = runner.invoke(app, ["audit", "--repo", str(tmp_path)])
    assert result.exit_code == 2


def test_quick_scan_exit_codes(tmp_path: Path) -> None:
    vulnerable = _write(tmp_path, "Wallet.sol", VULNERABLE_WALLET)
    blocked = runner.invoke(
        app, ["quick-scan", str(vulnerable), "--repo", str(tmp_path), "--format", "json"]
    )
    assert blocked.exit_code == 1
    payload = json.loads(blocked.stdout)
    assert payload["issueCount"] == 2
    assert payload["recommendation"] == "block"

    clean = _write(tmp_path, "Counter.sol", CLEAN_COUNTER)
    passed = runner.invoke(app, ["quick-scan", str(clean), "--repo", str(tmp_path)])
    assert passed.exit_code == 0
    assert "proceed with caution" in passed.stdout


def test_scan_error_exit_code_is_distinct() -> None:
    assert SCAN_ERROR_EXIT_CODE not in {0, 1, 2}


def _write(root: Path, name: str, content: str) -> Path:
    path = root / name
    path.write_text(content, encoding="utf-8")
    return path
