"""Full-audit and quick-scan orchestration."""

from __future__ import annotations

import logging
import secrets
import string
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from contract_audit.errors import InvalidInputError
from contract_audit.optimization import OptimizationSuggestion, analyze
from contract_audit.rules import RuleRegistry, default_registry
from contract_audit.rules.base import OPTIMIZATION_CATEGORIES, Finding
from contract_audit.scanner import DEFAULT_MAX_SOURCE_BYTES, scan, validate_source
from contract_audit.scoring import AuditSummary, risk_score, summarize

logger = logging.getLogger(__name__)

STATUS_COMPLETED = "completed"
RECOMMEND_BLOCK = "block"
RECOMMEND_PROCEED = "proceed with caution"
QUICK_SCAN_SEVERITIES = ("critical", "high")
DEFAULT_REPORT_BASE_URL = "https://reports.smartbrain.io"

_ID_ALPHABET = string.ascii_lowercase + string.digits

_OPTION_KEYS = {
    "checkSecurity": "check_security",
    "check_security": "check_security",
    "checkGasOptimization": "check_gas_optimization",
    "check_gas_optimization": "check_gas_optimization",
    "checkBestPractices": "check_best_practices",
    "check_best_practices": "check_best_practices",
}


@dataclass(frozen=True, slots=True)
class AuditOptions:
    """Per-audit toggles for the security and optimization passes.

    ``check_best_practices`` is accepted for compatibility but has no rule
    category of its own yet.
    """

    check_security: bool = True
    check_gas_optimization: bool = True
    check_best_practices: bool = True

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> AuditOptions:
        """Build options from a request-style mapping with camelCase keys."""
        if mapping is None:
            return cls()
        if not isinstance(mapping, Mapping):
            raise InvalidInputError("options", "must be a mapping")

        values: dict[str, bool] = {}
        for key, raw in mapping.items():
            attr = _OPTION_KEYS.get(key)
            if attr is None:
                continue
            if raw is None:
                continue
            if not isinstance(raw, bool):
                raise InvalidInputError(f"options.{key}", "must be a boolean")
            values[attr] = raw
        return cls(**values)


@dataclass(slots=True)
class AuditResult:
    """Completed full-audit record."""

    audit_id: str
    summary: AuditSummary
    findings: list[Finding]
    optimizations: list[OptimizationSuggestion]
    score: float
    timestamp: datetime
    report_url: str
    status: str = STATUS_COMPLETED


@dataclass(slots=True)
class QuickScanResult:
    """Critical/high-only triage result."""

    findings: list[Finding] = field(default_factory=list)
    recommendation: str = RECOMMEND_PROCEED

    @property
    def issue_count(self) -> int:
        return len(self.findings)

    @property
    def should_block(self) -> bool:
        return self.recommendation == RECOMMEND_BLOCK


class Auditor:
    """Runs audits against an explicitly supplied rule registry."""

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        *,
        report_base_url: str = DEFAULT_REPORT_BASE_URL,
        max_source_bytes: int | None = DEFAULT_MAX_SOURCE_BYTES,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.report_base_url = report_base_url.rstrip("/")
        self.max_source_bytes = max_source_bytes

    def audit(
        self,
        source: str,
        options: AuditOptions | Mapping[str, Any] | None = None,
    ) -> AuditResult:
        """Run security and optimization passes and assemble the result."""
        validate_source(source, max_source_bytes=self.max_source_bytes)
        if isinstance(options, AuditOptions):
            resolved = options
        else:
            resolved = AuditOptions.from_mapping(options)

        findings: list[Finding] = []
        if resolved.check_security:
            security_rules = self.registry.rules_by_category("security")
            logger.debug("Running %d security rules", len(security_rules))
            findings = scan(source, security_rules, max_source_bytes=None)

        optimizations: list[OptimizationSuggestion] = []
        if resolved.check_gas_optimization:
            optimization_rules = self.registry.rules_by_category(*OPTIMIZATION_CATEGORIES)
            logger.debug("Running %d optimization rules", len(optimization_rules))
            optimizations = analyze(source, optimization_rules, max_source_bytes=None)

        summary = summarize(findings)
        audit_id = new_audit_id()
        logger.info(
            "Audit %s completed: %d findings, %d optimizations",
            audit_id,
            len(findings),
            len(optimizations),
        )
        return AuditResult(
            audit_id=audit_id,
            summary=summary,
            findings=findings,
            optimizations=optimizations,
            score=risk_score(summary),
            timestamp=datetime.now(tz=UTC),
            report_url=f"{self.report_base_url}/{audit_id}",
        )

    def quick_scan(self, source: str) -> QuickScanResult:
        """Scan only critical/high rules and derive a block/proceed verdict."""
        validate_source(source, max_source_bytes=self.max_source_bytes)
        rules = self.registry.rules_by_severity(*QUICK_SCAN_SEVERITIES)
        findings = scan(source, rules, max_source_bytes=None)
        recommendation = RECOMMEND_BLOCK if findings else RECOMMEND_PROCEED
        logger.info("Quick scan found %d critical/high issues", len(findings))
        return QuickScanResult(findings=findings, recommendation=recommendation)


def run_audit(
    source: str,
    options: AuditOptions | Mapping[str, Any] | None = None,
) -> AuditResult:
    """Full audit with the default rule catalogue."""
    return Auditor().audit(source, options)


def run_quick_scan(source: str) -> QuickScanResult:
    """Quick scan with the default rule catalogue."""
    return Auditor().quick_scan(source)


def new_audit_id() -> str:
    """Return ``aud_<epoch millis>_<9 random base36 chars>``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"aud_{time.time_ns() // 1_000_000}_{suffix}"
