"""Line-anchored rule scanning over contract source text."""

from __future__ import annotations

from collections.abc import Iterable

from contract_audit.errors import InvalidInputError, ScanError
from contract_audit.rules.base import Finding, Rule

DEFAULT_MAX_SOURCE_BYTES = 1024 * 1024


def scan(
    source: str,
    rules: Iterable[Rule],
    *,
    max_source_bytes: int | None = DEFAULT_MAX_SOURCE_BYTES,
) -> list[Finding]:
    """Apply rules to source text and return one finding per matching rule.

    Each rule is first tested against the whole source; only on a hit are the
    lines walked to find the earliest matching line. Findings keep the order of
    ``rules``. A matcher that raises aborts the scan with ``ScanError``.
    """
    validate_source(source, max_source_bytes=max_source_bytes)
    lines = source.split("\n")
    findings: list[Finding] = []

    for rule in rules:
        if not _matches(rule, source):
            continue
        line_number, snippet = _first_matching_line(rule, lines)
        findings.append(
            Finding(
                rule_id=rule.rule_id,
                category=rule.category,
                severity=rule.severity,
                title=rule.title,
                description=rule.description,
                recommendation=rule.recommendation,
                line=line_number,
                snippet=snippet,
            )
        )
    return findings


def validate_source(source: object, *, max_source_bytes: int | None = None) -> str:
    """Reject absent, empty or oversized source text."""
    if source is None:
        raise InvalidInputError("source", "contract source code is required")
    if not isinstance(source, str):
        raise InvalidInputError("source", f"expected text, got {type(source).__name__}")
    if not source.strip():
        raise InvalidInputError("source", "contract source code is empty")
    if max_source_bytes is not None:
        size = len(source.encode("utf-8"))
        if size > max_source_bytes:
            raise InvalidInputError(
                "source", f"source is {size} bytes, limit is {max_source_bytes}"
            )
    return source


def matches_source(rule: Rule, source: str) -> bool:
    """Whole-source test for a single rule, wrapping matcher failures."""
    return _matches(rule, source)


def _first_matching_line(rule: Rule, lines: list[str]) -> tuple[int, str | None]:
    for index, line in enumerate(lines):
        if _matches(rule, line):
            return (index + 1, line.strip() or None)
    # Whole-source hit with no single matching line: anchor at line 1.
    return (1, None)


def _matches(rule: Rule, text: str) -> bool:
    try:
        return bool(rule.matcher.matches(text))
    except Exception as exc:
        raise ScanError(rule.rule_id, exc) from exc
