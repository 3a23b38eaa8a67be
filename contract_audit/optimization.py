"""Gas and code-quality suggestions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from contract_audit.rules.base import OPTIMIZATION_CATEGORIES, Rule
from contract_audit.scanner import DEFAULT_MAX_SOURCE_BYTES, matches_source, validate_source


@dataclass(frozen=True, slots=True)
class OptimizationSuggestion:
    """Advisory, source-level improvement hint."""

    rule_id: str
    title: str
    description: str
    recommendation: str
    impact: str


def analyze(
    source: str,
    rules: Iterable[Rule],
    *,
    max_source_bytes: int | None = DEFAULT_MAX_SOURCE_BYTES,
) -> list[OptimizationSuggestion]:
    """Return one suggestion per gas/quality rule matching anywhere in source.

    Security rules in ``rules`` are ignored.
    """
    validate_source(source, max_source_bytes=max_source_bytes)
    return [
        OptimizationSuggestion(
            rule_id=rule.rule_id,
            title=rule.title,
            description=rule.description,
            recommendation=rule.recommendation,
            impact=rule.impact or "",
        )
        for rule in rules
        if rule.category in OPTIMIZATION_CATEGORIES and matches_source(rule, source)
    ]
