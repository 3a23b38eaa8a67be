"""Base rule model, matcher protocol and finding model."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Protocol, runtime_checkable

from contract_audit.errors import RuleConfigurationError

Category = Literal["security", "gas", "quality"]
Severity = Literal["critical", "high", "medium", "low", "informational"]

CATEGORIES: tuple[str, ...] = ("security", "gas", "quality")
SEVERITIES: tuple[str, ...] = ("critical", "high", "medium", "low", "informational")
OPTIMIZATION_CATEGORIES: tuple[str, ...] = ("gas", "quality")


@runtime_checkable
class Matcher(Protocol):
    """Pure, total predicate over a line or a whole source text."""

    def matches(self, text: str) -> bool:
        """Return True when the text satisfies the check."""


@dataclass(frozen=True, slots=True)
class RegexMatcher:
    """Matcher backed by a pre-compiled regular expression search."""

    pattern: re.Pattern[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass(frozen=True, slots=True)
class Rule:
    """A named, immutable detection check."""

    rule_id: str
    matcher: Matcher
    category: Category
    severity: Severity | None
    title: str
    description: str
    recommendation: str
    impact: str | None = None


@dataclass(frozen=True, slots=True)
class Finding:
    """A single rule match anchored to the first matching line."""

    rule_id: str
    category: str
    severity: str | None
    title: str
    description: str
    recommendation: str
    line: int
    snippet: str | None = None


def regex_rule(
    rule_id: str,
    pattern: str,
    *,
    category: Category,
    title: str,
    description: str,
    recommendation: str,
    severity: Severity | None = None,
    impact: str | None = None,
) -> Rule:
    """Build a rule whose matcher is a compiled regular expression."""
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise RuleConfigurationError(rule_id, f"pattern does not compile: {exc}") from exc
    return Rule(
        rule_id=rule_id,
        matcher=RegexMatcher(compiled),
        category=category,
        severity=severity,
        title=title,
        description=description,
        recommendation=recommendation,
        impact=impact,
    )
