"""Rules package."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from functools import cache

from contract_audit.errors import RuleConfigurationError
from contract_audit.rules.base import (
    CATEGORIES,
    OPTIMIZATION_CATEGORIES,
    SEVERITIES,
    Finding,
    Matcher,
    Rule,
    regex_rule,
)
from contract_audit.rules.optimization import optimization_rules
from contract_audit.rules.security import security_rules

__all__ = [
    "Finding",
    "Matcher",
    "Rule",
    "RuleInfo",
    "RuleRegistry",
    "default_registry",
    "list_rule_info",
    "regex_rule",
]


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """Rule metadata for listing and selection."""

    rule_id: str
    title: str
    category: str
    severity: str | None
    impact: str | None


class RuleRegistry:
    """Ordered, immutable catalogue of detection rules."""

    __slots__ = ("_rules", "_by_id")

    def __init__(self, rules: Iterable[Rule]) -> None:
        ordered = tuple(rules)
        by_id: dict[str, Rule] = {}
        for rule in ordered:
            _validate_rule(rule)
            if rule.rule_id in by_id:
                raise RuleConfigurationError(rule.rule_id, "duplicate rule id")
            by_id[rule.rule_id] = rule
        self._rules = ordered
        self._by_id = by_id

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    def __repr__(self) -> str:
        return f"RuleRegistry({[rule.rule_id for rule in self._rules]!r})"

    def all_rules(self) -> tuple[Rule, ...]:
        """Return every rule in registration order."""
        return self._rules

    def rules_by_category(self, *categories: str) -> tuple[Rule, ...]:
        """Return rules in any of the given categories, registration order kept."""
        unknown = [item for item in categories if item not in CATEGORIES]
        if unknown:
            joined = ", ".join(sorted(unknown))
            raise ValueError(f"Unknown rule categories: {joined}")
        return tuple(rule for rule in self._rules if rule.category in categories)

    def rules_by_severity(self, *severities: str) -> tuple[Rule, ...]:
        """Return security rules carrying any of the given severities."""
        unknown = [item for item in severities if item not in SEVERITIES]
        if unknown:
            joined = ", ".join(sorted(unknown))
            raise ValueError(f"Unknown severities: {joined}")
        return tuple(rule for rule in self._rules if rule.severity in severities)

    def select(
        self,
        *,
        enabled_rule_ids: list[str] | None = None,
        disabled_rule_ids: list[str] | None = None,
    ) -> RuleRegistry:
        """Return a registry narrowed by enable/disable id lists."""
        requested = set(enabled_rule_ids or []) | set(disabled_rule_ids or [])
        unknown = [rule_id for rule_id in requested if rule_id not in self._by_id]
        if unknown:
            joined = ", ".join(sorted(unknown))
            raise ValueError(f"Unknown rule ids: {joined}")

        enabled_set = set(enabled_rule_ids) if enabled_rule_ids is not None else None
        disabled_set = set(disabled_rule_ids or [])
        return RuleRegistry(
            rule
            for rule in self._rules
            if (enabled_set is None or rule.rule_id in enabled_set)
            and rule.rule_id not in disabled_set
        )


@cache
def default_registry() -> RuleRegistry:
    """Return the built-in rule catalogue, built once per process."""
    return RuleRegistry([*security_rules(), *optimization_rules()])


def list_rule_info(registry: RuleRegistry | None = None) -> list[RuleInfo]:
    """Return metadata for all rules of a registry."""
    active = registry if registry is not None else default_registry()
    return [
        RuleInfo(
            rule_id=rule.rule_id,
            title=rule.title,
            category=rule.category,
            severity=rule.severity,
            impact=rule.impact,
        )
        for rule in active
    ]


def _validate_rule(rule: Rule) -> None:
    if not isinstance(rule, Rule):
        raise RuleConfigurationError(repr(rule), "expected a Rule instance")
    if not rule.rule_id:
        raise RuleConfigurationError(repr(rule), "rule id must be non-empty")
    if not isinstance(rule.matcher, Matcher):
        raise RuleConfigurationError(rule.rule_id, "matcher must provide matches(text)")
    if rule.category not in CATEGORIES:
        raise RuleConfigurationError(rule.rule_id, f"unknown category '{rule.category}'")
    if rule.category == "security":
        if rule.severity not in SEVERITIES:
            raise RuleConfigurationError(
                rule.rule_id, f"security rules need a severity, got {rule.severity!r}"
            )
    elif rule.category in OPTIMIZATION_CATEGORIES and rule.severity is not None:
        raise RuleConfigurationError(rule.rule_id, "gas/quality rules carry no severity")
