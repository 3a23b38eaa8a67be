"""Tests for the rule registry and built-in catalogue."""

from __future__ import annotations

import re

import pytest

from contract_audit.errors import RuleConfigurationError
from contract_audit.rules import RuleRegistry, default_registry, list_rule_info, regex_rule
from contract_audit.rules.base import RegexMatcher, Rule


def test_default_registry_keeps_registration_order() -> None:
    ids = [rule.rule_id for rule in default_registry().all_rules()]
    assert ids == [
        "reentrancy",
        "unchecked_call",
        "tx_origin",
        "selfdestruct",
        "delegatecall",
        "timestamp_dependence",
        "inline_assembly",
        "small_uint",
        "public_string",
        "deprecated_throw",
    ]
    assert default_registry() is default_registry()


def test_rules_by_category_and_severity() -> None:
    registry = default_registry()
    gas_ids = [rule.rule_id for rule in registry.rules_by_category("gas")]
    assert gas_ids == ["small_uint", "public_string"]

    severe_ids = [rule.rule_id for rule in registry.rules_by_severity("critical", "high")]
    assert severe_ids == ["reentrancy", "tx_origin", "selfdestruct", "delegatecall"]

    for rule in registry.rules_by_category("gas", "quality"):
        assert rule.severity is None
        assert rule.impact
    for rule in registry.rules_by_category("security"):
        assert rule.severity is not None


def test_unknown_category_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown rule categories"):
        default_registry().rules_by_category("style")


def test_uncompilable_pattern_is_configuration_error() -> None:
    with pytest.raises(RuleConfigurationError) as excinfo:
        regex_rule(
            "broken",
            r"(unclosed",
            category="security",
            severity="low",
            title="t",
            description="d",
            recommendation="r",
        )
    assert excinfo.value.rule_id == "broken"


def test_registry_rejects_duplicates_and_bad_metadata() -> None:
    rule = _rule("dup", "security", "high")
    with pytest.raises(RuleConfigurationError, match="duplicate"):
        RuleRegistry([rule, rule])

    with pytest.raises(RuleConfigurationError, match="need a severity"):
        RuleRegistry([_rule("nosev", "security", None)])

    with pytest.raises(RuleConfigurationError, match="carry no severity"):
        RuleRegistry([_rule("gassev", "gas", "low")])

    with pytest.raises(RuleConfigurationError, match="unknown category"):
        RuleRegistry([_rule("cat", "style", None)])


def test_select_narrows_registry() -> None:
    registry = default_registry()
    selected = registry.select(enabled_rule_ids=["tx_origin", "small_uint", "reentrancy"])
    assert [rule.rule_id for rule in selected] == ["reentrancy", "tx_origin", "small_uint"]

    trimmed = registry.select(disabled_rule_ids=["inline_assembly"])
    assert "inline_assembly" not in trimmed
    assert len(trimmed) == len(registry) - 1

    with pytest.raises(ValueError, match="Unknown rule ids: nope"):
        registry.select(disabled_rule_ids=["nope"])


def test_list_rule_info_mirrors_registry() -> None:
    info = list_rule_info()
    assert len(info) == len(default_registry())
    by_id = {item.rule_id: item for item in info}
    assert by_id["tx_origin"].severity == "high"
    assert by_id["public_string"].impact == "5000 gas per read"


def _rule(rule_id: str, category: str, severity: str | None) -> Rule:
    return Rule(
        rule_id=rule_id,
        matcher=RegexMatcher(re.compile("x")),
        category=category,  # type: ignore[arg-type]
        severity=severity,  # type: ignore[arg-type]
        title="t",
        description="d",
        recommendation="r",
    )
