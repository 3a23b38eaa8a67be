"""Gas and code-quality rules."""

from __future__ import annotations

from contract_audit.rules.base import Rule, regex_rule

PATTERNS = [
    (
        "small_uint",
        r"uint8|uint16|uint32|uint64|uint128",
        "gas",
        "Use uint256 for gas efficiency",
        "2000 gas per transaction",
        "uint256 is more gas-efficient than smaller uint types",
        "Replace uint8/uint16/etc with uint256 unless packing storage",
    ),
    (
        "public_string",
        r"string\s+public",
        "gas",
        "Public string variables are expensive",
        "5000 gas per read",
        "Public string getters are gas-intensive",
        "Consider using bytes32 or storing strings off-chain",
    ),
    (
        "deprecated_throw",
        r"\bthrow\s*;",
        "quality",
        "Deprecated throw statement",
        "Compilation fails on solc >= 0.5",
        "throw was removed in favour of revert/require",
        "Replace throw with revert() or require() carrying a reason string",
    ),
]


def optimization_rules() -> list[Rule]:
    """Return gas and quality rules in registration order."""
    return [
        regex_rule(
            rule_id,
            pattern,
            category=category,
            title=title,
            impact=impact,
            description=description,
            recommendation=recommendation,
        )
        for rule_id, pattern, category, title, impact, description, recommendation in PATTERNS
    ]
