"""Security vulnerability rules."""

from __future__ import annotations

from contract_audit.rules.base import Rule, regex_rule

PATTERNS = [
    (
        "reentrancy",
        r"\.call\{value:",
        "high",
        "Potential reentrancy vulnerability",
        "External call before state update can lead to reentrancy attacks",
        "Use ReentrancyGuard or checks-effects-interactions pattern",
    ),
    (
        "unchecked_call",
        r"\.call\(",
        "medium",
        "Unchecked return value",
        "Return value of low-level call not checked",
        "Always check return values of external calls",
    ),
    (
        "tx_origin",
        r"tx\.origin",
        "high",
        "Use of tx.origin for authorization",
        "Using tx.origin for authorization is vulnerable to phishing attacks",
        "Use msg.sender instead of tx.origin",
    ),
    (
        "selfdestruct",
        r"\bselfdestruct\s*\(",
        "critical",
        "Contract can be destroyed",
        "selfdestruct removes the contract code and forwards its balance",
        "Remove selfdestruct or restrict it behind multi-party access control",
    ),
    (
        "delegatecall",
        r"\.delegatecall\(",
        "critical",
        "Delegatecall to external code",
        "delegatecall runs foreign code against this contract's storage",
        "Only delegatecall into trusted, immutable implementation addresses",
    ),
    (
        "timestamp_dependence",
        r"block\.timestamp",
        "low",
        "Block timestamp dependence",
        "Validators can skew block.timestamp within a small window",
        "Do not use block.timestamp for randomness or tight timing windows",
    ),
    (
        "inline_assembly",
        r"\bassembly\s*\{",
        "informational",
        "Inline assembly usage",
        "Inline assembly bypasses compiler safety checks",
        "Keep assembly blocks minimal and document their invariants",
    ),
]


def security_rules() -> list[Rule]:
    """Return security rules in registration order."""
    return [
        regex_rule(
            rule_id,
            pattern,
            category="security",
            severity=severity,
            title=title,
            description=description,
            recommendation=recommendation,
        )
        for rule_id, pattern, severity, title, description, recommendation in PATTERNS
    ]
