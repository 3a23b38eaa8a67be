"""Error types raised by the audit engine."""

from __future__ import annotations


class AuditError(Exception):
    """Base class for audit engine failures."""


class RuleConfigurationError(AuditError, ValueError):
    """A rule could not be constructed or registered."""

    def __init__(self, rule_id: str, message: str) -> None:
        super().__init__(f"Invalid rule '{rule_id}': {message}")
        self.rule_id = rule_id


class InvalidInputError(AuditError, ValueError):
    """Caller supplied missing or unusable input."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class ScanError(AuditError, RuntimeError):
    """A rule matcher failed while evaluating source text."""

    def __init__(self, rule_id: str, cause: BaseException) -> None:
        super().__init__(f"Rule '{rule_id}' failed during scan: {cause}")
        self.rule_id = rule_id
