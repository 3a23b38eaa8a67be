"""Configuration loading for contract-audit."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from contract_audit.audit import DEFAULT_REPORT_BASE_URL, AuditOptions
from contract_audit.scanner import DEFAULT_MAX_SOURCE_BYTES

CONFIG_FILENAMES = (".contract-audit.toml", "contract-audit.toml")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEYS = ("contract_audit", "contract-audit")


@dataclass(slots=True)
class ChecksConfig:
    """Default toggles for the audit passes."""

    security: bool = True
    gas_optimization: bool = True
    best_practices: bool = True

    def to_options(self) -> AuditOptions:
        return AuditOptions(
            check_security=self.security,
            check_gas_optimization=self.gas_optimization,
            check_best_practices=self.best_practices,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "security": self.security,
            "gas_optimization": self.gas_optimization,
            "best_practices": self.best_practices,
        }


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration values resolved from project files."""

    format: str = "human"
    fail_below: float | None = None
    max_source_bytes: int = DEFAULT_MAX_SOURCE_BYTES
    report_base_url: str = DEFAULT_REPORT_BASE_URL
    checks: ChecksConfig = field(default_factory=ChecksConfig)
    rule_enable: list[str] | None = None
    rule_disable: list[str] = field(default_factory=list)
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "fail_below": self.fail_below,
            "max_source_bytes": self.max_source_bytes,
            "report_base_url": self.report_base_url,
            "checks": self.checks.to_dict(),
            "rules": {
                "enable": list(self.rule_enable) if self.rule_enable is not None else None,
                "disable": list(self.rule_disable),
            },
            "source": self.source,
        }


def load_app_config(repo: Path, config_path: Path | None = None) -> AppConfig:
    """Load config from explicit path or repository-local files with precedence."""
    repo = repo.resolve()
    if config_path is not None:
        resolved = config_path if config_path.is_absolute() else (repo / config_path)
        if not resolved.exists():
            raise ValueError(f"Config file does not exist: {resolved}")
        mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
        return _from_mapping(mapping, source=str(resolved))

    for filename in CONFIG_FILENAMES:
        resolved = repo / filename
        if resolved.exists():
            mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
            return _from_mapping(mapping, source=str(resolved))

    pyproject_path = repo / PYPROJECT_FILENAME
    if pyproject_path.exists():
        mapping = _extract_config_mapping(_load_toml(pyproject_path), source_path=pyproject_path)
        if mapping:
            return _from_mapping(mapping, source=str(pyproject_path))

    return AppConfig()


def default_config_template() -> str:
    """Return a starter config template."""
    return "\n".join(
        [
            'format = "human"',
            "fail_below = 7.0",
            f"max_source_bytes = {DEFAULT_MAX_SOURCE_BYTES}",
            f'report_base_url = "{DEFAULT_REPORT_BASE_URL}"',
            "",
            "[checks]",
            "security = true",
            "gas_optimization = true",
            "best_practices = true",
            "",
            "[rules]",
            "# enable = [",
            '#   "reentrancy",',
            '#   "unchecked_call",',
            '#   "tx_origin",',
            "# ]",
            'disable = ["inline_assembly"]',
            "",
        ]
    )


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as file_obj:
            loaded = tomllib.load(file_obj)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        return {}
    return loaded


def _extract_config_mapping(loaded: dict[str, Any], *, source_path: Path) -> dict[str, Any]:
    if source_path.name == PYPROJECT_FILENAME:
        section = _find_pyproject_tool_section(loaded)
        return section if section is not None else {}

    tool_section = _find_pyproject_tool_section(loaded)
    if tool_section is not None:
        return tool_section
    return loaded


def _find_pyproject_tool_section(loaded: dict[str, Any]) -> dict[str, Any] | None:
    tool = loaded.get("tool")
    if not isinstance(tool, dict):
        return None
    for key in PYPROJECT_TOOL_KEYS:
        section = tool.get(key)
        if isinstance(section, dict):
            return section
    return None


def _from_mapping(mapping: dict[str, Any], *, source: str) -> AppConfig:
    rules_mapping = _as_table(mapping.get("rules"), "rules")
    checks_mapping = _as_table(mapping.get("checks"), "checks")

    raw_format = mapping.get("format", "human")
    format_value = str(raw_format).lower()
    if format_value not in {"human", "json"}:
        format_value = "human"

    raw_fail = mapping.get("fail_below")
    fail_value = None if raw_fail is None else _as_float(raw_fail, "fail_below")
    if fail_value is not None and not 0.0 <= fail_value <= 10.0:
        raise ValueError("fail_below must be between 0 and 10")

    max_source_bytes = _as_int(
        mapping.get("max_source_bytes", DEFAULT_MAX_SOURCE_BYTES), "max_source_bytes"
    )
    if max_source_bytes <= 0:
        raise ValueError("max_source_bytes must be > 0")

    return AppConfig(
        format=format_value,
        fail_below=fail_value,
        max_source_bytes=max_source_bytes,
        report_base_url=_as_str(
            mapping.get("report_base_url", DEFAULT_REPORT_BASE_URL), "report_base_url"
        ),
        checks=ChecksConfig(
            security=_as_bool(checks_mapping.get("security", True), "checks.security"),
            gas_optimization=_as_bool(
                checks_mapping.get("gas_optimization", True), "checks.gas_optimization"
            ),
            best_practices=_as_bool(
                checks_mapping.get("best_practices", True), "checks.best_practices"
            ),
        ),
        rule_enable=_as_str_list_or_none(rules_mapping.get("enable")),
        rule_disable=_as_str_list(rules_mapping.get("disable")),
        source=source,
    )


def _as_table(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be a table/object")
    return value


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("Expected a list of strings")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError("Expected a list of strings")
        items.append(item)
    return items


def _as_str_list_or_none(value: Any) -> list[str] | None:
    if value is None:
        return None
    return _as_str_list(value)


def _as_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value


def _as_int(raw: Any, field_name: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{field_name} must be an integer")
    return raw


def _as_bool(raw: Any, field_name: str) -> bool:
    if not isinstance(raw, bool):
        raise ValueError(f"{field_name} must be a boolean")
    return raw


def _as_float(raw: Any, field_name: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"{field_name} must be a number")
    return float(raw)
