"""CLI entrypoint for contract-audit."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from contract_audit import __version__
from contract_audit.audit import Auditor
from contract_audit.config import AppConfig, default_config_template, load_app_config
from contract_audit.errors import InvalidInputError, RuleConfigurationError, ScanError
from contract_audit.output import (
    render_audit_human,
    render_audit_json,
    render_quick_scan_human,
    render_quick_scan_json,
)
from contract_audit.rules import RuleRegistry, default_registry, list_rule_info

SCAN_ERROR_EXIT_CODE = 3

app = typer.Typer(
    name="contract-audit",
    no_args_is_help=True,
    help="Scan smart-contract source for known risk patterns and score it.",
)


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level written to stderr."),
    ] = "WARNING",
) -> None:
    """Root command callback."""
    _ = version
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}", param_hint="--log-level")
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("audit")
def audit_command(
    source_file: Annotated[
        Path | None, typer.Argument(help="Path to contract source file.")
    ] = None,
    stdin: Annotated[bool, typer.Option(help="Read contract source from stdin.")] = False,
    repo: Annotated[Path, typer.Option(help="Project path used for config lookup.")] = Path("."),
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    security: Annotated[
        bool | None,
        typer.Option("--security/--no-security", help="Run the security rule pass."),
    ] = None,
    gas: Annotated[
        bool | None,
        typer.Option("--gas/--no-gas", help="Run the gas/quality optimization pass."),
    ] = None,
    fail_below: Annotated[
        float | None, typer.Option(help="Exit nonzero if the score is below this value.")
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Run a full audit and print findings, optimizations and score."""
    app_config = _load_config_or_raise(repo, config_file)
    output_format = _resolve_format(format or app_config.format)
    source = _read_source_or_raise(source_file, stdin)

    options = app_config.checks.to_options()
    if security is not None:
        options = replace(options, check_security=security)
    if gas is not None:
        options = replace(options, check_gas_optimization=gas)
    auditor = _build_auditor_or_raise(app_config)
    try:
        result = auditor.audit(source, options)
    except InvalidInputError as exc:
        raise typer.BadParameter(str(exc), param_hint=exc.field) from exc
    except ScanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=SCAN_ERROR_EXIT_CODE) from exc

    if output_format == "json":
        typer.echo(render_audit_json(result))
    else:
        typer.echo(render_audit_human(result))

    threshold = fail_below if fail_below is not None else app_config.fail_below
    if threshold is not None and result.score < threshold:
        raise typer.Exit(code=1)


@app.command("quick-scan")
def quick_scan_command(
    source_file: Annotated[
        Path | None, typer.Argument(help="Path to contract source file.")
    ] = None,
    stdin: Annotated[bool, typer.Option(help="Read contract source from stdin.")] = False,
    repo: Annotated[Path, typer.Option(help="Project path used for config lookup.")] = Path("."),
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Check only critical/high rules; exit 1 when deployment should be blocked."""
    app_config = _load_config_or_raise(repo, config_file)
    output_format = _resolve_format(format or app_config.format)
    source = _read_source_or_raise(source_file, stdin)

    auditor = _build_auditor_or_raise(app_config)
    try:
        result = auditor.quick_scan(source)
    except InvalidInputError as exc:
        raise typer.BadParameter(str(exc), param_hint=exc.field) from exc
    except ScanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=SCAN_ERROR_EXIT_CODE) from exc

    if output_format == "json":
        typer.echo(render_quick_scan_json(result))
    else:
        typer.echo(render_quick_scan_human(result))

    if result.should_block:
        raise typer.Exit(code=1)


@app.command("rules")
def rules_command(
    repo: Annotated[Path, typer.Option(help="Project path used for config lookup.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """List available detection rules."""
    output_format = _resolve_format(format)
    app_config = _load_config_or_raise(repo, config_file)
    active_ids = {rule.rule_id for rule in _build_registry_or_raise(app_config)}
    rule_info = list_rule_info()

    if output_format == "json":
        payload = {
            "rules": [
                {
                    "rule_id": item.rule_id,
                    "title": item.title,
                    "category": item.category,
                    "severity": item.severity,
                    "impact": item.impact,
                    "enabled": item.rule_id in active_ids,
                }
                for item in rule_info
            ],
            "meta": {"config_source": app_config.source},
        }
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = ["Available rules:"]
    for item in rule_info:
        status = "enabled" if item.rule_id in active_ids else "disabled"
        label = item.severity or item.category
        lines.append(f"- {item.rule_id} [{status}] ({label}) - {item.title}")
    typer.echo("\n".join(lines))


@app.command("config")
def config_command(
    repo: Annotated[Path, typer.Option(help="Project path used for config lookup.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Show resolved configuration."""
    output_format = _resolve_format(format)
    app_config = _load_config_or_raise(repo, config_file)
    payload = app_config.to_dict()
    payload["active_rule_ids"] = [rule.rule_id for rule in _build_registry_or_raise(app_config)]

    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- format: {payload['format']}",
        f"- fail_below: {payload['fail_below']}",
        f"- max_source_bytes: {payload['max_source_bytes']}",
        f"- report_base_url: {payload['report_base_url']}",
        f"- checks: {payload['checks']}",
        f"- rules.enable: {payload['rules']['enable']}",
        f"- rules.disable: {payload['rules']['disable']}",
        f"- active_rule_ids: {payload['active_rule_ids']}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Output path for starter config TOML.")] = Path(
        ".contract-audit.toml"
    ),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter project config file."""
    out_path = out.resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


@app.command("config-validate")
def config_validate_command(
    repo: Annotated[Path, typer.Option(help="Project path used for config lookup.")] = Path("."),
    config_file: Annotated[
        Path,
        typer.Option("--config", help="Path to config TOML file to validate."),
    ] = Path(".contract-audit.toml"),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
) -> None:
    """Validate a config file and report active rules."""
    output_format = _resolve_format(format)
    app_config = _load_config_or_raise(repo, config_file)
    payload = {
        "ok": True,
        "source": app_config.source,
        "active_rule_ids": [rule.rule_id for rule in _build_registry_or_raise(app_config)],
    }
    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return
    typer.echo(
        "\n".join(
            [
                "Config is valid.",
                f"- source: {payload['source']}",
                f"- active_rule_ids: {payload['active_rule_ids']}",
            ]
        )
    )


def main() -> None:
    """Console script entrypoint."""
    app()


def _resolve_format(raw: str) -> str:
    output_format = raw.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")
    return output_format


def _read_source_or_raise(source_file: Path | None, stdin: bool) -> str:
    if source_file is not None and stdin:
        raise typer.BadParameter("Use either SOURCE_FILE or --stdin, not both.")
    if stdin:
        return sys.stdin.read()
    if source_file is None:
        raise typer.BadParameter("Provide a contract source file or --stdin.")
    try:
        return source_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise typer.BadParameter(f"Cannot read {source_file}: {exc}") from exc


def _load_config_or_raise(repo: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(repo, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _build_registry_or_raise(app_config: AppConfig) -> RuleRegistry:
    try:
        return default_registry().select(
            enabled_rule_ids=app_config.rule_enable,
            disabled_rule_ids=app_config.rule_disable,
        )
    except (ValueError, RuleConfigurationError) as exc:
        raise typer.BadParameter(str(exc), param_hint="config.rules") from exc


def _build_auditor_or_raise(app_config: AppConfig) -> Auditor:
    return Auditor(
        _build_registry_or_raise(app_config),
        report_base_url=app_config.report_base_url,
        max_source_bytes=app_config.max_source_bytes,
    )
