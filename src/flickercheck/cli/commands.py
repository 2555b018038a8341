from __future__ import annotations

import json
from pathlib import Path

import typer

from flickercheck.cli.engine import CommandOutcome, analyze_trace_directory, resolve_rule_config
from flickercheck.core.checks import CHECKS
from flickercheck.core.components import COMPONENTS_BY_NAME
from flickercheck.core.constants import EXIT_INTERNAL_ERROR, EXIT_SUCCESS
from flickercheck.core.errors import RuleConfigurationError
from flickercheck.logging_setup import configure_logging, engine_log_sink
from flickercheck.report.renderers import render_json, render_markdown


def _version_callback(value: bool) -> None:
    if value:
        from flickercheck import __version__

        typer.echo(f"flickercheck {__version__}")
        raise typer.Exit()


app = typer.Typer(add_completion=False, help="Rule-based assertions over window-manager and layer traces")


@app.callback(invoke_without_command=True)
def _main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print version and exit."
    ),
) -> None:
    pass


def _emit_outcome(outcome: CommandOutcome) -> None:
    if outcome.errors:
        for error in outcome.errors:
            typer.echo(f"ERROR: {error}", err=True)

    if outcome.report_md is not None and outcome.report_md.exists():
        typer.echo(f"Report written: {outcome.report_md}")

    raise typer.Exit(outcome.exit_code)


@app.command()
def analyze(
    trace_dir: Path = typer.Argument(..., help="Directory holding wm_trace, layers_trace and transition_trace dumps"),
    config: Path | None = typer.Option(None, "--config", help="Rule config YAML (defaults to built-in rules)"),
    workers: int | None = typer.Option(None, "--workers", min=1, help="Evaluate transitions on N threads"),
    output_dir: Path | None = typer.Option(None, "--output-dir", help="Write report.json and report.md here"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of Markdown"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level for engine diagnostics"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit log lines as JSON"),
) -> None:
    """Run the configured assertions against every completed transition."""
    configure_logging(level=log_level, json_format=json_logs)
    outcome = analyze_trace_directory(
        trace_dir=trace_dir.resolve(),
        config_path=config.resolve() if config is not None else None,
        max_workers=workers,
        output_dir=output_dir.resolve() if output_dir is not None else None,
        logger=engine_log_sink(),
    )
    if outcome.report is not None:
        if as_json:
            typer.echo(render_json(outcome.report))
        else:
            typer.echo(render_markdown(outcome.report, title=trace_dir.resolve().name))
    _emit_outcome(outcome)


@app.command()
def rules(
    config: Path | None = typer.Option(None, "--config", help="Rule config YAML (defaults to built-in rules)"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of text"),
) -> None:
    """Print the rules that apply to each transition type."""
    try:
        rule_config = resolve_rule_config(config.resolve() if config is not None else None)
    except (FileNotFoundError, RuleConfigurationError) as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(EXIT_INTERNAL_ERROR) from exc

    if as_json:
        typer.echo(json.dumps(rule_config.to_dict(), indent=2, sort_keys=True))
        raise typer.Exit(EXIT_SUCCESS)

    for transition_type, type_rules in rule_config.rules_by_type.items():
        typer.echo(f"{transition_type}:")
        if not type_rules:
            typer.echo("  (no rules)")
        for rule in type_rules:
            typer.echo(f"  - {rule.rule_id}")
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def checks() -> None:
    """List built-in checks and the component names rules can reference."""
    typer.echo("Checks:")
    for name, definition in CHECKS.items():
        suffix = " (component)" if definition.requires_component else ""
        typer.echo(f"- {name}{suffix}: {definition.description}")
    typer.echo("Components:")
    for name in COMPONENTS_BY_NAME:
        typer.echo(f"- {name}")
    raise typer.Exit(EXIT_SUCCESS)
