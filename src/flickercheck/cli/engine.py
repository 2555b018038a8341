"""Orchestration behind the CLI commands: load inputs, run the engine, write reports."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from flickercheck.config import load_rule_config
from flickercheck.core.constants import (
    DEFAULT_REPORT_JSON,
    DEFAULT_REPORT_MD,
    EXIT_ASSERTION_FAILURE,
    EXIT_INTERNAL_ERROR,
    EXIT_SUCCESS,
)
from flickercheck.core.engine import AssertionEngine, LogSink
from flickercheck.core.errors import AnalysisInputError, RuleConfigurationError, TraceValidationError
from flickercheck.core.results import AnalysisReport
from flickercheck.core.rule_config import RuleConfig
from flickercheck.report.renderers import write_reports
from flickercheck.trace.io import load_traces


@dataclass(slots=True)
class CommandOutcome:
    exit_code: int
    report: AnalysisReport | None = None
    errors: list[str] = field(default_factory=list)
    report_json: Path | None = None
    report_md: Path | None = None


def resolve_rule_config(config_path: Path | None) -> RuleConfig:
    if config_path is None:
        return RuleConfig.default()
    return load_rule_config(config_path)


def analyze_trace_directory(
    *,
    trace_dir: Path,
    config_path: Path | None,
    max_workers: int | None,
    output_dir: Path | None,
    logger: LogSink,
) -> CommandOutcome:
    try:
        config = resolve_rule_config(config_path)
        traces = load_traces(trace_dir)
        results = AssertionEngine(config, logger).analyze(
            traces.wm_trace,
            traces.layers_trace,
            traces.transitions_trace,
            max_workers=max_workers,
        )
    except (FileNotFoundError, RuleConfigurationError, TraceValidationError, AnalysisInputError) as exc:
        return CommandOutcome(exit_code=EXIT_INTERNAL_ERROR, errors=[str(exc)])

    report = AnalysisReport(results)
    outcome = CommandOutcome(
        exit_code=EXIT_SUCCESS if report.passed else EXIT_ASSERTION_FAILURE,
        report=report,
    )
    if output_dir is not None:
        outcome.report_json = output_dir / DEFAULT_REPORT_JSON
        outcome.report_md = output_dir / DEFAULT_REPORT_MD
        write_reports(report, outcome.report_json, outcome.report_md, title=trace_dir.name or str(trace_dir))
    return outcome


__all__ = [
    "CommandOutcome",
    "analyze_trace_directory",
    "resolve_rule_config",
]
