from __future__ import annotations

import json
from pathlib import Path

from flickercheck.core.results import AnalysisReport


def render_markdown(report: AnalysisReport, *, title: str = "Transition assertions") -> str:
    lines: list[str] = []
    lines.append(f"## flickercheck Report: {title}")
    lines.append("")
    summary = report.summary()
    status = "All assertions passed" if summary["status"] == "PASS" else "Assertion failures detected"
    lines.append(f"- Status: **{status}**")
    lines.append(f"- Transitions checked: **{summary['transitions']}**")
    lines.append(f"- Assertions: **{summary['assertions']}** ({summary['passed']} passed, {summary['failed']} failed)")
    if summary["errors"]:
        lines.append(f"- Rule errors: **{summary['errors']}**")

    lines.append("")
    lines.append("### Results")
    lines.append("")
    grouped = report.by_transition()
    if not grouped:
        lines.append("No completed transitions were checked.")
    for transition_id, results in grouped.items():
        lines.append(f"#### Transition #{transition_id} ({results[0].transition_type})")
        lines.append("")
        lines.append("| Rule | Status |")
        lines.append("|---|---|")
        for result in results:
            lines.append(f"| `{result.rule_id}` | {result.status} |")
        lines.append("")

    failures = report.failures
    if failures:
        lines.append("### Failures")
        lines.append("")
        for result in failures:
            code = f" [{result.error_code}]" if result.error_code else ""
            lines.append(f"- Transition #{result.transition_id} `{result.rule_id}`{code}: {result.detail}")
            for violation in result.violations:
                if violation.timestamp is not None:
                    lines.append(f"  - at {violation.timestamp}: {violation.message}")
        lines.append("")
    return "\n".join(lines)


def render_json(report: AnalysisReport) -> str:
    return json.dumps(report.to_dict(), indent=2, sort_keys=True)


def write_reports(report: AnalysisReport, json_path: Path, md_path: Path, *, title: str = "Transition assertions") -> None:
    json_path.parent.mkdir(parents=True, exist_ok=True)
    md_path.parent.mkdir(parents=True, exist_ok=True)
    json_path.write_text(render_json(report), encoding="utf-8")
    md_path.write_text(render_markdown(report, title=title), encoding="utf-8")


__all__ = ["render_json", "render_markdown", "write_reports"]
