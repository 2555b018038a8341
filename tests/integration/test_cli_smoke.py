"""CLI smoke tests: analyze, rules and checks over JSONL trace dumps."""
from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from flickercheck import __version__
from flickercheck.cli import app
from flickercheck.core.constants import EXIT_ASSERTION_FAILURE, EXIT_INTERNAL_ERROR, EXIT_SUCCESS
from flickercheck.core.timestamp import Timestamp
from flickercheck.core.trace import Layer, LayersTrace, LayerTraceEntry, WindowManagerState, WindowManagerTrace, WindowState
from flickercheck.core.transition import Transition, TransitionsTrace, WindowChange
from flickercheck.trace.io import Traces, write_traces

runner = CliRunner()

APP = "com.example.app/com.example.app.MainActivity"


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def _ts(value: int) -> Timestamp:
    return Timestamp(elapsed_nanos=value)


def _write_trace_dir(directory: Path, *, flicker: bool = False) -> Path:
    layer_states = [False, True, False, True] if flicker else [False, True, True, True]
    write_traces(
        directory,
        Traces(
            wm_trace=WindowManagerTrace(
                [
                    WindowManagerState(timestamp=_ts(10), windows=(WindowState("NavigationBar0"),)),
                    WindowManagerState(
                        timestamp=_ts(40),
                        windows=(WindowState("NavigationBar0"), WindowState(APP)),
                        focused_window=APP,
                    ),
                ]
            ),
            layers_trace=LayersTrace(
                LayerTraceEntry(timestamp=_ts(10 * (index + 1)), layers=(Layer(APP, is_visible=visible),))
                for index, visible in enumerate(layer_states)
            ),
            transitions_trace=TransitionsTrace(
                [
                    Transition(id=1, start=_ts(10), end=_ts(40), type="OPEN", changes=(WindowChange(APP, "OPEN"),)),
                    Transition(id=2, start=_ts(50), end=_ts(60), type="CLOSE", is_incomplete=True),
                ]
            ),
        ),
    )
    return directory


class TestCliSmoke:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_analyze_passing_traces(self, tmp_path: Path) -> None:
        trace_dir = _write_trace_dir(tmp_path / "run")
        out_dir = tmp_path / "out"

        result = runner.invoke(app, ["analyze", str(trace_dir), "--output-dir", str(out_dir)])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "All assertions passed" in result.stdout
        payload = json.loads((out_dir / "report.json").read_text(encoding="utf-8"))
        assert payload["summary"]["transitions"] == 1
        assert payload["summary"]["assertions"] == 4
        assert (out_dir / "report.md").exists()

    def test_analyze_flicker_fails(self, tmp_path: Path) -> None:
        trace_dir = _write_trace_dir(tmp_path / "run", flicker=True)

        result = runner.invoke(app, ["analyze", str(trace_dir), "--json", "--workers", "2"])

        assert result.exit_code == EXIT_ASSERTION_FAILURE
        payload = json.loads(result.stdout)
        failed = [
            entry["rule_id"]
            for transition in payload["transitions"]
            for entry in transition["results"]
            if entry["status"] == "FAIL"
        ]
        assert failed == ["layer_becomes_visible(OPENING_APP)"]

    def test_analyze_with_custom_config(self, tmp_path: Path) -> None:
        trace_dir = _write_trace_dir(tmp_path / "run")
        config = tmp_path / "rules.yaml"
        config.write_text(
            'schema_version: "1"\n'
            "transitions:\n"
            "  OPEN:\n"
            "    - check: window_focused_at_end\n"
            "      component: OPENING_APP\n",
            encoding="utf-8",
        )

        result = runner.invoke(app, ["analyze", str(trace_dir), "--config", str(config), "--json"])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert json.loads(result.stdout)["summary"]["assertions"] == 1

    def test_analyze_missing_traces_is_an_input_error(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["analyze", str(tmp_path)])
        assert result.exit_code == EXIT_INTERNAL_ERROR
        assert "Missing trace file(s)" in result.output

    def test_analyze_bad_config_is_an_input_error(self, tmp_path: Path) -> None:
        trace_dir = _write_trace_dir(tmp_path / "run")
        config = tmp_path / "rules.yaml"
        config.write_text("transitions:\n  OPEN: [no_such_check]\n", encoding="utf-8")

        result = runner.invoke(app, ["analyze", str(trace_dir), "--config", str(config)])

        assert result.exit_code == EXIT_INTERNAL_ERROR
        assert "Unknown check" in result.output

    def test_analyze_non_utf8_trace_is_an_input_error(self, tmp_path: Path) -> None:
        trace_dir = _write_trace_dir(tmp_path / "run")
        (trace_dir / "wm_trace.jsonl").write_bytes(b"\xff\xfe\n")

        result = runner.invoke(app, ["analyze", str(trace_dir)])

        assert result.exit_code == EXIT_INTERNAL_ERROR
        assert "not valid UTF-8" in result.output

    def test_analyze_non_utf8_config_is_an_input_error(self, tmp_path: Path) -> None:
        trace_dir = _write_trace_dir(tmp_path / "run")
        config = tmp_path / "rules.yaml"
        config.write_bytes(b"transitions:\n  OPEN: [\xff]\n")

        result = runner.invoke(app, ["analyze", str(trace_dir), "--config", str(config)])

        assert result.exit_code == EXIT_INTERNAL_ERROR
        assert "not valid UTF-8" in result.output

    def test_analyze_duplicate_transition_ids_is_an_input_error(self, tmp_path: Path) -> None:
        trace_dir = _write_trace_dir(tmp_path / "run")
        row = '{"end": 40, "id": 1, "start": 10, "type": "CLOSE"}\n'
        with (trace_dir / "transition_trace.jsonl").open("a", encoding="utf-8") as handle:
            handle.write(row)

        result = runner.invoke(app, ["analyze", str(trace_dir)])

        assert result.exit_code == EXIT_INTERNAL_ERROR
        assert "Duplicate transition id 1" in result.output

    def test_rules_lists_default_config(self) -> None:
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == 0
        assert "OPEN:" in result.stdout
        assert "  - layer_becomes_visible(OPENING_APP)" in result.stdout

    def test_rules_json(self) -> None:
        result = runner.invoke(app, ["rules", "--json"])
        assert result.exit_code == 0
        assert "ALL" in json.loads(result.stdout)

    def test_checks_lists_checks_and_components(self) -> None:
        result = runner.invoke(app, ["checks"])
        assert result.exit_code == 0
        assert "- layer_becomes_visible (component):" in result.stdout
        assert "- OPENING_APP" in result.stdout
