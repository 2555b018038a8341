from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from flickercheck.core.constants import LAYERS_TRACE_FILE, TRANSITIONS_TRACE_FILE, WM_TRACE_FILE
from flickercheck.core.errors import TraceValidationError
from flickercheck.core.trace import LayersTrace, WindowManagerTrace
from flickercheck.core.transition import TransitionsTrace
from flickercheck.trace.validate import validate_layers_entry, validate_transition, validate_wm_entry

RowT = TypeVar("RowT")


@dataclass(slots=True, frozen=True)
class Traces:
    wm_trace: WindowManagerTrace
    layers_trace: LayersTrace
    transitions_trace: TransitionsTrace


def _read_rows(path: Path, parse: Callable[[Any], RowT]) -> list[RowT]:
    rows: list[RowT] = []
    try:
        with path.open("r", encoding="utf-8") as handle:
            for line_number, line in enumerate(handle, start=1):
                stripped = line.strip()
                if not stripped:
                    continue
                try:
                    rows.append(parse(json.loads(stripped)))
                except json.JSONDecodeError as exc:
                    raise TraceValidationError(f"{path}:{line_number}: invalid JSON: {exc.msg}") from exc
                except ValueError as exc:
                    raise TraceValidationError(f"{path}:{line_number}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise TraceValidationError(f"{path}: not valid UTF-8: {exc.reason}") from exc
    return rows


def _write_rows(path: Path, rows: Iterable[Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        for row in rows:
            handle.write(json.dumps(row.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=True))
            handle.write("\n")


def read_wm_trace(path: Path) -> WindowManagerTrace:
    rows = _read_rows(path, validate_wm_entry)
    try:
        return WindowManagerTrace(rows)
    except TraceValidationError as exc:
        raise TraceValidationError(f"{path}: {exc}") from exc


def read_layers_trace(path: Path) -> LayersTrace:
    rows = _read_rows(path, validate_layers_entry)
    try:
        return LayersTrace(rows)
    except TraceValidationError as exc:
        raise TraceValidationError(f"{path}: {exc}") from exc


def read_transitions_trace(path: Path) -> TransitionsTrace:
    rows = _read_rows(path, validate_transition)
    try:
        return TransitionsTrace(rows)
    except TraceValidationError as exc:
        raise TraceValidationError(f"{path}: {exc}") from exc


def write_wm_trace(path: Path, trace: WindowManagerTrace) -> None:
    _write_rows(path, trace)


def write_layers_trace(path: Path, trace: LayersTrace) -> None:
    _write_rows(path, trace)


def write_transitions_trace(path: Path, trace: TransitionsTrace) -> None:
    _write_rows(path, trace)


def load_traces(directory: Path) -> Traces:
    """Read the three trace dumps a collector leaves in ``directory``."""
    missing = [
        name
        for name in (WM_TRACE_FILE, LAYERS_TRACE_FILE, TRANSITIONS_TRACE_FILE)
        if not (directory / name).is_file()
    ]
    if missing:
        raise FileNotFoundError(f"Missing trace file(s) in {directory}: {', '.join(missing)}")
    return Traces(
        wm_trace=read_wm_trace(directory / WM_TRACE_FILE),
        layers_trace=read_layers_trace(directory / LAYERS_TRACE_FILE),
        transitions_trace=read_transitions_trace(directory / TRANSITIONS_TRACE_FILE),
    )


def write_traces(directory: Path, traces: Traces) -> None:
    write_wm_trace(directory / WM_TRACE_FILE, traces.wm_trace)
    write_layers_trace(directory / LAYERS_TRACE_FILE, traces.layers_trace)
    write_transitions_trace(directory / TRANSITIONS_TRACE_FILE, traces.transitions_trace)


__all__ = [
    "Traces",
    "load_traces",
    "read_layers_trace",
    "read_transitions_trace",
    "read_wm_trace",
    "write_layers_trace",
    "write_traces",
    "write_transitions_trace",
    "write_wm_trace",
]
