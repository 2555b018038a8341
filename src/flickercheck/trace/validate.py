from __future__ import annotations

from typing import Any

from flickercheck.core.constants import TRANSITION_TYPES
from flickercheck.core.errors import TraceValidationError
from flickercheck.core.timestamp import Timestamp
from flickercheck.core.trace import Layer, LayerTraceEntry, WindowManagerState, WindowState
from flickercheck.core.transition import Transition, WindowChange, is_valid_transition_type

_TIMESTAMP_KEYS = ("elapsed_nanos", "system_uptime_nanos", "unix_nanos")


def _require_mapping(data: Any, *, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TraceValidationError(f"{what} must be an object")
    return data


def _require_list(data: Any, *, field_name: str) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise TraceValidationError(f"Field `{field_name}` must be a list")
    return data


def _require_bool(data: Any, *, field_name: str, default: bool) -> bool:
    if data is None:
        return default
    if not isinstance(data, bool):
        raise TraceValidationError(f"Field `{field_name}` must be a boolean")
    return data


def _require_name(data: Any, *, field_name: str) -> str:
    if not isinstance(data, str) or not data:
        raise TraceValidationError(f"Field `{field_name}` must be a non-empty string")
    return data


def validate_timestamp(raw: Any, *, field_name: str = "timestamp") -> Timestamp:
    if isinstance(raw, bool):
        raise TraceValidationError(f"Field `{field_name}` must be an integer or an object")
    if isinstance(raw, int):
        if raw < 0:
            raise TraceValidationError(f"Field `{field_name}` must be non-negative")
        return Timestamp.from_nanos(elapsed_nanos=raw)
    if not isinstance(raw, dict):
        raise TraceValidationError(f"Field `{field_name}` must be an integer or an object")

    unknown = sorted(set(raw) - set(_TIMESTAMP_KEYS))
    if unknown:
        raise TraceValidationError(f"Field `{field_name}` has unknown clock domains: {', '.join(unknown)}")
    values: dict[str, int] = {}
    for key in _TIMESTAMP_KEYS:
        value = raw.get(key, 0)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise TraceValidationError(f"Field `{field_name}.{key}` must be a non-negative integer")
        values[key] = value
    return Timestamp.from_nanos(**values)


def validate_wm_entry(data: Any) -> WindowManagerState:
    row = _require_mapping(data, what="Window manager entry")
    windows: list[WindowState] = []
    for index, raw_window in enumerate(_require_list(row.get("windows"), field_name="windows")):
        window = _require_mapping(raw_window, what=f"windows[{index}]")
        windows.append(
            WindowState(
                title=_require_name(window.get("title"), field_name=f"windows[{index}].title"),
                is_visible=_require_bool(
                    window.get("is_visible"), field_name=f"windows[{index}].is_visible", default=True
                ),
            )
        )
    focused = row.get("focused_window")
    if focused is not None and not isinstance(focused, str):
        raise TraceValidationError("Field `focused_window` must be a string when provided")
    return WindowManagerState(
        timestamp=validate_timestamp(row.get("timestamp")),
        windows=tuple(windows),
        focused_window=focused,
    )


def validate_layers_entry(data: Any) -> LayerTraceEntry:
    row = _require_mapping(data, what="Layers entry")
    layers: list[Layer] = []
    for index, raw_layer in enumerate(_require_list(row.get("layers"), field_name="layers")):
        layer = _require_mapping(raw_layer, what=f"layers[{index}]")
        layers.append(
            Layer(
                name=_require_name(layer.get("name"), field_name=f"layers[{index}].name"),
                is_visible=_require_bool(
                    layer.get("is_visible"), field_name=f"layers[{index}].is_visible", default=True
                ),
            )
        )
    return LayerTraceEntry(timestamp=validate_timestamp(row.get("timestamp")), layers=tuple(layers))


def validate_transition(data: Any) -> Transition:
    row = _require_mapping(data, what="Transition")

    transition_id = row.get("id")
    if not isinstance(transition_id, int) or isinstance(transition_id, bool):
        raise TraceValidationError("Transition requires integer field `id`")

    transition_type = row.get("type")
    if not isinstance(transition_type, str) or not is_valid_transition_type(transition_type):
        raise TraceValidationError(f"Transition #{transition_id} has unsupported `type`: {transition_type!r}")

    changes: list[WindowChange] = []
    for index, raw_change in enumerate(_require_list(row.get("changes"), field_name="changes")):
        change = _require_mapping(raw_change, what=f"changes[{index}]")
        transit_mode = change.get("transit_mode")
        if transit_mode not in TRANSITION_TYPES:
            raise TraceValidationError(
                f"Transition #{transition_id} changes[{index}] has unsupported `transit_mode`: {transit_mode!r}"
            )
        changes.append(
            WindowChange(
                window_name=_require_name(change.get("window_name"), field_name=f"changes[{index}].window_name"),
                transit_mode=str(transit_mode),
            )
        )

    start = validate_timestamp(row.get("start"), field_name="start")
    end = validate_timestamp(row.get("end"), field_name="end")
    if end < start:
        raise TraceValidationError(f"Transition #{transition_id} ends ({end}) before it starts ({start})")

    return Transition(
        id=transition_id,
        start=start,
        end=end,
        type=transition_type,
        changes=tuple(changes),
        is_incomplete=_require_bool(row.get("is_incomplete"), field_name="is_incomplete", default=False),
    )


__all__ = [
    "validate_layers_entry",
    "validate_timestamp",
    "validate_transition",
    "validate_wm_entry",
]
