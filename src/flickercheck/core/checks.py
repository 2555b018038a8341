from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, cast

from flickercheck.core.components import ComponentMatcher
from flickercheck.core.scenario import ScenarioInstance
from flickercheck.core.timestamp import Timestamp
from flickercheck.core.trace import EntryT, LayerTraceEntry, Trace, WindowManagerState


@dataclass(slots=True, frozen=True)
class Violation:
    message: str
    timestamp: Timestamp | None = None
    expected: Any | None = None
    observed: Any | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message}
        if self.timestamp is not None:
            payload["timestamp"] = self.timestamp.to_dict()
        if self.expected is not None:
            payload["expected"] = self.expected
        if self.observed is not None:
            payload["observed"] = self.observed
        return payload


CheckFn = Callable[[ScenarioInstance, ComponentMatcher | None], list[Violation]]


@dataclass(slots=True, frozen=True)
class CheckDefinition:
    name: str
    run: CheckFn
    requires_component: bool
    description: str


def _end_entry(trace: Trace[EntryT], scenario: ScenarioInstance) -> EntryT:
    """State in effect when the transition finished."""
    transition = scenario.associated_transition
    if transition is None:
        return trace.last()
    return trace.entry_at(transition.end)


def _window_visible(entry: WindowManagerState, component: ComponentMatcher) -> bool:
    return any(component.matches(window.title) for window in entry.visible_windows())


def _layer_visible(entry: LayerTraceEntry, component: ComponentMatcher) -> bool:
    return any(component.matches(layer.name) for layer in entry.visible_layers())


def _visible_window_titles(entry: WindowManagerState) -> list[str]:
    return [window.title for window in entry.visible_windows()]


def _visible_layer_names(entry: LayerTraceEntry) -> list[str]:
    return [layer.name for layer in entry.visible_layers()]


def _empty_slice(trace_name: str) -> Violation:
    return Violation(message=f"No {trace_name} entries inside the transition window")


def wm_trace_not_empty(scenario: ScenarioInstance, component: ComponentMatcher | None) -> list[Violation]:
    if scenario.wm_trace.is_empty:
        return [_empty_slice("window manager")]
    return []


def layers_trace_not_empty(scenario: ScenarioInstance, component: ComponentMatcher | None) -> list[Violation]:
    if scenario.layers_trace.is_empty:
        return [_empty_slice("layers")]
    return []


def window_visible_at_end(scenario: ScenarioInstance, component: ComponentMatcher | None) -> list[Violation]:
    matcher = cast(ComponentMatcher, component)
    if scenario.wm_trace.is_empty:
        return [_empty_slice("window manager")]
    entry = _end_entry(scenario.wm_trace, scenario)
    if _window_visible(entry, matcher):
        return []
    return [
        Violation(
            message=f"Window {matcher} is not visible at the end of the transition",
            timestamp=entry.timestamp,
            expected=str(matcher),
            observed=_visible_window_titles(entry),
        )
    ]


def window_invisible_at_end(scenario: ScenarioInstance, component: ComponentMatcher | None) -> list[Violation]:
    matcher = cast(ComponentMatcher, component)
    if scenario.wm_trace.is_empty:
        return [_empty_slice("window manager")]
    entry = _end_entry(scenario.wm_trace, scenario)
    if not _window_visible(entry, matcher):
        return []
    return [
        Violation(
            message=f"Window {matcher} is still visible at the end of the transition",
            timestamp=entry.timestamp,
            expected=f"not {matcher}",
            observed=_visible_window_titles(entry),
        )
    ]


def window_always_visible(scenario: ScenarioInstance, component: ComponentMatcher | None) -> list[Violation]:
    matcher = cast(ComponentMatcher, component)
    if scenario.wm_trace.is_empty:
        return [_empty_slice("window manager")]
    return [
        Violation(
            message=f"Window {matcher} is not visible",
            timestamp=entry.timestamp,
            expected=str(matcher),
            observed=_visible_window_titles(entry),
        )
        for entry in scenario.wm_trace
        if not _window_visible(entry, matcher)
    ]


def window_focused_at_end(scenario: ScenarioInstance, component: ComponentMatcher | None) -> list[Violation]:
    matcher = cast(ComponentMatcher, component)
    if scenario.wm_trace.is_empty:
        return [_empty_slice("window manager")]
    entry = _end_entry(scenario.wm_trace, scenario)
    focused = entry.focused_window
    if focused is not None and matcher.matches(focused):
        return []
    return [
        Violation(
            message=f"Window {matcher} is not focused at the end of the transition",
            timestamp=entry.timestamp,
            expected=str(matcher),
            observed=focused,
        )
    ]


def layer_visible_at_end(scenario: ScenarioInstance, component: ComponentMatcher | None) -> list[Violation]:
    matcher = cast(ComponentMatcher, component)
    if scenario.layers_trace.is_empty:
        return [_empty_slice("layers")]
    entry = _end_entry(scenario.layers_trace, scenario)
    if _layer_visible(entry, matcher):
        return []
    return [
        Violation(
            message=f"Layer {matcher} is not visible at the end of the transition",
            timestamp=entry.timestamp,
            expected=str(matcher),
            observed=_visible_layer_names(entry),
        )
    ]


def layer_invisible_at_end(scenario: ScenarioInstance, component: ComponentMatcher | None) -> list[Violation]:
    matcher = cast(ComponentMatcher, component)
    if scenario.layers_trace.is_empty:
        return [_empty_slice("layers")]
    entry = _end_entry(scenario.layers_trace, scenario)
    if not _layer_visible(entry, matcher):
        return []
    return [
        Violation(
            message=f"Layer {matcher} is still visible at the end of the transition",
            timestamp=entry.timestamp,
            expected=f"not {matcher}",
            observed=_visible_layer_names(entry),
        )
    ]


def layer_always_visible(scenario: ScenarioInstance, component: ComponentMatcher | None) -> list[Violation]:
    matcher = cast(ComponentMatcher, component)
    if scenario.layers_trace.is_empty:
        return [_empty_slice("layers")]
    return [
        Violation(
            message=f"Layer {matcher} is not visible",
            timestamp=entry.timestamp,
            expected=str(matcher),
            observed=_visible_layer_names(entry),
        )
        for entry in scenario.layers_trace
        if not _layer_visible(entry, matcher)
    ]


def _layer_visibility_flips(
    scenario: ScenarioInstance,
    matcher: ComponentMatcher,
    *,
    target: bool,
    check: str,
) -> list[Violation]:
    # A single flip into the target state is allowed; flipping back out of it
    # is a flicker.
    if scenario.layers_trace.is_empty:
        return [_empty_slice("layers")]
    violations: list[Violation] = []
    reached = False
    for entry in scenario.layers_trace:
        visible = _layer_visible(entry, matcher)
        if visible == target:
            reached = True
        elif reached:
            state = "invisible" if target else "visible"
            violations.append(
                Violation(
                    message=f"Layer {matcher} became {state} again after the transition reached its target state",
                    timestamp=entry.timestamp,
                    expected="visible" if target else "invisible",
                    observed=_visible_layer_names(entry),
                )
            )
    last = scenario.layers_trace.last()
    if _layer_visible(last, matcher) != target and not violations:
        violations.append(
            Violation(
                message=f"Layer {matcher} never became {'visible' if target else 'invisible'} ({check})",
                timestamp=last.timestamp,
                expected="visible" if target else "invisible",
                observed=_visible_layer_names(last),
            )
        )
    return violations


def layer_becomes_visible(scenario: ScenarioInstance, component: ComponentMatcher | None) -> list[Violation]:
    matcher = cast(ComponentMatcher, component)
    return _layer_visibility_flips(scenario, matcher, target=True, check="layer_becomes_visible")


def layer_becomes_invisible(scenario: ScenarioInstance, component: ComponentMatcher | None) -> list[Violation]:
    matcher = cast(ComponentMatcher, component)
    return _layer_visibility_flips(scenario, matcher, target=False, check="layer_becomes_invisible")


CHECKS: dict[str, CheckDefinition] = {
    definition.name: definition
    for definition in (
        CheckDefinition("wm_trace_not_empty", wm_trace_not_empty, False, "Window manager slice has entries"),
        CheckDefinition("layers_trace_not_empty", layers_trace_not_empty, False, "Layers slice has entries"),
        CheckDefinition(
            "window_visible_at_end", window_visible_at_end, True, "Component window visible when the transition ends"
        ),
        CheckDefinition(
            "window_invisible_at_end",
            window_invisible_at_end,
            True,
            "Component window not visible when the transition ends",
        ),
        CheckDefinition(
            "window_always_visible", window_always_visible, True, "Component window visible in every WM entry"
        ),
        CheckDefinition(
            "window_focused_at_end", window_focused_at_end, True, "Component window focused when the transition ends"
        ),
        CheckDefinition(
            "layer_visible_at_end", layer_visible_at_end, True, "Component layer visible when the transition ends"
        ),
        CheckDefinition(
            "layer_invisible_at_end",
            layer_invisible_at_end,
            True,
            "Component layer not visible when the transition ends",
        ),
        CheckDefinition(
            "layer_always_visible", layer_always_visible, True, "Component layer visible in every layers entry"
        ),
        CheckDefinition(
            "layer_becomes_visible",
            layer_becomes_visible,
            True,
            "Component layer turns visible once and stays visible",
        ),
        CheckDefinition(
            "layer_becomes_invisible",
            layer_becomes_invisible,
            True,
            "Component layer turns invisible once and stays invisible",
        ),
    )
}


__all__ = [
    "CHECKS",
    "CheckDefinition",
    "CheckFn",
    "Violation",
]
