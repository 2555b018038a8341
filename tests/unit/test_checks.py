from __future__ import annotations

import pytest

from flickercheck.core.checks import CHECKS
from flickercheck.core.components import ComponentMatcher
from flickercheck.core.scenario import ScenarioInstance
from flickercheck.core.timestamp import Timestamp
from flickercheck.core.trace import (
    Layer,
    LayersTrace,
    LayerTraceEntry,
    WindowManagerState,
    WindowManagerTrace,
    WindowState,
)
from flickercheck.core.transition import Transition

APP = ComponentMatcher("com.example.app", "com.example.app.MainActivity")
APP_WINDOW = "com.example.app/com.example.app.MainActivity"


def _layers(*visibility: bool) -> LayersTrace:
    return LayersTrace(
        LayerTraceEntry(
            timestamp=Timestamp(elapsed_nanos=index + 1),
            layers=(Layer(APP_WINDOW, is_visible=visible), Layer("StatusBar")),
        )
        for index, visible in enumerate(visibility)
    )


def _windows(*visibility: bool, focused: str | None = None) -> WindowManagerTrace:
    return WindowManagerTrace(
        WindowManagerState(
            timestamp=Timestamp(elapsed_nanos=index + 1),
            windows=(WindowState(APP_WINDOW, is_visible=visible),),
            focused_window=focused,
        )
        for index, visible in enumerate(visibility)
    )


def _scenario(
    wm_trace: WindowManagerTrace | None = None,
    layers_trace: LayersTrace | None = None,
) -> ScenarioInstance:
    return ScenarioInstance(
        type="OPEN",
        wm_trace=wm_trace if wm_trace is not None else WindowManagerTrace(),
        layers_trace=layers_trace if layers_trace is not None else LayersTrace(),
    )


def _run(check: str, scenario: ScenarioInstance, component: ComponentMatcher | None = APP) -> list[str]:
    return [violation.message for violation in CHECKS[check].run(scenario, component)]


def test_registry_lists_every_builtin_check() -> None:
    assert set(CHECKS) == {
        "wm_trace_not_empty",
        "layers_trace_not_empty",
        "window_visible_at_end",
        "window_invisible_at_end",
        "window_always_visible",
        "window_focused_at_end",
        "layer_visible_at_end",
        "layer_invisible_at_end",
        "layer_always_visible",
        "layer_becomes_visible",
        "layer_becomes_invisible",
    }
    assert not CHECKS["wm_trace_not_empty"].requires_component
    assert CHECKS["layer_becomes_visible"].requires_component


def test_not_empty_checks() -> None:
    assert _run("wm_trace_not_empty", _scenario(), None) == ["No window manager entries inside the transition window"]
    assert _run("layers_trace_not_empty", _scenario(layers_trace=_layers(True)), None) == []


def test_window_visibility_at_end() -> None:
    scenario = _scenario(wm_trace=_windows(False, True))
    assert _run("window_visible_at_end", scenario) == []
    assert len(_run("window_invisible_at_end", scenario)) == 1


def test_window_always_visible_reports_each_gap() -> None:
    violations = CHECKS["window_always_visible"].run(_scenario(wm_trace=_windows(True, False, True, False)), APP)
    assert [violation.timestamp.elapsed_nanos for violation in violations if violation.timestamp] == [2, 4]


def test_window_focused_at_end() -> None:
    assert _run("window_focused_at_end", _scenario(wm_trace=_windows(True, focused=APP_WINDOW))) == []
    messages = _run("window_focused_at_end", _scenario(wm_trace=_windows(True, focused="NavigationBar0")))
    assert messages == [f"Window {APP} is not focused at the end of the transition"]


def test_layer_visible_and_invisible_at_end() -> None:
    scenario = _scenario(layers_trace=_layers(True, False))
    assert len(_run("layer_visible_at_end", scenario)) == 1
    assert _run("layer_invisible_at_end", scenario) == []


def test_layer_always_visible() -> None:
    assert _run("layer_always_visible", _scenario(layers_trace=_layers(True, True))) == []
    assert len(_run("layer_always_visible", _scenario(layers_trace=_layers(True, False, True)))) == 1


class TestLayerBecomesVisible:
    def test_single_flip_passes(self) -> None:
        assert _run("layer_becomes_visible", _scenario(layers_trace=_layers(False, False, True, True))) == []

    def test_visible_from_the_start_passes(self) -> None:
        assert _run("layer_becomes_visible", _scenario(layers_trace=_layers(True, True))) == []

    def test_flicker_is_reported(self) -> None:
        violations = CHECKS["layer_becomes_visible"].run(_scenario(layers_trace=_layers(False, True, False, True)), APP)
        assert len(violations) == 1
        assert violations[0].timestamp == Timestamp(elapsed_nanos=3)
        assert "became invisible again" in violations[0].message

    def test_never_visible_is_reported(self) -> None:
        messages = _run("layer_becomes_visible", _scenario(layers_trace=_layers(False, False)))
        assert len(messages) == 1
        assert "never became visible" in messages[0]


def test_layer_becomes_invisible() -> None:
    assert _run("layer_becomes_invisible", _scenario(layers_trace=_layers(True, False, False))) == []
    assert len(_run("layer_becomes_invisible", _scenario(layers_trace=_layers(True, False, True)))) == 1


@pytest.mark.parametrize(
    "check",
    ["window_visible_at_end", "window_always_visible", "layer_invisible_at_end", "layer_becomes_invisible"],
)
def test_component_checks_on_empty_slices_fail(check: str) -> None:
    messages = _run(check, _scenario())
    assert len(messages) == 1
    assert messages[0].startswith("No ")


def test_at_end_checks_read_state_when_the_transition_finished() -> None:
    transition = Transition(id=1, start=Timestamp(elapsed_nanos=1), end=Timestamp(elapsed_nanos=2), type="OPEN")
    scenario = ScenarioInstance(
        type="OPEN",
        associated_transition=transition,
        wm_trace=_windows(False, True, False),
        layers_trace=_layers(False, True, False),
    )
    assert _run("layer_visible_at_end", scenario) == []
    assert _run("window_visible_at_end", scenario) == []
    assert len(_run("layer_visible_at_end", _scenario(layers_trace=_layers(False, True, False)))) == 1


def test_violation_to_dict() -> None:
    violations = CHECKS["window_visible_at_end"].run(_scenario(wm_trace=_windows(False)), APP)
    payload = violations[0].to_dict()
    assert payload["timestamp"] == {"elapsed_nanos": 1}
    assert payload["expected"] == str(APP)
    assert payload["observed"] == []
