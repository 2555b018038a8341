from __future__ import annotations

import pytest

from flickercheck.core.components import (
    CLOSING_APP,
    COMPONENTS_BY_NAME,
    EMPTY,
    LAUNCHER,
    NAV_BAR,
    OPENING_APP,
    ComponentBuilder,
    ComponentMatcher,
    OpeningAppComponent,
    StaticComponent,
    get_component,
    parse_component_name,
    resolve_closing_component,
    resolve_opening_component,
)
from flickercheck.core.errors import (
    AmbiguousComponentError,
    MalformedComponentNameError,
    MissingAssociatedTransitionError,
    NoComponentError,
    UnknownComponentError,
)
from flickercheck.core.scenario import ScenarioInstance
from flickercheck.core.timestamp import Timestamp
from flickercheck.core.trace import LayersTrace, WindowManagerTrace
from flickercheck.core.transition import Transition, WindowChange


def _transition(*changes: tuple[str, str], transition_type: str = "OPEN") -> Transition:
    return Transition(
        id=1,
        start=Timestamp(elapsed_nanos=100),
        end=Timestamp(elapsed_nanos=200),
        type=transition_type,
        changes=tuple(WindowChange(name, mode) for name, mode in changes),
    )


class TestOpeningComponent:
    def test_single_open_change_resolves(self) -> None:
        matcher = resolve_opening_component(_transition(("com.example.app/com.example.app.MainActivity", "OPEN")))
        assert matcher == ComponentMatcher("com.example.app", "com.example.app.MainActivity")

    def test_short_class_name_expands_with_package(self) -> None:
        matcher = resolve_opening_component(_transition(("com.example.app/.MainActivity", "OPEN")))
        assert matcher.class_name == "com.example.app.MainActivity"
        assert matcher.to_short_window_name() == "com.example.app/.MainActivity"

    def test_splash_screen_to_front_is_ignored(self) -> None:
        transition = _transition(
            ("Splash Screen com.example.app", "TO_FRONT"),
            ("com.example.app/.MainActivity", "TO_FRONT"),
            transition_type="TO_FRONT",
        )
        assert resolve_opening_component(transition).package_name == "com.example.app"

    def test_splash_screen_open_is_not_filtered(self) -> None:
        transition = _transition(("Splash Screen com.example.app", "OPEN"))
        with pytest.raises(MalformedComponentNameError):
            resolve_opening_component(transition)

    def test_repeated_window_name_is_not_ambiguous(self) -> None:
        transition = _transition(
            ("com.example.app/.MainActivity", "OPEN"),
            ("com.example.app/.MainActivity", "TO_FRONT"),
        )
        assert resolve_opening_component(transition).package_name == "com.example.app"

    def test_two_distinct_windows_are_ambiguous(self) -> None:
        transition = _transition(
            ("com.example.app/.MainActivity", "OPEN"),
            ("com.other.app/.OtherActivity", "OPEN"),
        )
        with pytest.raises(AmbiguousComponentError) as exc_info:
            resolve_opening_component(transition)
        assert "com.example.app/.MainActivity" in str(exc_info.value)
        assert "com.other.app/.OtherActivity" in str(exc_info.value)

    def test_no_opening_window_raises(self) -> None:
        with pytest.raises(NoComponentError, match="No opening windows"):
            resolve_opening_component(_transition(("com.example.app/.MainActivity", "CLOSE")))

    def test_empty_changes_raise(self) -> None:
        with pytest.raises(NoComponentError):
            resolve_opening_component(_transition())


class TestClosingComponent:
    def test_close_and_to_back_count_as_closing(self) -> None:
        closing = _transition(("com.example.app/.MainActivity", "CLOSE"), transition_type="CLOSE")
        to_back = _transition(("com.example.app/.MainActivity", "TO_BACK"), transition_type="TO_BACK")
        assert resolve_closing_component(closing) == resolve_closing_component(to_back)

    def test_opening_changes_are_not_closing(self) -> None:
        with pytest.raises(NoComponentError, match="No closing windows"):
            resolve_closing_component(_transition(("com.example.app/.MainActivity", "OPEN")))

    def test_ambiguous_closing(self) -> None:
        transition = _transition(
            ("com.example.app/.MainActivity", "CLOSE"),
            ("com.other.app/.OtherActivity", "TO_BACK"),
            transition_type="CLOSE",
        )
        with pytest.raises(AmbiguousComponentError):
            resolve_closing_component(transition)


@pytest.mark.parametrize(
    "name",
    ["no-slash", "/OnlyClass", "com.example.app/", "a/b/c", ""],
)
def test_malformed_component_names(name: str) -> None:
    with pytest.raises(MalformedComponentNameError):
        parse_component_name(name)


class TestMatcher:
    def test_matches_full_and_short_window_names(self) -> None:
        matcher = ComponentMatcher("com.example.app", "com.example.app.MainActivity")
        assert matcher.matches("1234 com.example.app/com.example.app.MainActivity#0")
        assert matcher.matches("com.example.app/.MainActivity")
        assert not matcher.matches("com.other.app/.MainActivity")

    def test_class_only_matcher(self) -> None:
        assert NAV_BAR.build(ScenarioInstance(type="OPEN")).matches("NavigationBar0#42")

    def test_empty_matcher_matches_nothing(self) -> None:
        matcher = EMPTY.build(ScenarioInstance(type="OPEN"))
        assert not matcher.matches("anything")
        assert str(matcher) == ""


class TestBuilders:
    def test_app_builders_need_a_transition(self) -> None:
        scenario = ScenarioInstance(type="OPEN")
        with pytest.raises(MissingAssociatedTransitionError):
            OPENING_APP.build(scenario)
        with pytest.raises(MissingAssociatedTransitionError):
            CLOSING_APP.build(scenario)

    def test_opening_builder_reads_associated_transition(self) -> None:
        transition = _transition(("com.example.app/.MainActivity", "OPEN"))
        scenario = ScenarioInstance.for_transition(transition, WindowManagerTrace(), LayersTrace())
        assert OPENING_APP.build(scenario).package_name == "com.example.app"

    def test_static_builder_ignores_scenario(self) -> None:
        assert LAUNCHER.build(ScenarioInstance(type="CLOSE")).package_name == "com.google.android.apps.nexuslauncher"
        assert not LAUNCHER.requires_transition
        assert OPENING_APP.requires_transition

    def test_builders_are_comparable_and_hashable(self) -> None:
        rebuilt = ComponentBuilder("OPENING_APP", OpeningAppComponent())
        assert rebuilt == OPENING_APP
        assert hash(rebuilt) == hash(OPENING_APP)
        assert OPENING_APP != CLOSING_APP
        assert len({OPENING_APP, rebuilt, NAV_BAR}) == 2
        assert ComponentBuilder("X", StaticComponent(ComponentMatcher("", "X"))) != NAV_BAR

    def test_registry_lookup(self) -> None:
        assert get_component("NAV_BAR") is NAV_BAR
        assert set(COMPONENTS_BY_NAME) == {"OPENING_APP", "CLOSING_APP", "NAV_BAR", "STATUS_BAR", "LAUNCHER"}
        with pytest.raises(UnknownComponentError, match="Unknown component 'DOCK'"):
            get_component("DOCK")
