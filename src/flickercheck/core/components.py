"""Component identities and the builders that resolve them per scenario.

A rule refers to the windows/layers of one logical application component.
Fixed system components (navigation bar, status bar, launcher) are known up
front; the opening and closing app are only known once the transition under
test is available, so they are resolved from its window changes when a rule
first asks for them.

Builders are plain frozen values (``name`` + a tagged factory variant) rather
than captured closures so rule configurations can compare, hash and
deduplicate them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from flickercheck.core.constants import SPLASH_SCREEN_PATTERN
from flickercheck.core.errors import (
    AmbiguousComponentError,
    MalformedComponentNameError,
    MissingAssociatedTransitionError,
    NoComponentError,
    UnknownComponentError,
)
from flickercheck.core.scenario import ScenarioInstance
from flickercheck.core.transition import Transition, WindowChange

_SPLASH_SCREEN_RE = re.compile(SPLASH_SCREEN_PATTERN)

_CLOSING_MODES = {"CLOSE", "TO_BACK"}


@dataclass(slots=True, frozen=True)
class ComponentMatcher:
    package_name: str
    class_name: str

    def to_window_name(self) -> str:
        if not self.package_name:
            return self.class_name
        return f"{self.package_name}/{self.class_name}"

    def to_short_window_name(self) -> str:
        if self.package_name and self.class_name.startswith(f"{self.package_name}."):
            return f"{self.package_name}/{self.class_name[len(self.package_name):]}"
        return self.to_window_name()

    def matches(self, name: str) -> bool:
        if not self.class_name:
            return False
        if not self.package_name:
            return self.class_name in name
        return self.to_window_name() in name or self.to_short_window_name() in name

    def __str__(self) -> str:
        return self.to_window_name()


NAV_BAR_MATCHER = ComponentMatcher("", "NavigationBar0")
STATUS_BAR_MATCHER = ComponentMatcher("", "StatusBar")
LAUNCHER_MATCHER = ComponentMatcher(
    "com.google.android.apps.nexuslauncher",
    "com.google.android.apps.nexuslauncher.NexusLauncherActivity",
)


def parse_component_name(window_name: str) -> ComponentMatcher:
    """Parse ``package/Class`` (or ``package/.Class``) into a matcher."""
    package_name, sep, class_name = window_name.partition("/")
    if not sep or not package_name or not class_name or "/" in class_name:
        raise MalformedComponentNameError(
            f"Failed to parse window name {window_name!r} into package/class form"
        )
    if class_name.startswith("."):
        class_name = f"{package_name}{class_name}"
    return ComponentMatcher(package_name, class_name)


def _distinct_window_names(changes: list[WindowChange]) -> list[str]:
    names: list[str] = []
    for change in changes:
        if change.window_name not in names:
            names.append(change.window_name)
    return names


def _single_window_name(changes: list[WindowChange], *, role: str, transition: Transition) -> str:
    window_names = _distinct_window_names(changes)
    if len(window_names) > 1:
        raise AmbiguousComponentError(
            f"Was not expecting more than one {role} window name for {transition}, got "
            + ", ".join(window_names)
        )
    if not window_names:
        raise NoComponentError(f"No {role} windows for {transition}")
    return window_names[0]


def _is_splash_screen(window_name: str) -> bool:
    return _SPLASH_SCREEN_RE.fullmatch(window_name) is not None


def resolve_opening_component(transition: Transition) -> ComponentMatcher:
    opening = [
        change
        for change in transition.changes
        if change.transit_mode == "OPEN"
        or (change.transit_mode == "TO_FRONT" and not _is_splash_screen(change.window_name))
    ]
    window_name = _single_window_name(opening, role="opening", transition=transition)
    return parse_component_name(window_name)


def resolve_closing_component(transition: Transition) -> ComponentMatcher:
    closing = [change for change in transition.changes if change.transit_mode in _CLOSING_MODES]
    window_name = _single_window_name(closing, role="closing", transition=transition)
    return parse_component_name(window_name)


@dataclass(slots=True, frozen=True)
class StaticComponent:
    matcher: ComponentMatcher

    def build(self, scenario: ScenarioInstance) -> ComponentMatcher:
        return self.matcher


@dataclass(slots=True, frozen=True)
class OpeningAppComponent:
    def build(self, scenario: ScenarioInstance) -> ComponentMatcher:
        transition = scenario.associated_transition
        if transition is None:
            raise MissingAssociatedTransitionError("Missing associated transition for OPENING_APP")
        return resolve_opening_component(transition)


@dataclass(slots=True, frozen=True)
class ClosingAppComponent:
    def build(self, scenario: ScenarioInstance) -> ComponentMatcher:
        transition = scenario.associated_transition
        if transition is None:
            raise MissingAssociatedTransitionError("Missing associated transition for CLOSING_APP")
        return resolve_closing_component(transition)


ComponentFactory = StaticComponent | OpeningAppComponent | ClosingAppComponent


@dataclass(slots=True, frozen=True)
class ComponentBuilder:
    name: str
    factory: ComponentFactory

    @property
    def requires_transition(self) -> bool:
        return not isinstance(self.factory, StaticComponent)

    def build(self, scenario: ScenarioInstance) -> ComponentMatcher:
        return self.factory.build(scenario)


NAV_BAR = ComponentBuilder("NAV_BAR", StaticComponent(NAV_BAR_MATCHER))
STATUS_BAR = ComponentBuilder("STATUS_BAR", StaticComponent(STATUS_BAR_MATCHER))
LAUNCHER = ComponentBuilder("LAUNCHER", StaticComponent(LAUNCHER_MATCHER))
OPENING_APP = ComponentBuilder("OPENING_APP", OpeningAppComponent())
CLOSING_APP = ComponentBuilder("CLOSING_APP", ClosingAppComponent())
EMPTY = ComponentBuilder("", StaticComponent(ComponentMatcher("", "")))

COMPONENTS_BY_NAME: dict[str, ComponentBuilder] = {
    builder.name: builder for builder in (OPENING_APP, CLOSING_APP, NAV_BAR, STATUS_BAR, LAUNCHER)
}


def get_component(name: str) -> ComponentBuilder:
    try:
        return COMPONENTS_BY_NAME[name]
    except KeyError:
        known = ", ".join(sorted(COMPONENTS_BY_NAME))
        raise UnknownComponentError(f"Unknown component {name!r}. Known components: {known}") from None


__all__ = [
    "CLOSING_APP",
    "COMPONENTS_BY_NAME",
    "EMPTY",
    "LAUNCHER",
    "NAV_BAR",
    "OPENING_APP",
    "STATUS_BAR",
    "ClosingAppComponent",
    "ComponentBuilder",
    "ComponentFactory",
    "ComponentMatcher",
    "OpeningAppComponent",
    "StaticComponent",
    "get_component",
    "parse_component_name",
    "resolve_closing_component",
    "resolve_opening_component",
]
