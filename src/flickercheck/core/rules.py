from __future__ import annotations

from dataclasses import dataclass

from flickercheck.core.checks import CHECKS, CheckDefinition, Violation
from flickercheck.core.components import ComponentBuilder
from flickercheck.core.errors import RuleConfigurationError
from flickercheck.core.scenario import ScenarioInstance


@dataclass(slots=True, frozen=True)
class AssertionRule:
    check: str
    component: ComponentBuilder | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        definition = CHECKS.get(self.check)
        if definition is None:
            known = ", ".join(sorted(CHECKS))
            raise RuleConfigurationError(f"Unknown check {self.check!r}. Known checks: {known}")
        if definition.requires_component and self.component is None:
            raise RuleConfigurationError(f"Check {self.check!r} requires a component")

    @property
    def rule_id(self) -> str:
        if self.name:
            return self.name
        if self.component is None:
            return self.check
        return f"{self.check}({self.component.name})"

    @property
    def definition(self) -> CheckDefinition:
        return CHECKS[self.check]

    def evaluate(self, scenario: ScenarioInstance) -> list[Violation]:
        # Transition-derived components resolve here, once per scenario.
        matcher = self.component.build(scenario) if self.component is not None else None
        return self.definition.run(scenario, matcher)

    def to_dict(self) -> dict[str, str]:
        payload = {"id": self.rule_id, "check": self.check}
        if self.component is not None:
            payload["component"] = self.component.name
        return payload


__all__ = ["AssertionRule"]
