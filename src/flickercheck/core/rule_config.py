from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from flickercheck.core.components import CLOSING_APP, OPENING_APP
from flickercheck.core.constants import ALL_TRANSITIONS_KEY
from flickercheck.core.rules import AssertionRule
from flickercheck.core.transition import Transition


def dedupe_rules(rules: Iterable[AssertionRule]) -> tuple[AssertionRule, ...]:
    seen: set[AssertionRule] = set()
    ordered: list[AssertionRule] = []
    for rule in rules:
        if rule in seen:
            continue
        seen.add(rule)
        ordered.append(rule)
    return tuple(ordered)


@dataclass(slots=True, frozen=True)
class RuleConfig:
    """Transition type → ordered rules.  Rules under ``ALL`` run first for every type."""

    rules_by_type: Mapping[str, tuple[AssertionRule, ...]] = field(default_factory=dict)
    source_path: str | None = None

    def __post_init__(self) -> None:
        frozen = {key: dedupe_rules(rules) for key, rules in self.rules_by_type.items()}
        object.__setattr__(self, "rules_by_type", MappingProxyType(frozen))

    def rules_for_transition(self, transition: Transition) -> list[AssertionRule]:
        return list(
            dedupe_rules(
                [
                    *self.rules_by_type.get(ALL_TRANSITIONS_KEY, ()),
                    *self.rules_by_type.get(transition.type, ()),
                ]
            )
        )

    def transition_types(self) -> list[str]:
        return list(self.rules_by_type)

    def to_dict(self) -> dict[str, Any]:
        return {key: [rule.to_dict() for rule in rules] for key, rules in self.rules_by_type.items()}

    @classmethod
    def default(cls) -> RuleConfig:
        opening = (
            AssertionRule("layer_becomes_visible", OPENING_APP),
            AssertionRule("window_visible_at_end", OPENING_APP),
        )
        closing = (
            AssertionRule("layer_becomes_invisible", CLOSING_APP),
            AssertionRule("window_invisible_at_end", CLOSING_APP),
        )
        return cls(
            rules_by_type={
                ALL_TRANSITIONS_KEY: (
                    AssertionRule("wm_trace_not_empty"),
                    AssertionRule("layers_trace_not_empty"),
                ),
                "OPEN": opening,
                "TO_FRONT": opening,
                "CLOSE": closing,
                "TO_BACK": closing,
            }
        )


__all__ = ["RuleConfig", "dedupe_rules"]
