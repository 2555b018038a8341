from __future__ import annotations

from dataclasses import dataclass, field

from flickercheck.core.trace import LayersTrace, WindowManagerTrace
from flickercheck.core.transition import Transition


@dataclass(slots=True, frozen=True)
class ScenarioInstance:
    """Evaluation context for one transition's rules.

    Holds the transition-scoped slices of both state traces.  Component
    builders that derive an identity from the transition read it from
    ``associated_transition``.
    """

    type: str
    associated_transition: Transition | None = None
    wm_trace: WindowManagerTrace = field(default_factory=WindowManagerTrace)
    layers_trace: LayersTrace = field(default_factory=LayersTrace)

    @classmethod
    def for_transition(
        cls,
        transition: Transition,
        wm_trace: WindowManagerTrace,
        layers_trace: LayersTrace,
    ) -> ScenarioInstance:
        return cls(
            type=transition.type,
            associated_transition=transition,
            wm_trace=wm_trace,
            layers_trace=layers_trace,
        )


__all__ = ["ScenarioInstance"]
