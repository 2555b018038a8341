"""flickercheck core: trace primitives, component resolution and the assertion engine.

This package holds the evaluation protocol: slicing state traces to a
transition's bounds, resolving opening/closing components, running configured
rules and collecting results.  It has **no** dependency on typer or any CLI
framework.
"""
from __future__ import annotations

from flickercheck.core.components import (
    ComponentBuilder,
    ComponentMatcher,
    get_component,
    resolve_closing_component,
    resolve_opening_component,
)
from flickercheck.core.engine import AssertionEngine, TransitionAsserter
from flickercheck.core.results import AnalysisReport, AssertionResult
from flickercheck.core.rule_config import RuleConfig
from flickercheck.core.rules import AssertionRule
from flickercheck.core.scenario import ScenarioInstance
from flickercheck.core.splitter import split_traces
from flickercheck.core.timestamp import Timestamp
from flickercheck.core.trace import (
    Layer,
    LayersTrace,
    LayerTraceEntry,
    Trace,
    WindowManagerState,
    WindowManagerTrace,
    WindowState,
)
from flickercheck.core.transition import Transition, TransitionsTrace, WindowChange

__all__ = [
    "AnalysisReport",
    "AssertionEngine",
    "AssertionResult",
    "AssertionRule",
    "ComponentBuilder",
    "ComponentMatcher",
    "Layer",
    "LayerTraceEntry",
    "LayersTrace",
    "RuleConfig",
    "ScenarioInstance",
    "Timestamp",
    "Trace",
    "Transition",
    "TransitionAsserter",
    "TransitionsTrace",
    "WindowChange",
    "WindowManagerState",
    "WindowManagerTrace",
    "WindowState",
    "get_component",
    "resolve_closing_component",
    "resolve_opening_component",
    "split_traces",
]
