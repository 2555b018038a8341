"""Assertion engine: runs configured rules against every completed transition.

Evaluation protocol, per transition in recorded order:

1. Incomplete transitions are skipped with a log line and produce no result.
2. Both state traces are sliced to ``[transition.start, transition.end]``.
3. The rules configured for the transition type are looked up.
4. Each rule runs against the slices.  Component resolution happens inside
   the rule, so an ambiguous or missing component fails that single rule.
   Any exception raised by a rule becomes a failed ``AssertionResult``; it
   never aborts the remaining rules or transitions.

Results are ordered by transition, then by rule-configuration order.  With
``max_workers > 1`` transitions are evaluated on a thread pool and the
results are put back into transition order before being returned, so the
output is identical to a sequential run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from flickercheck.core.errors import AnalysisInputError, error_code_for
from flickercheck.core.results import AssertionResult
from flickercheck.core.rule_config import RuleConfig
from flickercheck.core.rules import AssertionRule
from flickercheck.core.scenario import ScenarioInstance
from flickercheck.core.splitter import split_traces
from flickercheck.core.trace import LayersTrace, WindowManagerTrace
from flickercheck.core.transition import Transition, TransitionsTrace

LogSink = Callable[[str], None]

_LOGGER = logging.getLogger(__name__)


def _default_sink(message: str) -> None:
    _LOGGER.debug(message)


class TransitionAsserter:
    """Runs an ordered rule list against one transition's slices."""

    def __init__(self, rules: list[AssertionRule], logger: LogSink) -> None:
        self._rules = rules
        self._logger = logger

    def analyze(
        self,
        transition: Transition,
        wm_trace: WindowManagerTrace,
        layers_trace: LayersTrace,
    ) -> list[AssertionResult]:
        scenario = ScenarioInstance.for_transition(transition, wm_trace, layers_trace)
        return [self._run_rule(rule, transition, scenario) for rule in self._rules]

    def _run_rule(
        self,
        rule: AssertionRule,
        transition: Transition,
        scenario: ScenarioInstance,
    ) -> AssertionResult:
        try:
            violations = rule.evaluate(scenario)
        except Exception as exc:
            code = error_code_for(exc)
            self._logger(f"Rule {rule.rule_id} failed to run on transition #{transition.id}: [{code}] {exc}")
            return AssertionResult(
                transition_id=transition.id,
                transition_type=transition.type,
                rule_id=rule.rule_id,
                passed=False,
                detail=str(exc) or type(exc).__name__,
                error_code=code,
            )

        if not violations:
            return AssertionResult(
                transition_id=transition.id,
                transition_type=transition.type,
                rule_id=rule.rule_id,
                passed=True,
            )
        return AssertionResult(
            transition_id=transition.id,
            transition_type=transition.type,
            rule_id=rule.rule_id,
            passed=False,
            detail="; ".join(violation.message for violation in violations),
            violations=tuple(violations),
        )


class AssertionEngine:
    def __init__(self, config: RuleConfig, logger: LogSink | None = None) -> None:
        if config is None:
            raise AnalysisInputError("AssertionEngine requires a rule configuration")
        self._config = config
        self._logger: LogSink = logger or _default_sink

    @property
    def config(self) -> RuleConfig:
        return self._config

    def analyze(
        self,
        wm_trace: WindowManagerTrace,
        layers_trace: LayersTrace,
        transitions_trace: TransitionsTrace,
        *,
        max_workers: int | None = None,
    ) -> list[AssertionResult]:
        if wm_trace is None:
            raise AnalysisInputError("analyze requires a window manager trace")
        if layers_trace is None:
            raise AnalysisInputError("analyze requires a layers trace")
        if transitions_trace is None:
            raise AnalysisInputError("analyze requires a transitions trace")
        if max_workers is not None and max_workers < 1:
            raise AnalysisInputError("max_workers must be >= 1")

        self._logger("AssertionEngine#analyze")

        pending: list[tuple[int, Transition]] = []
        for index, transition in enumerate(transitions_trace):
            if transition.is_incomplete:
                self._logger(f"Skipping running assertions on incomplete transition {transition}")
                continue
            pending.append((index, transition))

        if max_workers is None or max_workers == 1 or len(pending) < 2:
            indexed = [
                (index, self._analyze_transition(transition, wm_trace, layers_trace))
                for index, transition in pending
            ]
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                futures = [
                    (index, pool.submit(self._analyze_transition, transition, wm_trace, layers_trace))
                    for index, transition in pending
                ]
                indexed = [(index, future.result()) for index, future in futures]

        indexed.sort(key=lambda item: item[0])
        assertion_results: list[AssertionResult] = []
        for _, results in indexed:
            assertion_results.extend(results)
        return assertion_results

    def split_traces(
        self,
        transition: Transition,
        wm_trace: WindowManagerTrace,
        layers_trace: LayersTrace,
    ) -> tuple[WindowManagerTrace, LayersTrace]:
        return split_traces(transition, wm_trace, layers_trace)

    def _analyze_transition(
        self,
        transition: Transition,
        wm_trace: WindowManagerTrace,
        layers_trace: LayersTrace,
    ) -> list[AssertionResult]:
        transition_wm_trace, transition_layers_trace = self.split_traces(transition, wm_trace, layers_trace)

        rules = self._config.rules_for_transition(transition)
        self._logger(f"{len(rules)} assertions to check for {transition}")

        return TransitionAsserter(rules, self._logger).analyze(
            transition,
            transition_wm_trace,
            transition_layers_trace,
        )


__all__ = [
    "AssertionEngine",
    "LogSink",
    "TransitionAsserter",
]
