from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from flickercheck.core.checks import Violation
from flickercheck.core.constants import REPORT_SCHEMA_VERSION


@dataclass(slots=True, frozen=True)
class AssertionResult:
    transition_id: int
    transition_type: str
    rule_id: str
    passed: bool
    detail: str | None = None
    error_code: str | None = None
    violations: tuple[Violation, ...] = ()

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "transition_id": self.transition_id,
            "transition_type": self.transition_type,
            "rule_id": self.rule_id,
            "status": self.status,
            "violations": [violation.to_dict() for violation in self.violations],
        }
        if self.detail is not None:
            payload["detail"] = self.detail
        if self.error_code is not None:
            payload["error_code"] = self.error_code
        return payload


class AnalysisReport:
    """Read-only grouping of engine results for reporting."""

    __slots__ = ("_results",)

    def __init__(self, results: Iterable[AssertionResult]) -> None:
        self._results: tuple[AssertionResult, ...] = tuple(results)

    @property
    def results(self) -> tuple[AssertionResult, ...]:
        return self._results

    @property
    def failures(self) -> list[AssertionResult]:
        return [result for result in self._results if not result.passed]

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self._results)

    def __len__(self) -> int:
        return len(self._results)

    def by_transition(self) -> dict[int, list[AssertionResult]]:
        grouped: dict[int, list[AssertionResult]] = {}
        for result in self._results:
            grouped.setdefault(result.transition_id, []).append(result)
        return grouped

    def by_rule(self) -> dict[str, list[AssertionResult]]:
        grouped: dict[str, list[AssertionResult]] = {}
        for result in self._results:
            grouped.setdefault(result.rule_id, []).append(result)
        return grouped

    def summary(self) -> dict[str, Any]:
        failed = len(self.failures)
        return {
            "transitions": len(self.by_transition()),
            "assertions": len(self._results),
            "passed": len(self._results) - failed,
            "failed": failed,
            "errors": sum(1 for result in self._results if result.error_code is not None),
            "status": "PASS" if failed == 0 else "FAIL",
        }

    def to_dict(self) -> dict[str, Any]:
        transitions: list[dict[str, Any]] = []
        for transition_id, results in self.by_transition().items():
            transitions.append(
                {
                    "transition_id": transition_id,
                    "transition_type": results[0].transition_type,
                    "results": [result.to_dict() for result in results],
                }
            )
        return {
            "report_schema_version": REPORT_SCHEMA_VERSION,
            "summary": self.summary(),
            "transitions": transitions,
        }


__all__ = [
    "AnalysisReport",
    "AssertionResult",
]
