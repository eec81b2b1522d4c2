"""
Scenario assertion checks.

A finished scenario leaves a session behind: its committed structure, the
traces its commands recorded and the event log. ScenarioState gathers those
and check_assertions runs each scenario assertion against them, producing
an AssertionReport.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..traces import ScenarioAssertion, Trace
from ..validation import Violation, validate
from .registry import ASSERTION_HANDLERS


@dataclass
class ScenarioState:
    """What a scenario run produced, as seen by assertion handlers."""
    session: Any
    traces: List[Trace] = field(default_factory=list)

    @property
    def trace(self) -> Optional[Trace]:
        """The loaded trace, or the last one recorded if a later edit unloaded it."""
        if self.session.trace is not None:
            return self.session.trace
        return self.traces[-1] if self.traces else None

    @property
    def committed(self) -> Any:
        """Structure after every command, independent of the replay cursor."""
        return self.session.committed

    @property
    def events(self) -> List[str]:
        return list(self.session.events)

    def require_trace(self) -> Trace:
        trace = self.trace
        if trace is None:
            raise ValueError("No trace was produced")
        return trace

    def violations(self) -> List[Violation]:
        return validate(self.committed, self.session.validation_kind)


@dataclass
class AssertionResult:
    assertion_type: str
    description: str
    passed: bool
    message: str

    def __str__(self) -> str:
        return f"[{'PASS' if self.passed else 'FAIL'}] {self.description}: {self.message}"


@dataclass
class AssertionReport:
    """Results of every assertion of one scenario."""
    results: List[AssertionResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def failures(self) -> List[AssertionResult]:
        return [result for result in self.results if not result.passed]

    def __len__(self) -> int:
        return len(self.results)

    def __str__(self) -> str:
        failed = len(self.failures)
        lines = [str(result) for result in self.results]
        lines.append(f"{len(self.results) - failed} passed, {failed} failed")
        return "\n".join(lines)


def check_assertion(assertion: ScenarioAssertion, state: ScenarioState) -> AssertionResult:
    """
    Run one assertion's handler.

    Unknown types fail. So do handlers that cannot find what they inspect
    (no trace, a missing symbol, the wrong structure).
    """
    handler = ASSERTION_HANDLERS.get(assertion.type)
    if handler is None:
        passed, message = False, f"Unknown assertion type: {assertion.type}"
    else:
        try:
            passed, message = handler(assertion.params, state)
        except (LookupError, TypeError, ValueError, AttributeError) as e:
            passed, message = False, f"Error evaluating assertion: {e}"
    return AssertionResult(assertion.type, assertion.description, passed, message)


def check_assertions(assertions: List[ScenarioAssertion], state: ScenarioState) -> AssertionReport:
    return AssertionReport([check_assertion(assertion, state) for assertion in assertions])
