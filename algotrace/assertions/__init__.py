"""
Scenario assertion evaluation.
"""

from .evaluator import (
    AssertionReport,
    AssertionResult,
    ScenarioState,
    check_assertion,
    check_assertions,
)
from .registry import (
    ASSERTION_HANDLERS,
    register_assertion_handler,
)

__all__ = [
    "AssertionReport",
    "AssertionResult",
    "ScenarioState",
    "check_assertion",
    "check_assertions",
    "ASSERTION_HANDLERS",
    "register_assertion_handler",
]
