"""
Trace module for recording and replaying algorithm steps.
"""

from .schema import (
    StepKind, Step, Trace, TraceRecorder, take_snapshot,
    Scenario, ScenarioCommand, ScenarioAssertion,
    ValidationError,
)
from .parser import parse_scenario, load_scenario

__all__ = [
    # Schema
    "StepKind",
    "Step",
    "Trace",
    "TraceRecorder",
    "take_snapshot",
    "Scenario",
    "ScenarioCommand",
    "ScenarioAssertion",
    "ValidationError",
    # Parser
    "parse_scenario",
    "load_scenario",
]
