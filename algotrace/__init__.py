"""
algotrace

Step-trace engine for data-structure and graph algorithms: every operation
produces a deterministic trace of snapshots that a replay controller can
step through, backward and forward, or autoplay.
"""

from .errors import AlgotraceError, PreconditionError, ValidationError
from .config import (
    MODES,
    OverlayConfig,
    ReplayConfig,
    AlgotraceConfig,
    parse_config,
    load_config,
)
from .models import (
    BinaryTree,
    BTree,
    Heap,
    HuffmanNode,
    Graph,
    GraphState,
)
from .traces import (
    StepKind,
    Step,
    Trace,
    TraceRecorder,
    Scenario,
    parse_scenario,
    load_scenario,
)
from .replay import (
    ReplayController,
    Frame,
    VirtualScheduler,
    AsyncioScheduler,
)
from .validation import Violation, validate
from .sessions import (
    Session,
    BSTSession,
    AVLSession,
    TwoThreeSession,
    TwoThreeFourSession,
    HeapSession,
    HuffmanSession,
    GraphSession,
    create_session,
)
from .runner import (
    ScenarioRunner,
    ScenarioRunResult,
    run_scenario,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "AlgotraceError",
    "PreconditionError",
    "ValidationError",
    # Config
    "MODES",
    "OverlayConfig",
    "ReplayConfig",
    "AlgotraceConfig",
    "parse_config",
    "load_config",
    # Models
    "BinaryTree",
    "BTree",
    "Heap",
    "HuffmanNode",
    "Graph",
    "GraphState",
    # Traces
    "StepKind",
    "Step",
    "Trace",
    "TraceRecorder",
    "Scenario",
    "parse_scenario",
    "load_scenario",
    # Replay
    "ReplayController",
    "Frame",
    "VirtualScheduler",
    "AsyncioScheduler",
    # Validation
    "Violation",
    "validate",
    # Sessions
    "Session",
    "BSTSession",
    "AVLSession",
    "TwoThreeSession",
    "TwoThreeFourSession",
    "HeapSession",
    "HuffmanSession",
    "GraphSession",
    "create_session",
    # Runner
    "ScenarioRunner",
    "ScenarioRunResult",
    "run_scenario",
]
