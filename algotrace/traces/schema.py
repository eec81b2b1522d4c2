"""
Trace schema definitions.

A Trace is the ordered, immutable list of Steps produced by one invocation
of one mutation algorithm. Scenario types describe YAML scripts of session
commands replayed by the runner.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..errors import ValidationError


class StepKind(Enum):
    """Every kind of step any algorithm family emits."""
    # Trees
    INSERT = "insert"
    COMPARE = "compare"
    DETECT_IMBALANCE = "detect-imbalance"
    IDENTIFY_CASE = "identify-case"
    ROTATE = "rotate"
    SPLIT = "split"
    PROPAGATE = "propagate"
    DELETE = "delete"
    FIND_SUCCESSOR = "find-successor"
    ATTACH = "attach"
    EDIT = "edit"
    # Heap
    SIFT_UP = "sift-up"
    SIFT_DOWN = "sift-down"
    SWAP = "swap"
    EXTRACT = "extract"
    CHANGE_KEY = "change-key"
    # Huffman
    INIT = "init"
    POP = "pop"
    MERGE = "merge"
    PUSH = "push"
    # Graphs
    START = "start"
    CANDIDATES = "candidates"
    SKIP = "skip"
    ADD_MST = "add-mst"
    VISIT = "visit"
    RELAX = "relax"
    QUEUE = "queue"
    PROCESS = "process"
    ENQUEUE = "enqueue"
    # Terminal
    COMPLETE = "complete"
    ERROR = "error"


def take_snapshot(structure: Any) -> Any:
    """Independent copy of a structure; immutable values return themselves."""
    clone = getattr(structure, "clone", None)
    return clone() if clone is not None else structure


@dataclass(frozen=True)
class Step:
    """
    One discrete, visualizable moment of an algorithm.

    `snapshot` belongs to the trace. Use Trace.snapshot_at for a copy that
    can be edited.
    """
    kind: StepKind
    description: str
    snapshot: Any = None
    active: FrozenSet[Any] = frozenset()
    details: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "active", frozenset(self.active))
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    @property
    def is_terminal(self) -> bool:
        return self.kind in (StepKind.COMPLETE, StepKind.ERROR)

    @property
    def is_error(self) -> bool:
        return self.kind == StepKind.ERROR


@dataclass(frozen=True)
class Trace:
    """
    A recorded sequence of steps for replay.

    `subject` holds the fixed input of algorithms whose snapshots are
    auxiliary state only (the graph for Prim, Dijkstra and Kahn).
    """
    family: str
    operation: str
    initial: Any
    steps: Tuple[Step, ...]
    subject: Any = None

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]

    @property
    def last_step(self) -> Optional[Step]:
        return self.steps[-1] if self.steps else None

    @property
    def final(self) -> Any:
        """Copy of the structure after the whole operation."""
        return self.snapshot_at(len(self.steps))

    @property
    def succeeded(self) -> bool:
        return self.last_step is None or not self.last_step.is_error

    def snapshot_at(self, cursor: int) -> Any:
        """
        Copy of the structure after `cursor` steps (0 is the initial state).

        Callers may edit the result freely; the recorded snapshot is untouched.
        """
        if not 0 <= cursor <= len(self.steps):
            raise IndexError(f"Cursor {cursor} outside 0..{len(self.steps)}")
        if cursor == 0:
            return take_snapshot(self.initial)
        return take_snapshot(self.steps[cursor - 1].snapshot)

    def kinds(self) -> List[StepKind]:
        return [step.kind for step in self.steps]

    def steps_of(self, kind: StepKind) -> List[Step]:
        return [step for step in self.steps if step.kind == kind]

    def descriptions(self) -> List[str]:
        return [step.description for step in self.steps]


class TraceRecorder:
    """
    Append-only builder for a Trace.

    Usage inside an algorithm:
        recorder = TraceRecorder("heap", "insert 5", heap)
        recorder.record(StepKind.INSERT, "Insert 5 at index 3", heap, active=[3])
        return recorder.finish()
    """

    def __init__(self, family: str, operation: str, initial: Any, subject: Any = None):
        self.family = family
        self.operation = operation
        self.initial = take_snapshot(initial)
        self.subject = take_snapshot(subject)
        self._steps: List[Step] = []

    def __len__(self) -> int:
        return len(self._steps)

    def record(self, kind: StepKind, description: str, structure: Any,
               active: Iterable[Any] = (), **details: Any) -> Step:
        step = Step(
            kind=kind,
            description=description,
            snapshot=take_snapshot(structure),
            active=frozenset(active),
            details=details,
        )
        self._steps.append(step)
        return step

    def finish(self) -> Trace:
        return Trace(
            family=self.family,
            operation=self.operation,
            initial=self.initial,
            steps=tuple(self._steps),
            subject=self.subject,
        )


# =============================================================================
# Scenarios
# =============================================================================

@dataclass
class ScenarioCommand:
    """A single session command in a scenario."""
    command: str
    params: Dict[str, Any] = field(default_factory=dict)
    args: List[Any] = field(default_factory=list)
    play: bool = False


@dataclass
class ScenarioAssertion:
    """An assertion to check at the end of a scenario."""
    type: str
    description: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Scenario:
    """A scripted sequence of commands against one visualizer mode."""
    name: str
    description: str
    mode: str
    commands: List[ScenarioCommand]
    assertions: List[ScenarioAssertion]
    options: Dict[str, Any] = field(default_factory=dict)


__all__ = [
    "StepKind",
    "Step",
    "Trace",
    "TraceRecorder",
    "take_snapshot",
    "ScenarioCommand",
    "ScenarioAssertion",
    "Scenario",
    "ValidationError",
]
