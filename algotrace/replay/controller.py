"""
Replay controller: a cursor over a Trace with stepping and autoplay.

Cursor 0 is the structure before the operation; cursor i shows the
snapshot of step i (1-based) and cursor len(trace) the final structure.
Every position is reconstructed from the recorded snapshot, so stepping
backward and forward always yields the same structure as running the
algorithm to that point.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional

from ..config import ReplayConfig
from ..logger import init_logger
from ..models import GraphState, HuffmanBuildState
from ..traces import StepKind, Trace
from .scheduler import VirtualScheduler


logger = init_logger(__name__)


@dataclass(frozen=True)
class Frame:
    """What a renderer needs to draw one cursor position."""
    cursor: int
    total: int
    structure: Any
    active: FrozenSet[Any] = frozenset()
    description: str = ""
    kind: Optional[StepKind] = None
    details: Mapping[str, Any] = field(default_factory=dict)
    panels: Mapping[str, Any] = field(default_factory=dict)
    subject: Any = None
    playing: bool = False

    @property
    def at_start(self) -> bool:
        return self.cursor == 0

    @property
    def at_end(self) -> bool:
        return self.cursor == self.total


def panels_for(snapshot: Any, details: Mapping[str, Any]) -> Dict[str, Any]:
    """Auxiliary panels shown next to the structure, when applicable."""
    panels: Dict[str, Any] = {}
    if isinstance(snapshot, GraphState):
        if snapshot.queue:
            panels["queue"] = list(snapshot.queue)
        if snapshot.distances:
            panels["distances"] = dict(snapshot.distances)
        if snapshot.in_degrees:
            panels["in_degrees"] = dict(snapshot.in_degrees)
        if snapshot.order:
            panels["order"] = list(snapshot.order)
        if snapshot.mst_edges:
            panels["mst_edges"] = list(snapshot.mst_edges)
        if snapshot.total_weight is not None:
            panels["total_weight"] = snapshot.total_weight
    elif isinstance(snapshot, HuffmanBuildState):
        panels["queue"] = list(snapshot.queue_frequencies())
    if "rotation_count" in details:
        panels["rotation_count"] = details["rotation_count"]
    return panels


class ReplayController:
    """
    Drives the cursor of one trace.

    Autoplay schedules one step_forward every base_delay / speed seconds on
    the injected scheduler and pauses itself at the end of the trace.
    """

    def __init__(self, scheduler=None, config: Optional[ReplayConfig] = None):
        self.scheduler = scheduler if scheduler is not None else VirtualScheduler()
        self.config = config or ReplayConfig()
        self.trace: Optional[Trace] = None
        self.cursor = 0
        self.speed = self.config.default_speed
        self.is_playing = False
        self._timer = None
        self._listeners: List[Callable[[Frame], None]] = []

    # -------------------------------------------------------------------------
    # Trace management
    # -------------------------------------------------------------------------

    def load(self, trace: Optional[Trace]):
        """Replace the current trace and rewind to cursor 0."""
        self._stop()
        self.trace = trace
        self.cursor = 0
        if trace is not None:
            logger.debug(f"Loaded trace {trace.family}/{trace.operation} ({len(trace)} steps)")
        self._notify()

    def clear(self):
        self.load(None)

    @property
    def total(self) -> int:
        return len(self.trace) if self.trace is not None else 0

    @property
    def at_end(self) -> bool:
        return self.cursor >= self.total

    @property
    def current_step(self):
        if self.trace is None or self.cursor == 0:
            return None
        return self.trace[self.cursor - 1]

    @property
    def materialized(self) -> Any:
        """Independent copy of the structure at the cursor."""
        if self.trace is None:
            return None
        return self.trace.snapshot_at(self.cursor)

    # -------------------------------------------------------------------------
    # Stepping
    # -------------------------------------------------------------------------

    def step_forward(self) -> bool:
        """Advance one step. Returns False when already at the end."""
        if self.at_end:
            return False
        self.cursor += 1
        self._notify()
        return True

    def step_backward(self) -> bool:
        """Go back one step. Returns False when already at the start."""
        if self.cursor == 0:
            return False
        self.cursor -= 1
        self._notify()
        return True

    def seek(self, cursor: int):
        if not 0 <= cursor <= self.total:
            raise IndexError(f"Cursor {cursor} outside 0..{self.total}")
        self.cursor = cursor
        self._notify()

    def reset(self):
        """Stop autoplay and rewind to the start."""
        self._stop()
        self.cursor = 0
        self._notify()

    def to_end(self):
        self._stop()
        self.cursor = self.total
        self._notify()

    # -------------------------------------------------------------------------
    # Autoplay
    # -------------------------------------------------------------------------

    def set_speed(self, speed: int):
        if not self.config.min_speed <= speed <= self.config.max_speed:
            raise ValueError(
                f"Speed {speed} outside {self.config.min_speed}..{self.config.max_speed}"
            )
        self.speed = speed

    @property
    def delay(self) -> float:
        """Seconds between autoplay ticks at the current speed."""
        return self.config.base_delay / self.speed

    def run(self, speed: Optional[int] = None):
        """Start autoplay. Calling run while already playing does nothing."""
        if speed is not None:
            self.set_speed(speed)
        if self.is_playing or self.trace is None or self.at_end:
            return
        self.is_playing = True
        logger.debug(f"Autoplay at speed {self.speed} ({self.delay:.3f}s per step)")
        self._schedule()
        self._notify()

    def pause(self):
        if not self.is_playing:
            return
        self._stop()
        self._notify()

    def _schedule(self):
        self._timer = self.scheduler.call_later(self.delay, self._tick)

    def _tick(self):
        self._timer = None
        if not self.is_playing:
            return
        self.step_forward()
        if self.at_end:
            self.is_playing = False
            self._notify()
        else:
            self._schedule()

    def _stop(self):
        self.is_playing = False
        if self._timer is not None:
            self.scheduler.cancel(self._timer)
            self._timer = None

    # -------------------------------------------------------------------------
    # Frames
    # -------------------------------------------------------------------------

    def frame(self) -> Frame:
        """View of the current cursor position."""
        if self.trace is None:
            return Frame(cursor=0, total=0, structure=None)

        step = self.current_step
        structure = self.materialized
        details = step.details if step is not None else MappingProxyType({})
        return Frame(
            cursor=self.cursor,
            total=self.total,
            structure=structure,
            active=step.active if step is not None else frozenset(),
            description=step.description if step is not None else self.trace.operation,
            kind=step.kind if step is not None else None,
            details=details,
            panels=MappingProxyType(panels_for(structure, details)),
            subject=self.trace.subject,
            playing=self.is_playing,
        )

    def subscribe(self, listener: Callable[[Frame], None]) -> Callable[[], None]:
        """Call listener with a Frame on every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self):
        if not self._listeners:
            return
        frame = self.frame()
        for listener in list(self._listeners):
            listener(frame)
