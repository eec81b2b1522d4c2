"""
Session base class and the event log.

A session owns one mode's committed structure, its trace/controller pair
and its event log. Commands run an algorithm against a copy of the
committed structure, commit the final snapshot and load the trace.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional

from ..config import AlgotraceConfig, OverlayConfig
from ..errors import PreconditionError
from ..logger import init_logger
from ..replay import Frame, ReplayController
from ..traces import Trace, take_snapshot
from ..validation import Violation, validate


logger = init_logger(__name__)


class EventLog:
    """Append-only, human-readable log of completed commands."""

    def __init__(self, mode: str):
        self.mode = mode
        self.entries: List[str] = []

    def add(self, message: str):
        self.entries.append(message)
        logger.info(f"[{self.mode}] {message}")

    @property
    def last(self) -> Optional[str]:
        return self.entries[-1] if self.entries else None

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __contains__(self, message: str) -> bool:
        return message in self.entries


@dataclass(frozen=True)
class InspectorRow:
    """One label/value line of the node inspector."""
    label: str
    value: Any
    highlight: bool = False


class Session:
    """
    Base class for one visualizer mode.

    Subclasses set `mode`, `validation_kind` and `clear_message` and
    implement empty_structure().
    """

    mode = ""
    validation_kind: Optional[str] = None
    clear_message = "Cleared"

    def __init__(self, config: Optional[AlgotraceConfig] = None, scheduler=None):
        self.config = config or AlgotraceConfig()
        self.controller = ReplayController(scheduler, self.config.replay)
        self.events = EventLog(self.mode)
        self.committed = self.empty_structure()

    def empty_structure(self) -> Any:
        raise NotImplementedError

    @property
    def overlay(self) -> OverlayConfig:
        return self.config.overlay_for(self.mode)

    @property
    def trace(self) -> Optional[Trace]:
        return self.controller.trace

    @property
    def structure(self) -> Any:
        """The live structure: the controller's position, or the committed one."""
        if self.controller.trace is None:
            return take_snapshot(self.committed)
        return self.controller.materialized

    def frame(self) -> Frame:
        return self.controller.frame()

    def play_to_end(self):
        """Step the loaded trace to its last step."""
        while self.controller.step_forward():
            pass

    def clear(self):
        self.committed = self.empty_structure()
        self.controller.clear()
        self.reset_auxiliary()
        self.events.add(self.clear_message)

    def reset_auxiliary(self):
        pass

    def violations(self) -> List[Violation]:
        return validate(self.structure, self.validation_kind)

    def inspect(self, node_id: Any) -> List[InspectorRow]:
        return []

    # -------------------------------------------------------------------------
    # Helpers for subclasses
    # -------------------------------------------------------------------------

    def _attempt(self, algorithm: Callable[..., Trace], *args: Any,
                 silent: bool = False) -> Optional[Trace]:
        """
        Run an algorithm, turning precondition failures into an error event.

        With silent=True the failure is dropped without an event. The
        previous trace stays loaded either way.
        """
        try:
            return algorithm(*args)
        except PreconditionError as e:
            if silent:
                logger.debug(f"[{self.mode}] Ignored: {e}")
            else:
                self._error(str(e))
            return None

    def _error(self, message: str):
        logger.warning(f"[{self.mode}] {message}")
        self.events.add(f"Error: {message}")

    def _commit(self, trace: Trace, event: Optional[str]):
        """Make the trace's final structure current and load the trace."""
        self.committed = trace.final
        self.controller.load(trace)
        if event is not None:
            self.events.add(event)
