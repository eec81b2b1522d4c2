"""
Trace replay: cursor control, autoplay and frames.
"""

from .controller import ReplayController, Frame, panels_for
from .scheduler import Event, EventQueue, VirtualClock, VirtualScheduler, AsyncioScheduler

__all__ = [
    # Controller
    "ReplayController",
    "Frame",
    "panels_for",
    # Schedulers
    "Event",
    "EventQueue",
    "VirtualClock",
    "VirtualScheduler",
    "AsyncioScheduler",
]
