"""
Tick schedulers for autoplay.

Contains:
- Event, EventQueue and VirtualClock for discrete, explicitly advanced time
- VirtualScheduler used by tests and the scenario runner
- AsyncioScheduler backed by an asyncio event loop
"""

import asyncio
import heapq
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional


@dataclass(order=True)
class Event:
    """A callback scheduled to run at a specific virtual time."""
    time: float
    priority: int = field(compare=True)
    callback: Callable[[], Any] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self):
        self.cancelled = True


class EventQueue:
    """Priority queue of pending events, ordered by time then scheduling order."""

    def __init__(self):
        self._queue: List[Event] = []
        self._counter = 0

    def schedule(self, time: float, callback: Callable[[], Any]) -> Event:
        """Schedule a callback to run at the given time."""
        event = Event(time, self._counter, callback)
        heapq.heappush(self._queue, event)
        self._counter += 1
        return event

    def next_event(self) -> Optional[Event]:
        """Pop and return the next event, or None if queue is empty."""
        if self._queue:
            return heapq.heappop(self._queue)
        return None

    def peek_time(self) -> Optional[float]:
        """Return the time of the next event without removing it."""
        if self._queue:
            return self._queue[0].time
        return None

    def __len__(self) -> int:
        return sum(1 for event in self._queue if not event.cancelled)

    def is_empty(self) -> bool:
        return len(self) == 0


class VirtualClock:
    """Tracks virtual time in seconds."""

    def __init__(self, start_time: float = 0.0):
        self.current_time = start_time

    def advance_to(self, time: float):
        """Advance clock to the specified time."""
        assert time >= self.current_time, f"Cannot go backwards in time: {time} < {self.current_time}"
        self.current_time = time


class VirtualScheduler:
    """
    Scheduler on virtual time. Nothing runs until advance() is called.

        scheduler = VirtualScheduler()
        controller = ReplayController(scheduler)
        controller.run(speed=10)
        scheduler.advance(0.1)   # exactly one tick
    """

    def __init__(self, start_time: float = 0.0):
        self.clock = VirtualClock(start_time)
        self.queue = EventQueue()

    @property
    def now(self) -> float:
        return self.clock.current_time

    @property
    def pending(self) -> int:
        return len(self.queue)

    def call_later(self, delay: float, callback: Callable[[], Any]) -> Event:
        return self.queue.schedule(self.now + delay, callback)

    def cancel(self, handle: Event):
        handle.cancel()

    def advance(self, seconds: float) -> int:
        """Run every event due within the next `seconds`. Returns the number run."""
        target = self.now + seconds
        ran = 0
        while self.queue.peek_time() is not None and self.queue.peek_time() <= target:
            event = self.queue.next_event()
            self.clock.advance_to(event.time)
            if event.cancelled:
                continue
            event.callback()
            ran += 1
        self.clock.advance_to(target)
        return ran

    def run_until_idle(self, max_events: int = 100000) -> int:
        """Run events until none are pending. Returns the number run."""
        ran = 0
        while ran < max_events:
            event = self.queue.next_event()
            if event is None:
                break
            self.clock.advance_to(event.time)
            if event.cancelled:
                continue
            event.callback()
            ran += 1
        return ran


class AsyncioScheduler:
    """Scheduler that defers ticks with loop.call_later."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)

    def cancel(self, handle: asyncio.TimerHandle):
        handle.cancel()
