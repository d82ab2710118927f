"""
Cancellable deferred callbacks, pumped by the host event loop.

Nothing here starts a thread: the host calls :meth:`TimerQueue.run_due`
from its loop (or a test advances a fake clock and calls it), and due
callbacks run on the caller's thread in the order they were scheduled.
"""
import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class TimerHandle:
    __slots__ = ('due', 'seq', 'callback', 'cancelled')

    def __init__(self, due: float, seq: int, callback: Callable[[], None]):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def __lt__(self, other):
        return (self.due, self.seq) < (other.due, other.seq)


class ManualClock:
    """A clock that only moves when told to; times are in seconds."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class TimerQueue:
    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.clock = clock or time.monotonic
        self._heap: List[TimerHandle] = []
        self._counter = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self.clock() + delay_ms / 1000.0, next(self._counter), callback)
        heapq.heappush(self._heap, handle)
        return handle

    def cancel(self, handle: TimerHandle):
        handle.cancel()

    @property
    def pending(self) -> int:
        return sum(1 for handle in self._heap if not handle.cancelled)

    def run_due(self) -> int:
        """Run every callback whose due time has passed. Returns how many ran."""
        now = self.clock()
        ran = 0
        while self._heap and self._heap[0].due <= now:
            handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            handle.callback()
            ran += 1
        return ran

    def flush(self) -> int:
        """Run every pending callback immediately, regardless of due time."""
        ran = 0
        while self._heap:
            handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            handle.callback()
            ran += 1
        if ran:
            logger.debug('Flushed %d deferred callbacks', ran)
        return ran
