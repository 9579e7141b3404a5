"""
Tick scheduling for the timers.

The rest timer and the metronome never sleep themselves; they register a
periodic callback with a Scheduler and cancel it through the returned
handle.  ManualScheduler advances a virtual clock (used by tests and
simulations); RealtimeScheduler runs the same jobs against the wall clock.
"""

import time
from dataclasses import dataclass
from typing import Callable, Protocol

TickCallback = Callable[[], None]


def now_ms() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)


class TickHandle:
    """Cancellation token for a scheduled periodic callback."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Stop the callback; takes effect before the next tick fires."""
        self._cancelled = True


class Scheduler(Protocol):
    """Source of periodic ticks and of a monotonic clock in seconds."""

    def call_every(self, interval: float, callback: TickCallback) -> TickHandle: ...

    def monotonic(self) -> float: ...


@dataclass
class _Job:
    interval: float
    callback: TickCallback
    handle: TickHandle
    origin: float
    fired: int = 0

    @property
    def due(self) -> float:
        # Multiply rather than accumulate so 50 ms ticks do not drift
        return self.origin + (self.fired + 1) * self.interval


class _JobScheduler:
    """Shared job bookkeeping for both scheduler flavours."""

    def __init__(self) -> None:
        self._jobs: list[_Job] = []

    def monotonic(self) -> float:
        raise NotImplementedError

    def call_every(self, interval: float, callback: TickCallback) -> TickHandle:
        """
        Run ``callback`` every ``interval`` seconds until its handle is cancelled.

        Args:
            interval: Period in seconds (must be positive)
            callback: Function called on every tick

        Returns:
            Handle used to cancel the job
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TickHandle()
        self._jobs.append(_Job(interval, callback, handle, origin=self.monotonic()))
        return handle

    @property
    def pending(self) -> int:
        """Number of live (uncancelled) jobs."""
        self._prune()
        return len(self._jobs)

    def _prune(self) -> None:
        self._jobs = [j for j in self._jobs if not j.handle.cancelled]

    def _next_job(self) -> _Job | None:
        self._prune()
        if not self._jobs:
            return None
        return min(self._jobs, key=lambda j: j.due)

    def _fire(self, job: _Job) -> None:
        job.fired += 1
        job.callback()


class ManualScheduler(_JobScheduler):
    """
    Scheduler driven by an explicit virtual clock.

    ``advance(seconds)`` fires every tick that falls due within the window,
    in time order, so timers can be tested without real waits.
    """

    def __init__(self, start: float = 0.0) -> None:
        super().__init__()
        self._now = start

    def monotonic(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move the virtual clock forward, firing due ticks along the way."""
        target = self._now + seconds
        while True:
            job = self._next_job()
            # Small tolerance absorbs float error on the final boundary tick
            if job is None or job.due > target + 1e-9:
                break
            self._now = max(self._now, job.due)
            self._fire(job)
        self._now = target


class RealtimeScheduler(_JobScheduler):
    """Scheduler that sleeps on the wall clock between ticks."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        super().__init__()

    def monotonic(self) -> float:
        return self._clock()

    def run_until(self, done: Callable[[], bool]) -> None:
        """
        Block, firing ticks as they fall due, until ``done()`` is true
        or no jobs remain.
        """
        while not done():
            job = self._next_job()
            if job is None:
                return
            wait = job.due - self._clock()
            if wait > 0:
                self._sleep(wait)
            self._fire(job)
