"""
Rest timer and cadence metronome state machines.

Both are driven by an injected Scheduler and report to an optional
Feedback device.  Stopping either one cancels its pending tick before
returning, so no stale callback can fire afterwards.
"""

from typing import Literal

from .config import (
    DEFAULT_INTENSITY,
    DOWN_TONE_HZ,
    LIGHT_INTENSITY_RATIO,
    METRONOME_TICK_SECONDS,
    METRONOME_TOTAL_REPS,
    MODERATE_INTENSITY_RATIO,
    PHASE_DURATION_SECONDS,
    REST_COMPLETE_VIBRATION,
    REST_DURATIONS,
    REST_TICK_SECONDS,
    UP_TONE_HZ,
)
from .feedback import Feedback, safe_beep, safe_vibrate
from .models import Intensity, Phase
from .scheduler import Scheduler, TickHandle

TimerState = Literal["idle", "running", "paused"]

# Tolerance for float error when the phase clock reaches the boundary
_PHASE_EPSILON = 1e-9


def classify_intensity(weight: float, max_weight: float) -> Intensity:
    """
    Classify a set's intensity relative to the heaviest set so far.

    light:    weight <= 60% of max
    moderate: weight <= 85% of max
    heavy:    above 85% of max

    Args:
        weight: Weight of the set just logged
        max_weight: Heaviest weight this session for the exercise,
            including the set just logged

    Returns:
        Intensity label ("moderate" when max_weight is 0)
    """
    if max_weight == 0:
        return "moderate"
    ratio = weight / max_weight
    if ratio <= LIGHT_INTENSITY_RATIO:
        return "light"
    if ratio <= MODERATE_INTENSITY_RATIO:
        return "moderate"
    return "heavy"


def rest_duration(intensity: str) -> int:
    """Rest seconds for an intensity label."""
    if intensity not in REST_DURATIONS:
        raise ValueError(
            f"Unknown intensity '{intensity}'. Valid: {', '.join(REST_DURATIONS)}"
        )
    return REST_DURATIONS[intensity]


def format_countdown(seconds: int) -> str:
    """Format seconds as M:SS (e.g. 95 -> "1:35")."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def format_elapsed(elapsed_ms: int) -> str:
    """Format elapsed milliseconds as MM:SS for the session clock."""
    elapsed = max(0, elapsed_ms // 1000)
    return f"{elapsed // 60:02d}:{elapsed % 60:02d}"


class RestTimer:
    """
    Countdown between sets.

    idle -> running (start) -> paused (pause) -> running (resume);
    reset or reaching zero returns to idle.  Completion vibrates once.
    """

    def __init__(self, scheduler: Scheduler, feedback: Feedback | None = None) -> None:
        self._scheduler = scheduler
        self._feedback = feedback
        self._handle: TickHandle | None = None
        self.seconds_left = 0
        self.total_seconds = 0
        self.is_running = False
        self.intensity: Intensity = DEFAULT_INTENSITY  # type: ignore[assignment]
        self.completions = 0

    @property
    def state(self) -> TimerState:
        if self.is_running:
            return "running"
        if self.seconds_left > 0:
            return "paused"
        return "idle"

    @property
    def progress_percent(self) -> float:
        """Share of the rest period already elapsed, 0-100."""
        if self.total_seconds <= 0:
            return 0.0
        return (self.total_seconds - self.seconds_left) / self.total_seconds * 100

    def start(self, intensity: Intensity = "moderate") -> None:
        """Start a fresh countdown for the given intensity."""
        duration = rest_duration(intensity)
        self._cancel()
        self.intensity = intensity
        self.total_seconds = duration
        self.seconds_left = duration
        self._run()

    def pause(self) -> None:
        """Freeze the countdown, keeping the remaining time."""
        self._cancel()
        self.is_running = False

    def resume(self) -> None:
        """Continue a paused countdown; nothing to resume at zero."""
        if self.is_running or self.seconds_left <= 0:
            return
        self._run()

    def reset(self) -> None:
        """Clear back to idle."""
        self._cancel()
        self.seconds_left = 0
        self.total_seconds = 0
        self.is_running = False

    def adjust_time(self, delta: int) -> None:
        """
        Shift remaining and total time by ``delta`` seconds (floored at 0).

        Usable in any state; a running countdown pushed to zero completes.
        """
        self.seconds_left = max(0, self.seconds_left + delta)
        self.total_seconds = max(0, self.total_seconds + delta)
        if self.is_running and self.seconds_left == 0:
            self._complete()

    def _run(self) -> None:
        self.is_running = True
        self._handle = self._scheduler.call_every(REST_TICK_SECONDS, self._tick)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        if not self.is_running:
            return
        self.seconds_left = max(0, self.seconds_left - 1)
        if self.seconds_left == 0:
            self._complete()

    def _complete(self) -> None:
        self._cancel()
        self.is_running = False
        self.completions += 1
        safe_vibrate(self._feedback, REST_COMPLETE_VIBRATION)


class Metronome:
    """
    Fixed-cadence rep metronome.

    Alternates ``up`` and ``down`` phases of equal length; a rep is counted
    at the end of each ``down`` phase and the metronome stops by itself
    after the last rep.  A high tone marks the start of ``up``, a low tone
    the start of ``down``.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        feedback: Feedback | None = None,
        total_reps: int = METRONOME_TOTAL_REPS,
        phase_duration: float = PHASE_DURATION_SECONDS,
    ) -> None:
        self._scheduler = scheduler
        self._feedback = feedback
        self._handle: TickHandle | None = None
        self._phase_start = 0.0
        self.total_reps = total_reps
        self.phase_duration = phase_duration
        self.phase: Phase = "up"
        self.progress = 0.0
        self.elapsed = 0.0
        self.current_rep = 1
        self.is_active = False

    def start(self) -> None:
        """Start from the first ``up`` phase."""
        self._cancel()
        self._reset_position()
        self._phase_start = self._scheduler.monotonic()
        self.is_active = True
        self._handle = self._scheduler.call_every(METRONOME_TICK_SECONDS, self._tick)
        safe_beep(self._feedback, UP_TONE_HZ)

    def stop(self) -> None:
        """Halt and reset phase, rep and progress."""
        self._cancel()
        self.is_active = False
        self._reset_position()

    def toggle(self) -> None:
        if self.is_active:
            self.stop()
        else:
            self.start()

    def _reset_position(self) -> None:
        self.phase = "up"
        self.progress = 0.0
        self.elapsed = 0.0
        self.current_rep = 1

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        if not self.is_active:
            return
        now = self._scheduler.monotonic()
        dt = now - self._phase_start

        if dt < self.phase_duration - _PHASE_EPSILON:
            self.progress = dt / self.phase_duration
            self.elapsed = dt
            return

        self.progress = 1.0
        self.elapsed = self.phase_duration

        if self.phase == "down":
            if self.current_rep >= self.total_reps:
                self.stop()
                return
            self.current_rep += 1

        self.phase = "down" if self.phase == "up" else "up"
        self._phase_start = now
        self.progress = 0.0
        self.elapsed = 0.0
        safe_beep(self._feedback, UP_TONE_HZ if self.phase == "up" else DOWN_TONE_HZ)
