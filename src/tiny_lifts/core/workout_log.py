"""
Workout logging workflow.

WorkoutLogger is the only component that writes training records: it
starts sessions, logs sets (assigning set numbers and kicking off the rest
timer) and ends sessions, completing or discarding them.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Callable

from ..io.repositories import Repositories
from ..io.serializers import ValidationError, parse_reps, parse_weight
from .config import DEFAULT_START_WEIGHT_KG, DEFAULT_TARGET_REPS, SET_LOGGED_VIBRATION
from .feedback import Feedback, safe_vibrate
from .metrics import next_set_number, total_volume
from .models import Session, SetRecord, VolumeInfo
from .scheduler import now_ms
from .timers import Metronome, RestTimer, classify_intensity
from .volume import session_volume

logger = logging.getLogger(__name__)


def new_id(prefix: str) -> str:
    """Short random record id, e.g. ``ses-3f9a1c2b``."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


@dataclass
class SetInput:
    """Pending weight/reps entry for one exercise."""

    weight: float
    reps: int


class WorkoutLogger:
    """
    Orchestrates one training session at a time.

    Args:
        repos: Repositories to read and write
        rest_timer: Timer started after every logged set
        metronome: Metronome stopped when the session ends
        feedback: Haptics device for the per-set pulse
        clock: Epoch-millisecond clock
        id_factory: Record id generator taking a prefix
    """

    def __init__(
        self,
        repos: Repositories,
        rest_timer: RestTimer,
        metronome: Metronome,
        feedback: Feedback | None = None,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[str], str] = new_id,
    ) -> None:
        self.repos = repos
        self.rest_timer = rest_timer
        self.metronome = metronome
        self.feedback = feedback
        self.clock = clock
        self.id_factory = id_factory
        self.session_id: str | None = None
        self._inputs: dict[str, SetInput] = {}

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    @property
    def active_session(self) -> Session | None:
        if self.session_id is None:
            return None
        session = self.repos.sessions.get(self.session_id)
        if session is None or session.status != "active":
            return None
        return session

    def resume_active(self) -> Session | None:
        """Attach to an active session left in the store by an earlier run."""
        session = self.repos.sessions.active()
        self.session_id = session.session_id if session else None
        return session

    def start_session(self, workout_id: str) -> Session:
        """
        Create a new active session for a workout.

        Raises:
            ValueError: If the workout is unknown or a session is already active
        """
        with self.repos.store.transaction():
            if self.repos.workouts.get(workout_id) is None:
                raise ValueError(f"Unknown workout '{workout_id}'")
            if self.active_session is not None:
                raise ValueError(
                    f"Session {self.session_id} is still active. End it before starting another."
                )

            session = Session(
                session_id=self.id_factory("ses"),
                workout_id=workout_id,
                start_time=self.clock(),
            )
            self.repos.sessions.save(session)
        self.session_id = session.session_id
        self._inputs.clear()
        logger.info("Started session %s (%s)", session.session_id, workout_id)
        return session

    def end_session(self) -> Session | None:
        """
        Finish the active session.

        The session is completed when at least one set was logged and its
        live volume is positive; otherwise it is deleted together with its
        sets.  Timers are reset either way.

        Returns:
            The completed session, or None if it was discarded (or none was active)
        """
        completed: Session | None = None

        with self.repos.store.transaction():
            session = self.active_session
            if session is not None:
                sets = self.repos.sets.for_session(session.session_id)
                volume = total_volume(sets)
                if sets and volume > 0:
                    self.repos.sessions.mark_completed(session.session_id, self.clock(), volume)
                    completed = self.repos.sessions.get(session.session_id)
                    logger.info(
                        "Completed session %s: %d sets, volume %.1f",
                        session.session_id, len(sets), volume,
                    )
                else:
                    self.repos.sets.delete_for_session(session.session_id)
                    self.repos.sessions.delete(session.session_id)
                    logger.info("Discarded empty session %s", session.session_id)

        self.rest_timer.reset()
        self.metronome.stop()
        self.session_id = None
        self._inputs.clear()
        return completed

    # ------------------------------------------------------------------
    # Input state
    # ------------------------------------------------------------------

    def current_input(self, exercise_id: str) -> SetInput:
        """Pending entry for an exercise, defaulting to its configured values."""
        if exercise_id in self._inputs:
            return self._inputs[exercise_id]
        exercise = self.repos.exercises.get(exercise_id)
        if exercise is None:
            return SetInput(DEFAULT_START_WEIGHT_KG, DEFAULT_TARGET_REPS)
        return SetInput(exercise.default_weight, exercise.target_reps)

    def set_weight(self, exercise_id: str, raw: str | float) -> bool:
        """
        Update the pending weight; an invalid entry keeps the previous value.

        Returns:
            True if the entry was accepted
        """
        try:
            weight = parse_weight(raw)
        except ValidationError as e:
            logger.warning("%s", e)
            return False
        current = self.current_input(exercise_id)
        self._inputs[exercise_id] = SetInput(weight, current.reps)
        return True

    def set_reps(self, exercise_id: str, raw: str | int) -> bool:
        """
        Update the pending reps; an invalid entry keeps the previous value.

        Returns:
            True if the entry was accepted
        """
        try:
            reps = parse_reps(raw)
        except ValidationError as e:
            logger.warning("%s", e)
            return False
        current = self.current_input(exercise_id)
        self._inputs[exercise_id] = SetInput(current.weight, reps)
        return True

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def log_set(self, exercise_id: str) -> SetRecord | None:
        """
        Log a set for an exercise in the active session.

        Uses the pending input (or the exercise defaults), numbers the set
        after those already logged for the exercise, starts the rest timer
        at the intensity of this set relative to the session's heaviest,
        and gives a short haptic pulse.

        Returns:
            The new set, or None when no session is active
        """
        # Count and save under one lock so set numbers stay unique.
        with self.repos.store.transaction():
            session = self.active_session
            if session is None:
                logger.debug("log_set(%s) ignored: no active session", exercise_id)
                return None

            entry = self.current_input(exercise_id)
            existing = [
                s for s in self.repos.sets.for_session(session.session_id)
                if s.exercise_id == exercise_id
            ]

            set_record = SetRecord(
                set_id=self.id_factory("set"),
                session_id=session.session_id,
                exercise_id=exercise_id,
                weight=entry.weight,
                reps=entry.reps,
                timestamp=self.clock(),
                set_number=next_set_number(existing, session.session_id, exercise_id),
            )
            self.repos.sets.save(set_record)

        heaviest = max([entry.weight] + [s.weight for s in existing])
        intensity = classify_intensity(entry.weight, heaviest)
        self.rest_timer.start(intensity)
        safe_vibrate(self.feedback, SET_LOGGED_VIBRATION)

        logger.info(
            "Logged %s set %d: %g kg x %d (%s rest)",
            exercise_id, set_record.set_number, entry.weight, entry.reps, intensity,
        )
        return set_record

    # ------------------------------------------------------------------
    # Views of the active session
    # ------------------------------------------------------------------

    def logged_sets(self) -> dict[str, list[SetRecord]]:
        """Sets of the active session grouped by exercise, by set number."""
        if self.session_id is None:
            return {}
        grouped: dict[str, list[SetRecord]] = {}
        for s in self.repos.sets.for_session(self.session_id):
            grouped.setdefault(s.exercise_id, []).append(s)
        for group in grouped.values():
            group.sort(key=lambda s: s.set_number)
        return grouped

    def workout_exercise_ids(self, workout_id: str | None = None) -> list[str]:
        """Exercise ids of a workout (default: the active session's) in order."""
        if workout_id is None:
            session = self.active_session
            if session is None:
                return []
            workout_id = session.workout_id
        return self.repos.workouts.exercise_ids(workout_id)

    def volume(self) -> VolumeInfo:
        """Live volume of the active session against the previous one."""
        snapshot = self.repos.snapshot()
        return session_volume(snapshot.sets, snapshot.sessions, self.session_id)

    def elapsed_ms(self) -> int:
        session = self.active_session
        if session is None:
            return 0
        return max(0, self.clock() - session.start_time)
