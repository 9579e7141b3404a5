"""
Typed repositories over the record store.

One repository per entity, each exposing the queries the application
needs, plus ``Repositories.snapshot()`` for consistent read-only views
used by the analysis functions.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..core.models import Exercise, Session, SetRecord, Workout, WorkoutExercise
from .record_store import RecordStore, get_default_store_path
from .serializers import (
    exercise_to_record,
    link_to_record,
    record_to_exercise,
    record_to_link,
    record_to_session,
    record_to_set,
    record_to_workout,
    session_to_record,
    set_to_record,
    workout_to_record,
)

logger = logging.getLogger(__name__)


class ExerciseRepository:
    def __init__(self, store: RecordStore):
        self.store = store

    def get(self, exercise_id: str) -> Exercise | None:
        data = self.store.get_record("exercises", exercise_id)
        return record_to_exercise(exercise_id, data) if data is not None else None

    def all(self) -> list[Exercise]:
        """All exercises in insertion order."""
        return [record_to_exercise(k, v) for k, v in self.store.get_all("exercises").items()]

    def save(self, exercise: Exercise) -> None:
        self.store.create_or_replace_record(
            "exercises", exercise.exercise_id, exercise_to_record(exercise)
        )

    def update_settings(
        self,
        exercise_id: str,
        default_weight: float | None = None,
        target_reps: int | None = None,
        target_sets: int | None = None,
    ) -> Exercise:
        """
        Edit the user-configurable defaults of an exercise.

        Raises:
            ValueError: If the exercise does not exist or a value is invalid
        """
        current = self.get(exercise_id)
        if current is None:
            raise ValueError(f"Unknown exercise '{exercise_id}'")
        updated = Exercise(
            exercise_id=current.exercise_id,
            name=current.name,
            category=current.category,
            muscle_group=current.muscle_group,
            target_reps=current.target_reps if target_reps is None else target_reps,
            target_sets=current.target_sets if target_sets is None else target_sets,
            default_weight=current.default_weight if default_weight is None else default_weight,
        )
        self.save(updated)
        logger.info("Updated settings for %s", exercise_id)
        return updated


class WorkoutRepository:
    def __init__(self, store: RecordStore):
        self.store = store

    def get(self, workout_id: str) -> Workout | None:
        data = self.store.get_record("workouts", workout_id)
        return record_to_workout(workout_id, data) if data is not None else None

    def all(self) -> list[Workout]:
        return [record_to_workout(k, v) for k, v in self.store.get_all("workouts").items()]

    def save(self, workout: Workout) -> None:
        self.store.create_or_replace_record(
            "workouts", workout.workout_id, workout_to_record(workout)
        )

    def add_exercise(self, link: WorkoutExercise) -> None:
        self.store.create_or_replace_record(
            "workout_exercises", link.link_id, link_to_record(link)
        )

    def links(self) -> list[WorkoutExercise]:
        return [
            record_to_link(k, v)
            for k, v in self.store.get_all("workout_exercises").items()
        ]

    def exercise_ids(self, workout_id: str) -> list[str]:
        """Exercise ids of a workout by ``order`` (ties keep insertion order)."""
        return ordered_exercise_ids(self.links(), workout_id)


class SessionRepository:
    def __init__(self, store: RecordStore):
        self.store = store

    def get(self, session_id: str) -> Session | None:
        data = self.store.get_record("sessions", session_id)
        return record_to_session(session_id, data) if data is not None else None

    def all(self) -> dict[str, Session]:
        return {k: record_to_session(k, v) for k, v in self.store.get_all("sessions").items()}

    def active(self) -> Session | None:
        """The most recently started active session, if any."""
        active = [s for s in self.all().values() if s.status == "active"]
        return max(active, key=lambda s: s.start_time, default=None)

    def completed(self) -> list[Session]:
        """Completed sessions, newest-first."""
        done = [s for s in self.all().values() if s.is_completed]
        return sorted(done, key=lambda s: s.start_time, reverse=True)

    def save(self, session: Session) -> None:
        self.store.create_or_replace_record(
            "sessions", session.session_id, session_to_record(session)
        )

    def mark_completed(self, session_id: str, end_time: int, total_volume: float) -> None:
        with self.store.transaction():
            self.store.set_field("sessions", session_id, "end_time", end_time)
            self.store.set_field("sessions", session_id, "total_volume", total_volume)
            self.store.set_field("sessions", session_id, "status", "completed")

    def delete(self, session_id: str) -> None:
        self.store.delete_record("sessions", session_id)


class SetRepository:
    def __init__(self, store: RecordStore):
        self.store = store

    def all(self) -> list[SetRecord]:
        return [record_to_set(k, v) for k, v in self.store.get_all("sets").items()]

    def for_session(self, session_id: str) -> list[SetRecord]:
        return [s for s in self.all() if s.session_id == session_id]

    def save(self, set_record: SetRecord) -> None:
        self.store.create_or_replace_record("sets", set_record.set_id, set_to_record(set_record))

    def delete_for_session(self, session_id: str) -> int:
        """Delete every set of a session; returns how many were removed."""
        doomed = [s.set_id for s in self.for_session(session_id)]
        with self.store.transaction():
            for set_id in doomed:
                self.store.delete_record("sets", set_id)
        return len(doomed)


@dataclass
class TrainingSnapshot:
    """Read-only view of every table taken at one instant."""

    exercises: dict[str, Exercise] = field(default_factory=dict)
    workouts: dict[str, Workout] = field(default_factory=dict)
    links: list[WorkoutExercise] = field(default_factory=list)
    sessions: dict[str, Session] = field(default_factory=dict)
    sets: list[SetRecord] = field(default_factory=list)

    def exercise_ids(self, workout_id: str) -> list[str]:
        return ordered_exercise_ids(self.links, workout_id)


def ordered_exercise_ids(links: list[WorkoutExercise], workout_id: str) -> list[str]:
    """Exercise ids linked to a workout, sorted by order (stable)."""
    mine = [link for link in links if link.workout_id == workout_id]
    mine.sort(key=lambda link: link.order)
    return [link.exercise_id for link in mine]


class Repositories:
    """Bundle of the four repositories sharing one record store."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.exercises = ExerciseRepository(store)
        self.workouts = WorkoutRepository(store)
        self.sessions = SessionRepository(store)
        self.sets = SetRepository(store)

    def snapshot(self) -> TrainingSnapshot:
        """Take a consistent copy of all tables and convert it to models."""
        tables = self.store.snapshot()
        return TrainingSnapshot(
            exercises={k: record_to_exercise(k, v) for k, v in tables["exercises"].items()},
            workouts={k: record_to_workout(k, v) for k, v in tables["workouts"].items()},
            links=[record_to_link(k, v) for k, v in tables["workout_exercises"].items()],
            sessions={k: record_to_session(k, v) for k, v in tables["sessions"].items()},
            sets=[record_to_set(k, v) for k, v in tables["sets"].items()],
        )


def open_repositories(path: str | Path | None = None) -> Repositories:
    """
    Open the store at ``path`` (default location when None).

    Args:
        path: Store file path

    Returns:
        Repositories over the loaded store
    """
    if path is None:
        path = get_default_store_path()
    return Repositories(RecordStore(path))
