"""
Conversion between store records and model dataclasses.

Store records are flat field maps keyed by record id; the dataclasses carry
the id as their first field.  Also holds the parsers used to validate raw
numeric input at the boundary.
"""

import math
from typing import Any

from ..core.config import REPS_INPUT_MAX, WEIGHT_MAX_KG
from ..core.models import Exercise, Session, SetRecord, Workout, WorkoutExercise


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


# =============================================================================
# Raw input parsing
# =============================================================================


def parse_weight(raw: str | float) -> float:
    """
    Parse a weight entry in kg.

    Accepts numbers or numeric strings (a trailing "kg" and a comma decimal
    separator are tolerated).  The result is clamped to [0, 9999].

    Args:
        raw: User input

    Returns:
        Weight in kg

    Raises:
        ValidationError: If the entry is not a finite number
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        value = float(raw)
    else:
        text = str(raw).strip().lower().removesuffix("kg").strip().replace(",", ".")
        try:
            value = float(text)
        except ValueError as e:
            raise ValidationError(f"Invalid weight: {raw!r}. Enter a number, e.g. 62.5") from e
    if not math.isfinite(value):
        raise ValidationError(f"Invalid weight: {raw!r}")
    return max(0.0, min(WEIGHT_MAX_KG, value))


def parse_reps(raw: str | int) -> int:
    """
    Parse a reps entry, clamped to [0, 30].

    Raises:
        ValidationError: If the entry is not a whole number
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    else:
        text = str(raw).strip()
        try:
            as_float = float(text)
        except ValueError as e:
            raise ValidationError(f"Invalid reps: {raw!r}. Enter a whole number, e.g. 5") from e
        if not math.isfinite(as_float) or as_float != int(as_float):
            raise ValidationError(f"Invalid reps: {raw!r}. Enter a whole number, e.g. 5")
        value = int(as_float)
    return max(0, min(REPS_INPUT_MAX, value))


def parse_int_in_range(raw: str | int, name: str, low: int, high: int) -> int:
    """
    Parse an integer setting and check it lies within [low, high].

    Raises:
        ValidationError: If not an integer or out of range
    """
    try:
        value = int(str(raw).strip())
    except ValueError as e:
        raise ValidationError(f"{name} must be a whole number, got {raw!r}") from e
    if value < low or value > high:
        raise ValidationError(f"{name} must be between {low} and {high}, got {value}")
    return value


# =============================================================================
# Record <-> model
# =============================================================================


def _build(factory, **kwargs):
    try:
        return factory(**kwargs)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def exercise_to_record(exercise: Exercise) -> dict[str, Any]:
    return {
        "name": exercise.name,
        "category": exercise.category,
        "muscle_group": exercise.muscle_group,
        "target_reps": exercise.target_reps,
        "target_sets": exercise.target_sets,
        "default_weight": exercise.default_weight,
    }


def record_to_exercise(exercise_id: str, data: dict[str, Any]) -> Exercise:
    """
    Convert an exercises-table record to an Exercise.

    Raises:
        ValidationError: If the stored values are invalid
    """
    return _build(
        Exercise,
        exercise_id=exercise_id,
        name=str(data.get("name", "")),
        category=data.get("category", "upper"),
        muscle_group=str(data.get("muscle_group", "")),
        target_reps=int(data.get("target_reps", 5)),
        target_sets=int(data.get("target_sets", 5)),
        default_weight=float(data.get("default_weight", 20.0)),
    )


def workout_to_record(workout: Workout) -> dict[str, Any]:
    return {"name": workout.name, "type": workout.kind}


def record_to_workout(workout_id: str, data: dict[str, Any]) -> Workout:
    return Workout(
        workout_id=workout_id,
        name=str(data.get("name", "")),
        kind=str(data.get("type", "program")),
    )


def link_to_record(link: WorkoutExercise) -> dict[str, Any]:
    return {
        "workout_id": link.workout_id,
        "exercise_id": link.exercise_id,
        "order": link.order,
    }


def record_to_link(link_id: str, data: dict[str, Any]) -> WorkoutExercise:
    return WorkoutExercise(
        link_id=link_id,
        workout_id=str(data.get("workout_id", "")),
        exercise_id=str(data.get("exercise_id", "")),
        order=int(data.get("order", 0)),
    )


def session_to_record(session: Session) -> dict[str, Any]:
    return {
        "workout_id": session.workout_id,
        "start_time": session.start_time,
        "end_time": session.end_time,
        "total_volume": session.total_volume,
        "status": session.status,
    }


def record_to_session(session_id: str, data: dict[str, Any]) -> Session:
    """
    Convert a sessions-table record to a Session.

    Raises:
        ValidationError: If the stored values are invalid
    """
    return _build(
        Session,
        session_id=session_id,
        workout_id=str(data.get("workout_id", "")),
        start_time=int(data.get("start_time", 0)),
        end_time=int(data.get("end_time", 0)),
        total_volume=float(data.get("total_volume", 0)),
        status=data.get("status", "active"),
    )


def set_to_record(set_record: SetRecord) -> dict[str, Any]:
    return {
        "session_id": set_record.session_id,
        "exercise_id": set_record.exercise_id,
        "weight": set_record.weight,
        "reps": set_record.reps,
        "timestamp": set_record.timestamp,
        "set_number": set_record.set_number,
    }


def record_to_set(set_id: str, data: dict[str, Any]) -> SetRecord:
    """
    Convert a sets-table record to a SetRecord.

    Raises:
        ValidationError: If the stored values are invalid
    """
    return _build(
        SetRecord,
        set_id=set_id,
        session_id=str(data.get("session_id", "")),
        exercise_id=str(data.get("exercise_id", "")),
        weight=float(data.get("weight", 0)),
        reps=int(data.get("reps", 0)),
        timestamp=int(data.get("timestamp", 0)),
        set_number=int(data.get("set_number", 1)),
    )
