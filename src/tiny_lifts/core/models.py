"""
Data models for tiny-lifts.

Dataclasses for the stored records (exercises, workouts, sessions, sets)
and for the values derived from them by the analysis functions.
Timestamps are integer epoch milliseconds.
"""

from dataclasses import dataclass, field
from typing import Literal

from .config import (
    DEFAULT_CATEGORY,
    DEFAULT_START_WEIGHT_KG,
    DEFAULT_TARGET_REPS,
    DEFAULT_TARGET_SETS,
    EXERCISE_CATEGORIES,
)

Category = Literal["upper", "lower", "deadlift"]
SessionStatus = Literal["active", "completed"]
Intensity = Literal["light", "moderate", "heavy"]
Phase = Literal["up", "down"]


@dataclass
class Exercise:
    """
    A configured exercise.

    ``category`` picks the progression increment; the target reps and sets
    and the default weight are user-editable settings.
    """

    exercise_id: str
    name: str
    category: Category = DEFAULT_CATEGORY  # type: ignore[assignment]
    muscle_group: str = ""
    target_reps: int = DEFAULT_TARGET_REPS
    target_sets: int = DEFAULT_TARGET_SETS
    default_weight: float = DEFAULT_START_WEIGHT_KG

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if self.category not in EXERCISE_CATEGORIES:
            raise ValueError(
                f"Invalid category: {self.category!r}. "
                f"Must be one of {EXERCISE_CATEGORIES}"
            )
        if self.target_reps <= 0:
            raise ValueError("target_reps must be positive")
        if self.target_sets <= 0:
            raise ValueError("target_sets must be positive")
        if self.default_weight < 0:
            raise ValueError("default_weight must be non-negative")

    @property
    def target_total_reps(self) -> int:
        """Reps needed to complete every target set."""
        return self.target_reps * self.target_sets

    @property
    def scheme(self) -> str:
        return f"{self.target_sets}x{self.target_reps}"


@dataclass
class Workout:
    """A seeded workout; its exercises come from WorkoutExercise links."""

    workout_id: str
    name: str
    kind: str = "program"


@dataclass
class WorkoutExercise:
    """Join record placing an exercise at a position within a workout."""

    link_id: str
    workout_id: str
    exercise_id: str
    order: int = 0


@dataclass
class Session:
    """
    One workout-performing occasion.

    ``total_volume`` is only meaningful once the session is completed;
    while active it is recomputed from the session's sets.
    """

    session_id: str
    workout_id: str
    start_time: int = 0
    end_time: int = 0  # 0 = not ended
    total_volume: float = 0.0
    status: SessionStatus = "active"

    def __post_init__(self) -> None:
        if self.status not in ("active", "completed"):
            raise ValueError(f"Invalid session status: {self.status}")
        if self.start_time < 0 or self.end_time < 0:
            raise ValueError("timestamps must be non-negative")

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @property
    def duration_minutes(self) -> int:
        """Whole minutes between start and end, 0 while not ended."""
        if not self.end_time:
            return 0
        return int((self.end_time - self.start_time) / 60000 + 0.5)


@dataclass
class SetRecord:
    """A single performed set: weight × reps for one exercise in one session."""

    set_id: str
    session_id: str
    exercise_id: str
    weight: float = 0.0
    reps: int = 0
    timestamp: int = 0
    set_number: int = 1

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.set_number < 1:
            raise ValueError("set_number must be 1 or greater")

    @property
    def volume(self) -> float:
        return self.weight * self.reps


@dataclass(frozen=True)
class SetDetail:
    """Per-set detail carried inside a session summary."""

    weight: float
    reps: int
    set_number: int


@dataclass
class SessionSummary:
    """
    One completed session's performance on a single exercise.
    """

    session_id: str
    max_weight: float
    total_reps: int
    total_volume: float
    date: int  # session start time
    sets: list[SetDetail] = field(default_factory=list)


@dataclass
class PlateauResult:
    """
    Outcome of the plateau / progression analysis.

    Either the plateau fields (deload weight, rep scheme) or the progression
    fields (message, next weight) are populated, never both.
    """

    is_plateau: bool = False
    stagnant_count: int = 0
    suggested_deload_weight: float | None = None
    suggested_rep_scheme: str | None = None
    progression_suggestion: str | None = None
    suggested_next_weight: float | None = None


@dataclass
class VolumeInfo:
    """Volume of a session compared with the previous one of the same workout."""

    current_volume: float = 0.0
    previous_volume: float = 0.0
    volume_delta: float = 0.0
    percent_change: int = 0


@dataclass
class SessionOverview:
    """A row of the completed-session history list."""

    session_id: str
    workout_name: str
    date: int
    total_volume: float
    duration_minutes: int
    exercise_count: int


@dataclass
class CalendarDay:
    """One cell of the monthly activity calendar (day=0 for padding)."""

    day: int
    has_workout: bool = False
    is_today: bool = False
    is_current_month: bool = False


@dataclass
class MonthActivity:
    """Sunday-first calendar grid for one month."""

    year: int
    month: int
    weeks: list[list[CalendarDay]] = field(default_factory=list)
    total_workouts: int = 0
