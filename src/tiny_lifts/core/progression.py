"""
Progression rules: plateau detection, deload and linear progression.

Implements the logic for deciding, from the last few completed sessions of
an exercise, whether to step back (deload / easier rep scheme) or to add
weight.
"""

from .config import (
    CATEGORY_INCREMENTS_KG,
    DEFAULT_CATEGORY,
    DEFAULT_INCREMENT_KG,
    DEFAULT_TARGET_REPS,
    DEFAULT_TARGET_SETS,
    DELOAD_FACTOR,
    PLATEAU_MIN_HISTORY,
    PLATEAU_WINDOW,
    REP_SCHEME_STEP_DOWN,
)
from .metrics import round_half_up
from .models import Exercise, PlateauResult, SessionSummary


def _fmt_kg(value: float) -> str:
    """Format a weight without a trailing .0 (100.0 -> "100", 102.5 -> "102.5")."""
    return f"{value:g}"


def progression_increment(category: str) -> float:
    """
    Weight to add after a fully completed session.

    Args:
        category: Exercise category ("deadlift", "lower", "upper")

    Returns:
        Increment in kg: 10 for deadlift, 5 for lower body, 2.5 otherwise
    """
    return CATEGORY_INCREMENTS_KG.get(category, DEFAULT_INCREMENT_KG)


def deload_weight(max_weight: float) -> float:
    """
    Suggested deload weight after a plateau.

    round(w × 0.9 × 2) / 2, i.e. 10% off rounded to the nearest 0.5 kg.
    """
    return round_half_up(max_weight * DELOAD_FACTOR * 2) / 2


def stagnant_count(history: list[SessionSummary]) -> int:
    """
    Count how many of the most recent sessions show no improvement.

    With three sessions (newest-first) the count is 3 when both max weight
    and total reps are non-increasing across all three.  Otherwise the two
    newest are compared and the count is 2 when neither went up.  With fewer
    than three sessions nothing is counted.

    Args:
        history: Summaries, newest-first

    Returns:
        0, 2 or 3
    """
    if len(history) < PLATEAU_WINDOW:
        return 0

    weights = [h.max_weight for h in history[:PLATEAU_WINDOW]]
    reps = [h.total_reps for h in history[:PLATEAU_WINDOW]]

    weight_stagnant = weights[0] <= weights[1] <= weights[2]
    reps_stagnant = reps[0] <= reps[1] <= reps[2]
    if weight_stagnant and reps_stagnant:
        return 3
    if weights[0] <= weights[1] and reps[0] <= reps[1]:
        return 2
    return 0


def suggest_rep_scheme(target_sets: int, target_reps: int, deload_kg: float) -> str:
    """Easier rep scheme for a plateaued exercise (5x5 -> 3x5 -> 3x3)."""
    scheme = REP_SCHEME_STEP_DOWN.get((target_sets, target_reps))
    if scheme is not None:
        return scheme
    return f"Deload to {_fmt_kg(deload_kg)} kg"


def detect_plateau(
    history: list[SessionSummary],
    exercise: Exercise | None,
) -> PlateauResult:
    """
    Derive plateau state and the next-session suggestion for an exercise.

    Plateau = three consecutive completed sessions with neither max weight
    nor total reps increasing.  On plateau a deload weight and a rep-scheme
    change are suggested; otherwise the standard linear progression applies:
    add the category increment once every target rep was completed, hold the
    weight until then.

    Args:
        history: Summaries, newest-first (only the first three are used)
        exercise: Exercise configuration, or None if it no longer exists

    Returns:
        PlateauResult (neutral when fewer than two sessions are known)
    """
    history = history[:PLATEAU_WINDOW]
    if len(history) < PLATEAU_MIN_HISTORY:
        return PlateauResult()

    category = exercise.category if exercise else DEFAULT_CATEGORY
    target_reps = exercise.target_reps if exercise else DEFAULT_TARGET_REPS
    target_sets = exercise.target_sets if exercise else DEFAULT_TARGET_SETS

    latest = history[0]
    count = stagnant_count(history)
    is_plateau = count >= PLATEAU_WINDOW

    if is_plateau:
        deload = deload_weight(latest.max_weight)
        return PlateauResult(
            is_plateau=True,
            stagnant_count=count,
            suggested_deload_weight=deload,
            suggested_rep_scheme=suggest_rep_scheme(target_sets, target_reps, deload),
        )

    if latest.total_reps >= target_reps * target_sets:
        increment = progression_increment(category)
        next_weight = latest.max_weight + increment
        message = f"+{_fmt_kg(increment)} kg next session → {_fmt_kg(next_weight)} kg"
        return PlateauResult(
            stagnant_count=count,
            progression_suggestion=message,
            suggested_next_weight=next_weight,
        )

    return PlateauResult(
        stagnant_count=count,
        progression_suggestion=(
            f"Keep at {_fmt_kg(latest.max_weight)} kg until all "
            f"{target_sets}x{target_reps} completed"
        ),
    )
