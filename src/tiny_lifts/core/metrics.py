"""
Pure metric computation functions.

All functions are pure and typed for testability.
"""

import math
from typing import Iterable

from .models import SetRecord


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with ties going towards +infinity.

    Unlike ``round``, ``round_half_up(2.5) == 3``.

    Args:
        value: Value to round

    Returns:
        Nearest integer, .5 rounding up
    """
    return math.floor(value + 0.5)


def set_volume(weight: float, reps: int) -> float:
    """Training volume of one set (weight × reps)."""
    return weight * reps


def total_volume(sets: Iterable[SetRecord]) -> float:
    """
    Calculate total volume Σ weight × reps.

    Args:
        sets: Sets to sum

    Returns:
        Total volume in kg·reps
    """
    return sum(set_volume(s.weight, s.reps) for s in sets)


def total_reps(sets: Iterable[SetRecord]) -> int:
    """Sum of reps over all sets."""
    return sum(s.reps for s in sets)


def max_weight(sets: Iterable[SetRecord]) -> float:
    """Heaviest weight among the sets, 0 when there are none."""
    return max((s.weight for s in sets), default=0.0)


def session_sets(sets: Iterable[SetRecord], session_id: str) -> list[SetRecord]:
    """Return the sets belonging to one session."""
    return [s for s in sets if s.session_id == session_id]


def next_set_number(sets: Iterable[SetRecord], session_id: str, exercise_id: str) -> int:
    """
    Next 1-based set number for a (session, exercise) pair.

    Equals the number of sets already logged for the pair plus one.
    """
    existing = sum(
        1 for s in sets if s.session_id == session_id and s.exercise_id == exercise_id
    )
    return existing + 1
